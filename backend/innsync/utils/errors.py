"""
Error classification used by the application-wide exception handler
"""
from sqlalchemy.exc import OperationalError

NETWORK = "network"
CHUNK_LOAD = "chunk_load"
UNKNOWN = "unknown"

RETRYABLE_ERRORS = {NETWORK, CHUNK_LOAD}

ERROR_MESSAGES = {
    NETWORK: "Koneksi ke server bermasalah. Silakan coba lagi.",
    CHUNK_LOAD: "Gagal memuat sebagian aplikasi. Silakan muat ulang.",
    UNKNOWN: "Terjadi kesalahan yang tidak terduga.",
}


def classify_error(error) -> str:
    """Bucket an exception (or message) as network, chunk_load or unknown"""
    if isinstance(error, (OperationalError, ConnectionError, TimeoutError)):
        return NETWORK

    message = str(error)
    lowered = message.lower()
    if "fetch" in lowered or "network" in lowered:
        return NETWORK
    if "Loading chunk" in message or "ChunkLoadError" in message:
        return CHUNK_LOAD
    return UNKNOWN


def is_retryable(kind: str) -> bool:
    return kind in RETRYABLE_ERRORS
