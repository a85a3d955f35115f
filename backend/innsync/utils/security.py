"""
Input sanitization, injection heuristics, masking and rate limiting
"""
import re
import threading
import time
from collections import deque
from typing import Any, Deque, Dict, List, Optional

SENSITIVE_FIELDS = (
    "password", "token", "secret", "key", "auth",
    "id_number", "identification_number", "passport",
    "credit_card", "bank_account", "ssn", "social_security",
)

XSS_PATTERNS = [
    re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"<iframe", re.IGNORECASE),
    re.compile(r"<object", re.IGNORECASE),
    re.compile(r"<embed", re.IGNORECASE),
    re.compile(r"eval\s*\(", re.IGNORECASE),
    re.compile(r"expression\s*\(", re.IGNORECASE),
]

SQL_INJECTION_PATTERNS = [
    re.compile(r"\b(ALTER|CREATE|DELETE|DROP|EXEC(UTE)?|INSERT( +INTO)?|MERGE|SELECT|UPDATE|UNION( +ALL)?)\b",
               re.IGNORECASE),
    re.compile(r"(;|\||&|'|\"|-{2}|/\*|\*/)"),
    re.compile(r"\b(AND|OR)\b.*(=|>|<|\bLIKE\b)", re.IGNORECASE),
    re.compile(r"\b(CAST|CONVERT|ASCII|CHAR|NCHAR|NVARCHAR|VARCHAR)\b", re.IGNORECASE),
]

ALLOWED_UPLOAD_TYPES = ("jpg", "jpeg", "png", "gif", "pdf", "doc", "docx")


# ============== Sanitizers ==============

def sanitize_html(value: str) -> str:
    if not isinstance(value, str):
        return ""
    value = re.sub(r"[<>]", "", value)
    value = re.sub(r"javascript:", "", value, flags=re.IGNORECASE)
    value = re.sub(r"on\w+\s*=", "", value, flags=re.IGNORECASE)
    return value.strip()


def sanitize_query(value: str) -> str:
    if not isinstance(value, str):
        return ""
    value = re.sub(r"['\";\\]", "", value)
    for token in ("--", "/*", "*/"):
        value = value.replace(token, "")
    return value.strip()


def sanitize_phone(value: str) -> str:
    if not isinstance(value, str):
        return ""
    cleaned = re.sub(r"[^\d+]", "", value)
    if cleaned.startswith("0"):
        return "+62" + cleaned[1:]
    if cleaned.startswith("62"):
        return "+" + cleaned
    if not cleaned.startswith("+62"):
        return "+62" + cleaned
    return cleaned


def sanitize_email(value: str) -> str:
    if not isinstance(value, str):
        return ""
    return re.sub(r"[^a-z0-9@.\-_]", "", value.lower().strip())


def sanitize_text(value: str, max_length: int = 500) -> str:
    if not isinstance(value, str):
        return ""
    value = re.sub(r"[<>]", "", value)
    value = re.sub(r"[\r\n]", " ", value)
    return value.strip()[:max_length]


# ============== Checks ==============

def has_xss(value: str) -> bool:
    return isinstance(value, str) and any(p.search(value) for p in XSS_PATTERNS)


def has_sql_injection(value: str) -> bool:
    return isinstance(value, str) and any(p.search(value) for p in SQL_INJECTION_PATTERNS)


def is_valid_file_type(file_name: str, allowed_types=ALLOWED_UPLOAD_TYPES) -> bool:
    if not file_name or "." not in file_name:
        return False
    return file_name.rsplit(".", 1)[-1].lower() in allowed_types


def is_sensitive_key(key: str) -> bool:
    lower = str(key).lower()
    return any(field in lower for field in SENSITIVE_FIELDS)


def mask_value(value: Any) -> str:
    """Keep the first and last two characters of longer strings"""
    if isinstance(value, str) and len(value) > 4:
        return value[:2] + "*" * (len(value) - 4) + value[-2:]
    return "***"


def mask_sensitive_data(data: Any) -> Any:
    """Return a copy of `data` with sensitive keys masked, recursing into dicts and lists"""
    if isinstance(data, list):
        return [mask_sensitive_data(item) for item in data]
    if not isinstance(data, dict):
        return data

    masked = {}
    for key, value in data.items():
        if is_sensitive_key(key):
            masked[key] = mask_value(value)
        elif isinstance(value, (dict, list)):
            masked[key] = mask_sensitive_data(value)
        else:
            masked[key] = value
    return masked


def check_password_strength(password: str) -> Dict[str, Any]:
    """Score 0-5 with Indonesian feedback; strong means score >= 4"""
    feedback: List[str] = []
    score = 0

    if len(password) >= 8:
        score += 1
    else:
        feedback.append("Password minimal 8 karakter")
    if re.search(r"[a-z]", password):
        score += 1
    else:
        feedback.append("Tambahkan huruf kecil")
    if re.search(r"[A-Z]", password):
        score += 1
    else:
        feedback.append("Tambahkan huruf besar")
    if re.search(r"\d", password):
        score += 1
    else:
        feedback.append("Tambahkan angka")
    if re.search(r"[^A-Za-z0-9]", password):
        score += 1
    else:
        feedback.append("Tambahkan karakter khusus")

    return {"score": score, "feedback": feedback, "is_strong": score >= 4}


# ============== Rate limiting ==============

class RateLimiter:
    """Sliding-window attempt counter keyed by action"""

    def __init__(self, max_attempts: int = 5, window_seconds: float = 60.0, clock=time.monotonic):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self._clock = clock
        self._attempts: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()

    def check(self, action: str) -> bool:
        """Record an attempt; False when the window is already full"""
        now = self._clock()
        with self._lock:
            attempts = self._attempts.setdefault(action, deque())
            while attempts and now - attempts[0] >= self.window_seconds:
                attempts.popleft()
            if len(attempts) >= self.max_attempts:
                return False
            attempts.append(now)
            return True

    def reset(self, action: Optional[str] = None) -> None:
        with self._lock:
            if action is None:
                self._attempts.clear()
            else:
                self._attempts.pop(action, None)
