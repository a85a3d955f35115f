"""
Indonesian identity/phone validation and reservation business rules

Validation messages are user facing and therefore in Indonesian.
"""
import re
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Tuple

MOBILE_PHONE_RE = re.compile(r"^(\+62|62|0)(8[1-9])\d{6,10}$")
LANDLINE_PHONE_RE = re.compile(r"^(\+62|62|0)(2[1-9]|6[1-9])\d{6,8}$")
PASSPORT_RE = re.compile(r"^[A-Z]\d{7}$|^[A-Z]{2}\d{6}$")

MAX_STAY_NIGHTS = 30

ValidationResult = Tuple[bool, Optional[str]]


# ============== Identity documents ==============

def validate_ktp(ktp: str) -> bool:
    """
    Check a KTP (NIK) number

    16 digits; province code 11-94; regency and district codes non-zero.
    Separators such as dots and spaces are ignored.
    """
    cleaned = re.sub(r"\D", "", ktp or "")
    if len(cleaned) != 16:
        return False

    province = int(cleaned[0:2])
    if province < 11 or province > 94:
        return False

    if cleaned[2:4] == "00" or cleaned[4:6] == "00":
        return False

    return True


def format_ktp(ktp: str) -> str:
    """3201011234560001 -> 32.01.01.123456.0001"""
    cleaned = re.sub(r"\D", "", ktp or "")
    if len(cleaned) != 16:
        return ktp
    return f"{cleaned[0:2]}.{cleaned[2:4]}.{cleaned[4:6]}.{cleaned[6:12]}.{cleaned[12:16]}"


def validate_indonesian_id(id_number: str, id_type: str) -> bool:
    """Shape check for ktp / passport / sim numbers"""
    if not id_number:
        return False
    kind = (id_type or "").lower()
    if kind == "ktp":
        return re.fullmatch(r"\d{16}", id_number) is not None
    if kind == "passport":
        return PASSPORT_RE.match(id_number) is not None
    if kind == "sim":
        return re.fullmatch(r"\d{12}", id_number) is not None
    return False


# ============== Phone numbers ==============

def _clean_phone(phone: str) -> str:
    return re.sub(r"[^\d+]", "", re.sub(r"\s+", "", phone or ""))


def validate_indonesian_mobile(phone: str) -> bool:
    return MOBILE_PHONE_RE.match(_clean_phone(phone)) is not None


def validate_indonesian_phone(phone: str) -> bool:
    """Accept +62 / 62 / 0 prefixed mobile or landline numbers"""
    cleaned = _clean_phone(phone)
    return bool(MOBILE_PHONE_RE.match(cleaned) or LANDLINE_PHONE_RE.match(cleaned))


def format_indonesian_phone(phone: str) -> str:
    """Normalize to +62 international form"""
    cleaned = re.sub(r"\D", "", phone or "")
    if cleaned.startswith("62"):
        return f"+{cleaned}"
    if cleaned.startswith("0"):
        return f"+62{cleaned[1:]}"
    return f"+62{cleaned}"


# ============== Business rules ==============

def _field(obj: Any, name: str):
    return obj.get(name) if isinstance(obj, dict) else getattr(obj, name, None)


def _status_value(value) -> Optional[str]:
    return getattr(value, "value", value)


def _as_date(value) -> date:
    return value if isinstance(value, date) else date.fromisoformat(str(value))


def is_room_available(reservations: Iterable[Any], room_id: int, check_in, check_out,
                      exclude_reservation_id: Optional[int] = None) -> Dict[str, Any]:
    """
    Find reservations that block a room for [check_in, check_out)

    Cancelled reservations never block. Two stays overlap when one starts
    before the other ends; a check-out day may be another guest's check-in day.
    """
    start = _as_date(check_in)
    end = _as_date(check_out)

    conflicts = []
    for reservation in reservations:
        if exclude_reservation_id is not None and _field(reservation, "id") == exclude_reservation_id:
            continue
        if _field(reservation, "room_id") != room_id:
            continue
        if _status_value(_field(reservation, "status")) == "cancelled":
            continue
        other_in = _as_date(_field(reservation, "check_in_date"))
        other_out = _as_date(_field(reservation, "check_out_date"))
        if start < other_out and end > other_in:
            conflicts.append(reservation)

    return {"available": not conflicts, "conflicting_reservations": conflicts}


def validate_guest_capacity(adults: int, children: int, max_occupancy: int) -> ValidationResult:
    total_guests = (adults or 0) + (children or 0)
    if total_guests > max_occupancy:
        return False, f"Jumlah tamu ({total_guests}) melebihi kapasitas kamar ({max_occupancy})"
    return True, None


def validate_payment_amount(amount, reservation_total, existing_payments=0) -> ValidationResult:
    amount = Decimal(str(amount))
    remaining = Decimal(str(reservation_total)) - Decimal(str(existing_payments or 0))

    if amount <= 0:
        return False, "Jumlah pembayaran harus lebih dari 0"
    if amount > remaining:
        return False, f"Jumlah pembayaran ({amount}) melebihi sisa tagihan ({remaining})"
    return True, None


def validate_reservation_dates(check_in, check_out, today: Optional[date] = None) -> ValidationResult:
    start = _as_date(check_in)
    end = _as_date(check_out)
    if today is None:
        from innsync.utils.dates import today_wib
        today = today_wib()

    if start < today:
        return False, "Tanggal check-in tidak boleh di masa lalu"
    if end <= start:
        return False, "Tanggal check-out harus setelah tanggal check-in"

    nights = (end - start).days
    if nights < 1:
        return False, "Minimal menginap 1 hari"
    if nights > MAX_STAY_NIGHTS:
        return False, f"Maksimal menginap {MAX_STAY_NIGHTS} hari"
    return True, None


def validate_guest_identity(identification_type: Optional[str], identification_number: Optional[str],
                            phone: Optional[str]) -> ValidationResult:
    """Guest form checks shared by create and update"""
    if identification_number:
        kind = (identification_type or "").lower()
        if kind == "ktp" and not validate_ktp(identification_number):
            return False, "Nomor KTP tidak valid"
        if kind in ("passport", "sim") and not validate_indonesian_id(identification_number, kind):
            return False, f"Nomor {identification_type} tidak valid"
    if phone and not validate_indonesian_phone(phone):
        return False, "Nomor telepon tidak valid"
    return True, None
