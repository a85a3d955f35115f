"""
Date and time helpers for Indonesian hotels

All business dates ("today", "this month") are taken in the property
clock, WIB by default.
"""
from datetime import datetime, date, time, timedelta, timezone
from typing import Optional, Union
from innsync.config import settings

WIB = timezone(timedelta(hours=7), "WIB")      # Jakarta, Bandung, Medan
WITA = timezone(timedelta(hours=8), "WITA")    # Denpasar, Makassar
WIT = timezone(timedelta(hours=9), "WIT")      # Jayapura

TIME_ZONES = {"WIB": WIB, "WITA": WITA, "WIT": WIT}

BUSINESS_HOURS = {
    "CHECK_IN": time(14, 0),
    "CHECK_OUT": time(12, 0),
    "FRONT_DESK_START": time(6, 0),
    "FRONT_DESK_END": time(23, 0),
}

DateLike = Union[date, datetime, str]


def business_tz() -> timezone:
    """Configured property time zone"""
    if settings.TIMEZONE_OFFSET_HOURS == 7:
        return WIB
    return timezone(timedelta(hours=settings.TIMEZONE_OFFSET_HOURS))


def now_wib() -> datetime:
    return datetime.now(business_tz())


def today_wib() -> date:
    return now_wib().date()


def to_local(value: datetime) -> datetime:
    """Convert a stored datetime (naive values are UTC) to the property clock"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(business_tz())


def local_date(value: Optional[DateLike]) -> Optional[date]:
    """Business date of a date, datetime or ISO string"""
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value) if "T" in value or " " in value else date.fromisoformat(value)
    if isinstance(value, datetime):
        return to_local(value).date()
    return value


def month_bounds(day: date):
    """First day of the month and first day of the next month"""
    start = day.replace(day=1)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def shift_month(day: date, months: int) -> date:
    """First day of the month `months` away from `day`"""
    index = day.year * 12 + day.month - 1 + months
    return date(index // 12, index % 12 + 1, 1)


def _as_datetime(value: DateLike) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if isinstance(value, datetime):
        return to_local(value) if value.tzinfo else value
    return datetime.combine(value, time())


def format_date(value: DateLike, pattern: str = "%d/%m/%Y") -> str:
    return _as_datetime(value).strftime(pattern)


def format_date_short(value: DateLike) -> str:
    return format_date(value, "%d/%m")


def format_date_time(value: DateLike) -> str:
    return format_date(value, "%d/%m/%Y %H:%M")


def format_time(value: DateLike) -> str:
    return format_date(value, "%H:%M")


MONTH_NAMES_SHORT = ["Jan", "Feb", "Mar", "Apr", "Mei", "Jun", "Jul", "Agu", "Sep", "Okt", "Nov", "Des"]


def format_check_in_out(check_in: DateLike, check_out: DateLike) -> str:
    """e.g. '05 Mar - 08 Mar 2024'"""
    start = _as_datetime(check_in)
    end = _as_datetime(check_out)
    return (
        f"{start.day:02d} {MONTH_NAMES_SHORT[start.month - 1]} - "
        f"{end.day:02d} {MONTH_NAMES_SHORT[end.month - 1]} {end.year}"
    )


def format_relative_time(value: DateLike, now: Optional[datetime] = None) -> str:
    """Indonesian relative label: 'Hari ini 14:00', 'Besok ...', '3 hari lalu'"""
    moment = _as_datetime(value)
    now = now or now_wib().replace(tzinfo=None)
    days = (moment.date() - now.date()).days

    if days == 0:
        return f"Hari ini {format_time(moment)}"
    if days == 1:
        return f"Besok {format_time(moment)}"
    if days == -1:
        return f"Kemarin {format_time(moment)}"
    if days > 0:
        return f"dalam {days} hari"
    return f"{-days} hari lalu"
