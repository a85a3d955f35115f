"""
Analytics - pure functions over ORM rows or plain dicts
"""
from datetime import date
from typing import Any, Optional
from innsync.utils.dates import local_date


def value(obj: Any, name: str, default=None):
    """Read a field from an ORM row or a dict"""
    if isinstance(obj, dict):
        result = obj.get(name, default)
    else:
        result = getattr(obj, name, default)
    return default if result is None else result


def enum_value(obj: Any, name: str) -> Optional[str]:
    raw = value(obj, name)
    return getattr(raw, "value", raw)


def as_date(obj: Any, name: str) -> Optional[date]:
    return local_date(value(obj, name))


def percentage(part: float, whole: float) -> float:
    return part / whole * 100 if whole > 0 else 0.0
