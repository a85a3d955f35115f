"""
Guest analytics - origin mix, VIPs, registrations and growth
"""
from collections import Counter
from datetime import date, timedelta
from typing import Any, Iterable, Optional
from innsync.analytics import value, as_date, percentage
from innsync.utils.dates import today_wib, month_bounds, shift_month, MONTH_NAMES_SHORT


def is_local(guest: Any) -> bool:
    """KTP holder or Indonesian national, whatever the stored casing"""
    id_type = (value(guest, "identification_type") or "").strip().upper()
    nationality = (value(guest, "nationality") or "").strip().lower()
    return id_type == "KTP" or nationality == "indonesia"


def is_vip(guest: Any) -> bool:
    """Flagged VIP in the notes or in the stored preferences"""
    notes = value(guest, "notes", "") or ""
    if "vip" in notes.lower():
        return True
    preferences = value(guest, "preferences", {}) or {}
    return "vip" in str(preferences).lower()


def _in_month(day: Optional[date], month_start: date) -> bool:
    if day is None:
        return False
    start, end = month_bounds(month_start)
    return start <= day < end


def calculate_guest_analytics(guests: Iterable[Any], today: Optional[date] = None) -> dict:
    guests = list(guests)
    today = today or today_wib()
    this_month = today.replace(day=1)
    last_month = shift_month(today, -1)
    week_ago = today - timedelta(days=7)

    total = len(guests)
    created = [as_date(g, "created_at") for g in guests]
    local = sum(1 for g in guests if is_local(g))
    foreign = total - local
    vip = sum(1 for g in guests if is_vip(g))

    new_this_month = sum(1 for d in created if _in_month(d, this_month))
    new_last_month = sum(1 for d in created if _in_month(d, last_month))
    new_this_week = sum(1 for d in created if d is not None and d >= week_ago)

    if new_last_month > 0:
        growth_rate = (new_this_month - new_last_month) / new_last_month * 100
    else:
        growth_rate = 100.0 if new_this_month > 0 else 0.0

    cities = Counter(value(g, "city") for g in guests if value(g, "city"))
    countries = Counter(value(g, "country") or value(g, "nationality") or "Unknown" for g in guests)

    registration_trend = []
    for offset in range(11, -1, -1):
        month = shift_month(today, -offset)
        registration_trend.append({
            "date": f"{MONTH_NAMES_SHORT[month.month - 1]} {month.year}",
            "count": sum(1 for d in created if _in_month(d, month)),
        })

    dated = [d for d in created if d is not None]
    months_of_data = max(1, -(-(today - min(dated)).days // 30)) if dated else 1

    return {
        "total_guests": total,
        "local_guests": local,
        "foreign_guests": foreign,
        "vip_guests": vip,
        "new_guests_this_month": new_this_month,
        "new_guests_this_week": new_this_week,
        "guest_growth_rate": round(growth_rate, 1),
        "top_cities": [{"city": c, "count": n} for c, n in cities.most_common(5)],
        "top_countries": [{"country": c, "count": n} for c, n in countries.most_common(5)],
        "registration_trend": registration_trend,
        "guest_type_distribution": [
            {"type": "Lokal", "count": local, "percentage": round(percentage(local, total), 1)},
            {"type": "Asing", "count": foreign, "percentage": round(percentage(foreign, total), 1)},
            {"type": "VIP", "count": vip, "percentage": round(percentage(vip, total), 1)},
        ],
        "average_guests_per_month": round(total / months_of_data, 1),
    }


def format_growth_rate(rate: float) -> str:
    if rate > 0:
        return f"+{abs(rate):.1f}%"
    if rate < 0:
        return f"-{abs(rate):.1f}%"
    return "0%"
