"""
Room analytics - inventory mix, readiness, occupancy and rate suggestions
"""
import re
from collections import Counter
from datetime import date
from typing import Any, Iterable, Optional
from innsync.analytics import value, enum_value, as_date, percentage
from innsync.utils.dates import today_wib

IN_HOUSE_STATUSES = ("confirmed", "checked_in")


def _in_house_today(reservations: Iterable[Any], today: date) -> list:
    return [
        r for r in reservations
        if enum_value(r, "status") in IN_HOUSE_STATUSES
        and as_date(r, "check_in_date") <= today < as_date(r, "check_out_date")
    ]


def calculate_room_analytics(rooms: Iterable[Any], reservations: Optional[Iterable[Any]] = None,
                             today: Optional[date] = None) -> dict:
    rooms = list(rooms)
    today = today or today_wib()
    total = len(rooms)
    active = [r for r in rooms if value(r, "is_active", True)]
    statuses = Counter(enum_value(r, "status") for r in rooms)

    rates = [float(value(r, "base_rate", 0)) for r in rooms]
    revenue_potential = sum(float(value(r, "base_rate", 0)) for r in active)
    average_rate = sum(rates) / total if total else 0.0

    current = _in_house_today(reservations, today) if reservations is not None else []
    ready = statuses["clean"] + statuses["inspected"]

    types = Counter(value(r, "room_type", "Unknown") for r in rooms)
    type_distribution = [
        {"type": t, "count": n, "percentage": round(percentage(n, total), 1)}
        for t, n in sorted(types.items(), key=lambda item: -item[1])
    ]

    floors = {}
    for r in rooms:
        stats = floors.setdefault(value(r, "floor", 0), {"count": 0, "total_rate": 0.0})
        stats["count"] += 1
        stats["total_rate"] += float(value(r, "base_rate", 0))
    floor_distribution = [
        {"floor": f, "count": s["count"], "avg_rate": round(s["total_rate"] / s["count"], 2)}
        for f, s in sorted(floors.items())
    ]

    amenities = Counter(a for r in rooms for a in (value(r, "amenities", []) or []))
    amenity_popularity = [
        {"amenity": a, "count": n, "percentage": round(percentage(n, total), 1)}
        for a, n in amenities.most_common()
    ]

    capacity = sum(value(r, "capacity", 0) for r in rooms)
    guests = sum(value(r, "adults", 1) + value(r, "children", 0) for r in current)

    return {
        "total_rooms": total,
        "active_rooms": len(active),
        "inactive_rooms": total - len(active),
        "clean_rooms": statuses["clean"],
        "dirty_rooms": statuses["dirty"],
        "inspected_rooms": statuses["inspected"],
        "out_of_order_rooms": statuses["out_of_order"],
        "average_base_rate": round(average_rate, 2),
        "total_revenue_potential": revenue_potential,
        "occupancy_rate": round(percentage(len(current), len(active)), 1),
        "housekeeping_efficiency": round(percentage(ready, len(active)), 1),
        "room_type_distribution": type_distribution,
        "floor_distribution": floor_distribution,
        "amenity_popularity": amenity_popularity,
        "utilization_rate": round(percentage(guests, capacity), 1) if reservations is not None else 0.0,
    }


def calculate_room_utilization(rooms: Iterable[Any]) -> dict:
    capacities = [value(r, "capacity", 0) for r in rooms]
    positive = [c for c in capacities if c > 0]
    return {
        "total_capacity": sum(capacities),
        "average_capacity": round(sum(capacities) / len(capacities), 1) if capacities else 0.0,
        "largest_room": max(positive) if positive else 0,
        "smallest_room": min(positive) if positive else 0,
    }


def format_room_number(room_number: str) -> str:
    """'7' -> '007'; non-numeric numbers are left alone"""
    if re.fullmatch(r"\d+", room_number):
        return room_number.zfill(3)
    return room_number


def optimal_room_rate(base_rate: float, seasonal_factor: float = 1.0, amenity_count: int = 0,
                      capacity: int = 2) -> int:
    """Suggested nightly rate: +5% per amenity, scaled to a 2-guest standard room"""
    return round(float(base_rate) * seasonal_factor * (1 + 0.05 * amenity_count) * ((capacity or 2) / 2))


def room_optimal_rate(room: Any, seasonal_factor: float = 1.0) -> int:
    return optimal_room_rate(
        value(room, "base_rate", 0),
        seasonal_factor,
        len(value(room, "amenities", []) or []),
        value(room, "capacity", 2),
    )
