"""
Restaurant analytics - sales summary, revenue periods and item performance

Functions take RestaurantOrder rows; cancelled orders are ignored.
"""
from collections import Counter
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Iterable, List, Optional
from innsync.analytics import value, enum_value
from innsync.models.hotel import money
from innsync.utils.dates import to_local

PERIODS = ("day", "week", "month")


def _billable(orders: Iterable[Any]) -> list:
    return [o for o in orders if enum_value(o, "status") != "cancelled"]


def _lines(order: Any) -> list:
    return list(value(order, "items", []) or [])


def calculate_restaurant_analytics(orders: Iterable[Any], bills: Iterable[Any] = ()) -> dict:
    """Summary over a set of orders plus the currently outstanding bills"""
    orders = _billable(orders)
    total_revenue = sum((money(value(o, "total_amount", 0)) for o in orders), Decimal("0"))
    total_orders = len(orders)

    items = {}
    for order in orders:
        for line in _lines(order):
            stats = items.setdefault(line.item_id, {
                "item_id": line.item_id,
                "item_name": line.item.name if line.item else "",
                "quantity_sold": 0,
                "revenue": Decimal("0"),
            })
            stats["quantity_sold"] += line.quantity or 0
            stats["revenue"] += money(line.unit_price) * (line.quantity or 0)
    popular = sorted(items.values(), key=lambda s: -s["quantity_sold"])[:10]

    hours = Counter(to_local(o.created_at).hour for o in orders if o.created_at)
    bills = [b for b in bills if enum_value(b, "status") == "outstanding"]

    return {
        "total_orders": total_orders,
        "total_revenue": float(total_revenue),
        "average_order_value": round(float(total_revenue / total_orders), 2) if total_orders else 0.0,
        "popular_items": [dict(s, revenue=float(s["revenue"])) for s in popular],
        "orders_by_status": dict(Counter(enum_value(o, "status") for o in orders)),
        "orders_by_type": dict(Counter(enum_value(o, "order_type") for o in orders)),
        "peak_hours": [{"hour": h, "order_count": n} for h, n in hours.most_common()],
        "outstanding_bills": {
            "count": len(bills),
            "total_amount": float(sum((money(b.outstanding_amount) for b in bills), Decimal("0"))),
        },
    }


def period_key(moment: datetime, period: str) -> str:
    """Bucket label; weeks start on Sunday"""
    day: date = to_local(moment).date()
    if period == "week":
        return (day - timedelta(days=(day.weekday() + 1) % 7)).isoformat()
    if period == "month":
        return f"{day.year}-{day.month:02d}"
    return day.isoformat()


def revenue_by_period(orders: Iterable[Any], period: str = "day") -> List[dict]:
    if period not in PERIODS:
        raise ValueError(f"Periode tidak dikenal: {period}")
    totals = {}
    for order in _billable(orders):
        key = period_key(order.created_at, period)
        totals[key] = totals.get(key, Decimal("0")) + money(order.total_amount)
    return [{"period": key, "revenue": float(totals[key])} for key in sorted(totals)]


def item_performance(orders: Iterable[Any], category_id: Optional[int] = None) -> List[dict]:
    stats = {}
    for order in _billable(orders):
        for line in _lines(order):
            item = line.item
            if item is None or (category_id and item.category_id != category_id):
                continue
            entry = stats.setdefault(item.id, {
                "id": item.id,
                "name": item.name,
                "category_name": item.category.name if item.category else "Unknown",
                "quantity_sold": 0,
                "revenue": Decimal("0"),
                "orders_count": 0,
                "avg_price": float(money(item.price)),
            })
            entry["quantity_sold"] += line.quantity or 0
            entry["revenue"] += money(line.unit_price) * (line.quantity or 0)
            entry["orders_count"] += 1

    result = sorted(stats.values(), key=lambda s: -s["revenue"])
    return [dict(s, revenue=float(s["revenue"])) for s in result]
