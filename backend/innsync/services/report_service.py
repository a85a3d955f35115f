"""
Report service - management reports over a reporting month
"""
import logging
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from innsync.analytics.guest_analytics import is_local
from innsync.models.hotel import (
    Reservation, Room, Guest, Payment, PaymentStatus, PaymentMethod, BookingStatus, BookingSource,
    HousekeepingTask, HousekeepingStatus, HousekeepingTaskType, CLEANING_TASK_TYPES, money
)
from innsync.models.restaurant import RestaurantBill, BillStatus
from innsync.utils.dates import today_wib, local_date, month_bounds

logger = logging.getLogger(__name__)

REPORT_TYPES = ("occupancy", "revenue", "guest", "housekeeping", "payment", "performance")

STAYING = (BookingStatus.CHECKED_IN, BookingStatus.CHECKED_OUT)


def _overlap_nights(reservation: Reservation, start: date, end: date) -> int:
    """Nights of a stay that fall inside [start, end)"""
    first = max(reservation.check_in_date, start)
    last = min(reservation.check_out_date, end)
    return max((last - first).days, 0)


class ReportService:

    def __init__(self, db: Session):
        self.db = db

    def _rooms(self, property_id: Optional[int]) -> List[Room]:
        query = self.db.query(Room).filter(Room.is_active == True)  # noqa: E712
        if property_id:
            query = query.filter(Room.property_id == property_id)
        return query.all()

    def _reservations(self, property_id: Optional[int]) -> List[Reservation]:
        query = self.db.query(Reservation)
        if property_id:
            query = query.filter(Reservation.property_id == property_id)
        return query.all()

    def _payments(self, property_id: Optional[int]) -> List[Payment]:
        query = self.db.query(Payment).filter(Payment.status == PaymentStatus.COMPLETED)
        if property_id:
            query = query.join(Reservation).filter(Reservation.property_id == property_id)
        return query.all()

    # ---------- report sections ----------

    def occupancy_report(self, property_id: Optional[int] = None, today: Optional[date] = None) -> dict:
        today = today or today_wib()
        rooms = self._rooms(property_id)
        reservations = [r for r in self._reservations(property_id) if r.status != BookingStatus.CANCELLED]
        occupied = {
            r.room_id for r in reservations
            if r.status == BookingStatus.CHECKED_IN and r.check_in_date <= today < r.check_out_date
        }
        stays = [r for r in reservations if r.total_nights]
        walk_ins = sum(1 for r in reservations if r.source == BookingSource.WALK_IN)

        return {
            "total_rooms": len(rooms),
            "occupied_rooms": len(occupied),
            "occupancy_rate": round(len(occupied) / len(rooms) * 100, 1) if rooms else 0,
            "average_length_of_stay": round(sum(r.total_nights for r in stays) / len(stays), 1) if stays else 0,
            "walk_in_rate": round(walk_ins / len(reservations) * 100, 1) if reservations else 0,
        }

    def revenue_report(self, property_id: Optional[int] = None, today: Optional[date] = None) -> dict:
        today = today or today_wib()
        month_start, next_month = month_bounds(today)
        payments = [p for p in self._payments(property_id) if month_start <= local_date(p.payment_date) < next_month]
        room_revenue = sum((money(p.amount) for p in payments), Decimal("0"))

        bills = self.db.query(RestaurantBill).filter(RestaurantBill.status == BillStatus.PAID)
        if property_id:
            bills = bills.join(Reservation).filter(Reservation.property_id == property_id)
        fnb_revenue = sum(
            (money(b.paid_amount) for b in bills.all() if month_start <= local_date(b.updated_at) < next_month),
            Decimal("0")
        )

        rooms = self._rooms(property_id)
        sold_nights = sum(
            _overlap_nights(r, month_start, today + timedelta(days=1))
            for r in self._reservations(property_id) if r.status in STAYING
        )
        days = (today - month_start).days + 1
        total = room_revenue + fnb_revenue

        return {
            "total_revenue": float(total),
            "room_revenue": float(room_revenue),
            "fnb_revenue": float(fnb_revenue),
            "adr": round(float(room_revenue) / sold_nights, 2) if sold_nights else 0,
            "revpar": round(float(room_revenue) / (len(rooms) * days), 2) if rooms else 0,
        }

    def guest_report(self, property_id: Optional[int] = None, today: Optional[date] = None) -> dict:
        today = today or today_wib()
        month_start, next_month = month_bounds(today)
        reservations = self._reservations(property_id)

        if property_id:
            guest_ids = {r.guest_id for r in reservations}
            guests = self.db.query(Guest).filter(Guest.id.in_(guest_ids)).all() if guest_ids else []
        else:
            guests = self.db.query(Guest).all()

        per_guest = defaultdict(int)
        for r in reservations:
            if r.status != BookingStatus.CANCELLED:
                per_guest[r.guest_id] += 1
        stays = [r.total_nights for r in reservations if r.status in STAYING and r.total_nights]
        local = sum(1 for g in guests if is_local(g))

        return {
            "total_guests": len(guests),
            "new_guests_this_month": sum(1 for g in guests if month_start <= local_date(g.created_at) < next_month),
            "repeat_guests": sum(1 for count in per_guest.values() if count > 1),
            "local_guests": local,
            "foreign_guests": len(guests) - local,
            "average_stay_duration": round(sum(stays) / len(stays), 1) if stays else 0,
        }

    def housekeeping_report(self, property_id: Optional[int] = None, today: Optional[date] = None) -> dict:
        today = today or today_wib()
        month_start, next_month = month_bounds(today)
        query = self.db.query(HousekeepingTask).filter(
            HousekeepingTask.scheduled_date >= month_start,
            HousekeepingTask.scheduled_date < next_month,
        )
        if property_id:
            query = query.filter(HousekeepingTask.property_id == property_id)
        tasks = query.all()

        done = [t for t in tasks if t.is_done]
        timed = [t.actual_duration for t in done if t.actual_duration]
        return {
            "total_tasks": len(tasks),
            "completed_tasks": len(done),
            "pending_tasks": sum(
                1 for t in tasks if t.status in (HousekeepingStatus.PENDING, HousekeepingStatus.IN_PROGRESS)
            ),
            "average_completion_time": round(sum(timed) / len(timed), 1) if timed else 0,
            "rooms_cleaned": len({t.room_id for t in done if t.task_type in CLEANING_TASK_TYPES}),
            "maintenance_requests": sum(1 for t in tasks if t.task_type == HousekeepingTaskType.MAINTENANCE),
        }

    def payment_report(self, property_id: Optional[int] = None, today: Optional[date] = None) -> dict:
        today = today or today_wib()
        month_start, next_month = month_bounds(today)
        payments = [p for p in self._payments(property_id) if month_start <= local_date(p.payment_date) < next_month]

        def amount(*methods) -> float:
            return float(sum((money(p.amount) for p in payments if p.payment_method in methods), Decimal("0")))

        total = sum((money(p.amount) for p in payments), Decimal("0"))
        return {
            "cash": amount(PaymentMethod.CASH),
            "card": amount(PaymentMethod.CREDIT_CARD, PaymentMethod.DEBIT_CARD),
            "transfer": amount(PaymentMethod.BANK_TRANSFER),
            "e_wallet": amount(PaymentMethod.DIGITAL_WALLET),
            "transaction_count": len(payments),
            "average_transaction": round(float(total) / len(payments), 2) if payments else 0,
        }

    def performance_report(self, property_id: Optional[int] = None, today: Optional[date] = None) -> dict:
        """Best rooms this month by revenue, and totals per room type"""
        today = today or today_wib()
        month_start, next_month = month_bounds(today)
        days_in_month = (next_month - month_start).days
        rooms = self._rooms(property_id)
        reservations = [
            r for r in self._reservations(property_id)
            if r.status != BookingStatus.CANCELLED and r.check_in_date < next_month and r.check_out_date > month_start
        ]

        per_room = {room.id: {"room_id": room.id, "room_number": room.room_number, "room_type": room.room_type,
                              "revenue": Decimal("0"), "nights": 0} for room in rooms}
        for r in reservations:
            if r.room_id not in per_room:
                continue
            nights = _overlap_nights(r, month_start, next_month)
            per_room[r.room_id]["nights"] += nights
            if r.total_nights:
                per_room[r.room_id]["revenue"] += money(r.total_amount) * nights / r.total_nights

        room_rows = [
            {
                "room_id": s["room_id"],
                "room_number": s["room_number"],
                "room_type": s["room_type"],
                "revenue": round(float(s["revenue"]), 2),
                "occupancy_rate": round(s["nights"] / days_in_month * 100, 1),
            }
            for s in per_room.values()
        ]
        best = sorted(room_rows, key=lambda row: (-row["revenue"], -row["occupancy_rate"]))[:5]

        types = {}
        for row in room_rows:
            entry = types.setdefault(row["room_type"], {"room_type": row["room_type"], "rooms": 0, "revenue": 0.0,
                                                         "occupancy_total": 0.0})
            entry["rooms"] += 1
            entry["revenue"] += row["revenue"]
            entry["occupancy_total"] += row["occupancy_rate"]

        return {
            "best_performing_rooms": best,
            "room_type_performance": sorted(
                (
                    {
                        "room_type": t["room_type"],
                        "rooms": t["rooms"],
                        "revenue": round(t["revenue"], 2),
                        "average_occupancy": round(t["occupancy_total"] / t["rooms"], 1),
                    }
                    for t in types.values()
                ),
                key=lambda t: -t["revenue"]
            ),
        }

    def occupancy_by_room_type(self, property_id: Optional[int] = None, today: Optional[date] = None) -> List[dict]:
        today = today or today_wib()
        rooms = self._rooms(property_id)
        occupied = {
            r.room_id for r in self._reservations(property_id)
            if r.status == BookingStatus.CHECKED_IN and r.check_in_date <= today < r.check_out_date
        }
        groups = defaultdict(lambda: {"total": 0, "occupied": 0})
        for room in rooms:
            groups[room.room_type]["total"] += 1
            if room.id in occupied:
                groups[room.room_type]["occupied"] += 1
        return [
            {
                "room_type": room_type,
                "total_rooms": g["total"],
                "occupied_rooms": g["occupied"],
                "occupancy_rate": round(g["occupied"] / g["total"] * 100, 1),
            }
            for room_type, g in sorted(groups.items())
        ]

    def time_series(self, days: int = 7, property_id: Optional[int] = None,
                    today: Optional[date] = None) -> List[dict]:
        """Daily occupancy and completed payment revenue for the last `days` days"""
        today = today or today_wib()
        rooms = self._rooms(property_id)
        reservations = [r for r in self._reservations(property_id) if r.status in STAYING]
        payments = self._payments(property_id)

        series = []
        for offset in range(days - 1, -1, -1):
            day = today - timedelta(days=offset)
            occupied = {r.room_id for r in reservations if r.check_in_date <= day < r.check_out_date}
            revenue = sum((money(p.amount) for p in payments if local_date(p.payment_date) == day), Decimal("0"))
            series.append({
                "date": day.isoformat(),
                "occupied_rooms": len(occupied),
                "occupancy_rate": round(len(occupied) / len(rooms) * 100, 1) if rooms else 0,
                "revenue": float(revenue),
            })
        return series

    # ---------- entry points ----------

    def get_report(self, report_type: str, property_id: Optional[int] = None, today: Optional[date] = None) -> dict:
        builders = {
            "occupancy": self.occupancy_report,
            "revenue": self.revenue_report,
            "guest": self.guest_report,
            "housekeeping": self.housekeeping_report,
            "payment": self.payment_report,
            "performance": self.performance_report,
        }
        if report_type not in builders:
            raise ValueError(f"Jenis laporan tidak dikenal: {report_type}")
        return builders[report_type](property_id=property_id, today=today)

    def get_all_reports(self, property_id: Optional[int] = None, today: Optional[date] = None) -> dict:
        today = today or today_wib()
        report = {name: self.get_report(name, property_id, today) for name in REPORT_TYPES}
        report["occupancy_by_room_type"] = self.occupancy_by_room_type(property_id, today)
        report["time_series"] = self.time_series(property_id=property_id, today=today)
        report["generated_for"] = today.isoformat()
        return report
