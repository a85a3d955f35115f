"""
Dashboard service - front office summary, activity feed and today's movements
"""
import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from innsync.models.hotel import (
    Reservation, Room, RoomStatus, BookingStatus, HousekeepingTask, HousekeepingStatus, money
)
from innsync.services.query_cache import dashboard_cache
from innsync.utils.dates import today_wib, local_date, month_bounds

logger = logging.getLogger(__name__)

READY_STATUSES = (RoomStatus.CLEAN, RoomStatus.INSPECTED)


def _rate(part: float, whole: float) -> float:
    return part / whole * 100 if whole > 0 else 0


class DashboardService:

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

    @staticmethod
    def _occupied_room_ids(reservations: List[Reservation], day: date) -> set:
        return {
            r.room_id for r in reservations
            if r.status == BookingStatus.CHECKED_IN and r.check_in_date <= day < r.check_out_date
        }

    @staticmethod
    def _revenue_on(reservations: List[Reservation], day: date) -> Decimal:
        return sum(
            (money(r.total_amount) for r in reservations
             if r.status != BookingStatus.CANCELLED and r.check_in_date == day),
            Decimal("0")
        )

    def get_stats(self, property_id: Optional[int] = None, today: Optional[date] = None) -> dict:
        """Cached per property and business day"""
        today = today or today_wib()
        return dashboard_cache.get_or_set(
            ("stats", property_id, today),
            lambda: self.compute_stats(property_id, today)
        )

    def compute_stats(self, property_id: Optional[int], today: date) -> dict:
        rooms = self._rooms(property_id)
        reservations = self._reservations(property_id)
        yesterday = today - timedelta(days=1)

        active_ids = {r.id for r in rooms}
        total_rooms = len(rooms)
        occupied_ids = self._occupied_room_ids(reservations, today) & active_ids
        occupied_yesterday = self._occupied_room_ids(reservations, yesterday) & active_ids
        out_of_order = sum(1 for r in rooms if r.status == RoomStatus.OUT_OF_ORDER)
        ready_rooms = [r for r in rooms if r.status in READY_STATUSES]
        available = sum(1 for r in ready_rooms if r.id not in occupied_ids)

        occupancy_rate = round(_rate(len(occupied_ids), total_rooms))
        yesterday_rate = round(_rate(len(occupied_yesterday), total_rooms))

        live = [r for r in reservations if r.status != BookingStatus.CANCELLED]
        month_start, next_month = month_bounds(today)
        revenue_today = self._revenue_on(reservations, today)
        revenue_yesterday = self._revenue_on(reservations, yesterday)
        revenue_this_month = sum(
            (money(r.total_amount) for r in live if month_start <= r.check_in_date < next_month),
            Decimal("0")
        )

        in_house = [r for r in reservations if r.status == BookingStatus.CHECKED_IN]
        room_nights = sum(r.total_nights or 0 for r in in_house)
        room_revenue = sum((money(r.total_amount) for r in in_house), Decimal("0"))
        adr = float(room_revenue / room_nights) if room_nights else 0.0

        days_elapsed = (today - month_start).days + 1
        revpar = float(revenue_this_month) / (total_rooms * days_elapsed) if total_rooms else 0.0

        if revenue_yesterday > 0:
            revenue_trend = round(float((revenue_today - revenue_yesterday) / revenue_yesterday * 100), 1)
        else:
            revenue_trend = 100.0 if revenue_today > 0 else 0.0

        task_query = self.db.query(HousekeepingTask).filter(HousekeepingTask.scheduled_date == today)
        if property_id:
            task_query = task_query.filter(HousekeepingTask.property_id == property_id)
        tasks = task_query.all()

        return {
            "date": today.isoformat(),
            "total_rooms": total_rooms,
            "occupied_rooms": len(occupied_ids),
            "available_rooms": available,
            "out_of_order_rooms": out_of_order,
            "occupancy_rate": occupancy_rate,
            "today_arrivals": sum(
                1 for r in reservations
                if r.check_in_date == today and r.status in (BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN)
            ),
            "today_departures": sum(
                1 for r in reservations
                if r.check_out_date == today and r.status in (BookingStatus.CHECKED_IN, BookingStatus.CHECKED_OUT)
            ),
            "new_bookings_today": sum(1 for r in reservations if local_date(r.created_at) == today),
            "revenue_today": float(revenue_today),
            "revenue_this_month": float(revenue_this_month),
            "adr": round(adr, 2),
            "revpar": round(revpar, 2),
            "housekeeping_completed": sum(1 for t in tasks if t.is_done),
            "housekeeping_pending": sum(
                1 for t in tasks if t.status in (HousekeepingStatus.PENDING, HousekeepingStatus.IN_PROGRESS)
            ),
            "rooms_ready": len(ready_rooms),
            "occupancy_trend": occupancy_rate - yesterday_rate,
            "revenue_trend": revenue_trend,
        }

    def get_activities(self, limit: int = 10, property_id: Optional[int] = None) -> List[dict]:
        """Recent front office and housekeeping events, newest first"""
        activities = []
        reservations = self.db.query(Reservation)
        if property_id:
            reservations = reservations.filter(Reservation.property_id == property_id)

        for r in reservations.order_by(Reservation.updated_at.desc()).limit(limit * 2).all():
            guest = r.guest.full_name if r.guest else ""
            room = r.room.room_number if r.room else ""
            if r.status == BookingStatus.CHECKED_IN:
                kind, text = "checkin", f"{guest} check-in ke kamar {room}"
            elif r.status == BookingStatus.CHECKED_OUT:
                kind, text = "checkout", f"{guest} check-out dari kamar {room}"
            elif r.status == BookingStatus.CANCELLED:
                kind, text = "cancellation", f"Reservasi {r.confirmation_number} dibatalkan"
            else:
                kind, text = "booking", f"Reservasi baru {r.confirmation_number} untuk {guest}"
            activities.append({
                "type": kind,
                "description": text,
                "timestamp": r.updated_at or r.created_at,
                "reservation_id": r.id,
                "room_number": room,
            })

        tasks = self.db.query(HousekeepingTask).filter(HousekeepingTask.completed_at.isnot(None))
        if property_id:
            tasks = tasks.filter(HousekeepingTask.property_id == property_id)
        for t in tasks.order_by(HousekeepingTask.completed_at.desc()).limit(limit).all():
            activities.append({
                "type": "housekeeping",
                "description": f"Kamar {t.room.room_number} selesai dibersihkan",
                "timestamp": t.completed_at,
                "task_id": t.id,
                "room_number": t.room.room_number,
            })

        activities.sort(key=lambda a: a["timestamp"], reverse=True)
        return activities[:limit]

    def get_upcoming(self, property_id: Optional[int] = None, today: Optional[date] = None) -> dict:
        today = today or today_wib()
        query = self.db.query(Reservation)
        if property_id:
            query = query.filter(Reservation.property_id == property_id)

        arrivals = query.filter(
            Reservation.check_in_date == today, Reservation.status == BookingStatus.CONFIRMED
        ).all()
        departures = query.filter(
            Reservation.check_out_date == today, Reservation.status == BookingStatus.CHECKED_IN
        ).all()

        tasks = self.db.query(HousekeepingTask).filter(
            HousekeepingTask.scheduled_date == today,
            HousekeepingTask.status.in_((HousekeepingStatus.PENDING, HousekeepingStatus.IN_PROGRESS)),
        )
        if property_id:
            tasks = tasks.filter(HousekeepingTask.property_id == property_id)

        return {
            "arrivals": arrivals,
            "departures": departures,
            "pending_tasks": tasks.order_by(HousekeepingTask.priority.desc()).all(),
        }
