"""
Reservation service - bookings, availability, check-in and check-out

Mutations publish reservation.* / guest.* events on the event bus, which
feeds housekeeping automation and outbound webhooks.
"""
import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from innsync.database import next_daily_number
from innsync.models.hotel import (
    Reservation, Room, Guest, RoomStatus, BookingStatus, PaymentStatus, money
)
from innsync.models.events import EventType, ReservationEventData, StayEventData, reservation_event_data
from innsync.models.schemas import ReservationCreate, ReservationUpdate, ReservationResponse, PaymentResponse
from innsync.models.restaurant import RestaurantBill, BillStatus
from innsync.services.event_bus import publish_event
from innsync.services.query_cache import invalidate_dashboard
from innsync.services.restaurant_bill_service import RestaurantBillService
from innsync.utils.currency import calculate_tax
from innsync.utils.dates import today_wib, now_wib
from innsync.utils.validation import (
    is_room_available, validate_guest_capacity, validate_reservation_dates
)

logger = logging.getLogger(__name__)


class CheckoutBlockedError(ValueError):
    """Checkout refused because restaurant bills are still outstanding"""

    def __init__(self, total_outstanding: Decimal):
        self.total_outstanding = total_outstanding
        super().__init__(
            f"Tamu masih memiliki tagihan restoran sebesar {total_outstanding}. "
            f"Selesaikan pembayaran sebelum check-out."
        )


CHECK_IN_ALLOWED = (BookingStatus.PENDING, BookingStatus.CONFIRMED)
CANCEL_ALLOWED = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


class ReservationService:

    def __init__(self, db: Session):
        self.db = db

    # ---------- queries ----------

    def _generate_confirmation_number(self) -> str:
        """INN + business date + daily sequence, e.g. INN202403150007"""
        prefix = f"INN{now_wib().strftime('%Y%m%d')}"
        return next_daily_number(self.db, Reservation.confirmation_number, prefix)

    def get_reservations(self, property_id: Optional[int] = None, status: Optional[BookingStatus] = None,
                         date_from: Optional[date] = None, date_to: Optional[date] = None,
                         guest_id: Optional[int] = None, search: Optional[str] = None,
                         limit: int = 500) -> List[Reservation]:
        query = self.db.query(Reservation)

        if property_id:
            query = query.filter(Reservation.property_id == property_id)
        if status:
            query = query.filter(Reservation.status == status)
        if date_from:
            query = query.filter(Reservation.check_in_date >= date_from)
        if date_to:
            query = query.filter(Reservation.check_out_date <= date_to)
        if guest_id:
            query = query.filter(Reservation.guest_id == guest_id)
        if search:
            pattern = f"%{search}%"
            query = query.join(Guest).filter(or_(
                Reservation.confirmation_number.ilike(pattern),
                Guest.first_name.ilike(pattern),
                Guest.last_name.ilike(pattern),
                Guest.phone.contains(search),
            ))

        return query.order_by(Reservation.check_in_date.desc(), Reservation.id.desc()).limit(limit).all()

    def get_reservation(self, reservation_id: int) -> Optional[Reservation]:
        return self.db.query(Reservation).filter(Reservation.id == reservation_id).first()

    def get_by_confirmation_number(self, confirmation_number: str) -> Optional[Reservation]:
        return self.db.query(Reservation).filter(
            Reservation.confirmation_number == confirmation_number
        ).first()

    def get_calendar(self, start: date, end: date, property_id: Optional[int] = None) -> List[Reservation]:
        """Reservations whose stay touches [start, end]"""
        if end < start:
            raise ValueError("Tanggal akhir harus setelah tanggal awal")
        query = self.db.query(Reservation).filter(
            Reservation.check_in_date <= end,
            Reservation.check_out_date >= start,
        )
        if property_id:
            query = query.filter(Reservation.property_id == property_id)
        return query.order_by(Reservation.check_in_date, Reservation.room_id).all()

    def get_paid_amount(self, reservation: Reservation) -> Decimal:
        return sum(
            (money(p.amount) for p in reservation.payments if p.status == PaymentStatus.COMPLETED),
            Decimal("0")
        )

    def get_reservation_detail(self, reservation_id: int) -> Optional[dict]:
        """Reservation with payments, paid total and open restaurant balance"""
        reservation = self.get_reservation(reservation_id)
        if not reservation:
            return None
        detail = ReservationResponse.model_validate(reservation).model_dump()
        detail["payments"] = [
            PaymentResponse.model_validate(p) for p in sorted(reservation.payments, key=lambda p: p.id)
        ]
        detail["paid_amount"] = self.get_paid_amount(reservation)
        detail["restaurant_outstanding"] = RestaurantBillService(self.db).get_checkout_status(
            reservation_id
        )["total_outstanding"]
        return detail

    def get_stats(self, property_id: Optional[int] = None, today: Optional[date] = None) -> dict:
        today = today or today_wib()
        query = self.db.query(Reservation)
        if property_id:
            query = query.filter(Reservation.property_id == property_id)
        reservations = query.all()

        by_status = {s.value: 0 for s in BookingStatus}
        for r in reservations:
            by_status[r.status.value] += 1

        live = [r for r in reservations if r.status != BookingStatus.CANCELLED]
        return {
            "total": len(reservations),
            "by_status": by_status,
            "today_check_ins": sum(
                1 for r in live
                if r.check_in_date == today and r.status in (BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN)
            ),
            "today_check_outs": sum(
                1 for r in live
                if r.check_out_date == today and r.status in (BookingStatus.CHECKED_IN, BookingStatus.CHECKED_OUT)
            ),
            "current_occupancy": sum(
                1 for r in reservations
                if r.status == BookingStatus.CHECKED_IN and r.check_in_date <= today < r.check_out_date
            ),
            "total_revenue": float(sum((money(r.total_amount) for r in live), Decimal("0"))),
        }

    def check_availability(self, room_id: int, check_in: date, check_out: date,
                           exclude_reservation_id: Optional[int] = None) -> dict:
        reservations = self.db.query(Reservation).filter(
            Reservation.room_id == room_id,
            Reservation.check_in_date < check_out,
            Reservation.check_out_date > check_in,
        ).all()
        return is_room_available(reservations, room_id, check_in, check_out, exclude_reservation_id)

    # ---------- mutations ----------

    def _publish(self, event_type: EventType, reservation: Reservation, **extra) -> None:
        cls = StayEventData if event_type in (EventType.GUEST_CHECKED_IN, EventType.GUEST_CHECKED_OUT) \
            else ReservationEventData
        publish_event(event_type, reservation_event_data(reservation, cls=cls, **extra), "reservation_service")

    def _validate_stay(self, room: Room, check_in: date, check_out: date, adults: int, children: int,
                       exclude_reservation_id: Optional[int] = None, today: Optional[date] = None) -> None:
        valid, message = validate_reservation_dates(check_in, check_out, today=today)
        if not valid:
            raise ValueError(message)

        valid, message = validate_guest_capacity(adults, children, room.capacity)
        if not valid:
            raise ValueError(message)

        availability = self.check_availability(room.id, check_in, check_out, exclude_reservation_id)
        if not availability["available"]:
            raise ValueError(f"Kamar {room.room_number} tidak tersedia pada tanggal tersebut")

    def _price(self, reservation: Reservation, rate_per_night: Optional[Decimal],
               total_amount: Optional[Decimal]) -> None:
        """Fill nights, rate, total and PPN; an explicit total overrides rate x nights"""
        nights = (reservation.check_out_date - reservation.check_in_date).days
        rate = money(rate_per_night if rate_per_night is not None else reservation.room.base_rate)
        total = money(total_amount) if total_amount is not None else rate * nights

        reservation.total_nights = nights
        reservation.rate_per_night = rate
        reservation.total_amount = total
        reservation.tax_amount = Decimal(calculate_tax(total))

    def create_reservation(self, data: ReservationCreate, today: Optional[date] = None) -> Reservation:
        room = self.db.query(Room).filter(Room.id == data.room_id).first()
        if not room or not room.is_active:
            raise ValueError("Kamar tidak ditemukan")
        if room.status == RoomStatus.OUT_OF_ORDER:
            raise ValueError(f"Kamar {room.room_number} sedang dalam perbaikan")
        if not self.db.query(Guest).filter(Guest.id == data.guest_id).first():
            raise ValueError("Tamu tidak ditemukan")
        if data.status not in (BookingStatus.PENDING, BookingStatus.CONFIRMED):
            raise ValueError("Reservasi baru harus berstatus pending atau confirmed")

        self._validate_stay(room, data.check_in_date, data.check_out_date, data.adults, data.children,
                            today=today)

        reservation = Reservation(
            property_id=room.property_id,
            room_id=room.id,
            guest_id=data.guest_id,
            confirmation_number=self._generate_confirmation_number(),
            check_in_date=data.check_in_date,
            check_out_date=data.check_out_date,
            adults=data.adults,
            children=data.children,
            status=data.status,
            source=data.source,
            special_requests=data.special_requests,
            notes=data.notes,
        )
        reservation.room = room
        self._price(reservation, data.rate_per_night, data.total_amount)

        self.db.add(reservation)
        self.db.commit()
        self.db.refresh(reservation)
        invalidate_dashboard()

        logger.info(f"Created reservation {reservation.confirmation_number} for room {room.room_number}")
        self._publish(EventType.RESERVATION_CREATED, reservation)
        return reservation

    def update_reservation(self, reservation_id: int, data: ReservationUpdate,
                           today: Optional[date] = None) -> Reservation:
        reservation = self.get_reservation(reservation_id)
        if not reservation:
            raise ValueError("Reservasi tidak ditemukan")
        if reservation.status in (BookingStatus.CHECKED_OUT, BookingStatus.CANCELLED):
            raise ValueError("Reservasi yang sudah selesai atau dibatalkan tidak dapat diubah")

        update_data = data.model_dump(exclude_unset=True)
        rate = update_data.pop("rate_per_night", None)
        total = update_data.pop("total_amount", None)

        room = reservation.room
        if "room_id" in update_data and update_data["room_id"] != reservation.room_id:
            room = self.db.query(Room).filter(Room.id == update_data["room_id"]).first()
            if not room or not room.is_active:
                raise ValueError("Kamar tidak ditemukan")

        check_in = update_data.get("check_in_date", reservation.check_in_date)
        check_out = update_data.get("check_out_date", reservation.check_out_date)
        adults = update_data.get("adults", reservation.adults)
        children = update_data.get("children", reservation.children)

        stay_changed = (
            room.id != reservation.room_id
            or check_in != reservation.check_in_date
            or check_out != reservation.check_out_date
            or adults != reservation.adults
            or children != reservation.children
        )
        if stay_changed:
            if reservation.status == BookingStatus.CHECKED_IN and check_in != reservation.check_in_date:
                raise ValueError("Tanggal check-in tidak dapat diubah setelah tamu check-in")
            self._validate_stay(room, check_in, check_out, adults, children,
                                exclude_reservation_id=reservation.id,
                                today=check_in if reservation.status == BookingStatus.CHECKED_IN else today)

        for key, value in update_data.items():
            setattr(reservation, key, value)
        reservation.room = room

        dates_changed = "check_in_date" in update_data or "check_out_date" in update_data or "room_id" in update_data
        if dates_changed or rate is not None or total is not None:
            self._price(
                reservation,
                rate if rate is not None else (reservation.rate_per_night if "room_id" not in update_data else None),
                total,
            )

        self.db.commit()
        self.db.refresh(reservation)
        invalidate_dashboard()
        self._publish(EventType.RESERVATION_UPDATED, reservation)
        return reservation

    def update_status(self, reservation_id: int, status: BookingStatus,
                      operator_id: Optional[int] = None) -> Reservation:
        """Route a status change through the matching lifecycle operation"""
        if status == BookingStatus.CHECKED_IN:
            return self.check_in(reservation_id, operator_id)
        if status == BookingStatus.CHECKED_OUT:
            return self.check_out(reservation_id, operator_id)
        if status == BookingStatus.CANCELLED:
            return self.cancel_reservation(reservation_id)

        reservation = self.get_reservation(reservation_id)
        if not reservation:
            raise ValueError("Reservasi tidak ditemukan")
        if reservation.status in (BookingStatus.CHECKED_IN, BookingStatus.CHECKED_OUT):
            raise ValueError(f"Status {reservation.status.value} tidak dapat diubah menjadi {status.value}")

        previous = reservation.status.value
        reservation.status = status
        self.db.commit()
        self.db.refresh(reservation)
        invalidate_dashboard()
        self._publish(EventType.RESERVATION_UPDATED, reservation, previous_status=previous)
        return reservation

    def cancel_reservation(self, reservation_id: int, reason: Optional[str] = None) -> Reservation:
        reservation = self.get_reservation(reservation_id)
        if not reservation:
            raise ValueError("Reservasi tidak ditemukan")
        if reservation.status not in CANCEL_ALLOWED:
            raise ValueError("Hanya reservasi pending atau confirmed yang dapat dibatalkan")

        previous = reservation.status.value
        reservation.status = BookingStatus.CANCELLED
        if reason:
            reservation.notes = f"{reservation.notes}\nDibatalkan: {reason}" if reservation.notes \
                else f"Dibatalkan: {reason}"

        self.db.commit()
        self.db.refresh(reservation)
        invalidate_dashboard()
        logger.info(f"Cancelled reservation {reservation.confirmation_number}")
        self._publish(EventType.RESERVATION_CANCELLED, reservation, previous_status=previous)
        return reservation

    def delete_reservation(self, reservation_id: int) -> bool:
        reservation = self.get_reservation(reservation_id)
        if not reservation:
            raise ValueError("Reservasi tidak ditemukan")
        if reservation.status == BookingStatus.CHECKED_IN:
            raise ValueError("Reservasi yang sedang menginap tidak dapat dihapus")

        outstanding = RestaurantBillService(self.db).get_checkout_status(reservation_id)
        if outstanding["has_outstanding"]:
            raise ValueError("Reservasi masih memiliki tagihan restoran")

        self.db.query(RestaurantBill).filter(RestaurantBill.reservation_id == reservation_id).delete()
        self.db.delete(reservation)
        self.db.commit()
        invalidate_dashboard()
        return True

    def check_in(self, reservation_id: int, operator_id: Optional[int] = None) -> Reservation:
        reservation = self.get_reservation(reservation_id)
        if not reservation:
            raise ValueError("Reservasi tidak ditemukan")
        if reservation.status not in CHECK_IN_ALLOWED:
            raise ValueError(f"Reservasi berstatus {reservation.status.value} tidak dapat check-in")
        if reservation.room.status == RoomStatus.OUT_OF_ORDER:
            raise ValueError(f"Kamar {reservation.room.room_number} sedang dalam perbaikan")

        occupied = self.db.query(Reservation).filter(
            Reservation.room_id == reservation.room_id,
            Reservation.status == BookingStatus.CHECKED_IN,
            Reservation.id != reservation.id,
        ).first()
        if occupied:
            raise ValueError(f"Kamar {reservation.room.room_number} masih ditempati")

        previous = reservation.status.value
        reservation.status = BookingStatus.CHECKED_IN
        self.db.commit()
        self.db.refresh(reservation)
        invalidate_dashboard()

        logger.info(f"Guest checked in: {reservation.confirmation_number} room {reservation.room.room_number}")
        self._publish(EventType.GUEST_CHECKED_IN, reservation, previous_status=previous, operator_id=operator_id)
        return reservation

    def check_out(self, reservation_id: int, operator_id: Optional[int] = None) -> Reservation:
        reservation = self.get_reservation(reservation_id)
        if not reservation:
            raise ValueError("Reservasi tidak ditemukan")
        if reservation.status != BookingStatus.CHECKED_IN:
            raise ValueError("Hanya tamu yang sedang menginap yang dapat check-out")

        checkout_status = RestaurantBillService(self.db).get_checkout_status(reservation_id)
        if checkout_status["has_outstanding"]:
            raise CheckoutBlockedError(checkout_status["total_outstanding"])

        previous = reservation.status.value
        reservation.status = BookingStatus.CHECKED_OUT
        reservation.room.status = RoomStatus.DIRTY
        self.db.commit()
        self.db.refresh(reservation)
        invalidate_dashboard()

        logger.info(f"Guest checked out: {reservation.confirmation_number} room {reservation.room.room_number}")
        self._publish(EventType.GUEST_CHECKED_OUT, reservation, previous_status=previous, operator_id=operator_id)
        return reservation

    def get_upcoming(self, days: int = 7, property_id: Optional[int] = None,
                     today: Optional[date] = None) -> List[Reservation]:
        """Confirmed or pending arrivals within the next `days` days"""
        today = today or today_wib()
        query = self.db.query(Reservation).filter(
            Reservation.check_in_date >= today,
            Reservation.check_in_date <= today + timedelta(days=days),
            Reservation.status.in_(CHECK_IN_ALLOWED),
        )
        if property_id:
            query = query.filter(Reservation.property_id == property_id)
        return query.order_by(Reservation.check_in_date).all()
