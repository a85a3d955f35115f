"""
Guest service - guest profiles and their stay history
"""
import logging
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from innsync.models.hotel import Guest, Reservation, BookingStatus, money
from innsync.models.schemas import GuestCreate, GuestUpdate
from innsync.utils.validation import validate_guest_identity

logger = logging.getLogger(__name__)


class GuestService:

    def __init__(self, db: Session):
        self.db = db

    def get_guests(self, search: Optional[str] = None, property_id: Optional[int] = None,
                   limit: int = 100) -> List[Guest]:
        """List guests, newest first; `property_id` keeps guests who stayed there"""
        query = self.db.query(Guest)

        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                Guest.first_name.ilike(pattern),
                Guest.last_name.ilike(pattern),
                Guest.email.ilike(pattern),
                Guest.phone.contains(search),
                Guest.identification_number.contains(search),
            ))
        if property_id:
            query = query.filter(Guest.reservations.any(Reservation.property_id == property_id))

        return query.order_by(Guest.created_at.desc(), Guest.id.desc()).limit(limit).all()

    def get_guest(self, guest_id: int) -> Optional[Guest]:
        return self.db.query(Guest).filter(Guest.id == guest_id).first()

    def get_guest_history(self, guest_id: int) -> dict:
        """Reservations of a guest with the total spent on completed stays"""
        reservations = self.db.query(Reservation).filter(
            Reservation.guest_id == guest_id
        ).order_by(Reservation.check_in_date.desc()).all()

        total_spent = sum(
            (money(r.total_amount) for r in reservations
             if r.status in (BookingStatus.CHECKED_IN, BookingStatus.CHECKED_OUT)),
            Decimal("0")
        )
        return {
            "reservations": reservations,
            "reservation_count": len(reservations),
            "total_spent": total_spent,
        }

    def _validate(self, identification_type, identification_number, phone) -> None:
        valid, message = validate_guest_identity(identification_type, identification_number, phone)
        if not valid:
            raise ValueError(message)

    def create_guest(self, data: GuestCreate) -> Guest:
        self._validate(data.identification_type, data.identification_number, data.phone)

        guest = Guest(**data.model_dump())
        self.db.add(guest)
        self.db.commit()
        self.db.refresh(guest)
        logger.info(f"Created guest {guest.id}")
        return guest

    def update_guest(self, guest_id: int, data: GuestUpdate) -> Guest:
        guest = self.get_guest(guest_id)
        if not guest:
            raise ValueError("Tamu tidak ditemukan")

        update_data = data.model_dump(exclude_unset=True)
        self._validate(
            update_data.get("identification_type", guest.identification_type),
            update_data.get("identification_number", guest.identification_number),
            update_data.get("phone", guest.phone),
        )

        for key, value in update_data.items():
            setattr(guest, key, value)

        self.db.commit()
        self.db.refresh(guest)
        return guest

    def delete_guest(self, guest_id: int) -> bool:
        guest = self.get_guest(guest_id)
        if not guest:
            raise ValueError("Tamu tidak ditemukan")
        if guest.reservations:
            raise ValueError("Tamu memiliki reservasi dan tidak dapat dihapus")
        self.db.delete(guest)
        self.db.commit()
        return True
