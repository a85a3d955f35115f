"""
Room service - room inventory, status changes and availability search
"""
import logging
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from innsync.models.hotel import Room, RoomStatus, Reservation, BookingStatus, Property
from innsync.models.schemas import RoomCreate, RoomUpdate
from innsync.services.query_cache import invalidate_dashboard

logger = logging.getLogger(__name__)


class RoomService:

    def __init__(self, db: Session):
        self.db = db

    def get_rooms(self, property_id: Optional[int] = None, status: Optional[RoomStatus] = None,
                  room_type: Optional[str] = None, floor: Optional[int] = None,
                  is_active: Optional[bool] = None) -> List[Room]:
        query = self.db.query(Room)

        if property_id:
            query = query.filter(Room.property_id == property_id)
        if status:
            query = query.filter(Room.status == status)
        if room_type:
            query = query.filter(Room.room_type == room_type)
        if floor is not None:
            query = query.filter(Room.floor == floor)
        if is_active is not None:
            query = query.filter(Room.is_active == is_active)

        return query.order_by(Room.room_number).all()

    def get_room(self, room_id: int) -> Optional[Room]:
        return self.db.query(Room).filter(Room.id == room_id).first()

    def _ensure_unique_number(self, property_id: int, room_number: str, exclude_id: Optional[int] = None):
        query = self.db.query(Room).filter(
            Room.property_id == property_id,
            Room.room_number == room_number
        )
        if exclude_id:
            query = query.filter(Room.id != exclude_id)
        if query.first():
            raise ValueError(f"Nomor kamar {room_number} sudah digunakan")

    def _sync_total_rooms(self, property_id: int) -> None:
        prop = self.db.query(Property).filter(Property.id == property_id).first()
        if prop:
            prop.total_rooms = self.db.query(Room).filter(
                Room.property_id == property_id, Room.is_active == True  # noqa: E712
            ).count()

    def create_room(self, data: RoomCreate) -> Room:
        if not self.db.query(Property).filter(Property.id == data.property_id).first():
            raise ValueError("Properti tidak ditemukan")
        self._ensure_unique_number(data.property_id, data.room_number)

        room = Room(**data.model_dump())
        self.db.add(room)
        self.db.flush()
        self._sync_total_rooms(data.property_id)
        self.db.commit()
        self.db.refresh(room)
        invalidate_dashboard()
        return room

    def update_room(self, room_id: int, data: RoomUpdate) -> Room:
        room = self.get_room(room_id)
        if not room:
            raise ValueError("Kamar tidak ditemukan")

        update_data = data.model_dump(exclude_unset=True)
        if "room_number" in update_data:
            self._ensure_unique_number(room.property_id, update_data["room_number"], exclude_id=room.id)

        for key, value in update_data.items():
            setattr(room, key, value)

        self.db.flush()
        self._sync_total_rooms(room.property_id)
        self.db.commit()
        self.db.refresh(room)
        invalidate_dashboard()
        return room

    def update_room_status(self, room_id: int, status: RoomStatus) -> Room:
        room = self.get_room(room_id)
        if not room:
            raise ValueError("Kamar tidak ditemukan")

        old_status = room.status
        room.status = status
        self.db.commit()
        self.db.refresh(room)
        invalidate_dashboard()
        logger.info(f"Room {room.room_number} status {old_status} -> {status}")
        return room

    def deactivate_room(self, room_id: int) -> Room:
        """Rooms with history are never deleted, only taken out of inventory"""
        room = self.get_room(room_id)
        if not room:
            raise ValueError("Kamar tidak ditemukan")

        active = self.db.query(Reservation).filter(
            Reservation.room_id == room_id,
            Reservation.status == BookingStatus.CHECKED_IN
        ).first()
        if active:
            raise ValueError("Kamar sedang ditempati")

        room.is_active = False
        self.db.flush()
        self._sync_total_rooms(room.property_id)
        self.db.commit()
        self.db.refresh(room)
        invalidate_dashboard()
        return room

    def get_available_rooms(self, check_in: date, check_out: date, property_id: Optional[int] = None,
                            guests: Optional[int] = None) -> List[Room]:
        """Active, serviceable rooms with no overlapping non-cancelled reservation"""
        if check_out <= check_in:
            raise ValueError("Tanggal check-out harus setelah tanggal check-in")

        busy_room_ids = self.db.query(Reservation.room_id).filter(
            Reservation.status != BookingStatus.CANCELLED,
            Reservation.check_in_date < check_out,
            Reservation.check_out_date > check_in,
        )
        query = self.db.query(Room).filter(
            Room.is_active == True,  # noqa: E712
            Room.status != RoomStatus.OUT_OF_ORDER,
            ~Room.id.in_(busy_room_ids),
        )
        if property_id:
            query = query.filter(Room.property_id == property_id)
        if guests:
            query = query.filter(Room.capacity >= guests)

        return query.order_by(Room.room_number).all()
