"""
Property service - hotels and the first-run setup wizard
"""
import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from innsync.models.hotel import Property, Room, RoomStatus
from innsync.models.schemas import PropertyCreate, PropertyUpdate, PropertySetupRequest

logger = logging.getLogger(__name__)


class PropertyService:

    def __init__(self, db: Session):
        self.db = db

    def get_properties(self) -> List[Property]:
        return self.db.query(Property).order_by(Property.name).all()

    def get_property(self, property_id: int) -> Optional[Property]:
        return self.db.query(Property).filter(Property.id == property_id).first()

    def create_property(self, data: PropertyCreate) -> Property:
        prop = Property(**data.model_dump())
        self.db.add(prop)
        self.db.commit()
        self.db.refresh(prop)
        logger.info(f"Created property {prop.id} ({prop.name})")
        return prop

    def update_property(self, property_id: int, data: PropertyUpdate) -> Property:
        prop = self.get_property(property_id)
        if not prop:
            raise ValueError("Properti tidak ditemukan")

        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(prop, key, value)

        self.db.commit()
        self.db.refresh(prop)
        return prop

    def delete_property(self, property_id: int) -> bool:
        prop = self.get_property(property_id)
        if not prop:
            raise ValueError("Properti tidak ditemukan")
        self.db.delete(prop)
        self.db.commit()
        logger.info(f"Deleted property {property_id}")
        return True

    def setup_property(self, data: PropertySetupRequest) -> Property:
        """Create a property together with its initial rooms in one transaction"""
        numbers = [r.room_number for r in data.rooms]
        if len(numbers) != len(set(numbers)):
            raise ValueError("Nomor kamar tidak boleh duplikat")

        prop = Property(**data.property.model_dump())
        self.db.add(prop)
        try:
            self.db.flush()
            for room in data.rooms:
                self.db.add(Room(property_id=prop.id, status=RoomStatus.CLEAN, **room.model_dump()))
            prop.total_rooms = len(data.rooms)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValueError("Gagal menyimpan properti")

        self.db.refresh(prop)
        logger.info(f"Property setup complete: {prop.name} with {prop.total_rooms} rooms")
        return prop
