"""
Hotel entities - properties, staff, rooms, guests, reservations,
payments and housekeeping tasks
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from sqlalchemy import (
    Column, Integer, String, DateTime, Date, Time,
    ForeignKey, Text, Enum as SQLEnum, Boolean, Numeric, JSON, UniqueConstraint
)
from sqlalchemy.orm import relationship
from innsync.database import Base


# ============== Enumerations ==============

class BookingStatus(str, Enum):
    """Reservation lifecycle"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class BookingSource(str, Enum):
    """Where a reservation came from"""
    DIRECT = "direct"
    WALK_IN = "walk_in"
    PHONE = "phone"
    WEBSITE = "website"
    BOOKING_COM = "booking_com"
    AGODA = "agoda"
    TRAVELOKA = "traveloka"
    TIKET_COM = "tiket_com"
    EXPEDIA = "expedia"
    OTHER = "other"


class RoomStatus(str, Enum):
    """Housekeeping state of a room"""
    CLEAN = "clean"
    DIRTY = "dirty"
    INSPECTED = "inspected"
    OUT_OF_ORDER = "out_of_order"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    DIGITAL_WALLET = "digital_wallet"


class HousekeepingStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    INSPECTED = "inspected"
    FAILED_INSPECTION = "failed_inspection"


class HousekeepingTaskType(str, Enum):
    CLEANING = "cleaning"
    DEEP_CLEANING = "deep_cleaning"
    MAINTENANCE = "maintenance"
    INSPECTION = "inspection"
    PREPARATION = "preparation"
    CHECKOUT_CLEANING = "checkout_cleaning"


class StaffRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    RECEPTIONIST = "receptionist"
    HOUSEKEEPING = "housekeeping"
    KITCHEN = "kitchen"


# Task types that leave the room clean when completed
CLEANING_TASK_TYPES = (
    HousekeepingTaskType.CLEANING,
    HousekeepingTaskType.DEEP_CLEANING,
    HousekeepingTaskType.CHECKOUT_CLEANING,
)


# ============== Entities ==============

class Property(Base):
    """A hotel managed in InnSync"""
    __tablename__ = "properties"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    address = Column(String(500), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    country = Column(String(100), default="Indonesia")
    postal_code = Column(String(10))
    phone = Column(String(20))
    email = Column(String(100))
    description = Column(Text)
    total_rooms = Column(Integer, default=0)
    amenities = Column(JSON, default=list)
    settings = Column(JSON, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    rooms = relationship("Room", back_populates="hotel", cascade="all, delete-orphan")
    staff = relationship("Staff", back_populates="hotel")


class Staff(Base):
    """Staff account used to log in to the dashboard"""
    __tablename__ = "staff"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=True)
    username = Column(String(50), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), default="")
    email = Column(String(100))
    role = Column(SQLEnum(StaffRole), nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    hotel = relationship("Property", back_populates="staff")
    tasks = relationship("HousekeepingTask", back_populates="assignee")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name or ''}".strip()


class Room(Base):
    """A sellable room"""
    __tablename__ = "rooms"
    __table_args__ = (UniqueConstraint("property_id", "room_number", name="uq_room_number"),)

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False)
    room_number = Column(String(10), nullable=False)
    room_type = Column(String(50), nullable=False)
    floor = Column(Integer, default=1)
    capacity = Column(Integer, default=2)
    base_rate = Column(Numeric(14, 2), nullable=False)
    amenities = Column(JSON, default=list)
    status = Column(SQLEnum(RoomStatus), default=RoomStatus.CLEAN)
    is_active = Column(Boolean, default=True)
    description = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    hotel = relationship("Property", back_populates="rooms")
    reservations = relationship("Reservation", back_populates="room")
    tasks = relationship("HousekeepingTask", back_populates="room")


class Guest(Base):
    """A hotel guest"""
    __tablename__ = "guests"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), default="")
    email = Column(String(100))
    phone = Column(String(20))
    address = Column(String(500))
    city = Column(String(100))
    state = Column(String(100))
    country = Column(String(100))
    postal_code = Column(String(10))
    nationality = Column(String(100))
    date_of_birth = Column(Date)
    identification_type = Column(String(20))    # KTP / Passport / SIM
    identification_number = Column(String(50))
    preferences = Column(JSON, default=dict)
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    reservations = relationship("Reservation", back_populates="guest")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name or ''}".strip()


class Reservation(Base):
    """A booking of one room for a date range"""
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False)
    confirmation_number = Column(String(20), unique=True, nullable=False)
    check_in_date = Column(Date, nullable=False)
    check_out_date = Column(Date, nullable=False)
    adults = Column(Integer, default=1)
    children = Column(Integer, default=0)
    total_nights = Column(Integer, nullable=False)
    rate_per_night = Column(Numeric(14, 2), nullable=False)
    total_amount = Column(Numeric(14, 2), nullable=False)
    tax_amount = Column(Numeric(14, 2), default=0)
    status = Column(SQLEnum(BookingStatus), default=BookingStatus.PENDING)
    source = Column(SQLEnum(BookingSource), default=BookingSource.DIRECT)
    special_requests = Column(Text)
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    room = relationship("Room", back_populates="reservations")
    guest = relationship("Guest", back_populates="reservations")
    payments = relationship("Payment", back_populates="reservation", cascade="all, delete-orphan")
    restaurant_bills = relationship("RestaurantBill", back_populates="reservation")

    @property
    def guest_name(self):
        return self.guest.full_name if self.guest else None

    @property
    def room_number(self):
        return self.room.room_number if self.room else None

    @property
    def room_type(self):
        return self.room.room_type if self.room else None


class Payment(Base):
    """A payment recorded against a reservation"""
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    reservation_id = Column(Integer, ForeignKey("reservations.id"), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    currency = Column(String(3), default="IDR")
    payment_method = Column(SQLEnum(PaymentMethod), nullable=False)
    payment_date = Column(DateTime, default=datetime.utcnow)
    status = Column(SQLEnum(PaymentStatus), default=PaymentStatus.PENDING)
    transaction_id = Column(String(100))
    payment_gateway = Column(String(50))
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    reservation = relationship("Reservation", back_populates="payments")


class HousekeepingTask(Base):
    """A cleaning, inspection or maintenance job for a room"""
    __tablename__ = "housekeeping"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    assigned_to = Column(Integer, ForeignKey("staff.id"), nullable=True)
    task_type = Column(SQLEnum(HousekeepingTaskType), nullable=False)
    priority = Column(Integer, default=2)                # 1 (low) .. 5 (emergency)
    estimated_duration = Column(Integer)                 # minutes
    actual_duration = Column(Integer)                    # minutes
    status = Column(SQLEnum(HousekeepingStatus), default=HousekeepingStatus.PENDING)
    scheduled_date = Column(Date, nullable=False)
    scheduled_time = Column(Time)
    completed_at = Column(DateTime)
    notes = Column(Text)
    checklist = Column(JSON, default=list)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    room = relationship("Room", back_populates="tasks")
    assignee = relationship("Staff", back_populates="tasks")

    @property
    def room_number(self):
        return self.room.room_number if self.room else None

    @property
    def assignee_name(self):
        return self.assignee.full_name if self.assignee else None

    @property
    def is_done(self) -> bool:
        return self.status in (HousekeepingStatus.COMPLETED, HousekeepingStatus.INSPECTED)


def money(value) -> Decimal:
    """Coerce a nullable numeric column value to Decimal"""
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))
