"""
Pydantic schemas for API requests and responses
"""
from datetime import datetime, date, time
from decimal import Decimal
from typing import Optional, List, Dict, Any, ClassVar, Tuple
from pydantic import BaseModel, Field, ConfigDict, model_validator
from innsync.models.hotel import (
    BookingStatus, BookingSource, RoomStatus, PaymentStatus, PaymentMethod,
    HousekeepingStatus, HousekeepingTaskType, StaffRole
)
from innsync.models.restaurant import OrderStatus, OrderType, BillStatus
from innsync.models.events import EventType


class PartialUpdate(BaseModel):
    """
    Partial update body: omitted fields are left unchanged

    Fields listed in `not_null_fields` back NOT NULL columns, so an explicit
    null for them is rejected instead of being written.
    """
    not_null_fields: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        nulls = [f for f in self.not_null_fields if f in self.model_fields_set and getattr(self, f) is None]
        if nulls:
            raise ValueError(f"Kolom tidak boleh kosong: {', '.join(nulls)}")
        return self


# ============== Auth ==============

class LoginRequest(BaseModel):
    username: str
    password: str


class StaffResponse(BaseModel):
    id: int
    username: str
    first_name: str
    last_name: Optional[str] = None
    email: Optional[str] = None
    role: StaffRole
    property_id: Optional[int] = None
    is_active: bool
    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    staff: StaffResponse


class PasswordStrengthRequest(BaseModel):
    password: str


# ============== Properties ==============

class PropertyBase(BaseModel):
    name: str = Field(..., max_length=200)
    address: str = Field(..., max_length=500)
    city: str = Field(..., max_length=100)
    state: str = Field(..., max_length=100)
    country: str = "Indonesia"
    postal_code: Optional[str] = Field(None, max_length=10)
    phone: Optional[str] = None
    email: Optional[str] = None
    description: Optional[str] = None
    amenities: List[str] = []
    settings: Dict[str, Any] = {}


class PropertyCreate(PropertyBase):
    pass


class PropertyUpdate(PartialUpdate):
    not_null_fields: ClassVar[Tuple[str, ...]] = (
        "name", "address", "city", "state", "country", "amenities", "settings",
    )

    name: Optional[str] = Field(None, max_length=200)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    description: Optional[str] = None
    amenities: Optional[List[str]] = None
    settings: Optional[Dict[str, Any]] = None


class PropertyResponse(PropertyBase):
    id: int
    total_rooms: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class SetupRoom(BaseModel):
    room_number: str = Field(..., max_length=10)
    room_type: str
    floor: int = 1
    capacity: int = Field(default=2, ge=1)
    base_rate: Decimal = Field(..., ge=0)
    amenities: List[str] = []


class PropertySetupRequest(BaseModel):
    property: PropertyCreate
    rooms: List[SetupRoom] = []


# ============== Rooms ==============

class RoomBase(BaseModel):
    property_id: int
    room_number: str = Field(..., max_length=10)
    room_type: str = Field(..., max_length=50)
    floor: int = 1
    capacity: int = Field(default=2, ge=1)
    base_rate: Decimal = Field(..., ge=0)
    amenities: List[str] = []
    description: Optional[str] = None


class RoomCreate(RoomBase):
    status: RoomStatus = RoomStatus.CLEAN


class RoomUpdate(PartialUpdate):
    not_null_fields: ClassVar[Tuple[str, ...]] = (
        "room_number", "room_type", "floor", "capacity", "base_rate", "amenities", "is_active",
    )

    room_number: Optional[str] = Field(None, max_length=10)
    room_type: Optional[str] = None
    floor: Optional[int] = None
    capacity: Optional[int] = Field(None, ge=1)
    base_rate: Optional[Decimal] = Field(None, ge=0)
    amenities: Optional[List[str]] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class RoomStatusUpdate(BaseModel):
    status: RoomStatus


class RoomResponse(RoomBase):
    id: int
    status: RoomStatus
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


# ============== Guests ==============

class GuestBase(BaseModel):
    first_name: str = Field(..., max_length=100)
    last_name: Optional[str] = Field("", max_length=100)
    email: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    nationality: Optional[str] = None
    date_of_birth: Optional[date] = None
    identification_type: Optional[str] = Field(None, max_length=20)
    identification_number: Optional[str] = Field(None, max_length=50)
    preferences: Dict[str, Any] = {}
    notes: Optional[str] = None


class GuestCreate(GuestBase):
    pass


class GuestUpdate(PartialUpdate):
    not_null_fields: ClassVar[Tuple[str, ...]] = ("first_name", "preferences")

    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    nationality: Optional[str] = None
    date_of_birth: Optional[date] = None
    identification_type: Optional[str] = None
    identification_number: Optional[str] = None
    preferences: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None


class GuestResponse(GuestBase):
    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


# ============== Reservations ==============

class ReservationCreate(BaseModel):
    room_id: int
    guest_id: int
    check_in_date: date
    check_out_date: date
    adults: int = Field(default=1, ge=1)
    children: int = Field(default=0, ge=0)
    rate_per_night: Optional[Decimal] = Field(None, ge=0)
    total_amount: Optional[Decimal] = Field(None, ge=0)
    status: BookingStatus = BookingStatus.CONFIRMED
    source: BookingSource = BookingSource.DIRECT
    special_requests: Optional[str] = None
    notes: Optional[str] = None


class ReservationUpdate(PartialUpdate):
    not_null_fields: ClassVar[Tuple[str, ...]] = (
        "room_id", "check_in_date", "check_out_date", "adults", "children", "source",
    )

    room_id: Optional[int] = None
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    adults: Optional[int] = Field(None, ge=1)
    children: Optional[int] = Field(None, ge=0)
    rate_per_night: Optional[Decimal] = Field(None, ge=0)
    total_amount: Optional[Decimal] = Field(None, ge=0)
    source: Optional[BookingSource] = None
    special_requests: Optional[str] = None
    notes: Optional[str] = None


class ReservationStatusUpdate(BaseModel):
    status: BookingStatus


class ReservationCancel(BaseModel):
    reason: Optional[str] = None


class ReservationResponse(BaseModel):
    id: int
    property_id: int
    room_id: int
    guest_id: int
    confirmation_number: str
    check_in_date: date
    check_out_date: date
    adults: int
    children: int
    total_nights: int
    rate_per_night: Decimal
    total_amount: Decimal
    tax_amount: Decimal
    status: BookingStatus
    source: Optional[BookingSource] = None
    special_requests: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    guest_name: Optional[str] = None
    room_number: Optional[str] = None
    room_type: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class AvailabilityResponse(BaseModel):
    room_id: int
    check_in_date: date
    check_out_date: date
    available: bool
    conflicting_reservation_ids: List[int] = []


# ============== Payments ==============

class PaymentCreate(BaseModel):
    reservation_id: int
    amount: Decimal = Field(..., gt=0)
    payment_method: PaymentMethod
    status: PaymentStatus = PaymentStatus.COMPLETED
    currency: str = "IDR"
    transaction_id: Optional[str] = None
    payment_gateway: Optional[str] = None
    notes: Optional[str] = None


class PaymentUpdate(PartialUpdate):
    not_null_fields: ClassVar[Tuple[str, ...]] = ("payment_method", "status")

    payment_method: Optional[PaymentMethod] = None
    status: Optional[PaymentStatus] = None
    transaction_id: Optional[str] = None
    payment_gateway: Optional[str] = None
    notes: Optional[str] = None


class PaymentRefund(BaseModel):
    reason: str = Field(..., min_length=1)


class PaymentResponse(BaseModel):
    id: int
    reservation_id: int
    amount: Decimal
    currency: str
    payment_method: PaymentMethod
    payment_date: datetime
    status: PaymentStatus
    transaction_id: Optional[str] = None
    payment_gateway: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class ReservationDetailResponse(ReservationResponse):
    payments: List[PaymentResponse] = []
    paid_amount: Decimal = Decimal("0")
    restaurant_outstanding: Decimal = Decimal("0")


class GuestDetailResponse(GuestResponse):
    reservations: List[ReservationResponse] = []
    reservation_count: int = 0
    total_spent: Decimal = Decimal("0")


# ============== Housekeeping ==============

class TaskCreate(BaseModel):
    room_id: int
    assigned_to: Optional[int] = None
    task_type: HousekeepingTaskType
    priority: int = Field(default=2, ge=1, le=5)
    estimated_duration: Optional[int] = Field(None, ge=0)
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[time] = None
    notes: Optional[str] = None
    checklist: List[Dict[str, Any]] = []


class TaskUpdate(PartialUpdate):
    not_null_fields: ClassVar[Tuple[str, ...]] = ("task_type", "priority", "scheduled_date")

    assigned_to: Optional[int] = None
    task_type: Optional[HousekeepingTaskType] = None
    priority: Optional[int] = Field(None, ge=1, le=5)
    estimated_duration: Optional[int] = Field(None, ge=0)
    actual_duration: Optional[int] = Field(None, ge=0)
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[time] = None
    notes: Optional[str] = None
    checklist: Optional[List[Dict[str, Any]]] = None


class TaskStatusUpdate(BaseModel):
    status: HousekeepingStatus
    actual_duration: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None


class TaskResponse(BaseModel):
    id: int
    property_id: int
    room_id: int
    assigned_to: Optional[int] = None
    task_type: HousekeepingTaskType
    priority: int
    estimated_duration: Optional[int] = None
    actual_duration: Optional[int] = None
    status: HousekeepingStatus
    scheduled_date: date
    scheduled_time: Optional[time] = None
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None
    checklist: List[Dict[str, Any]] = []
    created_at: datetime
    room_number: Optional[str] = None
    assignee_name: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


# ============== Restaurant ==============

class CategoryCreate(BaseModel):
    property_id: int
    name: str = Field(..., max_length=100)
    description: Optional[str] = None
    display_order: int = 0
    is_active: bool = True


class CategoryUpdate(PartialUpdate):
    not_null_fields: ClassVar[Tuple[str, ...]] = ("name", "display_order", "is_active")

    name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    display_order: Optional[int] = None
    is_active: Optional[bool] = None


class CategoryReorder(BaseModel):
    category_ids: List[int]


class CategoryResponse(CategoryCreate):
    id: int
    created_at: datetime
    item_count: int = 0
    model_config = ConfigDict(from_attributes=True)


class MenuItemCreate(BaseModel):
    category_id: int
    name: str = Field(..., max_length=200)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    currency: str = "IDR"
    image_url: Optional[str] = None
    ingredients: List[str] = []
    allergens: List[str] = []
    dietary_info: List[str] = []
    preparation_time: int = Field(default=15, ge=0)
    is_available: bool = True


class MenuItemUpdate(PartialUpdate):
    not_null_fields: ClassVar[Tuple[str, ...]] = (
        "category_id", "name", "price", "ingredients", "allergens", "dietary_info",
        "preparation_time", "is_available",
    )

    category_id: Optional[int] = None
    name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    image_url: Optional[str] = None
    ingredients: Optional[List[str]] = None
    allergens: Optional[List[str]] = None
    dietary_info: Optional[List[str]] = None
    preparation_time: Optional[int] = Field(None, ge=0)
    is_available: Optional[bool] = None


class MenuItemResponse(MenuItemCreate):
    id: int
    created_at: datetime
    category_name: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class OrderItemCreate(BaseModel):
    item_id: int
    quantity: int = Field(default=1, ge=1)
    unit_price: Optional[Decimal] = Field(None, ge=0)
    special_instructions: Optional[str] = None


class OrderCreate(BaseModel):
    property_id: int
    reservation_id: Optional[int] = None
    guest_id: Optional[int] = None
    room_id: Optional[int] = None
    order_type: OrderType = OrderType.ROOM_SERVICE
    special_instructions: Optional[str] = None
    delivery_time: Optional[datetime] = None
    items: List[OrderItemCreate] = Field(..., min_length=1)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderItemResponse(BaseModel):
    id: int
    item_id: int
    item_name: Optional[str] = None
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    preparation_time: Optional[int] = None
    special_instructions: Optional[str] = None


class OrderResponse(BaseModel):
    id: int
    property_id: int
    reservation_id: Optional[int] = None
    guest_id: Optional[int] = None
    room_id: Optional[int] = None
    bill_id: Optional[int] = None
    room_number: Optional[str] = None
    guest_name: Optional[str] = None
    order_number: str
    status: OrderStatus
    order_type: OrderType
    total_amount: Decimal
    special_instructions: Optional[str] = None
    delivery_time: Optional[datetime] = None
    estimated_ready_time: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    total_prep_time: int = 0
    items: List[OrderItemResponse] = []


class BillResponse(BaseModel):
    id: int
    reservation_id: int
    guest_id: Optional[int] = None
    total_amount: Decimal
    paid_amount: Decimal
    outstanding_amount: Decimal
    status: BillStatus
    created_at: datetime
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class BillPayment(BaseModel):
    amount: Optional[Decimal] = Field(None, gt=0)


class CheckoutCheckResponse(BaseModel):
    reservation_id: int
    has_outstanding: bool
    total_outstanding: Decimal
    bills: List[BillResponse] = []


# ============== Webhooks ==============

class WebhookCreate(BaseModel):
    url: str = Field(..., max_length=500)
    events: List[EventType] = Field(..., min_length=1)
    secret: Optional[str] = Field(None, min_length=8)
    active: bool = True


class WebhookUpdate(PartialUpdate):
    not_null_fields: ClassVar[Tuple[str, ...]] = ("url", "events", "secret", "active")

    url: Optional[str] = Field(None, max_length=500)
    events: Optional[List[EventType]] = None
    secret: Optional[str] = Field(None, min_length=8)
    active: Optional[bool] = None


class WebhookResponse(BaseModel):
    id: int
    url: str
    events: List[str]
    active: bool
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class WebhookCreatedResponse(WebhookResponse):
    secret: str


class WebhookDeliveryResult(BaseModel):
    webhook_id: int
    success: bool
    status_code: Optional[int] = None
    error: Optional[str] = None


# ============== Preferences ==============

class PreferenceValue(BaseModel):
    value: Any = None


class PreferenceResponse(BaseModel):
    key: str
    value: Any = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


# ============== Backup ==============

class BackupRestoreRequest(BaseModel):
    backup: Dict[str, Any]
    dry_run: bool = False
    validate_integrity: bool = True
