"""
Restaurant entities - menu, orders and the per-reservation restaurant bill
"""
from datetime import datetime
from enum import Enum
from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Text,
    Enum as SQLEnum, Boolean, Numeric, JSON
)
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import relationship
from innsync.database import Base


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderType(str, Enum):
    ROOM_SERVICE = "room_service"
    DINE_IN = "dine_in"
    TAKEAWAY = "takeaway"


class BillStatus(str, Enum):
    OUTSTANDING = "outstanding"
    PAID = "paid"
    VOID = "void"


class DietaryType(str, Enum):
    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"
    HALAL = "halal"
    GLUTEN_FREE = "gluten_free"
    DAIRY_FREE = "dairy_free"
    NUT_FREE = "nut_free"


ACTIVE_ORDER_STATUSES = (
    OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PREPARING, OrderStatus.READY
)
KITCHEN_ORDER_STATUSES = (OrderStatus.CONFIRMED, OrderStatus.PREPARING, OrderStatus.READY)


class RestaurantCategory(Base):
    """Menu section"""
    __tablename__ = "restaurant_categories"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    display_order = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    items = relationship("RestaurantItem", back_populates="category")

    @property
    def item_count(self) -> int:
        return len(self.items)


class RestaurantItem(Base):
    """Menu item"""
    __tablename__ = "restaurant_items"

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("restaurant_categories.id"), nullable=False)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    price = Column(Numeric(14, 2), nullable=False)
    currency = Column(String(3), default="IDR")
    image_url = Column(String(500))
    ingredients = Column(JSON, default=list)
    allergens = Column(JSON, default=list)
    dietary_info = Column(JSON, default=list)            # DietaryType values
    preparation_time = Column(Integer, default=15)       # minutes
    is_available = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    category = relationship("RestaurantCategory", back_populates="items")

    @property
    def category_name(self):
        return self.category.name if self.category else None


class RestaurantOrder(Base):
    """Food and beverage order"""
    __tablename__ = "restaurant_orders"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False)
    reservation_id = Column(Integer, ForeignKey("reservations.id"), nullable=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=True)
    bill_id = Column(Integer, ForeignKey("restaurant_bills.id"), nullable=True)
    order_number = Column(String(20), unique=True, nullable=False)
    status = Column(SQLEnum(OrderStatus), default=OrderStatus.PENDING)
    order_type = Column(SQLEnum(OrderType), default=OrderType.ROOM_SERVICE)
    total_amount = Column(Numeric(14, 2), default=0)
    special_instructions = Column(Text)
    delivery_time = Column(DateTime)
    estimated_ready_time = Column(DateTime)
    completed_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    items = relationship("RestaurantOrderItem", back_populates="order", cascade="all, delete-orphan")
    room = relationship("Room")
    guest = relationship("Guest")

    @property
    def total_prep_time(self) -> int:
        """Longest preparation time among the ordered items"""
        times = [oi.item.preparation_time or 0 for oi in self.items if oi.item is not None]
        return max(times) if times else 0


class RestaurantOrderItem(Base):
    """Order line"""
    __tablename__ = "restaurant_order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("restaurant_orders.id"), nullable=False)
    item_id = Column(Integer, ForeignKey("restaurant_items.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(14, 2), nullable=False)
    total_price = Column(Numeric(14, 2), nullable=False)
    special_instructions = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)

    order = relationship("RestaurantOrder", back_populates="items")
    item = relationship("RestaurantItem")


class RestaurantBill(Base):
    """Restaurant charges accumulated by a reservation, settled before checkout"""
    __tablename__ = "restaurant_bills"

    id = Column(Integer, primary_key=True, index=True)
    reservation_id = Column(Integer, ForeignKey("reservations.id"), nullable=False)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=True)
    total_amount = Column(Numeric(14, 2), default=0)
    paid_amount = Column(Numeric(14, 2), default=0)
    status = Column(SQLEnum(BillStatus), default=BillStatus.OUTSTANDING)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    reservation = relationship("Reservation", back_populates="restaurant_bills")
    guest = relationship("Guest")

    @hybrid_property
    def outstanding_amount(self):
        return (self.total_amount or 0) - (self.paid_amount or 0)

    @outstanding_amount.expression
    def outstanding_amount(cls):
        return cls.total_amount - cls.paid_amount
