"""
Order service - restaurant orders, kitchen display and order statistics

Orders attached to a reservation are charged to that reservation's
restaurant bill.
"""
import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from innsync.database import next_daily_number
from innsync.models.hotel import Reservation, BookingStatus, money
from innsync.models.restaurant import (
    RestaurantOrder, RestaurantOrderItem, RestaurantItem, OrderStatus,
    ACTIVE_ORDER_STATUSES, KITCHEN_ORDER_STATUSES
)
from innsync.models.schemas import OrderCreate
from innsync.services.query_cache import kitchen_cache, invalidate_kitchen
from innsync.services.restaurant_bill_service import RestaurantBillService
from innsync.utils.dates import now_wib, today_wib, local_date

logger = logging.getLogger(__name__)

ORDER_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.READY, OrderStatus.CANCELLED},
    OrderStatus.READY: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


def serialize_order(order: RestaurantOrder) -> dict:
    """Plain dict view of an order and its lines"""
    return {
        "id": order.id,
        "property_id": order.property_id,
        "reservation_id": order.reservation_id,
        "guest_id": order.guest_id,
        "room_id": order.room_id,
        "bill_id": order.bill_id,
        "room_number": order.room.room_number if order.room else None,
        "guest_name": order.guest.full_name if order.guest else None,
        "order_number": order.order_number,
        "status": order.status,
        "order_type": order.order_type,
        "total_amount": money(order.total_amount),
        "special_instructions": order.special_instructions,
        "delivery_time": order.delivery_time,
        "estimated_ready_time": order.estimated_ready_time,
        "completed_at": order.completed_at,
        "created_at": order.created_at,
        "total_prep_time": order.total_prep_time,
        "items": [
            {
                "id": line.id,
                "item_id": line.item_id,
                "item_name": line.item.name if line.item else None,
                "quantity": line.quantity,
                "unit_price": money(line.unit_price),
                "total_price": money(line.total_price),
                "preparation_time": line.item.preparation_time if line.item else None,
                "special_instructions": line.special_instructions,
            }
            for line in order.items
        ],
    }


class OrderService:

    def __init__(self, db: Session):
        self.db = db
        self.bills = RestaurantBillService(db)

    def _generate_order_number(self) -> str:
        prefix = f"ORD{now_wib().strftime('%Y%m%d')}"
        return next_daily_number(self.db, RestaurantOrder.order_number, prefix)

    def get_orders(self, property_id: Optional[int] = None, status: Optional[OrderStatus] = None,
                   reservation_id: Optional[int] = None, day: Optional[date] = None,
                   limit: int = 200) -> List[RestaurantOrder]:
        query = self.db.query(RestaurantOrder)
        if property_id:
            query = query.filter(RestaurantOrder.property_id == property_id)
        if status:
            query = query.filter(RestaurantOrder.status == status)
        if reservation_id:
            query = query.filter(RestaurantOrder.reservation_id == reservation_id)
        orders = query.order_by(RestaurantOrder.created_at.desc(), RestaurantOrder.id.desc()).limit(limit).all()
        if day:
            orders = [o for o in orders if local_date(o.created_at) == day]
        return orders

    def get_orders_between(self, start: date, end: date,
                           property_id: Optional[int] = None) -> List[RestaurantOrder]:
        """Orders placed on business dates start..end inclusive"""
        if end < start:
            raise ValueError("Tanggal akhir harus setelah tanggal awal")
        query = self.db.query(RestaurantOrder)
        if property_id:
            query = query.filter(RestaurantOrder.property_id == property_id)
        orders = query.order_by(RestaurantOrder.created_at).all()
        return [o for o in orders if start <= local_date(o.created_at) <= end]

    def get_order(self, order_id: int) -> Optional[RestaurantOrder]:
        return self.db.query(RestaurantOrder).filter(RestaurantOrder.id == order_id).first()

    def get_active_orders(self, property_id: Optional[int] = None) -> List[RestaurantOrder]:
        query = self.db.query(RestaurantOrder).filter(RestaurantOrder.status.in_(ACTIVE_ORDER_STATUSES))
        if property_id:
            query = query.filter(RestaurantOrder.property_id == property_id)
        return query.order_by(RestaurantOrder.created_at, RestaurantOrder.id).all()

    def get_kitchen_orders(self, property_id: Optional[int] = None) -> List[dict]:
        """Orders the kitchen is working on, oldest first; cached briefly between polls"""
        def load():
            orders = self.db.query(RestaurantOrder).filter(
                RestaurantOrder.status.in_(KITCHEN_ORDER_STATUSES)
            )
            if property_id:
                orders = orders.filter(RestaurantOrder.property_id == property_id)
            return [serialize_order(o) for o in orders.order_by(RestaurantOrder.created_at, RestaurantOrder.id)]

        return kitchen_cache.get_or_set(("kitchen", property_id), load)

    def create_order(self, data: OrderCreate) -> RestaurantOrder:
        reservation = None
        if data.reservation_id:
            reservation = self.db.query(Reservation).filter(Reservation.id == data.reservation_id).first()
            if not reservation:
                raise ValueError("Reservasi tidak ditemukan")
            if reservation.status != BookingStatus.CHECKED_IN:
                raise ValueError("Pesanan ke kamar hanya untuk tamu yang sedang menginap")

        order = RestaurantOrder(
            property_id=data.property_id,
            reservation_id=data.reservation_id,
            guest_id=data.guest_id or (reservation.guest_id if reservation else None),
            room_id=data.room_id or (reservation.room_id if reservation else None),
            order_number=self._generate_order_number(),
            status=OrderStatus.PENDING,
            order_type=data.order_type,
            special_instructions=data.special_instructions,
            delivery_time=data.delivery_time,
        )

        total = Decimal("0")
        for line in data.items:
            item = self.db.query(RestaurantItem).filter(RestaurantItem.id == line.item_id).first()
            if not item:
                raise ValueError(f"Menu {line.item_id} tidak ditemukan")
            if not item.is_available:
                raise ValueError(f"{item.name} sedang tidak tersedia")

            unit_price = money(line.unit_price if line.unit_price is not None else item.price)
            line_total = unit_price * line.quantity
            total += line_total
            order.items.append(RestaurantOrderItem(
                item_id=item.id,
                quantity=line.quantity,
                unit_price=unit_price,
                total_price=line_total,
                special_instructions=line.special_instructions,
            ))
        order.total_amount = total

        self.db.add(order)
        if reservation:
            order.bill_id = self.bills.add_charge(reservation, total).id
        self.db.commit()
        self.db.refresh(order)
        invalidate_kitchen()

        logger.info(f"Created order {order.order_number} total {total}")
        return order

    def update_status(self, order_id: int, status: OrderStatus) -> RestaurantOrder:
        order = self.get_order(order_id)
        if not order:
            raise ValueError("Pesanan tidak ditemukan")
        if status != order.status and status not in ORDER_TRANSITIONS[order.status]:
            raise ValueError(f"Status pesanan tidak dapat diubah dari {order.status.value} ke {status.value}")

        if status == OrderStatus.CANCELLED and order.status != status and order.bill_id:
            self.bills.remove_charge(order.bill_id, order.total_amount)

        order.status = status
        now = datetime.utcnow()
        if status == OrderStatus.CONFIRMED:
            order.estimated_ready_time = now + timedelta(minutes=order.total_prep_time)
        elif status in (OrderStatus.DELIVERED, OrderStatus.CANCELLED):
            order.completed_at = now

        self.db.commit()
        self.db.refresh(order)
        invalidate_kitchen()
        logger.info(f"Order {order.order_number} -> {status.value}")
        return order

    def get_order_stats(self, property_id: Optional[int] = None, today: Optional[date] = None) -> dict:
        today = today or today_wib()
        orders = [o for o in self.get_orders(property_id=property_id, limit=100000)
                  if local_date(o.created_at) == today]
        billable = [o for o in orders if o.status != OrderStatus.CANCELLED]
        revenue = sum((money(o.total_amount) for o in billable), Decimal("0"))

        return {
            "today_orders": len(orders),
            "today_revenue": float(revenue),
            "average_order_value": float(revenue / len(billable)) if billable else 0.0,
            "pending": sum(1 for o in orders if o.status == OrderStatus.PENDING),
            "in_kitchen": sum(1 for o in orders if o.status in KITCHEN_ORDER_STATUSES),
            "delivered": sum(1 for o in orders if o.status == OrderStatus.DELIVERED),
            "cancelled": sum(1 for o in orders if o.status == OrderStatus.CANCELLED),
        }
