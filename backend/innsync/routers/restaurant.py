"""
Restaurant routes - menu, orders, kitchen display, bills and F&B analytics
"""
from datetime import date, timedelta
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from innsync.analytics.restaurant_analytics import (
    calculate_restaurant_analytics, revenue_by_period, item_performance
)
from innsync.database import get_db
from innsync.models.hotel import Staff
from innsync.models.restaurant import OrderStatus, BillStatus, DietaryType
from innsync.models.schemas import (
    CategoryCreate, CategoryUpdate, CategoryReorder, CategoryResponse,
    MenuItemCreate, MenuItemUpdate, MenuItemResponse,
    OrderCreate, OrderStatusUpdate, OrderResponse,
    BillResponse, BillPayment, CheckoutCheckResponse
)
from innsync.routers import http_error
from innsync.security import permissions as perm
from innsync.security.auth import require_permission
from innsync.services.menu_service import MenuService
from innsync.services.order_service import OrderService, serialize_order
from innsync.services.restaurant_bill_service import RestaurantBillService
from innsync.utils.dates import today_wib

router = APIRouter(prefix="/restaurant", tags=["Restaurant"])


# ============== Categories ==============

@router.get("/categories", response_model=List[CategoryResponse])
def list_categories(
    property_id: Optional[int] = None,
    active_only: bool = False,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.MENU_READ))
):
    return MenuService(db).get_categories(property_id, active_only)


@router.post("/categories", response_model=CategoryResponse)
def create_category(
    data: CategoryCreate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.MENU_WRITE))
):
    try:
        return MenuService(db).create_category(data)
    except ValueError as e:
        raise http_error(e)


@router.put("/categories/reorder", response_model=List[CategoryResponse])
def reorder_categories(
    data: CategoryReorder,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.MENU_WRITE))
):
    """display_order follows the position in `category_ids`"""
    try:
        return MenuService(db).reorder_categories(data.category_ids)
    except ValueError as e:
        raise http_error(e)


@router.put("/categories/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    data: CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.MENU_WRITE))
):
    try:
        return MenuService(db).update_category(category_id, data)
    except ValueError as e:
        raise http_error(e)


@router.delete("/categories/{category_id}")
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.MENU_WRITE))
):
    try:
        MenuService(db).delete_category(category_id)
        return {"message": "Kategori dihapus"}
    except ValueError as e:
        raise http_error(e)


# ============== Items ==============

@router.get("/items", response_model=List[MenuItemResponse])
def list_items(
    property_id: Optional[int] = None,
    category_id: Optional[int] = None,
    available_only: bool = False,
    dietary: Optional[DietaryType] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.MENU_READ))
):
    return MenuService(db).get_items(property_id, category_id, available_only, dietary, search)


@router.get("/items/performance")
def get_item_performance(
    property_id: Optional[int] = None,
    category_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.REPORT_READ))
):
    """Items sorted by revenue over the period (last 30 days by default)"""
    end_date = end_date or today_wib()
    start_date = start_date or end_date - timedelta(days=30)
    try:
        orders = OrderService(db).get_orders_between(start_date, end_date, property_id)
    except ValueError as e:
        raise http_error(e)
    return item_performance(orders, category_id)


@router.get("/items/{item_id}", response_model=MenuItemResponse)
def get_item(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.MENU_READ))
):
    item = MenuService(db).get_item(item_id)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu tidak ditemukan")
    return item


@router.post("/items", response_model=MenuItemResponse)
def create_item(
    data: MenuItemCreate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.MENU_WRITE))
):
    try:
        return MenuService(db).create_item(data)
    except ValueError as e:
        raise http_error(e)


@router.put("/items/{item_id}", response_model=MenuItemResponse)
def update_item(
    item_id: int,
    data: MenuItemUpdate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.MENU_WRITE))
):
    try:
        return MenuService(db).update_item(item_id, data)
    except ValueError as e:
        raise http_error(e)


@router.patch("/items/{item_id}/toggle", response_model=MenuItemResponse)
def toggle_item_availability(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.MENU_WRITE))
):
    try:
        return MenuService(db).toggle_availability(item_id)
    except ValueError as e:
        raise http_error(e)


@router.delete("/items/{item_id}")
def delete_item(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.MENU_WRITE))
):
    try:
        MenuService(db).delete_item(item_id)
        return {"message": "Menu dihapus"}
    except ValueError as e:
        raise http_error(e)


# ============== Orders ==============

@router.get("/orders", response_model=List[OrderResponse])
def list_orders(
    property_id: Optional[int] = None,
    status: Optional[OrderStatus] = None,
    reservation_id: Optional[int] = None,
    day: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.ORDER_READ))
):
    orders = OrderService(db).get_orders(property_id, status, reservation_id, day)
    return [serialize_order(o) for o in orders]


@router.get("/orders/active", response_model=List[OrderResponse])
def list_active_orders(
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.ORDER_READ))
):
    return [serialize_order(o) for o in OrderService(db).get_active_orders(property_id)]


@router.get("/orders/kitchen", response_model=List[OrderResponse])
def get_kitchen_display(
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.ORDER_READ))
):
    """Confirmed, preparing and ready orders for the kitchen screen"""
    return OrderService(db).get_kitchen_orders(property_id)


@router.get("/orders/stats")
def get_order_stats(
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.ORDER_READ))
):
    return OrderService(db).get_order_stats(property_id)


@router.get("/orders/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.ORDER_READ))
):
    order = OrderService(db).get_order(order_id)
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pesanan tidak ditemukan")
    return serialize_order(order)


@router.post("/orders", response_model=OrderResponse)
def create_order(
    data: OrderCreate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.ORDER_WRITE))
):
    try:
        return serialize_order(OrderService(db).create_order(data))
    except ValueError as e:
        raise http_error(e)


@router.patch("/orders/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: int,
    data: OrderStatusUpdate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.ORDER_WRITE))
):
    try:
        return serialize_order(OrderService(db).update_status(order_id, data.status))
    except ValueError as e:
        raise http_error(e)


# ============== Bills ==============

@router.get("/bills", response_model=List[BillResponse])
def list_bills(
    reservation_id: Optional[int] = None,
    status: Optional[BillStatus] = None,
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.BILL_READ))
):
    return RestaurantBillService(db).get_bills(reservation_id, status, property_id)


@router.get("/bills/stats")
def get_bill_stats(
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.BILL_READ))
):
    return RestaurantBillService(db).get_bill_stats(property_id)


@router.get("/bills/checkout-check/{reservation_id}", response_model=CheckoutCheckResponse)
def checkout_check(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.BILL_READ))
):
    """Whether outstanding restaurant bills block this reservation's checkout"""
    return RestaurantBillService(db).get_checkout_status(reservation_id)


@router.post("/bills/{bill_id}/pay", response_model=BillResponse)
def pay_bill(
    bill_id: int,
    data: Optional[BillPayment] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.BILL_WRITE))
):
    try:
        return RestaurantBillService(db).pay_bill(bill_id, data.amount if data else None)
    except ValueError as e:
        raise http_error(e)


@router.post("/bills/{bill_id}/void", response_model=BillResponse)
def void_bill(
    bill_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.BILL_WRITE))
):
    try:
        return RestaurantBillService(db).void_bill(bill_id)
    except ValueError as e:
        raise http_error(e)


# ============== Analytics ==============

@router.get("/analytics")
def get_restaurant_analytics(
    property_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.REPORT_READ))
):
    """Sales summary for the period (last 30 days by default)"""
    end_date = end_date or today_wib()
    start_date = start_date or end_date - timedelta(days=30)
    try:
        orders = OrderService(db).get_orders_between(start_date, end_date, property_id)
    except ValueError as e:
        raise http_error(e)
    bills = RestaurantBillService(db).get_bills(status=BillStatus.OUTSTANDING, property_id=property_id)
    result = calculate_restaurant_analytics(orders, bills)
    result["period"] = {"start_date": start_date, "end_date": end_date}
    return result


@router.get("/analytics/revenue")
def get_revenue_by_period(
    period: str = "day",
    property_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.REPORT_READ))
):
    """Revenue grouped by day, week (Sunday start) or month"""
    end_date = end_date or today_wib()
    start_date = start_date or end_date - timedelta(days=30)
    try:
        orders = OrderService(db).get_orders_between(start_date, end_date, property_id)
        return revenue_by_period(orders, period)
    except ValueError as e:
        raise http_error(e)
