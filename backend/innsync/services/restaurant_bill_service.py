"""
Restaurant bill service - per-reservation F&B charges and the checkout gate

A reservation has at most one outstanding restaurant bill at a time. Orders
charged to the reservation accumulate on it until it is paid or voided.
"""
import logging
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from innsync.models.hotel import Reservation, money
from innsync.models.restaurant import RestaurantBill, BillStatus

logger = logging.getLogger(__name__)


class RestaurantBillService:

    def __init__(self, db: Session):
        self.db = db

    def get_bills(self, reservation_id: Optional[int] = None, status: Optional[BillStatus] = None,
                  property_id: Optional[int] = None) -> List[RestaurantBill]:
        query = self.db.query(RestaurantBill)
        if reservation_id:
            query = query.filter(RestaurantBill.reservation_id == reservation_id)
        if status:
            query = query.filter(RestaurantBill.status == status)
        if property_id:
            query = query.join(Reservation).filter(Reservation.property_id == property_id)
        return query.order_by(RestaurantBill.created_at.desc(), RestaurantBill.id.desc()).all()

    def get_bill(self, bill_id: int) -> Optional[RestaurantBill]:
        return self.db.query(RestaurantBill).filter(RestaurantBill.id == bill_id).first()

    def get_checkout_status(self, reservation_id: int) -> dict:
        """
        Outstanding restaurant balance for a reservation

        Checkout is allowed only when `total_outstanding` is zero.
        """
        bills = self.get_bills(reservation_id=reservation_id, status=BillStatus.OUTSTANDING)
        total = sum((money(b.outstanding_amount) for b in bills), Decimal("0"))
        return {
            "reservation_id": reservation_id,
            "has_outstanding": total > 0,
            "total_outstanding": total,
            "bills": bills,
        }

    def get_or_create_open_bill(self, reservation: Reservation) -> RestaurantBill:
        bill = self.db.query(RestaurantBill).filter(
            RestaurantBill.reservation_id == reservation.id,
            RestaurantBill.status == BillStatus.OUTSTANDING
        ).first()
        if bill:
            return bill

        bill = RestaurantBill(
            reservation_id=reservation.id,
            guest_id=reservation.guest_id,
            total_amount=Decimal("0"),
            paid_amount=Decimal("0"),
            status=BillStatus.OUTSTANDING,
        )
        self.db.add(bill)
        self.db.flush()
        return bill

    def add_charge(self, reservation: Reservation, amount: Decimal) -> RestaurantBill:
        """Add an order total to the reservation's open bill (caller commits)"""
        bill = self.get_or_create_open_bill(reservation)
        bill.total_amount = money(bill.total_amount) + money(amount)
        return bill

    def remove_charge(self, bill_id: int, amount: Decimal) -> Optional[RestaurantBill]:
        """
        Take a cancelled order's total back off the bill it was charged to (caller commits)

        A voided bill is left alone. A paid bill cannot give the charge back,
        so the cancellation is refused.
        """
        bill = self.get_bill(bill_id)
        if not bill or bill.status == BillStatus.VOID:
            return None
        if bill.status == BillStatus.PAID:
            raise ValueError("Pesanan pada tagihan yang sudah dibayar tidak dapat dibatalkan")
        bill.total_amount = max(money(bill.total_amount) - money(amount), Decimal("0"))
        if money(bill.total_amount) > 0 and money(bill.paid_amount) >= money(bill.total_amount):
            bill.status = BillStatus.PAID
        return bill

    def pay_bill(self, bill_id: int, amount: Optional[Decimal] = None) -> RestaurantBill:
        """Record a payment; without an amount the bill is settled in full"""
        bill = self.get_bill(bill_id)
        if not bill:
            raise ValueError("Tagihan tidak ditemukan")
        if bill.status != BillStatus.OUTSTANDING:
            raise ValueError("Tagihan tidak dalam status outstanding")

        total = money(bill.total_amount)
        if amount is None:
            new_paid = total
        else:
            if money(amount) <= 0:
                raise ValueError("Jumlah pembayaran harus lebih dari 0")
            new_paid = money(bill.paid_amount) + money(amount)

        bill.paid_amount = new_paid
        if new_paid >= total:
            bill.status = BillStatus.PAID

        self.db.commit()
        self.db.refresh(bill)
        logger.info(f"Restaurant bill {bill.id} paid {new_paid}/{total}")
        return bill

    def void_bill(self, bill_id: int) -> RestaurantBill:
        bill = self.get_bill(bill_id)
        if not bill:
            raise ValueError("Tagihan tidak ditemukan")
        if bill.status == BillStatus.PAID:
            raise ValueError("Tagihan yang sudah dibayar tidak dapat dibatalkan")

        bill.status = BillStatus.VOID
        self.db.commit()
        self.db.refresh(bill)
        logger.info(f"Restaurant bill {bill.id} voided")
        return bill

    def get_bill_stats(self, property_id: Optional[int] = None) -> dict:
        query = self.db.query(
            RestaurantBill.status,
            func.count(RestaurantBill.id),
            func.coalesce(func.sum(RestaurantBill.total_amount), 0),
            func.coalesce(func.sum(RestaurantBill.paid_amount), 0),
        )
        if property_id:
            query = query.join(Reservation).filter(Reservation.property_id == property_id)
        rows = query.group_by(RestaurantBill.status).all()

        stats = {
            "total_bills": 0,
            "outstanding_bills": 0,
            "paid_bills": 0,
            "void_bills": 0,
            "total_billed": 0.0,
            "total_paid": 0.0,
            "total_outstanding": 0.0,
        }
        for status, count, total, paid in rows:
            stats["total_bills"] += count
            stats[f"{status.value}_bills"] = count
            if status == BillStatus.VOID:
                continue
            stats["total_billed"] += float(total)
            stats["total_paid"] += float(paid)
            if status == BillStatus.OUTSTANDING:
                stats["total_outstanding"] += float(total) - float(paid)

        stats["collection_rate"] = (
            round(stats["total_paid"] / stats["total_billed"] * 100, 1) if stats["total_billed"] > 0 else 0
        )
        return stats
