"""
Payment service - reservation payments, refunds and payment statistics
"""
import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from innsync.models.hotel import (
    Payment, PaymentStatus, PaymentMethod, Reservation, BookingStatus, money
)
from innsync.models.schemas import PaymentCreate, PaymentUpdate
from innsync.services.query_cache import invalidate_dashboard
from innsync.utils.dates import today_wib, local_date, month_bounds
from innsync.utils.validation import validate_payment_amount

logger = logging.getLogger(__name__)


class PaymentService:

    def __init__(self, db: Session):
        self.db = db

    def get_payments(self, property_id: Optional[int] = None, reservation_id: Optional[int] = None,
                     status: Optional[PaymentStatus] = None, payment_method: Optional[PaymentMethod] = None,
                     limit: int = 500) -> List[Payment]:
        query = self.db.query(Payment)
        if property_id:
            query = query.join(Reservation).filter(Reservation.property_id == property_id)
        if reservation_id:
            query = query.filter(Payment.reservation_id == reservation_id)
        if status:
            query = query.filter(Payment.status == status)
        if payment_method:
            query = query.filter(Payment.payment_method == payment_method)
        return query.order_by(Payment.payment_date.desc(), Payment.id.desc()).limit(limit).all()

    def get_payment(self, payment_id: int) -> Optional[Payment]:
        return self.db.query(Payment).filter(Payment.id == payment_id).first()

    def _completed_total(self, reservation_id: int, exclude_id: Optional[int] = None) -> Decimal:
        query = self.db.query(Payment).filter(
            Payment.reservation_id == reservation_id,
            Payment.status == PaymentStatus.COMPLETED
        )
        if exclude_id:
            query = query.filter(Payment.id != exclude_id)
        return sum((money(p.amount) for p in query.all()), Decimal("0"))

    def create_payment(self, data: PaymentCreate) -> Payment:
        reservation = self.db.query(Reservation).filter(Reservation.id == data.reservation_id).first()
        if not reservation:
            raise ValueError("Reservasi tidak ditemukan")
        if reservation.status == BookingStatus.CANCELLED:
            raise ValueError("Tidak dapat menerima pembayaran untuk reservasi yang dibatalkan")

        valid, message = validate_payment_amount(
            data.amount, reservation.total_amount, self._completed_total(reservation.id)
        )
        if not valid:
            raise ValueError(message)

        payment = Payment(**data.model_dump())
        self.db.add(payment)
        self.db.commit()
        self.db.refresh(payment)
        invalidate_dashboard()
        logger.info(f"Payment {payment.id} of {payment.amount} recorded for reservation {reservation.id}")
        return payment

    def update_payment(self, payment_id: int, data: PaymentUpdate) -> Payment:
        payment = self.get_payment(payment_id)
        if not payment:
            raise ValueError("Pembayaran tidak ditemukan")
        if payment.status == PaymentStatus.REFUNDED:
            raise ValueError("Pembayaran yang sudah dikembalikan tidak dapat diubah")

        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("status") == PaymentStatus.REFUNDED:
            raise ValueError("Gunakan proses refund untuk mengembalikan pembayaran")
        if update_data.get("status") == PaymentStatus.COMPLETED and payment.status != PaymentStatus.COMPLETED:
            valid, message = validate_payment_amount(
                payment.amount, payment.reservation.total_amount,
                self._completed_total(payment.reservation_id, exclude_id=payment.id)
            )
            if not valid:
                raise ValueError(message)

        for key, value in update_data.items():
            setattr(payment, key, value)

        self.db.commit()
        self.db.refresh(payment)
        invalidate_dashboard()
        return payment

    def refund_payment(self, payment_id: int, reason: str) -> Payment:
        payment = self.get_payment(payment_id)
        if not payment:
            raise ValueError("Pembayaran tidak ditemukan")
        if payment.status != PaymentStatus.COMPLETED:
            raise ValueError("Hanya pembayaran yang selesai yang dapat dikembalikan")

        payment.status = PaymentStatus.REFUNDED
        refund_note = f"Dikembalikan: {reason}"
        payment.notes = f"{payment.notes}\n{refund_note}" if payment.notes else refund_note

        self.db.commit()
        self.db.refresh(payment)
        invalidate_dashboard()
        logger.info(f"Payment {payment.id} refunded")
        return payment

    def get_payment_stats(self, property_id: Optional[int] = None, today: Optional[date] = None) -> dict:
        """Revenue, pending amounts and breakdowns by method and status"""
        today = today or today_wib()
        month_start, next_month = month_bounds(today)
        payments = self.get_payments(property_id=property_id, limit=100000)

        completed = [p for p in payments if p.status == PaymentStatus.COMPLETED]
        today_payments = [p for p in payments if local_date(p.payment_date) == today]
        month_payments = [p for p in payments if month_start <= local_date(p.payment_date) < next_month]

        def total(rows) -> float:
            return float(sum((money(p.amount) for p in rows), Decimal("0")))

        by_method = {}
        for method in PaymentMethod:
            rows = [p for p in completed if p.payment_method == method]
            by_method[method.value] = {"count": len(rows), "amount": total(rows)}

        by_status = {s.value: 0 for s in PaymentStatus}
        for p in payments:
            by_status[p.status.value] += 1

        return {
            "total_revenue": total(completed),
            "pending_amount": total(p for p in payments if p.status == PaymentStatus.PENDING),
            "refunded_amount": total(p for p in payments if p.status == PaymentStatus.REFUNDED),
            "total_transactions": len(payments),
            "today_transactions": len(today_payments),
            "today_revenue": total(p for p in today_payments if p.status == PaymentStatus.COMPLETED),
            "month_transactions": len(month_payments),
            "month_revenue": total(p for p in month_payments if p.status == PaymentStatus.COMPLETED),
            "by_method": by_method,
            "by_status": by_status,
        }
