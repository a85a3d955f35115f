"""
Payment routes
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from innsync.database import get_db
from innsync.models.hotel import Staff, PaymentStatus
from innsync.models.schemas import PaymentCreate, PaymentUpdate, PaymentRefund, PaymentResponse
from innsync.routers import http_error
from innsync.security import permissions as perm
from innsync.security.auth import require_permission
from innsync.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.get("", response_model=List[PaymentResponse])
def list_payments(
    property_id: Optional[int] = None,
    reservation_id: Optional[int] = None,
    status: Optional[PaymentStatus] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.PAYMENT_READ))
):
    return PaymentService(db).get_payments(property_id, reservation_id, status)


@router.get("/stats")
def get_payment_stats(
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.PAYMENT_READ))
):
    return PaymentService(db).get_payment_stats(property_id)


@router.get("/{payment_id}", response_model=PaymentResponse)
def get_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.PAYMENT_READ))
):
    payment = PaymentService(db).get_payment(payment_id)
    if not payment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pembayaran tidak ditemukan")
    return payment


@router.post("", response_model=PaymentResponse)
def create_payment(
    data: PaymentCreate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.PAYMENT_WRITE))
):
    try:
        return PaymentService(db).create_payment(data)
    except ValueError as e:
        raise http_error(e)


@router.put("/{payment_id}", response_model=PaymentResponse)
def update_payment(
    payment_id: int,
    data: PaymentUpdate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.PAYMENT_WRITE))
):
    try:
        return PaymentService(db).update_payment(payment_id, data)
    except ValueError as e:
        raise http_error(e)


@router.post("/{payment_id}/refund", response_model=PaymentResponse)
def refund_payment(
    payment_id: int,
    data: PaymentRefund,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.PAYMENT_REFUND))
):
    try:
        return PaymentService(db).refund_payment(payment_id, data.reason)
    except ValueError as e:
        raise http_error(e)
