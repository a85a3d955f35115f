"""
Reservation routes - bookings, calendar, check-in and check-out
"""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from innsync.database import get_db
from innsync.models.hotel import Staff, BookingStatus
from innsync.models.schemas import (
    ReservationCreate, ReservationUpdate, ReservationStatusUpdate, ReservationCancel,
    ReservationResponse, ReservationDetailResponse, AvailabilityResponse
)
from innsync.routers import http_error
from innsync.security import permissions as perm
from innsync.security.auth import require_permission
from innsync.services.reservation_service import ReservationService, CheckoutBlockedError

router = APIRouter(prefix="/reservations", tags=["Reservations"])


@router.get("", response_model=List[ReservationResponse])
def list_reservations(
    property_id: Optional[int] = None,
    status: Optional[BookingStatus] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    guest_id: Optional[int] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.RESERVATION_READ))
):
    return ReservationService(db).get_reservations(property_id, status, date_from, date_to, guest_id, search)


@router.get("/calendar", response_model=List[ReservationResponse])
def get_calendar(
    start: date,
    end: date,
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.RESERVATION_READ))
):
    """Reservations overlapping [start, end]"""
    try:
        return ReservationService(db).get_calendar(start, end, property_id)
    except ValueError as e:
        raise http_error(e)


@router.get("/stats")
def get_reservation_stats(
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.RESERVATION_READ))
):
    return ReservationService(db).get_stats(property_id)


@router.get("/availability", response_model=AvailabilityResponse)
def check_availability(
    room_id: int,
    check_in_date: date,
    check_out_date: date,
    exclude_reservation_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.RESERVATION_READ))
):
    result = ReservationService(db).check_availability(
        room_id, check_in_date, check_out_date, exclude_reservation_id
    )
    return AvailabilityResponse(
        room_id=room_id,
        check_in_date=check_in_date,
        check_out_date=check_out_date,
        available=result["available"],
        conflicting_reservation_ids=[r.id for r in result["conflicting_reservations"]],
    )


@router.get("/upcoming", response_model=List[ReservationResponse])
def get_upcoming_arrivals(
    days: int = Query(7, ge=0, le=90),
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.RESERVATION_READ))
):
    """Confirmed or pending arrivals in the next `days` days"""
    return ReservationService(db).get_upcoming(days, property_id)


@router.get("/confirmation/{confirmation_number}", response_model=ReservationResponse)
def get_by_confirmation_number(
    confirmation_number: str,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.RESERVATION_READ))
):
    reservation = ReservationService(db).get_by_confirmation_number(confirmation_number.upper())
    if not reservation:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reservasi tidak ditemukan")
    return reservation


@router.get("/{reservation_id}", response_model=ReservationDetailResponse)
def get_reservation(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.RESERVATION_READ))
):
    detail = ReservationService(db).get_reservation_detail(reservation_id)
    if not detail:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reservasi tidak ditemukan")
    return ReservationDetailResponse(**detail)


@router.post("", response_model=ReservationResponse)
def create_reservation(
    data: ReservationCreate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.RESERVATION_WRITE))
):
    try:
        return ReservationService(db).create_reservation(data)
    except ValueError as e:
        raise http_error(e)


@router.put("/{reservation_id}", response_model=ReservationResponse)
def update_reservation(
    reservation_id: int,
    data: ReservationUpdate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.RESERVATION_WRITE))
):
    try:
        return ReservationService(db).update_reservation(reservation_id, data)
    except ValueError as e:
        raise http_error(e)


@router.patch("/{reservation_id}/status", response_model=ReservationResponse)
def update_reservation_status(
    reservation_id: int,
    data: ReservationStatusUpdate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.RESERVATION_WRITE))
):
    try:
        return ReservationService(db).update_status(reservation_id, data.status, current_user.id)
    except CheckoutBlockedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise http_error(e)


@router.post("/{reservation_id}/cancel", response_model=ReservationResponse)
def cancel_reservation(
    reservation_id: int,
    data: Optional[ReservationCancel] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.RESERVATION_CANCEL))
):
    try:
        return ReservationService(db).cancel_reservation(reservation_id, data.reason if data else None)
    except ValueError as e:
        raise http_error(e)


@router.delete("/{reservation_id}")
def delete_reservation(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.RESERVATION_CANCEL))
):
    try:
        ReservationService(db).delete_reservation(reservation_id)
        return {"message": "Reservasi dihapus"}
    except ValueError as e:
        raise http_error(e)


@router.post("/{reservation_id}/check-in", response_model=ReservationResponse)
def check_in(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.CHECKIN_EXECUTE))
):
    try:
        return ReservationService(db).check_in(reservation_id, current_user.id)
    except ValueError as e:
        raise http_error(e)


@router.post("/{reservation_id}/check-out", response_model=ReservationResponse)
def check_out(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.CHECKOUT_EXECUTE))
):
    """Refused with 409 while restaurant bills are outstanding"""
    try:
        return ReservationService(db).check_out(reservation_id, current_user.id)
    except CheckoutBlockedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise http_error(e)
