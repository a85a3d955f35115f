"""
Guest routes
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from innsync.database import get_db
from innsync.models.hotel import Staff
from innsync.models.schemas import (
    GuestCreate, GuestUpdate, GuestResponse, GuestDetailResponse, ReservationResponse
)
from innsync.routers import http_error
from innsync.security import permissions as perm
from innsync.security.auth import require_permission
from innsync.services.guest_service import GuestService

router = APIRouter(prefix="/guests", tags=["Guests"])


@router.get("", response_model=List[GuestResponse])
def list_guests(
    search: Optional[str] = None,
    property_id: Optional[int] = None,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.GUEST_READ))
):
    """Search by name, email, phone or identification number"""
    return GuestService(db).get_guests(search, property_id, limit)


@router.get("/{guest_id}", response_model=GuestDetailResponse)
def get_guest(
    guest_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.GUEST_READ))
):
    service = GuestService(db)
    guest = service.get_guest(guest_id)
    if not guest:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tamu tidak ditemukan")
    history = service.get_guest_history(guest_id)
    return GuestDetailResponse(
        **GuestResponse.model_validate(guest).model_dump(),
        reservations=[ReservationResponse.model_validate(r) for r in history["reservations"]],
        reservation_count=history["reservation_count"],
        total_spent=history["total_spent"],
    )


@router.post("", response_model=GuestResponse)
def create_guest(
    data: GuestCreate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.GUEST_WRITE))
):
    try:
        return GuestService(db).create_guest(data)
    except ValueError as e:
        raise http_error(e)


@router.put("/{guest_id}", response_model=GuestResponse)
def update_guest(
    guest_id: int,
    data: GuestUpdate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.GUEST_WRITE))
):
    try:
        return GuestService(db).update_guest(guest_id, data)
    except ValueError as e:
        raise http_error(e)


@router.delete("/{guest_id}")
def delete_guest(
    guest_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.GUEST_WRITE))
):
    try:
        GuestService(db).delete_guest(guest_id)
        return {"message": "Tamu dihapus"}
    except ValueError as e:
        raise http_error(e)
