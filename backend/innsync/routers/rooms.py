"""
Room routes
"""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from innsync.database import get_db
from innsync.models.hotel import Staff, RoomStatus
from innsync.models.schemas import RoomCreate, RoomUpdate, RoomStatusUpdate, RoomResponse
from innsync.routers import http_error
from innsync.security import permissions as perm
from innsync.security.auth import require_permission
from innsync.services.room_service import RoomService

router = APIRouter(prefix="/rooms", tags=["Rooms"])


@router.get("", response_model=List[RoomResponse])
def list_rooms(
    property_id: Optional[int] = None,
    status: Optional[RoomStatus] = None,
    room_type: Optional[str] = None,
    floor: Optional[int] = None,
    is_active: Optional[bool] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.ROOM_READ))
):
    return RoomService(db).get_rooms(property_id, status, room_type, floor, is_active)


@router.get("/available", response_model=List[RoomResponse])
def list_available_rooms(
    check_in_date: date,
    check_out_date: date,
    property_id: Optional[int] = None,
    guests: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.ROOM_READ))
):
    """Rooms with no conflicting reservation for the stay"""
    try:
        return RoomService(db).get_available_rooms(check_in_date, check_out_date, property_id, guests)
    except ValueError as e:
        raise http_error(e)


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.ROOM_READ))
):
    room = RoomService(db).get_room(room_id)
    if not room:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Kamar tidak ditemukan")
    return room


@router.post("", response_model=RoomResponse)
def create_room(
    data: RoomCreate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.ROOM_WRITE))
):
    try:
        return RoomService(db).create_room(data)
    except ValueError as e:
        raise http_error(e)


@router.put("/{room_id}", response_model=RoomResponse)
def update_room(
    room_id: int,
    data: RoomUpdate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.ROOM_WRITE))
):
    try:
        return RoomService(db).update_room(room_id, data)
    except ValueError as e:
        raise http_error(e)


@router.patch("/{room_id}/status", response_model=RoomResponse)
def update_room_status(
    room_id: int,
    data: RoomStatusUpdate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.ROOM_STATUS))
):
    try:
        return RoomService(db).update_room_status(room_id, data.status)
    except ValueError as e:
        raise http_error(e)


@router.delete("/{room_id}", response_model=RoomResponse)
def deactivate_room(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.ROOM_WRITE))
):
    """Rooms are deactivated, never removed"""
    try:
        return RoomService(db).deactivate_room(room_id)
    except ValueError as e:
        raise http_error(e)
