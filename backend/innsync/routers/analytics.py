"""
Analytics routes over guests, rooms and housekeeping
"""
from typing import Optional
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session
from innsync.analytics.guest_analytics import calculate_guest_analytics
from innsync.analytics.housekeeping_analytics import (
    calculate_housekeeping_analytics, calculate_staff_performance, generate_task_summary
)
from innsync.analytics.room_analytics import calculate_room_analytics, calculate_room_utilization
from innsync.database import get_db
from innsync.models.hotel import Staff
from innsync.security import permissions as perm
from innsync.security.auth import require_permission
from innsync.services.guest_service import GuestService
from innsync.services.housekeeping_service import HousekeepingService
from innsync.services.reservation_service import ReservationService
from innsync.services.room_service import RoomService

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/guests")
def get_guest_analytics(
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.REPORT_READ))
):
    guests = GuestService(db).get_guests(property_id=property_id, limit=100000)
    return calculate_guest_analytics(guests)


@router.get("/rooms")
def get_room_analytics(
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.REPORT_READ))
):
    rooms = RoomService(db).get_rooms(property_id=property_id)
    reservations = ReservationService(db).get_reservations(property_id=property_id, limit=100000)
    result = calculate_room_analytics(rooms, reservations)
    result["capacity"] = calculate_room_utilization(rooms)
    return result


@router.get("/housekeeping")
def get_housekeeping_analytics(
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.TASK_READ))
):
    return calculate_housekeeping_analytics(HousekeepingService(db).get_tasks(property_id=property_id))


@router.get("/housekeeping/staff")
def get_staff_performance(
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.TASK_READ))
):
    return calculate_staff_performance(HousekeepingService(db).get_tasks(property_id=property_id))


@router.get("/housekeeping/summary", response_class=PlainTextResponse)
def get_housekeeping_summary(
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.TASK_READ))
):
    return generate_task_summary(HousekeepingService(db).get_tasks(property_id=property_id))
