"""
Export routes - downloadable reservation, guest and room files
"""
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from innsync.database import get_db
from innsync.exports import MEDIA_TYPES, EXTENSIONS
from innsync.exports.guest_export import export_guests, available_fields
from innsync.exports.reservation_export import export_reservations
from innsync.exports.room_export import export_rooms
from innsync.models.hotel import Staff, BookingStatus
from innsync.routers import http_error
from innsync.security import permissions as perm
from innsync.security.auth import require_permission
from innsync.services.guest_service import GuestService
from innsync.services.reservation_service import ReservationService
from innsync.services.room_service import RoomService
from innsync.utils.dates import today_wib

router = APIRouter(prefix="/exports", tags=["Exports"])


def _download(content: str, name: str, fmt: str) -> Response:
    filename = f"{name}-{today_wib().isoformat()}.{EXTENSIONS[fmt]}"
    return Response(
        content=content,
        media_type=MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/reservations")
def export_reservation_list(
    format: str = "csv",
    property_id: Optional[int] = None,
    status: Optional[BookingStatus] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.EXPORT_READ))
):
    """csv, ical, excel or pdf (printable HTML)"""
    reservations = ReservationService(db).get_reservations(property_id, status, date_from, date_to, limit=100000)
    try:
        content = export_reservations(reservations, format)
    except ValueError as e:
        raise http_error(e)
    return _download(content, "reservasi", format)


@router.get("/guests/fields")
def list_guest_export_fields(current_user: Staff = Depends(require_permission(perm.EXPORT_READ))):
    return available_fields()


@router.get("/guests")
def export_guest_list(
    format: str = "csv",
    fields: Optional[str] = None,
    search: Optional[str] = None,
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.EXPORT_READ))
):
    """`fields` is a comma-separated list of guest columns"""
    guests = GuestService(db).get_guests(search, property_id, limit=100000)
    selected = [f.strip() for f in fields.split(",") if f.strip()] if fields else None
    try:
        content = export_guests(guests, format, selected)
    except ValueError as e:
        raise http_error(e)
    return _download(content, "tamu", format)


@router.get("/rooms")
def export_room_list(
    format: str = "csv",
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.EXPORT_READ))
):
    """csv, json or the text analysis report"""
    rooms = RoomService(db).get_rooms(property_id=property_id)
    try:
        content = export_rooms(rooms, format)
    except ValueError as e:
        raise http_error(e)
    return _download(content, "kamar", format)
