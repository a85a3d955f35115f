"""
Management report routes
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from innsync.database import get_db
from innsync.models.hotel import Staff
from innsync.routers import http_error
from innsync.security import permissions as perm
from innsync.security.auth import require_permission
from innsync.services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("")
def get_all_reports(
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.REPORT_READ))
):
    return ReportService(db).get_all_reports(property_id)


@router.get("/occupancy-by-room-type")
def get_occupancy_by_room_type(
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.REPORT_READ))
):
    return ReportService(db).occupancy_by_room_type(property_id)


@router.get("/time-series")
def get_time_series(
    days: int = Query(7, ge=1, le=90),
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.REPORT_READ))
):
    return ReportService(db).time_series(days, property_id)


@router.get("/{report_type}")
def get_report(
    report_type: str,
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.REPORT_READ))
):
    """occupancy, revenue, guest, housekeeping, payment or performance"""
    try:
        return ReportService(db).get_report(report_type, property_id)
    except ValueError as e:
        raise http_error(e)
