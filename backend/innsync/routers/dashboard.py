"""
Dashboard routes - cached headline statistics, activity feed and today's movements
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from innsync.database import get_db
from innsync.models.hotel import Staff
from innsync.models.schemas import ReservationResponse, TaskResponse
from innsync.security.auth import get_current_user
from innsync.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats")
def get_dashboard_stats(
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(get_current_user)
):
    return DashboardService(db).get_stats(property_id)


@router.get("/activities")
def get_recent_activities(
    limit: int = Query(10, ge=1, le=100),
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(get_current_user)
):
    return DashboardService(db).get_activities(limit, property_id)


@router.get("/upcoming")
def get_upcoming(
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(get_current_user)
):
    """Today's arrivals, departures and open housekeeping tasks"""
    upcoming = DashboardService(db).get_upcoming(property_id)
    return {
        "arrivals": [ReservationResponse.model_validate(r) for r in upcoming["arrivals"]],
        "departures": [ReservationResponse.model_validate(r) for r in upcoming["departures"]],
        "pending_tasks": [TaskResponse.model_validate(t) for t in upcoming["pending_tasks"]],
    }
