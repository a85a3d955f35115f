"""
Housekeeping task routes
"""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from innsync.database import get_db
from innsync.models.hotel import Staff, HousekeepingStatus, HousekeepingTaskType
from innsync.models.schemas import TaskCreate, TaskUpdate, TaskStatusUpdate, TaskResponse
from innsync.routers import http_error
from innsync.security import permissions as perm
from innsync.security.auth import require_permission
from innsync.services.housekeeping_service import HousekeepingService

router = APIRouter(prefix="/housekeeping", tags=["Housekeeping"])


@router.get("/tasks", response_model=List[TaskResponse])
def list_tasks(
    property_id: Optional[int] = None,
    status: Optional[HousekeepingStatus] = None,
    scheduled_date: Optional[date] = None,
    assigned_to: Optional[int] = None,
    room_id: Optional[int] = None,
    task_type: Optional[HousekeepingTaskType] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.TASK_READ))
):
    return HousekeepingService(db).get_tasks(property_id, status, scheduled_date, assigned_to, room_id, task_type)


@router.get("/schedule")
def get_daily_schedule(
    day: Optional[date] = None,
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.TASK_READ))
):
    """Tasks for a day, most urgent first, grouped by staff"""
    schedule = HousekeepingService(db).get_daily_schedule(day, property_id)
    schedule["tasks"] = [TaskResponse.model_validate(t) for t in schedule["tasks"]]
    for group in schedule["by_staff"]:
        group["tasks"] = [TaskResponse.model_validate(t) for t in group["tasks"]]
    return schedule


@router.get("/tasks/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.TASK_READ))
):
    task = HousekeepingService(db).get_task(task_id)
    if not task:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tugas tidak ditemukan")
    return task


@router.post("/tasks", response_model=TaskResponse)
def create_task(
    data: TaskCreate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.TASK_WRITE))
):
    try:
        return HousekeepingService(db).create_task(data)
    except ValueError as e:
        raise http_error(e)


@router.put("/tasks/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    data: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.TASK_WRITE))
):
    try:
        return HousekeepingService(db).update_task(task_id, data)
    except ValueError as e:
        raise http_error(e)


@router.patch("/tasks/{task_id}/status", response_model=TaskResponse)
def update_task_status(
    task_id: int,
    data: TaskStatusUpdate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.TASK_WRITE))
):
    try:
        return HousekeepingService(db).update_status(task_id, data.status, data.actual_duration, data.notes)
    except ValueError as e:
        raise http_error(e)


@router.delete("/tasks/{task_id}")
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.TASK_WRITE))
):
    try:
        HousekeepingService(db).delete_task(task_id)
        return {"message": "Tugas dihapus"}
    except ValueError as e:
        raise http_error(e)
