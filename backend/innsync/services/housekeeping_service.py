"""
Housekeeping service - cleaning/maintenance tasks and the daily schedule

Completing a cleaning task marks the room clean; passing inspection marks
it inspected.
"""
import logging
from datetime import date, datetime, time
from typing import List, Optional
from sqlalchemy.orm import Session
from innsync.models.hotel import (
    HousekeepingTask, HousekeepingStatus, HousekeepingTaskType, CLEANING_TASK_TYPES,
    Room, RoomStatus, Staff
)
from innsync.models.schemas import TaskCreate, TaskUpdate
from innsync.services.query_cache import invalidate_dashboard
from innsync.utils.dates import today_wib

logger = logging.getLogger(__name__)

# Allowed status transitions
TRANSITIONS = {
    HousekeepingStatus.PENDING: {HousekeepingStatus.IN_PROGRESS, HousekeepingStatus.COMPLETED},
    HousekeepingStatus.IN_PROGRESS: {HousekeepingStatus.COMPLETED, HousekeepingStatus.PENDING},
    HousekeepingStatus.COMPLETED: {HousekeepingStatus.INSPECTED, HousekeepingStatus.FAILED_INSPECTION},
    HousekeepingStatus.FAILED_INSPECTION: {HousekeepingStatus.IN_PROGRESS, HousekeepingStatus.PENDING},
    HousekeepingStatus.INSPECTED: set(),
}


class HousekeepingService:

    def __init__(self, db: Session):
        self.db = db

    def get_tasks(self, property_id: Optional[int] = None, status: Optional[HousekeepingStatus] = None,
                  scheduled_date: Optional[date] = None, assigned_to: Optional[int] = None,
                  room_id: Optional[int] = None, task_type: Optional[HousekeepingTaskType] = None
                  ) -> List[HousekeepingTask]:
        query = self.db.query(HousekeepingTask)
        if property_id:
            query = query.filter(HousekeepingTask.property_id == property_id)
        if status:
            query = query.filter(HousekeepingTask.status == status)
        if scheduled_date:
            query = query.filter(HousekeepingTask.scheduled_date == scheduled_date)
        if assigned_to:
            query = query.filter(HousekeepingTask.assigned_to == assigned_to)
        if room_id:
            query = query.filter(HousekeepingTask.room_id == room_id)
        if task_type:
            query = query.filter(HousekeepingTask.task_type == task_type)
        return query.order_by(
            HousekeepingTask.scheduled_date.desc(),
            HousekeepingTask.priority.desc(),
            HousekeepingTask.id
        ).all()

    def get_task(self, task_id: int) -> Optional[HousekeepingTask]:
        return self.db.query(HousekeepingTask).filter(HousekeepingTask.id == task_id).first()

    def _check_assignee(self, staff_id: Optional[int]) -> None:
        if staff_id is None:
            return
        staff = self.db.query(Staff).filter(Staff.id == staff_id).first()
        if not staff or not staff.is_active:
            raise ValueError("Staf tidak ditemukan")

    def create_task(self, data: TaskCreate) -> HousekeepingTask:
        room = self.db.query(Room).filter(Room.id == data.room_id).first()
        if not room:
            raise ValueError("Kamar tidak ditemukan")
        self._check_assignee(data.assigned_to)

        values = data.model_dump()
        values["scheduled_date"] = values["scheduled_date"] or today_wib()
        task = HousekeepingTask(property_id=room.property_id, status=HousekeepingStatus.PENDING, **values)
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        invalidate_dashboard()
        logger.info(f"Created {task.task_type.value} task {task.id} for room {room.room_number}")
        return task

    def update_task(self, task_id: int, data: TaskUpdate) -> HousekeepingTask:
        task = self.get_task(task_id)
        if not task:
            raise ValueError("Tugas tidak ditemukan")

        update_data = data.model_dump(exclude_unset=True)
        if "assigned_to" in update_data:
            self._check_assignee(update_data["assigned_to"])

        for key, value in update_data.items():
            setattr(task, key, value)

        self.db.commit()
        self.db.refresh(task)
        invalidate_dashboard()
        return task

    def update_status(self, task_id: int, status: HousekeepingStatus, actual_duration: Optional[int] = None,
                      notes: Optional[str] = None) -> HousekeepingTask:
        task = self.get_task(task_id)
        if not task:
            raise ValueError("Tugas tidak ditemukan")
        if status != task.status and status not in TRANSITIONS[task.status]:
            raise ValueError(f"Status tugas tidak dapat diubah dari {task.status.value} ke {status.value}")

        task.status = status
        if notes:
            task.notes = notes
        if actual_duration is not None:
            task.actual_duration = actual_duration

        if status == HousekeepingStatus.COMPLETED:
            task.completed_at = datetime.utcnow()
            if task.task_type in CLEANING_TASK_TYPES and task.room.status == RoomStatus.DIRTY:
                task.room.status = RoomStatus.CLEAN
        elif status == HousekeepingStatus.INSPECTED:
            if task.room.status != RoomStatus.OUT_OF_ORDER:
                task.room.status = RoomStatus.INSPECTED
        elif status == HousekeepingStatus.FAILED_INSPECTION:
            task.room.status = RoomStatus.DIRTY
        elif status in (HousekeepingStatus.PENDING, HousekeepingStatus.IN_PROGRESS):
            task.completed_at = None

        self.db.commit()
        self.db.refresh(task)
        invalidate_dashboard()
        logger.info(f"Task {task.id} -> {status.value}")
        return task

    def delete_task(self, task_id: int) -> bool:
        task = self.get_task(task_id)
        if not task:
            raise ValueError("Tugas tidak ditemukan")
        self.db.delete(task)
        self.db.commit()
        invalidate_dashboard()
        return True

    def get_daily_schedule(self, day: Optional[date] = None, property_id: Optional[int] = None) -> dict:
        """Tasks for one day, most urgent first, grouped by assignee"""
        day = day or today_wib()
        tasks = self.get_tasks(property_id=property_id, scheduled_date=day)
        tasks.sort(key=lambda t: (-(t.priority or 2), t.scheduled_time or time.max, t.id))

        groups = {}
        for task in tasks:
            key = task.assigned_to or 0
            if key not in groups:
                groups[key] = {
                    "staff_id": task.assigned_to,
                    "staff_name": task.assignee.full_name if task.assignee else "Belum ditugaskan",
                    "tasks": [],
                }
            groups[key]["tasks"].append(task)

        return {
            "date": day,
            "tasks": tasks,
            "by_staff": list(groups.values()),
            "summary": {
                "total": len(tasks),
                "pending": sum(1 for t in tasks if t.status == HousekeepingStatus.PENDING),
                "in_progress": sum(1 for t in tasks if t.status == HousekeepingStatus.IN_PROGRESS),
                "completed": sum(1 for t in tasks if t.is_done),
                "unassigned": sum(1 for t in tasks if t.assigned_to is None),
                "urgent": sum(1 for t in tasks if (t.priority or 2) >= 4),
            },
        }
