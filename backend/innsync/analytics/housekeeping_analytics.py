"""
Housekeeping analytics - completion, timeliness, inspection quality and staff productivity
"""
from collections import Counter
from datetime import date, timedelta
from typing import Any, Iterable, Optional
from innsync.analytics import value, enum_value, as_date, percentage
from innsync.utils.dates import today_wib

PRIORITY_LABELS = {1: "Rendah", 2: "Normal", 3: "Tinggi", 4: "Mendesak", 5: "Darurat"}
DONE_STATUSES = ("completed", "inspected")
DEFAULT_ESTIMATE = 30
STAFF_DAILY_CAPACITY = 8
WEEKDAY_SHORT = ["Sen", "Sel", "Rab", "Kam", "Jum", "Sab", "Min"]


def priority_label(priority: int) -> str:
    return PRIORITY_LABELS.get(priority, "Normal")


def _staff_name(task: Any) -> Optional[str]:
    if isinstance(task, dict):
        return task.get("assigned_to_name")
    assignee = getattr(task, "assignee", None)
    return assignee.full_name if assignee else None


def _room_number(task: Any) -> Optional[str]:
    if isinstance(task, dict):
        return task.get("room_number")
    room = getattr(task, "room", None)
    return room.room_number if room else None


def _is_done(task: Any) -> bool:
    return enum_value(task, "status") in DONE_STATUSES


def task_efficiency(task: Any) -> int:
    """Estimated over actual duration as a percentage; 0 without both timings"""
    estimated = value(task, "estimated_duration")
    actual = value(task, "actual_duration")
    if not estimated or not actual:
        return 0
    return round(max(0, estimated / actual * 100))


def productivity_score(completion_rate: float, average_minutes: float) -> int:
    """completion_rate is a 0..1 fraction; faster average work scores higher"""
    time_score = max(0, 100 - average_minutes / 2) if average_minutes > 0 else 50
    return round(completion_rate * 70 + time_score * 0.3)


def calculate_housekeeping_analytics(tasks: Iterable[Any], today: Optional[date] = None) -> dict:
    tasks = list(tasks)
    today = today or today_wib()
    total = len(tasks)
    statuses = Counter(enum_value(t, "status") for t in tasks)

    completed = statuses["completed"]
    inspected = statuses["inspected"]
    failed = statuses["failed_inspection"]
    completion_rate = percentage(completed + inspected, total)

    timed = [t for t in tasks if _is_done(t) and value(t, "actual_duration")]
    average_time = sum(value(t, "actual_duration") for t in timed) / len(timed) if timed else 0
    on_time = sum(
        1 for t in timed if value(t, "actual_duration") <= value(t, "estimated_duration", DEFAULT_ESTIMATE)
    )
    on_time_rate = percentage(on_time, len(timed))
    quality_score = percentage(inspected, inspected + failed)

    staff = {}
    for t in tasks:
        staff_id = value(t, "assigned_to")
        name = _staff_name(t)
        if not staff_id or not name:
            continue
        stats = staff.setdefault(staff_id, {"staff_id": staff_id, "staff_name": name, "assigned_tasks": 0,
                                            "completed_tasks": 0, "total_time": 0, "timed": 0})
        stats["assigned_tasks"] += 1
        if _is_done(t):
            stats["completed_tasks"] += 1
            if value(t, "actual_duration"):
                stats["total_time"] += value(t, "actual_duration")
                stats["timed"] += 1

    staff_productivity = []
    for stats in staff.values():
        average = stats["total_time"] / stats["timed"] if stats["timed"] else 0
        rate = stats["completed_tasks"] / stats["assigned_tasks"] if stats["assigned_tasks"] else 0
        staff_productivity.append({
            "staff_id": stats["staff_id"],
            "staff_name": stats["staff_name"],
            "assigned_tasks": stats["assigned_tasks"],
            "completed_tasks": stats["completed_tasks"],
            "average_time": round(average),
            "productivity_score": productivity_score(rate, average),
        })
    staff_productivity.sort(key=lambda s: -s["productivity_score"])

    types = {}
    for t in tasks:
        stats = types.setdefault(enum_value(t, "task_type") or "unknown", {"count": 0, "total_time": 0, "timed": 0})
        stats["count"] += 1
        if value(t, "actual_duration"):
            stats["total_time"] += value(t, "actual_duration")
            stats["timed"] += 1
    task_type_distribution = sorted(
        (
            {
                "type": task_type,
                "count": s["count"],
                "percentage": round(percentage(s["count"], total), 1),
                "average_time": round(s["total_time"] / s["timed"]) if s["timed"] else 0,
            }
            for task_type, s in types.items()
        ),
        key=lambda item: -item["count"]
    )

    priorities = Counter(value(t, "priority", 2) for t in tasks)
    priority_distribution = [
        {"priority": p, "label": priority_label(p), "count": n, "percentage": round(percentage(n, total), 1)}
        for p, n in sorted(priorities.items())
    ]

    rooms = {}
    for t in tasks:
        number = _room_number(t)
        if not number:
            continue
        stats = rooms.setdefault(number, {"room_number": number, "tasks_count": 0, "total_time": 0,
                                          "timed": 0, "last_cleaned": None})
        stats["tasks_count"] += 1
        if value(t, "actual_duration"):
            stats["total_time"] += value(t, "actual_duration")
            stats["timed"] += 1
        completed_at = value(t, "completed_at")
        if _is_done(t) and completed_at and (stats["last_cleaned"] is None or completed_at > stats["last_cleaned"]):
            stats["last_cleaned"] = completed_at
    room_efficiency = sorted(
        (
            {
                "room_number": s["room_number"],
                "tasks_count": s["tasks_count"],
                "average_time": round(s["total_time"] / s["timed"]) if s["timed"] else 0,
                "last_cleaned": s["last_cleaned"],
            }
            for s in rooms.values()
        ),
        key=lambda item: -item["tasks_count"]
    )

    daily_trends = []
    for offset in range(6, -1, -1):
        day = today - timedelta(days=offset)
        day_tasks = [t for t in tasks if as_date(t, "scheduled_date") == day]
        done = sum(1 for t in day_tasks if _is_done(t))
        daily_trends.append({
            "date": day.isoformat(),
            "day": WEEKDAY_SHORT[day.weekday()],
            "completed": done,
            "pending": sum(1 for t in day_tasks if enum_value(t, "status") == "pending"),
            "efficiency": round(percentage(done, len(day_tasks))),
        })

    in_progress = statuses["in_progress"]
    pending = statuses["pending"]

    return {
        "total_tasks": total,
        "pending_tasks": pending,
        "in_progress_tasks": in_progress,
        "completed_tasks": completed,
        "inspected_tasks": inspected,
        "failed_inspection_tasks": failed,
        "completion_rate": round(completion_rate, 1),
        "average_completion_time": round(average_time),
        "on_time_completion_rate": round(on_time_rate, 1),
        "quality_score": round(quality_score, 1),
        "staff_productivity": staff_productivity,
        "task_type_distribution": task_type_distribution,
        "priority_distribution": priority_distribution,
        "room_efficiency": room_efficiency,
        "daily_trends": daily_trends,
        "kpis": {
            "efficiency": round(completion_rate),
            "quality": round(quality_score),
            "timeliness": round(on_time_rate),
            "utilization": round(percentage(in_progress, in_progress + pending)),
        },
    }


def calculate_staff_performance(tasks: Iterable[Any]) -> dict:
    tasks = list(tasks)
    staff = {}
    for t in tasks:
        staff_id = value(t, "assigned_to")
        name = _staff_name(t)
        if not staff_id or not name:
            continue
        stats = staff.setdefault(staff_id, {"name": name, "assigned": 0, "completed": 0, "current": 0})
        stats["assigned"] += 1
        if _is_done(t):
            stats["completed"] += 1
        if enum_value(t, "status") == "in_progress":
            stats["current"] += 1

    top = None
    for stats in staff.values():
        score = round(percentage(stats["completed"], stats["assigned"]))
        if top is None or score > top["score"]:
            top = {"name": stats["name"], "score": score, "tasks_completed": stats["completed"]}

    return {
        "total_staff": len(staff),
        "active_staff": sum(1 for s in staff.values() if s["current"] > 0),
        "average_tasks_per_staff": round(len(tasks) / len(staff)) if staff else 0,
        "top_performer": top,
        "staff_workload": [
            {
                "staff_name": s["name"],
                "current_tasks": s["current"],
                "capacity": STAFF_DAILY_CAPACITY,
                "utilization": round(s["current"] / STAFF_DAILY_CAPACITY * 100),
            }
            for s in staff.values()
        ],
    }


def generate_task_summary(tasks: Iterable[Any], today: Optional[date] = None) -> str:
    analytics = calculate_housekeeping_analytics(tasks, today=today)
    if analytics["staff_productivity"]:
        best = analytics["staff_productivity"][0]
        top_line = f"{best['staff_name']} ({best['productivity_score']} poin)"
    else:
        top_line = "Belum ada data"

    lines = [
        "RINGKASAN HOUSEKEEPING",
        "=====================",
        "",
        f"Total Tugas: {analytics['total_tasks']}",
        f"- Menunggu: {analytics['pending_tasks']}",
        f"- Dikerjakan: {analytics['in_progress_tasks']}",
        f"- Selesai: {analytics['completed_tasks']}",
        f"- Diperiksa: {analytics['inspected_tasks']}",
        f"- Perlu Diperbaiki: {analytics['failed_inspection_tasks']}",
        "",
        "PERFORMA:",
        f"- Tingkat Penyelesaian: {analytics['completion_rate']:.1f}%",
        f"- Waktu Rata-rata: {analytics['average_completion_time']} menit",
        f"- Ketepatan Waktu: {analytics['on_time_completion_rate']:.1f}%",
        f"- Skor Kualitas: {analytics['quality_score']:.1f}%",
        "",
        "TOP PERFORMER:",
        top_line,
    ]
    return "\n".join(lines)
