"""Productivity aggregation over daily logs."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

import numpy as np

from worklog_engine.schema import DailyLog, ProductivityPoint, mood_score


def _in_range(date: str, start_date: str, end_date: str) -> bool:
    return start_date <= date <= end_date


def round_tenths(value: float) -> float:
    """Round to one decimal, halves away from zero (0.25 -> 0.3)."""

    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def compute_productivity(
    logs: Iterable[DailyLog],
    start_date: str,
    end_date: str,
    chronological: bool = False,
) -> list[ProductivityPoint]:
    """Build one productivity point per log dated within [start_date, end_date]."""

    points = [
        ProductivityPoint(
            date=log.date,
            tasks_completed=log.completed_tasks,
            total_time_spent=log.total_time_spent,
            mood=log.mood,
        )
        for log in logs
        if _in_range(log.date, start_date, end_date)
    ]
    if chronological:
        points.sort(key=lambda point: point.date)
    return points


def rollup(points: Sequence[ProductivityPoint]) -> dict:
    """Sum completed tasks and time, and average completed tasks per point."""

    if not points:
        return {"tasks_completed": 0, "total_time_spent": 0, "avg_tasks_per_day": 0}

    tasks_completed = sum(point.tasks_completed for point in points)
    total_time_spent = sum(point.total_time_spent for point in points)
    return {
        "tasks_completed": tasks_completed,
        "total_time_spent": total_time_spent,
        "avg_tasks_per_day": round_tenths(tasks_completed / len(points)),
    }


def average_mood(items: Sequence[DailyLog | ProductivityPoint]) -> float:
    """Mean mood score (terrible=1 .. great=5); 0.0 for no items."""

    if not items:
        return 0.0
    return sum(mood_score(item.mood) for item in items) / len(items)


def mood_trend(points: Sequence[ProductivityPoint]) -> float:
    """Least-squares slope of the mood score across the given point order.

    Positive values mean mood is improving from one point to the next.
    """

    if len(points) < 2:
        return 0.0

    scores = np.array([mood_score(point.mood) for point in points], dtype=float)
    positions = np.arange(len(scores), dtype=float)
    slope, _intercept = np.polyfit(positions, scores, 1)
    return float(round(slope, 4))


def log_stats(log: DailyLog) -> dict:
    """Summary numbers shown on a single log card."""

    return {
        "completed_tasks": log.completed_tasks,
        "total_tasks": len(log.tasks),
        "hours": round_tenths(log.total_time_spent / 60),
        "tags": sorted({tag for task in log.tasks for tag in task.tags if tag}),
    }


def team_statistics(logs: Sequence[DailyLog]) -> dict:
    """Report statistics across a set of logs."""

    return {
        "total_tasks": sum(len(log.tasks) for log in logs),
        "completed_tasks": sum(log.completed_tasks for log in logs),
        "total_time": sum(log.total_time_spent for log in logs),
        "average_mood": average_mood(logs),
    }


def avg_tasks_per_active_day(logs: Sequence[DailyLog]) -> float:
    """All tasks (done or not) divided by the number of distinct log dates."""

    active_days = {log.date for log in logs}
    if not active_days:
        return 0.0
    return round_tenths(sum(len(log.tasks) for log in logs) / len(active_days))


def manager_overview(logs: Sequence[DailyLog], today: str) -> dict:
    """Counters for a manager's dashboard over already-scoped team logs."""

    return {
        "total_logs": len(logs),
        "pending_reviews": sum(1 for log in logs if not log.is_reviewed),
        "today_logs": sum(1 for log in logs if log.date == today),
        "blockers": sum(1 for log in logs if log.has_blockers),
    }
