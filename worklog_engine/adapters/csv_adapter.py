"""CSV adapter: one row per task, grouped back into daily logs."""

from __future__ import annotations

import csv
from dataclasses import replace
from typing import Iterable

from worklog_engine.schema import MOODS, DailyLog, Task

FIELDNAMES = [
    "log_id",
    "user_id",
    "date",
    "mood",
    "summary",
    "blockers",
    "is_reviewed",
    "reviewed_by",
    "review_notes",
    "task_id",
    "description",
    "time_spent",
    "tags",
    "completed",
]

_REQUIRED_FIELDS = {"log_id", "user_id", "date", "mood"}
_TRUE_VALUES = {"1", "true", "yes"}


def _flag(value: str | None) -> bool:
    return (value or "").strip().lower() in _TRUE_VALUES


def _parse_task(row: dict, row_number: int) -> Task | None:
    task_id = (row.get("task_id") or "").strip()
    if not task_id:
        return None

    try:
        time_spent = int(row.get("time_spent") or 0)
    except ValueError as exc:
        raise ValueError(f"Row {row_number}: invalid time_spent") from exc

    tags = row.get("tags") or ""
    return Task(
        id=task_id,
        description=(row.get("description") or "").strip(),
        time_spent=time_spent,
        tags=frozenset(tag.strip() for tag in tags.split(";") if tag.strip()),
        completed=_flag(row.get("completed")),
    )


def _parse_log(row: dict, row_number: int) -> DailyLog:
    missing = [field for field in sorted(_REQUIRED_FIELDS) if not row.get(field)]
    if missing:
        raise ValueError(f"Row {row_number}: missing required fields {missing}")

    mood = row["mood"].strip()
    if mood not in MOODS:
        raise ValueError(f"Row {row_number}: invalid mood '{mood}'")

    is_reviewed = _flag(row.get("is_reviewed"))
    reviewed_by = (row.get("reviewed_by") or "").strip() or None
    if is_reviewed and not reviewed_by:
        raise ValueError(f"Row {row_number}: reviewed log without reviewed_by")

    return DailyLog(
        id=row["log_id"].strip(),
        user_id=row["user_id"].strip(),
        date=row["date"].strip(),
        tasks=(),
        mood=mood,
        summary=(row.get("summary") or "").strip(),
        blockers=(row.get("blockers") or "").strip() or None,
        is_reviewed=is_reviewed,
        reviewed_by=reviewed_by,
        review_notes=(row.get("review_notes") or "").strip() or None,
    )


def parse(file_path: str) -> list[DailyLog]:
    """Parse a CSV task export into daily logs, in first-seen order."""

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        logs: dict[str, DailyLog] = {}
        tasks: dict[str, list[Task]] = {}
        for row_number, row in enumerate(reader, start=2):
            log_id = (row.get("log_id") or "").strip()
            if log_id not in logs:
                logs[log_id] = _parse_log(row, row_number)
                tasks[log_id] = []
            task = _parse_task(row, row_number)
            if task is not None:
                tasks[log_id].append(task)

    return [replace(log, tasks=tuple(tasks[log_id])) for log_id, log in logs.items()]


def _rows(log: DailyLog) -> list[dict]:
    base = {
        "log_id": log.id,
        "user_id": log.user_id,
        "date": log.date,
        "mood": log.mood,
        "summary": log.summary,
        "blockers": log.blockers or "",
        "is_reviewed": "true" if log.is_reviewed else "false",
        "reviewed_by": log.reviewed_by or "",
        "review_notes": log.review_notes or "",
    }
    if not log.tasks:
        return [base]
    return [
        {
            **base,
            "task_id": task.id,
            "description": task.description,
            "time_spent": task.time_spent,
            "tags": ";".join(sorted(task.tags)),
            "completed": "true" if task.completed else "false",
        }
        for task in log.tasks
    ]


def write(logs: Iterable[DailyLog], file_path: str) -> None:
    """Write logs as flat task rows; logs without tasks get one row."""

    with open(file_path, "w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=FIELDNAMES)
        writer.writeheader()
        for log in logs:
            writer.writerows(_rows(log))
