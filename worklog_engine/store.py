"""Blob-backed daily log store.

Logs live in an in-memory dict keyed by id. When a data path is configured,
the whole document (users, teams and logs) is rewritten as one JSON blob
after every successful mutation. Records are never mutated in place: each
update builds a new `DailyLog` and swaps it in.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional
from uuid import uuid4

from worklog_engine.adapters import json_adapter
from worklog_engine.adapters.json_adapter import WorklogDocument
from worklog_engine.dates import parse_date
from worklog_engine.errors import NotFound, ValidationError
from worklog_engine.schema import MOODS, DailyLog, Task
from worklog_engine.views import ActorContext, ensure_can_edit, ensure_can_review

logger = logging.getLogger(__name__)

OWNER_FIELDS = frozenset({"date", "tasks", "mood", "summary", "blockers"})
REVIEW_FIELDS = frozenset({"is_reviewed", "reviewed_by", "review_notes"})
TASK_FIELDS = frozenset({"description", "time_spent", "tags", "completed"})
_CREATE_FIELDS = OWNER_FIELDS | {"user_id"}


def _default_id() -> str:
    return uuid4().hex[:9]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value: str) -> Optional[datetime]:
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def _clean_optional(value: Any) -> Optional[str]:
    return None if _blank(value) else str(value).strip()


class LogStore:
    """CRUD over daily logs.

    Parameters
    ----------
    logs:
        Initial records. Ignored when `data_path` points at an existing blob.
    data_path:
        JSON file holding the blob. If it exists it is loaded on start and it
        is rewritten after each mutation.
    enforce_unique_dates:
        Reject a second log for the same user and date.
    clock, id_factory:
        Injection points for timestamps and generated ids.
    """

    def __init__(
        self,
        logs: Iterable[DailyLog] = (),
        data_path: Optional[str] = None,
        enforce_unique_dates: bool = False,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self._data_path = Path(data_path) if data_path else None
        self._document = WorklogDocument()
        if self._data_path is not None and self._data_path.is_file():
            self._document = json_adapter.parse(str(self._data_path))
            logs = self._document.logs

        self._logs: dict[str, DailyLog] = {log.id: log for log in logs}
        self._enforce_unique_dates = enforce_unique_dates
        self._clock = clock or _utcnow
        self._id_factory = id_factory or _default_id

    @classmethod
    def from_settings(cls, settings) -> "LogStore":
        return cls(data_path=settings.data_path, enforce_unique_dates=settings.enforce_unique_dates)

    # ------------------------------------------------------------------
    # Logs
    # ------------------------------------------------------------------

    def list(self, owner_id: Optional[str] = None) -> list[DailyLog]:
        if owner_id is None:
            return list(self._logs.values())
        return [log for log in self._logs.values() if log.user_id == owner_id]

    def get(self, log_id: str) -> DailyLog:
        try:
            return self._logs[log_id]
        except KeyError:
            logger.warning("Log not found: %s", log_id)
            raise NotFound("log", log_id) from None

    def create(self, data: Mapping[str, Any]) -> DailyLog:
        """Create a log from owner-supplied fields.

        `user_id`, `date`, `mood` and `summary` are required; `tasks` and
        `blockers` are optional. Review fields, ids and timestamps are set
        here and may not be supplied.
        """

        unexpected = sorted(set(data) - _CREATE_FIELDS)
        if unexpected:
            raise ValidationError(f"Fields not accepted on create: {unexpected}", field=unexpected[0])
        for name in ("user_id", "date"):
            if _blank(data.get(name)):
                raise ValidationError(f"Missing required field '{name}'", field=name)

        now = self._clock().isoformat()
        log = DailyLog(
            id=self._new_id(self._logs),
            user_id=str(data["user_id"]),
            date=str(data["date"]),
            tasks=self._coerce_tasks(data.get("tasks") or ()),
            mood=data.get("mood", ""),
            summary=data.get("summary", ""),
            blockers=_clean_optional(data.get("blockers")),
            created_at=now,
            updated_at=now,
        )
        self._validate(log)

        self._commit({**self._logs, log.id: log})
        logger.debug("Created log %s for %s on %s", log.id, log.user_id, log.date)
        return log

    def update(self, log_id: str, fields: Mapping[str, Any]) -> DailyLog:
        """Merge `fields` into a log and return the new record.

        Owner fields and review fields may not be changed in the same call.
        Nothing is written unless the merged record is valid.
        """

        current = self.get(log_id)
        changes = dict(fields)

        unknown = sorted(set(changes) - OWNER_FIELDS - REVIEW_FIELDS)
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {unknown}", field=unknown[0])
        if set(changes) & OWNER_FIELDS and set(changes) & REVIEW_FIELDS:
            raise ValidationError("Owner and review fields cannot be updated together")

        if "tasks" in changes:
            changes["tasks"] = self._coerce_tasks(changes["tasks"] or ())
        for name in ("blockers", "reviewed_by", "review_notes"):
            if name in changes:
                changes[name] = _clean_optional(changes[name])
        if "is_reviewed" in changes:
            changes["is_reviewed"] = bool(changes["is_reviewed"])

        updated = replace(current, **changes, updated_at=self._next_timestamp(current.updated_at))
        self._validate(updated)

        self._commit({**self._logs, log_id: updated})
        logger.debug("Updated log %s fields %s", log_id, sorted(changes))
        return updated

    def delete(self, log_id: str) -> None:
        self.get(log_id)
        remaining = {key: log for key, log in self._logs.items() if key != log_id}
        self._commit(remaining)
        logger.debug("Deleted log %s", log_id)

    def review(self, log_id: str, manager_id: str, notes: Optional[str] = None) -> DailyLog:
        """Mark a log reviewed by a manager, with optional notes."""

        return self.update(log_id, {"is_reviewed": True, "reviewed_by": manager_id, "review_notes": notes})

    # ------------------------------------------------------------------
    # Role-checked variants
    # ------------------------------------------------------------------

    def update_as(self, context: ActorContext, log_id: str, fields: Mapping[str, Any]) -> DailyLog:
        log = self.get(log_id)
        if set(fields) & REVIEW_FIELDS:
            ensure_can_review(context, log)
            if "reviewed_by" in fields and fields["reviewed_by"] != context.user.id:
                raise ValidationError("reviewed_by must be the acting manager", field="reviewed_by")
        else:
            ensure_can_edit(context, log)
        return self.update(log_id, fields)

    def review_as(self, context: ActorContext, log_id: str, notes: Optional[str] = None) -> DailyLog:
        ensure_can_review(context, self.get(log_id))
        return self.review(log_id, context.user.id, notes)

    def delete_as(self, context: ActorContext, log_id: str) -> None:
        ensure_can_edit(context, self.get(log_id))
        self.delete(log_id)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def get_tasks(self, log_id: str) -> list[Task]:
        return list(self.get(log_id).tasks)

    def add_task(self, log_id: str, task_data: Mapping[str, Any] | Task) -> Task:
        log = self.get(log_id)
        task = self._coerce_task(task_data, len(log.tasks) + 1, taken={t.id for t in log.tasks})
        self.update(log_id, {"tasks": log.tasks + (task,)})
        return task

    def update_task(self, log_id: str, task_id: str, fields: Mapping[str, Any]) -> Task:
        log = self.get(log_id)
        index = self._task_index(log, task_id)

        unknown = sorted(set(fields) - TASK_FIELDS)
        if unknown:
            raise ValidationError(f"Task fields cannot be updated: {unknown}", field=unknown[0])

        merged = {
            "id": task_id,
            "description": log.tasks[index].description,
            "time_spent": log.tasks[index].time_spent,
            "tags": log.tasks[index].tags,
            "completed": log.tasks[index].completed,
            **fields,
        }
        task = self._coerce_task(merged, index + 1)
        tasks = log.tasks[:index] + (task,) + log.tasks[index + 1 :]
        self.update(log_id, {"tasks": tasks})
        return task

    def delete_task(self, log_id: str, task_id: str) -> None:
        log = self.get(log_id)
        self._task_index(log, task_id)
        self.update(log_id, {"tasks": tuple(task for task in log.tasks if task.id != task_id)})

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _new_id(self, taken: Iterable[str]) -> str:
        taken = set(taken)
        new_id = self._id_factory()
        while new_id in taken:
            new_id = self._id_factory()
        return new_id

    def _next_timestamp(self, previous: str) -> str:
        """Current time, nudged past `previous` so updates always move forward."""

        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        last = _parse_timestamp(previous)
        if last is not None and now <= last:
            now = last + timedelta(microseconds=1)
        return now.isoformat()

    @staticmethod
    def _task_index(log: DailyLog, task_id: str) -> int:
        for index, task in enumerate(log.tasks):
            if task.id == task_id:
                return index
        logger.warning("Task %s not found in log %s", task_id, log.id)
        raise NotFound("task", task_id)

    def _coerce_tasks(self, items: Iterable[Mapping[str, Any] | Task]) -> tuple[Task, ...]:
        tasks: list[Task] = []
        for position, item in enumerate(items, start=1):
            tasks.append(self._coerce_task(item, position, taken={task.id for task in tasks}))
        return tuple(tasks)

    def _coerce_task(self, item: Mapping[str, Any] | Task, position: int, taken: Iterable[str] = ()) -> Task:
        if isinstance(item, Task):
            item = {
                "id": item.id,
                "description": item.description,
                "time_spent": item.time_spent,
                "tags": item.tags,
                "completed": item.completed,
            }

        description = item.get("description")
        if _blank(description):
            raise ValidationError(f"Task {position}: description is required", field="description")

        time_spent = item.get("time_spent", 0)
        if isinstance(time_spent, bool) or not isinstance(time_spent, int) or time_spent < 1:
            raise ValidationError(
                f"Task {position}: time_spent must be a whole number of minutes, at least 1", field="time_spent"
            )

        tags = item.get("tags") or ()
        if isinstance(tags, str):
            tags = tags.split(",")

        return Task(
            id=str(item.get("id") or self._new_id(taken)),
            description=str(description),
            time_spent=time_spent,
            tags=frozenset(str(tag).strip() for tag in tags if str(tag).strip()),
            completed=bool(item.get("completed", False)),
        )

    def _validate(self, log: DailyLog) -> None:
        if not isinstance(log.date, str) or _blank(log.date):
            raise ValidationError("Missing required field 'date'", field="date")
        try:
            parse_date(log.date)
        except ValueError:
            raise ValidationError(f"Malformed date '{log.date}'", field="date") from None
        if _blank(log.summary):
            raise ValidationError("Please provide a summary for the day", field="summary")
        if log.mood not in MOODS:
            raise ValidationError(f"Invalid mood '{log.mood}'", field="mood")
        if log.is_reviewed and not log.reviewed_by:
            raise ValidationError("A reviewed log must name its reviewer", field="reviewed_by")
        if self._enforce_unique_dates:
            duplicate = any(
                other.id != log.id and other.user_id == log.user_id and other.date == log.date
                for other in self._logs.values()
            )
            if duplicate:
                raise ValidationError(f"{log.user_id} already has a log for {log.date}", field="date")

    def _commit(self, logs: dict[str, DailyLog]) -> None:
        """Persist first, then swap the in-memory state."""

        if self._data_path is not None:
            self._data_path.parent.mkdir(parents=True, exist_ok=True)
            document = WorklogDocument(self._document.users, self._document.teams, list(logs.values()))
            json_adapter.dump(document, str(self._data_path))
        self._logs = logs
