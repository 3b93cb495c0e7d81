"""JSON adapter for the work-log document (users, teams and daily logs)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from worklog_engine.schema import MOODS, ROLES, DailyLog, Task, Team, User

_REQUIRED_LOG_FIELDS = ("id", "userId", "date", "mood")


@dataclass
class WorklogDocument:
    """Everything persisted in one blob."""

    users: list[User] = field(default_factory=list)
    teams: list[Team] = field(default_factory=list)
    logs: list[DailyLog] = field(default_factory=list)


def _snake(name: str) -> str:
    return "".join(f"_{char.lower()}" if char.isupper() else char for char in name)


def _get(item: dict, key: str, default: Any = None) -> Any:
    """Look a camelCase key up, falling back to its snake_case spelling."""

    if key in item:
        return item[key]
    return item.get(_snake(key), default)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text or None


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def parse_task(item: dict, label: str) -> Task:
    if not _get(item, "id"):
        raise ValueError(f"{label}: missing task id")

    try:
        time_spent = int(_get(item, "timeSpent", 0))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{label}: invalid timeSpent") from exc
    if time_spent < 0:
        raise ValueError(f"{label}: timeSpent must not be negative")

    tags = _get(item, "tags") or []
    if isinstance(tags, str):
        tags = [tags]

    return Task(
        id=str(item["id"]),
        description=str(_get(item, "description", "")),
        time_spent=time_spent,
        tags=frozenset(str(tag).strip() for tag in tags if str(tag).strip()),
        completed=bool(_get(item, "completed", False)),
    )


def parse_log(item: dict, index: int) -> DailyLog:
    """Build a DailyLog from a blob record; `index` is used in error messages."""

    missing = [name for name in _REQUIRED_LOG_FIELDS if not _get(item, name)]
    if missing:
        raise ValueError(f"Log {index}: missing required fields {missing}")

    mood = str(_get(item, "mood")).strip()
    if mood not in MOODS:
        raise ValueError(f"Log {index}: invalid mood '{mood}'")

    raw_tasks = _get(item, "tasks") or []
    if not isinstance(raw_tasks, list):
        raise ValueError(f"Log {index}: tasks must be a list")
    tasks = tuple(parse_task(task, f"Log {index} task {i}") for i, task in enumerate(raw_tasks, start=1))

    is_reviewed = bool(_get(item, "isReviewed", False))
    reviewed_by = _optional_str(_get(item, "reviewedBy"))
    if is_reviewed and not reviewed_by:
        raise ValueError(f"Log {index}: reviewed log without reviewedBy")

    return DailyLog(
        id=str(item["id"]),
        user_id=str(_get(item, "userId")),
        date=str(_get(item, "date")),
        tasks=tasks,
        mood=mood,
        summary=_text(_get(item, "summary")),
        blockers=_optional_str(_get(item, "blockers")),
        is_reviewed=is_reviewed,
        reviewed_by=reviewed_by,
        review_notes=_optional_str(_get(item, "reviewNotes")),
        created_at=_text(_get(item, "createdAt")),
        updated_at=_text(_get(item, "updatedAt")),
    )


def parse_user(item: dict, index: int) -> User:
    missing = [name for name in ("id", "name", "email", "role") if not item.get(name)]
    if missing:
        raise ValueError(f"User {index}: missing required fields {missing}")
    if item["role"] not in ROLES:
        raise ValueError(f"User {index}: invalid role '{item['role']}'")
    return User(
        id=str(item["id"]),
        name=str(item["name"]),
        email=str(item["email"]),
        role=item["role"],
        avatar=_optional_str(item.get("avatar")),
        team_id=_optional_str(_get(item, "teamId")),
    )


def parse_team(item: dict, index: int) -> Team:
    missing = [name for name in ("id", "name", "managerId") if not _get(item, name)]
    if missing:
        raise ValueError(f"Team {index}: missing required fields {missing}")
    return Team(
        id=str(item["id"]),
        name=str(item["name"]),
        manager_id=str(_get(item, "managerId")),
        members=frozenset(str(member) for member in item.get("members") or []),
    )


def task_to_dict(task: Task) -> dict:
    return {
        "id": task.id,
        "description": task.description,
        "timeSpent": task.time_spent,
        "tags": sorted(task.tags),
        "completed": task.completed,
    }


def log_to_dict(log: DailyLog) -> dict:
    """Serialize a log with the camelCase keys used by the blob."""

    return {
        "id": log.id,
        "userId": log.user_id,
        "date": log.date,
        "tasks": [task_to_dict(task) for task in log.tasks],
        "mood": log.mood,
        "blockers": log.blockers,
        "summary": log.summary,
        "isReviewed": log.is_reviewed,
        "reviewedBy": log.reviewed_by,
        "reviewNotes": log.review_notes,
        "createdAt": log.created_at,
        "updatedAt": log.updated_at,
    }


def user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "avatar": user.avatar,
        "teamId": user.team_id,
    }


def team_to_dict(team: Team) -> dict:
    return {
        "id": team.id,
        "name": team.name,
        "managerId": team.manager_id,
        "members": sorted(team.members),
    }


def parse(file_path: str) -> WorklogDocument:
    """Parse a JSON blob into users, teams and logs.

    The payload is either an object with `users`, `teams` and `dailyLogs`
    lists, or a bare list of logs.
    """

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if isinstance(payload, list):
        payload = {"dailyLogs": payload}
    if not isinstance(payload, dict):
        raise ValueError("JSON payload must be an object or a list of logs")

    raw_logs = payload.get("dailyLogs", payload.get("logs", []))
    return WorklogDocument(
        users=[parse_user(item, i) for i, item in enumerate(payload.get("users", []), start=1)],
        teams=[parse_team(item, i) for i, item in enumerate(payload.get("teams", []), start=1)],
        logs=[parse_log(item, i) for i, item in enumerate(raw_logs, start=1)],
    )


def dump(document: WorklogDocument, file_path: str) -> None:
    """Write the whole document back as one JSON blob."""

    payload = {
        "users": [user_to_dict(user) for user in document.users],
        "teams": [team_to_dict(team) for team in document.teams],
        "dailyLogs": [log_to_dict(log) for log in document.logs],
    }
    with open(file_path, "w", encoding="utf-8") as handle:
        json.dump(payload, handle, ensure_ascii=False, indent=2)
