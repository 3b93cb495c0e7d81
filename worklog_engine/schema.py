"""Core data schema for daily work logs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

MOODS = ("great", "good", "neutral", "bad", "terrible")
MOOD_SCORES = {"great": 5, "good": 4, "neutral": 3, "bad": 2, "terrible": 1}

ROLES = ("developer", "manager")
REVIEW_STATUSES = ("reviewed", "pending")


def mood_score(mood: str) -> int:
    """Return the 1-5 score of a mood level."""

    return MOOD_SCORES[mood]


@dataclass(frozen=True)
class Task:
    """One unit of work inside a log."""

    id: str
    description: str
    time_spent: int
    tags: frozenset[str] = field(default_factory=frozenset)
    completed: bool = False


@dataclass(frozen=True)
class DailyLog:
    """A developer's record of a single day's work."""

    id: str
    user_id: str
    date: str
    tasks: tuple[Task, ...]
    mood: str
    summary: str
    blockers: Optional[str] = None
    is_reviewed: bool = False
    reviewed_by: Optional[str] = None
    review_notes: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    @property
    def completed_tasks(self) -> int:
        return sum(1 for task in self.tasks if task.completed)

    @property
    def total_time_spent(self) -> int:
        return sum(task.time_spent for task in self.tasks)

    @property
    def has_blockers(self) -> bool:
        return bool(self.blockers)


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    role: str
    avatar: Optional[str] = None
    team_id: Optional[str] = None


@dataclass(frozen=True)
class Team:
    """Visibility boundary for a manager's queries."""

    id: str
    name: str
    manager_id: str
    members: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class ProductivityPoint:
    """Per-log productivity metric; derived, never stored."""

    date: str
    tasks_completed: int
    total_time_spent: int
    mood: str
