"""Multi-criteria filtering and search across daily logs."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Callable, Iterable, Mapping, Optional

from worklog_engine.dates import parse_date
from worklog_engine.schema import REVIEW_STATUSES, DailyLog

_CAMEL_KEYS = {
    "searchTerm": "search_term",
    "memberId": "member_id",
    "reviewStatus": "review_status",
    "hasBlockers": "has_blockers",
    "dateFrom": "date_from",
    "dateTo": "date_to",
}


@dataclass(frozen=True)
class LogFilter:
    """Filter dimensions; None or "" leaves a dimension unapplied."""

    search_term: Optional[str] = None
    member_id: Optional[str] = None
    review_status: Optional[str] = None
    has_blockers: Optional[bool] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "LogFilter":
        """Build a filter from snake_case or camelCase keys."""

        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in payload.items():
            name = _CAMEL_KEYS.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown filter dimension '{key}'")
            values[name] = None if value == "" else value

        status = values.get("review_status")
        if status is not None and status not in REVIEW_STATUSES:
            raise ValueError(f"Invalid review status '{status}'")
        return cls(**values)

    def is_empty(self) -> bool:
        return all(value in (None, "") for value in asdict(self).values())

    def reset(self) -> "LogFilter":
        return LogFilter()

    def override(self, other: "LogFilter") -> "LogFilter":
        """Copy of this filter with every dimension set on `other` replaced.

        This is not an intersection: when both filters constrain the same
        dimension, `other` wins. Apply both filters in turn to AND them.
        """

        overrides = {key: value for key, value in asdict(other).items() if value not in (None, "")}
        return replace(self, **overrides)


def _matches_search(log: DailyLog, term: str) -> bool:
    needle = term.lower()
    if needle in log.summary.lower() or needle in log.date.lower():
        return True
    for task in log.tasks:
        if needle in task.description.lower():
            return True
        if any(needle in tag.lower() for tag in task.tags):
            return True
    return False


def _predicates(spec: LogFilter) -> list[Callable[[DailyLog], bool]]:
    predicates: list[Callable[[DailyLog], bool]] = []

    if spec.search_term:
        term = spec.search_term
        predicates.append(lambda log: _matches_search(log, term))
    if spec.member_id:
        member_id = spec.member_id
        predicates.append(lambda log: log.user_id == member_id)
    if spec.review_status == "reviewed":
        predicates.append(lambda log: log.is_reviewed)
    elif spec.review_status == "pending":
        predicates.append(lambda log: not log.is_reviewed)
    if spec.has_blockers is True:
        predicates.append(lambda log: log.has_blockers)
    elif spec.has_blockers is False:
        predicates.append(lambda log: not log.has_blockers)
    if spec.date_from:
        date_from = spec.date_from
        predicates.append(lambda log: log.date >= date_from)
    if spec.date_to:
        date_to = spec.date_to
        predicates.append(lambda log: log.date <= date_to)

    return predicates


def filter_logs(logs: Iterable[DailyLog], spec: LogFilter | Mapping[str, Any] | None = None) -> list[DailyLog]:
    """Return the logs satisfying every active filter dimension, in input order."""

    if spec is None:
        spec = LogFilter()
    elif not isinstance(spec, LogFilter):
        spec = LogFilter.from_dict(spec)

    predicates = _predicates(spec)
    return [log for log in logs if all(predicate(log) for predicate in predicates)]


def sort_newest_first(logs: Iterable[DailyLog]) -> list[DailyLog]:
    """Sort by calendar date, newest first; ties keep their input order."""

    return sorted(logs, key=lambda log: parse_date(log.date), reverse=True)
