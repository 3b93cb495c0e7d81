"""Role-scoped views over the log collection.

Every query goes through `resolve_visible_logs` first, so filter predicates
only ever see logs the actor is allowed to see.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, Iterable, Optional, TypeVar

from worklog_engine.directory import Directory
from worklog_engine.errors import Unauthorized
from worklog_engine.filters import LogFilter, filter_logs, sort_newest_first
from worklog_engine.schema import DailyLog, Team, User

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ActorContext:
    """Identity, role and team of whoever is acting."""

    user: User
    team: Optional[Team] = None

    @property
    def is_manager(self) -> bool:
        return self.user.role == "manager"

    @property
    def is_developer(self) -> bool:
        return self.user.role == "developer"


def context_for(directory: Directory, user_id: str) -> ActorContext:
    """Build the context for a user, attaching the team they belong to or manage."""

    user = directory.get_user(user_id)
    team = None
    if user.team_id:
        team = directory.get_team(user.team_id)
    elif user.role == "manager":
        team = directory.team_managed_by(user.id)
    return ActorContext(user=user, team=team)


def _managed_members(context: ActorContext) -> frozenset[str]:
    team = context.team
    if team is None:
        raise Unauthorized(f"Manager {context.user.id} has no team")
    if team.manager_id != context.user.id:
        raise Unauthorized(f"User {context.user.id} does not manage team {team.id}")
    return team.members - {context.user.id}


def resolve_visible_logs(logs: Iterable[DailyLog], context: ActorContext) -> list[DailyLog]:
    """Restrict logs to what the actor may see.

    Developers see their own logs. Managers see logs of their team's members,
    never their own.
    """

    if context.is_developer:
        visible = [log for log in logs if log.user_id == context.user.id]
    elif context.is_manager:
        members = _managed_members(context)
        visible = [log for log in logs if log.user_id in members]
    else:
        raise Unauthorized(f"Unknown role '{context.user.role}'")

    logger.debug("Resolved %d visible logs for %s (%s)", len(visible), context.user.id, context.user.role)
    return visible


def query_logs(
    logs: Iterable[DailyLog],
    context: ActorContext,
    spec: LogFilter | dict | None = None,
    newest_first: bool = True,
) -> list[DailyLog]:
    """Scope, then filter, then optionally sort newest first."""

    scoped = resolve_visible_logs(logs, context)
    filtered = filter_logs(scoped, spec)
    return sort_newest_first(filtered) if newest_first else filtered


def ensure_can_edit(context: ActorContext, log: DailyLog) -> None:
    """Only the owning developer may change or delete a log's content."""

    if not context.is_developer or log.user_id != context.user.id:
        raise Unauthorized(f"User {context.user.id} cannot modify log {log.id}")


def ensure_can_review(context: ActorContext, log: DailyLog) -> None:
    if not context.is_manager:
        raise Unauthorized(f"User {context.user.id} is not a manager")
    if log.user_id not in _managed_members(context):
        raise Unauthorized(f"Log {log.id} is outside the team of {context.user.id}")


class ViewRefresh(Generic[T]):
    """Last-write-wins holder for a view's query results.

    Call `begin()` when a query is issued and `accept()` when it completes;
    a result from a superseded query is dropped.
    """

    def __init__(self) -> None:
        self._latest = 0
        self.current: Optional[T] = None

    def begin(self) -> int:
        self._latest += 1
        return self._latest

    def accept(self, ticket: int, result: T) -> bool:
        if ticket != self._latest:
            logger.debug("Dropping stale result for ticket %d (latest %d)", ticket, self._latest)
            return False
        self.current = result
        return True

    def run(self, query: Any, *args: Any, **kwargs: Any) -> T:
        """Issue and complete a query in one step."""

        ticket = self.begin()
        result = query(*args, **kwargs)
        self.accept(ticket, result)
        return result
