"""Static user and team reference data."""

from __future__ import annotations

from typing import Iterable, Optional

from worklog_engine.errors import NotFound
from worklog_engine.schema import Team, User


class Directory:
    """Read-only lookup of users and teams."""

    def __init__(self, users: Iterable[User] = (), teams: Iterable[Team] = ()) -> None:
        self._users = {user.id: user for user in users}
        self._teams = {team.id: team for team in teams}

    @classmethod
    def from_document(cls, document) -> "Directory":
        return cls(document.users, document.teams)

    @property
    def users(self) -> list[User]:
        return list(self._users.values())

    @property
    def teams(self) -> list[Team]:
        return list(self._teams.values())

    def get_user(self, user_id: str) -> User:
        try:
            return self._users[user_id]
        except KeyError:
            raise NotFound("user", user_id) from None

    def find_user_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive email lookup. Passwords are never checked."""

        needle = email.strip().lower()
        return next((user for user in self._users.values() if user.email.lower() == needle), None)

    def get_team(self, team_id: str) -> Team:
        try:
            return self._teams[team_id]
        except KeyError:
            raise NotFound("team", team_id) from None

    def get_team_members(self, team_id: str) -> list[User]:
        team = self.get_team(team_id)
        return [user for user in self._users.values() if user.id in team.members]

    def team_managed_by(self, manager_id: str) -> Optional[Team]:
        return next((team for team in self._teams.values() if team.manager_id == manager_id), None)
