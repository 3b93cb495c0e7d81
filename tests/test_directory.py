from pathlib import Path

import pytest

from worklog_engine.adapters import json_adapter
from worklog_engine.directory import Directory
from worklog_engine.errors import NotFound

SAMPLE_PATH = Path(__file__).resolve().parents[1] / "examples" / "sample_logs.json"


def sample_directory():
    return Directory.from_document(json_adapter.parse(str(SAMPLE_PATH)))


def test_lookup_users_and_teams():
    directory = sample_directory()
    assert directory.get_user("user3").role == "manager"
    assert directory.get_team("team1").manager_id == "user3"
    assert [user.id for user in directory.get_team_members("team1")] == ["user1", "user2"]
    assert directory.team_managed_by("user5").id == "team2"
    assert directory.team_managed_by("user1") is None


def test_find_user_by_email_ignores_case():
    directory = sample_directory()
    assert directory.find_user_by_email("  Alex@Example.com ").id == "user1"
    assert directory.find_user_by_email("nobody@example.com") is None


def test_unknown_ids_raise_not_found():
    directory = sample_directory()
    with pytest.raises(NotFound) as excinfo:
        directory.get_team_members("team9")
    assert excinfo.value.kind == "team"
    with pytest.raises(NotFound):
        directory.get_user("user9")
