import json

import pytest

from worklog_engine.adapters.csv_adapter import parse as parse_csv
from worklog_engine.adapters.csv_adapter import write as write_csv
from worklog_engine.adapters.json_adapter import WorklogDocument, dump, parse as parse_json
from worklog_engine.schema import DailyLog, Task


def test_json_parse_camel_case_document(tmp_path):
    path = tmp_path / "blob.json"
    payload = {
        "users": [{"id": "u1", "name": "Alex", "email": "a@example.com", "role": "developer", "teamId": "t1"}],
        "teams": [{"id": "t1", "name": "Frontend", "managerId": "m1", "members": ["u1"]}],
        "dailyLogs": [
            {
                "id": "l1",
                "userId": "u1",
                "date": "2025-01-01",
                "mood": "good",
                "summary": "Day",
                "tasks": [{"id": "t1", "description": "Bug", "timeSpent": 30, "tags": ["ui"], "completed": True}],
                "isReviewed": True,
                "reviewedBy": "m1",
            }
        ],
    }
    path.write_text(json.dumps(payload), encoding="utf-8")

    document = parse_json(str(path))
    assert document.users[0].team_id == "t1"
    assert document.teams[0].members == frozenset({"u1"})
    log = document.logs[0]
    assert log.tasks == (Task("t1", "Bug", 30, frozenset({"ui"}), True),)
    assert log.reviewed_by == "m1"
    assert log.blockers is None


def test_json_parse_bare_list_of_logs(tmp_path):
    path = tmp_path / "logs.json"
    path.write_text(json.dumps([{"id": "l1", "userId": "u1", "date": "2025-01-01", "mood": "bad"}]), encoding="utf-8")
    document = parse_json(str(path))
    assert document.users == []
    assert document.logs[0].tasks == ()


def test_json_parse_null_text_fields_become_empty(tmp_path):
    path = tmp_path / "logs.json"
    item = {"id": "l1", "userId": "u1", "date": "2025-01-01", "mood": "good"}
    item.update(summary=None, createdAt=None, updatedAt=None)
    path.write_text(json.dumps([item]), encoding="utf-8")

    log = parse_json(str(path)).logs[0]
    assert (log.summary, log.created_at, log.updated_at) == ("", "", "")


def test_json_parse_malformed(tmp_path):
    path = tmp_path / "logs.json"
    path.write_text(json.dumps([{"id": "l1", "userId": "u1", "date": "2025-01-01", "mood": "meh"}]), encoding="utf-8")
    with pytest.raises(ValueError):
        parse_json(str(path))

    path.write_text(
        json.dumps([{"id": "l1", "userId": "u1", "date": "2025-01-01", "mood": "good", "isReviewed": True}]),
        encoding="utf-8",
    )
    with pytest.raises(ValueError):
        parse_json(str(path))


def test_json_dump_writes_camel_case(tmp_path):
    path = tmp_path / "out.json"
    log = DailyLog("l1", "u1", "2025-01-01", (Task("t1", "x", 5, frozenset({"b", "a"})),), "good", "s")
    dump(WorklogDocument(logs=[log]), str(path))

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["dailyLogs"][0]["userId"] == "u1"
    assert payload["dailyLogs"][0]["tasks"][0] == {
        "id": "t1",
        "description": "x",
        "timeSpent": 5,
        "tags": ["a", "b"],
        "completed": False,
    }


def test_csv_parse_groups_rows_into_logs(tmp_path):
    path = tmp_path / "logs.csv"
    path.write_text(
        "log_id,user_id,date,mood,summary,blockers,is_reviewed,reviewed_by,task_id,description,time_spent,tags,completed\n"
        "l1,u1,2025-01-01,good,Day,,false,,t1,Bug,30,ui;bugfix,true\n"
        "l1,u1,2025-01-01,good,Day,,false,,t2,Docs,15,,false\n"
        "l2,u2,2025-01-02,neutral,Other,API down,true,m1,,,,,\n",
        encoding="utf-8",
    )
    logs = parse_csv(str(path))
    assert [log.id for log in logs] == ["l1", "l2"]
    assert [task.id for task in logs[0].tasks] == ["t1", "t2"]
    assert logs[0].tasks[0].tags == frozenset({"ui", "bugfix"})
    assert logs[0].completed_tasks == 1
    assert logs[1].tasks == ()
    assert logs[1].blockers == "API down"
    assert logs[1].reviewed_by == "m1"


def test_csv_parse_invalid_row(tmp_path):
    path = tmp_path / "logs.csv"
    path.write_text("log_id,user_id,date,mood,task_id,time_spent\nl1,u1,2025-01-01,good,t1,abc\n", encoding="utf-8")
    with pytest.raises(ValueError):
        parse_csv(str(path))


def test_csv_write_then_parse_keeps_empty_logs(tmp_path):
    path = tmp_path / "export.csv"
    logs = [
        DailyLog("l1", "u1", "2025-01-01", (Task("t1", "x", 5, frozenset({"ui"}), True),), "good", "s"),
        DailyLog("l2", "u1", "2025-01-02", (), "bad", "nothing", blockers="sick"),
    ]
    write_csv(logs, str(path))
    parsed = parse_csv(str(path))
    assert [log.id for log in parsed] == ["l1", "l2"]
    assert parsed[0].tasks == logs[0].tasks
    assert parsed[1].tasks == ()
