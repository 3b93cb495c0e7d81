import pytest

from worklog_engine.filters import LogFilter, filter_logs, sort_newest_first
from worklog_engine.schema import DailyLog, Task


def sample_logs():
    return [
        DailyLog(
            "l1",
            "u1",
            "2025-01-01",
            (Task("t1", "Fixed login bug", 30, frozenset({"bugfix"}), True),),
            "good",
            "Quiet day",
            blockers="Waiting for API docs",
        ),
        DailyLog("l2", "u2", "2025-01-02", (), "neutral", "Planning session", is_reviewed=True, reviewed_by="m1"),
        DailyLog(
            "l3",
            "u1",
            "2025-01-03",
            (Task("t2", "Chart work", 60, frozenset({"Frontend"}), False),),
            "great",
            "Shipped the chart",
            blockers="",
        ),
        DailyLog("l4", "u3", "2025-01-04", (), "bad", "Outage", blockers="Staging is down"),
        DailyLog("l5", "u2", "2025-01-05", (), "good", "Docs", is_reviewed=True, reviewed_by="m1"),
    ]


def ids(logs):
    return [log.id for log in logs]


def test_empty_filter_is_identity():
    logs = sample_logs()
    assert filter_logs(logs, LogFilter()) == logs
    assert filter_logs(logs, {}) == logs
    assert filter_logs(logs) == logs


def test_has_blockers_true_and_false():
    logs = sample_logs()
    assert ids(filter_logs(logs, LogFilter(has_blockers=True))) == ["l1", "l4"]
    assert ids(filter_logs(logs, LogFilter(has_blockers=False))) == ["l2", "l3", "l5"]


def test_search_matches_summary_description_tag_and_date_case_insensitively():
    logs = sample_logs()
    assert ids(filter_logs(logs, LogFilter(search_term="planning"))) == ["l2"]
    assert ids(filter_logs(logs, LogFilter(search_term="LOGIN"))) == ["l1"]
    assert ids(filter_logs(logs, LogFilter(search_term="frontend"))) == ["l3"]
    assert ids(filter_logs(logs, LogFilter(search_term="2025-01-04"))) == ["l4"]


def test_search_does_not_match_blockers_text():
    assert filter_logs(sample_logs(), LogFilter(search_term="staging")) == []


def test_member_review_and_date_range():
    logs = sample_logs()
    assert ids(filter_logs(logs, LogFilter(member_id="u1"))) == ["l1", "l3"]
    assert ids(filter_logs(logs, LogFilter(review_status="reviewed"))) == ["l2", "l5"]
    assert ids(filter_logs(logs, LogFilter(review_status="pending"))) == ["l1", "l3", "l4"]
    assert ids(filter_logs(logs, LogFilter(date_from="2025-01-02", date_to="2025-01-04"))) == ["l2", "l3", "l4"]


def test_dimensions_combine_with_and():
    logs = sample_logs()
    spec = LogFilter(member_id="u1", has_blockers=True)
    assert ids(filter_logs(logs, spec)) == ["l1"]


def test_sequential_filters_equal_combined_filter():
    logs = sample_logs()
    first = LogFilter(review_status="pending")
    second = LogFilter(review_status="pending", member_id="u1", date_from="2025-01-02")
    sequential = filter_logs(filter_logs(logs, first), second)
    assert ids(sequential) == ["l3"]
    assert sequential == filter_logs(logs, second)
    assert sequential == filter_logs(logs, first.override(LogFilter(member_id="u1", date_from="2025-01-02")))
    assert set(ids(sequential)) <= set(ids(logs))


def test_override_replaces_conflicting_dimension():
    logs = sample_logs()
    first = LogFilter(member_id="u1")
    second = LogFilter(member_id="u2")
    assert filter_logs(filter_logs(logs, first), second) == []
    assert first.override(second) == second
    assert ids(filter_logs(logs, first.override(second))) == ["l2", "l5"]


def test_filtering_never_reorders():
    logs = list(reversed(sample_logs()))
    assert ids(filter_logs(logs, LogFilter(review_status="pending"))) == ["l4", "l3", "l1"]


def test_reset_returns_unfiltered_collection():
    logs = sample_logs()
    spec = LogFilter(member_id="u2", has_blockers=True)
    assert filter_logs(logs, spec) == []
    cleared = spec.reset()
    assert cleared.is_empty()
    assert filter_logs(logs, cleared) == logs


def test_from_dict_accepts_camel_case_and_blank_values():
    spec = LogFilter.from_dict({"hasBlockers": True, "memberId": "", "dateTo": "2025-01-03"})
    assert spec == LogFilter(has_blockers=True, date_to="2025-01-03")
    assert ids(filter_logs(sample_logs(), {"reviewStatus": "reviewed"})) == ["l2", "l5"]


def test_from_dict_rejects_unknown_values():
    with pytest.raises(ValueError):
        LogFilter.from_dict({"colour": "red"})
    with pytest.raises(ValueError):
        LogFilter.from_dict({"reviewStatus": "maybe"})


def test_sort_newest_first_uses_calendar_order():
    logs = [
        DailyLog("a", "u1", "2025-1-9", (), "good", "s"),
        DailyLog("b", "u1", "2025-01-10", (), "good", "s"),
        DailyLog("c", "u1", "2024-12-31", (), "good", "s"),
        DailyLog("d", "u2", "2025-01-10", (), "good", "s"),
    ]
    assert ids(sort_newest_first(logs)) == ["b", "d", "a", "c"]
