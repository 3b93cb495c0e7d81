"""Demo script for worklog-engine."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from worklog_engine.adapters import json_adapter
from worklog_engine.aggregator import compute_productivity, rollup
from worklog_engine.directory import Directory
from worklog_engine.filters import LogFilter
from worklog_engine.store import LogStore
from worklog_engine.views import context_for, query_logs


def main() -> None:
    document = json_adapter.parse("examples/sample_logs.json")
    directory = Directory.from_document(document)
    store = LogStore(document.logs)

    developer = context_for(directory, "user1")
    manager = context_for(directory, "user3")

    log = store.create(
        {
            "user_id": "user1",
            "date": "2025-01-08",
            "mood": "good",
            "summary": "Paired on the release checklist.",
            "tasks": [{"description": "Release checklist", "time_spent": 40, "completed": True}],
        }
    )
    store.review_as(manager, log.id, "Nice work.")

    own = query_logs(store.list(), developer)
    points = compute_productivity(own, "2025-01-01", "2025-01-31", chronological=True)
    print("Developer points:", points)
    print("Rollup:", rollup(points))

    pending = query_logs(store.list(), manager, LogFilter(review_status="pending"))
    print("Pending for manager:", [entry.id for entry in pending])


if __name__ == "__main__":
    main()
