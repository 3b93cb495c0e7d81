"""Build a team productivity report from a JSON/CSV work-log file."""

from __future__ import annotations

import argparse
import json
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from worklog_engine.adapters import csv_adapter, json_adapter
from worklog_engine.adapters.json_adapter import WorklogDocument
from worklog_engine.config import configure_logging, settings
from worklog_engine.dates import current_week_range
from worklog_engine.directory import Directory
from worklog_engine.errors import WorklogError
from worklog_engine.reports import build_team_report, export_report_json
from worklog_engine.views import context_for, resolve_visible_logs


def _load_document(path: Path) -> WorklogDocument:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return WorklogDocument(logs=csv_adapter.parse(str(path)))
    if suffix == ".json":
        return json_adapter.parse(str(path))
    raise ValueError("Unsupported input format, expected .csv or .json")


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a work-log team report")
    parser.add_argument("--data", required=True, help="Path to CSV/JSON work-log file")
    parser.add_argument("--start", help="First date (YYYY-MM-DD), defaults to this week")
    parser.add_argument("--end", help="Last date (YYYY-MM-DD), defaults to this week")
    parser.add_argument("--member", help="Restrict the report to one user id")
    parser.add_argument("--as", dest="actor", help="Scope to what this user id may see")
    args = parser.parse_args()

    configure_logging(settings.log_level)

    document = _load_document(Path(args.data))
    week_start, week_end = current_week_range(date.today(), settings.week_starts_on)
    start, end = args.start or week_start, args.end or week_end

    logs = document.logs
    directory = Directory.from_document(document)
    member_name = None
    try:
        if args.actor:
            logs = resolve_visible_logs(logs, context_for(directory, args.actor))
        if args.member and args.member in {user.id for user in directory.users}:
            member_name = directory.get_user(args.member).name
    except WorklogError as exc:
        parser.error(str(exc))

    report = build_team_report(logs, start, end, member_id=args.member, member_name=member_name)
    print(json.dumps(report, indent=2))

    out_path = export_report_json(report, Path("outputs"))
    print(f"Saved report to {out_path}")


if __name__ == "__main__":
    main()
