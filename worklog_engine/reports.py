"""Team and single-log reports built from scoped logs."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Sequence

from worklog_engine.adapters import csv_adapter
from worklog_engine.adapters.json_adapter import log_to_dict
from worklog_engine.aggregator import compute_productivity, log_stats, mood_trend, rollup, team_statistics
from worklog_engine.filters import LogFilter, filter_logs
from worklog_engine.schema import DailyLog

logger = logging.getLogger(__name__)

ALL_MEMBERS = "All Team Members"


def build_team_report(
    logs: Sequence[DailyLog],
    start_date: str,
    end_date: str,
    member_id: Optional[str] = None,
    member_name: Optional[str] = None,
) -> dict:
    """Summarize logs in a date range, optionally for one member.

    `logs` must already be scoped to what the requesting manager may see.
    """

    selected = filter_logs(logs, LogFilter(member_id=member_id, date_from=start_date, date_to=end_date))
    points = compute_productivity(selected, start_date, end_date, chronological=True)

    report = {
        "date_range": {"start": start_date, "end": end_date},
        "developer": (member_name or member_id) if member_id else ALL_MEMBERS,
        "statistics": team_statistics(selected),
        "productivity": {**rollup(points), "mood_trend": mood_trend(points)},
        "logs": [log_to_dict(log) for log in selected],
    }
    logger.debug("Built report for %s with %d logs", report["developer"], len(selected))
    return report


def build_log_export(log: DailyLog) -> dict:
    """Export payload for a single reviewed log."""

    stats = log_stats(log)
    return {
        "date": log.date,
        "user_id": log.user_id,
        "summary": log.summary,
        "tasks": [
            {
                "description": task.description,
                "time_spent": task.time_spent,
                "completed": task.completed,
                "tags": sorted(task.tags),
            }
            for task in log.tasks
        ],
        "time_spent": log.total_time_spent,
        "completed_tasks": stats["completed_tasks"],
        "mood": log.mood,
        "blockers": log.blockers,
        "review_notes": log.review_notes,
    }


def report_filename(report: dict, suffix: str = ".json") -> str:
    return f"team-report-{report['date_range']['start']}{suffix}"


def export_report_json(report: dict, out_dir: str | Path) -> Path:
    """Write the report as indented JSON; stands in for a rendered export."""

    out_path = Path(out_dir) / report_filename(report)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
    return out_path


def export_logs_csv(logs: Sequence[DailyLog], out_path: str | Path) -> Path:
    """Write logs as flat task rows."""

    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    csv_adapter.write(logs, str(out_path))
    return out_path
