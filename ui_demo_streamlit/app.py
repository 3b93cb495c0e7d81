"""Streamlit demo UI for worklog-engine."""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path
from typing import Any

from worklog_engine.adapters import json_adapter
from worklog_engine.aggregator import (
    average_mood,
    compute_productivity,
    log_stats,
    manager_overview,
    mood_trend,
    rollup,
)
from worklog_engine.config import settings
from worklog_engine.dates import current_month_range, current_week_range, format_date, format_time_spent
from worklog_engine.directory import Directory
from worklog_engine.errors import WorklogError
from worklog_engine.filters import LogFilter
from worklog_engine.views import ActorContext, context_for, query_logs

MOOD_EMOJIS = {"great": "😄", "good": "🙂", "neutral": "😐", "bad": "🙁", "terrible": "😫"}
DEMO_DATA = "examples/sample_logs.json"


def _parse_uploaded(uploaded_file) -> json_adapter.WorklogDocument:
    with tempfile.NamedTemporaryFile(delete=False, suffix=".json") as handle:
        handle.write(uploaded_file.getbuffer())
        temp_path = handle.name
    return json_adapter.parse(temp_path)


def _date_range(choice: str, today: date) -> tuple[str, str]:
    if choice == "month":
        return current_month_range(today)
    return current_week_range(today, settings.week_starts_on)


def run_dashboard(logs: list, context: ActorContext, spec: LogFilter, start: str, end: str, today: str) -> dict[str, Any]:
    """Run scoping, filtering and aggregation and return a UI-friendly payload."""

    visible = query_logs(logs, context, spec)
    points = compute_productivity(visible, start, end, chronological=True)
    result = {
        "logs": visible,
        "cards": [
            {
                "date": format_date(log.date),
                "user_id": log.user_id,
                "mood": MOOD_EMOJIS[log.mood],
                "reviewed": log.is_reviewed,
                **log_stats(log),
            }
            for log in visible
        ],
        "points": points,
        "rollup": rollup(points),
        "average_mood": average_mood(points),
        "mood_trend": mood_trend(points),
    }
    if context.is_manager:
        result["overview"] = manager_overview(visible, today)
    return result


def main() -> None:
    import streamlit as st

    st.set_page_config(page_title="Work Log Dashboard", layout="wide")
    st.title("Daily Work Log Dashboard")

    with st.sidebar:
        st.header("Controls")
        uploaded = st.file_uploader("Upload work-log blob", type=["json"])
        use_demo = st.checkbox("Load demo dataset", value=True)
        user_id = st.text_input("Act as user id", value="user3")
        period = st.selectbox("Date range", options=["week", "month"], index=0)
        search_term = st.text_input("Search")
        review_status = st.selectbox("Review status", options=["", "reviewed", "pending"], index=0)
        blockers = st.selectbox("Blockers", options=["any", "with blockers", "without blockers"], index=0)
        run = st.button("Show dashboard", type="primary")

    if not run:
        st.info("Pick a user and filters in the sidebar and click **Show dashboard**.")
        return

    try:
        if use_demo:
            document = json_adapter.parse(DEMO_DATA)
        elif uploaded is not None:
            document = _parse_uploaded(uploaded)
        else:
            st.error("Please upload a JSON file or enable 'Load demo dataset'.")
            return

        context = context_for(Directory.from_document(document), user_id)
        today = date.today()
        start, end = _date_range(period, today)
        spec = LogFilter(
            search_term=search_term or None,
            review_status=review_status or None,
            has_blockers={"any": None, "with blockers": True, "without blockers": False}[blockers],
        )
        result = run_dashboard(document.logs, context, spec, start, end, today.isoformat())

        st.success(f"{context.user.name} ({context.user.role}) sees {len(result['logs'])} logs.")

        if "overview" in result:
            st.subheader("Team Overview")
            overview = result["overview"]
            o1, o2, o3, o4 = st.columns(4)
            o1.metric("Logs", overview["total_logs"])
            o2.metric("Pending reviews", overview["pending_reviews"])
            o3.metric("Submitted today", overview["today_logs"])
            o4.metric("Blockers", overview["blockers"])

        st.subheader(f"Productivity {format_date(start)} - {format_date(end)}")
        summary = result["rollup"]
        c1, c2, c3, c4 = st.columns(4)
        c1.metric("Tasks completed", summary["tasks_completed"])
        c2.metric("Time spent", format_time_spent(summary["total_time_spent"]))
        c3.metric("Avg tasks / day", summary["avg_tasks_per_day"])
        c4.metric("Mood trend", f"{result['mood_trend']:+.2f}")
        if result["points"]:
            st.bar_chart({point.date: point.tasks_completed for point in result["points"]})

        st.subheader("Logs")
        st.table(result["cards"] or [{"message": "No logs match the current filters"}])

    except (ValueError, WorklogError) as exc:
        st.error(f"Input error: {exc}")


if __name__ == "__main__":
    main()
