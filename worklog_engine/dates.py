"""Calendar helpers for log dates and display formatting."""

from __future__ import annotations

import calendar
from datetime import date, timedelta


def parse_date(value: str) -> date:
    """Parse a calendar date, tolerating non-padded parts ("2025-1-7").

    A trailing time component ("2025-01-07T10:00:00") is ignored.
    """

    day_part = value.strip().split("T", maxsplit=1)[0]
    try:
        year, month, day = (int(part) for part in day_part.split("-"))
        return date(year, month, day)
    except ValueError as exc:
        raise ValueError(f"Malformed date '{value}'") from exc


def current_week_range(today: date, week_starts_on: str = "sunday") -> tuple[str, str]:
    """Return the (start, end) ISO dates of the week containing `today`."""

    if week_starts_on == "monday":
        offset = today.weekday()
    else:
        offset = (today.weekday() + 1) % 7
    start = today - timedelta(days=offset)
    end = start + timedelta(days=6)
    return start.isoformat(), end.isoformat()


def current_month_range(today: date) -> tuple[str, str]:
    """Return the first and last ISO dates of the month containing `today`."""

    last_day = calendar.monthrange(today.year, today.month)[1]
    return (
        date(today.year, today.month, 1).isoformat(),
        date(today.year, today.month, last_day).isoformat(),
    )


def last_n_days(days: int, today: date) -> list[str]:
    """ISO dates for the last `days` days ending today, oldest first."""

    return [(today - timedelta(days=offset)).isoformat() for offset in range(days - 1, -1, -1)]


def is_today(value: str, today: date) -> bool:
    return parse_date(value) == today


def format_time_spent(minutes: int) -> str:
    """Render minutes as "2h 30m", "2h" or "45m"."""

    hours, mins = divmod(int(minutes), 60)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def format_date(value: str) -> str:
    """Render a log date as "Jan 15, 2025"."""

    parsed = parse_date(value)
    return f"{calendar.month_abbr[parsed.month]} {parsed.day}, {parsed.year}"
