"""Trailing date window shared by all per-date statistics."""

from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, List

WINDOW_DAYS = 14


def date_window(today: date, days: int = WINDOW_DAYS) -> List[str]:
    """Return the ISO dates of the window, oldest first, ending with today."""
    return [(today - timedelta(days=offset)).isoformat() for offset in range(days - 1, -1, -1)]


def window_start(dates: List[str]) -> datetime:
    """Midnight UTC of the first day in the window."""
    return datetime.combine(date.fromisoformat(dates[0]), time.min, tzinfo=timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse a GitHub ISO 8601 timestamp such as ``2024-01-15T10:30:00Z``."""
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def seeded_counts(dates: List[str]) -> Dict[str, int]:
    return {day: 0 for day in dates}
