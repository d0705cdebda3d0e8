"""Timestamp and calendar-date helpers."""

from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse an ISO-8601 timestamp.

    Accepts a trailing ``Z`` (as written by JavaScript's ``toISOString``).
    Naive values are assumed to be UTC.

    Raises:
        ValueError: If the value is not a valid timestamp
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        if not isinstance(value, str):
            raise ValueError(f"Expected an ISO timestamp, got {value!r}")
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_date(value: str | date) -> date:
    """Parse a calendar date.

    Accepts ``YYYY-MM-DD`` or a full ISO timestamp, in which case only the
    date part is kept. Older backups stored workout dates as timestamps.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Expected an ISO date, got {value!r}")

    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        return parse_timestamp(text).date()


def format_date(value: date) -> str:
    """Format a calendar date as YYYY-MM-DD."""
    return value.isoformat()
