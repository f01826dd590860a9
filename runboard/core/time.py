"""Time helpers shared by the store, the API and synthetic data."""

from __future__ import annotations

from datetime import datetime, timezone

SENTINEL_TIME = "00:00:00"


def utcnow() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


def format_duration(ms: int) -> str:
    """Render a millisecond duration as ``HH:MM:SS`` (truncating sub-seconds)."""

    total_seconds = max(int(ms), 0) // 1000
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_display_timestamp(moment: datetime) -> str:
    """Format a datetime the way game clients send ``timestamp`` (``DD/MM/YYYY, HH:MM:SS``)."""

    return moment.strftime("%d/%m/%Y, %H:%M:%S")


def time_of_day(timestamp: str | None) -> str:
    """Extract the time-of-day part of a composite ``date, time`` display string.

    Strings without the ``", "`` separator are returned unchanged.
    """

    if not timestamp:
        return ""
    _, sep, time_part = timestamp.partition(", ")
    return time_part if sep and time_part else timestamp


__all__ = [
    "SENTINEL_TIME",
    "format_display_timestamp",
    "format_duration",
    "time_of_day",
    "utcnow",
]
