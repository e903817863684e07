"""Date/time helpers"""

from datetime import datetime, timedelta, timezone
from typing import Optional

UTC = timezone.utc


def now_utc() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(UTC)


def ensure_utc(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def days_ago(days: int, now: Optional[datetime] = None) -> datetime:
    """Return the instant ``days`` days before ``now`` (default: current UTC)"""
    return (now or now_utc()) - timedelta(days=days)


def hours_between(earlier: datetime, later: datetime) -> float:
    """Elapsed hours from ``earlier`` to ``later`` (naive values are UTC)"""
    delta = ensure_utc(later) - ensure_utc(earlier)
    return delta.total_seconds() / 3600


def time_of_day_bucket(dt: datetime) -> str:
    """Map a timestamp to a time-of-day bucket by its hour

    Buckets: hour < 6 -> night, < 12 -> morning, < 16 -> afternoon,
    < 20 -> evening, otherwise night.

    Args:
        dt: timestamp; the hour is read as-is

    Returns:
        str: one of ``morning``, ``afternoon``, ``evening``, ``night``
    """
    hour = dt.hour
    if hour < 6:
        return "night"
    if hour < 12:
        return "morning"
    if hour < 16:
        return "afternoon"
    if hour < 20:
        return "evening"
    return "night"
