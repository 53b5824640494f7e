"""
Time helpers.

Timestamps are stored and compared as naive UTC datetimes throughout the
backend, both in the database and in response metadata.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current UTC time without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def elapsed_ms(start: datetime) -> int:
    """Whole milliseconds since `start`, a value previously taken from utc_now()."""
    return int((utc_now() - start).total_seconds() * 1000)
