"""
UTC datetime utilities for consistent timezone handling.

All timestamps in executions, results and analytics are timezone-aware UTC.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def elapsed_ms(start: datetime, end: datetime) -> float:
    """Milliseconds between two datetimes (negative if end precedes start)."""
    return (end - start).total_seconds() * 1000
