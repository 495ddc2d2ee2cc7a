"""Duration resolution for time entries.

An entry can describe the time spent in three ways: an explicit
``duration_minutes``, a ``start_time``/``end_time`` pair, or a lone
``start_time`` for a timer that is still running. Every screen and report
resolves durations through :func:`resolve_duration_seconds` so totals agree.
"""
from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from timeledger.models.time_entry import TimeEntryBase


def parse_minutes(value) -> Optional[float]:
    """
    Parse a stored minutes value.

    Args:
        value: Raw value from the store (number, numeric string or None)

    Returns:
        Non-negative minutes, or None when absent or malformed

    Examples:
        >>> parse_minutes(90)
        90.0
        >>> parse_minutes(" 7.5 ")
        7.5
        >>> parse_minutes("abc") is None
        True
        >>> parse_minutes(-5) is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        minutes = float(str(value).strip())
    except ValueError:
        return None
    if not math.isfinite(minutes * 60) or minutes < 0:
        return None
    return minutes


def as_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to UTC, reading naive values as UTC.

    Examples:
        >>> as_utc(datetime(2024, 1, 1, 9, 0)).isoformat()
        '2024-01-01T09:00:00+00:00'
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def seconds_between(start: datetime, end: datetime) -> int:
    """Whole seconds from start to end, clamped at zero."""
    delta = as_utc(end) - as_utc(start)
    return max(0, int(delta.total_seconds()))


def resolve_duration_seconds(
    entry: TimeEntryBase, now: Optional[datetime] = None
) -> int:
    """
    Resolve how many seconds an entry accounts for.

    Precedence, first applicable wins:

    1. ``duration_minutes`` (zero included) times 60
    2. ``end_time - start_time``, clamped to zero
    3. ``now - start_time`` for a running entry, only when ``now`` is given
    4. zero

    Args:
        entry: Time entry to resolve
        now: Reference instant for running entries. Closed-period reports
            leave it unset so running entries contribute nothing.

    Returns:
        Non-negative duration in seconds
    """
    minutes = parse_minutes(entry.duration_minutes)
    if minutes is not None:
        return int(round(minutes * 60))

    if entry.start_time is not None and entry.end_time is not None:
        return seconds_between(entry.start_time, entry.end_time)

    if entry.start_time is not None and now is not None:
        return seconds_between(entry.start_time, now)

    return 0


def is_running(entry: TimeEntryBase) -> bool:
    """True when the entry's timer has been started but not stopped."""
    return (
        entry.start_time is not None
        and entry.end_time is None
        and parse_minutes(entry.duration_minutes) is None
    )
