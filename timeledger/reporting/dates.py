"""Effective date resolution for time entries."""
from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import TYPE_CHECKING, Optional

from timeledger.reporting.durations import as_utc

if TYPE_CHECKING:
    from timeledger.models.time_entry import TimeEntry


def calendar_date(value: datetime, tz: Optional[tzinfo] = None) -> date:
    """
    Calendar date of a timestamp, seen from ``tz`` (UTC when omitted).

    Examples:
        >>> from zoneinfo import ZoneInfo
        >>> late = datetime(2024, 1, 1, 23, 30)
        >>> calendar_date(late)
        datetime.date(2024, 1, 1)
        >>> calendar_date(late, ZoneInfo("Europe/Copenhagen"))
        datetime.date(2024, 1, 2)
    """
    moment = as_utc(value)
    if tz is not None:
        moment = moment.astimezone(tz)
    return moment.date()


def resolve_effective_date(entry: TimeEntry, tz: Optional[tzinfo] = None) -> date:
    """
    Resolve the date used to filter and bucket an entry.

    The declared work ``date`` wins, then the day of ``start_time``, then the
    day of ``created_at``. ``created_at`` is mandatory, so this never fails.

    Args:
        entry: Time entry
        tz: Timezone used to turn timestamps into calendar days

    Returns:
        Effective date
    """
    if entry.date is not None:
        return entry.date
    if entry.start_time is not None:
        return calendar_date(entry.start_time, tz)
    return calendar_date(entry.created_at, tz)
