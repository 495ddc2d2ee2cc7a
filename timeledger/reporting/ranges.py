"""Calendar windows and period buckets.

Weeks always start on Monday, whatever the host locale says.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo
from typing import Optional, Union

from timeledger.models.report import DateRange, PeriodGranularity, RangePreset
from timeledger.reporting.dates import calendar_date


def reference_day(now: Union[datetime, date], tz: Optional[tzinfo] = None) -> date:
    """Calendar day of the reference instant."""
    if isinstance(now, datetime):
        return calendar_date(now, tz)
    return now


def start_of_week(day: date) -> date:
    """
    Monday on or before ``day``.

    Examples:
        >>> start_of_week(date(2024, 1, 10))
        datetime.date(2024, 1, 8)
        >>> start_of_week(date(2024, 1, 14))
        datetime.date(2024, 1, 8)
    """
    return day - timedelta(days=day.weekday())


def end_of_week(day: date) -> date:
    """
    Sunday on or after ``day``.

    Examples:
        >>> end_of_week(date(2024, 1, 8))
        datetime.date(2024, 1, 14)
    """
    return start_of_week(day) + timedelta(days=6)


def start_of_month(day: date) -> date:
    return day.replace(day=1)


def end_of_month(day: date) -> date:
    """
    Last day of the month containing ``day``.

    Examples:
        >>> end_of_month(date(2024, 2, 10))
        datetime.date(2024, 2, 29)
        >>> end_of_month(date(2023, 12, 31))
        datetime.date(2023, 12, 31)
    """
    first_of_next = (day.replace(day=28) + timedelta(days=4)).replace(day=1)
    return first_of_next - timedelta(days=1)


def quarter_index(day: date) -> int:
    """Zero-based quarter of the year (0 for January to March)."""
    return (day.month - 1) // 3


def start_of_quarter(day: date) -> date:
    return date(day.year, quarter_index(day) * 3 + 1, 1)


def end_of_quarter(day: date) -> date:
    return end_of_month(date(day.year, quarter_index(day) * 3 + 3, 1))


def quarter_label(day: date) -> str:
    """
    Quarter label such as ``2024-Q1``.

    Examples:
        >>> quarter_label(date(2024, 3, 31))
        '2024-Q1'
        >>> quarter_label(date(2024, 10, 1))
        '2024-Q4'
    """
    return f"{day.year}-Q{quarter_index(day) + 1}"


def period_key(day: date, granularity: PeriodGranularity) -> str:
    """
    Sortable key of the bucket containing ``day``.

    Weeks are keyed by their Monday, months by ``YYYY-MM`` and quarters by
    :func:`quarter_label`. Keys sort lexicographically in calendar order.

    Examples:
        >>> period_key(date(2024, 1, 10), PeriodGranularity.WEEK)
        '2024-01-08'
        >>> period_key(date(2024, 1, 10), PeriodGranularity.MONTH)
        '2024-01'
        >>> period_key(date(2024, 5, 10), PeriodGranularity.QUARTER)
        '2024-Q2'
    """
    if granularity == PeriodGranularity.WEEK:
        return start_of_week(day).isoformat()
    if granularity == PeriodGranularity.MONTH:
        return day.strftime("%Y-%m")
    return quarter_label(day)


def period_bounds(day: date, granularity: PeriodGranularity) -> tuple[date, date]:
    """First and last day of the bucket containing ``day``."""
    if granularity == PeriodGranularity.WEEK:
        return start_of_week(day), end_of_week(day)
    if granularity == PeriodGranularity.MONTH:
        return start_of_month(day), end_of_month(day)
    return start_of_quarter(day), end_of_quarter(day)


def named_range(
    preset: RangePreset,
    now: Union[datetime, date],
    tz: Optional[tzinfo] = None,
) -> DateRange:
    """
    Resolve a named window relative to ``now``.

    Args:
        preset: Window name
        now: Reference instant or day
        tz: Timezone deciding which day ``now`` falls on

    Returns:
        Inclusive date range

    Examples:
        >>> named_range(RangePreset.THIS_WEEK, date(2024, 1, 10))
        DateRange(date_from=datetime.date(2024, 1, 8), date_to=datetime.date(2024, 1, 14))
        >>> named_range(RangePreset.LAST_MONTH, date(2024, 1, 10))
        DateRange(date_from=datetime.date(2023, 12, 1), date_to=datetime.date(2023, 12, 31))
    """
    today = reference_day(now, tz)

    if preset == RangePreset.TODAY:
        return DateRange(date_from=today, date_to=today)
    if preset == RangePreset.THIS_WEEK:
        return DateRange(date_from=start_of_week(today), date_to=end_of_week(today))
    if preset == RangePreset.THIS_MONTH:
        return DateRange(date_from=start_of_month(today), date_to=end_of_month(today))
    if preset == RangePreset.LAST_MONTH:
        last_month = start_of_month(today) - timedelta(days=1)
        return DateRange(
            date_from=start_of_month(last_month), date_to=end_of_month(last_month)
        )
    if preset == RangePreset.THIS_QUARTER:
        return DateRange(
            date_from=start_of_quarter(today), date_to=end_of_quarter(today)
        )
    return DateRange()


def in_range(day: date, start: Optional[date], end: Optional[date] = None) -> bool:
    """
    Inclusive membership test.

    A missing ``start`` or ``end`` leaves that side open.

    Examples:
        >>> in_range(date(2024, 1, 8), date(2024, 1, 8), date(2024, 1, 14))
        True
        >>> in_range(date(2024, 1, 14), date(2024, 1, 8), date(2024, 1, 14))
        True
        >>> in_range(date(2024, 1, 15), date(2024, 1, 8), date(2024, 1, 14))
        False
        >>> in_range(date(2030, 1, 1), date(2024, 1, 8))
        True
    """
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True
