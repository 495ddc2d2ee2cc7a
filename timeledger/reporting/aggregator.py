"""Aggregation of time entries into grouped, period and client totals.

Every pass resolves durations through
:func:`~timeledger.reporting.durations.resolve_duration_seconds` and keeps
raw seconds. Rounding to hours belongs to the formatter.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional

from timeledger.models.report import GroupBy, PeriodGranularity
from timeledger.models.time_entry import TimeEntry
from timeledger.reporting.dates import resolve_effective_date
from timeledger.reporting.durations import resolve_duration_seconds
from timeledger.reporting.ranges import in_range, period_bounds, period_key

logger = logging.getLogger(__name__)

UNKNOWN_CUSTOMER = "Unknown Customer"
UNKNOWN_TASK = "Unknown Task"

SECONDS_PER_HOUR = Decimal(3600)


@dataclass
class Totals:
    """Running second counts for one group."""

    total_seconds: int = 0
    billable_seconds: int = 0
    non_billable_seconds: int = 0

    def add(self, seconds: int, billable: bool) -> None:
        self.total_seconds += seconds
        if billable:
            self.billable_seconds += seconds
        else:
            self.non_billable_seconds += seconds


@dataclass(frozen=True)
class GroupTotals:
    """Totals for one value of the grouping dimension."""

    key: str
    totals: Totals


@dataclass(frozen=True)
class PeriodTotals:
    """Totals for one calendar bucket."""

    key: str
    start: date
    end: date
    totals: Totals


@dataclass(frozen=True)
class ClientTotals:
    """Totals and unrounded billable amount for one customer."""

    customer_id: str
    customer_name: str
    totals: Totals
    billable_amount: Decimal


def customer_key(entry: TimeEntry) -> str:
    if entry.customer is not None and entry.customer.name:
        return entry.customer.name
    return UNKNOWN_CUSTOMER


def task_key(entry: TimeEntry) -> str:
    if entry.task is not None and entry.task.name:
        return entry.task.name
    return UNKNOWN_TASK


def _key_function(
    group_by: GroupBy, tz: Optional[tzinfo]
) -> Callable[[TimeEntry], str]:
    if group_by == GroupBy.CUSTOMER:
        return customer_key
    if group_by == GroupBy.TASK:
        return task_key
    return lambda entry: resolve_effective_date(entry, tz).isoformat()


def sum_totals(
    entries: Iterable[TimeEntry], now: Optional[datetime] = None
) -> Totals:
    """Totals over all given entries."""
    totals = Totals()
    for entry in entries:
        totals.add(resolve_duration_seconds(entry, now), entry.billable)
    return totals


def group_entries(
    entries: Iterable[TimeEntry],
    group_by: GroupBy,
    tz: Optional[tzinfo] = None,
) -> List[GroupTotals]:
    """
    Group entries by customer, task or day.

    Entries without a customer or task land under ``"Unknown Customer"`` or
    ``"Unknown Task"``, so nothing is dropped.

    Args:
        entries: Entries to group, usually already filtered
        group_by: Grouping dimension
        tz: Timezone used for day keys

    Returns:
        Groups ordered by total seconds descending (ties by key), or
        chronologically when grouping by day
    """
    key_of = _key_function(group_by, tz)
    groups: Dict[str, Totals] = defaultdict(Totals)

    for entry in entries:
        groups[key_of(entry)].add(resolve_duration_seconds(entry), entry.billable)

    result = [GroupTotals(key=key, totals=totals) for key, totals in groups.items()]

    # Day keys are ISO dates, so string order is calendar order
    if group_by == GroupBy.DAY:
        result.sort(key=lambda group: group.key)
    else:
        result.sort(key=lambda group: (-group.totals.total_seconds, group.key))
    return result


def summarize_periods(
    entries: Iterable[TimeEntry],
    granularity: PeriodGranularity,
    tz: Optional[tzinfo] = None,
) -> List[PeriodTotals]:
    """
    Bucket entries into weeks, months or quarters.

    Independent of the report's grouping dimension.

    Returns:
        Buckets ordered by period key ascending
    """
    groups: Dict[str, Totals] = defaultdict(Totals)
    bounds: Dict[str, tuple] = {}

    for entry in entries:
        effective_date = resolve_effective_date(entry, tz)
        key = period_key(effective_date, granularity)
        if key not in bounds:
            bounds[key] = period_bounds(effective_date, granularity)
        groups[key].add(resolve_duration_seconds(entry), entry.billable)

    return [
        PeriodTotals(key=key, start=bounds[key][0], end=bounds[key][1], totals=groups[key])
        for key in sorted(groups)
    ]


def summarize_clients(entries: Iterable[TimeEntry]) -> List[ClientTotals]:
    """
    Per-customer totals and billable amounts.

    Meant to run over the full entry set, whatever filters the primary
    report uses. Each billable entry contributes ``hours * rate`` using its
    own rate; a missing or zero rate adds hours but no amount. Customers
    with no logged time are left out.

    Returns:
        Customers ordered by total seconds descending (ties by name)
    """
    totals: Dict[str, Totals] = defaultdict(Totals)
    amounts: Dict[str, Decimal] = defaultdict(Decimal)
    names: Dict[str, str] = {}
    skipped = 0

    for entry in entries:
        if not entry.customer_id:
            skipped += 1
            continue

        customer_id = entry.customer_id
        names.setdefault(customer_id, customer_key(entry))
        seconds = resolve_duration_seconds(entry)
        totals[customer_id].add(seconds, entry.billable)

        if entry.billable and entry.rate:
            amounts[customer_id] += Decimal(seconds) / SECONDS_PER_HOUR * entry.rate

    if skipped:
        logger.debug("Client overview skipped %d entries without a customer", skipped)

    result = [
        ClientTotals(
            customer_id=customer_id,
            customer_name=names[customer_id],
            totals=client_totals,
            billable_amount=amounts[customer_id],
        )
        for customer_id, client_totals in totals.items()
        if client_totals.total_seconds > 0
    ]
    result.sort(key=lambda client: (-client.totals.total_seconds, client.customer_name))
    return result


def total_seconds_in_range(
    entries: Iterable[TimeEntry],
    start: Optional[date],
    end: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> int:
    """Seconds logged by entries whose effective date falls in [start, end]."""
    return sum(
        resolve_duration_seconds(entry)
        for entry in entries
        if in_range(resolve_effective_date(entry, tz), start, end)
    )
