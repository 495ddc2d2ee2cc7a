"""Entry filtering for reports."""
from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Iterable, Optional

from timeledger.models.report import ReportFilterConfig
from timeledger.models.time_entry import TimeEntry
from timeledger.reporting.dates import resolve_effective_date
from timeledger.reporting.ranges import in_range

logger = logging.getLogger(__name__)


def matches(
    entry: TimeEntry, config: ReportFilterConfig, tz: Optional[tzinfo] = None
) -> bool:
    """
    Check one entry against a filter configuration.

    Date bounds are compared at day granularity and are inclusive, so
    ``date_to`` covers the whole day. Inactive filters never look at their
    fields.
    """
    date_range = config.date_range
    if date_range.date_from is not None or date_range.date_to is not None:
        effective_date = resolve_effective_date(entry, tz)
        if not in_range(effective_date, date_range.date_from, date_range.date_to):
            return False

    if config.customer_id and entry.customer_id != config.customer_id:
        return False

    if config.billable_only and not entry.billable:
        return False

    return True


def filter_entries(
    entries: Iterable[TimeEntry],
    config: ReportFilterConfig,
    tz: Optional[tzinfo] = None,
) -> list[TimeEntry]:
    """
    Select the entries a report should cover.

    A reversed date range matches nothing rather than raising.

    Args:
        entries: Entries to filter; not modified
        config: Filter configuration
        tz: Timezone used to resolve effective dates

    Returns:
        Matching entries in their original order
    """
    entries = list(entries)
    selected = [entry for entry in entries if matches(entry, config, tz)]
    logger.debug("Filtered %d of %d time entries", len(selected), len(entries))
    return selected
