"""Conversion of aggregated seconds into report shapes.

Rounding is half-up and happens here only, after all accumulation.
"""
from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Sequence, Tuple

from timeledger.models.report import (
    ClientSummary,
    DateRange,
    GroupBy,
    PeriodSummary,
    Report,
    ReportRow,
    TimeHighlight,
)
from timeledger.reporting.aggregator import (
    SECONDS_PER_HOUR,
    ClientTotals,
    GroupTotals,
    PeriodTotals,
    Totals,
)

REPORT_DECIMALS = 2
HIGHLIGHT_DECIMALS = 1


def _quantum(decimals: int) -> Decimal:
    return Decimal(1).scaleb(-decimals)


def seconds_to_hours(seconds: int, decimals: int = REPORT_DECIMALS) -> float:
    """
    Convert seconds to hours, rounded half-up.

    Examples:
        >>> seconds_to_hours(5400)
        1.5
        >>> seconds_to_hours(18)
        0.01
        >>> seconds_to_hours(180, decimals=1)
        0.1
    """
    hours = Decimal(seconds) / SECONDS_PER_HOUR
    return float(hours.quantize(_quantum(decimals), rounding=ROUND_HALF_UP))


def billable_percentage(billable_seconds: int, total_seconds: int) -> int:
    """
    Share of billable time as a whole percentage, 0 when nothing was logged.

    Examples:
        >>> billable_percentage(1, 2)
        50
        >>> billable_percentage(0, 0)
        0
    """
    if total_seconds <= 0:
        return 0
    share = Decimal(billable_seconds) * 100 / Decimal(total_seconds)
    return int(share.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def share_percentage(seconds: int, total_seconds: int, decimals: int = 1) -> float:
    """
    Share of the overall total as a percentage, 0 when the total is zero.

    Examples:
        >>> share_percentage(1, 3)
        33.3
        >>> share_percentage(5, 0)
        0.0
    """
    if total_seconds <= 0:
        return 0.0
    share = Decimal(seconds) * 100 / Decimal(total_seconds)
    return float(share.quantize(_quantum(decimals), rounding=ROUND_HALF_UP))


def round_amount(amount: Decimal) -> Decimal:
    """Round a currency amount to cents, half-up."""
    return Decimal(amount).quantize(_quantum(2), rounding=ROUND_HALF_UP)


def format_duration(seconds: int) -> str:
    """
    Render seconds as hours and minutes.

    Examples:
        >>> format_duration(5400)
        '1h 30m'
        >>> format_duration(59)
        '0h 0m'
    """
    seconds = int(seconds)
    hours, remainder = divmod(seconds, 3600)
    return f"{hours}h {remainder // 60}m"


def build_row(
    group: GroupTotals,
    overall_seconds: int = 0,
    decimals: int = REPORT_DECIMALS,
) -> ReportRow:
    totals = group.totals
    return ReportRow(
        group_key=group.key,
        total_hours=seconds_to_hours(totals.total_seconds, decimals),
        billable_hours=seconds_to_hours(totals.billable_seconds, decimals),
        non_billable_hours=seconds_to_hours(totals.non_billable_seconds, decimals),
        total_seconds=totals.total_seconds,
        percentage=share_percentage(totals.total_seconds, overall_seconds),
    )


def build_report(
    groups: Sequence[GroupTotals],
    overall: Totals,
    group_by: GroupBy,
    date_range: DateRange,
    decimals: int = REPORT_DECIMALS,
) -> Report:
    """Assemble the primary report from grouped totals."""
    return Report(
        group_by=group_by,
        date_range=date_range,
        rows=[build_row(group, overall.total_seconds, decimals) for group in groups],
        total_hours=seconds_to_hours(overall.total_seconds, decimals),
        billable_hours=seconds_to_hours(overall.billable_seconds, decimals),
        non_billable_hours=seconds_to_hours(overall.non_billable_seconds, decimals),
        total_seconds=overall.total_seconds,
        billable_percentage=billable_percentage(
            overall.billable_seconds, overall.total_seconds
        ),
    )


def build_period_summaries(
    periods: Iterable[PeriodTotals], decimals: int = REPORT_DECIMALS
) -> List[PeriodSummary]:
    """Period summaries with billable percentages."""
    return [
        PeriodSummary(
            period_label=period.key,
            period_start=period.start,
            period_end=period.end,
            total_hours=seconds_to_hours(period.totals.total_seconds, decimals),
            billable_hours=seconds_to_hours(period.totals.billable_seconds, decimals),
            non_billable_hours=seconds_to_hours(
                period.totals.non_billable_seconds, decimals
            ),
            billable_percentage=billable_percentage(
                period.totals.billable_seconds, period.totals.total_seconds
            ),
        )
        for period in periods
    ]


def build_client_summaries(
    clients: Iterable[ClientTotals], decimals: int = REPORT_DECIMALS
) -> List[ClientSummary]:
    """Client summaries with amounts rounded to cents."""
    return [
        ClientSummary(
            customer_id=client.customer_id,
            customer_name=client.customer_name,
            total_hours=seconds_to_hours(client.totals.total_seconds, decimals),
            billable_hours=seconds_to_hours(client.totals.billable_seconds, decimals),
            non_billable_hours=seconds_to_hours(
                client.totals.non_billable_seconds, decimals
            ),
            billable_amount=round_amount(client.billable_amount),
        )
        for client in clients
    ]


def build_highlights(
    windows: Iterable[Tuple[str, date, date, int]],
    decimals: int = HIGHLIGHT_DECIMALS,
) -> List[TimeHighlight]:
    """
    Dashboard highlights.

    Args:
        windows: ``(period, date_from, date_to, seconds)`` tuples
        decimals: Hour precision, one decimal by default
    """
    return [
        TimeHighlight(
            period=period,
            date_from=date_from,
            date_to=date_to,
            hours=seconds_to_hours(seconds, decimals),
        )
        for period, date_from, date_to, seconds in windows
    ]
