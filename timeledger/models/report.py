"""Report model definitions."""
import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class InvalidDateRangeError(ValueError):
    """Raised when a date range ends before it starts."""


class GroupBy(str, Enum):
    """Dimensions a report can be grouped by."""

    CUSTOMER = "customer"
    TASK = "task"
    DAY = "day"


class PeriodGranularity(str, Enum):
    """Calendar buckets for period summaries."""

    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"


class RangePreset(str, Enum):
    """Named calendar windows relative to a reference instant."""

    TODAY = "today"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"
    THIS_QUARTER = "this_quarter"
    ALL_TIME = "all_time"


class DateRange(BaseModel):
    """Inclusive date range; a missing bound leaves that side open."""

    date_from: Optional[dt.date] = None
    date_to: Optional[dt.date] = None

    @property
    def is_reversed(self) -> bool:
        """True when both bounds are set and the range ends before it starts."""
        return (
            self.date_from is not None
            and self.date_to is not None
            and self.date_from > self.date_to
        )

    def ensure_ordered(self) -> "DateRange":
        """
        Validate bound order.

        Returns:
            The range itself

        Raises:
            InvalidDateRangeError: If date_from is after date_to
        """
        if self.is_reversed:
            raise InvalidDateRangeError(
                f"date_from {self.date_from} is after date_to {self.date_to}"
            )
        return self


class ReportFilterConfig(BaseModel):
    """Filter and grouping options for a report request."""

    date_range: DateRange = Field(default_factory=DateRange)
    customer_id: Optional[str] = None
    billable_only: bool = False
    group_by: GroupBy = GroupBy.CUSTOMER
    period: PeriodGranularity = PeriodGranularity.WEEK


class ReportRow(BaseModel):
    """One group of the primary report."""

    group_key: str
    total_hours: float
    billable_hours: float
    non_billable_hours: float
    total_seconds: int
    percentage: float


class Report(BaseModel):
    """Primary report: grouped rows plus totals over all filtered entries."""

    group_by: GroupBy
    date_range: DateRange
    rows: list[ReportRow]
    total_hours: float
    billable_hours: float
    non_billable_hours: float
    total_seconds: int
    billable_percentage: int


class PeriodSummary(BaseModel):
    """Totals for one week, month or quarter."""

    period_label: str
    period_start: dt.date
    period_end: dt.date
    total_hours: float
    billable_hours: float
    non_billable_hours: float
    billable_percentage: int


class ClientSummary(BaseModel):
    """Totals and billable amount for one customer."""

    customer_id: str
    customer_name: str
    total_hours: float
    billable_hours: float
    non_billable_hours: float
    billable_amount: Decimal


class TimeHighlight(BaseModel):
    """Hours logged in one dashboard window."""

    period: str
    date_from: dt.date
    date_to: dt.date
    hours: float
