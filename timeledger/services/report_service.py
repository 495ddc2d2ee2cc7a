"""Report service - builds reports from a user's time entries."""
import logging
from datetime import datetime, tzinfo
from typing import Optional, Sequence

from timeledger.models.report import (
    ClientSummary,
    PeriodSummary,
    RangePreset,
    Report,
    ReportFilterConfig,
    TimeHighlight,
)
from timeledger.models.time_entry import TimeEntry
from timeledger.reporting import aggregator, formatter
from timeledger.reporting.export import render_report_csv
from timeledger.reporting.filters import filter_entries
from timeledger.reporting.ranges import named_range
from timeledger.services.time_entry_service import TimeEntryService

logger = logging.getLogger(__name__)

HIGHLIGHT_WINDOWS = [
    ("Today", RangePreset.TODAY),
    ("This Week", RangePreset.THIS_WEEK),
    ("This Month", RangePreset.THIS_MONTH),
    ("Last Month", RangePreset.LAST_MONTH),
]


class ReportService:
    """Service for turning time entries into report structures."""

    def __init__(
        self,
        db,
        tz: Optional[tzinfo] = None,
        decimals: int = formatter.REPORT_DECIMALS,
        highlight_decimals: int = formatter.HIGHLIGHT_DECIMALS,
    ):
        """
        Initialize service with database connection and report options.

        Args:
            db: Database connection
            tz: Timezone used to place timestamps on calendar days
            decimals: Hour precision for report tables
            highlight_decimals: Hour precision for dashboard highlights
        """
        self.db = db
        self.entries = TimeEntryService(db)
        self.tz = tz
        self.decimals = decimals
        self.highlight_decimals = highlight_decimals

    def build_report(
        self, entries: Sequence[TimeEntry], config: ReportFilterConfig
    ) -> Report:
        """
        Build the primary grouped report.

        Args:
            entries: All of the user's entries
            config: Filters and grouping dimension

        Returns:
            Report rows plus totals over the filtered entries
        """
        selected = filter_entries(entries, config, self.tz)
        groups = aggregator.group_entries(selected, config.group_by, self.tz)
        overall = aggregator.sum_totals(selected)
        return formatter.build_report(
            groups, overall, config.group_by, config.date_range, self.decimals
        )

    def build_period_summaries(
        self, entries: Sequence[TimeEntry], config: ReportFilterConfig
    ) -> list[PeriodSummary]:
        """Build week, month or quarter summaries over the filtered entries."""
        selected = filter_entries(entries, config, self.tz)
        periods = aggregator.summarize_periods(selected, config.period, self.tz)
        return formatter.build_period_summaries(periods, self.decimals)

    def build_client_summaries(
        self, entries: Sequence[TimeEntry]
    ) -> list[ClientSummary]:
        """
        Build the client overview.

        Always covers every entry given, ignoring any report filter.
        """
        clients = aggregator.summarize_clients(entries)
        return formatter.build_client_summaries(clients, self.decimals)

    def build_highlights(
        self, entries: Sequence[TimeEntry], now: datetime
    ) -> list[TimeHighlight]:
        """Build today, this week, this month and last month totals."""
        windows = []
        for label, preset in HIGHLIGHT_WINDOWS:
            window = named_range(preset, now, self.tz)
            seconds = aggregator.total_seconds_in_range(
                entries, window.date_from, window.date_to, self.tz
            )
            windows.append((label, window.date_from, window.date_to, seconds))
        return formatter.build_highlights(windows, self.highlight_decimals)

    async def generate_report(
        self, user_id: str, config: ReportFilterConfig
    ) -> Report:
        """
        Generate the primary report for a user.

        Args:
            user_id: User ID
            config: Filters and grouping dimension

        Returns:
            Report
        """
        entries = await self.entries.list_entries(user_id)
        report = self.build_report(entries, config)
        logger.info(
            "Generated %s report for user %s with %d rows",
            config.group_by.value,
            user_id,
            len(report.rows),
        )
        return report

    async def generate_period_summaries(
        self, user_id: str, config: ReportFilterConfig
    ) -> list[PeriodSummary]:
        """Generate period summaries for a user."""
        entries = await self.entries.list_entries(user_id)
        return self.build_period_summaries(entries, config)

    async def generate_client_summaries(self, user_id: str) -> list[ClientSummary]:
        """Generate the client overview for a user."""
        entries = await self.entries.list_entries(user_id)
        return self.build_client_summaries(entries)

    async def generate_highlights(
        self, user_id: str, now: datetime
    ) -> list[TimeHighlight]:
        """Generate dashboard highlights for a user."""
        entries = await self.entries.list_entries(user_id)
        return self.build_highlights(entries, now)

    async def export_csv(self, user_id: str, config: ReportFilterConfig) -> str:
        """Generate the primary report for a user and render it as CSV."""
        report = await self.generate_report(user_id, config)
        return render_report_csv(report)
