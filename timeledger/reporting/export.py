"""CSV rendering of reports."""
import csv
import io
from datetime import date

from timeledger.models.report import GroupBy, Report
from timeledger.reporting.formatter import format_duration

HOUR_COLUMNS = ["Total Hours", "Billable Hours", "Non-Billable Hours", "Duration"]


def report_filename(group_by: GroupBy, today: date) -> str:
    """
    Download name for a CSV report.

    Examples:
        >>> report_filename(GroupBy.DAY, date(2024, 1, 10))
        'time-report-by-day-2024-01-10.csv'
    """
    return f"time-report-by-{group_by.value}-{today.isoformat()}.csv"


def render_report_csv(report: Report) -> str:
    """
    Render a report as CSV text.

    The header names the grouping dimension, each row follows in report
    order, and a final ``Total`` line sums all filtered entries.

    Args:
        report: Report to render

    Returns:
        CSV document
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    writer.writerow([report.group_by.value.capitalize(), *HOUR_COLUMNS])
    for row in report.rows:
        writer.writerow([
            row.group_key,
            row.total_hours,
            row.billable_hours,
            row.non_billable_hours,
            format_duration(row.total_seconds),
        ])
    writer.writerow([
        "Total",
        report.total_hours,
        report.billable_hours,
        report.non_billable_hours,
        format_duration(report.total_seconds),
    ])

    return buffer.getvalue()
