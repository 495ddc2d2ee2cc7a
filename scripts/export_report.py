"""Export a user's time report as CSV.

Usage:
    # This week's hours by customer, printed to stdout
    python scripts/export_report.py --user-id 65f0c0ffee --range this_week

    # Billable hours per day for January, written to a file
    python scripts/export_report.py --user-id 65f0c0ffee \
        --from 2024-01-01 --to 2024-01-31 --group-by day --billable-only \
        --output january.csv
"""
import argparse
import asyncio
import sys
from datetime import date, datetime, timezone
from pathlib import Path
from zoneinfo import ZoneInfo

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from motor.motor_asyncio import AsyncIOMotorClient
from timeledger.models.report import (
    DateRange,
    GroupBy,
    RangePreset,
    ReportFilterConfig,
)
from timeledger.reporting.export import render_report_csv
from timeledger.reporting.ranges import named_range
from timeledger.services.report_service import ReportService


def build_config(args: argparse.Namespace, now: datetime, tz: ZoneInfo) -> ReportFilterConfig:
    """Turn command line options into a report filter."""
    date_range = DateRange()
    if args.range:
        date_range = named_range(RangePreset(args.range), now, tz)
    if args.date_from:
        date_range = date_range.model_copy(update={"date_from": date.fromisoformat(args.date_from)})
    if args.date_to:
        date_range = date_range.model_copy(update={"date_to": date.fromisoformat(args.date_to)})

    return ReportFilterConfig(
        date_range=date_range.ensure_ordered(),
        customer_id=args.customer_id,
        billable_only=args.billable_only,
        group_by=GroupBy(args.group_by),
    )


async def export(args: argparse.Namespace) -> str:
    """Load the user's entries and render the report."""
    tz = ZoneInfo(args.timezone)
    config = build_config(args, datetime.now(timezone.utc), tz)

    client = AsyncIOMotorClient(args.mongodb_url, tz_aware=True)
    try:
        service = ReportService(client[args.db_name], tz=tz)
        report = await service.generate_report(args.user_id, config)
    finally:
        client.close()

    return render_report_csv(report)


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Export a time report as CSV")
    parser.add_argument(
        "--user-id",
        required=True,
        help="User whose entries are reported",
    )
    parser.add_argument(
        "--mongodb-url",
        default="mongodb://localhost:27017",
        help="MongoDB connection URL",
    )
    parser.add_argument(
        "--db-name",
        default="timeledger",
        help="MongoDB database name",
    )
    parser.add_argument(
        "--range",
        choices=[preset.value for preset in RangePreset],
        help="Named date range relative to today",
    )
    parser.add_argument("--from", dest="date_from", help="First day (YYYY-MM-DD)")
    parser.add_argument("--to", dest="date_to", help="Last day (YYYY-MM-DD)")
    parser.add_argument("--customer-id", help="Only include this customer")
    parser.add_argument(
        "--billable-only",
        action="store_true",
        help="Only include billable entries",
    )
    parser.add_argument(
        "--group-by",
        choices=[group.value for group in GroupBy],
        default=GroupBy.CUSTOMER.value,
        help="Grouping dimension",
    )
    parser.add_argument(
        "--timezone",
        default="UTC",
        help="Timezone used to place timestamps on calendar days",
    )
    parser.add_argument("--output", help="Write CSV to this file instead of stdout")

    args = parser.parse_args()

    try:
        content = await export(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.output:
        Path(args.output).write_text(content)
        print(f"Wrote report to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(content)


if __name__ == "__main__":
    asyncio.run(main())
