"""Report endpoints - aggregated hours and billing."""
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from timeledger.config import settings
from timeledger.database import get_database
from timeledger.models.report import (
    ClientSummary,
    PeriodSummary,
    Report,
    ReportFilterConfig,
    TimeHighlight,
)
from timeledger.reporting.export import report_filename
from timeledger.reporting.ranges import reference_day
from timeledger.routers.deps import get_current_user_id, get_filter_config, get_now
from timeledger.services.report_service import ReportService


router = APIRouter(prefix="/reports", tags=["reports"])


def _service(db) -> ReportService:
    return ReportService(
        db,
        tz=settings.report_tzinfo,
        decimals=settings.report_decimals,
        highlight_decimals=settings.highlight_decimals,
    )


@router.get("", response_model=Report)
async def get_report(
    config: ReportFilterConfig = Depends(get_filter_config),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Hours grouped by customer, task or day.

    - Requires authentication
    - Optional filters: range, date_from, date_to, customer_id, billable_only
    - Rows sorted by total hours descending, or by date for day grouping
    """
    try:
        return await _service(db).generate_report(user_id, config)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/periods", response_model=list[PeriodSummary])
async def get_period_summaries(
    config: ReportFilterConfig = Depends(get_filter_config),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Hours per week, month or quarter.

    - Requires authentication
    - Same filters as the grouped report, plus period
    - Sorted by period ascending
    """
    try:
        return await _service(db).generate_period_summaries(user_id, config)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/clients", response_model=list[ClientSummary])
async def get_client_summaries(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Hours and billable amount per customer.

    - Requires authentication
    - Covers all of the user's entries, report filters do not apply
    - Customers without logged time are omitted
    """
    return await _service(db).generate_client_summaries(user_id)


@router.get("/highlights", response_model=list[TimeHighlight])
async def get_highlights(
    now: datetime = Depends(get_now),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Hours logged today, this week, this month and last month.

    - Requires authentication
    - Weeks start on Monday
    """
    return await _service(db).generate_highlights(user_id, now)


@router.get("/export.csv")
async def export_report_csv(
    config: ReportFilterConfig = Depends(get_filter_config),
    now: datetime = Depends(get_now),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Download the grouped report as CSV.

    - Requires authentication
    - Same filters as the grouped report
    - Ends with a Total line
    """
    try:
        content = await _service(db).export_csv(user_id, config)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    filename = report_filename(config.group_by, reference_day(now, settings.report_tzinfo))
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
