"""Time entry endpoints - read-only views with resolved durations."""
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException

from timeledger.config import settings
from timeledger.database import get_database
from timeledger.models.report import ReportFilterConfig
from timeledger.models.time_entry import EntryView
from timeledger.reporting.filters import filter_entries
from timeledger.routers.deps import get_current_user_id, get_filter_config, get_now
from timeledger.services.time_entry_service import TimeEntryService, build_entry_view


router = APIRouter(prefix="/entries", tags=["entries"])


@router.get("", response_model=list[EntryView])
async def list_entries(
    config: ReportFilterConfig = Depends(get_filter_config),
    now: datetime = Depends(get_now),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    List time entries for the authenticated user.

    - Requires authentication
    - Optional filters: range, date_from, date_to, customer_id, billable_only
    - Running timers report elapsed time so far
    - Results sorted by creation time descending (most recent first)
    """
    service = TimeEntryService(db)
    entries = await service.list_entries(user_id=user_id)
    tz = settings.report_tzinfo
    return [
        build_entry_view(entry, now, tz)
        for entry in filter_entries(entries, config, tz)
    ]


@router.get("/current", response_model=EntryView)
async def get_current_entry(
    now: datetime = Depends(get_now),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Get the running entry, if any.

    - Requires authentication
    - Returns 404 if no timer is running
    """
    service = TimeEntryService(db)
    entry = await service.get_running_entry(user_id=user_id)

    if not entry:
        raise HTTPException(status_code=404, detail="No timer running")

    return build_entry_view(entry, now, settings.report_tzinfo)
