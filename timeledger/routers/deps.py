"""Shared router dependencies."""
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from timeledger.config import settings
from timeledger.models.report import (
    DateRange,
    GroupBy,
    InvalidDateRangeError,
    PeriodGranularity,
    RangePreset,
    ReportFilterConfig,
)
from timeledger.reporting.ranges import named_range
from timeledger.utils.auth import verify_access_token

security = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    """
    Dependency to get current user ID from JWT token.

    Args:
        credentials: HTTP bearer credentials

    Returns:
        User ID from token

    Raises:
        HTTPException: If token is missing or invalid (401)
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    try:
        return verify_access_token(credentials.credentials)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )


def get_now() -> datetime:
    """Dependency providing the request's reference instant."""
    return datetime.now(timezone.utc)


async def get_filter_config(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    range_preset: Optional[RangePreset] = Query(None, alias="range"),
    customer_id: Optional[str] = Query(None),
    billable_only: bool = Query(False),
    group_by: GroupBy = Query(GroupBy.CUSTOMER),
    period: PeriodGranularity = Query(PeriodGranularity.WEEK),
    now: datetime = Depends(get_now),
) -> ReportFilterConfig:
    """
    Build a report filter from query parameters.

    A named ``range`` supplies default bounds; explicit ``date_from`` and
    ``date_to`` override them. Without either the range is unbounded.

    Raises:
        HTTPException: If the range ends before it starts (400)
    """
    date_range = DateRange()
    if range_preset is not None:
        date_range = named_range(range_preset, now, settings.report_tzinfo)
    if date_from is not None:
        date_range = date_range.model_copy(update={"date_from": date_from})
    if date_to is not None:
        date_range = date_range.model_copy(update={"date_to": date_to})

    try:
        date_range.ensure_ordered()
    except InvalidDateRangeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return ReportFilterConfig(
        date_range=date_range,
        customer_id=customer_id or None,
        billable_only=billable_only,
        group_by=group_by,
        period=period,
    )
