"""Time entry model definitions."""
import datetime as dt
from decimal import Decimal, InvalidOperation
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from timeledger.models.customer import Customer
from timeledger.models.task import Task
from timeledger.reporting.durations import parse_minutes


class TimeEntryBase(BaseModel):
    """Base time entry fields."""

    customer_id: Optional[str] = None
    task_id: Optional[str] = None
    description: str = ""
    date: Optional[dt.date] = None
    start_time: Optional[dt.datetime] = None
    end_time: Optional[dt.datetime] = None
    duration_minutes: Optional[float] = None
    billable: bool = True
    rate: Optional[Decimal] = None

    @field_validator("duration_minutes", mode="before")
    @classmethod
    def coerce_duration(cls, value):
        """Treat unparseable or negative durations as absent."""
        return parse_minutes(value)

    @field_validator("billable", mode="before")
    @classmethod
    def coerce_billable(cls, value):
        """A missing billable flag means billable."""
        return True if value is None else value

    @field_validator("rate", mode="before")
    @classmethod
    def coerce_rate(cls, value):
        """Treat unparseable or negative rates as absent."""
        if value is None or isinstance(value, bool):
            return None
        try:
            rate = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
        if not rate.is_finite() or rate < 0:
            return None
        return rate


class TimeEntry(TimeEntryBase):
    """Full time entry model with database fields."""

    id: str = Field(alias="_id", serialization_alias="id")
    user_id: str
    created_at: dt.datetime
    customer: Optional[Customer] = None
    task: Optional[Task] = None

    model_config = {"populate_by_name": True}


class EntryView(BaseModel):
    """Time entry together with its resolved duration and date."""

    entry: TimeEntry
    duration_seconds: int
    effective_date: dt.date
    running: bool = False
