"""Task reference model."""
from pydantic import BaseModel


class Task(BaseModel):
    """Task as seen by time entries and reports."""

    id: str
    name: str
