"""Customer reference model."""
from pydantic import BaseModel


class Customer(BaseModel):
    """Customer as seen by time entries and reports."""

    id: str
    name: str
