from datetime import datetime, timezone
from typing import Optional, Literal, get_args
from pydantic import BaseModel, field_validator
Status = Literal["Pending", "InProgress", "Completed"]
STATUSES = get_args(Status)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive timestamps are taken to be UTC; aware ones are converted to it."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Task(BaseModel):
    id: Optional[int] = None
    title: str
    description: Optional[str] = None
    status: Status
    dueDate: datetime

    @field_validator("dueDate")
    @classmethod
    def _due_date_utc(cls, value):
        return as_utc(value)
