from datetime import datetime
from pydantic import BaseModel, field_validator
from typing import Optional

from .Task import Status, as_utc


class TaskUpdate(BaseModel):
    # Only the fields present in the request body are copied onto the stored task.
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[Status] = None
    dueDate: Optional[datetime] = None

    @field_validator("dueDate")
    @classmethod
    def _due_date_utc(cls, value):
        return as_utc(value)
