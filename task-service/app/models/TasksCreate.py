from datetime import datetime
from typing import Optional
from pydantic import BaseModel, field_validator

from .Task import Status, as_utc


class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    status: Status = "Pending"
    dueDate: datetime

    @field_validator("dueDate")
    @classmethod
    def _due_date_utc(cls, value):
        return as_utc(value)
