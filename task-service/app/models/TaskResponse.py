from datetime import datetime
from pydantic import BaseModel
from typing import Optional

from .Task import Status, Task


class TaskResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    status: Status
    dueDate: datetime

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=task.status,
            dueDate=task.dueDate,
        )
