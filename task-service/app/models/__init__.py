from .Task import STATUSES, Status, Task, as_utc
from .TasksCreate import TaskCreate
from .TaskResponse import TaskResponse
from .TaskUpdate import TaskUpdate

__all__ = [
    "STATUSES",
    "Status",
    "Task",
    "TaskCreate",
    "TaskResponse",
    "TaskUpdate",
    "as_utc",
]
