"""Field constraints for Task, checked by the service before anything is persisted."""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from app.errors import TaskValidationError
from app.models import STATUSES, Task, as_utc

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 1000


def _violation(field: str, message: str) -> Dict[str, str]:
    return {"field": field, "message": message}


def task_violations(
    task: Task,
    *,
    require_future_due_date: bool = False,
    now: Optional[datetime] = None,
) -> List[Dict[str, str]]:
    """Return every constraint the task breaks, in field order."""
    errors = []

    title = task.title
    if title is None or not title.strip():
        errors.append(_violation("title", "Title must not be blank"))
    elif len(title) > TITLE_MAX_LENGTH:
        errors.append(_violation("title", f"Title must not exceed {TITLE_MAX_LENGTH} characters"))

    if task.description is not None and len(task.description) > DESCRIPTION_MAX_LENGTH:
        errors.append(
            _violation("description", f"Description must not exceed {DESCRIPTION_MAX_LENGTH} characters")
        )

    if task.status is None:
        errors.append(_violation("status", "Status must not be blank"))
    elif task.status not in STATUSES:
        errors.append(_violation("status", f"Status must be one of {', '.join(STATUSES)}"))

    if task.dueDate is None:
        errors.append(_violation("dueDate", "Due date must not be null"))
    elif require_future_due_date:
        now = as_utc(now) if now is not None else datetime.now(timezone.utc)
        if as_utc(task.dueDate) < now:
            errors.append(_violation("dueDate", "Due date must be in the present or future"))

    return errors


def validate_task(
    task: Task,
    *,
    require_future_due_date: bool = False,
    now: Optional[datetime] = None,
) -> Task:
    errors = task_violations(task, require_future_due_date=require_future_due_date, now=now)
    if errors:
        raise TaskValidationError(errors)
    return task
