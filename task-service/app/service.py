import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Union

from app.models import Task, TaskUpdate
from app.storage import TaskStore
from app.validation import validate_task

logger = logging.getLogger(__name__)

MUTABLE_FIELDS = ("title", "description", "status", "dueDate")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskService:
    """Create/read/update/delete on top of one TaskStore."""

    def __init__(self, store: TaskStore, *, clock: Callable[[], datetime] = _utcnow):
        self._store = store
        self._clock = clock

    def create_task(self, task: Task) -> Task:
        # the store assigns ids; anything the caller put there is dropped
        candidate = task.model_copy(update={"id": None})
        validate_task(candidate, require_future_due_date=True, now=self._clock())
        created = self._store.save(candidate)
        logger.info("Task created id=%s status=%s due=%s", created.id, created.status, created.dueDate)
        return created

    def get_task_by_id(self, task_id: int) -> Optional[Task]:
        task = self._store.find_by_id(task_id)
        logger.debug("Task lookup id=%s found=%s", task_id, task is not None)
        return task

    def get_all_tasks(self) -> List[Task]:
        return self._store.find_all()

    def update_task(self, task_id: int, updated_task: Union[Task, TaskUpdate]) -> Optional[Task]:
        """
        Copy title, description, status and due date from ``updated_task`` onto
        the stored task and persist it. Fields the caller never set are left
        alone. Returns None when there is no task with ``task_id``.
        """
        existing = self._store.find_by_id(task_id)
        if existing is None:
            logger.info("Task update skipped, id=%s not found", task_id)
            return None

        changes = {
            name: getattr(updated_task, name)
            for name in MUTABLE_FIELDS
            if name in updated_task.model_fields_set
        }
        merged = existing.model_copy(update=changes)
        due_date_changed = "dueDate" in changes and changes["dueDate"] != existing.dueDate
        validate_task(merged, require_future_due_date=due_date_changed, now=self._clock())

        saved = self._store.save(merged)
        logger.info("Task updated id=%s fields=%s", task_id, sorted(changes))
        return saved

    def delete_task(self, task_id: int) -> None:
        self._store.delete_by_id(task_id)
        logger.info("Task deleted id=%s", task_id)
