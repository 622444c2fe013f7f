from typing import Dict, List


class TaskServiceError(Exception):
    """Base class for errors raised by the task service layers."""


class TaskValidationError(TaskServiceError):
    """One or more Task fields break their constraints."""

    def __init__(self, errors: List[Dict[str, str]]):
        self.errors = errors
        super().__init__("; ".join(f"{e['field']}: {e['message']}" for e in errors))


class PersistenceError(TaskServiceError):
    """The storage backend failed or rejected a write."""
