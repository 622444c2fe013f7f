# tests/fakes.py

from __future__ import annotations

from app.models import Task


class FakeTaskStore:
    """
    In-memory TaskStore for service tests.

    Keeps the same contract as the real stores: ids assigned on insert,
    overwrite on save with id, delete of a missing id is a no-op.
    """

    def __init__(self) -> None:
        self.rows: dict[int, Task] = {}
        self.next_id = 1
        self.schema_ready = False
        self.saves = 0

    def init_schema(self) -> None:
        self.schema_ready = True

    def find_by_id(self, task_id: int) -> Task | None:
        return self.rows.get(task_id)

    def save(self, task: Task) -> Task:
        self.saves += 1
        if task.id is None:
            task = task.model_copy(update={"id": self.next_id})
            self.next_id += 1
        self.rows[task.id] = task
        return task

    def delete_by_id(self, task_id: int) -> None:
        self.rows.pop(task_id, None)

    def find_all(self) -> list[Task]:
        return list(self.rows.values())


class FakePipeline:
    """Queues commands and applies them to the owning FakeRedis on execute()."""

    def __init__(self, owner: FakeRedis) -> None:
        self.owner = owner
        self.queued: list[tuple[str, tuple]] = []

    def __enter__(self) -> FakePipeline:
        return self

    def __exit__(self, *exc) -> None:
        self.queued.clear()

    def set(self, *args):
        self.queued.append(("set", args))

    def sadd(self, *args):
        self.queued.append(("sadd", args))

    def delete(self, *args):
        self.queued.append(("delete", args))

    def srem(self, *args):
        self.queued.append(("srem", args))

    def execute(self) -> list:
        results = [getattr(self.owner, name)(*args) for name, args in self.queued]
        self.queued.clear()
        return results


class FakeRedis:
    """
    Just enough of redis.Redis(decode_responses=True) for RedisTaskStore.

    Values are stored as strings, like a real server would return them.
    """

    def __init__(self) -> None:
        self.strings: dict[str, str] = {}
        self.sets: dict[str, set[str]] = {}

    def ping(self) -> bool:
        return True

    def get(self, key):
        return self.strings.get(key)

    def set(self, key, value):
        self.strings[key] = str(value)
        return True

    def mget(self, keys):
        return [self.strings.get(k) for k in keys]

    def incr(self, key):
        value = int(self.strings.get(key, "0")) + 1
        self.strings[key] = str(value)
        return value

    def delete(self, *keys):
        removed = 0
        for k in keys:
            removed += int(self.strings.pop(k, None) is not None)
            removed += int(self.sets.pop(k, None) is not None)
        return removed

    def sadd(self, key, *members):
        s = self.sets.setdefault(key, set())
        before = len(s)
        s.update(str(m) for m in members)
        return len(s) - before

    def srem(self, key, *members):
        s = self.sets.get(key, set())
        before = len(s)
        s.difference_update(str(m) for m in members)
        return before - len(s)

    def smembers(self, key):
        return set(self.sets.get(key, set()))

    def pipeline(self, transaction: bool = True) -> FakePipeline:
        return FakePipeline(self)
