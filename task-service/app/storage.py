"""
Task storage accessors.

Both stores implement the same small contract (``TaskStore``): look a task up by
id, save it (insert when it has no id, overwrite otherwise), delete by id, and
list everything. Absent rows come back as ``None``; deleting one is a no-op.
Backend failures are logged and re-raised as ``PersistenceError``.
"""

import json
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, Optional, Protocol

import redis
from sqlalchemy import DateTime
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Field, Session, SQLModel, create_engine, select

from app.config import STORAGE_BACKENDS, Settings
from app.errors import PersistenceError
from app.models import Task

logger = logging.getLogger(__name__)


class TaskStore(Protocol):
    def init_schema(self) -> None: ...

    def find_by_id(self, task_id: int) -> Optional[Task]: ...

    def save(self, task: Task) -> Task: ...

    def delete_by_id(self, task_id: int) -> None: ...

    def find_all(self) -> List[Task]: ...


# ---- relational ----


class TaskRecord(SQLModel, table=True):
    __tablename__ = "task"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    status: str
    # naive UTC; a plain DateTime keeps the column type the same across sqlmodel releases
    due_date: datetime = Field(sa_type=DateTime())


# SQLite and BIGINT primary keys are signed 64-bit
MAX_ROW_ID = 2**63 - 1


def _storable_id(task_id: int) -> bool:
    return -MAX_ROW_ID - 1 <= task_id <= MAX_ROW_ID


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _record_to_task(record: TaskRecord) -> Task:
    return Task(
        id=record.id,
        title=record.title,
        description=record.description,
        status=record.status,
        dueDate=record.due_date.replace(tzinfo=timezone.utc),
    )


class SqlTaskStore:
    """
    Task rows in a single relational table via SQLModel.

    Every call opens its own session, so the store can be shared by the
    request threads.
    """

    def __init__(self, database_url: str, *, echo: bool = False) -> None:
        engine_kwargs = {}
        if database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if database_url in ("sqlite://", "sqlite:///:memory:"):
                # one shared connection, otherwise each session sees its own empty db
                engine_kwargs["poolclass"] = StaticPool
        self._engine = create_engine(database_url, echo=echo, **engine_kwargs)

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        try:
            with Session(self._engine) as session:
                yield session
        except SQLAlchemyError as exc:
            logger.exception("SQL %s failed", operation)
            raise PersistenceError(f"{operation} failed: {exc}") from exc

    def init_schema(self) -> None:
        try:
            SQLModel.metadata.create_all(self._engine)
        except SQLAlchemyError as exc:
            logger.exception("Creating task table failed url=%s", self._engine.url)
            raise PersistenceError(f"init_schema failed: {exc}") from exc
        logger.info("SqlTaskStore ready url=%s", self._engine.url)

    def find_by_id(self, task_id: int) -> Optional[Task]:
        if not _storable_id(task_id):
            return None
        with self._session("find_by_id") as session:
            record = session.get(TaskRecord, task_id)
            return None if record is None else _record_to_task(record)

    def save(self, task: Task) -> Task:
        with self._session("save") as session:
            record = None
            if task.id is not None:
                record = session.get(TaskRecord, task.id)
            if record is None:
                record = TaskRecord(id=task.id)
            record.title = task.title
            record.description = task.description
            record.status = task.status
            record.due_date = _to_naive_utc(task.dueDate)
            session.add(record)
            session.commit()
            session.refresh(record)
            return _record_to_task(record)

    def delete_by_id(self, task_id: int) -> None:
        if not _storable_id(task_id):
            return
        with self._session("delete_by_id") as session:
            record = session.get(TaskRecord, task_id)
            if record is None:
                return
            session.delete(record)
            session.commit()

    def find_all(self) -> List[Task]:
        with self._session("find_all") as session:
            return [_record_to_task(r) for r in session.exec(select(TaskRecord)).all()]


# ---- redis ----


class RedisTaskStore:
    """
    Task rows as JSON strings under ``task:{id}``.

    Ids come from ``INCR task:next_id``; the set ``tasks`` indexes every id so
    ``find_all`` does not need to scan the keyspace.
    """

    NEXT_ID_KEY = "task:next_id"
    INDEX_KEY = "tasks"

    def __init__(self, client: redis.Redis) -> None:
        self.r = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisTaskStore":
        client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            decode_responses=True,
        )
        return cls(client)

    @staticmethod
    def _key(task_id: int) -> str:
        return f"task:{task_id}"

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except redis.RedisError as exc:
            logger.exception("Redis %s failed", operation)
            raise PersistenceError(f"{operation} failed: {exc}") from exc

    def init_schema(self) -> None:
        with self._guard("init_schema"):
            self.r.ping()
        logger.info("RedisTaskStore ready")

    def find_by_id(self, task_id: int) -> Optional[Task]:
        with self._guard("find_by_id"):
            raw = self.r.get(self._key(task_id))
        if raw is None:
            return None
        return Task.model_validate({**json.loads(raw), "id": task_id})

    def save(self, task: Task) -> Task:
        with self._guard("save"):
            task_id = task.id if task.id is not None else int(self.r.incr(self.NEXT_ID_KEY))
            payload = json.dumps(task.model_dump(mode="json", exclude={"id"}))
            with self.r.pipeline(transaction=True) as p:
                p.set(self._key(task_id), payload)
                p.sadd(self.INDEX_KEY, task_id)
                p.execute()
        return task.model_copy(update={"id": task_id})

    def delete_by_id(self, task_id: int) -> None:
        with self._guard("delete_by_id"):
            with self.r.pipeline(transaction=True) as p:
                p.delete(self._key(task_id))
                p.srem(self.INDEX_KEY, task_id)
                p.execute()

    def find_all(self) -> List[Task]:
        with self._guard("find_all"):
            ids = [int(i) for i in self.r.smembers(self.INDEX_KEY)]
            if not ids:
                return []
            raw = self.r.mget([self._key(i) for i in ids])
        tasks = []
        for task_id, answer in zip(ids, raw):
            # index entry left behind by a delete that raced this read
            if answer is None:
                continue
            tasks.append(Task.model_validate({**json.loads(answer), "id": task_id}))
        return tasks


def build_store(settings: Settings) -> TaskStore:
    if settings.storage_backend == "sql":
        return SqlTaskStore(settings.database_url, echo=settings.database_echo)
    if settings.storage_backend == "redis":
        return RedisTaskStore.from_settings(settings)
    raise ValueError(
        f"Unknown storage backend {settings.storage_backend!r}; expected one of {', '.join(STORAGE_BACKENDS)}"
    )
