# tests/conftest.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from app.models import Task
from app.storage import SqlTaskStore

from .fakes import FakeTaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        app_name="task-service-test",
        database_url=f"sqlite:///{tmp_path / 'tasks.db'}",
        cors_origins=("http://localhost:3000",),
    )


@pytest.fixture()
def sql_store(settings: Settings) -> SqlTaskStore:
    store = SqlTaskStore(settings.database_url)
    store.init_schema()
    return store


@pytest.fixture()
def fake_store() -> FakeTaskStore:
    return FakeTaskStore()


@pytest.fixture()
def client(settings: Settings, sql_store: SqlTaskStore):
    """HTTP client over a real SQLite file store; the lifespan runs on enter."""
    with TestClient(create_app(settings, store=sql_store)) as c:
        yield c


@pytest.fixture()
def make_task():
    def _make(**overrides) -> Task:
        fields = dict(
            title="Task Title",
            description="Task description",
            status="Pending",
            dueDate=datetime.now(timezone.utc) + timedelta(days=2),
        )
        fields.update(overrides)
        return Task(**fields)

    return _make
