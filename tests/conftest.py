# tests/conftest.py

from __future__ import annotations

import os
import tempfile

# Keep the database, config and logs of the test run out of the user's data dir.
# Must happen before ``core.settings`` is imported.
os.environ.setdefault("TASKRANK_DATA_DIR", tempfile.mkdtemp(prefix="taskrank-tests-"))

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import models.task  # noqa: E402,F401
from services.task_store import TaskStore  # noqa: E402
from utils.datetime_utils import UTC  # noqa: E402


@pytest.fixture()
def now() -> datetime:
    return datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture()
def session_factory():
    # StaticPool keeps a single in-memory database across sessions and threads.
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)

    def factory():
        return Session(engine)

    return factory


@pytest.fixture()
def store(session_factory) -> TaskStore:
    return TaskStore(session_factory, owner_id="user-1")
