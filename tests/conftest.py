"""Pytest fixtures and configuration for VisualMemory tests."""

import pytest
from datetime import datetime, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
import uuid

from visualmemory.database.database import Base
from visualmemory.database import models as db_models  # noqa: F401  (registers tables)
from visualmemory.database.repository import TaskRepository, InMemoryTaskStore
from visualmemory.engine.priority_engine import TaskPriorityEngine
from visualmemory.models.task import AppTask, BasePriority, Frequency


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

# Thursday, noon
FIXED_NOW = datetime(2026, 1, 22, 12, 0, 0)


class FrozenClock:
    """Manually advanced clock for deterministic engine tests."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def clock(now):
    return FrozenClock(now)


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def task_repository(db_session: Session):
    """Create a TaskRepository instance for testing."""
    return TaskRepository(db_session)


@pytest.fixture
def memory_store():
    return InMemoryTaskStore()


@pytest.fixture
def sample_task_base(now):
    """Base task data for creating test tasks.

    Returns a dict with default task attributes that can be overridden.
    """
    return {
        "id": str(uuid.uuid4()),
        "title": "Test Task",
        "category": "Personal",
        "base_priority": BasePriority.MEDIUM,
        "frequency": Frequency.WEEKLY,
        "due_at": None,
        "duration_min": 30,
        "is_completed": False,
        "completed_at": None,
        "last_rank_position": None,
        "created_at": now,
    }


@pytest.fixture
def make_task(sample_task_base):
    """Factory for tasks with a fresh id and overridden fields."""
    def _make(**overrides) -> AppTask:
        return AppTask(**{**sample_task_base, "id": str(uuid.uuid4()), **overrides})
    return _make


@pytest.fixture
def sample_task(sample_task_base):
    """Create a sample AppTask object for testing."""
    return AppTask(**sample_task_base)


@pytest.fixture
def priority_engine(memory_store, clock):
    """Engine over an in-memory store with a frozen clock (timer not started)."""
    engine = TaskPriorityEngine(store=memory_store, clock=clock)
    engine.load()
    try:
        yield engine
    finally:
        engine.stop()


@pytest.fixture
def test_client(memory_store, clock):
    """Create a FastAPI test client around an injected engine."""
    from visualmemory.api.app import create_app

    engine = TaskPriorityEngine(store=memory_store, clock=clock)
    app = create_app(engine)

    with TestClient(app) as client:
        yield client
