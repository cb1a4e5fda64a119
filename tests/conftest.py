"""Pytest fixtures and configuration for PACE tests."""

import pytest
import random
import uuid
from datetime import date, datetime
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from pace.database.database import Base
from pace.database import models  # noqa: F401  (registers tables)
from pace.database.repository import TaskRepository
from pace.database.day_plan_repository import DayPlanRepository
from pace.models.task import Task, BlockType, Intensity
from pace.models.schedule import ScheduleConfig


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

PLAN_DATE = "2024-01-15"


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

    @event.listens_for(engine, "connect")
    def set_sqlite_pragmas(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    # Create all tables
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def plan_date():
    """ISO date used for stored plans."""
    return PLAN_DATE


@pytest.fixture
def day_plan_repository(db_session: Session):
    """Create a DayPlanRepository instance for testing."""
    return DayPlanRepository(db_session)


@pytest.fixture
def task_repository(db_session: Session):
    """Create a TaskRepository instance for testing."""
    return TaskRepository(db_session)


@pytest.fixture
def make_task():
    """Factory for Task objects with scheduler-style defaults.

    Returns a callable so tests can build several tasks with overrides.
    """
    defaults = {
        BlockType.WORK: 90,
        BlockType.ESSENTIAL: 30,
        BlockType.MOVEMENT: 45,
        BlockType.PHONE: 30,
        BlockType.SOCIAL: 60,
        BlockType.LEISURE: 60,
    }

    def _make(task_type=BlockType.WORK, title=None, **overrides):
        task_type = BlockType(task_type)
        data = {
            "id": str(uuid.uuid4()),
            "title": title or f"{task_type.value.title()} task",
            "type": task_type,
            "estimated_minutes": defaults.get(task_type, 30),
            "is_flexible": task_type not in (BlockType.WORK, BlockType.ESSENTIAL),
            "created_at": datetime(2024, 1, 1, 8, 0, 0),
        }
        data.update(overrides)
        return Task(**data)

    return _make


@pytest.fixture
def make_config():
    """Factory for ScheduleConfig objects (07:00 wake, 23:00 sleep by default)."""

    def _make(intensity=Intensity.MEDIUM, wake_time="07:00", target_sleep_time="23:00", day=date(2024, 1, 15)):
        return ScheduleConfig(
            wake_time=wake_time,
            target_sleep_time=target_sleep_time,
            intensity=intensity,
            date=day,
        )

    return _make


@pytest.fixture
def seeded_rng():
    """Deterministic random source."""
    return random.Random(1234)


@pytest.fixture
def test_client(db_session: Session, seeded_rng):
    """Create a FastAPI test client with overridden database and random dependencies."""
    from pace.api.app import app, get_rng, get_preferences
    from pace.database.database import get_db
    from pace.models.day_plan import Preferences

    # Override the get_db dependency to use our test database session
    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rng] = lambda: seeded_rng
    app.dependency_overrides[get_preferences] = lambda: Preferences()

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()
