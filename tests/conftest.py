"""Pytest configuration and shared fixtures."""

from datetime import datetime

import pytest

from shiftboard.config import ShiftboardConfig
from shiftboard.domain.db import create_db_engine, get_session_factory
from shiftboard.domain.models import Base, Worker
from shiftboard.domain.store import SqlScheduleWeekStore
from shiftboard.engine.reconciler import TimeOffReconciler
from shiftboard.engine.requests import TimeOffRequestLifecycle

# Sunday 2025-06-01, 09:00
NOW = datetime(2025, 6, 1, 9, 0)


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (deselect with '-m \"not integration\"')"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite so the store and request sessions use separate connections."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'shiftboard.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return get_session_factory(engine=engine)


@pytest.fixture
def db_session(session_factory):
    """Create database session for testing."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(session_factory):
    return SqlScheduleWeekStore(session_factory)


@pytest.fixture
def reconciler(store):
    return TimeOffReconciler(store)


@pytest.fixture
def cfg():
    return ShiftboardConfig()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def lifecycle(db_session, reconciler, cfg, now):
    return TimeOffRequestLifecycle(db_session, reconciler, cfg, clock=lambda: now)


@pytest.fixture
def workers(db_session):
    rows = [
        Worker(uid="w1", company_id="acme", full_name="Ava Reed", yos=3, is_minor=False),
        Worker(uid="w2", company_id="acme", full_name="Ben Cole", yos=1, is_minor=True),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return rows
