"""Root conftest — shared test configuration and store fixtures.

Invariants:
    - Env vars set BEFORE calclog.main is imported anywhere (settings are cached)
    - Every test gets a fresh in-memory SQLite database
    - Time is driven by FakeClock: dedup and ordering tests never sleep
"""

import os

# Ensure tests never reach a real database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest

from calclog.infrastructure.database import DatabaseSessionManager
from calclog.infrastructure.log_store import SqlLogStore

from tests.fakes import FakeClock, FakeLogStore, RecordingBroadcaster


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
async def db_manager():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    await manager.create_schema()
    yield manager
    await manager.dispose()


@pytest.fixture
def sql_store(db_manager, clock):
    return SqlLogStore(db_manager, clock=clock)


@pytest.fixture
def fake_store(clock):
    return FakeLogStore(clock)


@pytest.fixture
def recording_broadcaster():
    return RecordingBroadcaster()
