"""API test fixtures — FastAPI app with every store-touching dependency overridden.

Invariants:
    - HTTP tests (httpx ASGITransport) share the per-test SQLite db_manager and FakeClock
    - Long-poll interval overridden to 0: streams finish without wall-clock waits
    - WebSocket tests use Starlette's TestClient with FakeLogStore (no loop affinity)

Design Decisions:
    - ASGITransport does not run lifespan: the broadcaster already lives on app.state
    - A fresh FanOutBroadcaster per test so observers never leak between tests
"""

import pytest
from httpx import ASGITransport, AsyncClient
from fastapi.testclient import TestClient

from calclog.api.dependencies import (
    get_dedup_guard, get_log_store, get_long_poll_responder,
)
from calclog.infrastructure.database import get_db_manager
from calclog.main import app
from calclog.services.broadcaster import FanOutBroadcaster
from calclog.services.dedup_guard import DedupGuard
from calclog.services.long_poll import LongPollResponder


def _install_overrides(store, db_manager, clock):
    app.dependency_overrides[get_db_manager] = lambda: db_manager
    app.dependency_overrides[get_log_store] = lambda: store
    app.dependency_overrides[get_dedup_guard] = lambda: DedupGuard(store, clock=clock)
    app.dependency_overrides[get_long_poll_responder] = (
        lambda: LongPollResponder(store, interval_seconds=0)
    )


@pytest.fixture
def broadcaster():
    original = app.state.broadcaster
    fresh = FanOutBroadcaster(send_timeout_seconds=1.0)
    app.state.broadcaster = fresh
    yield fresh
    app.state.broadcaster = original


@pytest.fixture
async def client(db_manager, sql_store, clock, broadcaster):
    """Async HTTP client over the real SQL store."""
    _install_overrides(sql_store, db_manager, clock)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def ws_client(fake_store, clock, broadcaster):
    """Sync TestClient (lifespan included) over the in-memory store."""
    _install_overrides(fake_store, None, clock)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
