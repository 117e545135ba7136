"""Health Routes — greeting, liveness, readiness."""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import OperationalError


async def test_root_greeting(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert res.text == "Hello from the Calculator Log API!"


async def test_liveness(client):
    res = await client.get("/api/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"
    assert res.json()["push_observers"] == 0


async def test_readiness_ok(client):
    res = await client.get("/api/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"]["database"] == "healthy"


async def test_readiness_reports_database_down(client, monkeypatch):
    async def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("down"))

    monkeypatch.setattr(AsyncSession, "execute", broken_execute)

    res = await client.get("/api/health/ready")

    assert res.status_code == 503
    assert res.json()["reason"] == "database_unavailable"
