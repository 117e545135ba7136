"""SQL Log Store — verifies append stamping, cursor queries, and dedup lookups on SQLite.

Invariants:
    - append assigns strictly increasing ids and stamps created_on from the clock
    - query_recent never returns id <= cursor, newest first, at most `limit`
    - find_latest_by_expression is exact-match (case and whitespace sensitive)
    - SQLAlchemy failures surface as StoreUnavailableError
"""

import pytest
from sqlalchemy.exc import OperationalError

from calclog.core.domain_types import LogStatus
from calclog.core.errors import StoreUnavailableError
from calclog.core.repository_protocols import LogDraft
from calclog.core.dedup_policy import as_utc


def _draft(expression="1+1", is_valid=True, output=2.0, **kwargs):
    return LogDraft(expression=expression, is_valid=is_valid, output=output, **kwargs)


async def test_append_assigns_increasing_ids(sql_store):
    first = await sql_store.append(_draft("1+1"))
    second = await sql_store.append(_draft("2+2", output=4.0))
    assert first.id is not None
    assert second.id > first.id


async def test_append_stamps_created_on_from_clock(sql_store, clock):
    record = await sql_store.append(_draft())
    assert as_utc(record.created_on) == clock.now


async def test_append_stores_null_output_for_invalid(sql_store):
    record = await sql_store.append(_draft("2+", is_valid=False, output=99.0))
    assert record.is_valid is False
    assert record.output is None


async def test_append_stores_reserved_status(sql_store):
    record = await sql_store.append(_draft(status=LogStatus.PENDING))
    assert record.status == "pending"


async def test_query_recent_without_cursor_returns_newest_first(sql_store, clock):
    for i in range(12):
        await sql_store.append(_draft(f"{i}+0", output=float(i)))
        clock.advance(10)

    records = await sql_store.query_recent(None, 10)

    assert len(records) == 10
    assert [r.expression for r in records] == [f"{i}+0" for i in range(11, 1, -1)]


async def test_query_recent_with_cursor_excludes_older_ids(sql_store, clock):
    ids = []
    for i in range(5):
        ids.append((await sql_store.append(_draft(f"{i}*1"))).id)
        clock.advance(10)

    records = await sql_store.query_recent(ids[2], 10)

    assert [r.id for r in records] == [ids[4], ids[3]]
    assert all(r.id > ids[2] for r in records)


async def test_query_recent_ties_ordered_by_id(sql_store):
    # Same clock reading for all three
    a = await sql_store.append(_draft("a"))
    b = await sql_store.append(_draft("b"))
    c = await sql_store.append(_draft("c"))
    records = await sql_store.query_recent(None, 10)
    assert [r.id for r in records] == [c.id, b.id, a.id]


async def test_query_recent_empty_store(sql_store):
    assert await sql_store.query_recent(None, 10) == []
    assert await sql_store.query_recent(100, 5) == []


async def test_find_latest_by_expression_returns_most_recent(sql_store, clock):
    await sql_store.append(_draft("3*4", output=12.0))
    clock.advance(1000)
    latest = await sql_store.append(_draft("3*4", output=12.0))
    await sql_store.append(_draft("other"))

    found = await sql_store.find_latest_by_expression("3*4")

    assert found.id == latest.id


async def test_find_latest_by_expression_is_exact_match(sql_store):
    await sql_store.append(_draft("3*4", output=12.0))
    assert await sql_store.find_latest_by_expression("3 * 4") is None
    assert await sql_store.find_latest_by_expression("3*4 ") is None
    assert await sql_store.find_latest_by_expression("missing") is None


async def test_operational_error_becomes_store_unavailable(db_manager, sql_store, monkeypatch):
    async def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    from sqlalchemy.ext.asyncio import AsyncSession
    monkeypatch.setattr(AsyncSession, "execute", broken_execute)

    with pytest.raises(StoreUnavailableError) as exc_info:
        await sql_store.query_recent(None, 10)
    assert exc_info.value.http_status == 500


async def test_health_check_reports_database_state(db_manager, monkeypatch):
    assert await db_manager.health_check() is True

    async def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("down"))

    from sqlalchemy.ext.asyncio import AsyncSession
    monkeypatch.setattr(AsyncSession, "execute", broken_execute)
    assert await db_manager.health_check() is False
