"""SQL Log Store — LogStore protocol implemented over SQLAlchemy async sessions.

Invariants:
    - append() stamps created_on from the injected clock, never from the caller
    - append() commits before returning: the returned row is durable and has its id
    - query_recent() orders by created_on DESC, id DESC (ties resolved by insertion order)
    - Every call opens its own session: no session is shared across awaits of different requests

Design Decisions:
    - Store owns the clock: dedup compares against the same clock that stamped created_on
      (ADR: deterministic dedup tests with a fake clock)
    - Session-per-operation over request-scoped sessions: the push channel has no request scope
"""

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy import select

from calclog.core.dedup_policy import utc_now
from calclog.core.domain_types import LogId
from calclog.core.repository_protocols import LogDraft
from calclog.infrastructure.database import DatabaseSessionManager
from calclog.models.calculator_log import CalculatorLog

logger = logging.getLogger(__name__)


class SqlLogStore:
    """Append-only calculator log backed by the calculator_logs table."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._db = db
        self._clock = clock

    async def append(self, draft: LogDraft) -> CalculatorLog:
        row = CalculatorLog(
            expression=draft.expression,
            is_valid=draft.is_valid,
            output=draft.output if draft.is_valid else None,
            created_on=self._clock(),
            status=draft.status.value if draft.status else None,
        )
        async with self._db.session() as session:
            session.add(row)
            await session.commit()
            await session.refresh(row)
        logger.debug(
            "Appended log record", extra={"log_id": row.id, "expression": row.expression},
        )
        return row

    async def query_recent(
        self, cursor: LogId | None, limit: int,
    ) -> list[CalculatorLog]:
        query = select(CalculatorLog)
        if cursor is not None:
            query = query.where(CalculatorLog.id > cursor)
        query = query.order_by(
            CalculatorLog.created_on.desc(), CalculatorLog.id.desc(),
        ).limit(limit)
        async with self._db.session() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def find_latest_by_expression(
        self, expression: str,
    ) -> CalculatorLog | None:
        query = (
            select(CalculatorLog)
            .where(CalculatorLog.expression == expression)
            .order_by(CalculatorLog.created_on.desc(), CalculatorLog.id.desc())
            .limit(1)
        )
        async with self._db.session() as session:
            result = await session.execute(query)
            return result.scalar_one_or_none()
