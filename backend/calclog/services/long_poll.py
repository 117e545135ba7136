"""Long-Poll Responder — paced replay of a bounded snapshot over one held-open response.

Invariants:
    - Seeding takes ONE snapshot (≤ batch_size records with id > cursor); nothing appended
      later joins an in-flight response
    - Each unit is one JSON record terminated by "\\n" (NDJSON)
    - One record per timer tick; the first tick fires one interval after the stream starts
    - The delivery timer is released exactly once on every exit path:
      completion, detected disconnect, or cancellation of the response task
    - Empty seed never reaches stream(): the route answers 204 immediately

States:
    Seeding --(empty)--> Done
    Seeding --(records)--> Streaming --(all sent | disconnect | cancelled)--> Done

Design Decisions:
    - PacedDelivery as an async context manager: timer ownership is scoped to the
      generator, so `async with` guarantees release (ADR: no manual interval bookkeeping)
    - Pending tick held as an asyncio.Task: release() cancels it if still sleeping
    - sleep injectable: tests assert pacing without wall-clock waits
"""

import asyncio
import logging
from typing import AsyncIterator, Awaitable, Callable, Sequence

from calclog.core.domain_types import LogId
from calclog.core.repository_protocols import LogRecordLike, LogStore
from calclog.schemas.log import LogRecordResponse

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 3.0
DEFAULT_BATCH_SIZE = 5


class PacedDelivery:
    """Cancellable delivery timer owned by one long-poll response."""

    def __init__(
        self,
        interval_seconds: float,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._interval = interval_seconds
        self._sleep = sleep
        self._pending: asyncio.Task | None = None
        self.ticks = 0
        self.released = False
        self.release_count = 0

    async def __aenter__(self) -> "PacedDelivery":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.release()

    async def tick(self) -> None:
        """Wait one interval. Raises RuntimeError once released."""
        if self.released:
            raise RuntimeError("delivery timer already released")
        self._pending = asyncio.ensure_future(self._sleep(self._interval))
        try:
            await self._pending
        finally:
            self._pending = None
        self.ticks += 1

    def release(self) -> None:
        if self.released:
            return
        self.released = True
        self.release_count += 1
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None


def ndjson_line(record: LogRecordLike) -> str:
    return LogRecordResponse.model_validate(record).model_dump_json(by_alias=True) + "\n"


class LongPollResponder:
    """Seeds a snapshot from the store and streams it on a timer."""

    def __init__(
        self,
        store: LogStore,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        batch_size: int = DEFAULT_BATCH_SIZE,
        timer_factory: Callable[[float], PacedDelivery] = PacedDelivery,
    ):
        self._store = store
        self._interval = interval_seconds
        self._batch_size = batch_size
        self._timer_factory = timer_factory

    async def seed(self, cursor: LogId | None) -> list[LogRecordLike]:
        return await self._store.query_recent(cursor, self._batch_size)

    async def stream(
        self,
        records: Sequence[LogRecordLike],
        is_disconnected: Callable[[], Awaitable[bool]],
    ) -> AsyncIterator[str]:
        """Yield one NDJSON unit per tick until the snapshot is exhausted."""
        sent = 0
        try:
            async with self._timer_factory(self._interval) as timer:
                for record in records:
                    await timer.tick()
                    if await is_disconnected():
                        logger.info(
                            f"Long-poll client disconnected after {sent}/{len(records)} records",
                        )
                        return
                    yield ndjson_line(record)
                    sent += 1
        except asyncio.CancelledError:
            logger.info(
                f"Long-poll response cancelled after {sent}/{len(records)} records",
            )
            raise
        logger.debug(f"Long-poll response completed ({sent} records)")
