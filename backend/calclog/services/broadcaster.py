"""Fan-out Broadcaster — delivers each committed record to every connected push observer.

Invariants:
    - At-most-once per observer per event, no replay: late joiners never see earlier events
    - The record is serialized ONCE per broadcast, then sent to each observer in turn
    - An observer whose send fails or times out is dropped and misses the event
    - broadcast() never raises: delivery failures are logged, not propagated to the submitter

Design Decisions:
    - Sequential sends awaited inside broadcast(): the pipeline awaits broadcast before
      returning, so fan-out order follows append order for each submitter
    - Snapshot of the observer set before sending: connect/disconnect during an await
      cannot mutate the set being iterated
    - One instance per app (app.state.broadcaster), injected into IngestionPipeline
      (ADR: no module-level emitter reachable from handlers)
"""

import asyncio
import json
import logging

from calclog.core.domain_types import PushEvent
from calclog.core.repository_protocols import LogRecordLike, Observer
from calclog.schemas.log import LogRecordResponse

logger = logging.getLogger(__name__)

DEFAULT_SEND_TIMEOUT_SECONDS = 5.0


def new_log_frame(record: LogRecordLike) -> str:
    """Push-channel text frame announcing a committed record."""
    data = LogRecordResponse.model_validate(record).model_dump(
        mode="json", by_alias=True,
    )
    return json.dumps(
        {"event": PushEvent.NEW_LOG.value, "data": data}, ensure_ascii=False,
    )


class FanOutBroadcaster:
    """Tracks connected observers and fans out new-log events."""

    def __init__(self, send_timeout_seconds: float = DEFAULT_SEND_TIMEOUT_SECONDS):
        self._observers: set[Observer] = set()
        self._send_timeout = send_timeout_seconds

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def connect(self, observer: Observer) -> None:
        self._observers.add(observer)
        logger.info(
            "Push observer connected", extra={"observers": len(self._observers)},
        )

    def disconnect(self, observer: Observer) -> None:
        if observer in self._observers:
            self._observers.discard(observer)
            logger.info(
                "Push observer disconnected",
                extra={"observers": len(self._observers)},
            )

    async def broadcast(self, record: LogRecordLike) -> int:
        """Send the record to all observers. Returns how many received it."""
        frame = new_log_frame(record)
        delivered = 0
        for observer in list(self._observers):
            try:
                await asyncio.wait_for(
                    observer.send_text(frame), timeout=self._send_timeout,
                )
                delivered += 1
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning(
                    f"Dropping push observer after failed send: {e!r}",
                    extra={"log_id": record.id},
                )
                self.disconnect(observer)
        return delivered
