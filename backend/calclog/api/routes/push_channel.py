"""Push Channel — WebSocket observers submit `log` events and receive `new-log` events.

Invariants:
    - Frames are JSON text: {"event": <name>, "data": <payload>}
    - `log` submissions go through IngestionPipeline.submit_pushed_record (dedup applies)
    - Observers never get a synchronous error for a submission: failures are logged only
    - Binary frames, malformed frames and unknown events are logged and ignored;
      the socket stays open
    - The observer is removed from the broadcaster on every exit path

Design Decisions:
    - Plain FastAPI WebSocket over Socket.IO: same event names, no extra protocol layer
    - Dependencies resolved once per connection: one pipeline per observer
"""

import json
import logging

from fastapi import APIRouter, Depends, WebSocket

from calclog.api.dependencies import get_broadcaster, get_ingestion_pipeline
from calclog.core.domain_types import PushEvent
from calclog.services.broadcaster import FanOutBroadcaster
from calclog.services.ingestion import IngestionPipeline

logger = logging.getLogger(__name__)
router = APIRouter(tags=["push"])


@router.websocket("/ws")
async def push_channel(
    websocket: WebSocket,
    broadcaster: FanOutBroadcaster = Depends(get_broadcaster),
    pipeline: IngestionPipeline = Depends(get_ingestion_pipeline),
):
    await websocket.accept()
    broadcaster.connect(websocket)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            frame = message.get("text")
            if frame is None:
                logger.warning("Ignoring non-text push frame")
                continue
            await _handle_frame(frame, pipeline)
        logger.info("Push channel disconnected")
    finally:
        broadcaster.disconnect(websocket)


async def _handle_frame(frame: str, pipeline: IngestionPipeline) -> None:
    try:
        message = json.loads(frame)
    except ValueError:
        logger.warning("Ignoring non-JSON push frame")
        return
    if not isinstance(message, dict):
        logger.warning("Ignoring push frame without an event envelope")
        return

    event = message.get("event")
    if event != PushEvent.LOG.value:
        logger.debug(f"Ignoring unknown push event {event!r}")
        return

    try:
        await pipeline.submit_pushed_record(message.get("data"))
    except Exception as e:
        logger.error(
            f"Unexpected failure handling push submission: {e}", exc_info=True,
        )
