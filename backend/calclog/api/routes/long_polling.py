"""Long-Polling Logs — hybrid channel: one held-open response replaying a snapshot.

Invariants:
    - Empty seed → 204 with empty body, immediately (no timer is created)
    - Non-empty seed → 200 NDJSON stream, one record per interval, then close
    - Headers disable caching/proxy buffering and keep the connection open

Design Decisions:
    - StreamingResponse over an async generator: Starlette cancels the generator on
      client disconnect, and LongPollResponder releases its timer on that path too
    - request.is_disconnected checked per tick as well, for servers that do not cancel
"""

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import StreamingResponse

from calclog.api.dependencies import get_long_poll_responder
from calclog.services.long_poll import LongPollResponder

router = APIRouter(prefix="/api/long-polling", tags=["long-polling"])

# Without these, nginx (X-Accel-Buffering) and browsers (Cache-Control)
# may batch the paced units before delivering them.
LONG_POLL_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}


@router.get("/logs")
async def long_poll_logs(
    request: Request,
    since_id: int | None = Query(None),
    responder: LongPollResponder = Depends(get_long_poll_responder),
):
    """Stream up to 5 recent records (id > since_id), one every interval."""
    records = await responder.seed(since_id)
    if not records:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return StreamingResponse(
        responder.stream(records, request.is_disconnected),
        media_type="application/x-ndjson",
        headers=LONG_POLL_HEADERS,
    )
