"""Health & Readiness Probes — greeting, liveness and readiness endpoints.

Invariants:
    - GET / always answers the plain-text greeting (legacy clients ping it)
    - GET /api/health/ always returns 200 if process is up (liveness)
    - GET /api/health/ready returns 503 if database is unreachable (readiness)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, PlainTextResponse

from calclog.infrastructure.database import DatabaseSessionManager, get_db_manager
from calclog.services.broadcaster import FanOutBroadcaster
from calclog.api.dependencies import get_broadcaster

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
async def greeting():
    logger.info("Served root endpoint")
    return "Hello from the Calculator Log API!"


@router.get("/api/health/", status_code=status.HTTP_200_OK)
async def health_check(
    broadcaster: FanOutBroadcaster = Depends(get_broadcaster),
):
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "calclog-api",
        "push_observers": broadcaster.observer_count,
    }


@router.get("/api/health/ready")
async def readiness_check(
    db: DatabaseSessionManager = Depends(get_db_manager),
):
    """Readiness probe — includes database connectivity."""
    if not await db.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
