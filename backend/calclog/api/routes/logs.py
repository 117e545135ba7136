"""Calculator Logs — request/response ingestion and the pull channel.

Invariants:
    - POST answers 200 for valid AND invalid expressions; only emptiness is a 400
    - POST store failures surface as 500 via the global CalclogError handler
    - GET never returns a record with id <= since_id; newest first; at most recent_logs_limit
    - Routes never contain business logic (delegate to IngestionPipeline / LogStore)

Design Decisions:
    - since_id typed as int: a malformed cursor is a 400 validation error, not an empty page
"""

import logging

from fastapi import APIRouter, Depends, Query

from calclog.api.dependencies import get_ingestion_pipeline, get_log_store
from calclog.config import Settings, get_settings
from calclog.infrastructure.log_store import SqlLogStore
from calclog.schemas.log import (
    EvaluationResponse, ExpressionRequest, LogRecordResponse,
)
from calclog.services.ingestion import IngestionPipeline

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/logs", tags=["logs"])


@router.post("", response_model=EvaluationResponse)
async def create_log(
    body: ExpressionRequest,
    pipeline: IngestionPipeline = Depends(get_ingestion_pipeline),
):
    """Evaluate an expression, log the attempt, and fan it out."""
    outcome = await pipeline.submit_expression(body.expression)
    return EvaluationResponse(
        message=outcome.message,
        output=outcome.output,
        is_valid=outcome.is_valid,
    )


@router.get("", response_model=list[LogRecordResponse])
async def list_logs(
    since_id: int | None = Query(None),
    store: SqlLogStore = Depends(get_log_store),
    settings: Settings = Depends(get_settings),
):
    """Latest log records, optionally only those newer than since_id."""
    records = await store.query_recent(since_id, settings.recent_logs_limit)
    logger.info(f"Successfully retrieved {len(records)} logs")
    return records
