"""Ingestion Pipeline — validate, evaluate, persist, fan out.

Invariants:
    - Empty/whitespace expression on the request path raises EmptyExpressionError BEFORE any write
    - Evaluation failure is an outcome (is_valid=False, output=None), never an exception to the caller
    - Every request-path submission is appended (no dedup); every push-path submission
      passes the DedupGuard first
    - A record is broadcast only after its append committed
    - submit_pushed_record never raises: failures are logged and the submission dropped

Design Decisions:
    - Broadcaster injected at construction (ADR: fan-out is a port, not a global emitter)
    - StoreUnavailableError propagates on the request path (500 via global handler)
      but is logged and dropped on the push path (no reply frame exists)
"""

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from calclog.core.errors import (
    CalclogError, EmptyExpressionError, EvaluationError, InvalidSubmissionError,
)
from calclog.core.evaluate_expression import evaluate_expression
from calclog.core.repository_protocols import (
    Broadcaster, LogDraft, LogRecordLike, LogStore,
)
from calclog.schemas.log import LogSubmission
from calclog.services.dedup_guard import DedupGuard

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationOutcome:
    """What the request/response submitter gets back."""
    message: str
    output: float | None
    is_valid: bool
    record: LogRecordLike


def format_output(value: float) -> str:
    """12.0 -> '12', 2.5 -> '2.5' (matches the calculator display)."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


def build_message(is_valid: bool, output: float | None) -> str:
    if is_valid and output is not None:
        return f"Expression evaluated to {format_output(output)}"
    return "Invalid expression"


class IngestionPipeline:
    """Turns submissions into committed, broadcast log records."""

    def __init__(
        self,
        store: LogStore,
        broadcaster: Broadcaster,
        dedup_guard: DedupGuard,
    ):
        self._store = store
        self._broadcaster = broadcaster
        self._dedup = dedup_guard

    async def submit_expression(self, expression: str | None) -> EvaluationOutcome:
        """Request/response path: evaluate, always log, broadcast, answer."""
        if expression is None or not expression.strip():
            logger.info("Received an empty expression")
            raise EmptyExpressionError()

        try:
            output: float | None = evaluate_expression(expression)
            is_valid = True
        except EvaluationError as e:
            logger.warning(
                f"Invalid expression attempted: {e.reason}",
                extra={"expression": expression},
            )
            output, is_valid = None, False

        record = await self._store.append(
            LogDraft(expression=expression, is_valid=is_valid, output=output),
        )
        logger.info(
            f"Expression logged | Valid: {is_valid}",
            extra={"expression": expression, "log_id": record.id},
        )
        await self._broadcaster.broadcast(record)

        return EvaluationOutcome(
            message=build_message(is_valid, output),
            output=output if is_valid else None,
            is_valid=is_valid,
            record=record,
        )

    async def submit_pushed_record(self, payload: Any) -> LogRecordLike | None:
        """Push path: dedup, append, broadcast. Returns None when nothing was stored."""
        try:
            submission = _parse_submission(payload)
            if not await self._dedup.allows(submission.expression):
                logger.debug(
                    "Suppressed duplicate push submission",
                    extra={"expression": submission.expression},
                )
                return None
            record = await self._store.append(LogDraft(
                expression=submission.expression,
                is_valid=submission.is_valid,
                output=submission.output,
                status=submission.status,
            ))
        except CalclogError as e:
            logger.error(
                f"Error logging expression via push channel: {e.message}",
                extra={"error_code": e.code},
            )
            return None

        logger.info(
            f"Expression logged via push channel | Valid: {record.is_valid}",
            extra={"expression": record.expression, "log_id": record.id},
        )
        await self._broadcaster.broadcast(record)
        return record


def _parse_submission(payload: Any) -> LogSubmission:
    try:
        return LogSubmission.model_validate(payload)
    except ValidationError as e:
        raise InvalidSubmissionError(
            "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc']) or 'payload'}: {err['msg']}"
                for err in e.errors()
            ),
        )
