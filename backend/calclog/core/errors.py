"""Error Hierarchy — typed, categorized exceptions for all calculator-log failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are user-correctable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope; push submitters never receive an error event
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with CalclogError base: FastAPI global handler catches all (ADR: uniform error shape)
    - EvaluationError is part of the hierarchy but never reaches a handler:
      the ingestion pipeline records it as isValid=false
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    EVALUATION = "evaluation"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """When the error was raised; stamped into the REST envelope."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class CalclogError(Exception):
    """Base exception for all calculator-log errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class EmptyExpressionError(CalclogError):
    """Expression missing, empty, or whitespace-only."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Expression is empty",
            "EMPTY_EXPRESSION", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class InvalidSubmissionError(CalclogError):
    """Push-channel payload does not describe a log record."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid log submission: {message}",
            "INVALID_SUBMISSION", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


class EvaluationError(CalclogError):
    """Expression is malformed or has no finite numeric value."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Cannot evaluate expression: {reason}",
            "EVALUATION_FAILED", ErrorCategory.EVALUATION,
            ErrorSeverity.INFO, context, 400,
        )
        self.reason = reason


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StoreUnavailableError(CalclogError):
    """Log store could not be reached or rejected the operation."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Log store {operation} failed: {message}",
            "STORE_UNAVAILABLE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation
