"""Error Handlers — map failures to the {"error": {...}} envelope.

Invariants:
    - CalclogError → its own http_status and to_response() body
    - RequestValidationError → 400 VALIDATION_ERROR with one detail per field
    - Any other exception → 500 INTERNAL_ERROR; the exception text never reaches the client
    - StoreUnavailableError is logged at error level, client mistakes at info level
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from calclog.core.errors import CalclogError, ErrorCategory, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CalclogError, handle_calclog_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


async def handle_calclog_error(request: Request, exc: CalclogError) -> JSONResponse:
    log = logger.error if exc.http_status >= 500 else logger.info
    log(
        f"{exc.code} on {request.url.path}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(loc) for loc in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    logger.warning(
        f"Rejected request to {request.url.path}: {len(details)} invalid field(s)",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return _envelope(
        status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", "Invalid request data",
        ErrorCategory.VALIDATION, ErrorSeverity.ERROR, details=details,
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.url.path}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return _envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR",
        "Internal Server Error", ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
    )


def _envelope(
    status_code: int,
    code: str,
    message: str,
    category: ErrorCategory,
    severity: ErrorSeverity,
    **extra,
) -> JSONResponse:
    body = {
        "code": code,
        "message": message,
        "category": category.value,
        "severity": severity.value,
        **extra,
    }
    return JSONResponse(status_code=status_code, content={"error": body})
