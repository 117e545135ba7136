"""Structured Logging — JSON formatter and setup for production observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (expression, log_id, error_code, path, observers) surfaced when present
    - JSON format in production, human-readable in development
    - Optional file sink mirrors the stream sink (same formatter)

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - setup_logging called once on startup via lifespan; idempotent so test apps
      re-entering lifespan do not stack duplicate handlers
"""

import logging
import json
import os
from datetime import datetime, timezone

_EXTRA_FIELDS = ("expression", "log_id", "error_code", "path", "observers")

# Marker so repeated setup_logging calls replace rather than stack handlers
_HANDLER_FLAG = "_calclog_handler"


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def _build_formatter(fmt: str) -> logging.Formatter:
    if fmt == "json":
        return JSONFormatter()
    return logging.Formatter(
        "%(levelname)s: %(asctime)s: %(name)s %(message)s",
        datefmt="%b-%d-%Y %H:%M:%S",
    )


def setup_logging(
    level: str = "INFO", fmt: str = "json", log_file: str | None = None,
) -> None:
    """Configure logging for the application."""
    for existing in list(logging.root.handlers):
        if getattr(existing, _HANDLER_FLAG, False):
            logging.root.removeHandler(existing)
            existing.close()

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        directory = os.path.dirname(log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = _build_formatter(fmt)
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_FLAG, True)
        logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
