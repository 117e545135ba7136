"""Calculator Log API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CalclogError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database verified on startup: unreachable persistence is fatal to the process
    - One FanOutBroadcaster per app (app.state.broadcaster), created with the app

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Broadcaster created at import, not in lifespan: it holds no IO resources,
      and test transports that skip lifespan still get a working push channel
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from calclog.api.error_handlers import register_error_handlers
from calclog.api.routes import health, logs, long_polling, push_channel
from calclog.config import get_settings
from calclog.infrastructure.database import init_db
from calclog.infrastructure.observability import setup_logging
from calclog.services.broadcaster import FanOutBroadcaster

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format, settings.log_file)
    db = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_create_schema:
        await db.create_schema()
    if not await db.health_check():
        logger.critical("Error connecting to the database; shutting down")
        await db.dispose()
        raise RuntimeError("Database unreachable at startup")
    logger.info("Calculator Log API started")
    yield
    logger.info("Calculator Log API shutting down")
    await db.dispose()


app = FastAPI(
    title="Calculator Log API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.state.broadcaster = FanOutBroadcaster(
    send_timeout_seconds=settings.broadcast_send_timeout_seconds,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(logs.router)
app.include_router(long_polling.router)
app.include_router(push_channel.router)

register_error_handlers(app)


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    current = get_settings()
    uvicorn.run(
        "calclog.main:app", host=current.host, port=current.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
