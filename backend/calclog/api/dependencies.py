"""Dependency Wiring — builds services from settings, the db manager, and app.state.

Invariants:
    - The broadcaster is the single per-app instance on app.state (shared by HTTP and WebSocket)
    - Store, guard, pipeline and responder are cheap per-connection objects
    - Every collaborator is reached through Depends(): tests override any layer

Design Decisions:
    - HTTPConnection (not Request) for app.state access: the same dependency serves
      HTTP routes and the WebSocket route
    - Explicit constructor injection below this layer (ADR: no ambient emitter)
"""

from fastapi import Depends
from starlette.requests import HTTPConnection

from calclog.config import Settings, get_settings
from calclog.infrastructure.database import DatabaseSessionManager, get_db_manager
from calclog.infrastructure.log_store import SqlLogStore
from calclog.services.broadcaster import FanOutBroadcaster
from calclog.services.dedup_guard import DedupGuard
from calclog.services.ingestion import IngestionPipeline
from calclog.services.long_poll import LongPollResponder


def get_log_store(
    db: DatabaseSessionManager = Depends(get_db_manager),
) -> SqlLogStore:
    return SqlLogStore(db)


def get_broadcaster(connection: HTTPConnection) -> FanOutBroadcaster:
    return connection.app.state.broadcaster


def get_dedup_guard(
    store: SqlLogStore = Depends(get_log_store),
    settings: Settings = Depends(get_settings),
) -> DedupGuard:
    return DedupGuard(store, window_ms=settings.dedup_window_ms)


def get_ingestion_pipeline(
    store: SqlLogStore = Depends(get_log_store),
    broadcaster: FanOutBroadcaster = Depends(get_broadcaster),
    dedup_guard: DedupGuard = Depends(get_dedup_guard),
) -> IngestionPipeline:
    return IngestionPipeline(store, broadcaster, dedup_guard)


def get_long_poll_responder(
    store: SqlLogStore = Depends(get_log_store),
    settings: Settings = Depends(get_settings),
) -> LongPollResponder:
    return LongPollResponder(
        store,
        interval_seconds=settings.long_poll_interval_ms / 1000,
        batch_size=settings.long_poll_batch_size,
    )
