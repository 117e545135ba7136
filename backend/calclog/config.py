"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Delivery timings (dedup window, long-poll interval) are settings, not literals in services

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults point at a local calclog Postgres; tests swap DATABASE_URL for in-memory SQLite
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://calclog:calclog@db:5432/calclog"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Plain postgresql:// URLs are pinned to the asyncpg driver."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    # Development convenience: create tables on startup instead of running alembic
    database_create_schema: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 5000

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Delivery
    dedup_window_ms: int = 5000
    recent_logs_limit: int = 10
    long_poll_batch_size: int = 5
    long_poll_interval_ms: int = 3000
    broadcast_send_timeout_seconds: float = 5.0

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"
    log_file: str | None = None


@lru_cache
def get_settings() -> Settings:
    return Settings()
