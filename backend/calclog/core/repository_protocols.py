"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - The log store is the single shared mutable resource; reached only through LogStore
    - Fan-out is an injected port (Broadcaster), never a module-level singleton

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - LogDraft is a frozen dataclass: the pipeline builds it, the store stamps id + createdOn
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from calclog.core.domain_types import LogId, LogStatus


@dataclass(frozen=True)
class LogDraft:
    """A log record before the store assigns id and created_on."""
    expression: str
    is_valid: bool
    output: float | None
    status: LogStatus | None = None


class LogRecordLike(Protocol):
    """Structural contract for committed records (ORM row or test double)."""
    id: LogId
    expression: str
    is_valid: bool
    output: float | None
    created_on: datetime
    status: str | None


class LogStore(Protocol):
    """Contract for log persistence — implemented by shell."""
    async def append(self, draft: LogDraft) -> LogRecordLike: ...
    async def query_recent(
        self, cursor: LogId | None, limit: int,
    ) -> list[LogRecordLike]: ...
    async def find_latest_by_expression(
        self, expression: str,
    ) -> LogRecordLike | None: ...


class Observer(Protocol):
    """A connected push-channel client (Starlette WebSocket satisfies this)."""
    async def send_text(self, data: str) -> None: ...


class Broadcaster(Protocol):
    """Fan-out port handed to the ingestion pipeline."""
    async def broadcast(self, record: LogRecordLike) -> int: ...

