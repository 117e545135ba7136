"""Dedup Guard — suppresses near-duplicate push-channel submissions.

Invariants:
    - Applied ONLY on the push-submission path; POST /api/logs never consults it
    - Exact expression match (case- and whitespace-sensitive)
    - Check-then-act is NOT atomic: two submissions interleaving at the lookup await
      may both pass. Accepted race, bounded by the window.

Design Decisions:
    - Store lookup here (IO), window arithmetic in core/dedup_policy.py (pure)
    - Clock injected so tests control elapsed time without sleeping
"""

from datetime import datetime
from typing import Callable

from calclog.core.dedup_policy import (
    DEFAULT_DEDUP_WINDOW_MS, is_outside_window, utc_now,
)
from calclog.core.repository_protocols import LogStore


class DedupGuard:
    """Allows a write unless the same expression was stored within the window."""

    def __init__(
        self,
        store: LogStore,
        window_ms: int = DEFAULT_DEDUP_WINDOW_MS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = store
        self._window_ms = window_ms
        self._clock = clock

    @property
    def window_ms(self) -> int:
        return self._window_ms

    async def allows(self, expression: str) -> bool:
        latest = await self._store.find_latest_by_expression(expression)
        return is_outside_window(
            latest.created_on if latest else None, self._clock(), self._window_ms,
        )
