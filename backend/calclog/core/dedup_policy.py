"""Dedup Policy — decides whether a pushed submission is a near-duplicate.

Invariants:
    - is_outside_window is PURE: caller supplies both timestamps
    - Elapsed time strictly greater than the window allows the write; equal suppresses
    - Naive timestamps are treated as UTC (SQLite drops tzinfo on read)

Design Decisions:
    - Separated from services/dedup_guard.py: the guard does the store lookup (IO),
      this module does the arithmetic (ADR: impureim sandwich)
"""

from datetime import datetime, timedelta, timezone

DEFAULT_DEDUP_WINDOW_MS = 5000


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def is_outside_window(
    latest_created_on: datetime | None,
    now: datetime,
    window_ms: int = DEFAULT_DEDUP_WINDOW_MS,
) -> bool:
    """True when no prior record exists or it is older than the window."""
    if latest_created_on is None:
        return True
    elapsed = as_utc(now) - as_utc(latest_created_on)
    return elapsed > timedelta(milliseconds=window_ms)
