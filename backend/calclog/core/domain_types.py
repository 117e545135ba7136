"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - LogId wraps the store-assigned integer cursor — strictly increasing in insertion order
    - Output is always rounded to OUTPUT_DECIMALS places before it is stored
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

LogId = NewType("LogId", int)


# ─── Value Types ─────────────────────────────────────────────────

Output = NewType("Output", float)   # rounded to OUTPUT_DECIMALS

OUTPUT_DECIMALS = 2
MAX_EXPRESSION_LENGTH = 1000


# ─── Enums ───────────────────────────────────────────────────────

class LogStatus(str, Enum):
    """Reserved lifecycle tag for batch workflows — not read by any delivery path."""
    PENDING = "pending"
    COMPLETED = "completed"


class PushEvent(str, Enum):
    """Event names on the push channel."""
    LOG = "log"
    NEW_LOG = "new-log"
