"""CalculatorLog ORM — persists one evaluation attempt per row.

Invariants:
    - id is an autoincrement integer: strictly increasing in insertion order (the pagination cursor)
    - expression is non-nullable text
    - output is NULL when is_valid is false (no sentinel value)
    - created_on is stamped once by the store, never taken from the caller
    - status is reserved for batch workflows; no delivery path reads it

Design Decisions:
    - Integer PK over UUID: the cursor must be order-preserving (ADR: since_id pagination)
    - Composite index (expression, created_on): dedup lookup is "latest row for this expression"
    - Float over Numeric: outputs are already rounded to 2 places before insert
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from calclog.db.base import Base


class CalculatorLog(Base):
    """CalculatorLog entry — one expression, its validity and its result."""
    __tablename__ = "calculator_logs"
    __table_args__ = (
        Index("ix_calculator_logs_expression_created_on", "expression", "created_on"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    expression: Mapped[str] = mapped_column(Text, nullable=False)
    is_valid: Mapped[bool] = mapped_column(Boolean, nullable=False)
    output: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_on: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        default=lambda: datetime.now(timezone.utc),
    )
    status: Mapped[str | None] = mapped_column(String(20), nullable=True)
