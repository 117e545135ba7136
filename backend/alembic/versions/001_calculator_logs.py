"""Calculator logs — the single append-only log table.

Revision ID: 001_calculator_logs
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_calculator_logs"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "calculator_logs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("expression", sa.Text, nullable=False),
        sa.Column("is_valid", sa.Boolean, nullable=False),
        sa.Column("output", sa.Float, nullable=True),
        sa.Column("created_on", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("status", sa.String(20), nullable=True),
    )
    op.create_index(
        "ix_calculator_logs_created_on", "calculator_logs", ["created_on"],
    )
    op.create_index(
        "ix_calculator_logs_expression_created_on",
        "calculator_logs", ["expression", "created_on"],
    )


def downgrade() -> None:
    op.drop_index("ix_calculator_logs_expression_created_on", table_name="calculator_logs")
    op.drop_index("ix_calculator_logs_created_on", table_name="calculator_logs")
    op.drop_table("calculator_logs")
