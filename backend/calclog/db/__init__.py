"""Database Package — declarative Base shared by models and alembic.

Invariants:
    - Single async engine per process (owned by infrastructure/database.py)
    - Tables created by alembic in production, by create_schema() in tests/dev

Design Decisions:
    - asyncpg driver for PostgreSQL, aiosqlite for tests (ADR: native async, no thread pool overhead)
"""
