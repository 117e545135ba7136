"""Infrastructure Layer — database sessions, the SQL log store, and logging setup.

Invariants:
    - Infrastructure implements core/ protocols; core never imports infrastructure
    - All SQLAlchemy exceptions mapped to StoreUnavailableError

Design Decisions:
    - Thin wrappers over SQLAlchemy async (ADR: single responsibility)
"""
