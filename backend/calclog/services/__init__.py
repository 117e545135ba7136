"""Services Layer — ingestion pipeline, dedup guard, fan-out and long-poll delivery.

Invariants:
    - Services depend on core/ protocols, never on FastAPI request objects
    - Collaborators (store, broadcaster, clock) are injected at construction

Design Decisions:
    - One service per delivery concern for locality (ADR: no god objects)
"""
