"""Pydantic Schemas — request/response validation for HTTP and push-channel payloads.

Invariants:
    - Schemas validate at system boundary (HTTP bodies, WebSocket frames, responses)
    - Domain enums from core/ used for enum fields

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
