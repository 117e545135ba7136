"""API Layer — FastAPI routes, WebSocket push channel, and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All JSON endpoints return structured responses; errors use the CalclogError envelope

Design Decisions:
    - Thin routes delegate to services (ADR: impureim sandwich)
"""
