"""API Layer — FastAPI routes, dependencies, response writers and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every endpoint answers with the Success/Failure envelope

Design Decisions:
    - Thin routes: role gate as a route dependency, everything else in services
"""
