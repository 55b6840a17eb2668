"""API Layer: FastAPI routes, dependencies, and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Thin routes delegate to services and translate their results to HTTP
"""
