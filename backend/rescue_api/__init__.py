"""
Animal Rescue API — Application Package Initializer
====================================================

What: Marks the `rescue_api` directory as a Python package.
Who:  Used by uvicorn (`rescue_api.main:app`), pytest, and every internal import.

Architecture Note:
    The backend is a thin request-to-persistence pipeline for shelter animals:

    ┌─────────────────────────────────────┐
    │        Routes (HTTP boundary)       │  ← FastAPI → ApiRequest envelope
    ├─────────────────────────────────────┤
    │   Dispatcher + Response Builder     │  ← method/id routing, status codes
    ├─────────────────────────────────────┤
    │    Codec (Pydantic) + Repository    │  ← JSON ↔ Animal, Animal ↔ rows
    ├─────────────────────────────────────┤
    │     Database (async SQLAlchemy)     │  ← one engine, created at startup
    └─────────────────────────────────────┘

    Each layer only talks to the one below it, so the dispatcher can be
    exercised with a mocked repository and the repository with a throwaway
    SQLite file.
"""

__version__ = "1.0.0"
