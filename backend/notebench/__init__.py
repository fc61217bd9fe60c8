"""
Notebench Backend — Application Package Initializer
====================================================

What: Marks the `notebench` directory as a Python package.
Why:  Enables module imports like `from notebench.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend is split into thin layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Security (authentication gate)    │  ← Bearer token → User
    ├─────────────────────────────────────┤
    │   Services (load-and-authorize)     │  ← Existence, ownership, mutation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Explicit data-access context
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
