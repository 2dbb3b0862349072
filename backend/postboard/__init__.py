"""
Postboard Backend — Application Package Initializer
===================================================

What: Marks the `postboard` directory as a Python package.
Who:  Imported by uvicorn (`postboard.main:app`), Alembic and pytest.

Architecture Note:
    The backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, ownership rules
    ├─────────────────────────────────────┤
    │     Repositories (Data Access)      │  ← BlogRepository interface
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Services only talk to the BlogRepository interface, so the SQL
    implementation can be swapped for the in-memory fake used by the tests.
"""

__version__ = "1.0.0"
