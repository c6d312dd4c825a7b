"""
Happy Thoughts Backend — Application Package Initializer
========================================================

What: Marks the `happy_thoughts` directory as a Python package.
Why:  Enables module imports like `from happy_thoughts.config import Settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows the same layered layout for every request:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Thought access)   │  ← Storage calls, error translation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async engine built per app
    └─────────────────────────────────────┘

    The engine is created by the application factory and handed to the app,
    so each layer can be exercised against an in-memory database in tests.
"""

__version__ = "1.0.0"
