"""
Postpad — Application Package Initializer
===========================================

What: Marks the `postpad` directory as a Python package.
Who:  Used by uvicorn (`postpad.main:create_app`, factory mode), Alembic,
      pytest and the serverless entrypoint in `api/index.py`.

Architecture Note:
    ┌─────────────────────────────────────┐
    │      Routes (HTML + redirects)      │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Session gate (auth dependency)    │  ← identity from the token cookie
    ├─────────────────────────────────────┤
    │      Services (flows + stores)      │  ← registration, login, posts
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
