"""
Snippetbox — Package Initializer
=================================

What: Marks the `snippetbox` directory as a Python package.
Who:  Used by uvicorn (`snippetbox.main:app`), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │   Standard chain (ASGI middleware)  │  ← recovery, access log, headers
    ├─────────────────────────────────────┤
    │   Dynamic chain (per-route stages)  │  ← session, CSRF, auth context
    ├─────────────────────────────────────┤
    │        Routes (HTML handlers)       │  ← render pages, redirect
    ├─────────────────────────────────────┤
    │      Services (data access)         │  ← snippets, users, sessions
    ├─────────────────────────────────────┤
    │      Models (SQLAlchemy ORM)        │
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
