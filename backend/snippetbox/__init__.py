"""
Snippetbox — Application Package Initializer
=============================================

What: Marks the `snippetbox` directory as a Python package.
Who:  Imported by uvicorn (`snippetbox.main:app`), Alembic and pytest.

Architecture Note:
    The board follows a layered layout:

    ┌─────────────────────────────────────┐
    │        Routes (HTTP surface)        │  ← request parsing, responses
    ├─────────────────────────────────────┤
    │   Flows (form pipeline per route)   │  ← decode → validate → call → session
    ├─────────────────────────────────────┤
    │   Forms / Session Manager           │  ← typed forms, signed cookie state
    ├─────────────────────────────────────┤
    │   Stores & Models (Persistence)     │  ← async SQLAlchemy
    └─────────────────────────────────────┘

    Flows never touch the request object: they take a decoded form and an
    explicit Session and return an Outcome, so they run without HTTP.
"""

__version__ = "1.0.0"
