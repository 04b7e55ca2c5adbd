"""
Snippetbox — Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all
       tests. HTTP tests build the app around in-memory stores, so no
       database is needed outside test_stores.py.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── snippet_store:   FakeSnippetStore (records every call)
    ├── user_store:      FakeUserStore (plain-text passwords, in memory)
    ├── session_manager: SessionManager signed with TEST_SECRET_KEY
    ├── application:     Application container wiring the three above
    ├── session:         fresh anonymous Session for flow tests
    └── test_client:     HTTPX AsyncClient bound to create_app(application)
"""

import os

# Override settings for testing BEFORE any snippetbox imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["SESSION_SECRET_KEY"] = "test-secret-key-that-is-long-enough-0123"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from snippetbox.dependencies import Application, build_templates
from snippetbox.exceptions import (
    DatabaseError,
    DuplicateEmailError,
    InvalidCredentialsError,
    NoRecordError,
)
from snippetbox.schemas.snippet import SnippetRecord
from snippetbox.services.session_manager import Session, SessionManager

TEST_SECRET_KEY = os.environ["SESSION_SECRET_KEY"]


# ══════════════════════════════════════════════════════════════════════════
# In-Memory Stores
# ══════════════════════════════════════════════════════════════════════════

class FakeSnippetStore:
    """
    Dict-backed SnippetRepository.

    Set `fail = True` to make every call raise DatabaseError. `inserted`
    and `deleted` record the arguments of each successful call.
    """

    def __init__(self):
        self.rows: Dict[int, SnippetRecord] = {}
        self.inserted: List[Tuple[str, str, int]] = []
        self.deleted: List[int] = []
        self.fail = False
        self._next_id = 1

    def _check(self) -> None:
        if self.fail:
            raise DatabaseError(message="store unavailable", context={"fake": True})

    def add(self, title: str, content: str, created: datetime, expires: datetime) -> int:
        """Seed a row directly, bypassing the insert bookkeeping."""
        snippet_id = self._next_id
        self._next_id += 1
        self.rows[snippet_id] = SnippetRecord(
            id=snippet_id, title=title, content=content, created=created, expires=expires
        )
        return snippet_id

    async def insert(self, title: str, content: str, expires: int) -> int:
        self._check()
        now = datetime.now(timezone.utc)
        snippet_id = self.add(title, content, now, now + timedelta(days=expires))
        self.inserted.append((title, content, expires))
        return snippet_id

    async def get(self, snippet_id: int) -> SnippetRecord:
        self._check()
        row = self.rows.get(snippet_id)
        if row is None or row.expires <= datetime.now(timezone.utc):
            raise NoRecordError(resource="snippet", resource_id=snippet_id)
        return row

    async def latest(self, limit: int = 10) -> List[SnippetRecord]:
        self._check()
        now = datetime.now(timezone.utc)
        live = [r for r in self.rows.values() if r.expires > now]
        return sorted(live, key=lambda r: r.id, reverse=True)[:limit]

    async def delete(self, snippet_id: int) -> None:
        self._check()
        if self.rows.pop(snippet_id, None) is None:
            raise NoRecordError(resource="snippet", resource_id=snippet_id)
        self.deleted.append(snippet_id)

    async def get_ids(self) -> List[int]:
        self._check()
        return sorted(self.rows)


class FakeUserStore:
    """Dict-backed UserRepository keyed by email."""

    def __init__(self):
        self.users: Dict[str, Tuple[int, str, str]] = {}
        self.fail = False
        self._next_id = 1

    async def insert(self, name: str, email: str, password: str) -> None:
        if self.fail:
            raise DatabaseError(message="store unavailable")
        if email in self.users:
            raise DuplicateEmailError(email=email)
        self.users[email] = (self._next_id, name, password)
        self._next_id += 1

    async def authenticate(self, email: str, password: str) -> int:
        if self.fail:
            raise DatabaseError(message="store unavailable")
        user = self.users.get(email)
        if user is None or user[2] != password:
            raise InvalidCredentialsError()
        return user[0]

    async def exists(self, user_id: int) -> bool:
        return any(u[0] == user_id for u in self.users.values())

    def id_for(self, email: str) -> Optional[int]:
        user = self.users.get(email)
        return user[0] if user else None


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def snippet_store():
    return FakeSnippetStore()


@pytest.fixture
def user_store():
    return FakeUserStore()


@pytest.fixture
def session_manager():
    return SessionManager(secret_key=TEST_SECRET_KEY)


@pytest.fixture
def application(snippet_store, user_store, session_manager):
    """
    Provides the dependency container the app and the flows run against.

    Usage:
        async def test_home(application, session):
            outcome = await snippet_flow.home(application, session)
    """
    return Application(
        snippets=snippet_store,
        users=user_store,
        sessions=session_manager,
        templates=build_templates(),
    )


@pytest.fixture
def session():
    return Session()


@pytest_asyncio.fixture
async def test_client(application):
    """
    Provides an async HTTP test client for endpoint testing.

    What:    HTTPX AsyncClient configured to talk to our FastAPI app.
    How:     Uses ASGITransport to route requests directly to the app. The
             client's cookie jar carries the session cookie between calls.
             Redirects are not followed, so tests see the 303 itself.

    Usage:
        async def test_ping(test_client):
            response = await test_client.get("/ping")
            assert response.status_code == 200
    """
    from snippetbox.main import create_app

    transport = ASGITransport(app=create_app(application))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
