"""
Snippetbox — Application Container
===================================

What:  The explicit dependency bundle every route receives: stores, session
       manager, templates and (optionally) the database engine.
How:   `create_app()` stores one Application on `app.state`; routes obtain it
       through `Depends(get_application)`. Tests build an Application around
       in-memory stores and pass it to `create_app()`; there is no module
       level handle to patch.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol

from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncEngine
from starlette.requests import Request

from snippetbox.schemas.snippet import SnippetRecord
from snippetbox.services.session_manager import SessionManager

UI_DIR = Path(__file__).resolve().parent / "ui"
TEMPLATES_DIR = UI_DIR / "html"
STATIC_DIR = UI_DIR / "static"


class SnippetRepository(Protocol):
    async def insert(self, title: str, content: str, expires: int) -> int: ...

    async def get(self, snippet_id: int) -> SnippetRecord: ...

    async def latest(self) -> List[SnippetRecord]: ...

    async def delete(self, snippet_id: int) -> None: ...

    async def get_ids(self) -> List[int]: ...


class UserRepository(Protocol):
    async def insert(self, name: str, email: str, password: str) -> None: ...

    async def authenticate(self, email: str, password: str) -> int: ...

    async def exists(self, user_id: int) -> bool: ...


@dataclass
class Application:
    snippets: SnippetRepository
    users: UserRepository
    sessions: SessionManager
    templates: Jinja2Templates
    engine: Optional[AsyncEngine] = None


def build_templates() -> Jinja2Templates:
    return Jinja2Templates(directory=str(TEMPLATES_DIR))


def get_application(request: Request) -> Application:
    """FastAPI dependency returning the container attached by create_app()."""
    return request.app.state.application
