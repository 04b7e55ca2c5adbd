"""
Snippetbox — Render Data & Flow Outcomes
=========================================

What:  The render-data bag passed to Jinja2 templates and the two outcomes a
       flow can produce: render a template, or redirect.
How:   Flows return `Render` / `Redirect`; `respond()` turns an outcome into
       a Starlette response. Keeping outcomes as plain data lets the flows
       be exercised in tests without building HTTP responses.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Optional, Union

from fastapi.templating import Jinja2Templates
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from snippetbox.schemas.snippet import SnippetRecord


@dataclass
class TemplateData:
    """Everything a page template may read."""

    snippets: List[SnippetRecord] = field(default_factory=list)
    snippet: Optional[SnippetRecord] = None
    ids: List[int] = field(default_factory=list)
    form: Any = None
    flash: str = ""
    current_year: int = field(default_factory=lambda: datetime.now(timezone.utc).year)
    is_authenticated: bool = False


@dataclass
class Render:
    template: str
    data: TemplateData
    status_code: int = 200


@dataclass
class Redirect:
    location: str
    status_code: int = 303


Outcome = Union[Render, Redirect]


def respond(templates: Jinja2Templates, request: Request, outcome: Outcome) -> Response:
    """Build the HTTP response for a flow outcome."""
    if isinstance(outcome, Redirect):
        return RedirectResponse(url=outcome.location, status_code=outcome.status_code)

    return templates.TemplateResponse(
        request,
        outcome.template,
        {"data": outcome.data},
        status_code=outcome.status_code,
    )
