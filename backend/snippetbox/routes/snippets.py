"""
Snippetbox — Snippet Route Handlers
====================================

What:  HTTP surface for snippets.

    GET  /                    home: latest snippets + pending flash
    GET  /snippet/view/{id}   one snippet (404 for unknown/expired/bad id)
    GET  /snippet/create      empty create form (expires pre-set to 365)
    POST /snippet/create      create; 422 re-render or 303 to the new snippet
    GET  /snippet/delete      delete form listing stored ids
    POST /snippet/delete      delete; 422 re-render, 404, or 303 to /

How:   Routes stay thin: decode the body (DecodeError → 400 before the
       session is even read), load the session leniently, run the flow,
       then `finish()` saves the session onto the response.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from starlette.responses import Response

from snippetbox.dependencies import Application, get_application
from snippetbox.exceptions import NotFoundError
from snippetbox.forms.decoder import read_post_form
from snippetbox.database import MAX_ID
from snippetbox.forms.definitions import SnippetCreateForm, SnippetDeleteForm, parse_int
from snippetbox.routes.responses import finish
from snippetbox.services import snippet_flow

router = APIRouter(tags=["Snippets"], default_response_class=HTMLResponse)


@router.get("/", summary="Latest snippets")
async def home(request: Request, app: Application = Depends(get_application)) -> Response:
    session = app.sessions.load(request)
    outcome = await snippet_flow.home(app, session)
    return finish(app, request, session, outcome)


@router.get("/snippet/view/{snippet_id}", summary="View one snippet")
async def snippet_view(
    snippet_id: str,
    request: Request,
    app: Application = Depends(get_application),
) -> Response:
    """
    The id is taken as a raw string so that malformed, non-positive and
    out-of-range ids answer 404 like unknown ones, rather than FastAPI's 422
    or a driver overflow.
    """
    try:
        parsed_id = parse_int(snippet_id)
    except ValueError:
        raise NotFoundError(resource="snippet", resource_id=snippet_id) from None
    if not 1 <= parsed_id <= MAX_ID:
        raise NotFoundError(resource="snippet", resource_id=snippet_id)

    session = app.sessions.load(request)
    outcome = await snippet_flow.view(app, session, parsed_id)
    return finish(app, request, session, outcome)


@router.get("/snippet/create", summary="Snippet create form")
async def snippet_create(request: Request, app: Application = Depends(get_application)) -> Response:
    session = app.sessions.load(request)
    outcome = await snippet_flow.create_form(app, session)
    return finish(app, request, session, outcome)


@router.post("/snippet/create", summary="Create a snippet")
async def snippet_create_post(
    request: Request, app: Application = Depends(get_application)
) -> Response:
    form = await read_post_form(request, SnippetCreateForm)
    session = app.sessions.load(request)
    outcome = await snippet_flow.create(app, session, form)
    return finish(app, request, session, outcome)


@router.get("/snippet/delete", summary="Snippet delete form")
async def snippet_delete(request: Request, app: Application = Depends(get_application)) -> Response:
    session = app.sessions.load(request)
    outcome = await snippet_flow.delete_listing(app, session)
    return finish(app, request, session, outcome)


@router.post("/snippet/delete", summary="Delete a snippet")
async def snippet_delete_post(
    request: Request, app: Application = Depends(get_application)
) -> Response:
    form = await read_post_form(request, SnippetDeleteForm)
    session = app.sessions.load(request)
    outcome = await snippet_flow.delete(app, session, form)
    return finish(app, request, session, outcome)
