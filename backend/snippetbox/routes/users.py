"""
Snippetbox — Account Route Handlers
====================================

What:  HTTP surface for signup, login and logout.

    GET  /user/signup    empty signup form
    POST /user/signup    422 re-render (rules / duplicate email) or 303 to /
    GET  /user/login     empty login form
    POST /user/login     422 re-render (rules / bad credentials) or 303 to /
    POST /user/logout    clear identity, 303 to /

Login and logout change the session identity, so they load the session in
strict mode: a cookie that fails verification is a SessionError (500)
instead of being silently replaced.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from starlette.responses import Response

from snippetbox.dependencies import Application, get_application
from snippetbox.forms.decoder import read_post_form
from snippetbox.forms.definitions import LoginForm, SignupForm
from snippetbox.routes.responses import finish
from snippetbox.services import user_flow

router = APIRouter(prefix="/user", tags=["Users"], default_response_class=HTMLResponse)


@router.get("/signup", summary="Signup form")
async def user_signup(request: Request, app: Application = Depends(get_application)) -> Response:
    session = app.sessions.load(request)
    outcome = await user_flow.signup_form(app, session)
    return finish(app, request, session, outcome)


@router.post("/signup", summary="Create an account")
async def user_signup_post(
    request: Request, app: Application = Depends(get_application)
) -> Response:
    form = await read_post_form(request, SignupForm)
    session = app.sessions.load(request)
    outcome = await user_flow.signup(app, session, form)
    return finish(app, request, session, outcome)


@router.get("/login", summary="Login form")
async def user_login(request: Request, app: Application = Depends(get_application)) -> Response:
    session = app.sessions.load(request)
    outcome = await user_flow.login_form(app, session)
    return finish(app, request, session, outcome)


@router.post("/login", summary="Log in")
async def user_login_post(
    request: Request, app: Application = Depends(get_application)
) -> Response:
    form = await read_post_form(request, LoginForm)
    session = app.sessions.load(request, strict=True)
    outcome = await user_flow.login(app, session, form)
    return finish(app, request, session, outcome)


@router.post("/logout", summary="Log out")
async def user_logout_post(
    request: Request, app: Application = Depends(get_application)
) -> Response:
    session = app.sessions.load(request, strict=True)
    outcome = await user_flow.logout(app, session)
    return finish(app, request, session, outcome)
