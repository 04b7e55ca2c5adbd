"""
Snippetbox — User Flows (Signup, Login, Logout)
================================================

What:  Per-endpoint orchestration for account pages.
How:   Same shape as the snippet flows: validate the decoded form, call the
       user store, map its domain errors back onto the form, update the
       Session, return an Outcome.

Domain error mapping:
    DuplicateEmailError      → field error on `email`, 422, no identity
    InvalidCredentialsError  → one non-field error, 422; unknown email and
                               wrong password read the same
    anything else            → propagates (500, logged by the handler)
"""

import logging

from snippetbox.dependencies import Application
from snippetbox.exceptions import DuplicateEmailError, InvalidCredentialsError
from snippetbox.forms.definitions import LoginForm, SignupForm
from snippetbox.forms.validator import (
    EMAIL_RX,
    min_chars,
    not_blank,
    string_pattern_match,
)
from snippetbox.rendering import Outcome, Redirect, Render
from snippetbox.services.session_manager import Session
from snippetbox.services.snippet_flow import new_template_data

logger = logging.getLogger(__name__)

PASSWORD_MIN_CHARS = 8
INVALID_CREDENTIALS_MESSAGE = "Email or Password is incorrect"


def validate_signup(form: SignupForm) -> None:
    form.check(not_blank(form.name), "name", "This field cannot be blank")
    form.check(not_blank(form.email), "email", "This field cannot be blank")
    form.check(
        string_pattern_match(form.email, EMAIL_RX),
        "email",
        "This field must be a valid email address",
    )
    form.check(not_blank(form.password), "password", "This field cannot be blank")
    form.check(
        min_chars(form.password, PASSWORD_MIN_CHARS),
        "password",
        f"This field must be at least {PASSWORD_MIN_CHARS} characters long",
    )


def validate_login(form: LoginForm) -> None:
    form.check(not_blank(form.email), "email", "This field cannot be blank")
    form.check(
        string_pattern_match(form.email, EMAIL_RX),
        "email",
        "This field must be a valid email address",
    )
    form.check(not_blank(form.password), "password", "This field cannot be blank")


async def _render_form(
    app: Application, session: Session, template: str, form, status_code: int = 200
) -> Outcome:
    data = await new_template_data(app, session)
    data.form = form
    return Render(template, data, status_code=status_code)


async def signup_form(app: Application, session: Session) -> Outcome:
    return await _render_form(app, session, "signup.html", SignupForm())


async def signup(app: Application, session: Session, form: SignupForm) -> Outcome:
    validate_signup(form)
    if not form.valid():
        return await _render_form(app, session, "signup.html", form, status_code=422)

    try:
        await app.users.insert(form.name, form.email, form.password)
    except DuplicateEmailError:
        form.add_field_error("email", "Address is already in use")
        return await _render_form(app, session, "signup.html", form, status_code=422)

    session.add_flash("User signup complete!")
    return Redirect("/")


async def login_form(app: Application, session: Session) -> Outcome:
    return await _render_form(app, session, "login.html", LoginForm())


async def login(app: Application, session: Session, form: LoginForm) -> Outcome:
    validate_login(form)
    if not form.valid():
        return await _render_form(app, session, "login.html", form, status_code=422)

    try:
        user_id = await app.users.authenticate(form.email, form.password)
    except InvalidCredentialsError:
        form.add_non_field_error(INVALID_CREDENTIALS_MESSAGE)
        return await _render_form(app, session, "login.html", form, status_code=422)

    session.authenticate(user_id)
    session.add_flash("User login complete!")
    logger.info("User %d logged in", user_id)
    return Redirect("/")


async def logout(app: Application, session: Session) -> Outcome:
    user_id = session.authenticated_user_id
    session.clear_authentication()
    session.add_flash("User logout complete!")
    if user_id is not None:
        logger.info("User %d logged out", user_id)
    return Redirect("/")
