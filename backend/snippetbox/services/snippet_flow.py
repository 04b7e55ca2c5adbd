"""
Snippetbox — Snippet Flows (Form Pipeline for Snippets)
========================================================

What:  Per-endpoint orchestration for the snippet pages.
How:   Each flow takes the Application container, the request's Session and
       (for submissions) an already-decoded form, and returns an Outcome.
       Flows mutate the Session in memory; the route saves it.

Read-only views (home, view, delete listing):
    store call → NoRecordError propagates (404) / DatabaseError propagates
    (500) → render data with the drained flash → 200

Submissions (create, delete):
    validate → invalid: re-render at 422 with the form echoed
             → valid: store call → flash → 303 redirect
"""

from snippetbox.dependencies import Application
from snippetbox.forms.definitions import SnippetCreateForm, SnippetDeleteForm
from snippetbox.forms.validator import max_string_length, not_blank, permitted_values
from snippetbox.rendering import Outcome, Redirect, Render, TemplateData
from snippetbox.services.session_manager import Session

EXPIRY_DAYS = (1, 7, 365)
TITLE_MAX_CHARS = 100


async def new_template_data(app: Application, session: Session) -> TemplateData:
    """Render data common to every page."""
    user_id = session.authenticated_user_id
    is_authenticated = user_id is not None and await app.users.exists(user_id)
    return TemplateData(is_authenticated=is_authenticated)


def take_flash(session: Session) -> str:
    """Drain the pending flash queue and return the first message, if any."""
    messages = session.flashes()
    return messages[0] if messages else ""


# ── Validation rules ──────────────────────────────────────────────────────

def validate_snippet_create(form: SnippetCreateForm) -> None:
    form.check(not_blank(form.title), "title", "This field cannot be blank")
    form.check(
        max_string_length(form.title, TITLE_MAX_CHARS),
        "title",
        f"This field cannot be more than {TITLE_MAX_CHARS} characters long",
    )
    form.check(not_blank(form.content), "content", "This field cannot be blank")
    form.check(
        permitted_values(form.expires, *EXPIRY_DAYS),
        "expires",
        "This field must equal 1, 7 or 365",
    )


def validate_snippet_delete(form: SnippetDeleteForm) -> None:
    form.check(form.id > 0, "id", "This field must be a positive snippet id")


# ── Read-only views ───────────────────────────────────────────────────────

async def home(app: Application, session: Session) -> Outcome:
    snippets = await app.snippets.latest()

    data = await new_template_data(app, session)
    data.snippets = snippets
    data.flash = take_flash(session)
    return Render("home.html", data)


async def view(app: Application, session: Session, snippet_id: int) -> Outcome:
    snippet = await app.snippets.get(snippet_id)

    data = await new_template_data(app, session)
    data.snippet = snippet
    data.flash = take_flash(session)
    return Render("view.html", data)


async def delete_listing(app: Application, session: Session) -> Outcome:
    ids = await app.snippets.get_ids()

    data = await new_template_data(app, session)
    data.ids = ids
    data.form = SnippetDeleteForm()
    data.flash = take_flash(session)
    return Render("delete.html", data)


async def create_form(app: Application, session: Session) -> Outcome:
    data = await new_template_data(app, session)
    data.form = SnippetCreateForm(expires=365)
    return Render("create.html", data)


# ── Submissions ───────────────────────────────────────────────────────────

async def create(app: Application, session: Session, form: SnippetCreateForm) -> Outcome:
    validate_snippet_create(form)
    if not form.valid():
        data = await new_template_data(app, session)
        data.form = form
        return Render("create.html", data, status_code=422)

    snippet_id = await app.snippets.insert(form.title, form.content, form.expires)

    session.add_flash("Snippet successfully created!")
    return Redirect(f"/snippet/view/{snippet_id}")


async def delete(app: Application, session: Session, form: SnippetDeleteForm) -> Outcome:
    validate_snippet_delete(form)
    if not form.valid():
        data = await new_template_data(app, session)
        data.ids = await app.snippets.get_ids()
        data.form = form
        return Render("delete.html", data, status_code=422)

    await app.snippets.delete(form.id)

    session.add_flash("Snippet successfully deleted!")
    return Redirect("/")
