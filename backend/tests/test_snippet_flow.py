"""
Snippetbox — Snippet Flow Unit Tests
=====================================

What:  Tests for the create/delete/view flows against in-memory stores.
How:   Flows return plain Outcome objects, so no HTTP stack is involved.

What we test:
    ✅ Invalid create never reaches the store and re-renders at 422
    ✅ Valid create inserts once, queues the flash, redirects to the view
    ✅ Views drain the pending flash into the render data
    ✅ Delete validation, success and missing-record paths
    ✅ Store failures propagate as DatabaseError
"""

from datetime import datetime, timedelta, timezone

import pytest

from snippetbox.exceptions import DatabaseError, NoRecordError
from snippetbox.forms.definitions import SnippetCreateForm, SnippetDeleteForm
from snippetbox.rendering import Redirect, Render
from snippetbox.services import snippet_flow


class TestCreate:
    """Tests for snippet_flow.create."""

    @pytest.mark.asyncio
    async def test_title_too_long(self, application, session, snippet_store):
        form = SnippetCreateForm(title="a" * 101, content="body", expires=7)

        outcome = await snippet_flow.create(application, session, form)

        assert isinstance(outcome, Render)
        assert outcome.status_code == 422
        assert outcome.template == "create.html"
        assert form.field_errors == {
            "title": "This field cannot be more than 100 characters long"
        }
        assert snippet_store.inserted == []

    @pytest.mark.asyncio
    async def test_title_at_limit_is_accepted(self, application, session, snippet_store):
        form = SnippetCreateForm(title="a" * 100, content="body", expires=1)

        outcome = await snippet_flow.create(application, session, form)

        assert isinstance(outcome, Redirect)
        assert len(snippet_store.inserted) == 1

    @pytest.mark.asyncio
    async def test_blank_title_reports_blank_only(self, application, session):
        form = SnippetCreateForm(title="   ", content="", expires=365)

        await snippet_flow.create(application, session, form)

        assert form.field_errors == {
            "title": "This field cannot be blank",
            "content": "This field cannot be blank",
        }

    @pytest.mark.asyncio
    async def test_expires_not_permitted(self, application, session, snippet_store):
        form = SnippetCreateForm(title="t", content="c", expires=30)

        outcome = await snippet_flow.create(application, session, form)

        assert outcome.status_code == 422
        assert form.field_errors["expires"] == "This field must equal 1, 7 or 365"
        assert snippet_store.inserted == []

    @pytest.mark.asyncio
    async def test_invalid_form_is_echoed(self, application, session):
        form = SnippetCreateForm(title="", content="keep me", expires=7)

        outcome = await snippet_flow.create(application, session, form)

        assert outcome.data.form is form
        assert outcome.data.form.content == "keep me"

    @pytest.mark.asyncio
    async def test_success(self, application, session, snippet_store):
        form = SnippetCreateForm(title="O snail", content="Climb Mount Fuji", expires=7)

        outcome = await snippet_flow.create(application, session, form)

        assert isinstance(outcome, Redirect)
        assert outcome.location == "/snippet/view/1"
        assert outcome.status_code == 303
        assert snippet_store.inserted == [("O snail", "Climb Mount Fuji", 7)]
        assert session.flashes() == ["Snippet successfully created!"]

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, application, session, snippet_store):
        snippet_store.fail = True
        form = SnippetCreateForm(title="t", content="c", expires=1)

        with pytest.raises(DatabaseError):
            await snippet_flow.create(application, session, form)

        assert session.modified is False


class TestViews:
    """Tests for the read-only flows."""

    @pytest.mark.asyncio
    async def test_home_lists_latest_first(self, application, session, snippet_store):
        for title in ("one", "two", "three"):
            await snippet_store.insert(title, "c", 7)

        outcome = await snippet_flow.home(application, session)

        assert outcome.template == "home.html"
        assert [s.title for s in outcome.data.snippets] == ["three", "two", "one"]

    @pytest.mark.asyncio
    async def test_home_drains_flash(self, application, session):
        session.add_flash("Snippet successfully deleted!")
        session.modified = False

        outcome = await snippet_flow.home(application, session)

        assert outcome.data.flash == "Snippet successfully deleted!"
        assert session.modified is True
        assert session.flashes() == []

    @pytest.mark.asyncio
    async def test_view_unknown_id(self, application, session):
        with pytest.raises(NoRecordError):
            await snippet_flow.view(application, session, 99)

    @pytest.mark.asyncio
    async def test_view_expired_is_missing(self, application, session, snippet_store):
        past = datetime.now(timezone.utc) - timedelta(days=2)
        snippet_id = snippet_store.add("old", "c", past, past + timedelta(days=1))

        with pytest.raises(NoRecordError):
            await snippet_flow.view(application, session, snippet_id)

    @pytest.mark.asyncio
    async def test_view_found(self, application, session, snippet_store):
        snippet_id = await snippet_store.insert("t", "c", 365)

        outcome = await snippet_flow.view(application, session, snippet_id)

        assert outcome.status_code == 200
        assert outcome.data.snippet.id == snippet_id

    @pytest.mark.asyncio
    async def test_create_form_defaults_to_one_year(self, application, session):
        outcome = await snippet_flow.create_form(application, session)

        assert outcome.data.form.expires == 365

    @pytest.mark.asyncio
    async def test_authenticated_flag_requires_existing_user(
        self, application, session, user_store
    ):
        session.authenticate(5)
        outcome = await snippet_flow.home(application, session)
        assert outcome.data.is_authenticated is False

        await user_store.insert("Alice", "alice@example.com", "pa$$word")
        session.authenticate(user_store.id_for("alice@example.com"))
        outcome = await snippet_flow.home(application, session)
        assert outcome.data.is_authenticated is True


class TestDelete:
    """Tests for snippet_flow.delete and the delete listing."""

    @pytest.mark.asyncio
    async def test_listing_shows_ids(self, application, session, snippet_store):
        await snippet_store.insert("a", "c", 1)
        await snippet_store.insert("b", "c", 1)

        outcome = await snippet_flow.delete_listing(application, session)

        assert outcome.template == "delete.html"
        assert outcome.data.ids == [1, 2]

    @pytest.mark.asyncio
    async def test_non_positive_id_is_invalid(self, application, session, snippet_store):
        form = SnippetDeleteForm(id=0)

        outcome = await snippet_flow.delete(application, session, form)

        assert outcome.status_code == 422
        assert "id" in form.field_errors
        assert snippet_store.deleted == []

    @pytest.mark.asyncio
    async def test_success(self, application, session, snippet_store):
        snippet_id = await snippet_store.insert("a", "c", 1)

        outcome = await snippet_flow.delete(application, session, SnippetDeleteForm(id=snippet_id))

        assert isinstance(outcome, Redirect)
        assert outcome.location == "/"
        assert snippet_store.deleted == [snippet_id]
        assert session.flashes() == ["Snippet successfully deleted!"]

    @pytest.mark.asyncio
    async def test_missing_record(self, application, session):
        with pytest.raises(NoRecordError):
            await snippet_flow.delete(application, session, SnippetDeleteForm(id=42))

        assert session.flashes() == []
