"""
Snippetbox — User Flow Unit Tests
==================================

What:  Tests for signup, login and logout flows against in-memory stores.

What we test:
    ✅ Signup field rules and the duplicate-email mapping
    ✅ Login answers unknown email and wrong password identically
    ✅ Successful login stores the user id and queues the flash
    ✅ Logout clears the identity and queues the flash
"""

import pytest

from snippetbox.forms.definitions import LoginForm, SignupForm
from snippetbox.rendering import Redirect
from snippetbox.services import user_flow
from snippetbox.services.session_manager import AUTH_KEY


def _signup(name="Alice", email="alice@example.com", password="pa$$word") -> SignupForm:
    return SignupForm(name=name, email=email, password=password)


class TestSignup:
    """Tests for user_flow.signup."""

    @pytest.mark.asyncio
    async def test_success(self, application, session, user_store):
        outcome = await user_flow.signup(application, session, _signup())

        assert isinstance(outcome, Redirect)
        assert outcome.location == "/"
        assert "alice@example.com" in user_store.users
        assert session.flashes() == ["User signup complete!"]
        assert session.is_authenticated is False

    @pytest.mark.asyncio
    async def test_field_rules(self, application, session, user_store):
        form = _signup(name=" ", email="not-an-email", password="short")

        outcome = await user_flow.signup(application, session, form)

        assert outcome.status_code == 422
        assert form.field_errors == {
            "name": "This field cannot be blank",
            "email": "This field must be a valid email address",
            "password": "This field must be at least 8 characters long",
        }
        assert user_store.users == {}

    @pytest.mark.asyncio
    async def test_duplicate_email(self, application, session, user_store):
        await user_store.insert("Bob", "alice@example.com", "other-password")
        form = _signup()

        outcome = await user_flow.signup(application, session, form)

        assert outcome.status_code == 422
        assert outcome.template == "signup.html"
        assert form.field_errors == {"email": "Address is already in use"}
        assert session.modified is False


class TestLogin:
    """Tests for user_flow.login."""

    @pytest.mark.asyncio
    async def test_success(self, application, session, user_store):
        await user_store.insert("Alice", "alice@example.com", "pa$$word")
        form = LoginForm(email="alice@example.com", password="pa$$word")

        outcome = await user_flow.login(application, session, form)

        assert isinstance(outcome, Redirect)
        assert session.authenticated_user_id == user_store.id_for("alice@example.com")
        assert session.flashes() == ["User login complete!"]

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_match(
        self, application, session, user_store
    ):
        await user_store.insert("Alice", "alice@example.com", "pa$$word")
        wrong_password = LoginForm(email="alice@example.com", password="nope-nope")
        unknown_email = LoginForm(email="nobody@example.com", password="pa$$word")

        first = await user_flow.login(application, session, wrong_password)
        second = await user_flow.login(application, session, unknown_email)

        assert first.status_code == second.status_code == 422
        assert wrong_password.non_field_errors == unknown_email.non_field_errors
        assert wrong_password.non_field_errors == [user_flow.INVALID_CREDENTIALS_MESSAGE]
        assert wrong_password.field_errors == {}
        assert session.is_authenticated is False

    @pytest.mark.asyncio
    async def test_blank_fields(self, application, session):
        form = LoginForm(email="", password="")

        outcome = await user_flow.login(application, session, form)

        assert outcome.status_code == 422
        assert form.field_errors["email"] == "This field cannot be blank"
        assert form.field_errors["password"] == "This field cannot be blank"


class TestLogout:
    """Tests for user_flow.logout."""

    @pytest.mark.asyncio
    async def test_clears_identity(self, application, session):
        session.authenticate(3)

        outcome = await user_flow.logout(application, session)

        assert isinstance(outcome, Redirect)
        assert AUTH_KEY not in session.values
        assert session.flashes() == ["User logout complete!"]

    @pytest.mark.asyncio
    async def test_anonymous_logout_still_redirects(self, application, session):
        outcome = await user_flow.logout(application, session)

        assert outcome.location == "/"
