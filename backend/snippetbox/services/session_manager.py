"""
Snippetbox — Session Manager (Signed Cookie Sessions)
======================================================

What:  Per-browser key/value state carried in one signed cookie: the
       authenticated user id and pending one-shot flash messages.
How:   itsdangerous `URLSafeTimedSerializer` signs a JSON payload with the
       configured secret key; the cookie is rebuilt into a `Session` on every
       request and written back only when a handler calls `save()`.
Who:   Owned by the Application container; used by the routes and flows.

Cookie payload:
    {"authenticatedUserID": 42, "flashes": {"create-message": ["..."]}}

State machine (per request, never per process):
    Anonymous ──authenticate(id)──▶ Authenticated(id)
    Authenticated ──clear_authentication()──▶ Anonymous
    Either transition only reaches the browser once `save()` runs in the
    same response.

Flash contract:
    `flashes(category)` drains the queue in memory and marks the session
    modified. Unless `save()` follows, the old cookie still carries the
    messages and they reappear on the next request: reading without saving
    is indistinguishable from not reading.
"""

import logging
from typing import Any, Dict, List, Optional

from itsdangerous import BadData, URLSafeTimedSerializer
from starlette.requests import Request
from starlette.responses import Response

from snippetbox.exceptions import SessionError

logger = logging.getLogger(__name__)

FLASH_CATEGORY = "create-message"
AUTH_KEY = "authenticatedUserID"
FLASHES_KEY = "flashes"

_SALT = "snippetbox.session"


class Session:
    """Decoded contents of one session cookie."""

    def __init__(self, values: Optional[Dict[str, Any]] = None, is_new: bool = True):
        self.values: Dict[str, Any] = values if values is not None else {}
        self.is_new = is_new
        self.modified = False

    # ── Authentication identity ───────────────────────────────────────────

    @property
    def authenticated_user_id(self) -> Optional[int]:
        return self.values.get(AUTH_KEY)

    @property
    def is_authenticated(self) -> bool:
        return self.authenticated_user_id is not None

    def authenticate(self, user_id: int) -> None:
        self.values[AUTH_KEY] = user_id
        self.modified = True

    def clear_authentication(self) -> None:
        self.values.pop(AUTH_KEY, None)
        self.modified = True

    # ── Flash messages ────────────────────────────────────────────────────

    def add_flash(self, message: str, category: str = FLASH_CATEGORY) -> None:
        """Queue a one-shot message. Not visible to other requests until saved."""
        self.values.setdefault(FLASHES_KEY, {}).setdefault(category, []).append(message)
        self.modified = True

    def flashes(self, category: str = FLASH_CATEGORY) -> List[str]:
        """
        Drain and return every pending message for `category`.

        Returns an empty list when nothing is pending; the session is only
        marked modified when something was actually removed.
        """
        pending = self.values.get(FLASHES_KEY, {})
        messages = pending.pop(category, [])
        if not pending:
            self.values.pop(FLASHES_KEY, None)
        if messages:
            self.modified = True
        return messages

    def __repr__(self) -> str:
        return (
            f"<Session(user_id={self.authenticated_user_id}, "
            f"new={self.is_new}, modified={self.modified})>"
        )


class SessionManager:
    """
    Reads and writes `Session` objects from/to the signed cookie.

    Stateless apart from its configuration, so one instance serves every
    request concurrently.
    """

    def __init__(
        self,
        secret_key: str,
        cookie_name: str = "session",
        max_age: int = 43_200,
        secure: bool = False,
    ):
        self.cookie_name = cookie_name
        self.max_age = max_age
        self.secure = secure
        self._serializer = URLSafeTimedSerializer(secret_key, salt=_SALT)

    def get(self, request: Request) -> Session:
        """
        Reconstruct the session from the request cookie.

        A missing cookie yields a fresh anonymous session.

        Raises:
            SessionError: bad signature, expired signature, or a payload that
                          does not have the session shape
        """
        raw = request.cookies.get(self.cookie_name)
        if not raw:
            return Session()
        return Session(values=self.decode(raw), is_new=False)

    def load(self, request: Request, strict: bool = False) -> Session:
        """
        `get()` with the recovery policy applied.

        Lenient (default): an unreadable cookie is treated as a fresh
        anonymous session. Strict (login/logout): the SessionError
        propagates and the request ends as a 500.
        """
        try:
            return self.get(request)
        except SessionError as e:
            if strict:
                raise
            logger.warning(
                "Discarding unreadable session cookie on %s %s: %s",
                request.method,
                request.url.path,
                e.context.get("error_type", e.message),
            )
            return Session()

    def save(self, session: Session, response: Response) -> None:
        """
        Sign the session and attach it to the response as a Set-Cookie header.

        Raises:
            SessionError: the session contents cannot be serialized; the
                          caller must not send the response
        """
        try:
            value = self._serializer.dumps(session.values)
        except (TypeError, ValueError) as e:
            raise SessionError(
                message="Session could not be encoded",
                context={"error_type": type(e).__name__, "error": str(e)},
            ) from e

        response.set_cookie(
            key=self.cookie_name,
            value=value,
            max_age=self.max_age,
            path="/",
            secure=self.secure,
            httponly=True,
            samesite="lax",
        )
        session.is_new = False
        session.modified = False

    def decode(self, value: str) -> Dict[str, Any]:
        """Verify a raw cookie value and return its payload."""
        try:
            values = self._serializer.loads(value, max_age=self.max_age)
        except BadData as e:
            raise SessionError(
                message="Session cookie failed verification",
                context={"error_type": type(e).__name__},
            ) from e
        self._check_shape(values)
        return values

    @staticmethod
    def _check_shape(values: Any) -> None:
        if not isinstance(values, dict):
            raise SessionError(message="Session payload is not an object")

        user_id = values.get(AUTH_KEY)
        if user_id is not None and (isinstance(user_id, bool) or not isinstance(user_id, int)):
            raise SessionError(message="Session user id is not an integer")

        flashes = values.get(FLASHES_KEY, {})
        if not isinstance(flashes, dict) or not all(
            isinstance(messages, list) and all(isinstance(m, str) for m in messages)
            for messages in flashes.values()
        ):
            raise SessionError(message="Session flashes are malformed")
