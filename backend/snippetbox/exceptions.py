"""
Snippetbox — Custom Exception Hierarchy
========================================

What:  Application-specific exceptions for every error scenario of the board.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) turn the ones that
       escape a route into plain-text HTTP responses with the right status.
Who:   Raised by the decoder, session manager and stores; recovered by the
       flows where a user-facing re-render is possible.

Exception Hierarchy:
    SnippetboxError (base)
    ├── ClientInputError              → 400 Bad Request
    │   └── DecodeError               → 400 (malformed form submission)
    ├── NotFoundError                 → 404 Not Found
    │   └── NoRecordError             → 404 (store lookup missed)
    ├── ValidationError               → 422 Unprocessable Entity
    ├── DomainConflictError           → 422 Unprocessable Entity
    │   ├── DuplicateEmailError
    │   └── InvalidCredentialsError
    └── InternalError                 → 500 Internal Server Error
        ├── DatabaseError
        └── SessionError

Recovery policy:
    ValidationError and DomainConflictError are normally caught by the flows
    and rendered back into the form at 422. InternalError subclasses always
    surface as opaque 500s; their context is logged, never returned.
"""

from typing import Any, Dict, Optional


class SnippetboxError(Exception):
    """
    Base exception for all Snippetbox application errors.

    Attributes:
        message:  Description safe to log; only shown to clients for 4xx
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


# ── 400 ───────────────────────────────────────────────────────────────────

class ClientInputError(SnippetboxError):
    """The request itself is malformed; the client must change it."""

    status_code = 400


class DecodeError(ClientInputError):
    """
    Raised when a POST body cannot be mapped onto a form variant.

    When:  Unparseable body, a declared field is absent, or a value fails
           type conversion (e.g. "abc" into an integer field).
    """

    def __init__(
        self,
        message: str = "Form submission could not be decoded",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


# ── 404 ───────────────────────────────────────────────────────────────────

class NotFoundError(SnippetboxError):
    """Raised when a requested resource does not exist."""

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class NoRecordError(NotFoundError):
    """
    Raised by the stores when no matching row exists.

    Expired snippets are reported the same way as deleted ones.
    """

    def __init__(self, resource: str = "snippet", resource_id: Optional[int] = None):
        super().__init__(
            resource=resource,
            resource_id=str(resource_id) if resource_id is not None else None,
        )


# ── 422 ───────────────────────────────────────────────────────────────────

class ValidationError(SnippetboxError):
    """
    Raised when a decoded form breaks one of its field rules.

    The flows usually render the annotated form instead of raising this.
    """

    status_code = 422

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DomainConflictError(SnippetboxError):
    """A domain call was refused because of something the user can fix."""

    status_code = 422


class DuplicateEmailError(DomainConflictError):
    """Raised by UserStore.insert when the email address is already on file."""

    def __init__(self, email: Optional[str] = None):
        super().__init__(
            message="Address is already in use",
            context={"email": email} if email else None,
        )


class InvalidCredentialsError(DomainConflictError):
    """
    Raised by UserStore.authenticate for an unknown email OR a wrong password.

    Both cases share this one exception so callers cannot tell them apart.
    """

    def __init__(self):
        super().__init__(message="Email or Password is incorrect")


# ── 500 ───────────────────────────────────────────────────────────────────

class InternalError(SnippetboxError):
    """Server-side failure. Clients only ever see a generic message."""

    status_code = 500


class DatabaseError(InternalError):
    """Raised when a database operation fails unexpectedly."""

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class SessionError(InternalError):
    """
    Raised when the session cookie cannot be decoded or encoded.

    Decoding: tampered signature, expired signature, or malformed payload.
    Encoding: the session holds values that cannot be serialized.
    """

    def __init__(
        self,
        message: str = "Session cookie could not be processed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
