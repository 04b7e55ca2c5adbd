"""
Snippetbox — FastAPI Application Factory
=========================================

What:  Creates and configures the FastAPI application instance.
How:   `create_app()` assembles middleware, exception handlers, routers,
       static assets and the Application container. Passing a prebuilt
       Application (tests) skips engine construction entirely.
Who:   uvicorn (`uvicorn snippetbox.main:app`) and the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │   Req ID     │→│ Logging  │→│ Secure Headers  │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │ / + /snippet │ │ /user/*  │ │ /ping, /health  │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Input→400 │ NotFound→404 │ 422 │ Internal→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging setup, production config check, startup log line
    Shutdown: dispose the database engine when this process owns one
"""

import logging
import sys
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from snippetbox import __version__
from snippetbox.config import settings
from snippetbox.database import build_engine, build_session_factory
from snippetbox.dependencies import STATIC_DIR, Application, build_templates
from snippetbox.exceptions import (
    ClientInputError,
    DomainConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from snippetbox.middleware.logging import RequestLoggingMiddleware
from snippetbox.middleware.request_id import RequestIDMiddleware, request_id_var
from snippetbox.middleware.secure_headers import SecureHeadersMiddleware
from snippetbox.routes import health, snippets, users
from snippetbox.services.session_manager import SessionManager
from snippetbox.services.snippet_store import SnippetStore
from snippetbox.services.user_store import UserStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-query / per-request chatter from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("Snippetbox %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: local development runs on the default key
        logger.error("Configuration error: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Snippetbox shutting down...")
    application: Application = app.state.application
    if application.engine is not None and app.state.owns_engine:
        await application.engine.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _status_text(status_code: int) -> PlainTextResponse:
    return PlainTextResponse(HTTPStatus(status_code).phrase, status_code=status_code)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the exception hierarchy onto plain-text HTTP responses.

    Handler hierarchy:
        ClientInputError        → 400 Bad Request
        NotFoundError           → 404 Not Found
        ValidationError         → 422 (only when a flow did not recover it)
        DomainConflictError     → 422 (only when a flow did not recover it)
        InternalError           → 500, context logged server-side
        StarletteHTTPException  → its own status (unknown routes, 405)
        Exception (fallback)    → 500, stack trace logged server-side

    Clients only ever receive the status phrase; messages and context stay
    in the logs.
    """

    @app.exception_handler(ClientInputError)
    async def handle_client_input_error(request: Request, exc: ClientInputError):
        rid = request_id_var.get("")
        logger.info("[%s] Bad request on %s %s: %s", rid, request.method, request.url.path, exc.message)
        return _status_text(400)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _status_text(404)

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Unrecovered validation error: %s", rid, exc.message)
        return _status_text(422)

    @app.exception_handler(DomainConflictError)
    async def handle_domain_conflict(request: Request, exc: DomainConflictError):
        rid = request_id_var.get("")
        logger.warning("[%s] Unrecovered domain conflict: %s", rid, exc.message)
        return _status_text(422)

    @app.exception_handler(InternalError)
    async def handle_internal_error(request: Request, exc: InternalError):
        rid = request_id_var.get("")
        logger.error(
            "[%s] %s on %s %s: %s | Context: %s",
            rid,
            type(exc).__name__,
            request.method,
            request.url.path,
            exc.message,
            exc.context,
        )
        return _status_text(500)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return PlainTextResponse(
            HTTPStatus(exc.status_code).phrase,
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error(
            "[%s] Unexpected error on %s %s: %s",
            rid,
            request.method,
            request.url.path,
            str(exc),
            exc_info=exc,
        )
        return _status_text(500)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def build_application() -> Application:
    """Wire the production container from settings."""
    engine = build_engine(settings)
    session_factory = build_session_factory(engine)
    return Application(
        snippets=SnippetStore(session_factory),
        users=UserStore(session_factory),
        sessions=SessionManager(
            secret_key=settings.session_secret_key,
            cookie_name=settings.session_cookie_name,
            max_age=settings.session_max_age,
            secure=settings.session_cookie_secure,
        ),
        templates=build_templates(),
        engine=engine,
    )


def create_app(application: Optional[Application] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        application: Prebuilt dependency container. When omitted, one is
                     built from settings and its engine is disposed on
                     shutdown.
    """
    app = FastAPI(
        title="Snippetbox",
        description="A small multi-user board for sharing short text snippets.",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    app.state.owns_engine = application is None
    app.state.application = application or build_application()

    # Middleware executes in REVERSE order of addition (last added = outermost)
    app.add_middleware(SecureHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(snippets.router)
    app.include_router(users.router)
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    return app


app = create_app()
