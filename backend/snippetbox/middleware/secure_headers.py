"""
Snippetbox — Secure Headers Middleware
=======================================

What:  Adds browser hardening headers to every response.

    Content-Security-Policy   only same-origin scripts/styles, Google Fonts
    Referrer-Policy           origin-when-cross-origin
    X-Content-Type-Options    nosniff
    X-Frame-Options           deny
    X-XSS-Protection          0 (legacy auditor off; CSP supersedes it)
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

SECURE_HEADERS = {
    "Content-Security-Policy": (
        "default-src 'self'; style-src 'self' fonts.googleapis.com; font-src fonts.gstatic.com"
    ),
    "Referrer-Policy": "origin-when-cross-origin",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "deny",
    "X-XSS-Protection": "0",
}


class SecureHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        for name, value in SECURE_HEADERS.items():
            response.headers.setdefault(name, value)
        return response
