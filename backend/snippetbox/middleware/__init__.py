# Middleware package init
"""
Snippetbox — Middleware Package
================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [Secure Headers] → Route Handler

    - Request ID runs first so the access log line carries the id.
    - Logging sees the final status code, including error-handler output.
    - Secure Headers decorates every response, errors included.
"""
