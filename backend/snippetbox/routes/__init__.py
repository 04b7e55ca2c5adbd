# Routes package init
"""
Snippetbox — HTTP Routes Package
=================================

What:  Route handlers that turn HTTP requests into flow calls.

Route Inventory:
    - snippets.py: GET  /                       (latest snippets)
                   GET  /snippet/view/{id}      (single snippet)
                   GET  /snippet/create         (create form)
                   POST /snippet/create         (create submission)
                   GET  /snippet/delete         (delete form)
                   POST /snippet/delete         (delete submission)
    - users.py:    GET  /user/signup, POST /user/signup
                   GET  /user/login,  POST /user/login
                   POST /user/logout
    - health.py:   GET  /ping, GET /health

Every handler follows the same shape:
    decode form (POST only) → load session → run flow → finish()
where finish() renders or redirects and writes the session cookie when the
session changed.
"""
