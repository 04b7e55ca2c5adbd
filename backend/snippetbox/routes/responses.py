"""
Snippetbox — Response Finishing
================================

What:  Turns a flow Outcome into a response and persists the Session.
How:   The session cookie is written onto the response object BEFORE it is
       returned, so a redirect never leaves without the identity change or
       the flash drain that produced it. An encoding failure raises
       SessionError and the response is dropped in favour of a 500.
"""

from starlette.requests import Request
from starlette.responses import Response

from snippetbox.dependencies import Application
from snippetbox.rendering import Outcome, respond
from snippetbox.services.session_manager import Session


def finish(app: Application, request: Request, session: Session, outcome: Outcome) -> Response:
    response = respond(app.templates, request, outcome)
    if session.modified:
        app.sessions.save(session, response)
    return response
