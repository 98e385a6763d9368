"""
Snippetbox — Session Load-and-Save Stage
=========================================

What:  First stage of the dynamic chain. Loads the client's session before
       anything downstream runs and commits it after the handler returns.
How:   The loaded `Session` is placed on the request context. Every response
       that comes back (including 4xx/5xx responses returned by handlers or
       later stages) is passed to `SessionManager.save()`, which persists any
       changes and re-issues the cookie.

Failure handling:
    A store error while loading or saving becomes a 500 response.
"""

import logging

from starlette.requests import Request
from starlette.responses import Response

from snippetbox.context import get_context
from snippetbox.exceptions import DatabaseError
from snippetbox.helpers import server_error
from snippetbox.middleware.chain import Handler
from snippetbox.sessions import SessionManager

logger = logging.getLogger(__name__)


class LoadAndSaveSession:
    """Dynamic-chain stage that binds a session to the request."""

    def __init__(self, manager: SessionManager):
        self.manager = manager

    async def __call__(self, request: Request, call_next: Handler) -> Response:
        try:
            session = await self.manager.load(request.cookies.get(self.manager.cookie_name))
        except DatabaseError as exc:
            return server_error(exc)

        get_context(request).session = session

        response = await call_next(request)

        try:
            await self.manager.save(session, response)
        except DatabaseError as exc:
            return server_error(exc)

        return response
