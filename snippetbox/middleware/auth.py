"""
Snippetbox — Authentication Stages
===================================

What:  The two stages that deal with who the client is.

    Authenticate           (dynamic chain, last stage)
        Reads "authenticatedUserID" from the session. A non-zero id whose
        user still exists marks the request context `is_authenticated`.
        No id, or an id whose user is gone, leaves the flag False.

    RequireAuthentication  (protected chain only, appended after the above)
        Redirects unauthenticated requests to the login page with a
        303 See Other and never calls the handler. Authenticated responses
        get `Cache-Control: no-store` so protected pages are not cached.
"""

import logging

from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from snippetbox.context import get_context
from snippetbox.exceptions import DatabaseError
from snippetbox.helpers import server_error
from snippetbox.middleware.chain import Handler
from snippetbox.services.user_service import UserService
from snippetbox.sessions import AUTHENTICATED_USER_ID_KEY

logger = logging.getLogger(__name__)

LOGIN_PATH = "/user/login"


class Authenticate:
    """Dynamic-chain stage that resolves the session's user."""

    def __init__(self, users: UserService):
        self.users = users

    async def __call__(self, request: Request, call_next: Handler) -> Response:
        context = get_context(request)
        user_id = (
            context.session.get_int(AUTHENTICATED_USER_ID_KEY)
            if context.session is not None
            else 0
        )
        if user_id == 0:
            return await call_next(request)

        try:
            exists = await self.users.exists(user_id)
        except DatabaseError as exc:
            return server_error(exc)

        if exists:
            context.is_authenticated = True
        else:
            logger.info("Session refers to missing user %d", user_id)

        return await call_next(request)


class RequireAuthentication:
    """Protected-chain stage that gates handlers behind authentication."""

    def __init__(self, login_path: str = LOGIN_PATH):
        self.login_path = login_path

    async def __call__(self, request: Request, call_next: Handler) -> Response:
        if not get_context(request).is_authenticated:
            return RedirectResponse(self.login_path, status_code=303)

        response = await call_next(request)
        response.headers.append("Cache-Control", "no-store")
        return response
