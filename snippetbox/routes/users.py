"""
Snippetbox — User Route Handlers (placeholders)
================================================

Signup, login and logout are routed through the full dynamic/protected
chains but are NOT implemented: each handler answers 200 with a fixed
acknowledgement line. Nothing here creates users or writes
"authenticatedUserID" into a session.
"""

from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response


class UserHandlers:
    """Placeholder account pages."""

    async def signup(self, request: Request) -> Response:
        return PlainTextResponse("Display a HTML form for signing up a new user...")

    async def signup_post(self, request: Request) -> Response:
        return PlainTextResponse("Create a new user...")

    async def login(self, request: Request) -> Response:
        return PlainTextResponse("Display a HTML form for logging in a user...")

    async def login_post(self, request: Request) -> Response:
        return PlainTextResponse("Authenticate and login the user...")

    async def logout_post(self, request: Request) -> Response:
        return PlainTextResponse("Logout the user...")
