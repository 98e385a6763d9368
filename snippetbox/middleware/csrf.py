"""
Snippetbox — CSRF Protection Stage
===================================

What:  Rejects state-changing requests that do not carry the client's CSRF
       token.
How:   Double-submit scheme:
       1. A random 32-byte token lives in an HttpOnly cookie. It is generated
          and issued whenever the request arrives without a valid one.
       2. Handlers get a *masked* copy of the token (random pad + token XOR
          pad) on the request context to embed in forms. The mask changes on
          every request, so the token never appears verbatim in a page.
       3. For any method other than GET/HEAD/OPTIONS/TRACE the submitted
          token (header `X-CSRF-Token`, else form field `csrf_token`) is
          unmasked and compared with the cookie in constant time. A missing
          or mismatched token answers `400 Bad Request` without calling the
          handler.
"""

import base64
import logging
import secrets
from typing import Optional

from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import Request
from starlette.responses import Response

from snippetbox.context import get_context
from snippetbox.helpers import client_error
from snippetbox.middleware.chain import Handler
from snippetbox.sessions import vary_on_cookie

logger = logging.getLogger(__name__)

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "TRACE"})
TOKEN_LENGTH = 32
FORM_FIELD_NAME = "csrf_token"
HEADER_NAME = "X-CSRF-Token"
COOKIE_MAX_AGE = 365 * 24 * 60 * 60


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(value: str) -> Optional[bytes]:
    try:
        padded = value.encode("ascii") + b"=" * (-len(value) % 4)
        return base64.urlsafe_b64decode(padded)
    except ValueError:
        return None


def mask_token(token: bytes) -> str:
    """Encode `token` XOR a fresh one-time pad, prefixed by the pad."""
    pad = secrets.token_bytes(len(token))
    masked = bytes(a ^ b for a, b in zip(pad, token))
    return _b64encode(pad + masked)


def unmask_token(value: str) -> Optional[bytes]:
    """Inverse of mask_token(); None for anything that is not a masked token."""
    raw = _b64decode(value)
    if raw is None or len(raw) != 2 * TOKEN_LENGTH:
        return None
    pad, masked = raw[:TOKEN_LENGTH], raw[TOKEN_LENGTH:]
    return bytes(a ^ b for a, b in zip(pad, masked))


class CSRFProtect:
    """Dynamic-chain stage enforcing CSRF tokens on unsafe methods."""

    def __init__(self, cookie_name: str = "csrf_token", cookie_secure: bool = True):
        self.cookie_name = cookie_name
        self.cookie_secure = cookie_secure

    def _cookie_token(self, request: Request) -> Optional[bytes]:
        value = request.cookies.get(self.cookie_name)
        if not value:
            return None
        token = _b64decode(value)
        if token is None or len(token) != TOKEN_LENGTH:
            return None
        return token

    async def _submitted_token(self, request: Request) -> Optional[bytes]:
        value = request.headers.get(HEADER_NAME)
        if value is None:
            try:
                form = await request.form()
            except (MultiPartException, HTTPException):
                logger.debug("Could not parse request body while looking for a CSRF token")
                return None
            value = form.get(FORM_FIELD_NAME)
        if not isinstance(value, str):
            return None
        return unmask_token(value)

    def _set_cookie(self, response: Response, token: bytes) -> None:
        response.set_cookie(
            self.cookie_name,
            _b64encode(token),
            max_age=COOKIE_MAX_AGE,
            path="/",
            secure=self.cookie_secure,
            httponly=True,
            samesite="lax",
        )

    async def __call__(self, request: Request, call_next: Handler) -> Response:
        token = self._cookie_token(request)
        issued = token is None
        if issued:
            token = secrets.token_bytes(TOKEN_LENGTH)

        get_context(request).csrf_token = mask_token(token)

        if request.method in SAFE_METHODS:
            response = await call_next(request)
        else:
            submitted = await self._submitted_token(request)
            if submitted is not None and secrets.compare_digest(submitted, token):
                response = await call_next(request)
            else:
                logger.warning(
                    "CSRF check failed for %s %s", request.method, request.url.path
                )
                response = client_error(400)

        if issued:
            self._set_cookie(response, token)
        vary_on_cookie(response)
        return response
