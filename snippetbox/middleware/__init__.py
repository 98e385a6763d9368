"""
Snippetbox — Middleware Package
================================

Cross-cutting request handling, organised as two chains.

Standard chain (every request, including /static and /ping):
    Request → [Recovery] → [Request Logging] → [Security Headers] → Router

    Installed as ASGI middleware through `STANDARD_CHAIN`; the first entry is
    the outermost. Recovery comes first so it catches failures from every
    later stage.

Dynamic chain (application routes only):
    Router → [Load/Save Session] → [CSRF] → [Authenticate] → Handler

Protected chain (routes that need a logged-in user):
    Router → [Load/Save Session] → [CSRF] → [Authenticate]
           → [Require Authentication] → Handler

    Built from `Chain` objects (see chain.py) and wrapped around each route
    handler individually, so static files and /ping never touch the session
    store.
"""

from typing import List

from starlette.middleware import Middleware

from snippetbox.application import Application
from snippetbox.middleware.auth import Authenticate, RequireAuthentication
from snippetbox.middleware.chain import Chain
from snippetbox.middleware.csrf import CSRFProtect
from snippetbox.middleware.logging import RequestLoggingMiddleware
from snippetbox.middleware.recovery import RecoverPanicMiddleware
from snippetbox.middleware.security_headers import SecureHeadersMiddleware
from snippetbox.middleware.session import LoadAndSaveSession

STANDARD_CHAIN: List[Middleware] = [
    Middleware(RecoverPanicMiddleware),
    Middleware(RequestLoggingMiddleware),
    Middleware(SecureHeadersMiddleware),
]


def dynamic_chain(application: Application) -> Chain:
    return Chain(
        LoadAndSaveSession(application.sessions),
        CSRFProtect(
            cookie_name=application.settings.csrf_cookie_name,
            cookie_secure=application.settings.cookie_secure,
        ),
        Authenticate(application.users),
    )


def protected_chain(application: Application) -> Chain:
    return dynamic_chain(application).append(RequireAuthentication())


__all__ = [
    "STANDARD_CHAIN",
    "Chain",
    "dynamic_chain",
    "protected_chain",
]
