"""
Snippetbox — Request-Scoped Context
====================================

What:  Typed state that the dynamic chain stages attach to a request for the
       handlers downstream of them.
How:   A `RequestContext` lives on `request.state.context` and is created on
       first access. Each stage fills in its own field:

           LoadAndSaveSession → session
           CSRFProtect        → csrf_token (masked, for forms)
           Authenticate       → is_authenticated

`is_authenticated` is the only thing the authentication gate consults.
"""

from dataclasses import dataclass
from typing import Optional

from starlette.requests import Request

from snippetbox.sessions import Session


@dataclass
class RequestContext:
    session: Optional[Session] = None
    csrf_token: str = ""
    is_authenticated: bool = False


def get_context(request: Request) -> RequestContext:
    """The context attached to `request`, creating an empty one if needed."""
    context = getattr(request.state, "context", None)
    if context is None:
        context = RequestContext()
        request.state.context = context
    return context
