"""
Snippetbox — Middleware Chain Composition
==========================================

What:  An ordered, immutable list of request stages that can be wrapped
       around a route handler.
How:   A stage is any callable with the same shape as Starlette's
       `BaseHTTPMiddleware.dispatch`:

           async def stage(request: Request, call_next: Handler) -> Response

       `Chain.then(handler)` links the stages so the first one listed runs
       first (outermost) and the handler runs last. `Chain.append()` returns
       a new, longer chain; the original is left unchanged.

Example:
    dynamic = Chain(load_session, csrf, authenticate)
    protected = dynamic.append(require_authentication)

    router.add_route("/", dynamic.then(handlers.home), methods=["GET"])
"""

import functools
from typing import Awaitable, Callable, Tuple

from starlette.requests import Request
from starlette.responses import Response

Handler = Callable[[Request], Awaitable[Response]]
Stage = Callable[[Request, Handler], Awaitable[Response]]


def _link(stage: Stage, call_next: Handler) -> Handler:
    async def handler(request: Request) -> Response:
        return await stage(request, call_next)
    return handler


class Chain:
    """An ordered sequence of stages, outermost first."""

    def __init__(self, *stages: Stage):
        self.stages: Tuple[Stage, ...] = tuple(stages)

    def append(self, *stages: Stage) -> "Chain":
        return Chain(*self.stages, *stages)

    def then(self, endpoint: Handler) -> Handler:
        """
        Wrap `endpoint` in every stage of the chain.

        The returned handler keeps the endpoint's name, so route names stay
        meaningful.
        """
        handler = endpoint
        for stage in reversed(self.stages):
            handler = _link(stage, handler)

        @functools.wraps(endpoint)
        async def composed(request: Request) -> Response:
            return await handler(request)

        return composed

    def __repr__(self) -> str:
        names = ", ".join(getattr(s, "__name__", type(s).__name__) for s in self.stages)
        return f"Chain({names})"
