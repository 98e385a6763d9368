"""
Snippetbox — Health Check Route
================================

What:  GET /ping, answering 200 "OK".
Who:   Load balancers, uptime probes and the test-suite.

Only the standard chain applies: no session is loaded, no CSRF cookie is
issued and no authentication check runs.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["Health"])


@router.get("/ping", response_class=PlainTextResponse, summary="Liveness probe")
async def ping() -> PlainTextResponse:
    return PlainTextResponse("OK")
