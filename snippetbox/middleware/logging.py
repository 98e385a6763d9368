"""
Snippetbox — Request Logging Middleware
========================================

What:  One access-log line for every request, static assets and /ping
       included.
How:   Logged on arrival, before the request is handed on. The request and
       response pass through untouched.

Log Format:
    <client address> - HTTP/<version> <METHOD> <request URI>

    e.g. 127.0.0.1:52144 - HTTP/1.1 GET /snippet/view/3?ref=home

What we log vs what we DON'T log (privacy):
    ✅ Log: client address, protocol, method, path and query
    ❌ Don't log: request bodies, cookies, headers
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("snippetbox.access")


def request_uri(request: Request) -> str:
    """Path plus query string, as sent by the client."""
    uri = request.url.path
    if request.url.query:
        uri = f"{uri}?{request.url.query}"
    return uri


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs client address, protocol, method and URI of each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # request.client may be None in testing
        client = (
            f"{request.client.host}:{request.client.port}" if request.client else "unknown"
        )
        protocol = f"HTTP/{request.scope.get('http_version', '1.1')}"

        logger.info(
            "%s - %s %s %s",
            client,
            protocol,
            request.method,
            request_uri(request),
            extra={
                "client_ip": client,
                "protocol": protocol,
                "method": request.method,
                "path": request.url.path,
            },
        )

        return await call_next(request)
