"""
Snippetbox — Recovery Middleware
=================================

What:  Last-resort safety net that turns any exception escaping the
       application into a plain 500 response.
How:   Outermost entry of the standard chain, so it sees failures from every
       inner middleware, every dynamic stage and every handler. The response
       carries `Connection: close`, telling the server to drop the connection
       instead of serving further requests on it, and the same security
       headers as every other response.

Expected failures (store errors, missing templates) never reach this layer:
handlers turn them into responses through `snippetbox.helpers`.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from snippetbox.helpers import server_error
from snippetbox.middleware.security_headers import SECURITY_HEADERS

logger = logging.getLogger(__name__)


class RecoverPanicMiddleware(BaseHTTPMiddleware):
    """Converts unhandled exceptions into `500 Internal Server Error`."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error("Recovered from unhandled error in %s %s", request.method, request.url.path)
            response = server_error(exc)
            # The failure unwound past the security headers stage
            response.headers.update(SECURITY_HEADERS)
            response.headers["Connection"] = "close"
            return response
