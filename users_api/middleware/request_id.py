"""
Users API — Request ID Middleware
===================================

What:  Assigns a correlation ID to each request and echoes it back in the
       `X-Request-ID` response header.
How:   Reuses the caller's X-Request-ID header when present, otherwise
       generates a short UUID; the value is kept in a ContextVar so loggers
       and exception handlers can read it without access to the request.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on the same event loop each see their own value
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    """Eight hex characters of a UUID4; enough to correlate log lines."""
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Stores the request ID in `request_id_var` and `request.state.request_id`."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
