"""
Happy Thoughts Backend — Request ID Middleware
===============================================

What:  Tags every request with a short correlation ID and echoes it back.
How:   Uses the client's X-Request-ID header when present, otherwise an
       8-character UUID prefix; stores it in a ContextVar for loggers and
       exception handlers, and in request.state for route handlers.

Unexpected exceptions are turned into the 500 JSON body here, inside the
middleware chain, so that response still gets the X-Request-ID header and
passes back out through CORS. Starlette's own catch-all handler runs outside
every user middleware.
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return str(uuid.uuid4())[:8]


def internal_error_response(rid: str) -> JSONResponse:
    """Generic 500 body; the stack trace only goes to the log."""
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred.",
            "request_id": rid,
        },
    )


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns the request ID and adds it to the response headers."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        request_id_var.set(rid)
        request.state.request_id = rid

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error("[%s] Unexpected error: %s", rid, str(e), exc_info=True)
            response = internal_error_response(rid)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
