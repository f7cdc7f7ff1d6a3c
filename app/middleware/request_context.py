"""Request ID + access log for every HTTP request.

A token endpoint sees many concurrent exchanges.  When a PKCE rejection is
logged, the request ID ties it to the access line of the same request.

The ID lives in a ContextVar, not a thread-local: async requests share a
thread, each task has its own context.  The handler filter installed by
setup_logging() copies it onto every record, so modules never pass it around.
"""

from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.core.logging import request_id_var

logger = logging.getLogger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Reuse X-Request-ID if the caller sent one, else mint a UUID.

    Echoes it back on the response and logs one summary line per request.
    The query string is not logged: a misbehaving client may put a code in it.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        req_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request_id_var.set(req_id)

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000, 1)

        logger.info(
            "%s %s → %d (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={
                "request_id": req_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        response.headers["X-Request-ID"] = req_id
        return response
