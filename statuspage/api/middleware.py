"""HTTP middleware for request correlation and structured logging.

Bind a request ID into the structlog context for the lifetime of each
request, so every log line emitted while serving it (including probe
results) can be correlated.
"""

import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from statuspage.core.logging_config import bind_contextvars, clear_contextvars, get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestCorrelationMiddleware(BaseHTTPMiddleware):
    """Manage request correlation IDs.

    Reuse the `X-Request-ID` supplied by an upstream proxy, or generate a
    UUID4, bind it to the logging context and echo it on the response.
    """

    async def dispatch(self, request: Request, call_next):
        # Context may persist across tasks; start every request clean.
        clear_contextvars()

        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        response: Response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.debug(
            "Request handled",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return response
