"""
Per-request access logging.

A short request id is bound into the structlog context for the whole
request, so events logged by use cases (a compliance run triggered over
HTTP, a filing completion) can be tied back to the call that caused them.
"""

import time
import uuid
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from entityhub.config import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        route = f"{request.method} {request.url.path}"
        started = time.perf_counter()

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            logger.debug("http_request_received", route=route, query=str(request.query_params) or None)
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    "http_request_crashed",
                    route=route,
                    error=str(e),
                    elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
                )
                raise

            elapsed_ms = round((time.perf_counter() - started) * 1000, 1)
            log = logger.warning if response.status_code >= 500 else logger.info
            log("http_request", route=route, status=response.status_code, elapsed_ms=elapsed_ms)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
