"""
Request Context Middleware.

Correlates log records with the request that produced them and writes one
access line per request.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from calendar_server.core.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
RESPONSE_TIME_HEADER = "X-Response-Time"


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Request ID, timing and access logging for every request.

    - Reuses the caller's X-Request-ID or generates a UUID4
    - Binds request_id, method and path into structlog contextvars, so
      every record logged while serving the request carries them
      (worker threads included, see TracedThreadPoolExecutor)
    - Adds X-Request-ID and X-Response-Time to the response
    - Logs "Request completed" with status and duration

    Access in endpoints:
        request.state.request_id
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        start = time.perf_counter()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Request failed with exception",
                extra={"duration_ms": _elapsed_ms(start), "error_type": type(exc).__name__},
            )
            raise
        else:
            duration_ms = _elapsed_ms(start)
            response.headers[REQUEST_ID_HEADER] = request_id
            response.headers[RESPONSE_TIME_HEADER] = f"{duration_ms}ms"
            logger.info(
                "Request completed",
                extra={
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                    "client_host": request.client.host if request.client else None,
                },
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()
