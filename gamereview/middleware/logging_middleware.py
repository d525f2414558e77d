"""Request/response logging middleware."""
import time
import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from gamereview.utils import generate_id

logger = logging.getLogger("gamereview.requests")

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with its outcome and tag the response with a request id."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_id()[:8]
        method = request.method
        path = request.url.path
        client = request.client.host if request.client else "unknown"
        # Health probes are noisy
        level = logging.DEBUG if path.endswith("/health") else logging.INFO

        logger.log(level, "[%s] → %s %s [%s]", request_id, method, path, client)

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.exception(
                "[%s] ✗ %s %s FAILED after %.0fms: %s",
                request_id,
                method,
                path,
                duration_ms,
                str(e),
            )
            raise
        duration_ms = (time.perf_counter() - start) * 1000
        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        logger.log(
            level,
            "[%s] ← %s %s %d (%.0fms)",
            request_id,
            method,
            path,
            response.status_code,
            duration_ms,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
