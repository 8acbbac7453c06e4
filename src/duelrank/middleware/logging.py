# src/duelrank/middleware/logging.py

"""Request/response logging middleware for DuelRank API."""

import logging
import time
import uuid
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("duelrank.api")

REQUEST_ID_HEADER = "X-Request-ID"

# Polled by monitoring; logged at DEBUG to keep the access log readable
QUIET_PATHS = frozenset({"/health"})


def _status_level(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests and responses.

    Reuses the caller's X-Request-ID when one is sent, otherwise generates a
    short one, and echoes it back so a failed match submission can be traced
    through the service logs. Responses are logged at a level matching their
    status class.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log details."""
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        path = request.url.path
        quiet = path in QUIET_PATHS
        start = time.perf_counter()

        context = {
            "request_id": request_id,
            "method": request.method,
            "path": path,
            "client_ip": request.client.host if request.client else "unknown",
        }
        logger.log(
            logging.DEBUG if quiet else logging.INFO,
            "[%s] %s %s",
            request_id,
            request.method,
            path,
            extra=context,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.error(
                "[%s] %s %s -> ERROR (%.2fms): %s",
                request_id,
                request.method,
                path,
                duration_ms,
                e,
                extra={**context, "duration_ms": round(duration_ms, 2)},
                exc_info=True,
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        level = _status_level(response.status_code)
        if quiet and level == logging.INFO:
            level = logging.DEBUG
        logger.log(
            level,
            "[%s] %s %s -> %d (%.2fms)",
            request_id,
            request.method,
            path,
            response.status_code,
            duration_ms,
            extra={
                **context,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response  # type: ignore[no-any-return]
