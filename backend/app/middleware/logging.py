"""
Backend — Request Logging Middleware
======================================

What:  One log line per HTTP request with method, path, status and duration.
How:   Measures wall time around call_next; level follows the status class.
When:  Runs inside RequestIDMiddleware so the correlation ID is available.

What we log vs what we DON'T log (privacy):
    ✅ Log: method, path, status, duration, client IP, request ID
    ❌ Don't log: request bodies (passwords), query strings (recovery emails),
       Authorization headers, tokens
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings
from app.middleware.request_id import request_id_var

logger = logging.getLogger("app.access")

# Probed every few seconds by compose healthchecks; logging them is noise
QUIET_PATHS = {"/health", f"{settings.api_v1_str}/utils/health-check/"}


def level_for_status(status: int) -> int:
    """5xx → ERROR, 4xx → WARNING, everything else → INFO."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"
        logger.log(
            level_for_status(response.status_code),
            "[%s] %s %s -> %d (%.1fms, %s)",
            rid,
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            client_ip,
            extra={
                "request_id": rid,
                "status": response.status_code,
                "duration_ms": elapsed_ms,
            },
        )
        return response
