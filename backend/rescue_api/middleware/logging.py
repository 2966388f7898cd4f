"""
Animal Rescue API — Request Logging Middleware
===============================================

What:  One structured access-log line for every HTTP request.
How:   Measures wall time around the downstream call and logs method, path,
       status, duration, request id and client IP on `rescue_api.access`.
When:  Inside RequestIDMiddleware, so the request id is already set.

Log levels:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Request bodies are never logged: animal records carry internal notes and
chip numbers.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from rescue_api.middleware.request_id import request_id_var

logger = logging.getLogger("rescue_api.access")

# Probed every few seconds by load balancers
SKIPPED_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        rid = request_id_var.get("")

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code

        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
