"""
Postpad — Request Logging Middleware
======================================

What:  One access-log line per HTTP request.
How:   Times the rest of the stack and logs method, path, status, duration,
       request ID and client IP. Redirects also log their Location, since
       most successful form posts and every rejected session end in a 302.

What we log vs what we DON'T log:
    ✅ method, path, status, duration, IP, request ID, redirect target
    ❌ form bodies (passwords), cookies (session tokens)
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from postpad.middleware.request_id import request_id_var

logger = logging.getLogger("postpad.access")

# Static assets are not logged
SKIP_PREFIXES = ("/static/",)


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log for every non-static request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path.startswith(SKIP_PREFIXES):
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        peer = request.client.host if request.client else "-"
        location = response.headers.get("location")
        suffix = f" -> {location}" if location else ""

        logger.log(
            level_for_status(response.status_code),
            "[%s] %s %s %d%s (%.1fms) %s",
            request_id_var.get(""),
            request.method,
            request.url.path,
            response.status_code,
            suffix,
            elapsed_ms,
            peer,
        )
        return response
