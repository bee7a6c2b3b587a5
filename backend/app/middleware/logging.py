"""
Clientes API — Access Log Middleware
======================================

What:  One log line per HTTP request on the "clientes.access" logger.
How:   Times the request, then logs method, path, query string, status,
       response size and duration. The level follows the status class.
When:  Runs inside RequestIDMiddleware so the request ID is available.

Request bodies and uploaded files are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("clientes.access")


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log for the API; health probes are not logged."""

    SKIPPED_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.SKIPPED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"

        try:
            response = await call_next(request)
        except Exception:
            self._log(request, target, 500, "-", started)
            raise

        self._log(request, target, response.status_code, response.headers.get("content-length", "-"), started)
        return response

    @staticmethod
    def _log(request: Request, target: str, status: int, size: str, started: float) -> None:
        elapsed_ms = (time.perf_counter() - started) * 1000
        rid = request_id_var.get("")
        client = request.client.host if request.client else "-"
        logger.log(
            level_for_status(status),
            "[%s] %s %s -> %d (%s bytes) in %.1fms from %s",
            rid,
            request.method,
            target,
            status,
            size,
            elapsed_ms,
            client,
            extra={"request_id": rid, "status": status, "duration_ms": round(elapsed_ms, 2)},
        )
