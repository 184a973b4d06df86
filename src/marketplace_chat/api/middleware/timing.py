"""Access log with request latency; slow and failed requests log at WARNING."""
from __future__ import annotations

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger("marketplace_chat.access")

RESPONSE_TIME_HEADER = "X-Response-Time-Ms"
QUIET_PATHS = frozenset({"/healthz", "/readyz"})


class RequestTimingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, *, slow_request_ms: float = 1000.0) -> None:
        super().__init__(app)
        self._slow_request_ms = slow_request_ms

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "%s %s failed after %.1fms",
                request.method, request.url.path, _elapsed_ms(start),
            )
            raise

        elapsed_ms = _elapsed_ms(start)
        response.headers[RESPONSE_TIME_HEADER] = f"{elapsed_ms:.1f}"
        if request.url.path in QUIET_PATHS:
            return response

        slow = elapsed_ms >= self._slow_request_ms
        level = logging.WARNING if slow or response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "%s %s %s %.1fms%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            " (slow)" if slow else "",
        )
        return response


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000
