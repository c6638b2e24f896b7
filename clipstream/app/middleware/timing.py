"""Timing middleware for request performance monitoring."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware

if TYPE_CHECKING:
    from starlette.middleware.base import RequestResponseEndpoint
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class TimingMiddleware(BaseHTTPMiddleware):
    """Add ``X-Process-Time`` to responses and log slow requests.

    Args:
        slow_threshold: Seconds above which a request is logged at WARNING
    """

    def __init__(self, app: ASGIApp, slow_threshold: float = 1.0) -> None:
        super().__init__(app)
        self.slow_threshold = slow_threshold

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start_time
        response.headers["X-Process-Time"] = f"{process_time:.6f}"

        if process_time > self.slow_threshold:
            logger.warning(
                "Slow request",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "status_code": response.status_code,
                    "duration_s": round(process_time, 3),
                },
            )
        return response


__all__ = ["TimingMiddleware"]
