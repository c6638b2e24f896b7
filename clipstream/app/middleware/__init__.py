"""Middleware configuration.

Starlette runs the last-added middleware first, so the stack below executes
as CORS -> RequestID -> Timing -> routes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi.middleware.cors import CORSMiddleware

from clipstream.app.middleware.request_id import RequestIDMiddleware
from clipstream.app.middleware.timing import TimingMiddleware

if TYPE_CHECKING:
    from fastapi import FastAPI

    from clipstream.core.settings import AppSettings, LoggingSettings


def configure_middleware(
    app: FastAPI,
    app_settings: AppSettings,
    log_settings: LoggingSettings,
) -> None:
    """Install the middleware stack on ``app``."""
    app.add_middleware(TimingMiddleware, slow_threshold=log_settings.slow_request_threshold)
    app.add_middleware(RequestIDMiddleware)

    origins = app_settings.cors_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentialed requests to a wildcard origin
        allow_credentials=app_settings.cors_allow_credentials and origins != ["*"],
        allow_methods=app_settings.cors_allow_methods,
        allow_headers=app_settings.cors_allow_headers,
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )


__all__ = ["RequestIDMiddleware", "TimingMiddleware", "configure_middleware"]
