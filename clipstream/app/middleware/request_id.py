"""Request ID middleware.

Takes ``X-Request-ID`` from the request or generates a UUID, exposes it as
``request.state.request_id``, adds it to every log line of the request and
returns it in the response headers.
"""

from __future__ import annotations

from clipstream.app.middleware.base import HeaderContextMiddleware, generate_uuid


class RequestIDMiddleware(HeaderContextMiddleware):
    """Attach a per-request correlation id.

    Usage:
        app.add_middleware(RequestIDMiddleware)
    """

    header_name = "x-request-id"
    state_key = "request_id"
    log_context_key = "request_id"
    should_clear_context_on_finish = True

    def generate_value(self) -> str:
        return generate_uuid()


__all__ = ["RequestIDMiddleware"]
