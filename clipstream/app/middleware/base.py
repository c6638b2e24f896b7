"""Base class for header-driven context middleware.

Pure ASGI: reads a header (or generates a value), stores it in
``scope["state"]``, puts it in the log context and echoes it on the
response.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from starlette.datastructures import MutableHeaders

from clipstream.infra.logging import clear_log_context, set_log_context

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send


class HeaderContextMiddleware(ABC):
    """Propagate one header value through state, logs and the response.

    Subclasses define ``header_name`` (lowercase), ``state_key``,
    ``log_context_key`` and ``generate_value()``.
    """

    header_name: str
    state_key: str
    log_context_key: str

    should_clear_context_on_finish: bool = False

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    @abstractmethod
    def generate_value(self) -> str:
        """Value used when the request does not carry the header."""
        ...

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        value = self._extract_or_generate(scope)
        scope.setdefault("state", {})[self.state_key] = value
        set_log_context(**{self.log_context_key: value})

        async def send_with_header(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message).append(self.header_name, value)
            await send(message)

        try:
            await self.app(scope, receive, send_with_header)
        finally:
            if self.should_clear_context_on_finish:
                clear_log_context()

    def _extract_or_generate(self, scope: Scope) -> str:
        if existing := scope.get("state", {}).get(self.state_key):
            return existing
        for name, raw in scope.get("headers", []):
            if name == self.header_name.encode("latin-1") and raw:
                return raw.decode("latin-1")
        return self.generate_value()


def generate_uuid() -> str:
    return str(uuid.uuid4())


__all__ = ["HeaderContextMiddleware", "generate_uuid"]
