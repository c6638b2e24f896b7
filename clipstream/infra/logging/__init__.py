"""Logging infrastructure.

Structured logging with:
- JSONL output with OpenTelemetry trace correlation
- Automatic context injection (request_id, user_id)
- QueueHandler + QueueListener for non-blocking I/O
- Lazy evaluation for expensive debug messages

Basic usage:
    import logging
    from clipstream.infra.logging import get_lazy_logger, set_log_context

    logger = logging.getLogger(__name__)
    set_log_context(request_id="abc-123")
    logger.info("Processing request")

    lazy_logger = get_lazy_logger(__name__)
    lazy_logger.debug(lambda: f"Page ids: {[v.id for v in page.items]}")
"""

from clipstream.infra.logging.config import configure_logging, setup_logging, shutdown
from clipstream.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from clipstream.infra.logging.formatters import JSONFormatter
from clipstream.infra.logging.lazy import LazyLoggerAdapter, LazyString, get_lazy_logger, lazy

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "LazyString",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "lazy",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
