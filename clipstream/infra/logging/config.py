"""Logging configuration setup.

Uses ``logging.config.dictConfig`` for logger levels, and a
QueueHandler + QueueListener pair so request handlers never block on
console or file I/O. All handlers hang off the listener; application
loggers simply propagate to the root.
"""

from __future__ import annotations

import atexit
import logging
import logging.config
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import Queue
from typing import TYPE_CHECKING, Any

from clipstream.infra.logging.context import ContextInjectingFilter
from clipstream.infra.logging.formatters import JSONFormatter

if TYPE_CHECKING:
    from clipstream.core.settings.logs import LoggingSettings

logger = logging.getLogger(__name__)

_log_queue: Queue[logging.LogRecord] | None = None
_listener: QueueListener | None = None
_LOGGING_INITIALIZED = False

_TEXT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def shutdown() -> None:
    """Stop the queue listener, flushing pending records."""
    global _log_queue, _listener

    if _listener is not None:
        _listener.stop()
        _listener = None
    _log_queue = None


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Configure logging once across entrypoints (API, CLI).

    Args:
        log_settings: Optional settings instance. Loaded from the environment
            when omitted.
        force: Reconfigure even if logging was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    if log_settings is None:
        from clipstream.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    configure_logging(**{**log_settings.to_logging_kwargs(), **configure_kwargs})
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    file_path: str | Path | None = None,
    json_logs: bool = True,
    console_enabled: bool = True,
    include_context: bool = True,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    service_name: str = "clipstream",
    include_uvicorn: bool = True,
    capture_warnings: bool = True,
) -> None:
    """Configure the root logger with dictConfig and a queue listener.

    Args:
        log_level: Root logger level.
        file_path: Rotating log file path. None disables file logging.
        json_logs: Emit JSON lines instead of human-readable text.
        console_enabled: Log to stderr.
        include_context: Attach ContextInjectingFilter to the queue handler.
        file_max_bytes: Maximum file size before rotation.
        file_backup_count: Number of rotated files to keep.
        service_name: Static ``service`` field added to JSON records.
        include_uvicorn: Let uvicorn access logs through at the root level.
        capture_warnings: Route ``warnings`` module output into logging.

    Example:
        ```python
        configure_logging(log_level="DEBUG", json_logs=False, file_path=None)
        ```
    """
    global _log_queue, _listener

    shutdown()
    logging.captureWarnings(capture_warnings)

    path = Path(file_path) if file_path else None
    if path:
        path.parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "root": {
                "level": log_level.upper(),
                "handlers": [],
            },
            "loggers": {
                "uvicorn.access": {
                    "level": log_level.upper() if include_uvicorn else "WARNING",
                },
            },
        }
    )

    formatter: logging.Formatter
    if json_logs:
        formatter = JSONFormatter(static={"service": service_name})
    else:
        formatter = logging.Formatter(fmt=_TEXT_FORMAT, datefmt=_DATE_FORMAT)

    handlers: list[logging.Handler] = []
    if console_enabled:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    if path:
        file_handler = RotatingFileHandler(
            path,
            maxBytes=file_max_bytes,
            backupCount=file_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    _log_queue = Queue()
    if handlers:
        _listener = QueueListener(_log_queue, *handlers, respect_handler_level=True)
        _listener.start()
        atexit.register(shutdown)

    queue_handler = QueueHandler(_log_queue)
    # Handler filters also see records propagated from child loggers
    if include_context:
        queue_handler.addFilter(ContextInjectingFilter())
    logging.getLogger().addHandler(queue_handler)

    logger.debug(
        "Logging configured",
        extra={"level": log_level, "json": json_logs, "file": str(path) if path else None},
    )


__all__ = ["configure_logging", "setup_logging", "shutdown"]
