"""CLI utilities for running async operations and formatting output."""

from clipstream.cli.utils.async_runner import coro
from clipstream.cli.utils.formatters import error, info, section, success, warning

__all__ = ["coro", "error", "info", "section", "success", "warning"]
