"""Run async code from click commands."""

import asyncio
from collections.abc import Awaitable, Callable
from functools import wraps


def coro[T](f: Callable[..., Awaitable[T]]) -> Callable[..., T]:
    """Decorator that makes an async function synchronous for click.

    Usage:
        @storage.command()
        @coro
        async def cleanup():
            report = await cleanup_missing_videos(...)
    """

    @wraps(f)
    def wrapper(*args, **kwargs) -> T:
        return asyncio.run(f(*args, **kwargs))

    return wrapper
