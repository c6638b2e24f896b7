"""Cursor pagination query parameters.

``cursor`` and ``limit`` arrive as raw strings: unusable values fall back to
defaults inside the paginator instead of failing validation.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Query


@dataclass(frozen=True, slots=True)
class CursorParams:
    """Raw cursor/limit pair forwarded to ``CursorPaginator.paginate``."""

    cursor: str | None = None
    limit: str | None = None


def get_cursor_params(
    cursor: Annotated[
        str | None, Query(description="Id of the last item from the previous page")
    ] = None,
    limit: Annotated[str | None, Query(description="Page size")] = None,
) -> CursorParams:
    return CursorParams(cursor=cursor, limit=limit)


CursorParamsDep = Annotated[CursorParams, Depends(get_cursor_params)]

__all__ = ["CursorParams", "CursorParamsDep", "get_cursor_params"]
