"""Wire schema for the pagination block of cursor-paginated responses."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from clipstream.core.pagination.paginator import PageResult


class PaginationInfo(BaseModel):
    """``{"nextCursor": "16", "hasNextPage": true}``."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    next_cursor: str | None = Field(default=None, alias="nextCursor")
    has_next_page: bool = Field(default=False, alias="hasNextPage")

    @classmethod
    def from_page(cls, page: PageResult) -> PaginationInfo:
        return cls.model_validate(page.pagination())


__all__ = ["PaginationInfo"]
