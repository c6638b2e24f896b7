"""Cursor pagination shared by every listing endpoint."""

from clipstream.core.pagination.memory import InMemoryCollectionStore, InMemoryRelationLookup
from clipstream.core.pagination.paginator import (
    CollectionFilter,
    CollectionStore,
    CursorPaginator,
    ItemId,
    PageRequest,
    PageResult,
    RelationLookup,
    coerce_cursor,
    coerce_limit,
    coerce_page,
)
from clipstream.core.pagination.schemas import PaginationInfo
from clipstream.core.pagination.store import SQLAlchemyCollectionStore, SQLAlchemyRelationLookup

__all__ = [
    "CollectionFilter",
    "CollectionStore",
    "CursorPaginator",
    "InMemoryCollectionStore",
    "InMemoryRelationLookup",
    "ItemId",
    "PageRequest",
    "PageResult",
    "PaginationInfo",
    "RelationLookup",
    "SQLAlchemyCollectionStore",
    "SQLAlchemyRelationLookup",
    "coerce_cursor",
    "coerce_limit",
    "coerce_page",
]
