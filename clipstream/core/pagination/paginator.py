"""Keyset (cursor) pagination over ordered, append-mostly collections.

Every cursor-paginated listing (global videos, a user's videos, a video's
comments, the following feed) goes through ``CursorPaginator``. The
collection is ordered by ``(created_at desc, id desc)`` and a cursor is the
integer id of the last item on the previous page.

Resuming compares ids only (``id < cursor``), so a cursor keeps working
after its row is deleted: ids are assigned in insertion order, which agrees
with ``created_at`` ordering.

Example:
    paginator = CursorPaginator(store, default_limit=10)
    page = await paginator.paginate(
        CollectionFilter.where("user_id", followed_ids),
        cursor=request.query_params.get("cursor"),
        limit=request.query_params.get("limit"),
        subject_id=current_user.id,
        relations=likes,
    )
    page.pagination()  # {"nextCursor": "16", "hasNextPage": True}
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from operator import attrgetter
from typing import Any, Protocol

from clipstream.infra.logging import get_lazy_logger

logger = logging.getLogger(__name__)
_lazy = get_lazy_logger(__name__)

type ItemId = int

# Largest value a BIGINT primary key (and a SQLite INTEGER) can hold
MAX_ITEM_ID = 2**63 - 1


# ──────────────────────────────────────────────────────────────
# Request coercion
# ──────────────────────────────────────────────────────────────


def _positive_int(raw: Any) -> int | None:
    """Parse ``raw`` as a positive integer, or return None.

    Accepts ints and strings with a leading integer part (``"10"``,
    ``" 7 "``, ``"12abc"``), mirroring lenient query-string parsing.
    Booleans and text without a leading integer are rejected.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        value = raw
    else:
        text = str(raw).strip()
        digits = ""
        for index, char in enumerate(text):
            if char.isdigit() or (index == 0 and char in "+-"):
                digits += char
            else:
                break
        try:
            value = int(digits)
        except ValueError:
            return None
    return value if value > 0 else None


def coerce_limit(raw: Any, default: int, max_limit: int | None = None) -> int:
    """Coerce a requested page size.

    Missing, non-numeric, zero and negative values fall back to ``default``.
    Values above ``max_limit`` are clamped.
    """
    limit = _positive_int(raw) or default
    if max_limit is not None:
        limit = min(limit, max_limit)
    return limit


def coerce_cursor(raw: Any) -> ItemId | None:
    """Coerce a cursor token; anything that is not a usable id means "start".

    Ids beyond the 64-bit id column cannot name a row, so they restart the
    listing instead of reaching the driver.
    """
    cursor = _positive_int(raw)
    if cursor is None or cursor > MAX_ITEM_ID:
        return None
    return cursor


def coerce_page(raw: Any, page_size: int) -> int:
    """Coerce a 1-based page number for offset listings.

    Invalid values mean page 1. The page is capped so the row offset
    ``(page - 1) * page_size`` stays within a 64-bit integer.
    """
    page = _positive_int(raw) or 1
    return min(page, MAX_ITEM_ID // page_size + 1)


# ──────────────────────────────────────────────────────────────
# Filter, request and result types
# ──────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class CollectionFilter:
    """Membership filter narrowing a collection.

    ``values is None`` means unfiltered. An empty ``values`` set means the
    filter matches nothing and short-circuits pagination.

    Attributes:
        field: Item attribute compared against ``values`` (e.g. ``"video_id"``)
        values: Accepted values, or None for no filtering
    """

    field: str | None = None
    values: frozenset[int] | None = None

    @classmethod
    def all(cls) -> CollectionFilter:
        """Unfiltered collection."""
        return cls()

    @classmethod
    def equals(cls, field: str, value: int) -> CollectionFilter:
        """Items whose ``field`` equals ``value``."""
        return cls(field=field, values=frozenset({value}))

    @classmethod
    def where(cls, field: str, values: Iterable[int]) -> CollectionFilter:
        """Items whose ``field`` is one of ``values``."""
        return cls(field=field, values=frozenset(values))

    @property
    def is_empty(self) -> bool:
        """Whether the filter can match nothing."""
        return self.values is not None and not self.values

    def matches(self, item: Any) -> bool:
        """In-memory evaluation of the filter against one item."""
        if self.field is None or self.values is None:
            return True
        return getattr(item, self.field) in self.values


@dataclass(frozen=True, slots=True)
class PageRequest:
    """Normalized page request."""

    cursor: ItemId | None
    limit: int

    @classmethod
    def from_raw(
        cls,
        cursor: Any,
        limit: Any,
        *,
        default_limit: int,
        max_limit: int | None = None,
    ) -> PageRequest:
        """Build a request from untrusted query values."""
        return cls(
            cursor=coerce_cursor(cursor),
            limit=coerce_limit(limit, default_limit, max_limit),
        )


@dataclass(frozen=True, slots=True)
class PageResult[T]:
    """One page of a forward traversal.

    Attributes:
        items: At most ``limit`` items in ``(created_at desc, id desc)`` order
        next_cursor: Id of the last item when more pages exist, else None
        has_next_page: Whether another page follows
        related_ids: Ids of items the subject is related to (liked, follows)
    """

    items: Sequence[T]
    next_cursor: ItemId | None
    has_next_page: bool
    related_ids: frozenset[ItemId] = field(default_factory=frozenset)

    @classmethod
    def empty(cls) -> PageResult[T]:
        return cls(items=(), next_cursor=None, has_next_page=False)

    def is_related(self, item_id: ItemId) -> bool:
        """Whether the subject holds the relation to ``item_id``."""
        return item_id in self.related_ids

    def pagination(self) -> dict[str, Any]:
        """Wire form of the pagination block; the cursor is serialized as a string."""
        return {
            "nextCursor": str(self.next_cursor) if self.next_cursor is not None else None,
            "hasNextPage": self.has_next_page,
        }


# ──────────────────────────────────────────────────────────────
# Collaborator protocols
# ──────────────────────────────────────────────────────────────


class CollectionStore[T](Protocol):
    """Ordered collection capable of keyset fetches."""

    async def query(
        self,
        filter: CollectionFilter,  # noqa: A002
        after_id: ItemId | None,
        limit: int,
    ) -> Sequence[T]:
        """Return up to ``limit`` matching items with ``id < after_id``.

        Items are ordered by ``(created_at desc, id desc)``.
        """
        ...

    async def count_matching(self, filter: CollectionFilter) -> int:  # noqa: A002
        """Count matching items (used by offset-paginated endpoints)."""
        ...


class RelationLookup(Protocol):
    """Batched relation check (likes, follows)."""

    async def find_relations(
        self,
        subject_id: ItemId,
        target_ids: frozenset[ItemId],
    ) -> set[ItemId]:
        """Return the subset of ``target_ids`` the subject is related to."""
        ...


# ──────────────────────────────────────────────────────────────
# Paginator
# ──────────────────────────────────────────────────────────────


class CursorPaginator[T]:
    """Forward cursor pagination with an optional batched annotation pass.

    A page costs at most two store round-trips: the ``limit + 1`` keyset
    query and one ``find_relations`` call for the ids on the page.
    """

    __slots__ = ("default_limit", "id_of", "max_limit", "store")

    def __init__(
        self,
        store: CollectionStore[T],
        *,
        default_limit: int,
        max_limit: int | None = None,
        id_of: Callable[[T], ItemId] = attrgetter("id"),
    ) -> None:
        """Initialize paginator.

        Args:
            store: Collection to page through
            default_limit: Page size used when the request's limit is unusable
            max_limit: Optional hard cap on page size
            id_of: Extracts the item id (the cursor value)
        """
        self.store = store
        self.default_limit = default_limit
        self.max_limit = max_limit
        self.id_of = id_of

    def request(self, cursor: Any, limit: Any) -> PageRequest:
        """Normalize raw cursor/limit values against this paginator's defaults."""
        return PageRequest.from_raw(
            cursor,
            limit,
            default_limit=self.default_limit,
            max_limit=self.max_limit,
        )

    async def paginate(
        self,
        filter: CollectionFilter,  # noqa: A002
        cursor: Any = None,
        limit: Any = None,
        *,
        subject_id: ItemId | None = None,
        relations: RelationLookup | None = None,
    ) -> PageResult[T]:
        """Fetch one page.

        Args:
            filter: Narrows the collection; an empty filter returns an empty
                page without touching the store
            cursor: Raw cursor (id of the last item seen), or None to start
            limit: Raw page size
            subject_id: Authenticated caller, enables the annotation pass
            relations: Relation lookup used for the annotation pass

        Returns:
            PageResult with items, next cursor and related ids
        """
        page_request = self.request(cursor, limit)

        if filter.is_empty:
            _lazy.debug(lambda: f"paginate: empty filter on {filter.field}, skipping store")
            return PageResult.empty()

        rows = list(await self.store.query(filter, page_request.cursor, page_request.limit + 1))
        has_next_page = len(rows) > page_request.limit
        items = rows[: page_request.limit]
        next_cursor = self.id_of(items[-1]) if has_next_page else None

        related: frozenset[ItemId] = frozenset()
        if subject_id is not None and relations is not None and items:
            page_ids = frozenset(self.id_of(item) for item in items)
            related = frozenset(await relations.find_relations(subject_id, page_ids))

        _lazy.debug(
            lambda: (
                f"paginate: cursor={page_request.cursor} limit={page_request.limit} "
                f"-> {len(items)} items, next={next_cursor}, related={len(related)}"
            )
        )
        return PageResult(
            items=items,
            next_cursor=next_cursor,
            has_next_page=has_next_page,
            related_ids=related,
        )


__all__ = [
    "CollectionFilter",
    "CollectionStore",
    "CursorPaginator",
    "ItemId",
    "PageRequest",
    "PageResult",
    "RelationLookup",
    "MAX_ITEM_ID",
    "coerce_cursor",
    "coerce_limit",
    "coerce_page",
]
