"""Unit tests for the cursor paginator."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import pytest

from clipstream.core.pagination import (
    CollectionFilter,
    CursorPaginator,
    InMemoryCollectionStore,
    InMemoryRelationLookup,
    PageRequest,
    PageResult,
    PaginationInfo,
    coerce_cursor,
    coerce_limit,
    coerce_page,
)
from clipstream.core.pagination.paginator import MAX_ITEM_ID
from clipstream.core.pagination.memory import describe

BASE_TIME = datetime(2026, 1, 1, tzinfo=UTC)


@dataclass
class Item:
    id: int
    created_at: datetime
    user_id: int = 1


def make_items(count: int, *, same_time: bool = False, owners: int = 1) -> list[Item]:
    return [
        Item(
            id=i,
            created_at=BASE_TIME if same_time else BASE_TIME + timedelta(seconds=i),
            user_id=(i % owners) + 1,
        )
        for i in range(1, count + 1)
    ]


def paginator_for(items: list[Item], default_limit: int = 10, max_limit: int | None = 100):
    store = InMemoryCollectionStore(items)
    return store, CursorPaginator(store, default_limit=default_limit, max_limit=max_limit)


# ──────────────────────────────────────────────────────────────
# Request coercion
# ──────────────────────────────────────────────────────────────


class TestCoercion:
    """Raw query values never fail; unusable ones fall back to defaults."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(None, 10), ("", 10), ("abc", 10), ("0", 10), ("-5", 10), ("7", 7), (" 7 ", 7), ("12abc", 12), (3, 3)],
    )
    def test_coerce_limit(self, raw, expected):
        assert coerce_limit(raw, 10) == expected

    def test_limit_clamped_to_max(self):
        assert coerce_limit("500", 10, 100) == 100

    def test_bool_is_not_a_number(self):
        assert coerce_limit(True, 10) == 10
        assert coerce_cursor(True) is None

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(None, None), ("", None), ("abc", None), ("0", None), ("-3", None), ("16", 16), (16, 16)],
    )
    def test_coerce_cursor(self, raw, expected):
        assert coerce_cursor(raw) == expected

    def test_cursor_beyond_id_range_restarts(self):
        assert coerce_cursor(str(MAX_ITEM_ID)) == MAX_ITEM_ID
        assert coerce_cursor(str(MAX_ITEM_ID + 1)) is None
        assert coerce_cursor("99999999999999999999") is None

    @pytest.mark.parametrize(("raw", "expected"), [(None, 1), ("x", 1), ("0", 1), ("3", 3)])
    def test_coerce_page(self, raw, expected):
        assert coerce_page(raw, 20) == expected

    def test_page_capped_so_offset_fits(self):
        page = coerce_page("9" * 30, 20)

        assert (page - 1) * 20 <= MAX_ITEM_ID
        assert page == MAX_ITEM_ID // 20 + 1

    def test_page_request_from_raw(self):
        request = PageRequest.from_raw("16", "x", default_limit=20, max_limit=50)
        assert request == PageRequest(cursor=16, limit=20)


# ──────────────────────────────────────────────────────────────
# Forward traversal
# ──────────────────────────────────────────────────────────────


class TestTraversal:
    """Walking a collection page by page."""

    @pytest.mark.asyncio
    async def test_twenty_five_items_in_pages_of_ten(self):
        """Pages are 25..16, 15..6, 5..1 and the last has no cursor."""
        _, paginator = paginator_for(make_items(25))

        first = await paginator.paginate(CollectionFilter.all(), None, "10")
        assert describe(first.items) == list(range(25, 15, -1))
        assert first.next_cursor == 16
        assert first.has_next_page is True

        second = await paginator.paginate(CollectionFilter.all(), str(first.next_cursor), "10")
        assert describe(second.items) == list(range(15, 5, -1))
        assert second.next_cursor == 6

        third = await paginator.paginate(CollectionFilter.all(), str(second.next_cursor), "10")
        assert describe(third.items) == [5, 4, 3, 2, 1]
        assert third.next_cursor is None
        assert third.has_next_page is False

    @pytest.mark.asyncio
    async def test_full_walk_has_no_duplicates_or_gaps(self):
        _, paginator = paginator_for(make_items(37))
        seen: list[int] = []
        cursor = None
        while True:
            page = await paginator.paginate(CollectionFilter.all(), cursor, 4)
            seen.extend(describe(page.items))
            if not page.has_next_page:
                break
            cursor = page.next_cursor

        assert seen == list(range(37, 0, -1))

    @pytest.mark.asyncio
    async def test_exact_multiple_of_limit_has_no_next_page(self):
        """When the collection size equals the limit there is no phantom page."""
        _, paginator = paginator_for(make_items(10))

        page = await paginator.paginate(CollectionFilter.all(), None, 10)

        assert len(page.items) == 10
        assert page.has_next_page is False
        assert page.next_cursor is None

    @pytest.mark.asyncio
    async def test_one_more_than_limit_has_next_page(self):
        _, paginator = paginator_for(make_items(11))

        page = await paginator.paginate(CollectionFilter.all(), None, 10)

        assert len(page.items) == 10
        assert page.has_next_page is True
        assert page.next_cursor == page.items[-1].id == 2

    @pytest.mark.asyncio
    async def test_equal_timestamps_break_ties_by_id(self):
        _, paginator = paginator_for(make_items(7, same_time=True))

        first = await paginator.paginate(CollectionFilter.all(), None, 3)
        second = await paginator.paginate(CollectionFilter.all(), first.next_cursor, 3)
        third = await paginator.paginate(CollectionFilter.all(), second.next_cursor, 3)

        assert describe(first.items) == [7, 6, 5]
        assert describe(second.items) == [4, 3, 2]
        assert describe(third.items) == [1]

    @pytest.mark.asyncio
    async def test_replaying_a_cursor_returns_the_same_page(self):
        _, paginator = paginator_for(make_items(25))

        a = await paginator.paginate(CollectionFilter.all(), "16", 5)
        b = await paginator.paginate(CollectionFilter.all(), "16", 5)

        assert describe(a.items) == describe(b.items) == [15, 14, 13, 12, 11]

    @pytest.mark.asyncio
    async def test_cursor_survives_deletion_of_its_item(self):
        store, paginator = paginator_for(make_items(25))
        store.remove(16)

        page = await paginator.paginate(CollectionFilter.all(), "16", 10)

        assert describe(page.items) == list(range(15, 5, -1))

    @pytest.mark.asyncio
    async def test_invalid_cursor_starts_from_the_top(self):
        _, paginator = paginator_for(make_items(5))

        page = await paginator.paginate(CollectionFilter.all(), "not-a-cursor", None)

        assert describe(page.items) == [5, 4, 3, 2, 1]

    @pytest.mark.asyncio
    async def test_default_and_max_limit(self):
        _, paginator = paginator_for(make_items(30), default_limit=4, max_limit=6)

        assert len((await paginator.paginate(CollectionFilter.all(), None, "junk")).items) == 4
        assert len((await paginator.paginate(CollectionFilter.all(), None, "50")).items) == 6


# ──────────────────────────────────────────────────────────────
# Filters
# ──────────────────────────────────────────────────────────────


class TestFilters:
    """Narrowing the collection before paging."""

    @pytest.mark.asyncio
    async def test_equals_filter(self):
        _, paginator = paginator_for(make_items(12, owners=3))

        page = await paginator.paginate(CollectionFilter.equals("user_id", 2), None, 10)

        assert describe(page.items) == [10, 7, 4, 1]
        assert all(item.user_id == 2 for item in page.items)

    @pytest.mark.asyncio
    async def test_membership_filter(self):
        _, paginator = paginator_for(make_items(12, owners=3))

        page = await paginator.paginate(CollectionFilter.where("user_id", [1, 3]), None, 20)

        assert 2 not in {item.user_id for item in page.items}
        assert len(page.items) == 8

    @pytest.mark.asyncio
    async def test_empty_filter_never_touches_the_store(self):
        """Following nobody yields an empty page without any query."""
        store, paginator = paginator_for(make_items(5))
        relations = InMemoryRelationLookup([(1, 5)])

        page = await paginator.paginate(
            CollectionFilter.where("user_id", []), None, 10, subject_id=1, relations=relations
        )

        assert page == PageResult.empty()
        assert store.query_count == 0
        assert relations.calls == []
        assert page.pagination() == {"nextCursor": None, "hasNextPage": False}

    def test_filter_flags(self):
        assert CollectionFilter.all().is_empty is False
        assert CollectionFilter.where("user_id", set()).is_empty is True
        assert CollectionFilter.equals("video_id", 3).values == frozenset({3})

    @pytest.mark.asyncio
    async def test_count_matching(self):
        store, _ = paginator_for(make_items(12, owners=3))

        assert await store.count_matching(CollectionFilter.equals("user_id", 2)) == 4
        assert await store.count_matching(CollectionFilter.where("user_id", [])) == 0
        assert store.count_calls == 2
        assert store.query_count == 0


# ──────────────────────────────────────────────────────────────
# Relation annotation
# ──────────────────────────────────────────────────────────────


class TestRelations:
    """``isLiked``-style annotation in a single batched lookup."""

    @pytest.mark.asyncio
    async def test_one_batched_lookup_for_the_page(self):
        store, paginator = paginator_for(make_items(25))
        relations = InMemoryRelationLookup([(9, 20), (9, 18), (9, 3)])

        page = await paginator.paginate(
            CollectionFilter.all(), None, 10, subject_id=9, relations=relations
        )

        assert store.query_count == 1
        assert relations.calls == [(9, frozenset(range(16, 26)))]
        assert page.related_ids == frozenset({20, 18})
        assert page.is_related(20) is True
        assert page.is_related(19) is False

    @pytest.mark.asyncio
    async def test_anonymous_caller_skips_lookup(self):
        _, paginator = paginator_for(make_items(5))
        relations = InMemoryRelationLookup([(9, 5)])

        page = await paginator.paginate(CollectionFilter.all(), None, 10, relations=relations)

        assert relations.calls == []
        assert page.related_ids == frozenset()

    @pytest.mark.asyncio
    async def test_empty_page_skips_lookup(self):
        _, paginator = paginator_for(make_items(3))
        relations = InMemoryRelationLookup()

        page = await paginator.paginate(
            CollectionFilter.all(), "1", 10, subject_id=9, relations=relations
        )

        assert page.items == []
        assert relations.calls == []


class TestWireFormat:
    def test_cursor_serialized_as_string(self):
        page = PageResult(items=[], next_cursor=16, has_next_page=True)

        info = PaginationInfo.from_page(page)

        assert info.model_dump(by_alias=True) == {"nextCursor": "16", "hasNextPage": True}
