"""In-memory collection store and relation lookup.

Used by unit tests and local experiments. Both record their calls so tests
can assert round-trip counts (empty-filter short-circuit, single batched
annotation).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from operator import attrgetter
from typing import Any

from clipstream.core.pagination.paginator import CollectionFilter, ItemId


class InMemoryCollectionStore[T]:
    """Collection store over a Python list of items exposing ``id`` and ``created_at``."""

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: list[T] = list(items)
        self.query_count = 0
        self.count_calls = 0

    def add(self, item: T) -> None:
        self._items.append(item)

    def remove(self, item_id: ItemId) -> None:
        self._items = [item for item in self._items if item.id != item_id]  # type: ignore[attr-defined]

    def _ordered(self, filter: CollectionFilter) -> list[T]:  # noqa: A002
        matching = [item for item in self._items if filter.matches(item)]
        return sorted(matching, key=attrgetter("created_at", "id"), reverse=True)

    async def query(
        self,
        filter: CollectionFilter,  # noqa: A002
        after_id: ItemId | None,
        limit: int,
    ) -> Sequence[T]:
        self.query_count += 1
        rows = self._ordered(filter)
        if after_id is not None:
            rows = [item for item in rows if item.id < after_id]  # type: ignore[attr-defined]
        return rows[:limit]

    async def count_matching(self, filter: CollectionFilter) -> int:  # noqa: A002
        self.count_calls += 1
        if filter.is_empty:
            return 0
        return len(self._ordered(filter))


class InMemoryRelationLookup:
    """Relation lookup over a set of ``(subject_id, target_id)`` pairs."""

    def __init__(self, pairs: Iterable[tuple[ItemId, ItemId]] = ()) -> None:
        self._pairs: set[tuple[ItemId, ItemId]] = set(pairs)
        self.calls: list[tuple[ItemId, frozenset[ItemId]]] = []

    def relate(self, subject_id: ItemId, target_id: ItemId) -> None:
        self._pairs.add((subject_id, target_id))

    async def find_relations(
        self,
        subject_id: ItemId,
        target_ids: frozenset[ItemId],
    ) -> set[ItemId]:
        self.calls.append((subject_id, frozenset(target_ids)))
        return {target for subject, target in self._pairs if subject == subject_id and target in target_ids}


def describe(items: Sequence[Any]) -> list[ItemId]:
    """Ids of a page, in order; handy in assertions and debug logs."""
    return [item.id for item in items]


__all__ = ["InMemoryCollectionStore", "InMemoryRelationLookup", "describe"]
