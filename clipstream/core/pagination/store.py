"""SQLAlchemy implementations of the collection store and relation lookup."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from sqlalchemy import Select, func, select

from clipstream.core.pagination.paginator import CollectionFilter, ItemId
from clipstream.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute

_lazy = get_lazy_logger(__name__)


class SQLAlchemyCollectionStore[T]:
    """Keyset store over a mapped model with ``id`` and ``created_at`` columns.

    Args:
        session: Active async session
        model: Mapped class to page through
        options: Loader options applied to every query (e.g. ``joinedload``)

    Example:
        store = SQLAlchemyCollectionStore(session, Video, options=[joinedload(Video.user)])
        rows = await store.query(CollectionFilter.equals("user_id", 7), after_id=None, limit=11)
    """

    def __init__(
        self,
        session: AsyncSession,
        model: type[T],
        *,
        options: Iterable[Any] = (),
    ) -> None:
        self.session = session
        self.model = model
        self.options = tuple(options)

    def _apply_filter(self, stmt: Select[Any], filter: CollectionFilter) -> Select[Any]:  # noqa: A002
        if filter.field is None or filter.values is None:
            return stmt
        column = getattr(self.model, filter.field)
        if len(filter.values) == 1:
            (value,) = filter.values
            return stmt.where(column == value)
        return stmt.where(column.in_(sorted(filter.values)))

    async def query(
        self,
        filter: CollectionFilter,  # noqa: A002
        after_id: ItemId | None,
        limit: int,
    ) -> Sequence[T]:
        model: Any = self.model
        stmt = self._apply_filter(select(model), filter)
        if after_id is not None:
            stmt = stmt.where(model.id < after_id)
        stmt = stmt.order_by(model.created_at.desc(), model.id.desc()).limit(limit)
        if self.options:
            stmt = stmt.options(*self.options)

        rows = (await self.session.execute(stmt)).unique().scalars().all()
        _lazy.debug(
            lambda: f"keyset: {model.__name__} after={after_id} limit={limit} -> {len(rows)} rows"
        )
        return rows

    async def count_matching(self, filter: CollectionFilter) -> int:  # noqa: A002
        if filter.is_empty:
            return 0
        model: Any = self.model
        stmt = self._apply_filter(select(func.count(model.id)), filter)
        return (await self.session.execute(stmt)).scalar_one()

    async def fetch_offset(
        self,
        filter: CollectionFilter,  # noqa: A002
        *,
        limit: int,
        offset: int,
    ) -> Sequence[T]:
        """Offset page in the same order, for legacy page-number listings."""
        if filter.is_empty:
            return []
        model: Any = self.model
        stmt = (
            self._apply_filter(select(model), filter)
            .order_by(model.created_at.desc(), model.id.desc())
            .limit(limit)
            .offset(offset)
        )
        if self.options:
            stmt = stmt.options(*self.options)
        return (await self.session.execute(stmt)).unique().scalars().all()


class SQLAlchemyRelationLookup:
    """Relation lookup over a join table (likes, follows).

    Args:
        session: Active async session
        subject_column: Column holding the subject id (e.g. ``VideoLike.user_id``)
        target_column: Column holding the target id (e.g. ``VideoLike.video_id``)
    """

    def __init__(
        self,
        session: AsyncSession,
        subject_column: InstrumentedAttribute[int],
        target_column: InstrumentedAttribute[int],
    ) -> None:
        self.session = session
        self.subject_column = subject_column
        self.target_column = target_column

    async def find_relations(
        self,
        subject_id: ItemId,
        target_ids: frozenset[ItemId],
    ) -> set[ItemId]:
        if not target_ids:
            return set()
        stmt = select(self.target_column).where(
            self.subject_column == subject_id,
            self.target_column.in_(sorted(target_ids)),
        )
        found = set((await self.session.execute(stmt)).scalars().all())
        _lazy.debug(
            lambda: f"relations: {self.target_column} subject={subject_id} "
            f"checked={len(target_ids)} related={len(found)}"
        )
        return found


__all__ = ["SQLAlchemyCollectionStore", "SQLAlchemyRelationLookup"]
