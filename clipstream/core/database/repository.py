"""Minimal generic repository for SQLAlchemy models.

Provides basic CRUD operations with explicit session passing. For complex
queries, use the session directly; this is a convenience, not a cage.

Example:
    class UserRepository(BaseRepository[User]):
        async def find_by_email(self, session: AsyncSession, email: str) -> User | None:
            return await self.get_by(session, User.email, email)

    user_repo = UserRepository(User)
    user = await user_repo.get(session, user_id)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import select

from clipstream.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute


class BaseRepository[T]:
    """Generic repository for CRUD operations.

    Provides:
        - get(session, id) -> T | None
        - get_by(session, attr, value) -> T | None
        - exists(session, id) -> bool
        - create(session, instance) -> T
        - update(session, instance) -> T
        - delete(session, instance) -> None
    """

    __slots__ = ("_lazy", "_logger", "model")

    def __init__(self, model: type[T]) -> None:
        self.model = model
        self._logger = logging.getLogger(f"repository.{model.__name__}")
        self._lazy = get_lazy_logger(f"repository.{model.__name__}")

    async def get(
        self,
        session: AsyncSession,
        id: Any,  # noqa: A002
        *,
        options: Iterable[Any] | None = None,
    ) -> T | None:
        """Get entity by primary key.

        Args:
            session: Database session
            id: Primary key value
            options: SQLAlchemy loader options (e.g. joinedload)

        Returns:
            Entity if found, None otherwise
        """
        if options:
            stmt = select(self.model).where(self.model.id == id).options(*options)  # type: ignore[attr-defined]
            instance = (await session.execute(stmt)).unique().scalar_one_or_none()
        else:
            instance = await session.get(self.model, id)

        self._lazy.debug(
            lambda: f"db.get: {self.model.__name__}({id}) -> {'found' if instance else 'not found'}"
        )
        return instance

    async def get_by(
        self,
        session: AsyncSession,
        attr: InstrumentedAttribute[Any],
        value: Any,
    ) -> T | None:
        """Get the entity whose ``attr`` equals ``value``.

        Example:
            user = await repo.get_by(session, User.email, "ada@example.com")
        """
        stmt = select(self.model).where(attr == value)
        instance = (await session.execute(stmt)).unique().scalar_one_or_none()

        self._lazy.debug(
            lambda: f"db.get_by: {self.model.__name__}.{attr.key}={value!r} -> {'found' if instance else 'not found'}"
        )
        return instance

    async def exists(self, session: AsyncSession, id: Any) -> bool:  # noqa: A002
        """Check whether a row with this primary key exists without loading it."""
        stmt = select(self.model.id).where(self.model.id == id)  # type: ignore[attr-defined]
        found = (await session.execute(stmt)).scalar_one_or_none() is not None
        self._lazy.debug(lambda: f"db.exists: {self.model.__name__}({id}) -> {found}")
        return found

    async def create(self, session: AsyncSession, instance: T) -> T:
        """Persist a new entity.

        Flushes to obtain generated values (id, timestamps) and refreshes the
        instance, including eagerly loaded relationships.
        """
        session.add(instance)
        await session.flush()
        await session.refresh(instance)

        entity_id = getattr(instance, "id", None)
        self._lazy.debug(lambda: f"db.create: {self.model.__name__}(id={entity_id})")
        return instance

    async def update(self, session: AsyncSession, instance: T) -> T:
        """Flush pending changes on a tracked entity and refresh it."""
        session.add(instance)
        await session.flush()
        await session.refresh(instance)

        entity_id = getattr(instance, "id", None)
        self._lazy.debug(lambda: f"db.update: {self.model.__name__}(id={entity_id})")
        return instance

    async def delete(self, session: AsyncSession, instance: T) -> None:
        """Delete an entity."""
        entity_id = getattr(instance, "id", None)
        await session.delete(instance)
        await session.flush()

        self._logger.info(
            "Entity deleted",
            extra={"entity": self.model.__name__, "id": str(entity_id), "operation": "db.delete"},
        )


__all__ = ["BaseRepository"]
