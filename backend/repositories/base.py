from __future__ import annotations

from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from models.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Base repository with common CRUD helpers.

    No commits are performed here - commit responsibility is left to the
    request-scoped session.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with an async session."""
        self.session = session

    async def add(self, entity: T) -> T:
        """Add an entity to the session (not committed)."""
        self.session.add(entity)
        return entity

    async def get_by_id(
        self, model: Type[T], id_value: str | int
    ) -> Optional[T]:
        """Get an entity by its primary key."""
        result = await self.session.get(model, id_value)
        return result

    async def delete(self, entity: T) -> None:
        """Delete an entity from the session (not committed)."""
        await self.session.delete(entity)

    def upsert_insert(self, model: Type[T]) -> Any:
        """Dialect-specific INSERT supporting ON CONFLICT (SQLite and PostgreSQL)."""
        dialect = self.session.get_bind().dialect.name
        if dialect == "sqlite":
            return sqlite.insert(model)
        if dialect == "postgresql":
            return postgresql.insert(model)
        raise NotImplementedError(f"Atomic upsert not supported for dialect {dialect!r}")
