"""Repository for User: just-in-time creation keyed by the auth provider's id."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from models.user import User
from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User entities."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def ensure_user(
        self,
        user_id: str,
        email: Optional[str] = None,
        name: Optional[str] = None,
    ) -> User:
        """
        Insert the user if absent; otherwise refresh email/name when provided.
        Single INSERT ... ON CONFLICT statement so concurrent first requests
        for the same user do not race.
        """
        insert = self.upsert_insert(User)
        stmt = insert.values(id=user_id, email=email, name=name)
        updates = {}
        if email is not None:
            updates["email"] = stmt.excluded.email
        if name is not None:
            updates["name"] = stmt.excluded.name
        if updates:
            stmt = stmt.on_conflict_do_update(index_elements=[User.id], set_=updates)
        else:
            stmt = stmt.on_conflict_do_nothing(index_elements=[User.id])
        await self.session.execute(stmt)

        user = await self.session.get(User, user_id, populate_existing=True)
        if user is None:  # pragma: no cover - row was just written
            raise RuntimeError(f"User {user_id!r} missing after upsert")
        return user
