from dataclasses import dataclass
from typing import AsyncGenerator, Optional

from fastapi import Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from .database import DatabaseManager


@dataclass(frozen=True)
class Viewer:
    """Identity of the requester as forwarded by the upstream auth layer."""

    user_id: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)


ANONYMOUS = Viewer()


def get_database_manager(request: Request) -> DatabaseManager:
    """Return the DatabaseManager created for this application at startup."""
    manager = getattr(request.app.state, "db_manager", None)
    if manager is None:
        raise RuntimeError("DatabaseManager is not initialized.")
    return manager


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a request-scoped AsyncSession.

    The session commits when the handler returns and rolls back if it raises.
    """
    manager = get_database_manager(request)
    async with manager.session() as session:
        yield session


def get_viewer(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    x_user_email: Optional[str] = Header(None, alias="X-User-Email"),
    x_user_name: Optional[str] = Header(None, alias="X-User-Name"),
) -> Viewer:
    """Dependency: viewer identity from headers; anonymous when X-User-Id is absent."""
    user_id = (x_user_id or "").strip()
    if not user_id:
        return ANONYMOUS
    return Viewer(
        user_id=user_id,
        email=(x_user_email or "").strip() or None,
        name=(x_user_name or "").strip() or None,
    )
