"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from opsledger.auth import Principal, Role
from opsledger.database import init_db
from opsledger.errors import AuthError


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency.

    Commits when the handler returns normally, rolls back when it raises.
    """
    _, factory = init_db()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_principal(
    x_user_id: Annotated[str | None, Header()] = None,
    x_user_role: Annotated[str | None, Header()] = None,
) -> Principal:
    """Extract the authenticated principal set by the upstream auth layer."""
    if not x_user_id or not x_user_role:
        raise AuthError("X-User-Id and X-User-Role headers are required")
    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise AuthError("Invalid X-User-Id format") from None
    try:
        role = Role(x_user_role.lower())
    except ValueError:
        raise AuthError("Invalid X-User-Role value") from None
    return Principal(user_id=user_id, role=role)


async def require_admin(
    principal: Annotated[Principal, Depends(get_principal)],
) -> Principal:
    """Principal dependency for admin-only routes (403 for workers)."""
    principal.require_admin()
    return principal


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
CurrentPrincipal = Annotated[Principal, Depends(get_principal)]
AdminPrincipal = Annotated[Principal, Depends(require_admin)]
