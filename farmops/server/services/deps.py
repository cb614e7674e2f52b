"""
Request Dependencies.

Authentication and tenant context shared by the API routers: the current user
resolved from the bearer token, the caller's role on the farm named in the
path, and role gates built on the role hierarchy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from farmops.core.database import get_session
from farmops.core.database.entities import User
from farmops.core.database.repositories import FarmUserRepository
from farmops.core.errors import ForbiddenError, UnauthorizedError
from farmops.core.models.domain import FarmRole, has_role_at_least

from .auth import decode_token, resolve_user

bearer = HTTPBearer(scheme_name="SessionToken", bearerFormat="JWT", auto_error=False)

SessionDep = Annotated[AsyncSession, Depends(get_session)]


@dataclass
class FarmContext:
    """The caller and their role on the farm addressed by the request."""

    farm_id: str
    user: User
    role: Optional[FarmRole]


async def get_current_user(
    session: SessionDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> Optional[User]:
    """User behind the bearer token, or None for anonymous requests."""
    if credentials is None or not credentials.credentials:
        return None
    claims = decode_token(credentials.credentials.strip())
    if claims is None:
        return None
    return await resolve_user(session, claims)


async def require_auth(user: Optional[User] = Depends(get_current_user)) -> User:
    if user is None:
        raise UnauthorizedError("Authentication required")
    return user


CurrentUser = Annotated[User, Depends(require_auth)]


async def get_farm_context(farm_id: str, user: CurrentUser, session: SessionDep) -> FarmContext:
    membership = await FarmUserRepository(session).get_membership(user.id, farm_id)
    return FarmContext(farm_id=farm_id, user=user, role=membership.role if membership else None)


def require_role(min_role: FarmRole):
    """Build a dependency that admits callers holding ``min_role`` or higher on the farm."""

    async def dependency(context: FarmContext = Depends(get_farm_context)) -> FarmContext:
        if context.role is None:
            raise ForbiddenError("No farm access")
        if not has_role_at_least(context.role, min_role):
            raise ForbiddenError(f"Requires {min_role.value} role or higher")
        return context

    return dependency


AnyRole = Annotated[FarmContext, Depends(require_role(FarmRole.FARM_OPERATOR))]
SalesRole = Annotated[FarmContext, Depends(require_role(FarmRole.SALESPERSON))]
ManagerRole = Annotated[FarmContext, Depends(require_role(FarmRole.FARM_MANAGER))]
AdminRole = Annotated[FarmContext, Depends(require_role(FarmRole.ADMIN))]
OwnerRole = Annotated[FarmContext, Depends(require_role(FarmRole.OWNER))]
