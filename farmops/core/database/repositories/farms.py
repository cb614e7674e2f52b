"""
Farm tenancy repositories.

Data access for farms, user accounts, farm memberships and per-user
preferences.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from farmops.core.models.domain import FarmRole

from ..entities import Customer, Employee, Farm, FarmUser, Order, Product, Task, User, UserPreference
from .base import AsyncBaseRepository


class FarmRepository(AsyncBaseRepository[Farm]):
    """Repository for farm data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Farm)

    async def get_by_slug(self, slug: str) -> Optional[Farm]:
        result = await self.session.execute(select(Farm).where(Farm.slug == slug))
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: str) -> List[Tuple[Farm, FarmRole]]:
        """Farms the user belongs to, ordered by name, with the user's role on each."""
        stmt = (
            select(Farm, FarmUser.role)
            .join(FarmUser, FarmUser.farm_id == Farm.id)
            .where(FarmUser.user_id == user_id)
            .order_by(Farm.name)
        )
        result = await self.session.execute(stmt)
        return [(farm, role) for farm, role in result.all()]

    async def record_counts(self, farm_id: str) -> dict[str, int]:
        """Number of records the farm owns per resource."""
        counts: dict[str, int] = {}
        for key, model in (
            ("employees", Employee),
            ("products", Product),
            ("tasks", Task),
            ("customers", Customer),
            ("orders", Order),
        ):
            stmt = select(func.count()).select_from(model).where(model.farm_id == farm_id)
            counts[key] = int((await self.session.execute(stmt)).scalar_one())
        return counts


class UserRepository(AsyncBaseRepository[User]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_external_id(self, external_id: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.external_id == external_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(func.lower(User.email) == email.lower()))
        return result.scalars().first()


class FarmUserRepository(AsyncBaseRepository[FarmUser]):
    """Repository for farm memberships."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, FarmUser)

    async def get_membership(self, user_id: str, farm_id: str) -> Optional[FarmUser]:
        stmt = select(FarmUser).where(FarmUser.user_id == user_id, FarmUser.farm_id == farm_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_owner(self, farm_id: str) -> Optional[User]:
        """The user holding the OWNER role on the farm, if any."""
        stmt = (
            select(User)
            .join(FarmUser, FarmUser.user_id == User.id)
            .where(FarmUser.farm_id == farm_id, FarmUser.role == FarmRole.OWNER)
            .order_by(FarmUser.created_at)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()


class UserPreferenceRepository(AsyncBaseRepository[UserPreference]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UserPreference)

    async def get_or_create(self, user_id: str, farm_id: str) -> UserPreference:
        """Preferences of a user on a farm, created with defaults on first access."""
        stmt = select(UserPreference).where(UserPreference.user_id == user_id, UserPreference.farm_id == farm_id)
        result = await self.session.execute(stmt)
        preference = result.scalar_one_or_none()
        if preference is None:
            preference = await self.create(UserPreference(user_id=user_id, farm_id=farm_id))
        return preference
