"""
Payment repositories.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities import Payment, PaymentSettings
from .base import AsyncBaseRepository


class PaymentSettingsRepository(AsyncBaseRepository[PaymentSettings]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PaymentSettings)

    async def get_by_farm(self, farm_id: str) -> Optional[PaymentSettings]:
        result = await self.session.execute(select(PaymentSettings).where(PaymentSettings.farm_id == farm_id))
        return result.scalar_one_or_none()

    async def get_or_create(self, farm_id: str) -> PaymentSettings:
        settings = await self.get_by_farm(farm_id)
        if settings is None:
            settings = await self.create(PaymentSettings(farm_id=farm_id))
        return settings


class PaymentRepository(AsyncBaseRepository[Payment]):
    """Repository for payments recorded against orders."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Payment)

    async def list_for_order(self, order_id: str) -> List[Payment]:
        stmt = select(Payment).where(Payment.order_id == order_id).order_by(Payment.created_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_link_id(self, link_id: str) -> Optional[Payment]:
        result = await self.session.execute(select(Payment).where(Payment.payment_link_id == link_id))
        return result.scalar_one_or_none()
