"""
Customer relationship repositories.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from farmops.core.models.domain import CustomerType, OrderStatus

from ..entities import Customer, CustomerTag, CustomerTagAssignment, Order
from .base import AsyncBaseRepository, QueryBuilder


class CustomerRepository(AsyncBaseRepository[Customer]):
    """Repository for customer data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Customer)

    async def search(
        self,
        farm_id: str,
        search: Optional[str] = None,
        customer_type: Optional[CustomerType] = None,
        is_active: Optional[bool] = None,
        tag_id: Optional[str] = None,
    ) -> List[Customer]:
        """List customers of a farm ordered by name.

        Args:
            farm_id: Farm identifier
            search: Case-insensitive match on name, email or company name
            customer_type: Only customers of this type
            is_active: Only active (or inactive) customers
            tag_id: Only customers carrying this tag

        Returns:
            List of Customer instances
        """
        stmt = select(Customer).where(Customer.farm_id == farm_id)
        stmt = QueryBuilder.apply_filters(stmt, Customer, {"customer_type": customer_type, "is_active": is_active})
        stmt = QueryBuilder.apply_search(stmt, [Customer.name, Customer.email, Customer.company_name], search)
        if tag_id:
            stmt = stmt.join(CustomerTagAssignment, CustomerTagAssignment.customer_id == Customer.id).where(
                CustomerTagAssignment.tag_id == tag_id
            )
        result = await self.session.execute(stmt.order_by(Customer.name))
        return list(result.scalars().all())

    async def find_by_email(self, farm_id: str, email: str) -> Optional[Customer]:
        stmt = (
            select(Customer)
            .where(Customer.farm_id == farm_id, func.lower(Customer.email) == email.strip().lower())
            .order_by(Customer.created_at)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def find_by_name(self, farm_id: str, name: str) -> Optional[Customer]:
        stmt = select(Customer).where(Customer.farm_id == farm_id, Customer.name == name).order_by(Customer.created_at)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def tags_for(self, customer_ids: Sequence[str]) -> Dict[str, List[CustomerTag]]:
        """Tags assigned to each of the given customers."""
        tags: Dict[str, List[CustomerTag]] = {customer_id: [] for customer_id in customer_ids}
        if not customer_ids:
            return tags
        stmt = (
            select(CustomerTagAssignment.customer_id, CustomerTag)
            .join(CustomerTag, CustomerTag.id == CustomerTagAssignment.tag_id)
            .where(CustomerTagAssignment.customer_id.in_(customer_ids))
            .order_by(CustomerTag.name)
        )
        for customer_id, tag in (await self.session.execute(stmt)).all():
            tags[customer_id].append(tag)
        return tags

    async def order_counts(self, customer_ids: Sequence[str]) -> Dict[str, int]:
        if not customer_ids:
            return {}
        stmt = (
            select(Order.customer_id, func.count())
            .where(Order.customer_id.in_(customer_ids))
            .group_by(Order.customer_id)
        )
        return {customer_id: int(count) for customer_id, count in (await self.session.execute(stmt)).all()}

    async def orders_for(
        self, customer_id: str, status: Optional[OrderStatus] = None, limit: Optional[int] = None
    ) -> List[Order]:
        """Orders of a customer, newest first."""
        stmt = select(Order).where(Order.customer_id == customer_id)
        if status is not None:
            stmt = stmt.where(Order.status == status)
        stmt = QueryBuilder.apply_pagination(stmt.order_by(Order.created_at.desc()), limit, None)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def set_tags(self, customer_id: str, tag_ids: Sequence[str]) -> None:
        """Replace the tag assignments of a customer (flushes, does not commit)."""
        await self.session.execute(
            delete(CustomerTagAssignment).where(CustomerTagAssignment.customer_id == customer_id)
        )
        for tag_id in dict.fromkeys(tag_ids):
            self.session.add(CustomerTagAssignment(customer_id=customer_id, tag_id=tag_id))
        await self.session.flush()


class CustomerTagRepository(AsyncBaseRepository[CustomerTag]):
    """Repository for customer tags."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CustomerTag)

    async def list_with_counts(self, farm_id: str) -> List[tuple[CustomerTag, int]]:
        stmt = (
            select(CustomerTag, func.count(CustomerTagAssignment.customer_id))
            .outerjoin(CustomerTagAssignment, CustomerTagAssignment.tag_id == CustomerTag.id)
            .where(CustomerTag.farm_id == farm_id)
            .group_by(CustomerTag.id)
            .order_by(CustomerTag.name)
        )
        return [(tag, int(count)) for tag, count in (await self.session.execute(stmt)).all()]

    async def count_in_farm(self, farm_id: str, tag_ids: Sequence[str]) -> int:
        if not tag_ids:
            return 0
        stmt = select(func.count()).select_from(CustomerTag).where(
            CustomerTag.farm_id == farm_id, CustomerTag.id.in_(set(tag_ids))
        )
        return int((await self.session.execute(stmt)).scalar_one())
