"""
Employee repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from farmops.core.models.domain import EmployeePosition, EmployeeStatus

from ..entities import Employee
from .base import AsyncBaseRepository, QueryBuilder


class EmployeeRepository(AsyncBaseRepository[Employee]):
    """Repository for employee data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Employee)

    async def search(
        self,
        farm_id: str,
        search: Optional[str] = None,
        status: Optional[EmployeeStatus] = None,
        position: Optional[EmployeePosition] = None,
    ) -> List[Employee]:
        """List employees ordered by last name then first name.

        Args:
            farm_id: Farm identifier
            search: Case-insensitive match on first name, last name or email
            status: Employment status filter
            position: Position filter

        Returns:
            List of Employee instances
        """
        stmt = select(Employee).where(Employee.farm_id == farm_id)
        stmt = QueryBuilder.apply_filters(stmt, Employee, {"status": status, "position": position})
        stmt = QueryBuilder.apply_search(stmt, [Employee.first_name, Employee.last_name, Employee.email], search)
        result = await self.session.execute(stmt.order_by(Employee.last_name, Employee.first_name))
        return list(result.scalars().all())

    async def get_by_invite_token(self, token: str) -> Optional[Employee]:
        result = await self.session.execute(select(Employee).where(Employee.invite_token == token))
        return result.scalar_one_or_none()
