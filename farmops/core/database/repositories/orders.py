"""
Order, order item and task repositories.

Entities do not declare ORM relationships, so related rows are loaded with
explicit batched queries keyed by parent id.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from farmops.core.models.domain import OrderStatus, TaskStatus, TaskType

from ..entities import Order, OrderItem, Task
from .base import AsyncBaseRepository, QueryBuilder

OPEN_TASK_STATUSES = (TaskStatus.TODO, TaskStatus.IN_PROGRESS)


class OrderRepository(AsyncBaseRepository[Order]):
    """Repository for order data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Order)

    async def search(
        self, farm_id: str, status: Optional[OrderStatus] = None, customer: Optional[str] = None
    ) -> List[Order]:
        """Orders of a farm, newest first.

        Args:
            farm_id: Farm identifier
            status: Order status filter
            customer: Case-insensitive match on the customer name
        """
        stmt = select(Order).where(Order.farm_id == farm_id)
        stmt = QueryBuilder.apply_filters(stmt, Order, {"status": status})
        stmt = QueryBuilder.apply_search(stmt, [Order.customer_name], customer)
        result = await self.session.execute(stmt.order_by(Order.created_at.desc()))
        return list(result.scalars().all())

    async def count_for_farm(self, farm_id: str) -> int:
        return await self.count({"farm_id": farm_id})

    async def count_created_between(self, farm_id: str, start: datetime, end: datetime) -> int:
        stmt = (
            select(func.count())
            .select_from(Order)
            .where(Order.farm_id == farm_id, Order.created_at >= start, Order.created_at < end)
        )
        return int((await self.session.execute(stmt)).scalar_one())

    async def get_many(self, order_ids: Sequence[str]) -> Dict[str, Order]:
        if not order_ids:
            return {}
        result = await self.session.execute(select(Order).where(Order.id.in_(set(order_ids))))
        return {order.id: order for order in result.scalars().all()}


class OrderItemRepository(AsyncBaseRepository[OrderItem]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, OrderItem)

    async def items_for(self, order_ids: Sequence[str]) -> Dict[str, List[OrderItem]]:
        """Items of each of the given orders, in creation order."""
        items: Dict[str, List[OrderItem]] = {order_id: [] for order_id in order_ids}
        if not order_ids:
            return items
        stmt = select(OrderItem).where(OrderItem.order_id.in_(order_ids)).order_by(OrderItem.created_at)
        for item in (await self.session.execute(stmt)).scalars().all():
            items[item.order_id].append(item)
        return items

    async def get_many(self, item_ids: Sequence[str]) -> Dict[str, OrderItem]:
        if not item_ids:
            return {}
        result = await self.session.execute(select(OrderItem).where(OrderItem.id.in_(set(item_ids))))
        return {item.id: item for item in result.scalars().all()}

    async def get_in_order(self, order_id: str, item_id: str) -> Optional[OrderItem]:
        stmt = select(OrderItem).where(OrderItem.id == item_id, OrderItem.order_id == order_id)
        return (await self.session.execute(stmt)).scalar_one_or_none()


class TaskRepository(AsyncBaseRepository[Task]):
    """Repository for production and general tasks."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Task)

    async def search(
        self,
        farm_id: str,
        status: Optional[TaskStatus] = None,
        task_type: Optional[TaskType] = None,
        order_item_id: Optional[str] = None,
        from_date: Optional[datetime] = None,
        to_date: Optional[datetime] = None,
    ) -> List[Task]:
        """Tasks of a farm ordered by due date.

        ``from_date`` and ``to_date`` bound the due date inclusively.
        """
        stmt = select(Task).where(Task.farm_id == farm_id)
        stmt = QueryBuilder.apply_filters(
            stmt, Task, {"status": status, "type": task_type, "order_item_id": order_item_id}
        )
        if from_date is not None:
            stmt = stmt.where(Task.due_date >= from_date)
        if to_date is not None:
            stmt = stmt.where(Task.due_date <= to_date)
        result = await self.session.execute(stmt.order_by(Task.due_date, Task.created_at))
        return list(result.scalars().all())

    async def open_tasks_due(self, farm_id: str, task_type: TaskType, start: datetime, end: datetime) -> List[Task]:
        """Open tasks of one type with ``start <= due_date < end``, by due date."""
        stmt = (
            select(Task)
            .where(
                Task.farm_id == farm_id,
                Task.type == task_type,
                Task.status.in_(OPEN_TASK_STATUSES),
                Task.due_date >= start,
                Task.due_date < end,
            )
            .order_by(Task.due_date, Task.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def tasks_for_items(self, item_ids: Sequence[str]) -> Dict[str, List[Task]]:
        tasks: Dict[str, List[Task]] = {item_id: [] for item_id in item_ids}
        if not item_ids:
            return tasks
        stmt = select(Task).where(Task.order_item_id.in_(item_ids)).order_by(Task.due_date)
        for task in (await self.session.execute(stmt)).scalars().all():
            tasks[task.order_item_id].append(task)
        return tasks

    async def has_completed(self, farm_id: str, task_type: TaskType) -> bool:
        stmt = (
            select(func.count())
            .select_from(Task)
            .where(Task.farm_id == farm_id, Task.type == task_type, Task.status == TaskStatus.COMPLETED)
        )
        return int((await self.session.execute(stmt)).scalar_one()) > 0
