"""
Task Service.

Task listing with order context, manual status changes and the completion
log. Completing a production task advances its order item through the grow
stages, and the order becomes READY once every item is harvested.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from farmops.core.database.base import utc_now
from farmops.core.database.entities import OrderItem, Task
from farmops.core.database.repositories import OrderItemRepository, OrderRepository, ProductRepository, TaskRepository
from farmops.core.errors import BadRequestError, ValidationError
from farmops.core.logging_config import get_logger
from farmops.core.models.domain import OrderItemStatus, OrderStatus, TaskStatus, TaskType
from farmops.core.models.io.tasks import TaskComplete, TaskItemSummary, TaskOrderSummary, TaskRead, TaskUpdate
from farmops.core.monitoring import log_domain_event

from .production import TASK_COMPLETION_ITEM_STATUS

logger = get_logger(__name__)

# Weight of the newest harvest in the running yield average
YIELD_SMOOTHING = 0.3

ITEM_STAGE_ORDER = [
    OrderItemStatus.PENDING,
    OrderItemStatus.SOAKING,
    OrderItemStatus.GERMINATING,
    OrderItemStatus.GROWING,
    OrderItemStatus.HARVESTED,
]


def smoothed_yield(current: Optional[float], harvested_oz: float, trays: int) -> float:
    """Exponential moving average of the yield per tray."""
    observed = harvested_oz / trays
    if current is None:
        return observed
    return YIELD_SMOOTHING * observed + (1 - YIELD_SMOOTHING) * current


class TaskService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.tasks = TaskRepository(session)
        self.items = OrderItemRepository(session)
        self.orders = OrderRepository(session)
        self.products = ProductRepository(session)

    async def to_reads(self, tasks: Sequence[Task]) -> List[TaskRead]:
        """Task read models with their order item, product name and order summary."""
        items = await self.items.get_many([task.order_item_id for task in tasks if task.order_item_id])
        products = await self.products.get_many([item.product_id for item in items.values()])
        orders = await self.orders.get_many([item.order_id for item in items.values()])

        reads = []
        for task in tasks:
            summary = None
            item = items.get(task.order_item_id) if task.order_item_id else None
            if item is not None:
                order = orders.get(item.order_id)
                product = products.get(item.product_id)
                summary = TaskItemSummary(
                    id=item.id,
                    quantity_oz=item.quantity_oz,
                    trays_needed=item.trays_needed,
                    harvest_date=item.harvest_date,
                    status=item.status,
                    product_id=item.product_id,
                    product_name=product.name if product else None,
                    order=TaskOrderSummary(
                        id=order.id, order_number=order.order_number, customer_name=order.customer_name
                    )
                    if order
                    else None,
                )
            reads.append(TaskRead.model_validate(task).model_copy(update={"order_item": summary}))
        return reads

    async def update_task(self, task: Task, changes: TaskUpdate) -> Task:
        update_data = changes.model_dump(exclude_unset=True, exclude_none=True)
        newly_completed = update_data.get("status") == TaskStatus.COMPLETED and task.status != TaskStatus.COMPLETED
        for key, value in update_data.items():
            setattr(task, key, value)

        if newly_completed:
            task.completed_at = utc_now()
            await self._advance_item(task)
        elif "status" in update_data and task.status != TaskStatus.COMPLETED:
            task.completed_at = None

        return await self.tasks.update(task)

    async def complete_task(self, task: Task, data: TaskComplete) -> Task:
        """Record the completion log of a task and apply its effects on the order.

        Raises:
            ValidationError: when ``completed_by`` is blank
            BadRequestError: ``ALREADY_COMPLETED`` when the task was completed before
        """
        if not data.completed_by or not data.completed_by.strip():
            raise ValidationError("completed_by is required")
        if task.status == TaskStatus.COMPLETED:
            raise BadRequestError("Task is already completed", code="ALREADY_COMPLETED")

        task.status = TaskStatus.COMPLETED
        task.completed_at = (data.completed_at or utc_now()).replace(tzinfo=None)
        task.completed_by = data.completed_by.strip()
        task.completion_notes = data.completion_notes
        task.actual_trays = data.actual_trays
        task.seed_lot = data.seed_lot

        item = await self._advance_item(task)
        if item is not None:
            await self._record_actuals(task, item, data)

        task = await self.tasks.update(task)
        log_domain_event("task_completed", farm_id=task.farm_id, task_id=task.id, task_type=task.type.value)
        return task

    async def _record_actuals(self, task: Task, item: OrderItem, data: TaskComplete) -> None:
        if task.type == TaskType.SEED:
            if data.seed_lot:
                item.seed_lot = data.seed_lot
            if data.actual_trays is not None:
                item.actual_trays = data.actual_trays
        elif task.type == TaskType.HARVESTING:
            if data.actual_yield_oz is not None:
                item.actual_yield_oz = data.actual_yield_oz
            if data.actual_yield_oz and data.actual_trays and data.actual_trays > 0:
                product = await self.products.get_by_id(item.product_id)
                if product is not None:
                    previous = product.avg_yield_per_tray
                    product.avg_yield_per_tray = smoothed_yield(previous, data.actual_yield_oz, data.actual_trays)
                    await self.products.update(product, commit=False)
                    logger.info(
                        f"Updated yield of product {product.id}: {previous} -> {product.avg_yield_per_tray} oz/tray"
                    )
        self.session.add(item)

    async def _advance_item(self, task: Task) -> Optional[OrderItem]:
        """Move the task's item to the stage reached by the task; READY the order when all items are harvested."""
        if not task.order_item_id:
            return None
        item = await self.items.get_by_id(task.order_item_id)
        if item is None or item.status == OrderItemStatus.CANCELLED:
            return None

        reached = TASK_COMPLETION_ITEM_STATUS.get(TaskType(task.type))
        if reached is not None and _stage_index(reached) > _stage_index(item.status):
            item.status = reached
            await self.items.update(item, commit=False)

        siblings = (await self.items.items_for([item.order_id]))[item.order_id]
        if siblings and all(sibling.status == OrderItemStatus.HARVESTED for sibling in siblings):
            order = await self.orders.get_by_id(item.order_id)
            if order is not None and order.status in (OrderStatus.PENDING, OrderStatus.IN_PROGRESS):
                order.status = OrderStatus.READY
                await self.orders.update(order, commit=False)
                logger.info(f"Order {order.order_number} is ready: every item harvested")
        return item


def _stage_index(status: OrderItemStatus) -> int:
    try:
        return ITEM_STAGE_ORDER.index(OrderItemStatus(status))
    except ValueError:
        return -1
