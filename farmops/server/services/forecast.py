"""
Dashboard aggregations.

Open harvest and transplant tasks grouped by due date with ounce and tray
totals, and the figures of the current week (Sunday to Sunday).
"""

from __future__ import annotations

from collections import OrderedDict
from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from farmops.core.database.repositories import OrderItemRepository, OrderRepository, ProductRepository, TaskRepository
from farmops.core.models.domain import TaskType
from farmops.core.models.io.dashboard import Forecast, ForecastDay, ForecastTask, WeekSummary

from .production import start_of_day


def day_label(day: date, today: date) -> str:
    """``Today``, ``Tomorrow`` or a short date such as ``Mon, Jan 5``."""
    if day == today:
        return "Today"
    if day == today + timedelta(days=1):
        return "Tomorrow"
    return f"{day:%a, %b} {day.day}"


def week_bounds(today: date) -> tuple[date, date]:
    """Sunday starting the week of ``today`` and the following Sunday (exclusive)."""
    week_start = today - timedelta(days=(today.weekday() + 1) % 7)
    return week_start, week_start + timedelta(days=7)


async def build_forecast(
    session: AsyncSession, farm_id: str, task_type: TaskType, days: int, today: Optional[date] = None
) -> Forecast:
    """Open tasks of ``task_type`` due in ``[today, today + days)`` grouped by due date."""
    today = today or datetime.now().date()
    start = start_of_day(today)
    tasks = await TaskRepository(session).open_tasks_due(farm_id, task_type, start, start + timedelta(days=days))

    items = await OrderItemRepository(session).get_many([task.order_item_id for task in tasks if task.order_item_id])
    products = await ProductRepository(session).get_many([item.product_id for item in items.values()])
    orders = await OrderRepository(session).get_many([item.order_id for item in items.values()])

    groups: "OrderedDict[date, list[ForecastTask]]" = OrderedDict()
    for task in tasks:
        item = items.get(task.order_item_id) if task.order_item_id else None
        order = orders.get(item.order_id) if item else None
        product = products.get(item.product_id) if item else None
        groups.setdefault(task.due_date.date(), []).append(
            ForecastTask(
                task_id=task.id,
                due_date=task.due_date,
                product_name=product.name if product else task.title,
                customer_name=(order.customer_name if order else None) or "Unknown",
                order_number=order.order_number if order else None,
                quantity_oz=item.quantity_oz if item else 0,
                trays_needed=item.trays_needed if item else 0,
            )
        )

    day_groups = [
        ForecastDay(
            due_date=day,
            label=day_label(day, today),
            tasks=group,
            total_oz=sum(task.quantity_oz for task in group),
            total_trays=sum(task.trays_needed for task in group),
        )
        for day, group in groups.items()
    ]
    return Forecast(
        start_date=today,
        end_date=today + timedelta(days=days - 1),
        days=day_groups,
        total_oz=sum(group.total_oz for group in day_groups),
        total_trays=sum(group.total_trays for group in day_groups),
        task_count=len(tasks),
    )


async def build_week_summary(session: AsyncSession, farm_id: str, today: Optional[date] = None) -> WeekSummary:
    today = today or datetime.now().date()
    week_start, week_end = week_bounds(today)
    window_start, window_end = start_of_day(today), start_of_day(week_end)

    task_repo = TaskRepository(session)
    seed_tasks = await task_repo.open_tasks_due(farm_id, TaskType.SEED, window_start, window_end)
    harvest_tasks = await task_repo.open_tasks_due(farm_id, TaskType.HARVESTING, window_start, window_end)
    items = await OrderItemRepository(session).get_many(
        [task.order_item_id for task in seed_tasks + harvest_tasks if task.order_item_id]
    )

    orders_this_week = await OrderRepository(session).count_created_between(
        farm_id, start_of_day(week_start), start_of_day(week_end)
    )
    return WeekSummary(
        week_start=week_start,
        week_end=week_end,
        orders_this_week=orders_this_week,
        trays_to_plant=sum(items[t.order_item_id].trays_needed for t in seed_tasks if t.order_item_id in items),
        expected_harvest_oz=sum(
            items[t.order_item_id].quantity_oz for t in harvest_tasks if t.order_item_id in items
        ),
    )
