"""
Production Calculator.

Calculates tray requirements and backward-schedules production dates from a
target harvest date. Everything in this module is pure: callers persist the
results.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Union

from farmops.core.models.domain import OrderItemStatus, OrderStatus, TaskType

DateLike = Union[date, datetime]

TASK_TITLE_LABELS: dict[TaskType, str] = {
    TaskType.SOAK: "SOAK",
    TaskType.SEED: "SEED",
    TaskType.MOVE_TO_LIGHT: "MOVE TO LIGHT",
    TaskType.HARVESTING: "HARVEST",
}

# Item status reached when a task of the given type is completed
TASK_COMPLETION_ITEM_STATUS: dict[TaskType, OrderItemStatus] = {
    TaskType.SOAK: OrderItemStatus.SOAKING,
    TaskType.SEED: OrderItemStatus.GERMINATING,
    TaskType.MOVE_TO_LIGHT: OrderItemStatus.GROWING,
    TaskType.HARVESTING: OrderItemStatus.HARVESTED,
}

ORDER_STATUS_LABELS: dict[OrderStatus, str] = {
    OrderStatus.PENDING: "Pending",
    OrderStatus.IN_PROGRESS: "In Progress",
    OrderStatus.READY: "Ready",
    OrderStatus.DELIVERED: "Delivered",
    OrderStatus.CANCELLED: "Cancelled",
}

ORDER_ITEM_STATUS_LABELS: dict[OrderItemStatus, str] = {
    OrderItemStatus.PENDING: "Pending",
    OrderItemStatus.SOAKING: "Soaking",
    OrderItemStatus.GERMINATING: "Germinating",
    OrderItemStatus.GROWING: "Growing",
    OrderItemStatus.HARVESTED: "Harvested",
    OrderItemStatus.CANCELLED: "Cancelled",
}


@dataclass(frozen=True)
class ProductionSchedule:
    """Computed schedule for one order item."""

    trays_needed: int
    total_quantity_oz: float
    requires_soaking: bool
    soak_date: datetime
    seed_date: datetime
    move_to_light_date: datetime
    harvest_date: datetime
    total_growth_days: int


@dataclass(frozen=True)
class TaskPlan:
    """A production task to create for an order item."""

    type: TaskType
    title: str
    description: str
    due_date: datetime


def start_of_day(value: DateLike) -> datetime:
    """Normalize a date or datetime to midnight (naive)."""
    if isinstance(value, datetime):
        value = value.replace(tzinfo=None)
        return datetime(value.year, value.month, value.day)
    return datetime(value.year, value.month, value.day)


def calculate_trays_needed(quantity_oz: float, avg_yield_per_tray: float, overage_percent: float) -> int:
    """Trays needed to harvest ``quantity_oz`` plus overage.

    Raises:
        ValueError: if the average yield per tray is not positive
    """
    if avg_yield_per_tray <= 0:
        raise ValueError("Average yield per tray must be positive")
    total_quantity_needed = quantity_oz * (1 + overage_percent / 100)
    return math.ceil(total_quantity_needed / avg_yield_per_tray)


def calculate_production_schedule(
    *,
    quantity_oz: float,
    avg_yield_per_tray: float,
    overage_percent: float,
    harvest_date: DateLike,
    days_soaking: Optional[int],
    days_germination: int,
    days_light: int,
) -> ProductionSchedule:
    """Calculate all production dates by working backwards from the harvest date.

    Soaking is optional: ``None`` or ``0`` soak days means the soak date equals
    the seed date and no soak task is needed.
    """
    trays_needed = calculate_trays_needed(quantity_oz, avg_yield_per_tray, overage_percent)
    total_quantity_oz = quantity_oz * (1 + overage_percent / 100)

    requires_soaking = days_soaking is not None and days_soaking > 0
    effective_soak_days = days_soaking if requires_soaking else 0

    harvest = start_of_day(harvest_date)
    move_to_light = harvest - timedelta(days=days_light)
    seed = move_to_light - timedelta(days=days_germination)
    soak = seed - timedelta(days=effective_soak_days)

    return ProductionSchedule(
        trays_needed=trays_needed,
        total_quantity_oz=total_quantity_oz,
        requires_soaking=requires_soaking,
        soak_date=soak,
        seed_date=seed,
        move_to_light_date=move_to_light,
        harvest_date=harvest,
        total_growth_days=effective_soak_days + days_germination + days_light,
    )


def plan_tasks(product_name: str, quantity_oz: float, schedule: ProductionSchedule) -> list[TaskPlan]:
    """Production tasks for one scheduled item, in chronological order."""
    trays = schedule.trays_needed
    plans: list[TaskPlan] = []
    if schedule.requires_soaking:
        plans.append(
            TaskPlan(
                type=TaskType.SOAK,
                title=f"{TASK_TITLE_LABELS[TaskType.SOAK]}: {product_name}",
                description=f"Soak {trays} trays of {product_name} seeds",
                due_date=schedule.soak_date,
            )
        )
    plans.extend(
        [
            TaskPlan(
                type=TaskType.SEED,
                title=f"{TASK_TITLE_LABELS[TaskType.SEED]}: {product_name}",
                description=f"Plant {trays} trays of {product_name}",
                due_date=schedule.seed_date,
            ),
            TaskPlan(
                type=TaskType.MOVE_TO_LIGHT,
                title=f"{TASK_TITLE_LABELS[TaskType.MOVE_TO_LIGHT]}: {product_name}",
                description=f"Move {trays} trays of {product_name} to grow lights",
                due_date=schedule.move_to_light_date,
            ),
            TaskPlan(
                type=TaskType.HARVESTING,
                title=f"{TASK_TITLE_LABELS[TaskType.HARVESTING]}: {product_name}",
                description=f"Harvest {format_quantity(quantity_oz)}oz of {product_name} ({trays} trays)",
                due_date=schedule.harvest_date,
            ),
        ]
    )
    return plans


def task_due_dates(schedule: ProductionSchedule) -> dict[TaskType, datetime]:
    """Due date per production task type, used when an item is rescheduled."""
    return {
        TaskType.SOAK: schedule.soak_date,
        TaskType.SEED: schedule.seed_date,
        TaskType.MOVE_TO_LIGHT: schedule.move_to_light_date,
        TaskType.HARVESTING: schedule.harvest_date,
    }


def format_quantity(value: float) -> str:
    return f"{value:g}"


def generate_order_number(sequence: int, year: Optional[int] = None) -> str:
    """Generate an order number in the format ``ORD-YYYY-NNN``."""
    year = year or datetime.now().year
    return f"ORD-{year}-{sequence:03d}"


def generate_storefront_order_number(sequence: int) -> str:
    """Generate a storefront order number in the format ``ORD-NNNNN``."""
    return f"ORD-{sequence:05d}"


def validate_product_for_production(
    *,
    days_germination: Optional[int],
    days_light: Optional[int],
    avg_yield_per_tray: Optional[float],
) -> list[str]:
    """Names of production fields a product is missing (soak days are optional)."""
    missing: list[str] = []
    if days_germination is None:
        missing.append("Days Germination")
    if days_light is None:
        missing.append("Days Light")
    if avg_yield_per_tray is None:
        missing.append("Avg Yield per Tray")
    return missing


def get_order_status_label(status: str) -> str:
    try:
        return ORDER_STATUS_LABELS[OrderStatus(status)]
    except ValueError:
        return status


def get_order_item_status_label(status: str) -> str:
    try:
        return ORDER_ITEM_STATUS_LABELS[OrderItemStatus(status)]
    except ValueError:
        return status
