"""
Order, order item and production task entity models.

Every order item carries its computed production schedule (trays, soak, seed,
move-to-light and harvest dates). Tasks are the scheduled actions generated
from those dates.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from farmops.core.models.domain import (
    DeliveryMethod,
    OrderItemStatus,
    OrderSource,
    OrderStatus,
    TaskPriority,
    TaskStatus,
    TaskType,
)

from ..base import Base, new_id, utc_now


class Order(Base, table=True):
    """Customer order.

    Table: orders
    """

    __tablename__ = "orders"
    __table_args__ = (UniqueConstraint("farm_id", "order_number", name="uq_orders_farm_order_number"),)

    id: str = Field(default_factory=new_id, primary_key=True)
    farm_id: str = Field(foreign_key="farms.id", ondelete="CASCADE", index=True)
    order_number: str = Field(index=True)
    customer_id: Optional[str] = Field(default=None, foreign_key="customers.id", ondelete="SET NULL", index=True)
    customer_name: Optional[str] = Field(default=None, max_length=100)
    customer_email: Optional[str] = Field(default=None)
    customer_phone: Optional[str] = Field(default=None)
    status: OrderStatus = Field(default=OrderStatus.PENDING)
    source: OrderSource = Field(default=OrderSource.MANUAL)
    notes: Optional[str] = Field(default=None)
    total_cents: Optional[int] = Field(default=None)

    # Fulfilment
    delivery_date: Optional[datetime] = Field(default=None)
    delivery_method: DeliveryMethod = Field(default=DeliveryMethod.PICKUP)
    delivery_address: Optional[str] = Field(default=None)
    carrier_name: Optional[str] = Field(default=None)
    vehicle_id: Optional[str] = Field(default=None)
    driver_name: Optional[str] = Field(default=None)
    trailer_number: Optional[str] = Field(default=None)
    special_instructions: Optional[str] = Field(default=None)

    # Invoicing
    invoice_number: Optional[str] = Field(default=None)
    invoiced_at: Optional[datetime] = Field(default=None)
    invoice_due_date: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class OrderItem(Base, table=True):
    """Line of an order with its production schedule.

    Table: order_items
    """

    __tablename__ = "order_items"

    id: str = Field(default_factory=new_id, primary_key=True)
    order_id: str = Field(foreign_key="orders.id", ondelete="CASCADE", index=True)
    product_id: str = Field(foreign_key="products.id", ondelete="CASCADE", index=True)
    sku_id: Optional[str] = Field(default=None, foreign_key="skus.id", ondelete="SET NULL", index=True)

    quantity: Optional[int] = Field(default=None, description="Number of SKU units (storefront orders)")
    quantity_oz: float = Field(gt=0)
    unit_price_cents: Optional[int] = Field(default=None)
    line_total_cents: Optional[int] = Field(default=None)

    # Production schedule
    harvest_date: datetime
    overage_percent: float = Field(default=10)
    trays_needed: int = Field(default=0)
    soak_date: datetime
    seed_date: datetime
    move_to_light_date: datetime

    # Actuals
    actual_yield_oz: Optional[float] = Field(default=None)
    actual_trays: Optional[int] = Field(default=None)
    seed_lot: Optional[str] = Field(default=None)

    status: OrderItemStatus = Field(default=OrderItemStatus.PENDING)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class Task(Base, table=True):
    """Scheduled operational action, usually tied to an order item.

    Table: tasks
    """

    __tablename__ = "tasks"

    id: str = Field(default_factory=new_id, primary_key=True)
    farm_id: str = Field(foreign_key="farms.id", ondelete="CASCADE", index=True)
    order_item_id: Optional[str] = Field(default=None, foreign_key="order_items.id", ondelete="CASCADE", index=True)

    title: str
    description: Optional[str] = Field(default=None)
    type: TaskType = Field(default=TaskType.GENERAL, index=True)
    status: TaskStatus = Field(default=TaskStatus.TODO, index=True)
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
    due_date: Optional[datetime] = Field(default=None, index=True)

    # Completion log
    completed_at: Optional[datetime] = Field(default=None)
    completed_by: Optional[str] = Field(default=None)
    completion_notes: Optional[str] = Field(default=None)
    actual_trays: Optional[int] = Field(default=None)
    seed_lot: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})
