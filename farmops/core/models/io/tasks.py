"""
Task I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from farmops.core.models.domain import OrderItemStatus, TaskPriority, TaskStatus, TaskType


class TaskOrderSummary(BaseModel):
    id: str
    order_number: str
    customer_name: Optional[str] = None


class TaskItemSummary(BaseModel):
    """Order item context shown next to a production task."""

    id: str
    quantity_oz: float
    trays_needed: int
    harvest_date: datetime
    status: OrderItemStatus
    product_id: str
    product_name: Optional[str] = None
    order: Optional[TaskOrderSummary] = None


class TaskRead(BaseModel):
    """Schema for reading a task from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    farm_id: str
    order_item_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    type: TaskType
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    completed_by: Optional[str] = None
    completion_notes: Optional[str] = None
    actual_trays: Optional[int] = None
    seed_lot: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    order_item: Optional[TaskItemSummary] = None


class TaskUpdate(BaseModel):
    """Schema for updating a task; setting COMPLETED advances the order item."""

    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    due_date: Optional[datetime] = None


class TaskComplete(BaseModel):
    """Completion log for a production task."""

    completed_by: str = Field(description="Name of the person who did the work")
    completion_notes: Optional[str] = None
    actual_trays: Optional[int] = Field(default=None, ge=0)
    actual_yield_oz: Optional[float] = Field(default=None, ge=0)
    seed_lot: Optional[str] = None
    completed_at: Optional[datetime] = None
