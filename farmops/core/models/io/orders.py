"""
Order I/O models for API requests and responses.

This module contains Pydantic-based I/O schemas for orders, their items and
the production tasks attached to them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from farmops.core.models.domain import (
    DeliveryMethod,
    OrderItemStatus,
    OrderSource,
    OrderStatus,
    TaskPriority,
    TaskStatus,
    TaskType,
)


class OrderProductSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    days_soaking: Optional[int] = None
    days_germination: Optional[int] = None
    days_light: Optional[int] = None
    avg_yield_per_tray: Optional[float] = None


class OrderTaskSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    type: TaskType
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class OrderItemRead(BaseModel):
    """Schema for reading an order item with its production schedule."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    order_id: str
    product_id: str
    sku_id: Optional[str] = None
    quantity: Optional[int] = None
    quantity_oz: float
    unit_price_cents: Optional[int] = None
    line_total_cents: Optional[int] = None
    harvest_date: datetime
    overage_percent: float
    trays_needed: int
    soak_date: datetime
    seed_date: datetime
    move_to_light_date: datetime
    actual_yield_oz: Optional[float] = None
    actual_trays: Optional[int] = None
    seed_lot: Optional[str] = None
    status: OrderItemStatus
    product: Optional[OrderProductSummary] = None
    tasks: Optional[list[OrderTaskSummary]] = None


class OrderRead(BaseModel):
    """Schema for reading an order from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    farm_id: str
    order_number: str
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    status: OrderStatus
    source: OrderSource
    notes: Optional[str] = None
    total_cents: Optional[int] = None
    delivery_date: Optional[datetime] = None
    delivery_method: DeliveryMethod
    delivery_address: Optional[str] = None
    carrier_name: Optional[str] = None
    vehicle_id: Optional[str] = None
    driver_name: Optional[str] = None
    trailer_number: Optional[str] = None
    special_instructions: Optional[str] = None
    invoice_number: Optional[str] = None
    invoiced_at: Optional[datetime] = None
    invoice_due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    items: list[OrderItemRead] = Field(default_factory=list)


class OrderItemCreate(BaseModel):
    product_id: str
    quantity_oz: float = Field(gt=0, description="Quantity to harvest in ounces")
    harvest_date: datetime
    overage_percent: float = Field(default=10, ge=0, le=100)


class OrderCreate(BaseModel):
    """Schema for creating an order; production tasks are generated per item."""

    order_number: Optional[str] = Field(default=None, max_length=50)
    customer_name: Optional[str] = Field(default=None, max_length=100)
    customer_id: Optional[str] = None
    notes: Optional[str] = None
    items: list[OrderItemCreate] = Field(min_length=1)


class OrderUpdate(BaseModel):
    """Schema for updating an order; only provided fields change."""

    order_number: Optional[str] = Field(default=None, min_length=1, max_length=50)
    customer_name: Optional[str] = Field(default=None, max_length=100)
    status: Optional[OrderStatus] = None
    notes: Optional[str] = None
    delivery_date: Optional[datetime] = None
    delivery_method: Optional[DeliveryMethod] = None
    delivery_address: Optional[str] = None
    carrier_name: Optional[str] = None
    vehicle_id: Optional[str] = None
    driver_name: Optional[str] = None
    trailer_number: Optional[str] = None
    special_instructions: Optional[str] = None


class OrderItemUpdate(BaseModel):
    quantity_oz: Optional[float] = Field(default=None, gt=0)
    harvest_date: Optional[datetime] = None
    overage_percent: Optional[float] = Field(default=None, ge=0, le=100)
    status: Optional[OrderItemStatus] = None


class OrderClone(BaseModel):
    harvest_date_offset: int = Field(default=7, description="Days to shift every harvest date")
