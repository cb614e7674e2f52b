"""
Customer relationship I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from farmops.core.models.domain import CustomerType, OrderStatus, PaymentTerms

from .common import OptionalEmail

TAG_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class CustomerTagRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    farm_id: str
    name: str
    color: str
    created_at: datetime
    customer_count: Optional[int] = None


class CustomerTagCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    color: str = Field(default="#3b82f6", pattern=TAG_COLOR_PATTERN)


class CustomerTagUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    color: Optional[str] = Field(default=None, pattern=TAG_COLOR_PATTERN)


class CustomerOrderSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    order_number: str
    status: OrderStatus
    total_cents: Optional[int] = None
    delivery_date: Optional[datetime] = None
    created_at: datetime


class CustomerRead(BaseModel):
    """Schema for reading a customer from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    farm_id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    company_name: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    customer_type: CustomerType
    payment_terms: PaymentTerms
    notes: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    tags: list[CustomerTagRead] = Field(default_factory=list)
    order_count: Optional[int] = None


class CustomerDetail(CustomerRead):
    """Customer with the most recent orders."""

    recent_orders: list[CustomerOrderSummary] = Field(default_factory=list)


class CustomerCreate(BaseModel):
    """Schema for creating a customer."""

    name: str = Field(min_length=1, max_length=100)
    email: OptionalEmail = None
    phone: Optional[str] = Field(default=None, max_length=30)
    company_name: Optional[str] = Field(default=None, max_length=100)
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    customer_type: CustomerType = CustomerType.RETAIL
    payment_terms: PaymentTerms = PaymentTerms.DUE_ON_RECEIPT
    notes: Optional[str] = None
    tag_ids: Optional[list[str]] = None


class CustomerUpdate(BaseModel):
    """Schema for updating a customer; ``tag_ids`` replaces the assignments."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: OptionalEmail = None
    phone: Optional[str] = Field(default=None, max_length=30)
    company_name: Optional[str] = Field(default=None, max_length=100)
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    customer_type: Optional[CustomerType] = None
    payment_terms: Optional[PaymentTerms] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None
    tag_ids: Optional[list[str]] = None
