"""
Customer relationship entity models.

Customers are soft-deleted (``is_active``) so historical orders keep their
link. Tags are farm-scoped labels attached through an association table.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from farmops.core.models.domain import CustomerType, PaymentTerms

from ..base import Base, new_id, utc_now


class CustomerBase(Base):
    """Base fields for a customer."""

    name: str = Field(max_length=100, index=True)
    email: Optional[str] = Field(default=None, index=True)
    phone: Optional[str] = Field(default=None)
    company_name: Optional[str] = Field(default=None)
    address_line1: Optional[str] = Field(default=None)
    address_line2: Optional[str] = Field(default=None)
    city: Optional[str] = Field(default=None)
    state: Optional[str] = Field(default=None)
    postal_code: Optional[str] = Field(default=None)
    country: Optional[str] = Field(default=None)
    customer_type: CustomerType = Field(default=CustomerType.RETAIL)
    payment_terms: PaymentTerms = Field(default=PaymentTerms.DUE_ON_RECEIPT)
    notes: Optional[str] = Field(default=None)
    is_active: bool = Field(default=True)


class Customer(CustomerBase, table=True):
    """Farm customer.

    Table: customers
    """

    __tablename__ = "customers"

    id: str = Field(default_factory=new_id, primary_key=True)
    farm_id: str = Field(foreign_key="farms.id", ondelete="CASCADE", index=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class CustomerTag(Base, table=True):
    """Farm-scoped customer label.

    Table: customer_tags
    """

    __tablename__ = "customer_tags"
    __table_args__ = (UniqueConstraint("farm_id", "name", name="uq_customer_tags_farm_name"),)

    id: str = Field(default_factory=new_id, primary_key=True)
    farm_id: str = Field(foreign_key="farms.id", ondelete="CASCADE", index=True)
    name: str = Field(max_length=50)
    color: str = Field(default="#3b82f6")
    created_at: datetime = Field(default_factory=utc_now)


class CustomerTagAssignment(Base, table=True):
    """Association between a customer and a tag.

    Table: customer_tag_assignments
    """

    __tablename__ = "customer_tag_assignments"

    customer_id: str = Field(foreign_key="customers.id", ondelete="CASCADE", primary_key=True)
    tag_id: str = Field(foreign_key="customer_tags.id", ondelete="CASCADE", primary_key=True)
    assigned_at: datetime = Field(default_factory=utc_now)
