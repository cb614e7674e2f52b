"""
Payment entity models.

Payments are recorded by the farm: manual payments (cash, check, ...) and
shareable payment links that a customer settles from the public checkout page.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from farmops.core.models.domain import PaymentMethod, PaymentProcessor, PaymentStatus, PaymentTiming

from ..base import Base, new_id, utc_now


class PaymentSettings(Base, table=True):
    """Per-farm payment configuration.

    Table: payment_settings
    """

    __tablename__ = "payment_settings"

    id: str = Field(default_factory=new_id, primary_key=True)
    farm_id: str = Field(foreign_key="farms.id", ondelete="CASCADE", unique=True, index=True)
    payment_timing: PaymentTiming = Field(default=PaymentTiming.ON_READY)
    preferred_processor: PaymentProcessor = Field(default=PaymentProcessor.MANUAL)
    platform_fee_percent: float = Field(default=0, ge=0, le=100)
    accepts_online_payments: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class Payment(Base, table=True):
    """Payment recorded against an order.

    Table: payments
    """

    __tablename__ = "payments"

    id: str = Field(default_factory=new_id, primary_key=True)
    farm_id: str = Field(foreign_key="farms.id", ondelete="CASCADE", index=True)
    order_id: str = Field(foreign_key="orders.id", ondelete="CASCADE", index=True)

    amount: int = Field(gt=0, description="Amount in cents")
    currency: str = Field(default="usd")
    status: PaymentStatus = Field(default=PaymentStatus.PENDING)
    method: Optional[PaymentMethod] = Field(default=None)
    platform_fee: int = Field(default=0)
    customer_email: Optional[str] = Field(default=None)
    customer_name: Optional[str] = Field(default=None)
    reference: Optional[str] = Field(default=None)

    # Payment link
    payment_link_id: Optional[str] = Field(default=None, unique=True, index=True)
    payment_link_url: Optional[str] = Field(default=None)
    payment_link_expires_at: Optional[datetime] = Field(default=None)

    paid_at: Optional[datetime] = Field(default=None)
    refunded_amount: int = Field(default=0)
    refund_reason: Optional[str] = Field(default=None)
    failure_reason: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})
