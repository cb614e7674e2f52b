"""
Payment I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from farmops.core.models.domain import PaymentMethod, PaymentProcessor, PaymentStatus, PaymentTiming

from .common import OptionalEmail


class PaymentSettingsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    farm_id: str
    payment_timing: PaymentTiming
    preferred_processor: PaymentProcessor
    platform_fee_percent: float
    accepts_online_payments: bool
    is_connected: bool = False
    can_accept_payments: bool = False
    created_at: datetime
    updated_at: datetime


class PaymentSettingsUpdate(BaseModel):
    payment_timing: Optional[PaymentTiming] = None
    preferred_processor: Optional[PaymentProcessor] = None
    platform_fee_percent: Optional[float] = Field(default=None, ge=0, le=100)
    accepts_online_payments: Optional[bool] = None


class PaymentRead(BaseModel):
    """Schema for reading a payment from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    farm_id: str
    order_id: str
    amount: int
    currency: str
    status: PaymentStatus
    method: Optional[PaymentMethod] = None
    platform_fee: int
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    reference: Optional[str] = None
    payment_link_id: Optional[str] = None
    payment_link_url: Optional[str] = None
    payment_link_expires_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    refunded_amount: int
    refund_reason: Optional[str] = None
    failure_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime


ManualPaymentMethod = Literal["CASH", "CHECK", "CARD", "BANK_TRANSFER", "OTHER"]


class ManualPaymentCreate(BaseModel):
    """Payment received outside the platform (cash, check, ...)."""

    amount: int = Field(gt=0, description="Amount in cents")
    method: ManualPaymentMethod
    customer_name: Optional[str] = Field(default=None, max_length=100)
    customer_email: OptionalEmail = None
    reference: Optional[str] = Field(default=None, max_length=200)


class PaymentLinkCreate(BaseModel):
    amount: int = Field(gt=0, description="Amount in cents")
    customer_email: EmailStr
    customer_name: Optional[str] = Field(default=None, max_length=100)
    expires_in_hours: int = Field(default=72, gt=0)


class PaymentLinkCreated(BaseModel):
    payment_id: str
    payment_link_id: str
    payment_link_url: str
    expires_at: datetime


class RefundCreate(BaseModel):
    amount: Optional[int] = Field(default=None, gt=0, description="Amount in cents; defaults to the full payment")
    reason: Optional[str] = Field(default=None, max_length=500)


class PaymentLinkItem(BaseModel):
    product_name: str
    sku_name: Optional[str] = None
    quantity: Optional[int] = None
    quantity_oz: float
    line_total_cents: Optional[int] = None


class PaymentLinkDetails(BaseModel):
    """Public view of a payment link."""

    payment_id: str
    order_number: str
    farm_name: str
    amount: int
    currency: str
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    status: str
    expires_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    items: list[PaymentLinkItem] = Field(default_factory=list)


class PaymentLinkPaid(BaseModel):
    status: str = "ALREADY_PAID"
    paid_at: Optional[datetime] = None


class PaymentLinkPay(BaseModel):
    payer_name: Optional[str] = Field(default=None, max_length=100)
    reference: Optional[str] = Field(default=None, max_length=200)
