"""
Public storefront I/O models.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from farmops.core.models.domain import DeliveryMethod


class StorefrontFarm(BaseModel):
    id: str
    name: str
    slug: str
    logo_url: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    currency: str


class StorefrontCategory(BaseModel):
    id: str
    name: str
    display_order: int


class StorefrontSku(BaseModel):
    id: str
    sku_code: str
    name: str
    weight_oz: float
    price: int
    image_url: Optional[str] = None
    display_order: int
    stock_quantity: Optional[int] = None


class StorefrontProduct(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    category_id: Optional[str] = None
    skus: list[StorefrontSku]


class StorefrontCatalog(BaseModel):
    farm: StorefrontFarm
    categories: list[StorefrontCategory]
    products: list[StorefrontProduct]


class StorefrontAvailability(BaseModel):
    requested_date: Optional[date] = None
    available: bool
    reason: Optional[str] = None
    min_order_date: date


class StorefrontOrderItem(BaseModel):
    sku_id: str
    quantity: int = Field(ge=1)


class StorefrontOrderCreate(BaseModel):
    """Order submitted from the public storefront."""

    customer_name: str = Field(min_length=1, max_length=100)
    customer_email: EmailStr
    customer_phone: Optional[str] = Field(default=None, max_length=20)
    delivery_date: date
    delivery_method: DeliveryMethod = DeliveryMethod.PICKUP
    delivery_address: Optional[str] = Field(default=None, max_length=500)
    notes: Optional[str] = Field(default=None, max_length=1000)
    items: list[StorefrontOrderItem] = Field(min_length=1)


class StorefrontOrderResult(BaseModel):
    order_id: str
    order_number: str
    total_cents: int
    payment_link: Optional[str] = None
