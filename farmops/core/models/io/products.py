"""
Product catalog I/O models for API requests and responses.

This module contains Pydantic-based I/O schemas for product categories,
products (grow varieties) and SKUs.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductCategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    farm_id: str
    name: str
    display_order: int
    created_at: datetime


class ProductCategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    display_order: int = Field(default=0)


class ProductRead(BaseModel):
    """Schema for reading a product from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    farm_id: str
    name: str
    description: Optional[str] = None
    category_id: Optional[str] = None
    days_soaking: Optional[int] = None
    days_germination: Optional[int] = None
    days_light: Optional[int] = None
    avg_yield_per_tray: Optional[float] = None
    seed_weight_per_tray: Optional[float] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    category: Optional[ProductCategoryRead] = None
    sku_count: Optional[int] = None


class ProductCreate(BaseModel):
    """Schema for creating a product."""

    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    category_id: Optional[str] = None
    days_soaking: Optional[int] = Field(default=None, ge=0, description="Soak days; 0 or null means no soaking")
    days_germination: Optional[int] = Field(default=None, ge=0, description="Days in blackout before light")
    days_light: Optional[int] = Field(default=None, ge=0, description="Days under grow lights before harvest")
    avg_yield_per_tray: Optional[float] = Field(default=None, gt=0, description="Average harvest per tray (oz)")
    seed_weight_per_tray: Optional[float] = Field(default=None, ge=0)
    is_active: bool = True


class ProductUpdate(BaseModel):
    """Schema for updating a product; only provided fields change."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    category_id: Optional[str] = None
    days_soaking: Optional[int] = Field(default=None, ge=0)
    days_germination: Optional[int] = Field(default=None, ge=0)
    days_light: Optional[int] = Field(default=None, ge=0)
    avg_yield_per_tray: Optional[float] = Field(default=None, gt=0)
    seed_weight_per_tray: Optional[float] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class SkuRead(BaseModel):
    """Schema for reading a SKU from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    farm_id: str
    product_id: str
    sku_code: str
    name: str
    weight_oz: float
    price: int = Field(description="Unit price in cents")
    is_available: bool
    stock_quantity: Optional[int] = None
    low_stock_threshold: Optional[int] = None
    display_order: int
    is_public: bool
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    product_name: Optional[str] = None


class SkuCreate(BaseModel):
    """Schema for creating a SKU."""

    sku_code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=100)
    weight_oz: float = Field(gt=0)
    price: int = Field(ge=0, description="Unit price in cents")
    is_available: bool = True
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    low_stock_threshold: Optional[int] = Field(default=None, ge=0)
    display_order: int = 0
    is_public: bool = True


class SkuUpdate(BaseModel):
    """Schema for updating a SKU; only provided fields change."""

    sku_code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    weight_oz: Optional[float] = Field(default=None, gt=0)
    price: Optional[int] = Field(default=None, ge=0)
    is_available: Optional[bool] = None
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    low_stock_threshold: Optional[int] = Field(default=None, ge=0)
    display_order: Optional[int] = None
    is_public: Optional[bool] = None
