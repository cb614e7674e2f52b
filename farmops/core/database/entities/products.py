"""
Product catalog entity models.

A product is a grow variety carrying the production parameters used to
schedule its tasks. A SKU is a sellable variant of a product (size and price).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class ProductCategory(Base, table=True):
    """Grouping of products for the catalog and storefront.

    Table: product_categories
    """

    __tablename__ = "product_categories"

    id: str = Field(default_factory=new_id, primary_key=True)
    farm_id: str = Field(foreign_key="farms.id", ondelete="CASCADE", index=True)
    name: str = Field(max_length=50)
    display_order: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now)


class ProductBase(Base):
    """Base fields for a product (variety)."""

    name: str = Field(max_length=100)
    description: Optional[str] = Field(default=None)
    category_id: Optional[str] = Field(default=None, foreign_key="product_categories.id", ondelete="SET NULL")

    # Production parameters
    days_soaking: Optional[int] = Field(default=None, ge=0, description="Days of soaking before seeding; 0 or None means no soak")
    days_germination: Optional[int] = Field(default=None, ge=0)
    days_light: Optional[int] = Field(default=None, ge=0)
    avg_yield_per_tray: Optional[float] = Field(default=None, gt=0, description="Average harvest weight per tray (oz)")
    seed_weight_per_tray: Optional[float] = Field(default=None, ge=0)

    is_active: bool = Field(default=True)


class Product(ProductBase, table=True):
    """Grow variety.

    Table: products
    """

    __tablename__ = "products"

    id: str = Field(default_factory=new_id, primary_key=True)
    farm_id: str = Field(foreign_key="farms.id", ondelete="CASCADE", index=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class SkuBase(Base):
    """Base fields for a SKU."""

    sku_code: str = Field(max_length=50)
    name: str = Field(max_length=100)
    weight_oz: float = Field(gt=0)
    price: int = Field(ge=0, description="Unit price in cents")
    is_available: bool = Field(default=True)
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    low_stock_threshold: Optional[int] = Field(default=None, ge=0)
    display_order: int = Field(default=0)
    is_public: bool = Field(default=True)


class Sku(SkuBase, table=True):
    """Sellable product variant.

    Table: skus
    """

    __tablename__ = "skus"
    __table_args__ = (UniqueConstraint("farm_id", "sku_code", name="uq_skus_farm_sku_code"),)

    id: str = Field(default_factory=new_id, primary_key=True)
    farm_id: str = Field(foreign_key="farms.id", ondelete="CASCADE", index=True)
    product_id: str = Field(foreign_key="products.id", ondelete="CASCADE", index=True)
    image_url: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})
