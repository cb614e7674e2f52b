"""
Product catalog repositories.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities import OrderItem, Product, ProductCategory, Sku
from .base import AsyncBaseRepository


class ProductCategoryRepository(AsyncBaseRepository[ProductCategory]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ProductCategory)

    async def list_for_farm(self, farm_id: str) -> List[ProductCategory]:
        stmt = (
            select(ProductCategory)
            .where(ProductCategory.farm_id == farm_id)
            .order_by(ProductCategory.display_order, ProductCategory.name)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class ProductRepository(AsyncBaseRepository[Product]):
    """Repository for products (grow varieties)."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Product)

    async def list_for_farm(self, farm_id: str, active_only: bool = False) -> List[Product]:
        stmt = select(Product).where(Product.farm_id == farm_id)
        if active_only:
            stmt = stmt.where(Product.is_active == True)
        result = await self.session.execute(stmt.order_by(Product.name))
        return list(result.scalars().all())

    async def get_many(self, product_ids: Sequence[str]) -> Dict[str, Product]:
        if not product_ids:
            return {}
        result = await self.session.execute(select(Product).where(Product.id.in_(set(product_ids))))
        return {product.id: product for product in result.scalars().all()}

    async def sku_counts(self, product_ids: Sequence[str]) -> Dict[str, int]:
        if not product_ids:
            return {}
        stmt = select(Sku.product_id, func.count()).where(Sku.product_id.in_(product_ids)).group_by(Sku.product_id)
        result = await self.session.execute(stmt)
        return {product_id: int(count) for product_id, count in result.all()}

    async def is_used_in_orders(self, product_id: str) -> bool:
        stmt = select(func.count()).select_from(OrderItem).where(OrderItem.product_id == product_id)
        return int((await self.session.execute(stmt)).scalar_one()) > 0


class SkuRepository(AsyncBaseRepository[Sku]):
    """Repository for SKUs (sellable product variants)."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Sku)

    async def list_for_product(self, product_id: str) -> List[Sku]:
        stmt = select(Sku).where(Sku.product_id == product_id).order_by(Sku.display_order, Sku.name)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_farm(
        self,
        farm_id: str,
        is_public: Optional[bool] = None,
        is_available: Optional[bool] = None,
    ) -> List[tuple[Sku, str]]:
        """SKUs of the farm with their product name."""
        stmt = (
            select(Sku, Product.name)
            .join(Product, Product.id == Sku.product_id)
            .where(Sku.farm_id == farm_id)
            .order_by(Product.name, Sku.display_order, Sku.name)
        )
        if is_public is not None:
            stmt = stmt.where(Sku.is_public == is_public)
        if is_available is not None:
            stmt = stmt.where(Sku.is_available == is_available)
        result = await self.session.execute(stmt)
        return [(sku, product_name) for sku, product_name in result.all()]

    async def get_many_in_farm(self, farm_id: str, sku_ids: Sequence[str]) -> Dict[str, Sku]:
        if not sku_ids:
            return {}
        stmt = select(Sku).where(Sku.farm_id == farm_id, Sku.id.in_(set(sku_ids)))
        result = await self.session.execute(stmt)
        return {sku.id: sku for sku in result.scalars().all()}

    async def list_storefront(self, farm_id: str) -> List[Sku]:
        """Public and available SKUs of the farm, by display order."""
        stmt = (
            select(Sku)
            .where(Sku.farm_id == farm_id, Sku.is_public == True, Sku.is_available == True)
            .order_by(Sku.display_order, Sku.name)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def is_used_in_orders(self, sku_id: str) -> bool:
        stmt = select(func.count()).select_from(OrderItem).where(OrderItem.sku_id == sku_id)
        return int((await self.session.execute(stmt)).scalar_one()) > 0
