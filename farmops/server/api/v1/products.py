"""
Product Catalog Endpoints.

This module handles product categories and products: the grow varieties
with the production parameters (soak, germination and light days, yield per
tray) that drive order scheduling.
"""

from typing import List, Optional

from fastapi import APIRouter, status

from farmops.core.database.entities import Product, ProductCategory
from farmops.core.database.repositories import ProductCategoryRepository, ProductRepository
from farmops.core.errors import BadRequestError, NotFoundError, ValidationError
from farmops.core.models.io import ApiResponse, DeletedResult, ErrorResponse
from farmops.core.models.io.products import (
    ProductCategoryCreate,
    ProductCategoryRead,
    ProductCreate,
    ProductRead,
    ProductUpdate,
)
from farmops.server.services.deps import AdminRole, AnyRole, ManagerRole, SessionDep

router = APIRouter()
categories_router = APIRouter()


async def _load_product(session: SessionDep, farm_id: str, product_id: str) -> Product:
    product = await ProductRepository(session).get_in_farm(farm_id, product_id)
    if product is None:
        raise NotFoundError("Product", product_id)
    return product


async def _check_category(session: SessionDep, farm_id: str, category_id: Optional[str]) -> None:
    if category_id and await ProductCategoryRepository(session).get_in_farm(farm_id, category_id) is None:
        raise ValidationError("Invalid category", details=[{"field": "category_id", "value": category_id}])


async def _to_reads(session: SessionDep, farm_id: str, products: List[Product]) -> List[ProductRead]:
    categories = {category.id: category for category in await ProductCategoryRepository(session).list_for_farm(farm_id)}
    counts = await ProductRepository(session).sku_counts([product.id for product in products])
    reads = []
    for product in products:
        category = categories.get(product.category_id) if product.category_id else None
        reads.append(
            ProductRead.model_validate(product).model_copy(
                update={
                    "category": ProductCategoryRead.model_validate(category) if category else None,
                    "sku_count": counts.get(product.id, 0),
                }
            )
        )
    return reads


@categories_router.get(
    "",
    response_model=ApiResponse[List[ProductCategoryRead]],
    summary="List Product Categories",
    description="List the farm's product categories in display order.",
    response_description="Categories of the farm.",
)
async def list_categories(
    farm_id: str, context: AnyRole, session: SessionDep
) -> ApiResponse[List[ProductCategoryRead]]:
    categories = await ProductCategoryRepository(session).list_for_farm(farm_id)
    return ApiResponse(data=[ProductCategoryRead.model_validate(category) for category in categories])


@categories_router.post(
    "",
    response_model=ApiResponse[ProductCategoryRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Product Category",
    description="Create a product category.",
    response_description="The created category.",
)
async def create_category(
    farm_id: str, category_in: ProductCategoryCreate, context: ManagerRole, session: SessionDep
) -> ApiResponse[ProductCategoryRead]:
    """
    Create a category.

    - **name**: Category name (1-50 characters)
    - **display_order**: Position in catalog listings
    """
    category = ProductCategory(farm_id=farm_id, **category_in.model_dump())
    category = await ProductCategoryRepository(session).create(category)
    return ApiResponse(data=ProductCategoryRead.model_validate(category))


@router.get(
    "",
    response_model=ApiResponse[List[ProductRead]],
    summary="List Products",
    description="List the farm's products ordered by name, with their SKU counts.",
    response_description="Products of the farm.",
)
async def list_products(farm_id: str, context: AnyRole, session: SessionDep) -> ApiResponse[List[ProductRead]]:
    products = await ProductRepository(session).list_for_farm(farm_id)
    return ApiResponse(data=await _to_reads(session, farm_id, products))


@router.get(
    "/{product_id}",
    response_model=ApiResponse[ProductRead],
    summary="Get Product",
    description="Retrieve a single product.",
    response_description="The product.",
    responses={404: {"model": ErrorResponse, "description": "Product not found"}},
)
async def get_product(farm_id: str, product_id: str, context: AnyRole, session: SessionDep) -> ApiResponse[ProductRead]:
    product = await _load_product(session, farm_id, product_id)
    return ApiResponse(data=(await _to_reads(session, farm_id, [product]))[0])


@router.post(
    "",
    response_model=ApiResponse[ProductRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Product",
    description="Create a product with its production parameters.",
    response_description="The created product.",
)
async def create_product(
    farm_id: str, product_in: ProductCreate, context: ManagerRole, session: SessionDep
) -> ApiResponse[ProductRead]:
    """
    Create a product.

    - **name**: Variety name (1-100 characters)
    - **days_soaking**: Soak days before seeding (0 or empty for none)
    - **days_germination**: Blackout days after seeding
    - **days_light**: Days under lights before harvest
    - **avg_yield_per_tray**: Expected harvest per tray in oz

    Germination days, light days and yield are needed before the product can be ordered.
    """
    await _check_category(session, farm_id, product_in.category_id)
    product = await ProductRepository(session).create(Product(farm_id=farm_id, **product_in.model_dump()))
    return ApiResponse(data=(await _to_reads(session, farm_id, [product]))[0])


@router.patch(
    "/{product_id}",
    response_model=ApiResponse[ProductRead],
    summary="Update Product",
    description="Update a product; only the provided fields change.",
    response_description="The updated product.",
)
async def update_product(
    farm_id: str, product_id: str, product_in: ProductUpdate, context: ManagerRole, session: SessionDep
) -> ApiResponse[ProductRead]:
    product = await _load_product(session, farm_id, product_id)
    changes = product_in.model_dump(exclude_unset=True)
    await _check_category(session, farm_id, changes.get("category_id"))
    product = await ProductRepository(session).apply(product, changes)
    return ApiResponse(data=(await _to_reads(session, farm_id, [product]))[0])


@router.delete(
    "/{product_id}",
    response_model=ApiResponse[DeletedResult],
    summary="Delete Product",
    description="Delete a product that no order uses.",
    response_description="Deletion confirmation.",
    responses={400: {"model": ErrorResponse, "description": "Product is used in orders"}},
)
async def delete_product(
    farm_id: str, product_id: str, context: AdminRole, session: SessionDep
) -> ApiResponse[DeletedResult]:
    repo = ProductRepository(session)
    product = await _load_product(session, farm_id, product_id)
    if await repo.is_used_in_orders(product.id):
        raise BadRequestError("Cannot delete product that is used in orders", code="IN_USE")
    await repo.delete(product)
    return ApiResponse(data=DeletedResult())
