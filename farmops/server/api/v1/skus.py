"""
SKU Endpoints.

This module handles SKUs, the sellable variants of a product (package size
and price), including their product images and the farm-wide SKU listing.
"""

from typing import List, Optional

from fastapi import APIRouter, File, Query, UploadFile, status

from farmops.core.database.entities import Product, Sku
from farmops.core.database.repositories import ProductRepository, SkuRepository
from farmops.core.errors import BadRequestError, NotFoundError
from farmops.core.logging_config import get_logger
from farmops.core.models.io import ApiResponse, DeletedResult, ErrorResponse
from farmops.core.models.io.products import SkuCreate, SkuRead, SkuUpdate
from farmops.server.services import uploads
from farmops.server.services.deps import AdminRole, AnyRole, SessionDep

logger = get_logger(__name__)

router = APIRouter()
farm_skus_router = APIRouter()


async def _load_product(session: SessionDep, farm_id: str, product_id: str) -> Product:
    product = await ProductRepository(session).get_in_farm(farm_id, product_id)
    if product is None:
        raise NotFoundError("Product", product_id)
    return product


async def _load_sku(session: SessionDep, farm_id: str, product_id: str, sku_id: str) -> Sku:
    sku = await SkuRepository(session).get_in_farm(farm_id, sku_id)
    if sku is None or sku.product_id != product_id:
        raise NotFoundError("SKU", sku_id)
    return sku


def _read(sku: Sku, product_name: Optional[str] = None) -> SkuRead:
    return SkuRead.model_validate(sku).model_copy(update={"product_name": product_name})


@farm_skus_router.get(
    "",
    response_model=ApiResponse[List[SkuRead]],
    summary="List Farm SKUs",
    description="List every SKU of the farm with its product name.",
    response_description="SKUs of the farm.",
)
async def list_farm_skus(
    farm_id: str,
    context: AnyRole,
    session: SessionDep,
    is_public: Optional[bool] = Query(default=None, description="Only public (or only hidden) SKUs"),
    is_available: Optional[bool] = Query(default=None, description="Only available (or only unavailable) SKUs"),
) -> ApiResponse[List[SkuRead]]:
    skus = await SkuRepository(session).list_for_farm(farm_id, is_public=is_public, is_available=is_available)
    return ApiResponse(data=[_read(sku, product_name) for sku, product_name in skus])


@router.get(
    "",
    response_model=ApiResponse[List[SkuRead]],
    summary="List Product SKUs",
    description="List the SKUs of a product ordered by display order, then name.",
    response_description="SKUs of the product.",
    responses={404: {"model": ErrorResponse, "description": "Product not found"}},
)
async def list_skus(
    farm_id: str, product_id: str, context: AnyRole, session: SessionDep
) -> ApiResponse[List[SkuRead]]:
    product = await _load_product(session, farm_id, product_id)
    skus = await SkuRepository(session).list_for_product(product.id)
    return ApiResponse(data=[_read(sku, product.name) for sku in skus])


@router.get(
    "/{sku_id}",
    response_model=ApiResponse[SkuRead],
    summary="Get SKU",
    description="Retrieve a single SKU of a product.",
    response_description="The SKU.",
    responses={404: {"model": ErrorResponse, "description": "SKU not found"}},
)
async def get_sku(
    farm_id: str, product_id: str, sku_id: str, context: AnyRole, session: SessionDep
) -> ApiResponse[SkuRead]:
    product = await _load_product(session, farm_id, product_id)
    sku = await _load_sku(session, farm_id, product_id, sku_id)
    return ApiResponse(data=_read(sku, product.name))


@router.post(
    "",
    response_model=ApiResponse[SkuRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create SKU",
    description="Create a SKU for a product.",
    response_description="The created SKU.",
    responses={409: {"model": ErrorResponse, "description": "SKU code already used in this farm"}},
)
async def create_sku(
    farm_id: str, product_id: str, sku_in: SkuCreate, context: AdminRole, session: SessionDep
) -> ApiResponse[SkuRead]:
    """
    Create a SKU.

    - **sku_code**: Code unique within the farm (1-50 characters)
    - **name**: Display name (1-100 characters)
    - **weight_oz**: Net weight of one unit in oz
    - **price**: Unit price in cents
    - **is_public**: Listed on the storefront
    """
    product = await _load_product(session, farm_id, product_id)
    sku = await SkuRepository(session).create(Sku(farm_id=farm_id, product_id=product.id, **sku_in.model_dump()))
    return ApiResponse(data=_read(sku, product.name))


@router.patch(
    "/{sku_id}",
    response_model=ApiResponse[SkuRead],
    summary="Update SKU",
    description="Update a SKU; only the provided fields change.",
    response_description="The updated SKU.",
)
async def update_sku(
    farm_id: str, product_id: str, sku_id: str, sku_in: SkuUpdate, context: AdminRole, session: SessionDep
) -> ApiResponse[SkuRead]:
    product = await _load_product(session, farm_id, product_id)
    sku = await _load_sku(session, farm_id, product_id, sku_id)
    sku = await SkuRepository(session).apply(sku, sku_in.model_dump(exclude_unset=True))
    return ApiResponse(data=_read(sku, product.name))


@router.delete(
    "/{sku_id}",
    response_model=ApiResponse[DeletedResult],
    summary="Delete SKU",
    description="Delete a SKU that no order item references.",
    response_description="Deletion confirmation.",
    responses={400: {"model": ErrorResponse, "description": "SKU is used in orders"}},
)
async def delete_sku(
    farm_id: str, product_id: str, sku_id: str, context: AdminRole, session: SessionDep
) -> ApiResponse[DeletedResult]:
    repo = SkuRepository(session)
    sku = await _load_sku(session, farm_id, product_id, sku_id)
    if await repo.is_used_in_orders(sku.id):
        raise BadRequestError("Cannot delete SKU that is used in orders", code="IN_USE")
    image_url = sku.image_url
    await repo.delete(sku)
    uploads.remove_upload(image_url)
    return ApiResponse(data=DeletedResult())


@router.post(
    "/{sku_id}/image",
    response_model=ApiResponse[SkuRead],
    summary="Upload SKU Image",
    description="Upload a png, jpeg or webp image for a SKU; any previous image is replaced.",
    response_description="The SKU with its new image URL.",
    responses={400: {"model": ErrorResponse, "description": "Invalid file type"}},
)
async def upload_sku_image(
    farm_id: str,
    product_id: str,
    sku_id: str,
    context: AdminRole,
    session: SessionDep,
    file: UploadFile = File(..., description="Image file (png, jpeg, jpg or webp)"),
) -> ApiResponse[SkuRead]:
    """
    Upload SKU image.

    The file is stored as `skus/{sku_id}{ext}` and served from `/uploads`.
    """
    product = await _load_product(session, farm_id, product_id)
    sku = await _load_sku(session, farm_id, product_id, sku_id)
    sku.image_url = await uploads.save_image(file, "skus", sku.id, previous_url=sku.image_url)
    sku = await SkuRepository(session).update(sku)
    return ApiResponse(data=_read(sku, product.name))


@router.delete(
    "/{sku_id}/image",
    response_model=ApiResponse[SkuRead],
    summary="Remove SKU Image",
    description="Remove the SKU image file and clear its URL.",
    response_description="The SKU without an image.",
)
async def delete_sku_image(
    farm_id: str, product_id: str, sku_id: str, context: AdminRole, session: SessionDep
) -> ApiResponse[SkuRead]:
    product = await _load_product(session, farm_id, product_id)
    sku = await _load_sku(session, farm_id, product_id, sku_id)
    uploads.remove_upload(sku.image_url)
    sku.image_url = None
    sku = await SkuRepository(session).update(sku)
    return ApiResponse(data=_read(sku, product.name))
