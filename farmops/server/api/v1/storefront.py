"""
Public Storefront Endpoints.

This module serves a farm's public shop, addressed by the farm slug: the
catalog, delivery-date availability and order submission. No authentication
is required.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Query, status

from farmops.core.models.io import ApiResponse, ErrorResponse
from farmops.core.models.io.storefront import (
    StorefrontAvailability,
    StorefrontCatalog,
    StorefrontOrderCreate,
    StorefrontOrderResult,
)
from farmops.server.services import storefront
from farmops.server.services.deps import SessionDep

router = APIRouter()


@router.get(
    "/{slug}",
    response_model=ApiResponse[StorefrontCatalog],
    summary="Get Storefront",
    description="The farm's public catalog: categories and active products with public, available SKUs.",
    response_description="Farm details and catalog.",
    responses={404: {"model": ErrorResponse, "description": "Farm not found"}},
)
async def get_storefront(slug: str, session: SessionDep) -> ApiResponse[StorefrontCatalog]:
    farm = await storefront.get_farm_by_slug(session, slug)
    return ApiResponse(data=await storefront.build_catalog(session, farm))


@router.get(
    "/{slug}/availability",
    response_model=ApiResponse[StorefrontAvailability],
    summary="Check Delivery Date",
    description="Check whether a delivery date respects the farm's minimum notice.",
    response_description="Availability with the earliest orderable date.",
)
async def check_availability(
    slug: str,
    session: SessionDep,
    requested: Optional[date] = Query(default=None, alias="date", description="Requested delivery date"),
) -> ApiResponse[StorefrontAvailability]:
    await storefront.get_farm_by_slug(session, slug)
    return ApiResponse(data=storefront.check_availability(requested))


@router.post(
    "/{slug}/orders",
    response_model=ApiResponse[StorefrontOrderResult],
    status_code=status.HTTP_201_CREATED,
    summary="Place Storefront Order",
    description="Place an order from the public storefront.",
    response_description="Order number, total and (for upfront payment) the payment link.",
    responses={400: {"model": ErrorResponse, "description": "Invalid items or delivery date"}},
)
async def place_order(
    slug: str, order_in: StorefrontOrderCreate, session: SessionDep
) -> ApiResponse[StorefrontOrderResult]:
    """
    Place an order.

    - **customer_name** / **customer_email**: The buyer; an existing customer with the same email is reused
    - **delivery_date**: Must respect the minimum notice
    - **delivery_method**: `PICKUP` or `DELIVERY`
    - **items**: SKU ids with quantities; every SKU must be public and available

    Production is scheduled to harvest on the delivery date.
    """
    farm = await storefront.get_farm_by_slug(session, slug)
    return ApiResponse(data=await storefront.submit_order(session, farm, order_in))
