"""
Customer Relationship Endpoints.

This module handles customers and the tags used to group them. Customer
listings carry their tags and order counts; customer details add the most
recent orders.
"""

from typing import List, Optional, Sequence

from fastapi import APIRouter, Query, status

from farmops.core.database.entities import Customer, CustomerTag
from farmops.core.database.repositories import CustomerRepository, CustomerTagRepository
from farmops.core.errors import NotFoundError, ValidationError
from farmops.core.models.domain import CustomerType, OrderStatus
from farmops.core.models.io import ApiResponse, DeletedResult, ErrorResponse
from farmops.core.models.io.customers import (
    CustomerCreate,
    CustomerDetail,
    CustomerOrderSummary,
    CustomerRead,
    CustomerTagCreate,
    CustomerTagRead,
    CustomerTagUpdate,
    CustomerUpdate,
)
from farmops.server.services.deps import AdminRole, AnyRole, SalesRole, SessionDep

router = APIRouter()
tags_router = APIRouter()

RECENT_ORDERS_LIMIT = 10


async def _load_customer(session: SessionDep, farm_id: str, customer_id: str) -> Customer:
    customer = await CustomerRepository(session).get_in_farm(farm_id, customer_id)
    if customer is None:
        raise NotFoundError("Customer", customer_id)
    return customer


async def _load_tag(session: SessionDep, farm_id: str, tag_id: str) -> CustomerTag:
    tag = await CustomerTagRepository(session).get_in_farm(farm_id, tag_id)
    if tag is None:
        raise NotFoundError("Customer tag", tag_id)
    return tag


async def _check_tags(session: SessionDep, farm_id: str, tag_ids: Sequence[str]) -> None:
    unique_ids = set(tag_ids)
    if await CustomerTagRepository(session).count_in_farm(farm_id, list(unique_ids)) != len(unique_ids):
        raise ValidationError("One or more tags do not exist", details=[{"field": "tag_ids"}])


async def _to_reads(session: SessionDep, customers: List[Customer]) -> List[CustomerRead]:
    repo = CustomerRepository(session)
    ids = [customer.id for customer in customers]
    tags = await repo.tags_for(ids)
    counts = await repo.order_counts(ids)
    return [
        CustomerRead.model_validate(customer).model_copy(
            update={
                "tags": [CustomerTagRead.model_validate(tag) for tag in tags.get(customer.id, [])],
                "order_count": counts.get(customer.id, 0),
            }
        )
        for customer in customers
    ]


@router.get(
    "",
    response_model=ApiResponse[List[CustomerRead]],
    summary="List Customers",
    description="List customers of the farm ordered by name, with their tags and order counts.",
    response_description="Matching customers.",
)
async def list_customers(
    farm_id: str,
    context: AnyRole,
    session: SessionDep,
    search: Optional[str] = Query(default=None, description="Matches name, email or company name"),
    customer_type: Optional[CustomerType] = Query(default=None),
    is_active: Optional[bool] = Query(default=None),
    tag_id: Optional[str] = Query(default=None, description="Only customers with this tag"),
) -> ApiResponse[List[CustomerRead]]:
    customers = await CustomerRepository(session).search(
        farm_id, search=search, customer_type=customer_type, is_active=is_active, tag_id=tag_id
    )
    return ApiResponse(data=await _to_reads(session, customers))


@router.get(
    "/{customer_id}",
    response_model=ApiResponse[CustomerDetail],
    summary="Get Customer",
    description="Retrieve a customer with tags and the ten most recent orders.",
    response_description="The customer.",
    responses={404: {"model": ErrorResponse, "description": "Customer not found"}},
)
async def get_customer(
    farm_id: str, customer_id: str, context: AnyRole, session: SessionDep
) -> ApiResponse[CustomerDetail]:
    customer = await _load_customer(session, farm_id, customer_id)
    read = (await _to_reads(session, [customer]))[0]
    orders = await CustomerRepository(session).orders_for(customer.id, limit=RECENT_ORDERS_LIMIT)
    detail = CustomerDetail(
        **read.model_dump(exclude={"tags"}),
        tags=read.tags,
        recent_orders=[CustomerOrderSummary.model_validate(order) for order in orders],
    )
    return ApiResponse(data=detail)


@router.get(
    "/{customer_id}/orders",
    response_model=ApiResponse[List[CustomerOrderSummary]],
    summary="List Customer Orders",
    description="List orders of a customer, newest first.",
    response_description="Orders of the customer.",
)
async def list_customer_orders(
    farm_id: str,
    customer_id: str,
    context: AnyRole,
    session: SessionDep,
    status_filter: Optional[OrderStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=50, ge=1, le=500),
) -> ApiResponse[List[CustomerOrderSummary]]:
    customer = await _load_customer(session, farm_id, customer_id)
    orders = await CustomerRepository(session).orders_for(customer.id, status=status_filter, limit=limit)
    return ApiResponse(data=[CustomerOrderSummary.model_validate(order) for order in orders])


@router.post(
    "",
    response_model=ApiResponse[CustomerRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Customer",
    description="Create a customer, optionally with tags.",
    response_description="The created customer.",
)
async def create_customer(
    farm_id: str, customer_in: CustomerCreate, context: SalesRole, session: SessionDep
) -> ApiResponse[CustomerRead]:
    """
    Create a customer.

    - **name**: Contact or business name (1-100 characters)
    - **email**: Contact email; an empty string is stored as empty
    - **customer_type**: `RETAIL`, `WHOLESALE`, `RESTAURANT`, `FARMERS_MARKET`, `DISTRIBUTOR` or `OTHER`
    - **payment_terms**: `DUE_ON_RECEIPT`, `NET_7`, `NET_15`, `NET_30` or `NET_60`
    - **tag_ids**: Tags to assign
    """
    repo = CustomerRepository(session)
    tag_ids = customer_in.tag_ids or []
    await _check_tags(session, farm_id, tag_ids)
    customer = await repo.create(Customer(farm_id=farm_id, **customer_in.model_dump(exclude={"tag_ids"})), commit=False)
    await repo.set_tags(customer.id, tag_ids)
    await session.commit()
    await session.refresh(customer)
    return ApiResponse(data=(await _to_reads(session, [customer]))[0])


@router.patch(
    "/{customer_id}",
    response_model=ApiResponse[CustomerRead],
    summary="Update Customer",
    description="Update a customer; `tag_ids` replaces the assigned tags.",
    response_description="The updated customer.",
)
async def update_customer(
    farm_id: str, customer_id: str, customer_in: CustomerUpdate, context: SalesRole, session: SessionDep
) -> ApiResponse[CustomerRead]:
    repo = CustomerRepository(session)
    customer = await _load_customer(session, farm_id, customer_id)
    changes = customer_in.model_dump(exclude_unset=True)
    tag_ids = changes.pop("tag_ids", None)
    if tag_ids is not None:
        await _check_tags(session, farm_id, tag_ids)
        await repo.set_tags(customer.id, tag_ids)
    customer = await repo.apply(customer, changes)
    return ApiResponse(data=(await _to_reads(session, [customer]))[0])


@router.delete(
    "/{customer_id}",
    response_model=ApiResponse[CustomerRead],
    summary="Deactivate Customer",
    description="Soft-delete a customer by marking it inactive; its orders are kept.",
    response_description="The deactivated customer.",
)
async def delete_customer(
    farm_id: str, customer_id: str, context: AdminRole, session: SessionDep
) -> ApiResponse[CustomerRead]:
    customer = await _load_customer(session, farm_id, customer_id)
    customer = await CustomerRepository(session).apply(customer, {"is_active": False})
    return ApiResponse(data=(await _to_reads(session, [customer]))[0])


@tags_router.get(
    "",
    response_model=ApiResponse[List[CustomerTagRead]],
    summary="List Customer Tags",
    description="List the farm's customer tags with the number of customers carrying each.",
    response_description="Tags of the farm.",
)
async def list_tags(farm_id: str, context: AnyRole, session: SessionDep) -> ApiResponse[List[CustomerTagRead]]:
    tags = await CustomerTagRepository(session).list_with_counts(farm_id)
    return ApiResponse(
        data=[CustomerTagRead.model_validate(tag).model_copy(update={"customer_count": count}) for tag, count in tags]
    )


@tags_router.post(
    "",
    response_model=ApiResponse[CustomerTagRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Customer Tag",
    description="Create a customer tag.",
    response_description="The created tag.",
    responses={409: {"model": ErrorResponse, "description": "Tag name already used in this farm"}},
)
async def create_tag(
    farm_id: str, tag_in: CustomerTagCreate, context: SalesRole, session: SessionDep
) -> ApiResponse[CustomerTagRead]:
    """
    Create a tag.

    - **name**: Tag name, unique within the farm (1-50 characters)
    - **color**: Hex color such as `#3b82f6`
    """
    tag = await CustomerTagRepository(session).create(CustomerTag(farm_id=farm_id, **tag_in.model_dump()))
    return ApiResponse(data=CustomerTagRead.model_validate(tag).model_copy(update={"customer_count": 0}))


@tags_router.patch(
    "/{tag_id}",
    response_model=ApiResponse[CustomerTagRead],
    summary="Update Customer Tag",
    description="Rename or recolor a customer tag.",
    response_description="The updated tag.",
)
async def update_tag(
    farm_id: str, tag_id: str, tag_in: CustomerTagUpdate, context: SalesRole, session: SessionDep
) -> ApiResponse[CustomerTagRead]:
    tag = await _load_tag(session, farm_id, tag_id)
    tag = await CustomerTagRepository(session).apply(tag, tag_in.model_dump(exclude_unset=True))
    return ApiResponse(data=CustomerTagRead.model_validate(tag))


@tags_router.delete(
    "/{tag_id}",
    response_model=ApiResponse[DeletedResult],
    summary="Delete Customer Tag",
    description="Delete a customer tag and remove it from every customer.",
    response_description="Deletion confirmation.",
)
async def delete_tag(farm_id: str, tag_id: str, context: SalesRole, session: SessionDep) -> ApiResponse[DeletedResult]:
    tag = await _load_tag(session, farm_id, tag_id)
    await CustomerTagRepository(session).delete(tag)
    return ApiResponse(data=DeletedResult())
