"""
Order Endpoints.

This module handles order intake. Creating an order schedules every item
backwards from its harvest date and generates the production tasks (soak,
seed, move to light, harvest) the farm works from.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from farmops.core.database.entities import Order
from farmops.core.database.repositories import OrderItemRepository, OrderRepository
from farmops.core.errors import NotFoundError
from farmops.core.models.domain import OrderStatus
from farmops.core.models.io import ApiResponse, DeletedResult, ErrorResponse
from farmops.core.models.io.orders import OrderClone, OrderCreate, OrderItemRead, OrderItemUpdate, OrderRead, OrderUpdate
from farmops.core.monitoring import log_domain_event
from farmops.server.services.deps import AdminRole, AnyRole, ManagerRole, SessionDep
from farmops.server.services.orders import OrderService

router = APIRouter()


async def load_order(session: SessionDep, farm_id: str, order_id: str) -> Order:
    order = await OrderRepository(session).get_in_farm(farm_id, order_id)
    if order is None:
        raise NotFoundError("Order", order_id)
    return order


@router.get(
    "",
    response_model=ApiResponse[List[OrderRead]],
    summary="List Orders",
    description="List orders of the farm, newest first, with items and products.",
    response_description="Matching orders.",
)
async def list_orders(
    farm_id: str,
    context: AnyRole,
    session: SessionDep,
    status_filter: Optional[OrderStatus] = Query(default=None, alias="status"),
    customer: Optional[str] = Query(default=None, description="Matches the customer name"),
) -> ApiResponse[List[OrderRead]]:
    orders = await OrderRepository(session).search(farm_id, status=status_filter, customer=customer)
    return ApiResponse(data=await OrderService(session).to_reads(orders))


@router.get(
    "/{order_id}",
    response_model=ApiResponse[OrderRead],
    summary="Get Order",
    description="Retrieve an order with items, products and production tasks.",
    response_description="The order.",
    responses={404: {"model": ErrorResponse, "description": "Order not found"}},
)
async def get_order(farm_id: str, order_id: str, context: AnyRole, session: SessionDep) -> ApiResponse[OrderRead]:
    order = await load_order(session, farm_id, order_id)
    return ApiResponse(data=await OrderService(session).to_read(order, include_tasks=True))


@router.post(
    "",
    response_model=ApiResponse[OrderRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Order",
    description="Create an order and schedule production for each item.",
    response_description="The created order with its scheduled items and tasks.",
    responses={400: {"model": ErrorResponse, "description": "Product lacks production settings"}},
)
async def create_order(
    farm_id: str, order_in: OrderCreate, context: ManagerRole, session: SessionDep
) -> ApiResponse[OrderRead]:
    """
    Create an order.

    - **order_number**: Optional; defaults to `ORD-{YEAR}-{NNN}`
    - **customer_id** / **customer_name**: A name without an id finds or creates the customer
    - **items**: At least one of product id, quantity in oz, harvest date and overage percent

    Each item's trays and soak, seed and move-to-light dates are computed from
    the product's settings; the product must have germination days, light
    days and a yield per tray.
    """
    service = OrderService(session)
    order = await service.create_order(farm_id, order_in)
    return ApiResponse(data=await service.to_read(order, include_tasks=True))


@router.patch(
    "/{order_id}",
    response_model=ApiResponse[OrderRead],
    summary="Update Order",
    description="Update order details, status and fulfilment information.",
    response_description="The updated order.",
)
async def update_order(
    farm_id: str, order_id: str, order_in: OrderUpdate, context: ManagerRole, session: SessionDep
) -> ApiResponse[OrderRead]:
    order = await load_order(session, farm_id, order_id)
    changes = order_in.model_dump(exclude_unset=True)
    order = await OrderRepository(session).apply(order, changes)
    if "status" in changes:
        log_domain_event("order_status_changed", farm_id=farm_id, order_id=order.id, status=order.status.value)
    return ApiResponse(data=await OrderService(session).to_read(order, include_tasks=True))


@router.delete(
    "/{order_id}",
    response_model=ApiResponse[DeletedResult],
    summary="Delete Order",
    description="Delete an order together with its items and tasks.",
    response_description="Deletion confirmation.",
)
async def delete_order(farm_id: str, order_id: str, context: AdminRole, session: SessionDep) -> ApiResponse[DeletedResult]:
    order = await load_order(session, farm_id, order_id)
    await OrderRepository(session).delete(order)
    log_domain_event("order_deleted", farm_id=farm_id, order_id=order_id)
    return ApiResponse(data=DeletedResult())


@router.post(
    "/{order_id}/clone",
    response_model=ApiResponse[OrderRead],
    status_code=status.HTTP_201_CREATED,
    summary="Clone Order",
    description="Repeat an order with harvest dates shifted by a number of days.",
    response_description="The new order.",
)
async def clone_order(
    farm_id: str, order_id: str, clone_in: OrderClone, context: ManagerRole, session: SessionDep
) -> ApiResponse[OrderRead]:
    """
    Clone an order.

    - **harvest_date_offset**: Days added to every harvest date (default 7)

    The clone gets a new order number and fresh production tasks.
    """
    service = OrderService(session)
    order = await load_order(session, farm_id, order_id)
    clone = await service.clone_order(order, clone_in.harvest_date_offset)
    return ApiResponse(data=await service.to_read(clone, include_tasks=True))


@router.patch(
    "/{order_id}/items/{item_id}",
    response_model=ApiResponse[OrderItemRead],
    summary="Update Order Item",
    description="Update an order item; quantity, harvest date or overage changes reschedule it.",
    response_description="The updated item with its production schedule.",
    responses={404: {"model": ErrorResponse, "description": "Order or item not found"}},
)
async def update_order_item(
    farm_id: str, order_id: str, item_id: str, item_in: OrderItemUpdate, context: ManagerRole, session: SessionDep
) -> ApiResponse[OrderItemRead]:
    """
    Update an order item.

    Changing the quantity, harvest date or overage recomputes the trays and
    production dates and moves the due dates of the item's tasks.
    """
    order = await load_order(session, farm_id, order_id)
    item = await OrderItemRepository(session).get_in_order(order.id, item_id)
    if item is None:
        raise NotFoundError("Order item", item_id)
    service = OrderService(session)
    item = await service.update_item(item, item_in)
    read = await service.to_read(order, include_tasks=True)
    return ApiResponse(data=next(entry for entry in read.items if entry.id == item.id))
