"""
Public Storefront Service.

Resolves a farm by slug and serves its public catalog, delivery-date
availability and order submission. Submitted orders go through the same
production scheduling as manual orders.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from farmops.core.database.entities import Customer, Farm, Order
from farmops.core.database.repositories import (
    CustomerRepository,
    FarmRepository,
    PaymentSettingsRepository,
    ProductCategoryRepository,
    ProductRepository,
    SkuRepository,
)
from farmops.core.errors import BadRequestError, NotFoundError
from farmops.core.logging_config import get_logger
from farmops.core.models.domain import CustomerType, OrderSource, OrderStatus, PaymentTerms, PaymentTiming
from farmops.core.models.io.storefront import (
    StorefrontAvailability,
    StorefrontCatalog,
    StorefrontCategory,
    StorefrontFarm,
    StorefrontOrderCreate,
    StorefrontOrderResult,
    StorefrontProduct,
    StorefrontSku,
)
from farmops.core.monitoring import log_domain_event
from farmops.server.core.config import settings

from .orders import OrderService, schedule_for_product
from .payments import create_payment_link
from .production import start_of_day

logger = get_logger(__name__)


async def get_farm_by_slug(session: AsyncSession, slug: str) -> Farm:
    farm = await FarmRepository(session).get_by_slug(slug)
    if farm is None:
        raise NotFoundError("Farm")
    return farm


def min_order_date(today: Optional[date] = None) -> date:
    """Earliest delivery date that respects the minimum lead time."""
    today = today or datetime.now().date()
    return today + timedelta(days=settings.storefront.min_lead_days)


def check_availability(requested: Optional[date], today: Optional[date] = None) -> StorefrontAvailability:
    earliest = min_order_date(today)
    if requested is not None and requested < earliest:
        return StorefrontAvailability(
            requested_date=requested,
            available=False,
            reason=f"Orders require at least {settings.storefront.min_lead_days} days notice",
            min_order_date=earliest,
        )
    return StorefrontAvailability(requested_date=requested, available=True, min_order_date=earliest)


async def build_catalog(session: AsyncSession, farm: Farm) -> StorefrontCatalog:
    """Active products that have at least one public, available SKU."""
    skus = await SkuRepository(session).list_storefront(farm.id)
    skus_by_product: dict[str, list[StorefrontSku]] = {}
    for sku in skus:
        skus_by_product.setdefault(sku.product_id, []).append(
            StorefrontSku(
                id=sku.id,
                sku_code=sku.sku_code,
                name=sku.name,
                weight_oz=sku.weight_oz,
                price=sku.price,
                image_url=sku.image_url,
                display_order=sku.display_order,
                stock_quantity=sku.stock_quantity,
            )
        )

    products = [
        StorefrontProduct(
            id=product.id,
            name=product.name,
            description=product.description,
            category_id=product.category_id,
            skus=skus_by_product[product.id],
        )
        for product in await ProductRepository(session).list_for_farm(farm.id, active_only=True)
        if product.id in skus_by_product
    ]
    categories = [
        StorefrontCategory(id=category.id, name=category.name, display_order=category.display_order)
        for category in await ProductCategoryRepository(session).list_for_farm(farm.id)
    ]
    return StorefrontCatalog(
        farm=StorefrontFarm.model_validate(farm, from_attributes=True),
        categories=categories,
        products=products,
    )


async def find_or_create_customer(session: AsyncSession, farm_id: str, data: StorefrontOrderCreate) -> Customer:
    """Match the buyer to an existing customer by email, or create a retail customer."""
    customers = CustomerRepository(session)
    customer = await customers.find_by_email(farm_id, data.customer_email)
    if customer is not None:
        if not customer.phone and data.customer_phone:
            customer.phone = data.customer_phone
            await customers.update(customer, commit=False)
        return customer

    customer = Customer(
        farm_id=farm_id,
        name=data.customer_name,
        email=data.customer_email,
        phone=data.customer_phone,
        customer_type=CustomerType.RETAIL,
        payment_terms=PaymentTerms.DUE_ON_RECEIPT,
    )
    await customers.create(customer, commit=False)
    logger.info(f"Created storefront customer {customer.id} for farm {farm_id}")
    return customer


async def submit_order(
    session: AsyncSession, farm: Farm, data: StorefrontOrderCreate, today: Optional[date] = None
) -> StorefrontOrderResult:
    """Validate and place a storefront order with its production schedule.

    Raises:
        BadRequestError: ``INVALID_SKU`` when an item is not for sale,
            ``INVALID_DELIVERY_DATE`` when the lead time is not respected
    """
    sku_ids = [item.sku_id for item in data.items]
    skus = await SkuRepository(session).get_many_in_farm(farm.id, sku_ids)
    if any(sku_id not in skus or not skus[sku_id].is_available or not skus[sku_id].is_public for sku_id in sku_ids):
        raise BadRequestError("One or more items are unavailable", code="INVALID_SKU")

    earliest = min_order_date(today)
    if data.delivery_date < earliest:
        raise BadRequestError(
            f"Delivery date must be on or after {earliest.isoformat()}", code="INVALID_DELIVERY_DATE"
        )

    products = await ProductRepository(session).get_many([sku.product_id for sku in skus.values()])
    customer = await find_or_create_customer(session, farm.id, data)

    service = OrderService(session)
    delivery = start_of_day(data.delivery_date)
    order = Order(
        farm_id=farm.id,
        order_number=await service.next_order_number(farm.id, storefront=True),
        customer_id=customer.id,
        customer_name=data.customer_name,
        customer_email=data.customer_email,
        customer_phone=data.customer_phone,
        status=OrderStatus.PENDING,
        source=OrderSource.STOREFRONT,
        notes=data.notes,
        delivery_date=delivery,
        delivery_method=data.delivery_method,
        delivery_address=data.delivery_address,
    )
    await service.orders.create(order, commit=False)

    overage = settings.storefront.default_overage_percent
    total_cents = 0
    for line in data.items:
        sku = skus[line.sku_id]
        product = products[sku.product_id]
        quantity_oz = sku.weight_oz * line.quantity
        schedule = schedule_for_product(
            product,
            quantity_oz=quantity_oz,
            harvest_date=delivery,
            overage_percent=overage,
            default_yield=settings.storefront.default_yield_per_tray,
        )
        item = await service.add_item(
            order, product, schedule, quantity_oz=quantity_oz, overage_percent=overage, sku=sku, quantity=line.quantity
        )
        total_cents += item.line_total_cents or 0

    order.total_cents = total_cents
    session.add(order)

    payment_link = None
    payment_settings = await PaymentSettingsRepository(session).get_by_farm(farm.id)
    if (
        payment_settings is not None
        and payment_settings.payment_timing == PaymentTiming.UPFRONT
        and payment_settings.accepts_online_payments
        and total_cents > 0
    ):
        payment = await create_payment_link(
            session,
            order,
            payment_settings,
            amount=total_cents,
            customer_email=data.customer_email,
            customer_name=data.customer_name,
            commit=False,
        )
        payment_link = payment.payment_link_url

    await session.commit()
    log_domain_event(
        "storefront_order_submitted", farm_id=farm.id, order_id=order.id, total_cents=total_cents, items=len(data.items)
    )
    return StorefrontOrderResult(
        order_id=order.id, order_number=order.order_number, total_cents=total_cents, payment_link=payment_link
    )
