"""
Order Service.

Creates orders together with their production schedule: every item gets a
backward-computed schedule from its harvest date and the production tasks
(soak, seed, move to light, harvest) that follow from it. Also hosts order
cloning, item rescheduling and the read models that join items, products
and tasks onto an order.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from farmops.core.database.entities import Customer, Order, OrderItem, Product, Sku, Task
from farmops.core.database.repositories import (
    CustomerRepository,
    OrderItemRepository,
    OrderRepository,
    ProductRepository,
    TaskRepository,
)
from farmops.core.errors import NotFoundError, ValidationError
from farmops.core.logging_config import get_logger
from farmops.core.models.domain import CustomerType, OrderSource, OrderStatus, PaymentTerms, TaskPriority, TaskStatus
from farmops.core.models.io.orders import (
    OrderCreate,
    OrderItemRead,
    OrderItemUpdate,
    OrderProductSummary,
    OrderRead,
    OrderTaskSummary,
)
from farmops.core.monitoring import log_domain_event
from farmops.server.core.config import settings

from .production import (
    ProductionSchedule,
    calculate_production_schedule,
    generate_order_number,
    generate_storefront_order_number,
    plan_tasks,
    task_due_dates,
    validate_product_for_production,
)

logger = get_logger(__name__)


def schedule_for_product(
    product: Product,
    *,
    quantity_oz: float,
    harvest_date: datetime,
    overage_percent: float,
    default_yield: Optional[float] = None,
) -> ProductionSchedule:
    """Production schedule for ``product``; missing stage lengths count as zero days."""
    avg_yield = product.avg_yield_per_tray or default_yield
    if avg_yield is None:
        avg_yield = settings.storefront.default_yield_per_tray
    return calculate_production_schedule(
        quantity_oz=quantity_oz,
        avg_yield_per_tray=avg_yield,
        overage_percent=overage_percent,
        harvest_date=harvest_date,
        days_soaking=product.days_soaking,
        days_germination=product.days_germination or 0,
        days_light=product.days_light or 0,
    )


def ensure_product_schedulable(product: Product) -> None:
    """
    Raises:
        ValidationError: when the product lacks germination days, light days or a yield
    """
    missing = validate_product_for_production(
        days_germination=product.days_germination,
        days_light=product.days_light,
        avg_yield_per_tray=product.avg_yield_per_tray,
    )
    if missing:
        raise ValidationError(
            f"Product '{product.name}' is missing production settings: {', '.join(missing)}",
            details={"product_id": product.id, "missing": missing},
        )


class OrderService:
    """Order intake and production scheduling for one request session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.orders = OrderRepository(session)
        self.items = OrderItemRepository(session)
        self.tasks = TaskRepository(session)
        self.products = ProductRepository(session)
        self.customers = CustomerRepository(session)

    async def next_order_number(self, farm_id: str, storefront: bool = False) -> str:
        """Next free order number of the farm, based on the number of existing orders."""
        sequence = await self.orders.count_for_farm(farm_id) + 1
        while True:
            if storefront:
                number = generate_storefront_order_number(sequence)
            else:
                number = generate_order_number(sequence)
            if not await self.orders.list(limit=1, filters={"farm_id": farm_id, "order_number": number}):
                return number
            sequence += 1

    async def add_item(
        self,
        order: Order,
        product: Product,
        schedule: ProductionSchedule,
        *,
        quantity_oz: float,
        overage_percent: float,
        sku: Optional[Sku] = None,
        quantity: Optional[int] = None,
    ) -> OrderItem:
        """Add a scheduled item and its production tasks to ``order`` (flush only)."""
        item = OrderItem(
            order_id=order.id,
            product_id=product.id,
            sku_id=sku.id if sku else None,
            quantity=quantity,
            quantity_oz=quantity_oz,
            unit_price_cents=sku.price if sku else None,
            line_total_cents=sku.price * quantity if sku and quantity else None,
            harvest_date=schedule.harvest_date,
            overage_percent=overage_percent,
            trays_needed=schedule.trays_needed,
            soak_date=schedule.soak_date,
            seed_date=schedule.seed_date,
            move_to_light_date=schedule.move_to_light_date,
        )
        await self.items.create(item, commit=False)
        for plan in plan_tasks(product.name, quantity_oz, schedule):
            self.session.add(
                Task(
                    farm_id=order.farm_id,
                    order_item_id=item.id,
                    title=plan.title,
                    description=plan.description,
                    type=plan.type,
                    status=TaskStatus.TODO,
                    priority=TaskPriority.MEDIUM,
                    due_date=plan.due_date,
                )
            )
        await self.session.flush()
        return item

    async def resolve_customer(
        self, farm_id: str, customer_id: Optional[str], customer_name: Optional[str]
    ) -> Optional[Customer]:
        """Customer named by id, or found (or created) by name."""
        if customer_id:
            customer = await self.customers.get_in_farm(farm_id, customer_id)
            if customer is None:
                raise NotFoundError("Customer", customer_id)
            return customer
        if customer_name and customer_name.strip():
            name = customer_name.strip()
            customer = await self.customers.find_by_name(farm_id, name)
            if customer is None:
                customer = Customer(
                    farm_id=farm_id,
                    name=name,
                    customer_type=CustomerType.RETAIL,
                    payment_terms=PaymentTerms.DUE_ON_RECEIPT,
                )
                await self.customers.create(customer, commit=False)
                logger.info(f"Created customer '{name}' for farm {farm_id} from order intake")
            return customer
        return None

    async def create_order(self, farm_id: str, data: OrderCreate) -> Order:
        """Create an order, its scheduled items and their production tasks in one transaction."""
        products = await self.products.get_many([item.product_id for item in data.items])
        for item in data.items:
            product = products.get(item.product_id)
            if product is None or product.farm_id != farm_id:
                raise NotFoundError("Product", item.product_id)
            ensure_product_schedulable(product)

        customer = await self.resolve_customer(farm_id, data.customer_id, data.customer_name)
        order = Order(
            farm_id=farm_id,
            order_number=data.order_number or await self.next_order_number(farm_id),
            customer_id=customer.id if customer else None,
            customer_name=data.customer_name or (customer.name if customer else None),
            customer_email=customer.email if customer else None,
            customer_phone=customer.phone if customer else None,
            status=OrderStatus.PENDING,
            source=OrderSource.MANUAL,
            notes=data.notes,
        )
        await self.orders.create(order, commit=False)

        for item in data.items:
            product = products[item.product_id]
            schedule = schedule_for_product(
                product,
                quantity_oz=item.quantity_oz,
                harvest_date=item.harvest_date,
                overage_percent=item.overage_percent,
            )
            await self.add_item(
                order, product, schedule, quantity_oz=item.quantity_oz, overage_percent=item.overage_percent
            )

        await self.session.commit()
        log_domain_event("order_created", farm_id=farm_id, order_id=order.id, items=len(data.items))
        return order

    async def clone_order(self, order: Order, harvest_date_offset: int) -> Order:
        """Copy an order with every harvest date shifted by ``harvest_date_offset`` days."""
        clone = Order(
            farm_id=order.farm_id,
            order_number=await self.next_order_number(order.farm_id),
            customer_id=order.customer_id,
            customer_name=order.customer_name,
            customer_email=order.customer_email,
            customer_phone=order.customer_phone,
            status=OrderStatus.PENDING,
            source=OrderSource.MANUAL,
            notes=f"Cloned from {order.order_number}" + (f". {order.notes}" if order.notes else ""),
            total_cents=order.total_cents,
            delivery_method=order.delivery_method,
            delivery_address=order.delivery_address,
            special_instructions=order.special_instructions,
        )
        if order.delivery_date is not None:
            clone.delivery_date = order.delivery_date + timedelta(days=harvest_date_offset)
        await self.orders.create(clone, commit=False)

        source_items = (await self.items.items_for([order.id]))[order.id]
        products = await self.products.get_many([item.product_id for item in source_items])
        for source in source_items:
            product = products[source.product_id]
            schedule = schedule_for_product(
                product,
                quantity_oz=source.quantity_oz,
                harvest_date=source.harvest_date + timedelta(days=harvest_date_offset),
                overage_percent=source.overage_percent,
                default_yield=settings.storefront.default_yield_per_tray,
            )
            item = await self.add_item(
                clone, product, schedule, quantity_oz=source.quantity_oz, overage_percent=source.overage_percent
            )
            item.sku_id = source.sku_id
            item.quantity = source.quantity
            item.unit_price_cents = source.unit_price_cents
            item.line_total_cents = source.line_total_cents

        await self.session.commit()
        log_domain_event("order_cloned", farm_id=order.farm_id, source_order_id=order.id, order_id=clone.id)
        return clone

    async def update_item(self, item: OrderItem, changes: OrderItemUpdate) -> OrderItem:
        """Apply item changes; quantity, harvest date or overage changes reschedule the item and its tasks."""
        update_data = changes.model_dump(exclude_unset=True, exclude_none=True)
        for key, value in update_data.items():
            setattr(item, key, value)

        if {"quantity_oz", "harvest_date", "overage_percent"} & update_data.keys():
            product = await self.products.get_by_id(item.product_id)
            schedule = schedule_for_product(
                product,
                quantity_oz=item.quantity_oz,
                harvest_date=item.harvest_date,
                overage_percent=item.overage_percent,
                default_yield=settings.storefront.default_yield_per_tray,
            )
            item.trays_needed = schedule.trays_needed
            item.harvest_date = schedule.harvest_date
            item.soak_date = schedule.soak_date
            item.seed_date = schedule.seed_date
            item.move_to_light_date = schedule.move_to_light_date

            due_dates = task_due_dates(schedule)
            for task in (await self.tasks.tasks_for_items([item.id]))[item.id]:
                if task.type in due_dates:
                    task.due_date = due_dates[task.type]
                    self.session.add(task)
            logger.debug(f"Rescheduled order item {item.id}: {schedule.trays_needed} trays")

        return await self.items.update(item)

    async def to_reads(self, orders: Sequence[Order], include_tasks: bool = False) -> List[OrderRead]:
        """Order read models with items and products (and tasks when requested)."""
        items_by_order = await self.items.items_for([order.id for order in orders])
        all_items = [item for items in items_by_order.values() for item in items]
        products = await self.products.get_many([item.product_id for item in all_items])
        tasks_by_item = await self.tasks.tasks_for_items([item.id for item in all_items]) if include_tasks else {}

        reads = []
        for order in orders:
            items = [
                self._item_read(item, products.get(item.product_id), tasks_by_item.get(item.id), include_tasks)
                for item in items_by_order[order.id]
            ]
            reads.append(OrderRead.model_validate(order).model_copy(update={"items": items}))
        return reads

    async def to_read(self, order: Order, include_tasks: bool = False) -> OrderRead:
        return (await self.to_reads([order], include_tasks=include_tasks))[0]

    @staticmethod
    def _item_read(
        item: OrderItem, product: Optional[Product], tasks: Optional[Iterable[Task]], include_tasks: bool
    ) -> OrderItemRead:
        update = {"product": OrderProductSummary.model_validate(product) if product else None}
        if include_tasks:
            update["tasks"] = [OrderTaskSummary.model_validate(task) for task in tasks or []]
        return OrderItemRead.model_validate(item).model_copy(update=update)
