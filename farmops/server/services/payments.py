"""
Payment Service.

Payments are recorded by the farm itself: manual payments, shareable payment
links that a customer settles from the public checkout page, and refunds.
"""

from __future__ import annotations

import secrets
from datetime import timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from farmops.core.database.base import utc_now
from farmops.core.database.entities import Order, Payment, PaymentSettings
from farmops.core.database.repositories import (
    FarmRepository,
    OrderItemRepository,
    PaymentRepository,
    ProductRepository,
    SkuRepository,
)
from farmops.core.errors import BadRequestError, NotFoundError
from farmops.core.logging_config import get_logger
from farmops.core.models.domain import PaymentMethod, PaymentProcessor, PaymentStatus
from farmops.core.models.io.payments import (
    ManualPaymentCreate,
    PaymentLinkDetails,
    PaymentLinkItem,
    PaymentLinkPaid,
    PaymentLinkPay,
    PaymentSettingsRead,
    RefundCreate,
)
from farmops.core.monitoring import log_domain_event
from farmops.server.core.config import settings

logger = get_logger(__name__)

DEFAULT_LINK_EXPIRY_HOURS = 72

PAYABLE_STATUSES = (PaymentStatus.PENDING, PaymentStatus.PROCESSING)


def settings_read(payment_settings: PaymentSettings) -> PaymentSettingsRead:
    """Settings with the derived connection flags."""
    return PaymentSettingsRead.model_validate(payment_settings).model_copy(
        update={
            "is_connected": payment_settings.preferred_processor != PaymentProcessor.MANUAL
            and payment_settings.accepts_online_payments,
            "can_accept_payments": payment_settings.accepts_online_payments,
        }
    )


def platform_fee(amount: int, payment_settings: Optional[PaymentSettings]) -> int:
    if payment_settings is None:
        return 0
    return round(amount * payment_settings.platform_fee_percent / 100)


def payment_link_url(link_id: str) -> str:
    return f"{settings.frontend_url.rstrip('/')}/pay/{link_id}"


async def record_manual_payment(session: AsyncSession, order: Order, data: ManualPaymentCreate) -> Payment:
    payment = Payment(
        farm_id=order.farm_id,
        order_id=order.id,
        amount=data.amount,
        method=PaymentMethod(data.method),
        status=PaymentStatus.SUCCEEDED,
        customer_name=data.customer_name or order.customer_name,
        customer_email=data.customer_email or order.customer_email,
        reference=data.reference,
        paid_at=utc_now(),
    )
    payment = await PaymentRepository(session).create(payment)
    log_domain_event("payment_recorded", farm_id=order.farm_id, order_id=order.id, amount=data.amount)
    return payment


async def create_payment_link(
    session: AsyncSession,
    order: Order,
    payment_settings: Optional[PaymentSettings],
    *,
    amount: int,
    customer_email: str,
    customer_name: Optional[str] = None,
    expires_in_hours: int = DEFAULT_LINK_EXPIRY_HOURS,
    commit: bool = True,
) -> Payment:
    """Create a pending payment with a shareable checkout link."""
    link_id = secrets.token_hex(16)
    payment = Payment(
        farm_id=order.farm_id,
        order_id=order.id,
        amount=amount,
        status=PaymentStatus.PENDING,
        method=PaymentMethod.PAYMENT_LINK,
        platform_fee=platform_fee(amount, payment_settings),
        customer_email=customer_email,
        customer_name=customer_name,
        payment_link_id=link_id,
        payment_link_url=payment_link_url(link_id),
        payment_link_expires_at=utc_now() + timedelta(hours=expires_in_hours),
    )
    payment = await PaymentRepository(session).create(payment, commit=commit)
    logger.info(f"Created payment link {link_id} for order {order.order_number}")
    return payment


async def refund_payment(session: AsyncSession, payment: Payment, data: RefundCreate) -> Payment:
    """
    Raises:
        BadRequestError: when the payment has not succeeded or the amount exceeds it
    """
    if payment.status != PaymentStatus.SUCCEEDED:
        raise BadRequestError("Only succeeded payments can be refunded", code="INVALID_STATUS")
    amount = data.amount if data.amount is not None else payment.amount
    if amount > payment.amount:
        raise BadRequestError("Refund amount exceeds the payment amount", code="INVALID_AMOUNT")

    payment.refunded_amount = amount
    payment.refund_reason = data.reason
    payment.status = PaymentStatus.REFUNDED if amount >= payment.amount else PaymentStatus.PARTIALLY_REFUNDED
    payment = await PaymentRepository(session).update(payment)
    log_domain_event("payment_refunded", farm_id=payment.farm_id, payment_id=payment.id, amount=amount)
    return payment


def _is_expired(payment: Payment) -> bool:
    return payment.payment_link_expires_at is not None and utc_now() > payment.payment_link_expires_at


async def _get_link(session: AsyncSession, link_id: str) -> Payment:
    payment = await PaymentRepository(session).get_by_link_id(link_id)
    if payment is None:
        raise NotFoundError("Payment link")
    return payment


async def get_payment_link(session: AsyncSession, link_id: str) -> PaymentLinkDetails | PaymentLinkPaid:
    """Public checkout view of a payment link.

    Raises:
        NotFoundError: unknown link
        BadRequestError: ``EXPIRED`` for an expired link
    """
    payment = await _get_link(session, link_id)
    if _is_expired(payment):
        raise BadRequestError("This payment link has expired", code="EXPIRED")
    if payment.status == PaymentStatus.SUCCEEDED:
        return PaymentLinkPaid(paid_at=payment.paid_at)

    order = await session.get(Order, payment.order_id)
    farm = await FarmRepository(session).get_by_id(payment.farm_id)
    items = (await OrderItemRepository(session).items_for([order.id]))[order.id]
    products = await ProductRepository(session).get_many([item.product_id for item in items])
    skus = await SkuRepository(session).get_many_in_farm(order.farm_id, [item.sku_id for item in items if item.sku_id])
    return PaymentLinkDetails(
        payment_id=payment.id,
        order_number=order.order_number,
        farm_name=farm.name,
        amount=payment.amount,
        currency=payment.currency,
        customer_email=payment.customer_email,
        customer_name=payment.customer_name,
        status=payment.status.value,
        expires_at=payment.payment_link_expires_at,
        paid_at=payment.paid_at,
        items=[
            PaymentLinkItem(
                product_name=products[item.product_id].name if item.product_id in products else "Unknown",
                sku_name=skus[item.sku_id].name if item.sku_id in skus else None,
                quantity=item.quantity,
                quantity_oz=item.quantity_oz,
                line_total_cents=item.line_total_cents,
            )
            for item in items
        ],
    )


async def pay_payment_link(session: AsyncSession, link_id: str, data: PaymentLinkPay) -> Payment:
    """Settle a payment link.

    Raises:
        NotFoundError: unknown link
        BadRequestError: ``EXPIRED`` for an expired link, ``ALREADY_PAID`` when it was settled
            before, ``INVALID_STATUS`` when it was refunded or cancelled
    """
    payment = await _get_link(session, link_id)
    if _is_expired(payment):
        raise BadRequestError("This payment link has expired", code="EXPIRED")
    if payment.status == PaymentStatus.SUCCEEDED:
        raise BadRequestError("This payment has already been completed", code="ALREADY_PAID")
    if payment.status not in PAYABLE_STATUSES:
        raise BadRequestError(
            f"Cannot pay a payment with status {PaymentStatus(payment.status).value}", code="INVALID_STATUS"
        )

    payment.status = PaymentStatus.SUCCEEDED
    payment.paid_at = utc_now()
    if data.payer_name:
        payment.customer_name = data.payer_name
    if data.reference:
        payment.reference = data.reference
    payment = await PaymentRepository(session).update(payment)
    log_domain_event("payment_link_paid", farm_id=payment.farm_id, payment_id=payment.id, amount=payment.amount)
    return payment
