"""
Payment Endpoints.

This module handles payments recorded by the farm: payment settings,
manual payments, shareable payment links and refunds, plus the public
checkout routes a customer opens from a payment link.
"""

from typing import List, Union

from fastapi import APIRouter, status

from farmops.core.database.repositories import PaymentRepository, PaymentSettingsRepository
from farmops.core.errors import NotFoundError
from farmops.core.models.io import ApiResponse, ErrorResponse
from farmops.core.models.io.payments import (
    ManualPaymentCreate,
    PaymentLinkCreate,
    PaymentLinkCreated,
    PaymentLinkDetails,
    PaymentLinkPaid,
    PaymentLinkPay,
    PaymentRead,
    PaymentSettingsRead,
    PaymentSettingsUpdate,
    RefundCreate,
)
from farmops.server.services import payments
from farmops.server.services.deps import AdminRole, AnyRole, OwnerRole, SalesRole, SessionDep

from .orders import load_order

router = APIRouter()
order_payments_router = APIRouter()
public_router = APIRouter()


@router.get(
    "/settings",
    response_model=ApiResponse[PaymentSettingsRead],
    summary="Get Payment Settings",
    description="Payment settings of the farm, created with defaults on first read.",
    response_description="The payment settings with connection flags.",
)
async def get_payment_settings(farm_id: str, context: AnyRole, session: SessionDep) -> ApiResponse[PaymentSettingsRead]:
    payment_settings = await PaymentSettingsRepository(session).get_or_create(farm_id)
    return ApiResponse(data=payments.settings_read(payment_settings))


@router.patch(
    "/settings",
    response_model=ApiResponse[PaymentSettingsRead],
    summary="Update Payment Settings",
    description="Create or update the farm's payment settings. Owner only.",
    response_description="The updated payment settings.",
)
async def update_payment_settings(
    farm_id: str, settings_in: PaymentSettingsUpdate, context: OwnerRole, session: SessionDep
) -> ApiResponse[PaymentSettingsRead]:
    """
    Update payment settings.

    - **payment_timing**: `UPFRONT` (storefront orders get a payment link) or `ON_READY`
    - **preferred_processor**: `STRIPE`, `PAYPAL` or `MANUAL`
    - **platform_fee_percent**: Fee kept from each payment link (0-100)
    - **accepts_online_payments**: Allow payment links
    """
    repo = PaymentSettingsRepository(session)
    payment_settings = await repo.get_or_create(farm_id)
    payment_settings = await repo.apply(payment_settings, settings_in.model_dump(exclude_unset=True))
    return ApiResponse(data=payments.settings_read(payment_settings))


@router.post(
    "/{payment_id}/refund",
    response_model=ApiResponse[PaymentRead],
    summary="Refund Payment",
    description="Refund a succeeded payment in full or in part.",
    response_description="The refunded payment.",
    responses={
        400: {"model": ErrorResponse, "description": "Payment not refundable"},
        404: {"model": ErrorResponse, "description": "Payment not found"},
    },
)
async def refund_payment(
    farm_id: str, payment_id: str, refund_in: RefundCreate, context: AdminRole, session: SessionDep
) -> ApiResponse[PaymentRead]:
    """
    Refund a payment.

    - **amount**: Cents to refund; defaults to the whole payment
    - **reason**: Why the refund was given

    Refunding the whole amount marks the payment `REFUNDED`, anything less `PARTIALLY_REFUNDED`.
    """
    payment = await PaymentRepository(session).get_in_farm(farm_id, payment_id)
    if payment is None:
        raise NotFoundError("Payment", payment_id)
    payment = await payments.refund_payment(session, payment, refund_in)
    return ApiResponse(data=PaymentRead.model_validate(payment))


@order_payments_router.get(
    "/payments",
    response_model=ApiResponse[List[PaymentRead]],
    summary="List Order Payments",
    description="Payments recorded for an order, newest first.",
    response_description="Payments of the order.",
    responses={404: {"model": ErrorResponse, "description": "Order not found"}},
)
async def list_order_payments(
    farm_id: str, order_id: str, context: AnyRole, session: SessionDep
) -> ApiResponse[List[PaymentRead]]:
    order = await load_order(session, farm_id, order_id)
    records = await PaymentRepository(session).list_for_order(order.id)
    return ApiResponse(data=[PaymentRead.model_validate(payment) for payment in records])


@order_payments_router.post(
    "/payments",
    response_model=ApiResponse[PaymentRead],
    status_code=status.HTTP_201_CREATED,
    summary="Record Manual Payment",
    description="Record a payment received outside the platform (cash, check, card, transfer).",
    response_description="The recorded payment.",
)
async def record_manual_payment(
    farm_id: str, order_id: str, payment_in: ManualPaymentCreate, context: SalesRole, session: SessionDep
) -> ApiResponse[PaymentRead]:
    """
    Record a manual payment.

    - **amount**: Amount in cents
    - **method**: `CASH`, `CHECK`, `CARD`, `BANK_TRANSFER` or `OTHER`
    - **reference**: Check number or transfer reference
    """
    order = await load_order(session, farm_id, order_id)
    payment = await payments.record_manual_payment(session, order, payment_in)
    return ApiResponse(data=PaymentRead.model_validate(payment))


@order_payments_router.post(
    "/payment-link",
    response_model=ApiResponse[PaymentLinkCreated],
    status_code=status.HTTP_201_CREATED,
    summary="Create Payment Link",
    description="Create a pending payment with a link the customer can pay from.",
    response_description="The payment link.",
)
async def create_payment_link(
    farm_id: str, order_id: str, link_in: PaymentLinkCreate, context: SalesRole, session: SessionDep
) -> ApiResponse[PaymentLinkCreated]:
    """
    Create a payment link.

    - **amount**: Amount in cents
    - **customer_email**: Who the link is for
    - **expires_in_hours**: Link lifetime (default 72)
    """
    order = await load_order(session, farm_id, order_id)
    payment_settings = await PaymentSettingsRepository(session).get_by_farm(farm_id)
    payment = await payments.create_payment_link(
        session,
        order,
        payment_settings,
        amount=link_in.amount,
        customer_email=link_in.customer_email,
        customer_name=link_in.customer_name,
        expires_in_hours=link_in.expires_in_hours,
    )
    return ApiResponse(
        data=PaymentLinkCreated(
            payment_id=payment.id,
            payment_link_id=payment.payment_link_id,
            payment_link_url=payment.payment_link_url,
            expires_at=payment.payment_link_expires_at,
        )
    )


@public_router.get(
    "/{link_id}",
    response_model=ApiResponse[Union[PaymentLinkDetails, PaymentLinkPaid]],
    summary="Get Payment Link",
    description="Public checkout view of a payment link.",
    response_description="Order, amount and items to pay, or the paid status.",
    responses={
        400: {"model": ErrorResponse, "description": "Link expired"},
        404: {"model": ErrorResponse, "description": "Unknown link"},
    },
)
async def get_payment_link(
    link_id: str, session: SessionDep
) -> ApiResponse[Union[PaymentLinkDetails, PaymentLinkPaid]]:
    """
    Get a payment link.

    A link that was already paid answers `{"status": "ALREADY_PAID", "paid_at": ...}`.
    """
    return ApiResponse(data=await payments.get_payment_link(session, link_id))


@public_router.post(
    "/{link_id}/pay",
    response_model=ApiResponse[PaymentRead],
    summary="Pay Payment Link",
    description="Settle a payment link.",
    response_description="The succeeded payment.",
    responses={
        400: {"model": ErrorResponse, "description": "Link expired or already paid"},
        404: {"model": ErrorResponse, "description": "Unknown link"},
    },
)
async def pay_payment_link(link_id: str, pay_in: PaymentLinkPay, session: SessionDep) -> ApiResponse[PaymentRead]:
    payment = await payments.pay_payment_link(session, link_id, pay_in)
    return ApiResponse(data=PaymentRead.model_validate(payment))
