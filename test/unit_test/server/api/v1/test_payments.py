from datetime import timedelta

import pytest
import pytest_asyncio
from httpx import AsyncClient

from farmops.core.database.base import utc_now
from farmops.core.database.entities import Payment
from farmops.core.models.domain import FarmRole

pytestmark = pytest.mark.asyncio


@pytest_asyncio.fixture
async def order(api, owner) -> dict:
    product = await api.create_product(owner)
    return await api.create_order(owner, product["id"])


async def _record_payment(client: AsyncClient, api, actor, order: dict, **overrides) -> dict:
    payload = {"amount": 2500, "method": "CASH"}
    payload.update(overrides)
    response = await client.post(api.url(f"/orders/{order['id']}/payments"), json=payload, headers=actor.headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def _create_link(client: AsyncClient, api, actor, order: dict, **overrides) -> dict:
    payload = {"amount": 4000, "customer_email": "chef@cafeverde.com", "customer_name": "Chef"}
    payload.update(overrides)
    response = await client.post(api.url(f"/orders/{order['id']}/payment-link"), json=payload, headers=actor.headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def test_payment_settings_created_on_read(client: AsyncClient, api, owner):
    response = await client.get(api.url("/payments/settings"), headers=owner.headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["payment_timing"] == "ON_READY"
    assert data["preferred_processor"] == "MANUAL"
    assert data["is_connected"] is False
    assert data["can_accept_payments"] is False


async def test_update_payment_settings_owner_only(client: AsyncClient, api, owner, farm, make_actor):
    admin = await make_actor(farm, FarmRole.ADMIN)
    payload = {"payment_timing": "UPFRONT", "preferred_processor": "STRIPE", "accepts_online_payments": True}
    response = await client.patch(api.url("/payments/settings"), json=payload, headers=admin.headers)
    assert response.status_code == 403

    response = await client.patch(api.url("/payments/settings"), json=payload, headers=owner.headers)
    data = response.json()["data"]
    assert data["payment_timing"] == "UPFRONT"
    assert data["is_connected"] is True
    assert data["can_accept_payments"] is True


async def test_record_manual_payment(client: AsyncClient, api, owner, order):
    payment = await _record_payment(client, api, owner, order, method="CHECK", reference="#1042")
    assert payment["status"] == "SUCCEEDED"
    assert payment["method"] == "CHECK"
    assert payment["customer_name"] == "Cafe Verde"
    assert payment["paid_at"] is not None

    response = await client.get(api.url(f"/orders/{order['id']}/payments"), headers=owner.headers)
    assert [p["id"] for p in response.json()["data"]] == [payment["id"]]


async def test_manual_payment_rejects_link_method(client: AsyncClient, api, owner, order):
    response = await client.post(
        api.url(f"/orders/{order['id']}/payments"),
        json={"amount": 100, "method": "PAYMENT_LINK"},
        headers=owner.headers,
    )
    assert response.status_code == 400


async def test_manual_payment_requires_sales(client: AsyncClient, api, order, operator):
    response = await client.post(
        api.url(f"/orders/{order['id']}/payments"), json={"amount": 100, "method": "CASH"}, headers=operator.headers
    )
    assert response.status_code == 403


async def test_full_and_partial_refunds(client: AsyncClient, api, owner, order):
    full = await _record_payment(client, api, owner, order)
    response = await client.post(
        api.url(f"/payments/{full['id']}/refund"), json={"reason": "Wilted"}, headers=owner.headers
    )
    data = response.json()["data"]
    assert data["status"] == "REFUNDED"
    assert data["refunded_amount"] == 2500
    assert data["refund_reason"] == "Wilted"

    partial = await _record_payment(client, api, owner, order)
    response = await client.post(api.url(f"/payments/{partial['id']}/refund"), json={"amount": 500}, headers=owner.headers)
    assert response.json()["data"]["status"] == "PARTIALLY_REFUNDED"


async def test_refund_rules(client: AsyncClient, api, owner, order):
    payment = await _record_payment(client, api, owner, order)
    response = await client.post(api.url(f"/payments/{payment['id']}/refund"), json={"amount": 9999}, headers=owner.headers)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_AMOUNT"

    await client.post(api.url(f"/payments/{payment['id']}/refund"), json={}, headers=owner.headers)
    response = await client.post(api.url(f"/payments/{payment['id']}/refund"), json={}, headers=owner.headers)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_STATUS"

    response = await client.post(api.url("/payments/missing/refund"), json={}, headers=owner.headers)
    assert response.status_code == 404


async def test_payment_link_checkout(client: AsyncClient, api, owner, order):
    link = await _create_link(client, api, owner, order)
    assert link["payment_link_url"].endswith(f"/pay/{link['payment_link_id']}")

    response = await client.get(f"/api/v1/payment-link/{link['payment_link_id']}")
    assert response.status_code == 200
    details = response.json()["data"]
    assert details["order_number"] == order["order_number"]
    assert details["farm_name"] == "Green Sprouts"
    assert details["amount"] == 4000
    assert details["status"] == "PENDING"
    assert [item["product_name"] for item in details["items"]] == ["Sunflower"]

    response = await client.post(
        f"/api/v1/payment-link/{link['payment_link_id']}/pay", json={"payer_name": "Chef Ana", "reference": "tx-1"}
    )
    assert response.status_code == 200
    paid = response.json()["data"]
    assert paid["status"] == "SUCCEEDED"
    assert paid["customer_name"] == "Chef Ana"

    response = await client.get(f"/api/v1/payment-link/{link['payment_link_id']}")
    assert response.json()["data"]["status"] == "ALREADY_PAID"

    response = await client.post(f"/api/v1/payment-link/{link['payment_link_id']}/pay", json={})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "ALREADY_PAID"


async def test_payment_link_fee_from_settings(client: AsyncClient, api, owner, order):
    await client.patch(api.url("/payments/settings"), json={"platform_fee_percent": 2.5}, headers=owner.headers)
    await _create_link(client, api, owner, order)
    response = await client.get(api.url(f"/orders/{order['id']}/payments"), headers=owner.headers)
    [payment] = response.json()["data"]
    assert payment["platform_fee"] == 100
    assert payment["method"] == "PAYMENT_LINK"


async def test_expired_payment_link(client: AsyncClient, api, owner, order, session):
    link = await _create_link(client, api, owner, order)
    payment = await session.get(Payment, link["payment_id"])
    payment.payment_link_expires_at = utc_now() - timedelta(minutes=1)
    session.add(payment)
    await session.commit()

    response = await client.get(f"/api/v1/payment-link/{link['payment_link_id']}")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "EXPIRED"

    response = await client.post(f"/api/v1/payment-link/{link['payment_link_id']}/pay", json={})
    assert response.json()["error"]["code"] == "EXPIRED"


async def test_unknown_payment_link(client: AsyncClient):
    response = await client.get("/api/v1/payment-link/nope")
    assert response.status_code == 404


async def test_refunded_payment_link_cannot_be_paid_again(client: AsyncClient, api, owner, order):
    link = await _create_link(client, api, owner, order)
    pay_url = f"/api/v1/payment-link/{link['payment_link_id']}/pay"
    assert (await client.post(pay_url, json={})).status_code == 200

    response = await client.post(api.url(f"/payments/{link['payment_id']}/refund"), json={}, headers=owner.headers)
    assert response.json()["data"]["status"] == "REFUNDED"

    response = await client.post(pay_url, json={})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_STATUS"

    payments = await client.get(api.url(f"/orders/{order['id']}/payments"), headers=owner.headers)
    assert payments.json()["data"][0]["status"] == "REFUNDED"


async def test_expired_link_reports_expiry_before_payment(client: AsyncClient, api, owner, order, session):
    link = await _create_link(client, api, owner, order)
    assert (await client.post(f"/api/v1/payment-link/{link['payment_link_id']}/pay", json={})).status_code == 200

    payment = await session.get(Payment, link["payment_id"])
    await session.refresh(payment)
    payment.payment_link_expires_at = utc_now() - timedelta(minutes=1)
    session.add(payment)
    await session.commit()

    response = await client.get(f"/api/v1/payment-link/{link['payment_link_id']}")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "EXPIRED"

    response = await client.post(f"/api/v1/payment-link/{link['payment_link_id']}/pay", json={})
    assert response.json()["error"]["code"] == "EXPIRED"
