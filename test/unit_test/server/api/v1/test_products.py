import pytest
from httpx import AsyncClient

from farmops.core.models.domain import FarmRole

pytestmark = pytest.mark.asyncio


async def test_create_and_list_products(client: AsyncClient, api, owner):
    response = await client.post(
        api.url("/product-categories"), json={"name": "Microgreens", "display_order": 1}, headers=owner.headers
    )
    assert response.status_code == 201
    category = response.json()["data"]

    product = await api.create_product(owner, name="Pea Shoots", category_id=category["id"])
    assert product["category"]["name"] == "Microgreens"
    assert product["sku_count"] == 0

    await api.create_sku(owner, product["id"])
    response = await client.get(api.url("/products"), headers=owner.headers)
    assert response.status_code == 200
    products = response.json()["data"]
    assert [p["name"] for p in products] == ["Pea Shoots"]
    assert products[0]["sku_count"] == 1


async def test_create_product_with_foreign_category(client: AsyncClient, api, owner):
    response = await client.post(
        api.url("/products"), json={"name": "Radish", "category_id": "missing"}, headers=owner.headers
    )
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["message"] == "Invalid category"


async def test_create_product_requires_manager(client: AsyncClient, api, make_actor):
    salesperson = await make_actor(api.farm, FarmRole.SALESPERSON)
    response = await client.post(api.url("/products"), json={"name": "Radish"}, headers=salesperson.headers)
    assert response.status_code == 403

    manager = await make_actor(api.farm, FarmRole.FARM_MANAGER)
    response = await client.post(api.url("/products"), json={"name": "Radish"}, headers=manager.headers)
    assert response.status_code == 201


async def test_get_product_of_other_farm_is_not_found(client: AsyncClient, api, owner, make_actor):
    other = await make_actor()
    created = await client.post("/api/v1/farms", json={"name": "Other", "slug": "other"}, headers=other.headers)
    other_farm_id = created.json()["data"]["id"]
    response = await client.post(
        f"/api/v1/farms/{other_farm_id}/products", json={"name": "Kale"}, headers=other.headers
    )
    product_id = response.json()["data"]["id"]

    response = await client.get(api.url(f"/products/{product_id}"), headers=owner.headers)
    assert response.status_code == 404


async def test_update_product(client: AsyncClient, api, owner):
    product = await api.create_product(owner)
    response = await client.patch(
        api.url(f"/products/{product['id']}"), json={"avg_yield_per_tray": 12.5, "is_active": False}, headers=owner.headers
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["avg_yield_per_tray"] == 12.5
    assert data["is_active"] is False
    assert data["days_germination"] == 3


async def test_delete_product_used_in_orders(client: AsyncClient, api, owner):
    product = await api.create_product(owner)
    await api.create_order(owner, product["id"])

    response = await client.delete(api.url(f"/products/{product['id']}"), headers=owner.headers)
    assert response.status_code == 400
    assert response.json()["error"] == {"code": "IN_USE", "message": "Cannot delete product that is used in orders"}


async def test_delete_unused_product(client: AsyncClient, api, owner):
    product = await api.create_product(owner)
    response = await client.delete(api.url(f"/products/{product['id']}"), headers=owner.headers)
    assert response.status_code == 200

    response = await client.get(api.url(f"/products/{product['id']}"), headers=owner.headers)
    assert response.status_code == 404
