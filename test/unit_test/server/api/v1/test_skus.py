import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def test_sku_crud(client: AsyncClient, api, owner):
    product = await api.create_product(owner)
    sku = await api.create_sku(owner, product["id"])
    assert sku["product_name"] == "Sunflower"
    assert sku["price"] == 500

    base = api.url(f"/products/{product['id']}/skus")
    response = await client.patch(f"{base}/{sku['id']}", json={"price": 650, "is_public": False}, headers=owner.headers)
    assert response.status_code == 200
    assert response.json()["data"]["price"] == 650

    response = await client.get(base, headers=owner.headers)
    assert [s["sku_code"] for s in response.json()["data"]] == ["SUN-4OZ"]

    response = await client.delete(f"{base}/{sku['id']}", headers=owner.headers)
    assert response.status_code == 200
    response = await client.get(f"{base}/{sku['id']}", headers=owner.headers)
    assert response.status_code == 404


async def test_duplicate_sku_code_conflicts(client: AsyncClient, api, owner):
    product = await api.create_product(owner)
    await api.create_sku(owner, product["id"])
    response = await client.post(
        api.url(f"/products/{product['id']}/skus"),
        json={"sku_code": "SUN-4OZ", "name": "Again", "weight_oz": 4, "price": 500},
        headers=owner.headers,
    )
    assert response.status_code == 409
    error = response.json()["error"]
    assert error["code"] == "DUPLICATE_ENTRY"
    assert "sku_code" in error["message"]


async def test_sku_requires_admin(client: AsyncClient, api, owner, operator):
    product = await api.create_product(owner)
    response = await client.post(
        api.url(f"/products/{product['id']}/skus"),
        json={"sku_code": "X", "name": "X", "weight_oz": 1, "price": 1},
        headers=operator.headers,
    )
    assert response.status_code == 403


async def test_sku_validation(client: AsyncClient, api, owner):
    product = await api.create_product(owner)
    response = await client.post(
        api.url(f"/products/{product['id']}/skus"),
        json={"sku_code": "X", "name": "X", "weight_oz": 0, "price": -1},
        headers=owner.headers,
    )
    assert response.status_code == 400
    fields = {tuple(detail["loc"])[-1] for detail in response.json()["error"]["details"]}
    assert fields == {"weight_oz", "price"}


async def test_farm_sku_list_filters(client: AsyncClient, api, owner):
    product = await api.create_product(owner)
    await api.create_sku(owner, product["id"], sku_code="A", is_public=True)
    await api.create_sku(owner, product["id"], sku_code="B", is_public=False)

    response = await client.get(api.url("/skus"), params={"is_public": "true"}, headers=owner.headers)
    assert response.status_code == 200
    skus = response.json()["data"]
    assert [sku["sku_code"] for sku in skus] == ["A"]
    assert skus[0]["product_name"] == "Sunflower"


async def test_sku_image_upload_replaces_previous(client: AsyncClient, api, owner, storage_dirs):
    product = await api.create_product(owner)
    sku = await api.create_sku(owner, product["id"])
    url = api.url(f"/products/{product['id']}/skus/{sku['id']}/image")

    response = await client.post(url, files={"file": ("a.png", b"png-bytes", "image/png")}, headers=owner.headers)
    assert response.status_code == 200
    assert response.json()["data"]["image_url"] == f"/uploads/skus/{sku['id']}.png"

    response = await client.post(url, files={"file": ("b.webp", b"webp-bytes", "image/webp")}, headers=owner.headers)
    assert response.json()["data"]["image_url"] == f"/uploads/skus/{sku['id']}.webp"
    skus_dir = storage_dirs / "uploads" / "skus"
    assert sorted(path.name for path in skus_dir.iterdir()) == [f"{sku['id']}.webp"]

    response = await client.delete(url, headers=owner.headers)
    assert response.status_code == 200
    assert response.json()["data"]["image_url"] is None
    assert list(skus_dir.iterdir()) == []
