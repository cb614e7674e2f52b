import pytest
from httpx import AsyncClient

from farmops.core.models.domain import FarmRole

pytestmark = pytest.mark.asyncio


async def test_list_farms_requires_auth(client: AsyncClient):
    response = await client.get("/api/v1/farms")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


async def test_invalid_token_is_unauthorized(client: AsyncClient, farm):
    response = await client.get(f"/api/v1/farms/{farm.id}", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


async def test_create_farm_makes_caller_owner(client: AsyncClient, make_actor):
    actor = await make_actor()
    response = await client.post(
        "/api/v1/farms", json={"name": "Hill Top", "slug": "hill-top"}, headers=actor.headers
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["slug"] == "hill-top"
    assert data["role"] == "OWNER"
    assert data["timezone"] == "UTC"
    assert data["invoice_prefix"] == "INV"
    assert data["next_invoice_number"] == 1

    listed = await client.get("/api/v1/farms", headers=actor.headers)
    assert [farm["slug"] for farm in listed.json()["data"]] == ["hill-top"]


async def test_create_farm_rejects_bad_slug(client: AsyncClient, make_actor):
    actor = await make_actor()
    response = await client.post("/api/v1/farms", json={"name": "Bad", "slug": "Bad Slug"}, headers=actor.headers)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_create_farm_duplicate_slug_conflicts(client: AsyncClient, farm, make_actor):
    actor = await make_actor()
    response = await client.post(
        "/api/v1/farms", json={"name": "Copy", "slug": farm.slug}, headers=actor.headers
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_ENTRY"


async def test_get_farm_with_counts(client: AsyncClient, api, owner):
    await api.create_product(owner)
    response = await client.get(api.url(), headers=owner.headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["role"] == "OWNER"
    assert data["counts"] == {"employees": 0, "products": 1, "tasks": 0, "customers": 0, "orders": 0}


async def test_non_member_is_forbidden(client: AsyncClient, api, make_actor):
    stranger = await make_actor()
    response = await client.get(api.url(), headers=stranger.headers)
    assert response.status_code == 403
    assert response.json()["error"] == {"code": "FORBIDDEN", "message": "No farm access"}


async def test_update_farm_requires_admin(client: AsyncClient, api, operator, owner):
    response = await client.patch(api.url(), json={"name": "Renamed"}, headers=operator.headers)
    assert response.status_code == 403
    assert response.json()["error"]["message"] == "Requires ADMIN role or higher"

    response = await client.patch(
        api.url(), json={"name": "Renamed", "invoice_prefix": "GS", "next_invoice_number": 42}, headers=owner.headers
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Renamed"
    assert data["invoice_prefix"] == "GS"
    assert data["next_invoice_number"] == 42


async def test_delete_farm_is_owner_only(client: AsyncClient, api, make_actor, owner):
    admin = await make_actor(api.farm, FarmRole.ADMIN)
    response = await client.delete(api.url(), headers=admin.headers)
    assert response.status_code == 403

    response = await client.delete(api.url(), headers=owner.headers)
    assert response.status_code == 200
    assert response.json()["data"] == {"deleted": True}

    response = await client.get("/api/v1/farms", headers=owner.headers)
    assert response.json()["data"] == []


async def test_upload_and_remove_logo(client: AsyncClient, api, owner, storage_dirs):
    response = await client.post(
        api.url("/logo"), files={"file": ("logo.png", b"\x89PNG fake", "image/png")}, headers=owner.headers
    )
    assert response.status_code == 200
    logo_url = response.json()["data"]["logo_url"]
    assert logo_url == f"/uploads/logos/{api.farm.id}.png"
    stored = storage_dirs / "uploads" / "logos" / f"{api.farm.id}.png"
    assert stored.read_bytes() == b"\x89PNG fake"

    response = await client.delete(api.url("/logo"), headers=owner.headers)
    assert response.status_code == 200
    assert response.json()["data"]["logo_url"] is None
    assert not stored.exists()


async def test_upload_logo_rejects_non_image(client: AsyncClient, api, owner):
    response = await client.post(
        api.url("/logo"), files={"file": ("notes.txt", b"hello", "text/plain")}, headers=owner.headers
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_FILE_TYPE"


async def test_preferences_created_on_first_read(client: AsyncClient, api, operator):
    response = await client.get(api.url("/preferences"), headers=operator.headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["preferred_unit"] == "FEET"
    assert data["tutorial_completed_steps"] == []

    response = await client.patch(
        api.url("/preferences"),
        json={"preferred_unit": "METERS", "tutorial_completed_steps": ["add-customer"]},
        headers=operator.headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["preferred_unit"] == "METERS"
    assert data["tutorial_completed_steps"] == ["add-customer"]


async def test_onboarding_detects_progress(client: AsyncClient, api, owner):
    response = await client.get(api.url("/onboarding"), headers=owner.headers)
    assert response.status_code == 200
    checklist = response.json()["data"]
    assert checklist["total_count"] == 12
    steps = {step["id"]: step["completed"] for step in checklist["steps"]}
    assert steps["create-farm"] is True
    assert steps["add-product"] is False

    await api.create_product(owner)
    response = await client.post(api.url("/onboarding/add-customer/complete"), headers=owner.headers)
    assert response.status_code == 200
    steps = {step["id"]: step["completed"] for step in response.json()["data"]["steps"]}
    assert steps["add-product"] is True
    assert steps["add-customer"] is True


async def test_onboarding_unknown_step(client: AsyncClient, api, owner):
    response = await client.post(api.url("/onboarding/not-a-step/complete"), headers=owner.headers)
    assert response.status_code == 404


async def test_onboarding_step_stored_once(client: AsyncClient, api, owner):
    for _ in range(2):
        response = await client.post(api.url("/onboarding/add-customer/complete"), headers=owner.headers)
        assert response.status_code == 200
        assert response.json()["data"]["completed_count"] == 2

    response = await client.get(api.url("/preferences"), headers=owner.headers)
    assert response.json()["data"]["tutorial_completed_steps"] == ["add-customer"]
