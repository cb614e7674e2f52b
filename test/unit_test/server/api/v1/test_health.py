import pytest
from httpx import AsyncClient

from farmops.server.core import constant

pytestmark = pytest.mark.asyncio


async def test_health_check(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"success": True, "data": {"status": "ok"}}


async def test_version(client: AsyncClient):
    response = await client.get("/version")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["version"] == constant.VERSION
    assert data["schema_version"] == "v1"


async def test_response_carries_process_time_header(client: AsyncClient):
    response = await client.get("/health")
    assert "x-process-time" in response.headers


async def test_unknown_route_uses_error_envelope(client: AsyncClient):
    response = await client.get("/api/v1/does-not-exist")
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "NOT_FOUND"
