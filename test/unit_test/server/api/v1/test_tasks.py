import pytest
from httpx import AsyncClient

from farmops.core.database.entities import OrderItem
from farmops.core.models.domain import OrderItemStatus

pytestmark = pytest.mark.asyncio


async def _order_tasks(client: AsyncClient, api, owner) -> tuple[dict, dict]:
    product = await api.create_product(owner)
    order = await api.create_order(owner, product["id"])
    tasks = {task["type"]: task for task in order["items"][0]["tasks"]}
    return order, tasks


async def _complete(client: AsyncClient, api, actor, task_id: str, **payload) -> dict:
    payload.setdefault("completed_by", "Maya")
    response = await client.post(api.url(f"/tasks/{task_id}/complete"), json=payload, headers=actor.headers)
    assert response.status_code == 200, response.text
    return response.json()["data"]


async def test_list_tasks_with_order_context(client: AsyncClient, api, owner):
    order, _ = await _order_tasks(client, api, owner)
    response = await client.get(api.url("/tasks"), headers=owner.headers)
    tasks = response.json()["data"]
    assert [task["type"] for task in tasks] == ["SOAK", "SEED", "MOVE_TO_LIGHT", "HARVESTING"]
    summary = tasks[0]["order_item"]
    assert summary["product_name"] == "Sunflower"
    assert summary["trays_needed"] == 5
    assert summary["order"]["order_number"] == order["order_number"]


async def test_list_tasks_filters(client: AsyncClient, api, owner):
    await _order_tasks(client, api, owner)

    response = await client.get(api.url("/tasks"), params={"type": "SEED"}, headers=owner.headers)
    assert [task["type"] for task in response.json()["data"]] == ["SEED"]

    response = await client.get(
        api.url("/tasks"), params={"from_date": "2026-11-11", "to_date": "2026-11-14"}, headers=owner.headers
    )
    assert [task["type"] for task in response.json()["data"]] == ["SEED", "MOVE_TO_LIGHT"]

    response = await client.get(api.url("/tasks"), params={"status": "COMPLETED"}, headers=owner.headers)
    assert response.json()["data"] == []


async def test_calendar_requires_range(client: AsyncClient, api, owner):
    response = await client.get(api.url("/tasks/calendar"), params={"start_date": "2026-11-01"}, headers=owner.headers)
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "start_date and end_date are required"


async def test_calendar_includes_end_day(client: AsyncClient, api, owner):
    await _order_tasks(client, api, owner)
    response = await client.get(
        api.url("/tasks/calendar"),
        params={"start_date": "2026-11-14", "end_date": "2026-11-20"},
        headers=owner.headers,
    )
    assert [task["type"] for task in response.json()["data"]] == ["MOVE_TO_LIGHT", "HARVESTING"]


async def test_update_task_status_advances_item(client: AsyncClient, api, owner):
    order, tasks = await _order_tasks(client, api, owner)
    response = await client.patch(
        api.url(f"/tasks/{tasks['SOAK']['id']}"), json={"status": "COMPLETED"}, headers=owner.headers
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "COMPLETED"
    assert data["completed_at"] is not None
    assert data["order_item"]["status"] == "SOAKING"

    response = await client.patch(
        api.url(f"/tasks/{tasks['SOAK']['id']}"), json={"status": "IN_PROGRESS"}, headers=owner.headers
    )
    assert response.json()["data"]["completed_at"] is None


async def test_update_task_requires_manager(client: AsyncClient, api, owner, operator):
    _, tasks = await _order_tasks(client, api, owner)
    response = await client.patch(
        api.url(f"/tasks/{tasks['SOAK']['id']}"), json={"priority": "HIGH"}, headers=operator.headers
    )
    assert response.status_code == 403


async def test_complete_seed_records_lot(client: AsyncClient, api, owner):
    order, tasks = await _order_tasks(client, api, owner)
    task = await _complete(client, api, owner, tasks["SEED"]["id"], seed_lot="LOT-7", actual_trays=6)
    assert task["completed_by"] == "Maya"
    assert task["seed_lot"] == "LOT-7"
    assert task["order_item"]["status"] == "GERMINATING"

    response = await client.get(api.url(f"/orders/{order['id']}"), headers=owner.headers)
    item = response.json()["data"]["items"][0]
    assert item["seed_lot"] == "LOT-7"
    assert item["actual_trays"] == 6


async def test_item_status_never_moves_back(client: AsyncClient, api, owner):
    _, tasks = await _order_tasks(client, api, owner)
    await _complete(client, api, owner, tasks["MOVE_TO_LIGHT"]["id"])
    task = await _complete(client, api, owner, tasks["SOAK"]["id"])
    assert task["order_item"]["status"] == "GROWING"


async def test_harvest_readies_order_and_updates_yield(client: AsyncClient, api, owner):
    order, tasks = await _order_tasks(client, api, owner)
    task = await _complete(
        client, api, owner, tasks["HARVESTING"]["id"], actual_yield_oz=60, actual_trays=5, completion_notes="Good"
    )
    assert task["order_item"]["status"] == "HARVESTED"
    assert task["completion_notes"] == "Good"

    response = await client.get(api.url(f"/orders/{order['id']}"), headers=owner.headers)
    data = response.json()["data"]
    assert data["status"] == "READY"
    assert data["items"][0]["actual_yield_oz"] == 60

    product_id = data["items"][0]["product_id"]
    response = await client.get(api.url(f"/products/{product_id}"), headers=owner.headers)
    assert response.json()["data"]["avg_yield_per_tray"] == pytest.approx(10.6)


async def test_complete_requires_completed_by(client: AsyncClient, api, owner):
    _, tasks = await _order_tasks(client, api, owner)
    response = await client.post(
        api.url(f"/tasks/{tasks['SEED']['id']}/complete"), json={"completed_by": "  "}, headers=owner.headers
    )
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "completed_by is required"

    response = await client.post(api.url(f"/tasks/{tasks['SEED']['id']}/complete"), json={}, headers=owner.headers)
    assert response.status_code == 400


async def test_unknown_task(client: AsyncClient, api, owner):
    response = await client.patch(api.url("/tasks/missing"), json={"priority": "LOW"}, headers=owner.headers)
    assert response.status_code == 404


async def test_cancelled_item_is_not_advanced(client: AsyncClient, api, owner, session):
    order, tasks = await _order_tasks(client, api, owner)
    item = await session.get(OrderItem, order["items"][0]["id"])
    item.status = OrderItemStatus.CANCELLED
    session.add(item)
    await session.commit()

    task = await _complete(client, api, owner, tasks["SEED"]["id"], seed_lot="LOT-9")
    assert task["status"] == "COMPLETED"
    assert task["order_item"]["status"] == "CANCELLED"

    await session.refresh(item)
    assert item.status == OrderItemStatus.CANCELLED
    assert item.seed_lot is None


async def test_completing_twice_is_rejected(client: AsyncClient, api, owner):
    order, tasks = await _order_tasks(client, api, owner)
    await _complete(client, api, owner, tasks["HARVESTING"]["id"], actual_yield_oz=60, actual_trays=5)

    response = await client.post(
        api.url(f"/tasks/{tasks['HARVESTING']['id']}/complete"),
        json={"completed_by": "Maya", "actual_yield_oz": 60, "actual_trays": 5},
        headers=owner.headers,
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "ALREADY_COMPLETED"

    # The yield average is applied once
    product_id = order["items"][0]["product_id"]
    response = await client.get(api.url(f"/products/{product_id}"), headers=owner.headers)
    assert response.json()["data"]["avg_yield_per_tray"] == pytest.approx(10.6)
