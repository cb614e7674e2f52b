from datetime import datetime, timezone
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


@pytest_asyncio.fixture
async def order(api, owner) -> dict:
    product = await api.create_product(owner)
    return await api.create_order(owner, product["id"])


async def _generate(client: AsyncClient, api, actor, order: dict, doc_type: str, **extra) -> dict:
    response = await client.post(
        api.url(f"/orders/{order['id']}/documents"), json={"type": doc_type, **extra}, headers=actor.headers
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def test_generate_invoice_consumes_invoice_number(client: AsyncClient, api, owner, order, storage_dirs):
    document = await _generate(client, api, owner, order, "INVOICE")
    today = datetime.now(timezone.utc).date().isoformat()

    assert document["document_number"] == "INV-00001"
    assert document["file_name"] == f"invoice-{order['order_number']}-{today}.pdf"
    assert document["file_url"] == f"/documents/{api.farm.id}/{document['file_name']}"
    assert document["due_date"] is not None
    assert document["generated_by"] == owner.user.id
    stored = Path(storage_dirs) / "documents" / api.farm.id / document["file_name"]
    assert stored.read_bytes().startswith(b"%PDF")

    response = await client.get(api.url(f"/orders/{order['id']}"), headers=owner.headers)
    assert response.json()["data"]["invoice_number"] == "INV-00001"
    response = await client.get(api.url(), headers=owner.headers)
    assert response.json()["data"]["next_invoice_number"] == 2

    again = await _generate(client, api, owner, order, "INVOICE")
    assert again["document_number"] == "INV-00001"
    response = await client.get(api.url(), headers=owner.headers)
    assert response.json()["data"]["next_invoice_number"] == 2


async def test_other_document_numbers(client: AsyncClient, api, owner, order):
    number = order["order_number"]
    assert (await _generate(client, api, owner, order, "PACKING_SLIP"))["document_number"] == f"PS-{number}"
    assert (await _generate(client, api, owner, order, "DELIVERY_RECEIPT"))["document_number"] == f"DR-{number}"
    assert (await _generate(client, api, owner, order, "BILL_OF_LADING"))["document_number"] == f"BOL-{number}"

    response = await client.get(api.url(f"/orders/{order['id']}/documents"), headers=owner.headers)
    assert len(response.json()["data"]) == 3


async def test_generate_and_send(client: AsyncClient, api, owner, order):
    document = await _generate(client, api, owner, order, "PACKING_SLIP", send_email=True, email_to="chef@cafe.com")
    assert document["sent_to"] == "chef@cafe.com"
    assert document["sent_at"] is not None


async def test_generate_requires_manager(client: AsyncClient, api, order, operator):
    response = await client.post(
        api.url(f"/orders/{order['id']}/documents"), json={"type": "INVOICE"}, headers=operator.headers
    )
    assert response.status_code == 403


async def test_preview_does_not_store(client: AsyncClient, api, owner, order):
    response = await client.post(
        api.url(f"/orders/{order['id']}/documents/preview"), json={"type": "INVOICE"}, headers=owner.headers
    )
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"].startswith("inline")
    assert response.content.startswith(b"%PDF")

    response = await client.get(api.url("/documents"), headers=owner.headers)
    assert response.json()["meta"]["total"] == 0
    response = await client.get(api.url(), headers=owner.headers)
    assert response.json()["data"]["next_invoice_number"] == 1


async def test_list_farm_documents(client: AsyncClient, api, owner, order):
    await _generate(client, api, owner, order, "INVOICE")
    await _generate(client, api, owner, order, "PACKING_SLIP")

    response = await client.get(api.url("/documents"), params={"limit": 1}, headers=owner.headers)
    body = response.json()
    assert body["success"] is True
    assert body["meta"] == {"total": 2, "limit": 1, "offset": 0}
    assert len(body["data"]) == 1

    response = await client.get(api.url("/documents"), params={"type": "PACKING_SLIP"}, headers=owner.headers)
    assert [d["type"] for d in response.json()["data"]] == ["PACKING_SLIP"]

    response = await client.get(api.url("/documents"), params={"end_date": "2000-01-01"}, headers=owner.headers)
    assert response.json()["meta"]["total"] == 0


async def test_download_view_send_and_delete(client: AsyncClient, api, owner, order, storage_dirs):
    document = await _generate(client, api, owner, order, "DELIVERY_RECEIPT")
    doc_url = api.url(f"/documents/{document['id']}")

    response = await client.get(f"{doc_url}/download", headers=owner.headers)
    assert response.status_code == 200
    assert response.headers["content-disposition"] == f'attachment; filename="{document["file_name"]}"'
    assert response.content.startswith(b"%PDF")

    response = await client.get(f"{doc_url}/preview", headers=owner.headers)
    assert response.headers["content-disposition"].startswith("inline")

    response = await client.post(f"{doc_url}/send", json={"email_to": "ops@cafe.com"}, headers=owner.headers)
    assert response.json()["data"]["sent_to"] == "ops@cafe.com"

    response = await client.delete(doc_url, headers=owner.headers)
    assert response.status_code == 200
    assert not (Path(storage_dirs) / "documents" / api.farm.id / document["file_name"]).exists()

    response = await client.get(f"{doc_url}/download", headers=owner.headers)
    assert response.status_code == 404


async def test_download_missing_file(client: AsyncClient, api, owner, order, storage_dirs):
    document = await _generate(client, api, owner, order, "PACKING_SLIP")
    (Path(storage_dirs) / "documents" / api.farm.id / document["file_name"]).unlink()
    response = await client.get(api.url(f"/documents/{document['id']}/download"), headers=owner.headers)
    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Document file not found"
