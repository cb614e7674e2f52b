"""
Document Service.

Renders order documents to PDF, stores the file under
``{documents_dir}/{farm_id}`` and keeps a GeneratedDocument record of it.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from farmops.core.database.base import utc_now
from farmops.core.database.entities import Farm, GeneratedDocument, Order
from farmops.core.database.repositories import (
    CustomerRepository,
    FarmRepository,
    GeneratedDocumentRepository,
    OrderItemRepository,
    ProductRepository,
    SkuRepository,
)
from farmops.core.errors import NotFoundError
from farmops.core.logging_config import get_logger
from farmops.core.models.domain import DocumentType
from farmops.core.monitoring import log_domain_event
from farmops.server.core.config import settings

from .pdf import DocumentData, build_document_data, render_document

logger = get_logger(__name__)

INVOICE_DUE_DAYS = 30

DOCUMENT_NUMBER_PREFIXES = {
    DocumentType.PACKING_SLIP: "PS",
    DocumentType.DELIVERY_RECEIPT: "DR",
    DocumentType.BILL_OF_LADING: "BOL",
}


def documents_root() -> Path:
    return Path(settings.storage.documents_dir)


def document_file_name(doc_type: DocumentType, order_number: str, generated_at: datetime) -> str:
    return f"{doc_type.slug}-{order_number}-{generated_at:%Y-%m-%d}.pdf"


def document_path(document: GeneratedDocument) -> Path:
    return documents_root() / document.farm_id / document.file_name


def format_invoice_number(prefix: str, number: int) -> str:
    return f"{prefix}-{number:05d}"


def assign_document_number(farm: Farm, order: Order, doc_type: DocumentType, now: datetime) -> str:
    """Document number for a new document.

    Invoices keep the number first given to the order; otherwise the farm's
    invoice counter is consumed and the order is stamped as invoiced.
    """
    if doc_type != DocumentType.INVOICE:
        return f"{DOCUMENT_NUMBER_PREFIXES[doc_type]}-{order.order_number}"
    if order.invoice_number:
        return order.invoice_number

    number = format_invoice_number(farm.invoice_prefix, farm.next_invoice_number)
    farm.next_invoice_number += 1
    order.invoice_number = number
    order.invoiced_at = now
    order.invoice_due_date = now + timedelta(days=INVOICE_DUE_DAYS)
    return number


async def load_document_data(
    session: AsyncSession,
    farm: Farm,
    order: Order,
    doc_type: DocumentType,
    document_number: str,
    issued_at: datetime,
) -> DocumentData:
    items = (await OrderItemRepository(session).items_for([order.id]))[order.id]
    products = await ProductRepository(session).get_many([item.product_id for item in items])
    skus = await SkuRepository(session).get_many_in_farm(farm.id, [item.sku_id for item in items if item.sku_id])
    customer = await CustomerRepository(session).get_by_id(order.customer_id) if order.customer_id else None
    due_date = order.invoice_due_date or issued_at + timedelta(days=INVOICE_DUE_DAYS)
    return build_document_data(
        doc_type,
        document_number,
        farm=farm,
        order=order,
        customer=customer,
        items=items,
        products=products,
        skus=skus,
        issued_at=issued_at,
        due_date=due_date,
    )


async def _get_farm(session: AsyncSession, farm_id: str) -> Farm:
    farm = await FarmRepository(session).get_by_id(farm_id)
    if farm is None:
        raise NotFoundError("Farm")
    return farm


async def generate_document(
    session: AsyncSession,
    order: Order,
    doc_type: DocumentType,
    *,
    generated_by: Optional[str] = None,
    send_email: bool = False,
    email_to: Optional[str] = None,
) -> GeneratedDocument:
    """Render, store and record a document for an order."""
    farm = await _get_farm(session, order.farm_id)
    now = utc_now()
    document_number = assign_document_number(farm, order, doc_type, now)
    data = await load_document_data(session, farm, order, doc_type, document_number, now)
    pdf = render_document(data)

    file_name = document_file_name(doc_type, order.order_number, now)
    directory = documents_root() / farm.id
    directory.mkdir(parents=True, exist_ok=True)
    (directory / file_name).write_bytes(pdf)

    document = GeneratedDocument(
        farm_id=farm.id,
        order_id=order.id,
        type=doc_type,
        document_number=document_number,
        file_url=f"/documents/{farm.id}/{file_name}",
        file_name=file_name,
        generated_at=now,
        generated_by=generated_by,
        due_date=data.due_date if doc_type == DocumentType.INVOICE else None,
    )
    if send_email:
        document.sent_to = email_to or order.customer_email or (data.customer.email if data.customer else None)
        document.sent_at = now

    session.add(farm)
    session.add(order)
    document = await GeneratedDocumentRepository(session).create(document)
    log_domain_event(
        "document_generated",
        farm_id=farm.id,
        order_id=order.id,
        type=doc_type.value,
        document_number=document_number,
        size=len(pdf),
    )
    return document


async def preview_document(session: AsyncSession, order: Order, doc_type: DocumentType) -> Tuple[str, bytes]:
    """Render a document without storing it or consuming an invoice number."""
    farm = await _get_farm(session, order.farm_id)
    if doc_type == DocumentType.INVOICE:
        document_number = order.invoice_number or f"{farm.invoice_prefix}-PREVIEW"
    else:
        document_number = f"{DOCUMENT_NUMBER_PREFIXES[doc_type]}-{order.order_number}"
    now = utc_now()
    data = await load_document_data(session, farm, order, doc_type, document_number, now)
    return document_file_name(doc_type, order.order_number, now), render_document(data)


def read_document_file(document: GeneratedDocument) -> bytes:
    """
    Raises:
        NotFoundError: when the stored file is missing
    """
    path = document_path(document)
    if not path.exists():
        logger.warning(f"Document file missing: {path}")
        raise NotFoundError("Document file")
    return path.read_bytes()


async def mark_sent(session: AsyncSession, document: GeneratedDocument, email_to: str) -> GeneratedDocument:
    document.sent_at = utc_now()
    document.sent_to = email_to
    session.add(document)
    await session.commit()
    await session.refresh(document)
    log_domain_event("document_sent", farm_id=document.farm_id, document_id=document.id, sent_to=email_to)
    return document


async def delete_document(session: AsyncSession, document: GeneratedDocument) -> None:
    path = document_path(document)
    await GeneratedDocumentRepository(session).delete(document)
    if path.exists():
        path.unlink()
    logger.info(f"Deleted document {document.document_number} ({document.file_name})")
