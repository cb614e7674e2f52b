"""
Document Endpoints.

This module handles the PDF documents of orders: packing slips, invoices,
delivery receipts and bills of lading. Generated documents are stored and
can be listed, downloaded, marked as sent and deleted; previews are rendered
on the fly without being stored.
"""

from datetime import date, datetime, time
from typing import List, Optional

from fastapi import APIRouter, Query, Response, status

from farmops.core.database.entities import GeneratedDocument
from farmops.core.database.repositories import GeneratedDocumentRepository
from farmops.core.errors import NotFoundError
from farmops.core.models.domain import DocumentType
from farmops.core.models.io import ApiResponse, DeletedResult, ErrorResponse, PageMeta, PaginatedResponse
from farmops.core.models.io.documents import DocumentGenerate, DocumentPreview, DocumentSend, GeneratedDocumentRead
from farmops.server.services import documents
from farmops.server.services.deps import AdminRole, AnyRole, ManagerRole, SessionDep

from .orders import load_order

router = APIRouter()
order_documents_router = APIRouter()

PDF_RESPONSE = {200: {"content": {"application/pdf": {}}, "description": "The PDF file."}}


def _pdf_response(content: bytes, file_name: str, disposition: str) -> Response:
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'{disposition}; filename="{file_name}"'},
    )


async def _load_document(session: SessionDep, farm_id: str, document_id: str) -> GeneratedDocument:
    document = await GeneratedDocumentRepository(session).get_in_farm(farm_id, document_id)
    if document is None:
        raise NotFoundError("Document", document_id)
    return document


@order_documents_router.post(
    "",
    response_model=ApiResponse[GeneratedDocumentRead],
    status_code=status.HTTP_201_CREATED,
    summary="Generate Document",
    description="Render and store a PDF document for an order.",
    response_description="The stored document record.",
    responses={404: {"model": ErrorResponse, "description": "Order not found"}},
)
async def generate_document(
    farm_id: str, order_id: str, document_in: DocumentGenerate, context: ManagerRole, session: SessionDep
) -> ApiResponse[GeneratedDocumentRead]:
    """
    Generate a document.

    - **type**: `PACKING_SLIP`, `INVOICE`, `DELIVERY_RECEIPT` or `BILL_OF_LADING`
    - **send_email**: Record the document as sent
    - **email_to**: Recipient (defaults to the customer email)

    The first invoice of an order takes the farm's next invoice number; later
    invoices of the same order reuse it.
    """
    order = await load_order(session, farm_id, order_id)
    document = await documents.generate_document(
        session,
        order,
        document_in.type,
        generated_by=context.user.id,
        send_email=document_in.send_email,
        email_to=document_in.email_to,
    )
    return ApiResponse(data=GeneratedDocumentRead.model_validate(document))


@order_documents_router.get(
    "",
    response_model=ApiResponse[List[GeneratedDocumentRead]],
    summary="List Order Documents",
    description="Documents generated for an order, newest first.",
    response_description="Documents of the order.",
)
async def list_order_documents(
    farm_id: str, order_id: str, context: AnyRole, session: SessionDep
) -> ApiResponse[List[GeneratedDocumentRead]]:
    order = await load_order(session, farm_id, order_id)
    records = await GeneratedDocumentRepository(session).list_for_order(order.id)
    return ApiResponse(data=[GeneratedDocumentRead.model_validate(document) for document in records])


@order_documents_router.post(
    "/preview",
    response_class=Response,
    summary="Preview Document",
    description="Render a document for an order without storing it.",
    responses=PDF_RESPONSE,
)
async def preview_order_document(
    farm_id: str, order_id: str, preview_in: DocumentPreview, context: AnyRole, session: SessionDep
) -> Response:
    order = await load_order(session, farm_id, order_id)
    file_name, content = await documents.preview_document(session, order, preview_in.type)
    return _pdf_response(content, file_name, "inline")


@router.get(
    "",
    response_model=PaginatedResponse[List[GeneratedDocumentRead]],
    summary="List Documents",
    description="Documents of the farm, newest first, with the total number of matches.",
    response_description="A page of documents.",
)
async def list_documents(
    farm_id: str,
    context: AnyRole,
    session: SessionDep,
    doc_type: Optional[DocumentType] = Query(default=None, alias="type"),
    start_date: Optional[date] = Query(default=None, description="Generated on or after this day"),
    end_date: Optional[date] = Query(default=None, description="Generated on or before this day"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
) -> PaginatedResponse[List[GeneratedDocumentRead]]:
    records, total = await GeneratedDocumentRepository(session).search(
        farm_id,
        doc_type=doc_type,
        start_date=datetime.combine(start_date, time.min) if start_date else None,
        end_date=datetime.combine(end_date, time.max) if end_date else None,
        limit=limit,
        offset=offset,
    )
    return PaginatedResponse(
        data=[GeneratedDocumentRead.model_validate(document) for document in records],
        meta=PageMeta(total=total, limit=limit, offset=offset),
    )


@router.get(
    "/{document_id}/download",
    response_class=Response,
    summary="Download Document",
    description="Download a stored document as a PDF attachment.",
    responses={**PDF_RESPONSE, 404: {"model": ErrorResponse, "description": "Document or file not found"}},
)
async def download_document(farm_id: str, document_id: str, context: AnyRole, session: SessionDep) -> Response:
    document = await _load_document(session, farm_id, document_id)
    return _pdf_response(documents.read_document_file(document), document.file_name, "attachment")


@router.get(
    "/{document_id}/preview",
    response_class=Response,
    summary="View Document",
    description="Show a stored document inline in the browser.",
    responses={**PDF_RESPONSE, 404: {"model": ErrorResponse, "description": "Document or file not found"}},
)
async def view_document(farm_id: str, document_id: str, context: AnyRole, session: SessionDep) -> Response:
    document = await _load_document(session, farm_id, document_id)
    return _pdf_response(documents.read_document_file(document), document.file_name, "inline")


@router.post(
    "/{document_id}/send",
    response_model=ApiResponse[GeneratedDocumentRead],
    summary="Send Document",
    description="Record that a document was sent to an email address.",
    response_description="The document with its sent details.",
)
async def send_document(
    farm_id: str, document_id: str, send_in: DocumentSend, context: ManagerRole, session: SessionDep
) -> ApiResponse[GeneratedDocumentRead]:
    document = await _load_document(session, farm_id, document_id)
    document = await documents.mark_sent(session, document, send_in.email_to)
    return ApiResponse(data=GeneratedDocumentRead.model_validate(document))


@router.delete(
    "/{document_id}",
    response_model=ApiResponse[DeletedResult],
    summary="Delete Document",
    description="Delete a document record and its file.",
    response_description="Deletion confirmation.",
)
async def delete_document(
    farm_id: str, document_id: str, context: AdminRole, session: SessionDep
) -> ApiResponse[DeletedResult]:
    document = await _load_document(session, farm_id, document_id)
    await documents.delete_document(session, document)
    return ApiResponse(data=DeletedResult())
