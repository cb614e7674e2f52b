"""PDF documents for orders: packing slip, invoice, delivery receipt and bill of lading."""

from .data import DocumentData, DocumentItem, PartyInfo, build_document_data
from .generator import render_document

__all__ = ["DocumentData", "DocumentItem", "PartyInfo", "build_document_data", "render_document"]
