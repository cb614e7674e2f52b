"""
Generated document entity model.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from farmops.core.models.domain import DocumentType

from ..base import Base, new_id, utc_now


class GeneratedDocument(Base, table=True):
    """Record of a PDF rendered for an order.

    Table: generated_documents
    """

    __tablename__ = "generated_documents"

    id: str = Field(default_factory=new_id, primary_key=True)
    farm_id: str = Field(foreign_key="farms.id", ondelete="CASCADE", index=True)
    order_id: Optional[str] = Field(default=None, foreign_key="orders.id", ondelete="CASCADE", index=True)
    type: DocumentType
    document_number: str
    file_url: str
    file_name: str
    generated_at: datetime = Field(default_factory=utc_now, index=True)
    generated_by: Optional[str] = Field(default=None)
    due_date: Optional[datetime] = Field(default=None)
    sent_at: Optional[datetime] = Field(default=None)
    sent_to: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
