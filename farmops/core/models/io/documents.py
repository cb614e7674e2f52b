"""
Generated document I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr

from farmops.core.models.domain import DocumentType

from .common import OptionalEmail


class GeneratedDocumentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    farm_id: str
    order_id: Optional[str] = None
    type: DocumentType
    document_number: str
    file_url: str
    file_name: str
    generated_at: datetime
    generated_by: Optional[str] = None
    due_date: Optional[datetime] = None
    sent_at: Optional[datetime] = None
    sent_to: Optional[str] = None


class DocumentGenerate(BaseModel):
    type: DocumentType
    send_email: bool = False
    email_to: OptionalEmail = None


class DocumentPreview(BaseModel):
    type: DocumentType


class DocumentSend(BaseModel):
    email_to: EmailStr
