"""
Generated document repository.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from farmops.core.models.domain import DocumentType

from ..entities import GeneratedDocument
from .base import AsyncBaseRepository, QueryBuilder


class GeneratedDocumentRepository(AsyncBaseRepository[GeneratedDocument]):
    """Repository for generated PDF document records."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, GeneratedDocument)

    async def list_for_order(self, order_id: str) -> List[GeneratedDocument]:
        stmt = (
            select(GeneratedDocument)
            .where(GeneratedDocument.order_id == order_id)
            .order_by(GeneratedDocument.generated_at.desc())
        )
        return list((await self.session.execute(stmt)).scalars().all())

    async def search(
        self,
        farm_id: str,
        doc_type: Optional[DocumentType] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[GeneratedDocument], int]:
        """Documents of a farm, newest first, with the total number of matches."""
        conditions = [GeneratedDocument.farm_id == farm_id]
        if doc_type is not None:
            conditions.append(GeneratedDocument.type == doc_type)
        if start_date is not None:
            conditions.append(GeneratedDocument.generated_at >= start_date)
        if end_date is not None:
            conditions.append(GeneratedDocument.generated_at <= end_date)

        total_stmt = select(func.count()).select_from(GeneratedDocument).where(*conditions)
        total = int((await self.session.execute(total_stmt)).scalar_one())

        stmt = select(GeneratedDocument).where(*conditions).order_by(GeneratedDocument.generated_at.desc())
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        documents = list((await self.session.execute(stmt)).scalars().all())
        return documents, total
