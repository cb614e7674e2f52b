"""
Base repository and query utilities.

This module provides the repository pattern shared by every repository in the
database layer. Repositories are built with async SQLAlchemy over SQLModel
entities and are always scoped to the request session.
"""

from __future__ import annotations

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from ..base import utc_now

# Generic type for SQLModel entities
EntityType = TypeVar("EntityType", bound=SQLModel)


class AsyncBaseRepository(Generic[EntityType]):
    """Async repository with common CRUD operations using SQLModel.

    Writes commit by default. Multi-step operations pass ``commit=False`` and
    commit once at the end so the whole operation is one transaction.
    """

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        """Initialize repository with async database session and SQLModel entity class.

        Args:
            session: Async SQLModel Session for database operations
            model: SQLModel entity class for this repository
        """
        self.session = session
        self.model = model

    async def create(self, entity: EntityType, *, commit: bool = True) -> EntityType:
        """Create a new entity record.

        Args:
            entity: SQLModel instance to persist
            commit: Commit the session (otherwise only flush)

        Returns:
            Persisted entity with generated fields populated
        """
        self.session.add(entity)
        await self._save(entity, commit)
        return entity

    async def get_by_id(self, entity_id: str) -> Optional[EntityType]:
        """Get entity by its primary identifier.

        Args:
            entity_id: Primary key value

        Returns:
            Entity instance or None if not found
        """
        return await self.session.get(self.model, entity_id)

    async def get_in_farm(self, farm_id: str, entity_id: str) -> Optional[EntityType]:
        """Get a farm-scoped entity; records of other farms are treated as missing."""
        stmt = select(self.model).where(self.model.id == entity_id, self.model.farm_id == farm_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, entity: EntityType, *, commit: bool = True) -> EntityType:
        """Update an existing entity record.

        Args:
            entity: SQLModel instance with updated fields
            commit: Commit the session (otherwise only flush)

        Returns:
            Updated entity instance
        """
        if hasattr(entity, "updated_at"):
            entity.updated_at = utc_now()
        self.session.add(entity)
        await self._save(entity, commit)
        return entity

    async def apply(self, entity: EntityType, changes: Dict[str, Any], *, commit: bool = True) -> EntityType:
        """Set the given fields and save."""
        for key, value in changes.items():
            setattr(entity, key, value)
        return await self.update(entity, commit=commit)

    async def delete(self, entity: EntityType, *, commit: bool = True) -> None:
        await self.session.delete(entity)
        if commit:
            await self.session.commit()
        else:
            await self.session.flush()

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        """List entities with optional pagination and equality filtering.

        Args:
            limit: Maximum number of records to return
            offset: Number of records to skip
            filters: Dictionary of field filters

        Returns:
            List of entity instances
        """
        stmt = select(self.model)
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, self.model, filters)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        stmt = select(func.count()).select_from(self.model)
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, self.model, filters)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def _save(self, entity: EntityType, commit: bool) -> None:
        if commit:
            await self.session.commit()
            await self.session.refresh(entity)
        else:
            await self.session.flush()


class QueryBuilder:
    """Utility class for building SQLModel-based database queries."""

    @staticmethod
    def apply_filters(stmt, model: Type[EntityType], filters: Dict[str, Any]):
        """Apply equality filters to a SQLModel select statement.

        Args:
            stmt: SQLModel select statement
            model: SQLModel entity class
            filters: Dictionary of field filters; ``None`` values are skipped

        Returns:
            Modified select statement with filters applied
        """
        for key, value in filters.items():
            if value is not None and hasattr(model, key):
                stmt = stmt.where(getattr(model, key) == value)
        return stmt

    @staticmethod
    def apply_search(stmt, columns: list, term: Optional[str]):
        """Case-insensitive "contains" match on any of ``columns``."""
        if not term:
            return stmt
        pattern = f"%{term.strip().lower()}%"
        return stmt.where(or_(*[func.lower(column).like(pattern) for column in columns]))

    @staticmethod
    def apply_pagination(stmt, limit: Optional[int], offset: Optional[int]):
        """Apply pagination to a SQLModel select statement.

        Args:
            stmt: SQLModel select statement
            limit: Maximum number of records
            offset: Number of records to skip

        Returns:
            Modified select statement with pagination applied
        """
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return stmt
