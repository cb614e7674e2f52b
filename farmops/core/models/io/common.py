"""
Response envelope models shared by every endpoint.

Successful calls answer ``{"success": true, "data": ...}``; failures answer
``{"success": false, "error": {"code": ..., "message": ...}}``.
"""

from __future__ import annotations

from typing import Annotated, Any, Generic, Optional, TypeVar

from pydantic import BaseModel, BeforeValidator, EmailStr, Field

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    """Success envelope."""

    success: bool = True
    data: DataT


class PageMeta(BaseModel):
    total: int = Field(description="Total number of matching records")
    limit: int
    offset: int


class PaginatedResponse(BaseModel, Generic[DataT]):
    """Success envelope for paginated listings."""

    success: bool = True
    data: DataT
    meta: PageMeta


class ErrorBody(BaseModel):
    code: str = Field(description="Machine readable error code (e.g. NOT_FOUND)")
    message: str
    details: Optional[Any] = None


class ErrorResponse(BaseModel):
    """Failure envelope."""

    success: bool = False
    error: ErrorBody


class DeletedResult(BaseModel):
    deleted: bool = True


def empty_to_none(value: Any) -> Any:
    """Treat blank strings from form inputs as missing values."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


OptionalEmail = Annotated[Optional[EmailStr], BeforeValidator(empty_to_none)]
"""Email field where a blank string is stored as null."""
