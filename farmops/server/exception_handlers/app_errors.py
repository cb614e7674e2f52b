"""
Handlers for application and database errors.

``AppError`` subclasses carry their own status and code. Database constraint
violations surface as ``IntegrityError`` (409) and lookups that required a row
as ``NoResultFound`` (404).
"""

import re

from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, NoResultFound

from farmops.core.errors import AppError
from farmops.core.logging_config import get_logger

logger = get_logger(__name__)

# sqlite: "UNIQUE constraint failed: skus.farm_id, skus.sku_code"
_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: (?P<columns>[\w.,\s]+)")
# postgres: 'Key (farm_id, sku_code)=(...) already exists'
_POSTGRES_UNIQUE = re.compile(r"Key \((?P<columns>[^)]+)\)=")


def error_response(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


def duplicate_fields(exc: IntegrityError) -> str:
    """Human readable list of the columns named in a unique-constraint violation."""
    message = str(exc.orig) if exc.orig is not None else str(exc)
    match = _SQLITE_UNIQUE.search(message) or _POSTGRES_UNIQUE.search(message)
    if not match:
        return "value"
    columns = [column.strip().split(".")[-1] for column in match.group("columns").split(",")]
    columns = [column for column in columns if column and column != "farm_id"]
    return ", ".join(columns) or "value"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.code} in {request.method} {request.url.path}: {exc.message}")
    else:
        logger.debug(f"{exc.code} in {request.method} {request.url.path}: {exc.message}")
    return error_response(exc.status_code, exc.code, exc.message, exc.details)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    fields = duplicate_fields(exc)
    logger.info(f"Integrity error in {request.method} {request.url.path}: {exc.orig}")
    return error_response(409, "DUPLICATE_ENTRY", f"A record with this {fields} already exists")


async def no_result_handler(request: Request, exc: NoResultFound) -> JSONResponse:
    return error_response(404, "NOT_FOUND", "Record not found")
