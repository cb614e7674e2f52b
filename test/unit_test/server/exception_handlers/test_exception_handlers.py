"""
Unit tests for server exception handlers.

Tests cover the response envelope produced for application errors, database
errors, validation failures, framework HTTP errors and unhandled exceptions.
"""

import json
from unittest.mock import Mock, patch

import pytest
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import IntegrityError, NoResultFound
from starlette.exceptions import HTTPException as StarletteHTTPException

from farmops.core.errors import (
    AppError,
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from farmops.server.exception_handlers import (
    app_error_handler,
    global_exception_handler,
    http_exception_handler,
    integrity_error_handler,
    no_result_handler,
    setup_exception_handlers,
    validation_error_handler,
)
from farmops.server.exception_handlers.app_errors import duplicate_fields


def _body(response: JSONResponse) -> dict:
    return json.loads(response.body.decode())


@pytest.fixture
def mock_request():
    """Create a mock request object."""
    request = Mock(spec=Request)
    request.method = "GET"
    request.url.path = "/api/v1/test"
    request.query_params = {}
    request.client = Mock()
    request.client.host = "127.0.0.1"
    return request


class TestAppErrorHandler:
    """Test suite for application error translation."""

    @pytest.mark.asyncio
    async def test_not_found(self, mock_request):
        response = await app_error_handler(mock_request, NotFoundError("Order", "o-1"))
        assert response.status_code == 404
        assert _body(response) == {
            "success": False,
            "error": {"code": "NOT_FOUND", "message": "Order with id 'o-1' not found"},
        }

    @pytest.mark.asyncio
    async def test_custom_code(self, mock_request):
        response = await app_error_handler(mock_request, BadRequestError("Too early", code="INVALID_DELIVERY_DATE"))
        assert response.status_code == 400
        assert _body(response)["error"]["code"] == "INVALID_DELIVERY_DATE"

    @pytest.mark.asyncio
    async def test_details_are_included(self, mock_request):
        exc = ValidationError("Bad product", details={"missing": ["Days Light"]})
        response = await app_error_handler(mock_request, exc)
        assert _body(response)["error"]["details"] == {"missing": ["Days Light"]}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "exc,status_code",
        [(ForbiddenError("No farm access"), 403), (ConflictError("Taken"), 409)],
    )
    async def test_status_codes(self, mock_request, exc, status_code):
        response = await app_error_handler(mock_request, exc)
        assert response.status_code == status_code
        assert _body(response)["success"] is False


class TestDatabaseErrorHandlers:
    """Test suite for integrity and missing-row errors."""

    def test_duplicate_fields_from_sqlite(self):
        exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: skus.farm_id, skus.sku_code"))
        assert duplicate_fields(exc) == "sku_code"

    def test_duplicate_fields_from_postgres(self):
        exc = IntegrityError(
            "INSERT", {}, Exception('duplicate key value violates unique constraint "uq"\nKey (slug)=(abc) already exists.')
        )
        assert duplicate_fields(exc) == "slug"

    def test_duplicate_fields_unknown_message(self):
        exc = IntegrityError("INSERT", {}, Exception("FOREIGN KEY constraint failed"))
        assert duplicate_fields(exc) == "value"

    @pytest.mark.asyncio
    async def test_integrity_error_is_conflict(self, mock_request):
        exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: farms.slug"))
        response = await integrity_error_handler(mock_request, exc)
        assert response.status_code == 409
        assert _body(response)["error"] == {
            "code": "DUPLICATE_ENTRY",
            "message": "A record with this slug already exists",
        }

    @pytest.mark.asyncio
    async def test_no_result_is_not_found(self, mock_request):
        response = await no_result_handler(mock_request, NoResultFound())
        assert response.status_code == 404
        assert _body(response)["error"]["code"] == "NOT_FOUND"


class TestFrameworkErrorHandlers:
    """Test suite for validation and HTTP errors raised by the framework."""

    @pytest.mark.asyncio
    async def test_validation_error_details(self, mock_request):
        exc = RequestValidationError(
            [{"loc": ("body", "price"), "msg": "Input should be greater than 0", "type": "greater_than"}]
        )
        response = await validation_error_handler(mock_request, exc)
        assert response.status_code == 400
        error = _body(response)["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"] == [
            {"loc": ["body", "price"], "msg": "Input should be greater than 0", "type": "greater_than"}
        ]

    @pytest.mark.asyncio
    async def test_http_exception_codes(self, mock_request):
        response = await http_exception_handler(mock_request, StarletteHTTPException(405, "Method Not Allowed"))
        assert response.status_code == 405
        assert _body(response)["error"] == {"code": "METHOD_NOT_ALLOWED", "message": "Method Not Allowed"}

    @pytest.mark.asyncio
    async def test_http_exception_keeps_headers(self, mock_request):
        exc = StarletteHTTPException(401, "Not authenticated", headers={"WWW-Authenticate": "Bearer"})
        response = await http_exception_handler(mock_request, exc)
        assert response.headers["WWW-Authenticate"] == "Bearer"


class TestGlobalExceptionHandler:
    """Test suite for global exception handler."""

    @pytest.mark.asyncio
    async def test_exception_handler_logs_error(self, mock_request):
        """Test that exception handler logs errors."""
        exc = ValueError("Test error")

        with patch("farmops.server.exception_handlers.global_handler.logger") as mock_logger:
            await global_exception_handler(mock_request, exc)

            mock_logger.error.assert_called_once()
            call_args = mock_logger.error.call_args
            assert "Unhandled exception" in call_args[0][0]
            assert call_args[1]["extra"]["error_type"] == "ValueError"
            assert call_args[1]["extra"]["client"] == "127.0.0.1"

    @pytest.mark.asyncio
    async def test_exception_handler_hides_internals(self, mock_request):
        """Test that the response never carries the exception text."""
        with patch("farmops.server.exception_handlers.global_handler.logger"):
            response = await global_exception_handler(mock_request, RuntimeError("secret detail"))

        assert response.status_code == 500
        assert _body(response) == {
            "success": False,
            "error": {"code": "INTERNAL_ERROR", "message": "An internal error occurred"},
        }

    @pytest.mark.asyncio
    async def test_exception_handler_without_client(self, mock_request):
        """Test handling when the request has no client information."""
        mock_request.client = None
        with patch("farmops.server.exception_handlers.global_handler.logger") as mock_logger:
            await global_exception_handler(mock_request, RuntimeError("boom"))

            assert mock_logger.error.call_args[1]["extra"]["client"] == "unknown"


class TestSetupExceptionHandlers:
    """Test suite for handler registration."""

    def test_registers_all_handlers(self):
        app = FastAPI()
        setup_exception_handlers(app)
        for exc_class in (AppError, RequestValidationError, IntegrityError, NoResultFound, Exception):
            assert exc_class in app.exception_handlers

    @pytest.mark.asyncio
    async def test_unhandled_error_through_app(self):
        app = FastAPI()
        setup_exception_handlers(app)

        @app.get("/boom")
        async def boom():
            raise RuntimeError("boom")

        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://localhost") as client:
            response = await client.get("/boom")

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "INTERNAL_ERROR"
