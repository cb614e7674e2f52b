"""
Unit tests for the request monitoring middleware.

This test suite covers:
- Request metrics reported for handled requests
- The X-Process-Time response header
- Slow request warnings
- Failure logging and re-raising
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import Request
from starlette.responses import Response

from farmops.server.middleware import RequestMonitoringMiddleware

MODULE = "farmops.server.middleware.request_monitoring"


def _request(method: str = "GET", path: str = "/api/v1/farms") -> AsyncMock:
    request = AsyncMock(spec=Request)
    request.method = method
    request.url.path = path
    request.state = MagicMock()
    return request


class TestRequestMonitoringDispatch:
    """Test RequestMonitoringMiddleware.dispatch method."""

    @pytest.mark.asyncio
    async def test_reports_successful_request(self):
        """Test that the request is reported with its status code."""

        async def call_next(request):
            return Response(content="ok", status_code=201)

        middleware = RequestMonitoringMiddleware(app=AsyncMock())
        with patch(f"{MODULE}.log_api_request") as mock_log:
            response = await middleware.dispatch(_request("POST"), call_next)

        assert response.status_code == 201
        mock_log.assert_called_once()
        kwargs = mock_log.call_args[1]
        assert kwargs["method"] == "POST"
        assert kwargs["path"] == "/api/v1/farms"
        assert kwargs["status_code"] == 201
        assert kwargs["duration_ms"] >= 0

    @pytest.mark.asyncio
    async def test_adds_process_time_header(self):
        async def call_next(request):
            return Response(content="ok")

        middleware = RequestMonitoringMiddleware(app=AsyncMock())
        with patch(f"{MODULE}.log_api_request"):
            response = await middleware.dispatch(_request(), call_next)

        assert float(response.headers["X-Process-Time"]) >= 0

    @pytest.mark.asyncio
    async def test_warns_on_slow_request(self):
        """Test that requests over the threshold log a warning."""

        async def call_next(request):
            return Response(content="ok")

        middleware = RequestMonitoringMiddleware(app=AsyncMock())
        with (
            patch(f"{MODULE}.log_api_request"),
            patch(f"{MODULE}.SLOW_REQUEST_MS", -1),
            patch(f"{MODULE}.logger") as mock_logger,
        ):
            await middleware.dispatch(_request(), call_next)

        mock_logger.warning.assert_called_once()
        assert "Slow API request" in mock_logger.warning.call_args[0][0]

    @pytest.mark.asyncio
    async def test_failure_is_logged_and_reraised(self):
        """Test that exceptions are reported as 500 and propagate."""

        async def call_next(request):
            raise RuntimeError("database down")

        middleware = RequestMonitoringMiddleware(app=AsyncMock())
        with patch(f"{MODULE}.log_api_request") as mock_log, patch(f"{MODULE}.logger") as mock_logger:
            with pytest.raises(RuntimeError, match="database down"):
                await middleware.dispatch(_request(), call_next)

        assert mock_log.call_args[1]["status_code"] == 500
        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args[1]["extra"]["error"] == "database down"
