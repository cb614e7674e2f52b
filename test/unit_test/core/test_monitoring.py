"""
Unit tests for Logfire monitoring helpers.

Logfire itself is patched; tests check when it is configured and that the
standard logger always receives the events.
"""

from unittest.mock import Mock, patch

import pytest

from farmops.core import monitoring
from farmops.server.core.config import settings

MODULE = "farmops.core.monitoring"


@pytest.fixture(autouse=True)
def reset_logfire_state(monkeypatch):
    monkeypatch.setattr(monitoring, "_logfire_ready", False)


class TestInitializeLogfire:
    """Test Logfire initialization."""

    def test_disabled(self, monkeypatch):
        monkeypatch.setattr(settings, "logfire_enabled", False)
        with patch(f"{MODULE}.logfire") as mock_logfire, patch(f"{MODULE}.logger") as mock_logger:
            monitoring.initialize_logfire()

        mock_logfire.configure.assert_not_called()
        mock_logger.info.assert_called_once()
        assert "disabled" in mock_logger.info.call_args[0][0]
        assert monitoring.is_logfire_enabled() is False

    def test_enabled_without_token(self, monkeypatch):
        monkeypatch.setattr(settings, "logfire_enabled", True)
        monkeypatch.setattr(settings, "logfire_token", None)
        with patch(f"{MODULE}.logfire") as mock_logfire, patch(f"{MODULE}.logger") as mock_logger:
            monitoring.initialize_logfire()

        mock_logfire.configure.assert_not_called()
        mock_logger.warning.assert_called_once()
        assert monitoring.is_logfire_enabled() is False

    def test_enabled_instruments_app_and_engine(self, monkeypatch):
        monkeypatch.setattr(settings, "logfire_enabled", True)
        monkeypatch.setattr(settings, "logfire_token", "write-token")
        app = Mock()
        engine = Mock()
        with patch(f"{MODULE}.logfire") as mock_logfire:
            monitoring.initialize_logfire(app, engine)

        mock_logfire.configure.assert_called_once_with(
            token="write-token",
            service_name=settings.logfire_service_name,
            environment=settings.environment,
        )
        mock_logfire.instrument_fastapi.assert_called_once_with(app)
        mock_logfire.instrument_sqlalchemy.assert_called_once_with(engine=engine.sync_engine)
        assert monitoring.is_logfire_enabled() is True


class TestEventHelpers:
    """Test request and domain event recording."""

    def test_request_logged_without_logfire(self):
        with patch(f"{MODULE}.logfire") as mock_logfire, patch(f"{MODULE}.logger") as mock_logger:
            monitoring.log_api_request("GET", "/api/v1/farms", 200, 12.5)

        mock_logger.debug.assert_called_once_with("GET /api/v1/farms -> 200 (12.50ms)")
        mock_logfire.info.assert_not_called()

    def test_request_sent_to_logfire(self, monkeypatch):
        monkeypatch.setattr(monitoring, "_logfire_ready", True)
        with patch(f"{MODULE}.logfire") as mock_logfire:
            monitoring.log_api_request("POST", "/api/v1/farms", 201, 3.0)

        mock_logfire.info.assert_called_once_with(
            "API request {method} {path}",
            method="POST",
            path="/api/v1/farms",
            status_code=201,
            duration_ms=3.0,
        )

    def test_domain_event(self, monkeypatch):
        monkeypatch.setattr(monitoring, "_logfire_ready", True)
        with patch(f"{MODULE}.logfire") as mock_logfire, patch(f"{MODULE}.logger") as mock_logger:
            monitoring.log_domain_event("order_created", farm_id="farm-1", order_number="ORD-2026-001")

        mock_logger.info.assert_called_once_with(
            "order_created", extra={"event_attributes": {"farm_id": "farm-1", "order_number": "ORD-2026-001"}}
        )
        mock_logfire.info.assert_called_once_with("order_created", farm_id="farm-1", order_number="ORD-2026-001")
