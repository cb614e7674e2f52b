"""
Monitoring and Tracing Configuration Module.

This module provides integration with Pydantic Logfire for monitoring
and tracing of the farmops API, including:
- API endpoint tracing
- Database operation monitoring
- Request metrics for every handled call

Logfire is switched on with ``FARMOPS_LOGFIRE_ENABLED``. When it is off every
helper here still writes to the standard logger so the request trail is never lost.
"""

from typing import Optional

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from farmops.core.logging_config import get_logger
from farmops.server.core.config import settings

logger = get_logger(__name__)

_logfire_ready = False


def is_logfire_enabled() -> bool:
    return _logfire_ready


def initialize_logfire(app: Optional[FastAPI] = None, engine: Optional[AsyncEngine] = None) -> None:
    """
    Initialize Pydantic Logfire for monitoring and tracing.

    This function sets up Logfire with automatic instrumentation for:
    - FastAPI endpoints (when ``app`` is given)
    - SQLAlchemy database operations (when ``engine`` is given)

    Args:
        app: FastAPI application instance for endpoint instrumentation (optional).
        engine: Async engine whose sync engine is instrumented (optional).
    """
    global _logfire_ready

    config = settings.monitoring
    if not config.enabled:
        logger.info("Logfire monitoring is disabled. Set FARMOPS_LOGFIRE_ENABLED=true to enable.")
        return

    if not config.token:
        logger.warning(
            "Logfire is enabled but FARMOPS_LOGFIRE_TOKEN is not set. "
            "Monitoring will not work. Set FARMOPS_LOGFIRE_TOKEN to enable Logfire."
        )
        return

    logfire.configure(
        token=config.token,
        service_name=config.service_name,
        environment=settings.environment,
    )
    if app is not None:
        logfire.instrument_fastapi(app)
        logger.info("Logfire: FastAPI instrumentation enabled")
    if engine is not None:
        logfire.instrument_sqlalchemy(engine=engine.sync_engine)
        logger.info("Logfire: SQLAlchemy instrumentation enabled")

    _logfire_ready = True
    logger.info(f"Logfire monitoring initialized: service={config.service_name}, environment={settings.environment}")


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """
    Record a handled API request.

    Args:
        method: HTTP method
        path: Request path
        status_code: Response status code
        duration_ms: Handling time in milliseconds
    """
    logger.debug(f"{method} {path} -> {status_code} ({duration_ms:.2f}ms)")
    if _logfire_ready:
        logfire.info(
            "API request {method} {path}",
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=duration_ms,
        )


def log_domain_event(event: str, **attributes) -> None:
    """
    Record a business event (order placed, document generated, invite accepted).

    Args:
        event: Short event name
        **attributes: Structured attributes attached to the event
    """
    logger.info(event, extra={"event_attributes": attributes})
    if _logfire_ready:
        logfire.info(event, **attributes)
