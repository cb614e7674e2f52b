"""
Middleware modules for the farmops server.

This package contains custom middleware for request timing, logging and
failure tracking.
"""

from .request_monitoring import RequestMonitoringMiddleware

__all__ = ["RequestMonitoringMiddleware"]
