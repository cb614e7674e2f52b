"""
Exception handlers for the farmops server.

This package contains the exception handlers that translate application,
validation and database errors into the response envelope, and a setup
function to register them with the FastAPI application.
"""

from .app_errors import app_error_handler, integrity_error_handler, no_result_handler
from .global_handler import global_exception_handler, http_exception_handler, setup_exception_handlers, validation_error_handler

__all__ = [
    "app_error_handler",
    "global_exception_handler",
    "http_exception_handler",
    "integrity_error_handler",
    "no_result_handler",
    "setup_exception_handlers",
    "validation_error_handler",
]
