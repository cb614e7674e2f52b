"""
I/O models for API requests and responses.

Every endpoint answers with the ``ApiResponse`` envelope defined in ``common``;
the resource modules define the ``...Create``/``...Update``/``...Read`` payloads.
"""

from .common import ApiResponse, DeletedResult, ErrorBody, ErrorResponse, PageMeta, PaginatedResponse

__all__ = [
    "ApiResponse",
    "DeletedResult",
    "ErrorBody",
    "ErrorResponse",
    "PageMeta",
    "PaginatedResponse",
]
