"""
Health Check Endpoints.

This module provides basic system status endpoints (health, version)
used for monitoring and deployment verification.
"""

from fastapi import APIRouter

from farmops.core.models.io import ApiResponse
from farmops.server.core import constant

router = APIRouter()


@router.get(
    "/health",
    response_model=ApiResponse[dict],
    summary="Health Check",
    description="Check the operational status of the API server.",
    response_description="Status object.",
)
async def health_check() -> ApiResponse[dict]:
    """
    Health check endpoint.

    Returns a simple status indicator to confirm the server is running and reachable.
    """
    return ApiResponse(data={"status": "ok"})


@router.get(
    "/version",
    response_model=ApiResponse[dict],
    summary="Get Version",
    description="Retrieve version information for the API server.",
    response_description="Version object.",
)
async def version() -> ApiResponse[dict]:
    """
    Get API version.

    Returns the current semantic version of the API and supported schema version.
    """
    return ApiResponse(data={"version": constant.VERSION, "schema_version": "v1"})
