"""
Dashboard Endpoints.

This module serves the dashboard widgets: upcoming harvests, upcoming
transplants (move to light) and the figures of the current week.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Query

from farmops.core.models.domain import TaskType
from farmops.core.models.io import ApiResponse
from farmops.core.models.io.dashboard import Forecast, WeekSummary
from farmops.server.services import forecast
from farmops.server.services.deps import AnyRole, SessionDep

router = APIRouter()

DaysQuery = Query(default=7, ge=1, le=90, description="Number of days to include, starting today")
TodayQuery = Query(default=None, description="Reference day (defaults to the server date)")


@router.get(
    "/harvest-forecast",
    response_model=ApiResponse[Forecast],
    summary="Harvest Forecast",
    description="Open harvest tasks for the coming days, grouped by due date.",
    response_description="Daily groups with ounce and tray totals.",
)
async def harvest_forecast(
    farm_id: str,
    context: AnyRole,
    session: SessionDep,
    days: int = DaysQuery,
    today: Optional[date] = TodayQuery,
) -> ApiResponse[Forecast]:
    """
    Harvest forecast.

    Groups are labelled `Today`, `Tomorrow` or a short date such as `Mon, Jan 5`.
    Each task shows the product, customer, order number, ounces and trays.
    """
    return ApiResponse(data=await forecast.build_forecast(session, farm_id, TaskType.HARVESTING, days, today))


@router.get(
    "/transplant-forecast",
    response_model=ApiResponse[Forecast],
    summary="Transplant Forecast",
    description="Open move-to-light tasks for the coming days, grouped by due date.",
    response_description="Daily groups with ounce and tray totals.",
)
async def transplant_forecast(
    farm_id: str,
    context: AnyRole,
    session: SessionDep,
    days: int = DaysQuery,
    today: Optional[date] = TodayQuery,
) -> ApiResponse[Forecast]:
    return ApiResponse(data=await forecast.build_forecast(session, farm_id, TaskType.MOVE_TO_LIGHT, days, today))


@router.get(
    "/week-summary",
    response_model=ApiResponse[WeekSummary],
    summary="Week Summary",
    description="Orders created this week, trays left to plant and ounces left to harvest.",
    response_description="Figures of the current Sunday-to-Sunday week.",
)
async def week_summary(
    farm_id: str, context: AnyRole, session: SessionDep, today: Optional[date] = TodayQuery
) -> ApiResponse[WeekSummary]:
    return ApiResponse(data=await forecast.build_week_summary(session, farm_id, today))
