"""
Dashboard aggregation I/O models.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel


class ForecastTask(BaseModel):
    task_id: str
    due_date: datetime
    product_name: str
    customer_name: str
    order_number: Optional[str] = None
    quantity_oz: float
    trays_needed: int


class ForecastDay(BaseModel):
    due_date: date
    label: str
    tasks: list[ForecastTask]
    total_oz: float
    total_trays: int


class Forecast(BaseModel):
    """Open production tasks grouped by due date."""

    start_date: date
    end_date: date
    days: list[ForecastDay]
    total_oz: float
    total_trays: int
    task_count: int


class WeekSummary(BaseModel):
    week_start: date
    week_end: date
    orders_this_week: int
    trays_to_plant: int
    expected_harvest_oz: float
