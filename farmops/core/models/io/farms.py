"""
Farm I/O models for API requests and responses.

This module contains Pydantic-based I/O schemas for farm management,
memberships and per-user preferences.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from farmops.core.models.domain import FarmRole, UnitSystem

from .common import OptionalEmail

SLUG_PATTERN = r"^[a-z0-9-]+$"


class FarmRead(BaseModel):
    """Schema for reading a farm from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    timezone: str
    currency: str
    logo_url: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: str
    invoice_prefix: str
    next_invoice_number: int
    invoice_footer_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    role: Optional[FarmRole] = Field(default=None, description="The caller's role on this farm")


class FarmCounts(BaseModel):
    employees: int = 0
    products: int = 0
    tasks: int = 0
    customers: int = 0
    orders: int = 0


class FarmDetail(FarmRead):
    """Farm with record counts."""

    counts: FarmCounts


class FarmCreate(BaseModel):
    """Schema for creating a farm."""

    name: str = Field(min_length=1, max_length=100, description="Farm name")
    slug: str = Field(
        min_length=1,
        max_length=50,
        pattern=SLUG_PATTERN,
        description="Slug must be lowercase alphanumeric with dashes",
    )
    timezone: str = Field(default="UTC")
    currency: str = Field(default="USD")


class FarmUpdate(BaseModel):
    """Schema for updating a farm; only provided fields change."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=50, pattern=SLUG_PATTERN)
    timezone: Optional[str] = None
    currency: Optional[str] = None
    phone: Optional[str] = None
    email: OptionalEmail = None
    website: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    invoice_prefix: Optional[str] = Field(default=None, min_length=1, max_length=10)
    next_invoice_number: Optional[int] = Field(default=None, ge=1)
    invoice_footer_notes: Optional[str] = None


class UserPreferenceRead(BaseModel):
    """Schema for reading user preferences for a farm."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    farm_id: str
    has_seen_layout_tutorial: bool
    preferred_unit: UnitSystem
    tutorial_completed_steps: list[str]
    tutorial_dismissed: bool
    created_at: datetime
    updated_at: datetime

    @field_validator("tutorial_completed_steps", mode="before")
    @classmethod
    def _parse_steps(cls, value):
        if isinstance(value, str):
            return json.loads(value or "[]")
        return value


class UserPreferenceUpdate(BaseModel):
    has_seen_layout_tutorial: Optional[bool] = None
    preferred_unit: Optional[UnitSystem] = None
    tutorial_completed_steps: Optional[list[str]] = None
    tutorial_dismissed: Optional[bool] = None


class OnboardingStep(BaseModel):
    id: str
    title: str
    description: str
    category: str
    route: str
    optional: bool = False
    completed: bool = False


class OnboardingChecklist(BaseModel):
    steps: list[OnboardingStep]
    completed_count: int
    total_count: int
    percent_complete: int
    dismissed: bool = False
