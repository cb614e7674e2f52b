"""
Farm tenancy entity models.

This module contains the tenant (farm), user accounts, farm memberships with
their role, and per-user preferences for a farm.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import List, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from farmops.core.models.domain import FarmRole, UnitSystem

from ..base import Base, new_id, utc_now


class FarmBase(Base):
    """Base fields for a farm."""

    name: str = Field(max_length=100, description="Farm display name")
    slug: str = Field(max_length=50, unique=True, index=True, description="URL-safe identifier used by the storefront")
    timezone: str = Field(default="UTC")
    currency: str = Field(default="USD")

    # Contact and address (printed on documents)
    logo_url: Optional[str] = Field(default=None)
    phone: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None)
    website: Optional[str] = Field(default=None)
    address_line1: Optional[str] = Field(default=None)
    address_line2: Optional[str] = Field(default=None)
    city: Optional[str] = Field(default=None)
    state: Optional[str] = Field(default=None)
    postal_code: Optional[str] = Field(default=None)
    country: str = Field(default="US")

    # Invoice numbering
    invoice_prefix: str = Field(default="INV", max_length=10)
    next_invoice_number: int = Field(default=1)
    invoice_footer_notes: Optional[str] = Field(default=None)


class Farm(FarmBase, table=True):
    """A tenant.

    Table: farms
    """

    __tablename__ = "farms"

    id: str = Field(default_factory=new_id, primary_key=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class User(Base, table=True):
    """An account known to the external identity provider.

    Table: users
    """

    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True)
    external_id: str = Field(unique=True, index=True, description="Subject of the identity provider token")
    email: str = Field(unique=True, index=True)
    name: Optional[str] = Field(default=None)
    phone: Optional[str] = Field(default=None)
    avatar_url: Optional[str] = Field(default=None)
    password_hash: Optional[str] = Field(default=None, description="Set when the account came from an invite")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class FarmUser(Base, table=True):
    """Membership of a user in a farm with a role.

    Table: farm_users
    """

    __tablename__ = "farm_users"
    __table_args__ = (UniqueConstraint("user_id", "farm_id", name="uq_farm_users_user_farm"),)

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    farm_id: str = Field(foreign_key="farms.id", ondelete="CASCADE", index=True)
    role: FarmRole = Field(default=FarmRole.FARM_OPERATOR)
    created_at: datetime = Field(default_factory=utc_now)


class UserPreference(Base, table=True):
    """Per-user, per-farm preferences including onboarding progress.

    Table: user_preferences
    """

    __tablename__ = "user_preferences"
    __table_args__ = (UniqueConstraint("user_id", "farm_id", name="uq_user_preferences_user_farm"),)

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    farm_id: str = Field(foreign_key="farms.id", ondelete="CASCADE", index=True)
    has_seen_layout_tutorial: bool = Field(default=False)
    preferred_unit: UnitSystem = Field(default=UnitSystem.FEET)
    tutorial_completed_steps: str = Field(default="[]", description="JSON array of manually completed step ids")
    tutorial_dismissed: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def get_completed_steps(self) -> List[str]:
        """Get manually completed tutorial steps as a list."""
        try:
            return json.loads(self.tutorial_completed_steps) if self.tutorial_completed_steps else []
        except (json.JSONDecodeError, TypeError):
            return []

    def set_completed_steps(self, steps: List[str]) -> None:
        """Set manually completed tutorial steps from a list."""
        self.tutorial_completed_steps = json.dumps(sorted(set(steps)))
