"""
Employee and invite I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from farmops.core.models.domain import EmployeePosition, EmployeeStatus, FarmRole, InviteStatus

from .common import OptionalEmail


class EmployeeRead(BaseModel):
    """Schema for reading an employee from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    farm_id: str
    user_id: Optional[str] = None
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    position: EmployeePosition
    status: EmployeeStatus
    hire_date: Optional[date] = None
    hourly_rate: Optional[float] = None
    notes: Optional[str] = None
    invite_status: InviteStatus
    invited_at: Optional[datetime] = None
    invite_expires_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class EmployeeCreate(BaseModel):
    """Schema for creating an employee; an email or a phone number is required."""

    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    email: OptionalEmail = None
    phone: Optional[str] = Field(default=None, max_length=30)
    position: EmployeePosition = EmployeePosition.FARM_OPERATOR
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    hire_date: Optional[date] = None
    hourly_rate: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None


class EmployeeUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    email: OptionalEmail = None
    phone: Optional[str] = Field(default=None, max_length=30)
    position: Optional[EmployeePosition] = None
    status: Optional[EmployeeStatus] = None
    hire_date: Optional[date] = None
    hourly_rate: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None


class TeamOwner(BaseModel):
    user_id: str
    name: Optional[str] = None
    email: str
    phone: Optional[str] = None
    role: FarmRole = FarmRole.OWNER


class TeamRead(BaseModel):
    owner: Optional[TeamOwner] = None
    employees: list[EmployeeRead]


class OwnerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=30)


class InviteCreated(BaseModel):
    employee_id: str
    invite_status: InviteStatus
    invite_expires_at: datetime
    invite_link: Optional[str] = Field(default=None, description="Only returned outside production")


class InviteDetails(BaseModel):
    farm_id: str
    farm_name: str
    first_name: str
    last_name: str
    email: Optional[str] = None
    position: EmployeePosition
    invite_status: InviteStatus
    invite_expires_at: Optional[datetime] = None
    is_expired: bool
    is_accepted: bool


class InviteAccept(BaseModel):
    password: str = Field(min_length=6, description="Password for the new account")
    name: Optional[str] = Field(default=None, max_length=100)


class InviteAccepted(BaseModel):
    user_id: str
    farm_id: str
    role: FarmRole
