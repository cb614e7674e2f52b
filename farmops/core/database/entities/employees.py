"""
Employee entity model.

Employees are farm staff records. An employee becomes a farm member once
their invite is accepted, at which point ``user_id`` links the login account.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlmodel import Field

from farmops.core.models.domain import EmployeePosition, EmployeeStatus, InviteStatus

from ..base import Base, new_id, utc_now


class EmployeeBase(Base):
    """Base fields for an employee."""

    first_name: str = Field(max_length=50)
    last_name: str = Field(max_length=50)
    email: Optional[str] = Field(default=None)
    phone: Optional[str] = Field(default=None)
    position: EmployeePosition = Field(default=EmployeePosition.FARM_OPERATOR)
    status: EmployeeStatus = Field(default=EmployeeStatus.ACTIVE)
    hire_date: Optional[date] = Field(default=None)
    hourly_rate: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = Field(default=None)


class Employee(EmployeeBase, table=True):
    """Farm staff member.

    Table: employees
    """

    __tablename__ = "employees"

    id: str = Field(default_factory=new_id, primary_key=True)
    farm_id: str = Field(foreign_key="farms.id", ondelete="CASCADE", index=True)
    user_id: Optional[str] = Field(default=None, foreign_key="users.id", ondelete="SET NULL")

    # Invite flow
    invite_token: Optional[str] = Field(default=None, unique=True, index=True)
    invite_status: InviteStatus = Field(default=InviteStatus.NOT_INVITED)
    invited_at: Optional[datetime] = Field(default=None)
    invite_expires_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
