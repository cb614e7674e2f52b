"""
Employee Invite Service.

An admin invites an employee by email; the employee accepts with a password,
which creates (or links) their user account and grants the farm role that
matches their position.
"""

from __future__ import annotations

import uuid
from datetime import timedelta

import bcrypt
from sqlalchemy.ext.asyncio import AsyncSession

from farmops.core.database.base import utc_now
from farmops.core.database.entities import Employee, FarmUser, User
from farmops.core.database.repositories import EmployeeRepository, FarmRepository, FarmUserRepository, UserRepository
from farmops.core.errors import BadRequestError, NotFoundError, ValidationError
from farmops.core.logging_config import get_logger
from farmops.core.models.domain import FarmRole, InviteStatus, has_role_at_least, role_for_position
from farmops.core.models.io.employees import InviteAccept, InviteAccepted, InviteCreated, InviteDetails
from farmops.core.monitoring import log_domain_event
from farmops.server.core.config import settings

logger = get_logger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode(), password_hash.encode())


def invite_link(token: str) -> str:
    return f"{settings.frontend_url.rstrip('/')}/accept-invite/{token}"


def is_invite_expired(employee: Employee) -> bool:
    return employee.invite_expires_at is not None and utc_now() > employee.invite_expires_at


async def send_invite(session: AsyncSession, employee: Employee) -> InviteCreated:
    """
    Raises:
        ValidationError: when the employee has no email address
    """
    if not employee.email:
        raise ValidationError("Employee must have an email to be invited")

    token = str(uuid.uuid4())
    now = utc_now()
    employee.invite_token = token
    employee.invite_status = InviteStatus.PENDING
    employee.invited_at = now
    employee.invite_expires_at = now + timedelta(hours=settings.auth.invite_expiry_hours)
    await EmployeeRepository(session).update(employee)

    link = invite_link(token)
    logger.info(f"Invite sent to employee {employee.id}")
    return InviteCreated(
        employee_id=employee.id,
        invite_status=employee.invite_status,
        invite_expires_at=employee.invite_expires_at,
        invite_link=None if settings.is_production else link,
    )


async def _get_invited_employee(session: AsyncSession, token: str) -> Employee:
    employee = await EmployeeRepository(session).get_by_invite_token(token)
    if employee is None:
        raise NotFoundError("Invite")
    return employee


async def get_invite(session: AsyncSession, token: str) -> InviteDetails:
    employee = await _get_invited_employee(session, token)
    farm = await FarmRepository(session).get_by_id(employee.farm_id)
    return InviteDetails(
        farm_id=employee.farm_id,
        farm_name=farm.name,
        first_name=employee.first_name,
        last_name=employee.last_name,
        email=employee.email,
        position=employee.position,
        invite_status=employee.invite_status,
        invite_expires_at=employee.invite_expires_at,
        is_expired=is_invite_expired(employee),
        is_accepted=employee.invite_status == InviteStatus.ACCEPTED,
    )


async def accept_invite(session: AsyncSession, token: str, data: InviteAccept) -> InviteAccepted:
    """Accept an invite: create or link the user account and grant the farm role.

    Raises:
        NotFoundError: unknown token
        BadRequestError: ``EXPIRED`` or ``ALREADY_ACCEPTED``
    """
    employees = EmployeeRepository(session)
    employee = await _get_invited_employee(session, token)

    if is_invite_expired(employee):
        employee.invite_status = InviteStatus.EXPIRED
        await employees.update(employee)
        raise BadRequestError("This invite link has expired. Please request a new one.", code="EXPIRED")
    if employee.invite_status == InviteStatus.ACCEPTED:
        raise BadRequestError("This invite has already been accepted", code="ALREADY_ACCEPTED")

    users = UserRepository(session)
    user = await users.get_by_email(employee.email)
    name = data.name or employee.full_name
    if user is None:
        user = User(external_id=f"emp-{employee.id}", email=employee.email, name=name, phone=employee.phone)
        await users.create(user, commit=False)
        logger.info(f"Created user {user.id} from invite of employee {employee.id}")
    elif not user.name:
        user.name = name
    # An existing login keeps its credentials
    if user.password_hash is None:
        user.password_hash = hash_password(data.password)
    session.add(user)

    role = role_for_position(employee.position)
    memberships = FarmUserRepository(session)
    membership = await memberships.get_membership(user.id, employee.farm_id)
    if membership is None:
        await memberships.create(FarmUser(user_id=user.id, farm_id=employee.farm_id, role=role), commit=False)
    elif has_role_at_least(membership.role, role):
        role = FarmRole(membership.role)
    else:
        membership.role = role
        session.add(membership)

    employee.user_id = user.id
    employee.invite_status = InviteStatus.ACCEPTED
    employee.invite_token = None
    await employees.update(employee)

    log_domain_event("invite_accepted", farm_id=employee.farm_id, employee_id=employee.id, user_id=user.id)
    return InviteAccepted(user_id=user.id, farm_id=employee.farm_id, role=role)
