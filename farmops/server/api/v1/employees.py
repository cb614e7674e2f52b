"""
Team Management Endpoints.

This module handles the farm's employees, the team view (owner plus
employees), the owner's own contact details and sending employee invites.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from farmops.core.database.entities import Employee
from farmops.core.database.repositories import EmployeeRepository, FarmUserRepository, UserRepository
from farmops.core.errors import NotFoundError, ValidationError
from farmops.core.models.domain import EmployeePosition, EmployeeStatus
from farmops.core.models.io import ApiResponse, ErrorResponse
from farmops.core.models.io.employees import (
    EmployeeCreate,
    EmployeeRead,
    EmployeeUpdate,
    InviteCreated,
    OwnerUpdate,
    TeamOwner,
    TeamRead,
)
from farmops.server.services import invites
from farmops.server.services.deps import AdminRole, AnyRole, OwnerRole, SessionDep

router = APIRouter()
team_router = APIRouter()


async def _load_employee(session: SessionDep, farm_id: str, employee_id: str) -> Employee:
    employee = await EmployeeRepository(session).get_in_farm(farm_id, employee_id)
    if employee is None:
        raise NotFoundError("Employee", employee_id)
    return employee


@team_router.get(
    "",
    response_model=ApiResponse[TeamRead],
    summary="Get Team",
    description="The farm owner together with every employee.",
    response_description="Owner and employees.",
)
async def get_team(farm_id: str, context: AnyRole, session: SessionDep) -> ApiResponse[TeamRead]:
    owner = await FarmUserRepository(session).get_owner(farm_id)
    employees = await EmployeeRepository(session).search(farm_id)
    team = TeamRead(
        owner=TeamOwner(user_id=owner.id, name=owner.name, email=owner.email, phone=owner.phone) if owner else None,
        employees=[EmployeeRead.model_validate(employee) for employee in employees],
    )
    return ApiResponse(data=team)


@team_router.patch(
    "/owner",
    response_model=ApiResponse[TeamOwner],
    summary="Update Owner Details",
    description="Update the owner's name and phone on their user account.",
    response_description="The owner's details.",
)
async def update_owner(
    farm_id: str, owner_in: OwnerUpdate, context: OwnerRole, session: SessionDep
) -> ApiResponse[TeamOwner]:
    owner = await FarmUserRepository(session).get_owner(farm_id)
    if owner is None:
        raise NotFoundError("Owner")
    owner = await UserRepository(session).apply(owner, owner_in.model_dump(exclude_unset=True))
    return ApiResponse(data=TeamOwner(user_id=owner.id, name=owner.name, email=owner.email, phone=owner.phone))


@router.get(
    "",
    response_model=ApiResponse[List[EmployeeRead]],
    summary="List Employees",
    description="List employees ordered by last name, then first name.",
    response_description="Matching employees.",
)
async def list_employees(
    farm_id: str,
    context: AnyRole,
    session: SessionDep,
    search: Optional[str] = Query(default=None, description="Matches first name, last name or email"),
    status_filter: Optional[EmployeeStatus] = Query(default=None, alias="status"),
    position: Optional[EmployeePosition] = Query(default=None),
) -> ApiResponse[List[EmployeeRead]]:
    employees = await EmployeeRepository(session).search(farm_id, search=search, status=status_filter, position=position)
    return ApiResponse(data=[EmployeeRead.model_validate(employee) for employee in employees])


@router.get(
    "/{employee_id}",
    response_model=ApiResponse[EmployeeRead],
    summary="Get Employee",
    description="Retrieve a single employee.",
    response_description="The employee.",
    responses={404: {"model": ErrorResponse, "description": "Employee not found"}},
)
async def get_employee(
    farm_id: str, employee_id: str, context: AnyRole, session: SessionDep
) -> ApiResponse[EmployeeRead]:
    employee = await _load_employee(session, farm_id, employee_id)
    return ApiResponse(data=EmployeeRead.model_validate(employee))


@router.post(
    "",
    response_model=ApiResponse[EmployeeRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Employee",
    description="Add an employee; an email or a phone number is required.",
    response_description="The created employee.",
    responses={400: {"model": ErrorResponse, "description": "Neither email nor phone given"}},
)
async def create_employee(
    farm_id: str, employee_in: EmployeeCreate, context: AdminRole, session: SessionDep
) -> ApiResponse[EmployeeRead]:
    """
    Create an employee.

    - **first_name** / **last_name**: 1-50 characters each
    - **email** / **phone**: At least one contact is required
    - **position**: `FARM_MANAGER`, `SALESPERSON` or `FARM_OPERATOR`; decides the farm role granted on invite
    """
    if not employee_in.email and not employee_in.phone:
        raise ValidationError("Either email or phone is required")
    employee = await EmployeeRepository(session).create(Employee(farm_id=farm_id, **employee_in.model_dump()))
    return ApiResponse(data=EmployeeRead.model_validate(employee))


@router.patch(
    "/{employee_id}",
    response_model=ApiResponse[EmployeeRead],
    summary="Update Employee",
    description="Update an employee; only the provided fields change.",
    response_description="The updated employee.",
)
async def update_employee(
    farm_id: str, employee_id: str, employee_in: EmployeeUpdate, context: AdminRole, session: SessionDep
) -> ApiResponse[EmployeeRead]:
    employee = await _load_employee(session, farm_id, employee_id)
    employee = await EmployeeRepository(session).apply(employee, employee_in.model_dump(exclude_unset=True))
    return ApiResponse(data=EmployeeRead.model_validate(employee))


@router.delete(
    "/{employee_id}",
    response_model=ApiResponse[EmployeeRead],
    summary="Terminate Employee",
    description="Soft-delete an employee by setting the status to TERMINATED.",
    response_description="The terminated employee.",
)
async def delete_employee(
    farm_id: str, employee_id: str, context: AdminRole, session: SessionDep
) -> ApiResponse[EmployeeRead]:
    employee = await _load_employee(session, farm_id, employee_id)
    employee = await EmployeeRepository(session).apply(employee, {"status": EmployeeStatus.TERMINATED})
    return ApiResponse(data=EmployeeRead.model_validate(employee))


@router.post(
    "/{employee_id}/invite",
    response_model=ApiResponse[InviteCreated],
    summary="Invite Employee",
    description="Create a pending invite for the employee to join the farm with their own account.",
    response_description="Invite status, expiry and (outside production) the invite link.",
    responses={400: {"model": ErrorResponse, "description": "Employee has no email"}},
)
async def invite_employee(
    farm_id: str, employee_id: str, context: AdminRole, session: SessionDep
) -> ApiResponse[InviteCreated]:
    """
    Invite an employee.

    A fresh token replaces any earlier one, so re-inviting also renews an
    expired invite.
    """
    employee = await _load_employee(session, farm_id, employee_id)
    return ApiResponse(data=await invites.send_invite(session, employee))
