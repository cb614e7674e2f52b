"""
Public Invite Endpoints.

Invitees open the link from their invite without an account: these routes
show the invite and accept it with a password.
"""

from fastapi import APIRouter

from farmops.core.models.io import ApiResponse, ErrorResponse
from farmops.core.models.io.employees import InviteAccept, InviteAccepted, InviteDetails
from farmops.server.services import invites
from farmops.server.services.deps import SessionDep

router = APIRouter()


@router.get(
    "/{token}",
    response_model=ApiResponse[InviteDetails],
    summary="Get Invite",
    description="Show the farm and employee details behind an invite token.",
    response_description="Invite details with expiry and acceptance flags.",
    responses={404: {"model": ErrorResponse, "description": "Unknown invite"}},
)
async def get_invite(token: str, session: SessionDep) -> ApiResponse[InviteDetails]:
    return ApiResponse(data=await invites.get_invite(session, token))


@router.post(
    "/{token}/accept",
    response_model=ApiResponse[InviteAccepted],
    summary="Accept Invite",
    description="Accept an invite and set the account password.",
    response_description="The user account and the farm role granted.",
    responses={
        400: {"model": ErrorResponse, "description": "Invite expired or already accepted"},
        404: {"model": ErrorResponse, "description": "Unknown invite"},
    },
)
async def accept_invite(token: str, accept_in: InviteAccept, session: SessionDep) -> ApiResponse[InviteAccepted]:
    """
    Accept an invite.

    - **password**: At least 6 characters
    - **name**: Display name (defaults to the employee's name)
    """
    return ApiResponse(data=await invites.accept_invite(session, token, accept_in))
