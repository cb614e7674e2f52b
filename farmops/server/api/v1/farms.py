"""
Farm Management Endpoints.

This module handles the farms (tenants) a user belongs to: creating farms,
reading them with record counts, updating settings and branding, per-user
preferences and the onboarding checklist.
"""

from typing import List

from fastapi import APIRouter, File, UploadFile, status

from farmops.core.database.entities import Farm, FarmUser
from farmops.core.database.repositories import FarmRepository, FarmUserRepository, UserPreferenceRepository
from farmops.core.errors import NotFoundError
from farmops.core.logging_config import get_logger
from farmops.core.models.domain import FarmRole
from farmops.core.models.io import ApiResponse, DeletedResult, ErrorResponse
from farmops.core.models.io.farms import (
    FarmCounts,
    FarmCreate,
    FarmDetail,
    FarmRead,
    FarmUpdate,
    OnboardingChecklist,
    UserPreferenceRead,
    UserPreferenceUpdate,
)
from farmops.core.monitoring import log_domain_event
from farmops.server.services import onboarding, uploads
from farmops.server.services.deps import AdminRole, AnyRole, CurrentUser, OwnerRole, SessionDep

logger = get_logger(__name__)
router = APIRouter()


async def _load_farm(session: SessionDep, farm_id: str) -> Farm:
    farm = await FarmRepository(session).get_by_id(farm_id)
    if farm is None:
        raise NotFoundError("Farm")
    return farm


def _read(farm: Farm, role: FarmRole) -> FarmRead:
    return FarmRead.model_validate(farm).model_copy(update={"role": role})


@router.get(
    "",
    response_model=ApiResponse[List[FarmRead]],
    summary="List My Farms",
    description="List the farms the caller belongs to, ordered by name.",
    response_description="Farms with the caller's role on each.",
    responses={401: {"model": ErrorResponse, "description": "Authentication required"}},
)
async def list_farms(user: CurrentUser, session: SessionDep) -> ApiResponse[List[FarmRead]]:
    """
    List farms of the current user.

    Each farm carries the caller's `role` so the dashboard can hide actions the
    caller is not allowed to take.
    """
    farms = await FarmRepository(session).list_for_user(user.id)
    return ApiResponse(data=[_read(farm, role) for farm, role in farms])


@router.post(
    "",
    response_model=ApiResponse[FarmRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Farm",
    description="Create a new farm; the caller becomes its owner.",
    response_description="The created farm.",
    responses={409: {"model": ErrorResponse, "description": "Slug already taken"}},
)
async def create_farm(farm_in: FarmCreate, user: CurrentUser, session: SessionDep) -> ApiResponse[FarmRead]:
    """
    Create a farm.

    - **name**: Farm name (1-100 characters)
    - **slug**: Storefront identifier, lowercase letters, digits and dashes
    - **timezone**: IANA timezone (default `UTC`)
    - **currency**: ISO currency (default `USD`)
    """
    farm = await FarmRepository(session).create(Farm(**farm_in.model_dump()), commit=False)
    await FarmUserRepository(session).create(FarmUser(user_id=user.id, farm_id=farm.id, role=FarmRole.OWNER))
    await session.refresh(farm)
    log_domain_event("farm_created", farm_id=farm.id, slug=farm.slug, user_id=user.id)
    return ApiResponse(data=_read(farm, FarmRole.OWNER))


@router.get(
    "/{farm_id}",
    response_model=ApiResponse[FarmDetail],
    summary="Get Farm",
    description="Retrieve a farm with the number of records it owns.",
    response_description="The farm with counts and the caller's role.",
    responses={403: {"model": ErrorResponse, "description": "No farm access"}},
)
async def get_farm(farm_id: str, context: AnyRole, session: SessionDep) -> ApiResponse[FarmDetail]:
    """
    Get farm details.

    Counts cover employees, products, tasks, customers and orders.
    """
    farm = await _load_farm(session, farm_id)
    counts = await FarmRepository(session).record_counts(farm_id)
    detail = FarmDetail.model_validate(
        {**FarmRead.model_validate(farm).model_dump(), "role": context.role, "counts": FarmCounts(**counts)}
    )
    return ApiResponse(data=detail)


@router.patch(
    "/{farm_id}",
    response_model=ApiResponse[FarmRead],
    summary="Update Farm",
    description="Update farm settings, contact details and invoice numbering.",
    response_description="The updated farm.",
)
async def update_farm(
    farm_id: str, farm_in: FarmUpdate, context: AdminRole, session: SessionDep
) -> ApiResponse[FarmRead]:
    """
    Update farm.

    Only the provided fields change. `next_invoice_number` sets the number used
    by the next generated invoice.
    """
    farm = await _load_farm(session, farm_id)
    farm = await FarmRepository(session).apply(farm, farm_in.model_dump(exclude_unset=True))
    return ApiResponse(data=_read(farm, context.role))


@router.delete(
    "/{farm_id}",
    response_model=ApiResponse[DeletedResult],
    summary="Delete Farm",
    description="Delete a farm and every record it owns. Owner only.",
    response_description="Deletion confirmation.",
)
async def delete_farm(farm_id: str, context: OwnerRole, session: SessionDep) -> ApiResponse[DeletedResult]:
    farm = await _load_farm(session, farm_id)
    uploads.remove_upload(farm.logo_url)
    await FarmRepository(session).delete(farm)
    log_domain_event("farm_deleted", farm_id=farm_id, user_id=context.user.id)
    return ApiResponse(data=DeletedResult())


@router.post(
    "/{farm_id}/logo",
    response_model=ApiResponse[FarmRead],
    summary="Upload Farm Logo",
    description="Upload a png, jpeg or webp logo; the previous logo file is replaced.",
    response_description="The farm with its new logo URL.",
    responses={400: {"model": ErrorResponse, "description": "Invalid file type"}},
)
async def upload_logo(
    farm_id: str, context: AdminRole, session: SessionDep, file: UploadFile = File(...)
) -> ApiResponse[FarmRead]:
    farm = await _load_farm(session, farm_id)
    farm.logo_url = await uploads.save_image(file, "logos", farm.id, previous_url=farm.logo_url)
    farm = await FarmRepository(session).update(farm)
    return ApiResponse(data=_read(farm, context.role))


@router.delete(
    "/{farm_id}/logo",
    response_model=ApiResponse[FarmRead],
    summary="Remove Farm Logo",
    description="Remove the farm logo file and clear the logo URL.",
    response_description="The farm without a logo.",
)
async def delete_logo(farm_id: str, context: AdminRole, session: SessionDep) -> ApiResponse[FarmRead]:
    farm = await _load_farm(session, farm_id)
    uploads.remove_upload(farm.logo_url)
    farm.logo_url = None
    farm = await FarmRepository(session).update(farm)
    return ApiResponse(data=_read(farm, context.role))


@router.get(
    "/{farm_id}/preferences",
    response_model=ApiResponse[UserPreferenceRead],
    summary="Get My Preferences",
    description="Preferences of the caller on this farm, created with defaults on first read.",
    response_description="The caller's preferences.",
)
async def get_preferences(farm_id: str, context: AnyRole, session: SessionDep) -> ApiResponse[UserPreferenceRead]:
    preference = await UserPreferenceRepository(session).get_or_create(context.user.id, farm_id)
    return ApiResponse(data=UserPreferenceRead.model_validate(preference))


@router.patch(
    "/{farm_id}/preferences",
    response_model=ApiResponse[UserPreferenceRead],
    summary="Update My Preferences",
    description="Update the caller's preferences on this farm.",
    response_description="The updated preferences.",
)
async def update_preferences(
    farm_id: str, preference_in: UserPreferenceUpdate, context: AnyRole, session: SessionDep
) -> ApiResponse[UserPreferenceRead]:
    """
    Update preferences.

    - **has_seen_layout_tutorial**: Layout tutorial was shown
    - **preferred_unit**: `FEET` or `METERS`
    - **tutorial_completed_steps**: Onboarding steps completed by hand (replaces the list)
    - **tutorial_dismissed**: Hide the onboarding checklist
    """
    repo = UserPreferenceRepository(session)
    preference = await repo.get_or_create(context.user.id, farm_id)
    changes = preference_in.model_dump(exclude_unset=True)
    steps = changes.pop("tutorial_completed_steps", None)
    if steps is not None:
        preference.set_completed_steps(steps)
    preference = await repo.apply(preference, changes)
    return ApiResponse(data=UserPreferenceRead.model_validate(preference))


@router.get(
    "/{farm_id}/onboarding",
    response_model=ApiResponse[OnboardingChecklist],
    summary="Get Onboarding Checklist",
    description="Setup steps with their completion state, detected from the farm's data.",
    response_description="The checklist with progress counters.",
)
async def get_onboarding(farm_id: str, context: AnyRole, session: SessionDep) -> ApiResponse[OnboardingChecklist]:
    """
    Get the onboarding checklist.

    A step is complete when the farm's records show it (for example a product
    exists) or when the caller marked it complete by hand.
    """
    checklist = await onboarding.build_checklist(session, farm_id, context.user.id)
    return ApiResponse(data=checklist)


@router.post(
    "/{farm_id}/onboarding/{step_id}/complete",
    response_model=ApiResponse[OnboardingChecklist],
    summary="Complete Onboarding Step",
    description="Mark an onboarding step as done by hand.",
    response_description="The updated checklist.",
    responses={404: {"model": ErrorResponse, "description": "Unknown step"}},
)
async def complete_onboarding_step(
    farm_id: str, step_id: str, context: AnyRole, session: SessionDep
) -> ApiResponse[OnboardingChecklist]:
    checklist = await onboarding.mark_step_complete(session, farm_id, context.user.id, step_id)
    return ApiResponse(data=checklist)
