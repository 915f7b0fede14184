"""Profile API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentProfileId
from api.v1.dependencies import get_profile_service
from api.v1.schemas.profile import ProfileDetailResponse, ProfileResponse, ProfileUpdate
from core.rate_limit import limiter
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/users/me", tags=["profiles"])


@router.get(
    "",
    response_model=ProfileDetailResponse,
    summary="Get own profile",
    responses={
        200: {"description": "The caller's profile"},
        403: {"description": "Registration not completed"},
    },
)
@limiter.limit("60/minute")  # type: ignore[untyped-decorator]
async def get_my_profile(
    request: Request,
    profile_id: CurrentProfileId,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get the profile of the authenticated user."""
    profile = await service.get_profile(profile_id)
    return ProfileDetailResponse(data=ProfileResponse.model_validate(profile))


@router.patch(
    "",
    response_model=ProfileDetailResponse,
    summary="Edit own profile",
    responses={
        200: {"description": "Profile updated"},
        400: {"description": "Invalid phone number"},
        409: {"description": "Username already taken"},
        422: {"description": "Validation error"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_my_profile(
    request: Request,
    body: ProfileUpdate,
    profile_id: CurrentProfileId,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """
    Partially update the caller's profile.

    Usernames are unique regardless of case. Phone numbers are normalized
    to `+<digits>`.
    """
    changes = body.model_dump(exclude_unset=True)
    for key in ("name", "username"):
        if changes.get(key) is None:
            changes.pop(key, None)
    profile = await service.update_profile(profile_id, **changes)
    return ProfileDetailResponse(data=ProfileResponse.model_validate(profile))
