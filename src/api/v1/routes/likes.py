"""Like, unregistered-like and match API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies.auth import CurrentProfileId
from api.v1.dependencies import get_like_service
from api.v1.schemas.like import (
    LikedTargetListResponse,
    LikedTargetResponse,
    LikeStatusResponse,
    LikeToggleData,
    LikeToggleResponse,
    MatchListResponse,
    MatchResponse,
    RelationData,
    RelationResponse,
    UnregisteredLikeRequest,
    UnregisteredLikeToggleData,
    UnregisteredLikeToggleResponse,
)
from core.rate_limit import limiter
from domain.services.like_service import LikeService

router = APIRouter(prefix="/likes", tags=["likes"])

unregistered_likes_router = APIRouter(prefix="/unregistered-likes", tags=["likes"])

user_likes_router = APIRouter(prefix="/users/me", tags=["likes"])


@router.post(
    "/{liked_id}/toggle",
    response_model=LikeToggleResponse,
    summary="Like or unlike a profile",
    responses={
        200: {"description": "New like state and whether the pair is matched"},
        400: {"description": "Cannot like yourself"},
        409: {"description": "Concurrent update, retry"},
    },
)
@limiter.limit("20/minute")  # type: ignore[untyped-decorator]
async def toggle_like(
    request: Request,
    liked_id: UUID,
    profile_id: CurrentProfileId,
    service: LikeService = Depends(get_like_service),
) -> LikeToggleResponse:
    """
    Toggle the caller's like on a profile.

    A like that completes a mutual pair creates a match and notifies both
    users.
    """
    result = await service.toggle_like(profile_id, liked_id)
    return LikeToggleResponse(
        data=LikeToggleData(liked=result.liked, is_match=result.is_match, notified=result.notified)
    )


@router.get(
    "/{liked_id}/status",
    response_model=LikeStatusResponse,
    summary="Get like status",
)
@limiter.limit("60/minute")  # type: ignore[untyped-decorator]
async def get_like_status(
    request: Request,
    liked_id: UUID,
    profile_id: CurrentProfileId,
    service: LikeService = Depends(get_like_service),
) -> LikeStatusResponse:
    """Check whether the caller currently likes a profile."""
    return LikeStatusResponse(liked=await service.get_like_status(profile_id, liked_id))


@router.get(
    "/{other_id}/relation",
    response_model=RelationResponse,
    summary="Get relation with a profile",
)
@limiter.limit("60/minute")  # type: ignore[untyped-decorator]
async def get_relation(
    request: Request,
    other_id: UUID,
    profile_id: CurrentProfileId,
    service: LikeService = Depends(get_like_service),
) -> RelationResponse:
    """Get `no_relation`, `one_sided` (with who liked) or `matched`."""
    relation = await service.get_relation(profile_id, other_id)
    return RelationResponse(data=RelationData(state=relation.state.value, liker_id=relation.liker_id))


@unregistered_likes_router.post(
    "/toggle",
    response_model=UnregisteredLikeToggleResponse,
    summary="Like or unlike a phone number",
    responses={
        200: {"description": "New like state and invite outcome"},
        400: {"description": "Invalid phone number or own number"},
        412: {"description": "Caller has no phone number on file"},
    },
)
@limiter.limit("20/minute")  # type: ignore[untyped-decorator]
async def toggle_unregistered_like(
    request: Request,
    body: UnregisteredLikeRequest,
    profile_id: CurrentProfileId,
    service: LikeService = Depends(get_like_service),
) -> UnregisteredLikeToggleResponse:
    """
    Toggle the caller's like on someone who is not on the app yet.

    A new like sends them an SMS invitation. If the invitation fails the
    like is kept and `invite_failed` is true.
    """
    result = await service.toggle_unregistered_like(profile_id, body.phone)
    return UnregisteredLikeToggleResponse(
        data=UnregisteredLikeToggleData(liked=result.liked, invite_failed=result.invite_failed)
    )


@unregistered_likes_router.get(
    "/status",
    response_model=LikeStatusResponse,
    summary="Get like status for a phone number",
)
@limiter.limit("60/minute")  # type: ignore[untyped-decorator]
async def get_unregistered_like_status(
    request: Request,
    profile_id: CurrentProfileId,
    phone: str = Query(..., min_length=1, max_length=32),
    service: LikeService = Depends(get_like_service),
) -> LikeStatusResponse:
    """Check whether the caller currently likes a phone number."""
    return LikeStatusResponse(liked=await service.get_unregistered_like_status(profile_id, phone))


@user_likes_router.get(
    "/likes",
    response_model=LikedTargetListResponse,
    summary="List everything the caller liked",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_my_likes(
    request: Request,
    profile_id: CurrentProfileId,
    service: LikeService = Depends(get_like_service),
) -> LikedTargetListResponse:
    """Registered profiles first, then phone numbers, each newest first."""
    targets = await service.get_user_likes(profile_id)
    return LikedTargetListResponse(
        data=[LikedTargetResponse.model_validate(t) for t in targets],
        meta={"total": len(targets)},
    )


@user_likes_router.get(
    "/matches",
    response_model=MatchListResponse,
    summary="List the caller's matches",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_my_matches(
    request: Request,
    profile_id: CurrentProfileId,
    service: LikeService = Depends(get_like_service),
) -> MatchListResponse:
    """List matches, newest first."""
    matches = await service.get_matches(profile_id)
    return MatchListResponse(
        data=[MatchResponse.for_user(m, profile_id) for m in matches],
        meta={"total": len(matches)},
    )
