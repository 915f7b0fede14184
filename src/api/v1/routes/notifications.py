"""Notification API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import CurrentProfileId
from api.v1.dependencies import get_notification_service
from api.v1.schemas.notification import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from core.rate_limit import limiter
from domain.services.notification_service import NotificationService

router = APIRouter(prefix="/users/me/notifications", tags=["notifications"])


@router.get(
    "",
    response_model=NotificationListResponse,
    summary="List notifications",
    responses={
        200: {"description": "Paginated notification feed, newest first"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_notifications(
    request: Request,
    profile_id: CurrentProfileId,
    is_read: bool | None = Query(None, description="Filter by read status"),
    cursor: UUID | None = Query(None, description="Cursor for pagination"),
    limit: int = Query(20, ge=1, le=100, description="Page size"),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationListResponse:
    """List the caller's like and match notifications."""
    notifications, unread_count = await service.get_notifications(
        user_id=profile_id,
        is_read=is_read,
        limit=limit,
        before=cursor,
    )
    next_cursor = str(notifications[-1].id) if len(notifications) == limit else None
    return NotificationListResponse(
        data=[NotificationResponse.model_validate(n) for n in notifications],
        meta={"unread_count": unread_count, "next_cursor": next_cursor},
    )


@router.get(
    "/unread-count",
    response_model=UnreadCountResponse,
    summary="Get unread notification count",
)
@limiter.limit("60/minute")  # type: ignore[untyped-decorator]
async def get_unread_count(
    request: Request,
    profile_id: CurrentProfileId,
    service: NotificationService = Depends(get_notification_service),
) -> UnreadCountResponse:
    """Get the caller's unread notification count."""
    return UnreadCountResponse(count=await service.get_unread_count(profile_id))


@router.patch(
    "/{notification_id}/read",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Mark notification as read",
    responses={
        204: {"description": "Notification marked as read"},
        404: {"description": "Notification not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def mark_notification_read(
    request: Request,
    notification_id: UUID,
    profile_id: CurrentProfileId,
    service: NotificationService = Depends(get_notification_service),
) -> None:
    """Mark a notification as read. Requires recipient ownership."""
    await service.mark_read(notification_id, profile_id)


@router.post(
    "/mark-all-read",
    response_model=MarkAllReadResponse,
    summary="Mark all notifications as read",
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def mark_all_notifications_read(
    request: Request,
    profile_id: CurrentProfileId,
    service: NotificationService = Depends(get_notification_service),
) -> MarkAllReadResponse:
    """Mark every unread notification of the caller as read."""
    count = await service.mark_all_read(profile_id)
    return MarkAllReadResponse(count=count)
