"""Notification repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.notification import Notification


class INotificationRepository(Protocol):
    """Repository interface for Notification entities."""

    async def add_many(self, notifications: list[Notification]) -> list[Notification]:
        """Append notifications."""
        ...

    async def get_for_user(
        self,
        user_id: UUID,
        is_read: bool | None = None,
        limit: int = 20,
        before: UUID | None = None,
    ) -> list[Notification]:
        """Get a page of a user's notifications, newest first."""
        ...

    async def get_unread_count(self, user_id: UUID) -> int:
        """Get the count of unread notifications for a user."""
        ...

    async def mark_read(self, notification_id: UUID, user_id: UUID) -> bool:
        """Mark a notification as read for its recipient."""
        ...

    async def mark_all_read(self, user_id: UUID) -> int:
        """Mark all of a user's notifications as read. Returns count updated."""
        ...
