"""Notification service layer for emitting and reading notifications."""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import NotificationNotFoundError
from domain.entities.notification import Notification
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class NotificationService:
    """Service layer for notification emission and the notification feed."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def emit(self, notifications: list[Notification]) -> list[Notification]:
        """Append notifications in their own transaction.

        Called after the relational change that caused them has committed,
        so a failure here never undoes likes or matches.

        Raises:
            StoreUnavailableError: If the notifications could not be stored.
        """
        if not notifications:
            return []
        async with self._uow_factory() as uow:
            created = await uow.notifications.add_many(notifications)
            await uow.commit()

        for n in created:
            logger.info("notification_emitted", kind=n.kind.value, user_id=str(n.user_id))
        return created

    async def get_notifications(
        self,
        user_id: UUID,
        is_read: bool | None = None,
        limit: int = 20,
        before: UUID | None = None,
    ) -> tuple[list[Notification], int]:
        """Get a page of the notification feed.

        Returns:
            Tuple of (notification_list, unread_count).
        """
        async with self._uow_factory() as uow:
            notifications = await uow.notifications.get_for_user(
                user_id=user_id,
                is_read=is_read,
                limit=limit,
                before=before,
            )
            unread_count = await uow.notifications.get_unread_count(user_id)
            return notifications, unread_count

    async def get_unread_count(self, user_id: UUID) -> int:
        """Get the count of unread notifications."""
        async with self._uow_factory() as uow:
            return await uow.notifications.get_unread_count(user_id)

    async def mark_read(self, notification_id: UUID, user_id: UUID) -> None:
        """Mark a notification as read for its recipient."""
        async with self._uow_factory() as uow:
            success = await uow.notifications.mark_read(notification_id, user_id)
            if not success:
                raise NotificationNotFoundError(str(notification_id))
            await uow.commit()

    async def mark_all_read(self, user_id: UUID) -> int:
        """Mark all notifications as read. Returns count of marked."""
        async with self._uow_factory() as uow:
            count = await uow.notifications.mark_all_read(user_id)
            await uow.commit()
            return count
