"""SQLAlchemy implementation of Notification repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.notification import Notification, NotificationKind
from infrastructure.database.models import NotificationModel


class SQLAlchemyNotificationRepository:
    """SQLAlchemy implementation of INotificationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add_many(self, notifications: list[Notification]) -> list[Notification]:
        """Batch-append notifications."""
        models = [self._to_model(n) for n in notifications]
        self._session.add_all(models)
        await self._session.flush()
        return [self._to_entity(m) for m in models]

    async def get_for_user(
        self,
        user_id: UUID,
        is_read: bool | None = None,
        limit: int = 20,
        before: UUID | None = None,
    ) -> list[Notification]:
        """Get paginated notification feed for a user.

        ``before`` is the id of the last notification of the previous page.
        """
        stmt = select(NotificationModel).where(NotificationModel.user_id == user_id)

        if is_read is not None:
            stmt = stmt.where(NotificationModel.is_read.is_(is_read))

        if before is not None:
            anchor = await self._session.get(NotificationModel, before)
            if anchor is not None:
                stmt = stmt.where(
                    or_(
                        NotificationModel.created_at < anchor.created_at,
                        and_(
                            NotificationModel.created_at == anchor.created_at,
                            NotificationModel.id < anchor.id,
                        ),
                    )
                )

        stmt = stmt.order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc()).limit(limit)

        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_unread_count(self, user_id: UUID) -> int:
        """Get the count of unread notifications for a user."""
        stmt = select(func.count(NotificationModel.id)).where(
            NotificationModel.user_id == user_id,
            NotificationModel.is_read.is_(False),
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def mark_read(self, notification_id: UUID, user_id: UUID) -> bool:
        """Mark a notification as read for its recipient."""
        stmt = (
            update(NotificationModel)
            .where(
                NotificationModel.id == notification_id,
                NotificationModel.user_id == user_id,
            )
            .values(is_read=True, read_at=datetime.utcnow())
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0  # type: ignore[attr-defined,no-any-return]

    async def mark_all_read(self, user_id: UUID) -> int:
        """Mark all notifications as read for a user. Returns count updated."""
        stmt = (
            update(NotificationModel)
            .where(
                NotificationModel.user_id == user_id,
                NotificationModel.is_read.is_(False),
            )
            .values(is_read=True, read_at=datetime.utcnow())
        )
        result = await self._session.execute(stmt)
        return result.rowcount  # type: ignore[attr-defined,no-any-return]

    # --- Conversion methods ---

    def _to_entity(self, model: NotificationModel) -> Notification:
        """Convert NotificationModel to domain entity."""
        return Notification(
            id=model.id,
            user_id=model.user_id,
            kind=NotificationKind(model.kind),
            payload=dict(model.payload or {}),
            created_at=model.created_at,
            is_read=bool(model.is_read),
            read_at=model.read_at,
        )

    def _to_model(self, entity: Notification) -> NotificationModel:
        """Convert Notification domain entity to ORM model."""
        return NotificationModel(
            id=entity.id,
            user_id=entity.user_id,
            kind=entity.kind.value,
            payload=entity.payload,
            created_at=entity.created_at,
            is_read=entity.is_read,
            read_at=entity.read_at,
        )
