"""Unit tests for Notification service layer."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from core.exceptions import NotificationNotFoundError, StoreUnavailableError
from domain.entities.notification import Notification, NotificationKind
from domain.services.notification_service import NotificationService

# --- Fixtures ---


@pytest.fixture
def service(uow) -> NotificationService:
    return NotificationService(lambda: uow)


# --- Emit ---


class TestEmit:
    @pytest.mark.asyncio
    async def test_emit_stores_and_commits(self, service, uow):
        notes = [Notification.like(uuid4(), uuid4())]
        uow.notifications.add_many = AsyncMock(return_value=notes)

        result = await service.emit(notes)

        assert result == notes
        uow.notifications.add_many.assert_awaited_once_with(notes)
        assert uow.committed is True

    @pytest.mark.asyncio
    async def test_emit_nothing(self, service, uow):
        assert await service.emit([]) == []
        uow.notifications.add_many.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_emit_failure_propagates(self, service, uow):
        uow.notifications.add_many = AsyncMock(side_effect=StoreUnavailableError())

        with pytest.raises(StoreUnavailableError):
            await service.emit([Notification.like(uuid4(), uuid4())])

        assert uow.committed is False


class TestNotificationFactories:
    def test_like_payload(self):
        liked, liker = uuid4(), uuid4()
        note = Notification.like(liked, liker)

        assert note.user_id == liked
        assert note.kind == NotificationKind.LIKE
        assert note.payload == {"liker_id": str(liker)}
        assert note.is_read is False

    def test_match_payload(self):
        user, other, match_id = uuid4(), uuid4(), uuid4()
        note = Notification.match(user, other, match_id)

        assert note.kind == NotificationKind.MATCH
        assert note.payload == {"matched_user_id": str(other), "match_id": str(match_id)}


# --- Feed ---


class TestFeed:
    @pytest.mark.asyncio
    async def test_get_notifications(self, service, uow, user_id):
        notes = [Notification.like(user_id, uuid4())]
        uow.notifications.get_for_user = AsyncMock(return_value=notes)
        uow.notifications.get_unread_count = AsyncMock(return_value=1)
        before = uuid4()

        result, unread = await service.get_notifications(user_id, is_read=False, limit=10, before=before)

        assert result == notes
        assert unread == 1
        uow.notifications.get_for_user.assert_awaited_once_with(
            user_id=user_id, is_read=False, limit=10, before=before
        )

    @pytest.mark.asyncio
    async def test_unread_count(self, service, uow, user_id):
        uow.notifications.get_unread_count = AsyncMock(return_value=3)

        assert await service.get_unread_count(user_id) == 3

    @pytest.mark.asyncio
    async def test_mark_read(self, service, uow, user_id):
        uow.notifications.mark_read = AsyncMock(return_value=True)
        nid = uuid4()

        await service.mark_read(nid, user_id)

        uow.notifications.mark_read.assert_awaited_once_with(nid, user_id)
        assert uow.committed is True

    @pytest.mark.asyncio
    async def test_mark_read_not_found(self, service, uow, user_id):
        uow.notifications.mark_read = AsyncMock(return_value=False)

        with pytest.raises(NotificationNotFoundError):
            await service.mark_read(uuid4(), user_id)

        assert uow.committed is False

    @pytest.mark.asyncio
    async def test_mark_all_read(self, service, uow, user_id):
        uow.notifications.mark_all_read = AsyncMock(return_value=5)

        assert await service.mark_all_read(user_id) == 5
        assert uow.committed is True
