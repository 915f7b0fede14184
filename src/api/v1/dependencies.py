"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.contact_graph_service import ContactGraphService
from domain.services.contact_service import ContactService
from domain.services.identity_service import IdentityService
from domain.services.like_service import LikeService
from domain.services.notification_service import NotificationService
from domain.services.profile_service import ProfileService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.sms.edge_function_notifier import EdgeFunctionSmsNotifier


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_identity_service() -> IdentityService:
    """Get Identity service instance (process-wide lookup cache)."""
    return IdentityService(get_uow_factory())


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(get_uow_factory())


@lru_cache
def get_contact_graph_service() -> ContactGraphService:
    """Get Contact graph search service instance."""
    return ContactGraphService(get_uow_factory())


@lru_cache
def get_contact_service() -> ContactService:
    """Get Contact import service instance."""
    return ContactService(get_uow_factory())


@lru_cache
def get_notification_service() -> NotificationService:
    """Get Notification service instance."""
    return NotificationService(get_uow_factory())


@lru_cache
def get_sms_notifier() -> EdgeFunctionSmsNotifier:
    """Get SMS notifier instance."""
    return EdgeFunctionSmsNotifier(
        url=settings.sms_invite_url,
        api_key=settings.sms_api_key,
        timeout=settings.sms_timeout_seconds,
    )


@lru_cache
def get_like_service() -> LikeService:
    """Get Like service instance."""
    return LikeService(
        get_uow_factory(),
        notification_service=get_notification_service(),
        sms_notifier=get_sms_notifier(),
    )
