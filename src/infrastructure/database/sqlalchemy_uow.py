"""SQLAlchemy Unit of Work implementation."""

from typing import Any, Optional

import structlog
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import ConflictError, StoreUnavailableError
from infrastructure.database.repositories.sqlalchemy_contact_repo import SQLAlchemyContactRepository
from infrastructure.database.repositories.sqlalchemy_like_repo import (
    SQLAlchemyLikeRepository,
    SQLAlchemyMatchRepository,
    SQLAlchemyUnregisteredLikeRepository,
)
from infrastructure.database.repositories.sqlalchemy_notification_repo import (
    SQLAlchemyNotificationRepository,
)
from infrastructure.database.repositories.sqlalchemy_profile_repo import SQLAlchemyProfileRepository

logger = structlog.get_logger()

# Raised by the driver, or by the socket layer (refused, reset, timed out)
# while a connection to the store is opened
STORE_ERRORS = (DBAPIError, OSError)


class SQLAlchemyUnitOfWork:
    """Unit of Work implementation using SQLAlchemy.

    Database errors leaving the context are translated: unique and check
    constraint violations become ``ConflictError``. Anything else raised by
    the driver, and socket errors or timeouts from a connection that could
    not be opened, become ``StoreUnavailableError``.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

    def _require_session(self) -> AsyncSession:
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._session

    @property
    def profiles(self) -> SQLAlchemyProfileRepository:
        """Get profile repository."""
        return SQLAlchemyProfileRepository(self._require_session())

    @property
    def contacts(self) -> SQLAlchemyContactRepository:
        """Get contact repository."""
        return SQLAlchemyContactRepository(self._require_session())

    @property
    def likes(self) -> SQLAlchemyLikeRepository:
        """Get like repository."""
        return SQLAlchemyLikeRepository(self._require_session())

    @property
    def unregistered_likes(self) -> SQLAlchemyUnregisteredLikeRepository:
        """Get unregistered like repository."""
        return SQLAlchemyUnregisteredLikeRepository(self._require_session())

    @property
    def matches(self) -> SQLAlchemyMatchRepository:
        """Get match repository."""
        return SQLAlchemyMatchRepository(self._require_session())

    @property
    def notifications(self) -> SQLAlchemyNotificationRepository:
        """Get notification repository."""
        return SQLAlchemyNotificationRepository(self._require_session())

    async def commit(self) -> None:
        """Commit the current transaction."""
        if self._session:
            await self._session.commit()

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        if self._session:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        """Enter the context manager and create session."""
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Any,
    ) -> None:
        """Exit the context manager, translate driver errors and cleanup."""
        if self._session:
            try:
                if exc_type:
                    await self.rollback()
            except STORE_ERRORS as e:
                # The original error is the one to report
                logger.warning("store_rollback_failed", error=str(e))
            finally:
                await self._session.close()
                self._session = None

        if isinstance(exc_val, IntegrityError):
            logger.info("store_conflict", error=str(exc_val.orig))
            raise ConflictError() from exc_val
        if isinstance(exc_val, DBAPIError):
            logger.error("store_unavailable", error=str(exc_val.orig))
            raise StoreUnavailableError() from exc_val
        if isinstance(exc_val, OSError):
            logger.error("store_unreachable", error=repr(exc_val))
            raise StoreUnavailableError() from exc_val
