"""Like, unregistered like and match repository protocols."""

from typing import Protocol
from uuid import UUID

from domain.entities.like import Like, Match, UnregisteredLike


class ILikeRepository(Protocol):
    """Repository interface for directed likes between profiles.

    ``add`` relies on the store's unique constraint on ``(liker_id, liked_id)``;
    a duplicate surfaces as ``ConflictError`` from the unit of work.
    """

    async def get(self, liker_id: UUID, liked_id: UUID) -> Like | None:
        """Get the like for an ordered pair."""
        ...

    async def add(self, like: Like) -> Like:
        """Insert a like."""
        ...

    async def delete(self, liker_id: UUID, liked_id: UUID) -> bool:
        """Delete the like for an ordered pair. Returns False if none existed."""
        ...

    async def get_for_liker(self, liker_id: UUID) -> list[Like]:
        """Get all likes made by a profile, newest first."""
        ...


class IUnregisteredLikeRepository(Protocol):
    """Repository interface for likes keyed by phone numbers."""

    async def get(self, liker_phone: str, liked_phone: str) -> UnregisteredLike | None:
        """Get the like for an ordered phone pair."""
        ...

    async def add(self, like: UnregisteredLike) -> UnregisteredLike:
        """Insert an unregistered like."""
        ...

    async def delete(self, liker_phone: str, liked_phone: str) -> bool:
        """Delete the like for an ordered phone pair."""
        ...

    async def get_for_liker(self, liker_phone: str) -> list[UnregisteredLike]:
        """Get all unregistered likes made from a phone number."""
        ...


class IMatchRepository(Protocol):
    """Repository interface for matches (unique per ordered pair key)."""

    async def get_for_pair(self, a: UUID, b: UUID) -> Match | None:
        """Get the match for an unordered pair."""
        ...

    async def add(self, match: Match) -> Match:
        """Insert a match."""
        ...

    async def delete_for_pair(self, a: UUID, b: UUID) -> bool:
        """Delete the match for an unordered pair."""
        ...

    async def get_for_user(self, user_id: UUID) -> list[Match]:
        """Get all matches a profile is part of, newest first."""
        ...
