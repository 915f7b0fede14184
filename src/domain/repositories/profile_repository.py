"""Profile repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile entities."""

    async def get(self, profile_id: UUID) -> Profile | None:
        """Get a profile by ID."""
        ...

    async def get_many(self, profile_ids: list[UUID]) -> list[Profile]:
        """Get all profiles whose ID is in ``profile_ids`` (missing ones are skipped)."""
        ...

    async def get_by_external_identity(self, external_identity: UUID) -> Profile | None:
        """Get the profile registered for a resolved external identity."""
        ...

    async def get_by_username(self, username: str) -> Profile | None:
        """Get a profile by username (case-insensitive)."""
        ...

    async def get_by_phones(self, phones: list[str]) -> list[Profile]:
        """Get profiles whose phone number is in ``phones``."""
        ...

    async def search(self, term: str, exclude_id: UUID | None = None, limit: int = 50) -> list[Profile]:
        """Free-text search on name and username (case-insensitive substring)."""
        ...

    async def add(self, profile: Profile) -> Profile:
        """Insert a profile."""
        ...

    async def update(self, profile: Profile) -> Profile:
        """Persist changes to an existing profile."""
        ...
