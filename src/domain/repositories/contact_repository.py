"""Contact repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.contact import Contact


class IContactRepository(Protocol):
    """Repository interface for Contact entities."""

    async def get_for_owner(self, owner_id: UUID) -> list[Contact]:
        """Get every contact owned by a user."""
        ...

    async def get_linked_for_owner(self, owner_id: UUID) -> list[Contact]:
        """Get the owner's contacts that are linked to a registered profile."""
        ...

    async def get_linked_for_owners(
        self, owner_ids: list[UUID], limit_per_owner: int
    ) -> list[Contact]:
        """Get linked contacts of several owners, at most ``limit_per_owner`` each."""
        ...

    async def search_unlinked(self, owner_id: UUID, term: str) -> list[Contact]:
        """Get the owner's unlinked contacts whose display name contains ``term``."""
        ...

    async def add_many(self, contacts: list[Contact]) -> list[Contact]:
        """Insert new contacts."""
        ...

    async def set_link(self, contact_id: UUID, linked_profile_id: UUID | None) -> bool:
        """Set or clear the linked profile of a contact."""
        ...

    async def count_for_owner(self, owner_id: UUID) -> tuple[int, int]:
        """Return ``(total, linked)`` contact counts for an owner."""
        ...

    async def delete_unlinked(self, owner_id: UUID) -> int:
        """Delete the owner's unlinked contacts. Returns count deleted."""
        ...
