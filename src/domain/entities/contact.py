"""Contact domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class Contact:
    """One entry of a user's imported address book."""

    owner_id: UUID
    phone_number: str
    display_name: str
    id: UUID = field(default_factory=uuid4)
    linked_profile_id: UUID | None = None
    is_imported: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_linked(self) -> bool:
        """Check if the phone number belongs to a registered profile."""
        return self.linked_profile_id is not None

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on the display name."""
        return term.casefold() in self.display_name.casefold()


@dataclass(frozen=True, slots=True)
class ContactEntry:
    """Raw address book entry as read from the device."""

    name: str
    phone: str


@dataclass(frozen=True, slots=True)
class ContactImportSummary:
    """Outcome of a contact import."""

    received: int
    inserted: int
    updated: int
    linked: int
    skipped: int


@dataclass(frozen=True, slots=True)
class ContactStats:
    """Counts over a user's imported contacts."""

    total: int
    linked: int

    @property
    def unlinked(self) -> int:
        return self.total - self.linked
