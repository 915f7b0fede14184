"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class Profile:
    """Domain entity for a registered user profile."""

    external_identity: UUID
    username: str
    id: UUID = field(default_factory=uuid4)
    name: str = ""
    phone: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @property
    def display_name(self) -> str:
        """Name shown in lists, falling back to the username."""
        return self.name or self.username

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on name or username."""
        needle = term.casefold()
        return needle in self.name.casefold() or needle in self.username.casefold()
