"""Like and match domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


@dataclass
class Like:
    """Directed like between two registered profiles."""

    liker_id: UUID
    liked_id: UUID
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        if self.liker_id == self.liked_id:
            raise ValueError("A profile cannot like itself")


@dataclass
class UnregisteredLike:
    """Directed like from a registered user's phone to a phone not on the app."""

    liker_phone: str
    liked_phone: str
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)


def ordered_pair(a: UUID, b: UUID) -> tuple[UUID, UUID]:
    """Order two profile ids so the smaller one comes first."""
    return (a, b) if a < b else (b, a)


@dataclass
class Match:
    """Symmetric match between two profiles, stored with ``user_a < user_b``."""

    user_a: UUID
    user_b: UUID
    id: UUID = field(default_factory=uuid4)
    matched_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        if self.user_a == self.user_b:
            raise ValueError("A profile cannot match itself")
        self.user_a, self.user_b = ordered_pair(self.user_a, self.user_b)

    @classmethod
    def for_pair(cls, a: UUID, b: UUID) -> "Match":
        """Create a match for an unordered pair."""
        return cls(user_a=a, user_b=b)

    def other(self, user_id: UUID) -> UUID:
        """Return the counterpart of ``user_id`` in this match."""
        return self.user_b if user_id == self.user_a else self.user_a


class RelationState(StrEnum):
    """Relation between an unordered pair of registered profiles."""

    NO_RELATION = "no_relation"
    ONE_SIDED = "one_sided"
    MATCHED = "matched"


@dataclass(frozen=True, slots=True)
class PairRelation:
    """Current relation of a pair; ``liker_id`` is set for one-sided likes."""

    state: RelationState
    liker_id: UUID | None = None


@dataclass(frozen=True, slots=True)
class LikeToggleResult:
    """Result of toggling a like between registered profiles."""

    liked: bool
    is_match: bool
    notified: bool = True


@dataclass(frozen=True, slots=True)
class UnregisteredLikeToggleResult:
    """Result of toggling a like on a phone number that is not registered."""

    liked: bool
    invite_failed: bool = False


@dataclass(frozen=True, slots=True)
class LikedTarget:
    """Read-only value object: something the user liked, registered or not."""

    like_id: UUID
    is_registered: bool
    display_name: str
    profile_id: UUID | None = None
    username: str | None = None
    avatar_url: str | None = None
    phone: str | None = None
