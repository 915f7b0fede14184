"""Notification domain entity and kinds."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID, uuid4


class NotificationKind(StrEnum):
    """Kinds of notifications emitted by the like/match engine."""

    LIKE = "like"
    MATCH = "match"


@dataclass
class Notification:
    """Append-only notification addressed to a single user."""

    user_id: UUID
    kind: NotificationKind
    payload: dict[str, Any] = field(default_factory=dict)
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
    is_read: bool = False
    read_at: datetime | None = None

    @classmethod
    def like(cls, liked_id: UUID, liker_id: UUID) -> "Notification":
        """Tell ``liked_id`` that ``liker_id`` liked them."""
        return cls(
            user_id=liked_id,
            kind=NotificationKind.LIKE,
            payload={"liker_id": str(liker_id)},
        )

    @classmethod
    def match(cls, user_id: UUID, matched_user_id: UUID, match_id: UUID) -> "Notification":
        """Tell ``user_id`` they matched with ``matched_user_id``."""
        return cls(
            user_id=user_id,
            kind=NotificationKind.MATCH,
            payload={"matched_user_id": str(matched_user_id), "match_id": str(match_id)},
        )
