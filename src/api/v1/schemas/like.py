"""Pydantic schemas for Like, Match and unregistered-like API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.like import Match


class LikeToggleData(BaseModel):
    """Outcome of a like toggle.

    ``notified`` is false when the like was stored but its notifications
    could not be.
    """

    liked: bool
    is_match: bool
    notified: bool = True


class LikeToggleResponse(BaseModel):
    data: LikeToggleData


class UnregisteredLikeRequest(BaseModel):
    """Schema for liking a phone number that is not on the app."""

    phone: str = Field(..., min_length=1, max_length=32)


class UnregisteredLikeToggleData(BaseModel):
    liked: bool
    invite_failed: bool = False


class UnregisteredLikeToggleResponse(BaseModel):
    data: UnregisteredLikeToggleData


class LikeStatusResponse(BaseModel):
    """Whether the caller currently likes the target."""

    liked: bool


class RelationData(BaseModel):
    state: str
    liker_id: UUID | None = None


class RelationResponse(BaseModel):
    data: RelationData


class LikedTargetResponse(BaseModel):
    """Something the caller liked, registered or not."""

    model_config = ConfigDict(from_attributes=True)

    like_id: UUID
    is_registered: bool
    display_name: str
    profile_id: UUID | None = None
    username: str | None = None
    avatar_url: str | None = None
    phone: str | None = None


class LikedTargetListResponse(BaseModel):
    data: list[LikedTargetResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class MatchResponse(BaseModel):
    """A match as seen by one of its two members."""

    id: UUID
    matched_user_id: UUID
    matched_at: datetime

    @classmethod
    def for_user(cls, match: Match, user_id: UUID) -> "MatchResponse":
        return cls(id=match.id, matched_user_id=match.other(user_id), matched_at=match.matched_at)


class MatchListResponse(BaseModel):
    data: list[MatchResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
