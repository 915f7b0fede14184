"""Pydantic schemas for contact-graph search."""

from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field

from domain.entities.search import RegisteredResult, SearchResult


class SearchResultResponse(BaseModel):
    """One ranked search result.

    Registered results carry the profile fields; unregistered results only
    the contact's name and phone number.
    """

    kind: Literal["registered", "unregistered"]
    tier: str
    display_name: str
    id: UUID | None = None
    username: str | None = None
    avatar_url: str | None = None
    phone: str | None = None

    @classmethod
    def from_result(cls, result: SearchResult) -> "SearchResultResponse":
        if isinstance(result, RegisteredResult):
            profile = result.profile
            return cls(
                kind="registered",
                tier=result.tier.label,
                display_name=result.display_name,
                id=profile.id,
                username=profile.username,
                avatar_url=profile.avatar_url,
            )
        return cls(
            kind="unregistered",
            tier=result.tier.label,
            display_name=result.display_name,
            phone=result.contact.phone_number,
        )


class SearchResponse(BaseModel):
    """Schema for search results response."""

    data: list[SearchResultResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
