"""Pydantic schemas for Profile API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProfileUpdate(BaseModel):
    """Schema for editing the caller's profile (all fields optional).

    Sending ``phone`` as an empty string or null removes the number.
    """

    name: str | None = Field(None, max_length=100)
    username: str | None = Field(None, min_length=3, max_length=30, pattern=r"^[A-Za-z0-9_.]+$")
    phone: str | None = Field(None, max_length=32)
    bio: str | None = Field(None, max_length=500)
    avatar_url: str | None = Field(None, max_length=500)


class ProfileResponse(BaseModel):
    """Schema for Profile response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "username": "rex",
                "name": "Rex Barker",
                "phone": "+15551234567",
                "bio": "Good boy",
                "avatar_url": None,
                "created_at": "2026-01-28T10:00:00",
                "updated_at": "2026-01-28T10:00:00",
            }
        },
    )

    id: UUID
    username: str
    name: str
    phone: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    created_at: datetime
    updated_at: datetime


class ProfileDetailResponse(BaseModel):
    """Schema for single Profile response."""

    data: ProfileResponse
