"""Pydantic schemas for Contact API."""

from pydantic import BaseModel, Field

MAX_CONTACTS_PER_IMPORT = 5000


class ContactEntrySchema(BaseModel):
    """Single address book entry as read from the device."""

    name: str = Field("", max_length=255)
    phone: str = Field(..., min_length=1, max_length=32)


class ContactImportRequest(BaseModel):
    """Schema for importing an address book."""

    contacts: list[ContactEntrySchema] = Field(..., max_length=MAX_CONTACTS_PER_IMPORT)


class ContactImportData(BaseModel):
    received: int
    inserted: int
    updated: int
    linked: int
    skipped: int


class ContactImportResponse(BaseModel):
    data: ContactImportData


class ContactStatsData(BaseModel):
    total: int
    linked: int
    unlinked: int


class ContactStatsResponse(BaseModel):
    data: ContactStatsData


class ClearUnlinkedResponse(BaseModel):
    """Response for clearing unlinked contacts."""

    count: int  # Number of contacts deleted
