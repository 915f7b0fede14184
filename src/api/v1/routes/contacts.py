"""Contact import API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentProfileId
from api.v1.dependencies import get_contact_service
from api.v1.schemas.contact import (
    ClearUnlinkedResponse,
    ContactImportData,
    ContactImportRequest,
    ContactImportResponse,
    ContactStatsData,
    ContactStatsResponse,
)
from core.rate_limit import limiter
from domain.entities.contact import ContactEntry
from domain.services.contact_service import ContactService

router = APIRouter(prefix="/users/me/contacts", tags=["contacts"])


@router.post(
    "/import",
    response_model=ContactImportResponse,
    summary="Import address book",
    responses={
        200: {"description": "Import summary"},
        422: {"description": "Validation error"},
    },
)
@limiter.limit("5/minute")  # type: ignore[untyped-decorator]
async def import_contacts(
    request: Request,
    body: ContactImportRequest,
    profile_id: CurrentProfileId,
    service: ContactService = Depends(get_contact_service),
) -> ContactImportResponse:
    """
    Import the caller's address book.

    Entries without a valid phone number are skipped. Contacts whose number
    belongs to a registered user are linked to that profile and become
    direct connections in search.
    """
    summary = await service.import_contacts(
        profile_id, [ContactEntry(name=c.name, phone=c.phone) for c in body.contacts]
    )
    return ContactImportResponse(
        data=ContactImportData(
            received=summary.received,
            inserted=summary.inserted,
            updated=summary.updated,
            linked=summary.linked,
            skipped=summary.skipped,
        )
    )


@router.get(
    "/stats",
    response_model=ContactStatsResponse,
    summary="Get contact statistics",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_contact_stats(
    request: Request,
    profile_id: CurrentProfileId,
    service: ContactService = Depends(get_contact_service),
) -> ContactStatsResponse:
    """Count imported contacts and how many are on the app."""
    stats = await service.get_stats(profile_id)
    return ContactStatsResponse(
        data=ContactStatsData(total=stats.total, linked=stats.linked, unlinked=stats.unlinked)
    )


@router.delete(
    "/unlinked",
    response_model=ClearUnlinkedResponse,
    summary="Delete unlinked contacts",
)
@limiter.limit("5/minute")  # type: ignore[untyped-decorator]
async def clear_unlinked_contacts(
    request: Request,
    profile_id: CurrentProfileId,
    service: ContactService = Depends(get_contact_service),
) -> ClearUnlinkedResponse:
    """Delete imported contacts that are not registered users."""
    return ClearUnlinkedResponse(count=await service.clear_unlinked(profile_id))
