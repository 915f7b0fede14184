"""Contact service layer for address book import and housekeeping."""

from collections.abc import Callable
from uuid import UUID

import structlog

from domain.entities.contact import (
    Contact,
    ContactEntry,
    ContactImportSummary,
    ContactStats,
)
from domain.phone import normalize_phone
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class ContactService:
    """Service layer for a user's imported contacts."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def import_contacts(
        self, owner_id: UUID, entries: list[ContactEntry]
    ) -> ContactImportSummary:
        """Import address book entries for ``owner_id``.

        Phone numbers are normalized and entries without a usable number are
        skipped. Duplicates within the batch keep the first name seen.
        Each contact is linked to the registered profile owning its number,
        except the owner's own profile. Existing rows keep their name and
        only have their link refreshed.
        """
        by_phone: dict[str, str] = {}
        for entry in entries:
            phone = normalize_phone(entry.phone)
            if phone is None:
                continue
            by_phone.setdefault(phone, entry.name.strip() or phone)
        skipped = len(entries) - len(by_phone)

        inserted = updated = linked = 0
        async with self._uow_factory() as uow:
            existing = {c.phone_number: c for c in await uow.contacts.get_for_owner(owner_id)}
            registered = await uow.profiles.get_by_phones(list(by_phone)) if by_phone else []
            owners = {p.phone: p.id for p in registered if p.phone and p.id != owner_id}

            new_contacts: list[Contact] = []
            for phone, name in by_phone.items():
                profile_id = owners.get(phone)
                if profile_id is not None:
                    linked += 1

                contact = existing.get(phone)
                if contact is None:
                    new_contacts.append(
                        Contact(
                            owner_id=owner_id,
                            phone_number=phone,
                            display_name=name,
                            linked_profile_id=profile_id,
                        )
                    )
                elif contact.linked_profile_id != profile_id:
                    await uow.contacts.set_link(contact.id, profile_id)
                    updated += 1

            if new_contacts:
                await uow.contacts.add_many(new_contacts)
                inserted = len(new_contacts)
            await uow.commit()

        summary = ContactImportSummary(
            received=len(entries),
            inserted=inserted,
            updated=updated,
            linked=linked,
            skipped=skipped,
        )
        logger.info(
            "contacts_imported",
            owner_id=str(owner_id),
            received=summary.received,
            inserted=summary.inserted,
            linked=summary.linked,
        )
        return summary

    async def get_stats(self, owner_id: UUID) -> ContactStats:
        async with self._uow_factory() as uow:
            total, linked = await uow.contacts.count_for_owner(owner_id)
        return ContactStats(total=total, linked=linked)

    async def clear_unlinked(self, owner_id: UUID) -> int:
        """Delete contacts that do not belong to a registered profile."""
        async with self._uow_factory() as uow:
            count = await uow.contacts.delete_unlinked(owner_id)
            await uow.commit()
        logger.info("unlinked_contacts_cleared", owner_id=str(owner_id), count=count)
        return count
