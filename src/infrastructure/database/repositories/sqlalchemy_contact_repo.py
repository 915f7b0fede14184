"""SQLAlchemy implementation of Contact repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from domain.entities.contact import Contact
from infrastructure.database.models import ContactModel


class SQLAlchemyContactRepository:
    """SQLAlchemy implementation of IContactRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for_owner(self, owner_id: UUID) -> list[Contact]:
        """Get every contact owned by a user, ordered by name."""
        stmt = (
            select(ContactModel)
            .where(ContactModel.owner_id == owner_id)
            .order_by(ContactModel.display_name)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_linked_for_owner(self, owner_id: UUID) -> list[Contact]:
        stmt = select(ContactModel).where(
            ContactModel.owner_id == owner_id,
            ContactModel.linked_profile_id.is_not(None),
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_linked_for_owners(
        self, owner_ids: list[UUID], limit_per_owner: int
    ) -> list[Contact]:
        """Get linked contacts of several owners in a single query.

        Each owner contributes at most ``limit_per_owner`` rows, oldest first,
        so one owner with a huge address book cannot crowd out the others.
        """
        if not owner_ids:
            return []

        ranked = (
            select(
                ContactModel,
                func.row_number()
                .over(
                    partition_by=ContactModel.owner_id,
                    order_by=(ContactModel.created_at, ContactModel.id),
                )
                .label("rn"),
            )
            .where(
                ContactModel.owner_id.in_(owner_ids),
                ContactModel.linked_profile_id.is_not(None),
            )
            .subquery()
        )
        contact = aliased(ContactModel, ranked)
        stmt = select(contact).where(ranked.c.rn <= limit_per_owner)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def search_unlinked(self, owner_id: UUID, term: str) -> list[Contact]:
        """Get the owner's unlinked contacts whose display name contains ``term``."""
        stmt = (
            select(ContactModel)
            .where(
                ContactModel.owner_id == owner_id,
                ContactModel.linked_profile_id.is_(None),
                ContactModel.display_name.icontains(term, autoescape=True),
            )
            .order_by(ContactModel.display_name)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def add_many(self, contacts: list[Contact]) -> list[Contact]:
        """Batch-insert contacts."""
        models = [self._to_model(c) for c in contacts]
        self._session.add_all(models)
        await self._session.flush()
        return [self._to_entity(m) for m in models]

    async def set_link(self, contact_id: UUID, linked_profile_id: UUID | None) -> bool:
        stmt = (
            update(ContactModel)
            .where(ContactModel.id == contact_id)
            .values(linked_profile_id=linked_profile_id, updated_at=datetime.utcnow())
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0  # type: ignore[attr-defined,no-any-return]

    async def count_for_owner(self, owner_id: UUID) -> tuple[int, int]:
        """Return ``(total, linked)`` counts in one round trip."""
        stmt = select(
            func.count(ContactModel.id),
            func.coalesce(
                func.sum(case((ContactModel.linked_profile_id.is_not(None), 1), else_=0)),
                0,
            ),
        ).where(ContactModel.owner_id == owner_id)
        result = await self._session.execute(stmt)
        total, linked = result.one()
        return int(total), int(linked)

    async def delete_unlinked(self, owner_id: UUID) -> int:
        """Delete the owner's unlinked contacts. Returns count deleted."""
        stmt = (
            delete(ContactModel)
            .where(
                ContactModel.owner_id == owner_id,
                ContactModel.linked_profile_id.is_(None),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount  # type: ignore[attr-defined,no-any-return]

    def _to_entity(self, model: ContactModel) -> Contact:
        """Convert ORM model to domain entity."""
        return Contact(
            id=model.id,
            owner_id=model.owner_id,
            phone_number=model.phone_number,
            display_name=model.display_name,
            linked_profile_id=model.linked_profile_id,
            is_imported=model.is_imported,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Contact) -> ContactModel:
        """Convert domain entity to ORM model."""
        return ContactModel(
            id=entity.id,
            owner_id=entity.owner_id,
            phone_number=entity.phone_number,
            display_name=entity.display_name,
            linked_profile_id=entity.linked_profile_id,
            is_imported=entity.is_imported,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
