"""SQLAlchemy implementation of Profile repository."""

from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import Profile
from infrastructure.database.models import ProfileModel


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, profile_id: UUID) -> Profile | None:
        """Get a profile by ID."""
        model = await self._session.get(ProfileModel, profile_id)
        return self._to_entity(model) if model else None

    async def get_many(self, profile_ids: list[UUID]) -> list[Profile]:
        """Get profiles by ID in a single query."""
        if not profile_ids:
            return []
        stmt = select(ProfileModel).where(ProfileModel.id.in_(profile_ids))
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_by_external_identity(self, external_identity: UUID) -> Profile | None:
        stmt = select(ProfileModel).where(ProfileModel.external_identity == external_identity)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_username(self, username: str) -> Profile | None:
        """Get a profile by username, ignoring case."""
        stmt = select(ProfileModel).where(func.lower(ProfileModel.username) == username.lower())
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_phones(self, phones: list[str]) -> list[Profile]:
        if not phones:
            return []
        stmt = select(ProfileModel).where(ProfileModel.phone.in_(phones))
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def search(
        self, term: str, exclude_id: UUID | None = None, limit: int = 50
    ) -> list[Profile]:
        """Case-insensitive substring search on name and username."""
        stmt = select(ProfileModel).where(
            or_(
                ProfileModel.name.icontains(term, autoescape=True),
                ProfileModel.username.icontains(term, autoescape=True),
            )
        )
        if exclude_id is not None:
            stmt = stmt.where(ProfileModel.id != exclude_id)
        stmt = stmt.order_by(ProfileModel.username).limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def add(self, profile: Profile) -> Profile:
        """Insert a profile."""
        model = self._to_model(profile)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, profile: Profile) -> Profile:
        """Update an existing profile."""
        model = await self._session.get(ProfileModel, profile.id)
        if not model:
            raise ValueError(f"Profile {profile.id} not found")

        model.username = profile.username
        model.name = profile.name
        model.phone = profile.phone
        model.bio = profile.bio
        model.avatar_url = profile.avatar_url
        model.updated_at = profile.updated_at

        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            external_identity=model.external_identity,
            username=model.username,
            name=model.name or "",
            phone=model.phone,
            bio=model.bio,
            avatar_url=model.avatar_url,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            id=entity.id,
            external_identity=entity.external_identity,
            username=entity.username,
            name=entity.name,
            phone=entity.phone,
            bio=entity.bio,
            avatar_url=entity.avatar_url,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
