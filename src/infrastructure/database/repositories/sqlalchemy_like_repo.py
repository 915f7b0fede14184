"""SQLAlchemy implementations of Like, UnregisteredLike and Match repositories."""

from uuid import UUID

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.like import Like, Match, UnregisteredLike, ordered_pair
from infrastructure.database.models import LikeModel, MatchModel, UnregisteredLikeModel


class SQLAlchemyLikeRepository:
    """SQLAlchemy implementation of ILikeRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, liker_id: UUID, liked_id: UUID) -> Like | None:
        stmt = select(LikeModel).where(
            LikeModel.liker_id == liker_id,
            LikeModel.liked_id == liked_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def add(self, like: Like) -> Like:
        """Insert a like. Duplicates fail on the unique constraint at flush."""
        model = LikeModel(
            id=like.id,
            liker_id=like.liker_id,
            liked_id=like.liked_id,
            created_at=like.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, liker_id: UUID, liked_id: UUID) -> bool:
        stmt = delete(LikeModel).where(
            LikeModel.liker_id == liker_id,
            LikeModel.liked_id == liked_id,
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0  # type: ignore[attr-defined,no-any-return]

    async def get_for_liker(self, liker_id: UUID) -> list[Like]:
        stmt = (
            select(LikeModel)
            .where(LikeModel.liker_id == liker_id)
            .order_by(LikeModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    def _to_entity(self, model: LikeModel) -> Like:
        return Like(
            id=model.id,
            liker_id=model.liker_id,
            liked_id=model.liked_id,
            created_at=model.created_at,
        )


class SQLAlchemyUnregisteredLikeRepository:
    """SQLAlchemy implementation of IUnregisteredLikeRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, liker_phone: str, liked_phone: str) -> UnregisteredLike | None:
        stmt = select(UnregisteredLikeModel).where(
            UnregisteredLikeModel.liker_phone == liker_phone,
            UnregisteredLikeModel.liked_phone == liked_phone,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def add(self, like: UnregisteredLike) -> UnregisteredLike:
        model = UnregisteredLikeModel(
            id=like.id,
            liker_phone=like.liker_phone,
            liked_phone=like.liked_phone,
            created_at=like.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, liker_phone: str, liked_phone: str) -> bool:
        stmt = delete(UnregisteredLikeModel).where(
            UnregisteredLikeModel.liker_phone == liker_phone,
            UnregisteredLikeModel.liked_phone == liked_phone,
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0  # type: ignore[attr-defined,no-any-return]

    async def get_for_liker(self, liker_phone: str) -> list[UnregisteredLike]:
        stmt = (
            select(UnregisteredLikeModel)
            .where(UnregisteredLikeModel.liker_phone == liker_phone)
            .order_by(UnregisteredLikeModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    def _to_entity(self, model: UnregisteredLikeModel) -> UnregisteredLike:
        return UnregisteredLike(
            id=model.id,
            liker_phone=model.liker_phone,
            liked_phone=model.liked_phone,
            created_at=model.created_at,
        )


class SQLAlchemyMatchRepository:
    """SQLAlchemy implementation of IMatchRepository.

    Pairs are always looked up in ``(smaller, larger)`` order, matching the
    ordered-pair check constraint on the table.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for_pair(self, a: UUID, b: UUID) -> Match | None:
        user_a, user_b = ordered_pair(a, b)
        stmt = select(MatchModel).where(MatchModel.user_a == user_a, MatchModel.user_b == user_b)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def add(self, match: Match) -> Match:
        """Insert a match. A second match for the pair fails at flush."""
        model = MatchModel(
            id=match.id,
            user_a=match.user_a,
            user_b=match.user_b,
            matched_at=match.matched_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def delete_for_pair(self, a: UUID, b: UUID) -> bool:
        user_a, user_b = ordered_pair(a, b)
        stmt = delete(MatchModel).where(MatchModel.user_a == user_a, MatchModel.user_b == user_b)
        result = await self._session.execute(stmt)
        return result.rowcount > 0  # type: ignore[attr-defined,no-any-return]

    async def get_for_user(self, user_id: UUID) -> list[Match]:
        stmt = (
            select(MatchModel)
            .where(or_(MatchModel.user_a == user_id, MatchModel.user_b == user_id))
            .order_by(MatchModel.matched_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    def _to_entity(self, model: MatchModel) -> Match:
        return Match(
            id=model.id,
            user_a=model.user_a,
            user_b=model.user_b,
            matched_at=model.matched_at,
        )
