"""Like/match engine: directed likes promoted into symmetric matches."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID

import structlog

from core.config import MatchRetentionPolicy, settings
from core.exceptions import (
    AppException,
    ConflictError,
    InvalidPhoneNumberError,
    PhoneRequiredError,
    ProfileNotFoundError,
    SelfLikeError,
)
from domain.entities.like import (
    Like,
    LikedTarget,
    LikeToggleResult,
    Match,
    PairRelation,
    RelationState,
    UnregisteredLike,
    UnregisteredLikeToggleResult,
)
from domain.entities.notification import Notification
from domain.entities.profile import Profile
from domain.phone import normalize_phone
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.notification_service import NotificationService
from infrastructure.sms.provider import ISmsNotifier, SmsResult

logger = structlog.get_logger()

# A write that loses a unique-constraint race is re-run this many times.
CONFLICT_RETRIES = 1


@dataclass(frozen=True, slots=True)
class _LikeOutcome:
    liked: bool
    is_match: bool
    created_like: bool = False
    new_match: Match | None = None


class LikeService:
    """Service layer for likes, unregistered likes and matches.

    Toggles read the current row and then insert or delete it. The read and
    the write are not atomic; the store's unique constraints arbitrate
    concurrent writers. A toggle that loses a race is re-run once with the
    intent it computed on its first read, so two simultaneous "like" taps
    end with exactly one row rather than flipping it back off.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        notification_service: NotificationService | None = None,
        sms_notifier: ISmsNotifier | None = None,
        match_policy: MatchRetentionPolicy = settings.match_retention_policy,
        invite_template: str = settings.sms_invite_template,
        download_url: str = settings.app_download_url,
    ) -> None:
        self._uow_factory = uow_factory
        self._notification = notification_service
        self._sms = sms_notifier
        self._match_policy = match_policy
        self._invite_template = invite_template
        self._download_url = download_url

    # --- Registered likes ---

    async def toggle_like(self, liker_id: UUID, liked_id: UUID) -> LikeToggleResult:
        """Like ``liked_id`` if not yet liked, otherwise remove the like.

        A like that completes a reciprocal pair creates exactly one match and
        notifies both users; any other new like notifies ``liked_id``.
        Once issued, the toggle runs to completion even if the caller is
        cancelled.

        Raises:
            SelfLikeError: If ``liker_id == liked_id``.
            ProfileNotFoundError: If ``liked_id`` has no profile.
            ConflictError: If the store rejected the write twice.
            StoreUnavailableError: If the store failed.
        """
        if liker_id == liked_id:
            raise SelfLikeError()
        return await asyncio.shield(self._toggle_like(liker_id, liked_id))

    async def _toggle_like(self, liker_id: UUID, liked_id: UUID) -> LikeToggleResult:
        intent: bool | None = None
        attempt = 0
        while True:
            try:
                async with self._uow_factory() as uow:
                    if await uow.profiles.get(liked_id) is None:
                        raise ProfileNotFoundError(str(liked_id))
                    existing = await uow.likes.get(liker_id, liked_id)
                    if intent is None:
                        intent = existing is None
                    if intent:
                        outcome = await self._ensure_liked(uow, liker_id, liked_id, existing)
                    else:
                        outcome = await self._ensure_unliked(uow, liker_id, liked_id, existing)
                    await uow.commit()
                break
            except ConflictError:
                if attempt >= CONFLICT_RETRIES:
                    raise
                attempt += 1
                logger.info(
                    "like_toggle_conflict",
                    liker_id=str(liker_id),
                    liked_id=str(liked_id),
                    wanted_liked=intent,
                )

        if outcome.created_like and not outcome.is_match:
            outcome = await self._recheck_reciprocity(liker_id, liked_id, outcome)

        logger.info(
            "like_toggled",
            liker_id=str(liker_id),
            liked_id=str(liked_id),
            liked=outcome.liked,
            is_match=outcome.is_match,
        )

        notifications: list[Notification] = []
        if outcome.new_match is not None:
            match_id = outcome.new_match.id
            notifications = [
                Notification.match(liker_id, liked_id, match_id),
                Notification.match(liked_id, liker_id, match_id),
            ]
        elif outcome.created_like and not outcome.is_match:
            notifications = [Notification.like(liked_id, liker_id)]

        notified = await self._emit(notifications)
        return LikeToggleResult(liked=outcome.liked, is_match=outcome.is_match, notified=notified)

    async def _ensure_liked(
        self,
        uow: IUnitOfWork,
        liker_id: UUID,
        liked_id: UUID,
        existing: Like | None,
    ) -> _LikeOutcome:
        created = False
        if existing is None:
            await uow.likes.add(Like(liker_id=liker_id, liked_id=liked_id))
            created = True

        reciprocal = await uow.likes.get(liked_id, liker_id)
        match = await uow.matches.get_for_pair(liker_id, liked_id)
        new_match = None
        if reciprocal is not None and match is None:
            new_match = await uow.matches.add(Match.for_pair(liker_id, liked_id))
            logger.info("match_created", user_a=str(new_match.user_a), user_b=str(new_match.user_b))

        return _LikeOutcome(
            liked=True,
            is_match=match is not None or new_match is not None,
            created_like=created,
            new_match=new_match,
        )

    async def _ensure_unliked(
        self,
        uow: IUnitOfWork,
        liker_id: UUID,
        liked_id: UUID,
        existing: Like | None,
    ) -> _LikeOutcome:
        if existing is not None:
            await uow.likes.delete(liker_id, liked_id)

        match = await uow.matches.get_for_pair(liker_id, liked_id)
        if match is not None and existing is not None and self._match_policy == MatchRetentionPolicy.DISSOLVE:
            await uow.matches.delete_for_pair(liker_id, liked_id)
            logger.info("match_dissolved", user_a=str(match.user_a), user_b=str(match.user_b))
            match = None

        return _LikeOutcome(liked=False, is_match=match is not None)

    async def _recheck_reciprocity(
        self, liker_id: UUID, liked_id: UUID, outcome: _LikeOutcome
    ) -> _LikeOutcome:
        """Look for a reciprocal like committed while our transaction was open."""
        try:
            async with self._uow_factory() as uow:
                if await uow.likes.get(liked_id, liker_id) is None:
                    return outcome
                if await uow.matches.get_for_pair(liker_id, liked_id) is not None:
                    return _LikeOutcome(liked=True, is_match=True, created_like=True)
                new_match = await uow.matches.add(Match.for_pair(liker_id, liked_id))
                await uow.commit()
        except ConflictError:
            return _LikeOutcome(liked=True, is_match=True, created_like=True)
        except AppException as e:
            logger.warning(
                "reciprocity_recheck_failed",
                liker_id=str(liker_id),
                liked_id=str(liked_id),
                error=e.message,
            )
            return outcome

        logger.info("match_created", user_a=str(new_match.user_a), user_b=str(new_match.user_b))
        return _LikeOutcome(liked=True, is_match=True, created_like=True, new_match=new_match)

    async def _emit(self, notifications: list[Notification]) -> bool:
        """Store notifications best-effort. Returns False if that failed."""
        if not notifications or self._notification is None:
            return True
        try:
            await self._notification.emit(notifications)
        except AppException as e:
            logger.error(
                "notification_emit_failed",
                kinds=[n.kind.value for n in notifications],
                error=e.message,
            )
            return False
        return True

    # --- Unregistered likes ---

    async def toggle_unregistered_like(
        self, liker_id: UUID, target_phone: str
    ) -> UnregisteredLikeToggleResult:
        """Like or unlike a phone number that is not registered.

        A new like triggers an SMS invitation. If the invitation cannot be
        delivered the like is kept and ``invite_failed`` is set.

        Raises:
            InvalidPhoneNumberError: If ``target_phone`` is not a valid number.
            ProfileNotFoundError: If the caller has no profile.
            PhoneRequiredError: If the caller has no phone number on file.
            SelfLikeError: If the target is the caller's own number.
        """
        phone = normalize_phone(target_phone)
        if phone is None:
            raise InvalidPhoneNumberError(target_phone)
        return await asyncio.shield(self._toggle_unregistered_like(liker_id, phone))

    async def _toggle_unregistered_like(
        self, liker_id: UUID, phone: str
    ) -> UnregisteredLikeToggleResult:
        intent: bool | None = None
        attempt = 0
        while True:
            try:
                async with self._uow_factory() as uow:
                    profile, own_phone = await self._require_phone(uow, liker_id)
                    if own_phone == phone:
                        raise SelfLikeError()

                    existing = await uow.unregistered_likes.get(own_phone, phone)
                    if intent is None:
                        intent = existing is None

                    created = False
                    if intent and existing is None:
                        await uow.unregistered_likes.add(
                            UnregisteredLike(liker_phone=own_phone, liked_phone=phone)
                        )
                        created = True
                    elif not intent and existing is not None:
                        await uow.unregistered_likes.delete(own_phone, phone)
                    await uow.commit()
                break
            except ConflictError:
                if attempt >= CONFLICT_RETRIES:
                    raise
                attempt += 1
                logger.info("unregistered_like_conflict", liker_id=str(liker_id), wanted_liked=intent)

        logger.info("unregistered_like_toggled", liker_id=str(liker_id), target_phone=phone, liked=intent)
        if not created:
            return UnregisteredLikeToggleResult(liked=bool(intent))

        invite = await self._send_invite(profile, phone)
        return UnregisteredLikeToggleResult(liked=True, invite_failed=not invite.success)

    async def _send_invite(self, liker: Profile, phone: str) -> SmsResult:
        if self._sms is None:
            result = SmsResult(success=False, error="No SMS notifier configured")
        else:
            result = await self._sms.send(
                phone,
                self._invite_template,
                {"from_name": liker.display_name or "Someone", "download_url": self._download_url},
            )
        if not result.success:
            logger.warning(
                "sms_invite_failed",
                liker_id=str(liker.id),
                target_phone=phone,
                error=result.error,
            )
        return result

    @staticmethod
    async def _require_phone(uow: IUnitOfWork, profile_id: UUID) -> tuple[Profile, str]:
        profile = await uow.profiles.get(profile_id)
        if profile is None:
            raise ProfileNotFoundError(str(profile_id))
        if not profile.phone:
            raise PhoneRequiredError(str(profile_id))
        return profile, profile.phone

    # --- Queries ---

    async def get_like_status(self, liker_id: UUID, liked_id: UUID) -> bool:
        """Check whether ``liker_id`` currently likes ``liked_id``."""
        async with self._uow_factory() as uow:
            return await uow.likes.get(liker_id, liked_id) is not None

    async def get_unregistered_like_status(self, user_id: UUID, target_phone: str) -> bool:
        """Check whether the user currently likes an unregistered phone number."""
        phone = normalize_phone(target_phone)
        if phone is None:
            raise InvalidPhoneNumberError(target_phone)
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user_id)
            if profile is None or not profile.phone:
                return False
            return await uow.unregistered_likes.get(profile.phone, phone) is not None

    async def get_relation(self, a: UUID, b: UUID) -> PairRelation:
        """Get the relation state of an unordered pair."""
        async with self._uow_factory() as uow:
            if await uow.matches.get_for_pair(a, b) is not None:
                return PairRelation(state=RelationState.MATCHED)
            if await uow.likes.get(a, b) is not None:
                return PairRelation(state=RelationState.ONE_SIDED, liker_id=a)
            if await uow.likes.get(b, a) is not None:
                return PairRelation(state=RelationState.ONE_SIDED, liker_id=b)
        return PairRelation(state=RelationState.NO_RELATION)

    async def get_user_likes(self, user_id: UUID) -> list[LikedTarget]:
        """Everything the user liked: registered profiles first, then phone numbers."""
        async with self._uow_factory() as uow:
            likes = await uow.likes.get_for_liker(user_id)
            profiles = await uow.profiles.get_many([like.liked_id for like in likes]) if likes else []
            by_id = {p.id: p for p in profiles}

            targets = [
                LikedTarget(
                    like_id=like.id,
                    is_registered=True,
                    display_name=by_id[like.liked_id].display_name,
                    profile_id=like.liked_id,
                    username=by_id[like.liked_id].username,
                    avatar_url=by_id[like.liked_id].avatar_url,
                    phone=by_id[like.liked_id].phone,
                )
                for like in likes
                if like.liked_id in by_id
            ]

            owner = await uow.profiles.get(user_id)
            if owner is None or not owner.phone:
                return targets

            unregistered = await uow.unregistered_likes.get_for_liker(owner.phone)
            if unregistered:
                contacts = await uow.contacts.get_for_owner(user_id)
                names = {c.phone_number: c.display_name for c in contacts}
                targets.extend(
                    LikedTarget(
                        like_id=like.id,
                        is_registered=False,
                        display_name=names.get(like.liked_phone, like.liked_phone),
                        phone=like.liked_phone,
                    )
                    for like in unregistered
                )
            return targets

    async def get_matches(self, user_id: UUID) -> list[Match]:
        """Get all matches of a user, newest first."""
        async with self._uow_factory() as uow:
            return await uow.matches.get_for_user(user_id)
