"""Profile service layer."""

from collections.abc import Callable
from datetime import datetime
from typing import Any
from uuid import UUID

import structlog

from core.exceptions import (
    ConflictError,
    InvalidPhoneNumberError,
    PhoneTakenError,
    ProfileNotFoundError,
    UsernameTakenError,
)
from domain.entities.profile import Profile
from domain.phone import normalize_phone
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

_EDITABLE_FIELDS = frozenset({"name", "username", "phone", "bio", "avatar_url"})


class ProfileService:
    """Service layer for reading and editing the caller's own profile."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_profile(self, profile_id: UUID) -> Profile:
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(profile_id)
            if profile is None:
                raise ProfileNotFoundError(str(profile_id))
            return profile

    async def update_profile(self, profile_id: UUID, **changes: Any) -> Profile:
        """Apply a partial update.

        Only fields present in ``changes`` are touched. Usernames are unique
        regardless of case and phone numbers are unique; phone numbers are
        stored normalized and an empty phone clears it.

        Raises:
            ProfileNotFoundError: If the profile does not exist.
            UsernameTakenError: If another profile already uses the username.
            PhoneTakenError: If another profile already uses the phone number.
            InvalidPhoneNumberError: If the phone number cannot be normalized.
        """
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Not editable: {', '.join(sorted(unknown))}")

        username: str | None = None
        if "username" in changes:
            username = changes["username"].strip()

        phone: str | None = None
        if changes.get("phone"):
            phone = normalize_phone(changes["phone"])
            if phone is None:
                raise InvalidPhoneNumberError(changes["phone"])

        try:
            async with self._uow_factory() as uow:
                profile = await uow.profiles.get(profile_id)
                if profile is None:
                    raise ProfileNotFoundError(str(profile_id))
                await self._ensure_available(uow, profile_id, username, phone)

                if username is not None:
                    profile.username = username
                if "phone" in changes:
                    profile.phone = phone
                for key in ("name", "bio", "avatar_url"):
                    if key in changes:
                        setattr(profile, key, changes[key])

                profile.updated_at = datetime.utcnow()
                updated = await uow.profiles.update(profile)
                await uow.commit()
        except ConflictError:
            # Another profile claimed the username or phone after our check
            async with self._uow_factory() as uow:
                await self._ensure_available(uow, profile_id, username, phone)
            raise

        logger.info("profile_updated", profile_id=str(profile_id), fields=sorted(changes))
        return updated

    @staticmethod
    async def _ensure_available(
        uow: IUnitOfWork, profile_id: UUID, username: str | None, phone: str | None
    ) -> None:
        if username is not None:
            owner = await uow.profiles.get_by_username(username)
            if owner is not None and owner.id != profile_id:
                raise UsernameTakenError(username)
        if phone is not None:
            owners = await uow.profiles.get_by_phones([phone])
            if any(p.id != profile_id for p in owners):
                raise PhoneTakenError(phone)
