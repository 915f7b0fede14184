"""Identity resolution: external identity provider ids to internal profiles."""

import time
from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID, uuid5

import structlog

from core.config import settings
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

# Fixed for the lifetime of the system: changing it orphans every profile.
IDENTITY_NAMESPACE = UUID("6f1c2a4e-8d3b-5e7f-9a10-2b3c4d5e6f70")


def resolve_identity(external_id: str) -> UUID:
    """Map an external identity provider user id to a stable UUID.

    Pure and deterministic (UUIDv5 over a fixed namespace), no I/O.
    """
    if not external_id:
        raise ValueError("external_id must be a non-empty string")
    return uuid5(IDENTITY_NAMESPACE, external_id)


@dataclass(frozen=True, slots=True)
class SessionContext:
    """Per-session identity value passed explicitly through calls."""

    external_id: str
    identity_id: UUID
    profile_id: UUID | None = None

    @property
    def is_registered(self) -> bool:
        return self.profile_id is not None


class IdentityService:
    """Resolves external identities to profile ids with a local cache.

    Found profiles stay cached until :meth:`invalidate`. Missing profiles are
    remembered for ``suppression_seconds`` so repeated lookups do not hit the
    store; a found result is never suppressed.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        suppression_seconds: float = settings.profile_lookup_suppression_seconds,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._uow_factory = uow_factory
        self._suppression_seconds = suppression_seconds
        self._clock = clock
        self._found: dict[str, UUID] = {}
        self._missing_since: dict[str, float] = {}

    def resolve(self, external_id: str) -> UUID:
        """Resolve an external id to its identity UUID."""
        return resolve_identity(external_id)

    async def ensure_profile(self, external_id: str) -> UUID | None:
        """Return the profile id registered for ``external_id``, if any."""
        cached = self._found.get(external_id)
        if cached is not None:
            return cached

        missed_at = self._missing_since.get(external_id)
        if missed_at is not None and self._clock() - missed_at < self._suppression_seconds:
            return None

        identity_id = resolve_identity(external_id)
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get_by_external_identity(identity_id)

        if profile is None:
            self._missing_since[external_id] = self._clock()
            logger.debug("profile_lookup_missed", identity_id=str(identity_id))
            return None

        self._missing_since.pop(external_id, None)
        self._found[external_id] = profile.id
        return profile.id

    async def open_session(self, external_id: str) -> SessionContext:
        """Build the session value for an authenticated external id."""
        return SessionContext(
            external_id=external_id,
            identity_id=resolve_identity(external_id),
            profile_id=await self.ensure_profile(external_id),
        )

    def invalidate(self, external_id: str | None = None) -> None:
        """Forget cached lookups for one external id, or for all of them."""
        if external_id is None:
            self._found.clear()
            self._missing_since.clear()
            return
        self._found.pop(external_id, None)
        self._missing_since.pop(external_id, None)
