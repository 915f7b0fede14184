"""Search result value objects for contact-graph discovery."""

from dataclasses import dataclass
from enum import IntEnum
from typing import TypeAlias
from uuid import UUID

from domain.entities.contact import Contact
from domain.entities.profile import Profile


class ConnectionTier(IntEnum):
    """How a search result is connected to the caller.

    Lower values take precedence when the same person is reachable via
    several paths.
    """

    DIRECT = 0
    SECOND_DEGREE = 1
    FREE_TEXT = 2
    UNREGISTERED = 3

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class RegisteredResult:
    """A registered profile found by search."""

    profile: Profile
    tier: ConnectionTier

    @property
    def key(self) -> UUID:
        return self.profile.id

    @property
    def display_name(self) -> str:
        return self.profile.display_name

    @property
    def sort_id(self) -> str:
        return str(self.profile.id)


@dataclass(frozen=True, slots=True)
class UnregisteredResult:
    """An address book contact that is not on the app, keyed by phone."""

    contact: Contact
    tier: ConnectionTier = ConnectionTier.UNREGISTERED

    @property
    def key(self) -> str:
        return self.contact.phone_number

    @property
    def display_name(self) -> str:
        return self.contact.display_name

    @property
    def sort_id(self) -> str:
        return self.contact.phone_number


SearchResult: TypeAlias = RegisteredResult | UnregisteredResult
