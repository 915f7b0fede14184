"""Shared fixtures for unit tests."""

from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

# Import api.v1 before api.dependencies.auth, matching main.py's import order;
# importing the auth module first hits a circular import through api.v1.
import api.v1  # noqa: F401
from domain.entities.contact import Contact
from domain.entities.profile import Profile
from domain.services.identity_service import resolve_identity
from tests.unit.fakes import InMemoryStore, InMemoryUnitOfWork, uow_factory_for


class FakeUnitOfWork:
    """Fake Unit of Work with repository mocks for unit testing."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.contacts = AsyncMock()
        self.likes = AsyncMock()
        self.unregistered_likes = AsyncMock()
        self.matches = AsyncMock()
        self.notifications = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def store() -> InMemoryStore:
    """Empty in-memory store shared by every unit of work of a test."""
    return InMemoryStore()


@pytest.fixture
def uow_factory(store: InMemoryStore) -> Callable[[], InMemoryUnitOfWork]:
    return uow_factory_for(store)


@pytest.fixture
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def make_profile(store: InMemoryStore) -> Callable[..., Profile]:
    """Register a profile in the store."""

    def _make(username: str, name: str = "", phone: str | None = None) -> Profile:
        return store.add_profile(
            Profile(
                external_identity=resolve_identity(f"ext_{username}"),
                username=username,
                name=name,
                phone=phone,
            )
        )

    return _make


@pytest.fixture
def make_contact(store: InMemoryStore) -> Callable[..., Contact]:
    """Add an address book entry to the store."""

    def _make(
        owner: Profile,
        display_name: str,
        phone: str,
        linked: Profile | None = None,
    ) -> Contact:
        return store.add_contact(
            Contact(
                owner_id=owner.id,
                phone_number=phone,
                display_name=display_name,
                linked_profile_id=linked.id if linked else None,
            )
        )

    return _make
