"""In-memory store and unit of work enforcing the same constraints as the database.

Writes are visible to other units of work immediately and undone on
rollback. Every repository call yields to the event loop once, so
concurrent service calls interleave like they would against a real store.
"""

import asyncio
from collections.abc import Callable
from typing import Any
from uuid import UUID

from core.exceptions import ConflictError, StoreUnavailableError
from domain.entities.contact import Contact
from domain.entities.like import Like, Match, UnregisteredLike, ordered_pair
from domain.entities.notification import Notification
from domain.entities.profile import Profile


class InMemoryStore:
    """Shared tables for all fake units of work of one test."""

    def __init__(self) -> None:
        self.profiles: dict[UUID, Profile] = {}
        self.contacts: dict[UUID, Contact] = {}
        self.likes: dict[tuple[UUID, UUID], Like] = {}
        self.unregistered_likes: dict[tuple[str, str], UnregisteredLike] = {}
        self.matches: dict[tuple[UUID, UUID], Match] = {}
        self.notifications: list[Notification] = []
        # Table name -> number of store calls that should fail
        self.failures: dict[str, int] = {}
        self.queries: list[str] = []

    async def touch(self, table: str) -> None:
        self.queries.append(table)
        await asyncio.sleep(0)
        remaining = self.failures.get(table, 0)
        if remaining:
            self.failures[table] = remaining - 1
            raise StoreUnavailableError(f"{table} unavailable")

    def fail(self, table: str, times: int = 1) -> None:
        self.failures[table] = times

    def add_profile(self, profile: Profile) -> Profile:
        self.profiles[profile.id] = profile
        return profile

    def add_contact(self, contact: Contact) -> Contact:
        self.contacts[contact.id] = contact
        return contact


class _Journal:
    def __init__(self) -> None:
        self.undo: list[Callable[[], Any]] = []

    def record(self, action: Callable[[], Any]) -> None:
        self.undo.append(action)

    def rollback(self) -> None:
        while self.undo:
            self.undo.pop()()

    def clear(self) -> None:
        self.undo.clear()


class FakeProfileRepository:
    def __init__(self, store: InMemoryStore, journal: _Journal) -> None:
        self._store = store
        self._journal = journal

    async def get(self, profile_id: UUID) -> Profile | None:
        await self._store.touch("profiles")
        return self._store.profiles.get(profile_id)

    async def get_many(self, profile_ids: list[UUID]) -> list[Profile]:
        await self._store.touch("profiles")
        return [self._store.profiles[pid] for pid in profile_ids if pid in self._store.profiles]

    async def get_by_external_identity(self, external_identity: UUID) -> Profile | None:
        await self._store.touch("profiles")
        return next(
            (p for p in self._store.profiles.values() if p.external_identity == external_identity),
            None,
        )

    async def get_by_username(self, username: str) -> Profile | None:
        await self._store.touch("profiles")
        wanted = username.lower()
        return next((p for p in self._store.profiles.values() if p.username.lower() == wanted), None)

    async def get_by_phones(self, phones: list[str]) -> list[Profile]:
        await self._store.touch("profiles")
        return [p for p in self._store.profiles.values() if p.phone in phones]

    async def search(self, term: str, exclude_id: UUID | None = None, limit: int = 50) -> list[Profile]:
        await self._store.touch("profiles")
        found = sorted(
            (p for p in self._store.profiles.values() if p.matches(term) and p.id != exclude_id),
            key=lambda p: p.username,
        )
        return found[:limit]

    async def add(self, profile: Profile) -> Profile:
        await self._store.touch("profiles")
        self._store.profiles[profile.id] = profile
        self._journal.record(lambda: self._store.profiles.pop(profile.id, None))
        return profile

    async def update(self, profile: Profile) -> Profile:
        await self._store.touch("profiles")
        self._store.profiles[profile.id] = profile
        return profile


class FakeContactRepository:
    def __init__(self, store: InMemoryStore, journal: _Journal) -> None:
        self._store = store
        self._journal = journal

    def _owned(self, owner_id: UUID) -> list[Contact]:
        return sorted(
            (c for c in self._store.contacts.values() if c.owner_id == owner_id),
            key=lambda c: (c.created_at, str(c.id)),
        )

    async def get_for_owner(self, owner_id: UUID) -> list[Contact]:
        await self._store.touch("contacts")
        return self._owned(owner_id)

    async def get_linked_for_owner(self, owner_id: UUID) -> list[Contact]:
        await self._store.touch("contacts")
        return [c for c in self._owned(owner_id) if c.is_linked]

    async def get_linked_for_owners(self, owner_ids: list[UUID], limit_per_owner: int) -> list[Contact]:
        await self._store.touch("contacts")
        result: list[Contact] = []
        for owner_id in owner_ids:
            result.extend([c for c in self._owned(owner_id) if c.is_linked][:limit_per_owner])
        return result

    async def search_unlinked(self, owner_id: UUID, term: str) -> list[Contact]:
        await self._store.touch("contacts")
        return [c for c in self._owned(owner_id) if not c.is_linked and c.matches(term)]

    async def add_many(self, contacts: list[Contact]) -> list[Contact]:
        await self._store.touch("contacts")
        taken = {(c.owner_id, c.phone_number) for c in self._store.contacts.values()}
        for contact in contacts:
            if (contact.owner_id, contact.phone_number) in taken:
                raise ConflictError()
        for contact in contacts:
            self._store.contacts[contact.id] = contact
            self._journal.record(lambda cid=contact.id: self._store.contacts.pop(cid, None))
        return contacts

    async def set_link(self, contact_id: UUID, linked_profile_id: UUID | None) -> bool:
        await self._store.touch("contacts")
        contact = self._store.contacts.get(contact_id)
        if contact is None:
            return False
        previous = contact.linked_profile_id
        contact.linked_profile_id = linked_profile_id
        self._journal.record(lambda: setattr(contact, "linked_profile_id", previous))
        return True

    async def count_for_owner(self, owner_id: UUID) -> tuple[int, int]:
        await self._store.touch("contacts")
        owned = self._owned(owner_id)
        return len(owned), sum(1 for c in owned if c.is_linked)

    async def delete_unlinked(self, owner_id: UUID) -> int:
        await self._store.touch("contacts")
        doomed = [c for c in self._owned(owner_id) if not c.is_linked]
        for contact in doomed:
            del self._store.contacts[contact.id]
            self._journal.record(lambda c=contact: self._store.contacts.__setitem__(c.id, c))
        return len(doomed)


class FakeLikeRepository:
    def __init__(self, store: InMemoryStore, journal: _Journal) -> None:
        self._store = store
        self._journal = journal

    async def get(self, liker_id: UUID, liked_id: UUID) -> Like | None:
        await self._store.touch("likes")
        return self._store.likes.get((liker_id, liked_id))

    async def add(self, like: Like) -> Like:
        await self._store.touch("likes")
        key = (like.liker_id, like.liked_id)
        if key in self._store.likes:
            raise ConflictError()
        self._store.likes[key] = like
        self._journal.record(lambda: self._store.likes.pop(key, None))
        return like

    async def delete(self, liker_id: UUID, liked_id: UUID) -> bool:
        await self._store.touch("likes")
        key = (liker_id, liked_id)
        like = self._store.likes.pop(key, None)
        if like is None:
            return False
        self._journal.record(lambda: self._store.likes.__setitem__(key, like))
        return True

    async def get_for_liker(self, liker_id: UUID) -> list[Like]:
        await self._store.touch("likes")
        mine = [like for like in self._store.likes.values() if like.liker_id == liker_id]
        return sorted(mine, key=lambda like: like.created_at, reverse=True)


class FakeUnregisteredLikeRepository:
    def __init__(self, store: InMemoryStore, journal: _Journal) -> None:
        self._store = store
        self._journal = journal

    async def get(self, liker_phone: str, liked_phone: str) -> UnregisteredLike | None:
        await self._store.touch("unregistered_likes")
        return self._store.unregistered_likes.get((liker_phone, liked_phone))

    async def add(self, like: UnregisteredLike) -> UnregisteredLike:
        await self._store.touch("unregistered_likes")
        key = (like.liker_phone, like.liked_phone)
        if key in self._store.unregistered_likes:
            raise ConflictError()
        self._store.unregistered_likes[key] = like
        self._journal.record(lambda: self._store.unregistered_likes.pop(key, None))
        return like

    async def delete(self, liker_phone: str, liked_phone: str) -> bool:
        await self._store.touch("unregistered_likes")
        key = (liker_phone, liked_phone)
        like = self._store.unregistered_likes.pop(key, None)
        if like is None:
            return False
        self._journal.record(lambda: self._store.unregistered_likes.__setitem__(key, like))
        return True

    async def get_for_liker(self, liker_phone: str) -> list[UnregisteredLike]:
        await self._store.touch("unregistered_likes")
        mine = [like for like in self._store.unregistered_likes.values() if like.liker_phone == liker_phone]
        return sorted(mine, key=lambda like: like.created_at, reverse=True)


class FakeMatchRepository:
    def __init__(self, store: InMemoryStore, journal: _Journal) -> None:
        self._store = store
        self._journal = journal

    async def get_for_pair(self, a: UUID, b: UUID) -> Match | None:
        await self._store.touch("matches")
        return self._store.matches.get(ordered_pair(a, b))

    async def add(self, match: Match) -> Match:
        await self._store.touch("matches")
        key = (match.user_a, match.user_b)
        if key in self._store.matches:
            raise ConflictError()
        self._store.matches[key] = match
        self._journal.record(lambda: self._store.matches.pop(key, None))
        return match

    async def delete_for_pair(self, a: UUID, b: UUID) -> bool:
        await self._store.touch("matches")
        key = ordered_pair(a, b)
        match = self._store.matches.pop(key, None)
        if match is None:
            return False
        self._journal.record(lambda: self._store.matches.__setitem__(key, match))
        return True

    async def get_for_user(self, user_id: UUID) -> list[Match]:
        await self._store.touch("matches")
        mine = [m for m in self._store.matches.values() if user_id in (m.user_a, m.user_b)]
        return sorted(mine, key=lambda m: m.matched_at, reverse=True)


class FakeNotificationRepository:
    def __init__(self, store: InMemoryStore, journal: _Journal) -> None:
        self._store = store
        self._journal = journal

    async def add_many(self, notifications: list[Notification]) -> list[Notification]:
        await self._store.touch("notifications")
        self._store.notifications.extend(notifications)
        self._journal.record(lambda: self._discard(notifications))
        return notifications

    def _discard(self, notifications: list[Notification]) -> None:
        for n in notifications:
            if n in self._store.notifications:
                self._store.notifications.remove(n)

    async def get_for_user(
        self,
        user_id: UUID,
        is_read: bool | None = None,
        limit: int = 20,
        before: UUID | None = None,
    ) -> list[Notification]:
        await self._store.touch("notifications")
        feed = [
            n
            for n in reversed(self._store.notifications)
            if n.user_id == user_id and (is_read is None or n.is_read == is_read)
        ]
        if before is not None:
            ids = [n.id for n in feed]
            feed = feed[ids.index(before) + 1 :] if before in ids else feed
        return feed[:limit]

    async def get_unread_count(self, user_id: UUID) -> int:
        await self._store.touch("notifications")
        return sum(1 for n in self._store.notifications if n.user_id == user_id and not n.is_read)

    async def mark_read(self, notification_id: UUID, user_id: UUID) -> bool:
        await self._store.touch("notifications")
        for n in self._store.notifications:
            if n.id == notification_id and n.user_id == user_id:
                n.is_read = True
                return True
        return False

    async def mark_all_read(self, user_id: UUID) -> int:
        await self._store.touch("notifications")
        count = 0
        for n in self._store.notifications:
            if n.user_id == user_id and not n.is_read:
                n.is_read = True
                count += 1
        return count


class InMemoryUnitOfWork:
    """Unit of work over an :class:`InMemoryStore`.

    Leaving the context without ``commit`` undoes every write, like closing
    a SQLAlchemy session with an open transaction.
    """

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self._journal = _Journal()
        self.profiles = FakeProfileRepository(store, self._journal)
        self.contacts = FakeContactRepository(store, self._journal)
        self.likes = FakeLikeRepository(store, self._journal)
        self.unregistered_likes = FakeUnregisteredLikeRepository(store, self._journal)
        self.matches = FakeMatchRepository(store, self._journal)
        self.notifications = FakeNotificationRepository(store, self._journal)
        self.commits = 0

    async def commit(self) -> None:
        self._journal.clear()
        self.commits += 1

    async def rollback(self) -> None:
        self._journal.rollback()

    async def __aenter__(self) -> "InMemoryUnitOfWork":
        self._journal.clear()
        return self

    async def __aexit__(self, *args: Any) -> None:
        self._journal.rollback()


def uow_factory_for(store: InMemoryStore) -> Callable[[], InMemoryUnitOfWork]:
    """A factory that opens a fresh unit of work per call, like the real one."""
    return lambda: InMemoryUnitOfWork(store)
