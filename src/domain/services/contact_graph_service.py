"""Contact-graph search: ranked, deduplicated discovery results."""

from collections.abc import Callable, Iterable
from uuid import UUID

import structlog

from core.config import settings
from domain.entities.search import (
    ConnectionTier,
    RegisteredResult,
    SearchResult,
    UnregisteredResult,
)
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class ContactGraphService:
    """Resolves a search term against the caller's contact graph.

    Candidates come from four sources (direct contacts, contacts of direct
    contacts, free-text profile search, unregistered contacts). A person
    reachable via several sources keeps only the highest-precedence tier.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        fanout_limit: int = settings.second_degree_fanout_limit,
        free_text_limit: int = settings.free_text_search_limit,
    ) -> None:
        self._uow_factory = uow_factory
        self._fanout_limit = fanout_limit
        self._free_text_limit = free_text_limit

    async def search(self, caller_id: UUID, term: str) -> list[SearchResult]:
        """Search the caller's graph for ``term``.

        Args:
            caller_id: Profile ID of the searching user.
            term: Free text typed by the user.

        Returns:
            Results ordered by tier, then display name, then id.

        Raises:
            StoreUnavailableError: If any store query fails. No partial
                result is returned.
        """
        term = term.strip()
        if not term:
            return []

        async with self._uow_factory() as uow:
            direct_contacts = await uow.contacts.get_linked_for_owner(caller_id)
            direct_ids = _distinct(
                c.linked_profile_id
                for c in direct_contacts
                if c.linked_profile_id is not None and c.linked_profile_id != caller_id
            )

            second_ids: list[UUID] = []
            if direct_ids:
                second_contacts = await uow.contacts.get_linked_for_owners(
                    direct_ids, limit_per_owner=self._fanout_limit
                )
                second_ids = _distinct(
                    c.linked_profile_id
                    for c in second_contacts
                    if c.linked_profile_id is not None and c.linked_profile_id != caller_id
                )

            graph_ids = _distinct([*direct_ids, *second_ids])
            profiles = await uow.profiles.get_many(graph_ids) if graph_ids else []
            free_text = await uow.profiles.search(
                term, exclude_id=caller_id, limit=self._free_text_limit
            )
            unregistered = await uow.contacts.search_unlinked(caller_id, term)

        by_id = {p.id: p for p in profiles}
        candidates: list[SearchResult] = []
        candidates.extend(
            RegisteredResult(by_id[pid], ConnectionTier.DIRECT)
            for pid in direct_ids
            if pid in by_id and by_id[pid].matches(term)
        )
        candidates.extend(
            RegisteredResult(by_id[pid], ConnectionTier.SECOND_DEGREE)
            for pid in second_ids
            if pid in by_id and by_id[pid].matches(term)
        )
        candidates.extend(
            RegisteredResult(p, ConnectionTier.FREE_TEXT)
            for p in free_text
            if p.id != caller_id
        )
        candidates.extend(
            UnregisteredResult(c) for c in unregistered if c.matches(term)
        )

        results = rank_results(candidates)
        logger.debug(
            "contact_search_completed",
            caller_id=str(caller_id),
            direct=len(direct_ids),
            second_degree=len(second_ids),
            results=len(results),
        )
        return results


def rank_results(candidates: Iterable[SearchResult]) -> list[SearchResult]:
    """Deduplicate by person key keeping the best tier, then sort."""
    best: dict[UUID | str, SearchResult] = {}
    for candidate in sorted(candidates, key=_sort_key):
        best.setdefault(candidate.key, candidate)
    return sorted(best.values(), key=_sort_key)


def _sort_key(result: SearchResult) -> tuple[int, str, str]:
    return (result.tier, result.display_name.casefold(), result.sort_id)


def _distinct(ids: Iterable[UUID | None]) -> list[UUID]:
    seen: dict[UUID, None] = {}
    for item in ids:
        if item is not None:
            seen.setdefault(item, None)
    return list(seen)
