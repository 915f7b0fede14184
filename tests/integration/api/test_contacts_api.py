"""Integration tests for the contact import API."""

from collections.abc import Awaitable, Callable
from uuid import UUID

import pytest
from httpx import AsyncClient

BASE = "/api/v1/users/me/contacts"


class TestImportContacts:
    @pytest.mark.asyncio
    async def test_import_links_registered_numbers(
        self,
        authenticated_client: AsyncClient,
        make_user: Callable[..., Awaitable[UUID]],
    ) -> None:
        await make_user("rex", name="Rex", phone="+15551110000")

        response = await authenticated_client.post(
            f"{BASE}/import",
            json={
                "contacts": [
                    {"name": "Rex", "phone": "(555) 111-0000"},
                    {"name": "Vet", "phone": "555-222-0000"},
                    {"name": "Vet again", "phone": "+1 555 222 0000"},
                    {"name": "Junk", "phone": "42"},
                ]
            },
        )

        assert response.status_code == 200
        assert response.json()["data"] == {
            "received": 4,
            "inserted": 2,
            "updated": 0,
            "linked": 1,
            "skipped": 2,
        }

        stats = (await authenticated_client.get(f"{BASE}/stats")).json()["data"]
        assert stats == {"total": 2, "linked": 1, "unlinked": 1}

    @pytest.mark.asyncio
    async def test_reimport_links_newly_registered(
        self,
        authenticated_client: AsyncClient,
        make_user: Callable[..., Awaitable[UUID]],
    ) -> None:
        payload = {"contacts": [{"name": "Rex", "phone": "5551110000"}]}
        await authenticated_client.post(f"{BASE}/import", json=payload)
        await make_user("rex", name="Rex", phone="+15551110000")

        response = await authenticated_client.post(f"{BASE}/import", json=payload)

        data = response.json()["data"]
        assert (data["inserted"], data["updated"], data["linked"]) == (0, 1, 1)

    @pytest.mark.asyncio
    async def test_empty_phone_rejected(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.post(
            f"{BASE}/import", json={"contacts": [{"name": "Nobody", "phone": ""}]}
        )

        assert response.status_code == 422


class TestClearUnlinked:
    @pytest.mark.asyncio
    async def test_clear_unlinked(
        self,
        authenticated_client: AsyncClient,
        make_user: Callable[..., Awaitable[UUID]],
    ) -> None:
        await make_user("rex", name="Rex", phone="+15551110000")
        await authenticated_client.post(
            f"{BASE}/import",
            json={
                "contacts": [
                    {"name": "Rex", "phone": "5551110000"},
                    {"name": "Vet", "phone": "5552220000"},
                ]
            },
        )

        response = await authenticated_client.delete(f"{BASE}/unlinked")

        assert response.json() == {"count": 1}
        stats = (await authenticated_client.get(f"{BASE}/stats")).json()["data"]
        assert stats == {"total": 1, "linked": 1, "unlinked": 0}
