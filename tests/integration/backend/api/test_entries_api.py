"""
Integration Tests for Entries API.

Tests the entries endpoints with a real database.
"""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from jotter.backend.models import Category
from jotter.backend.services.share_token import ShareTokenAllocator

ENTRIES = "/api/v1/entries"


async def _create(
    client: AsyncClient,
    headers: dict[str, str],
    category: Category,
    **fields,
) -> dict:
    body = {
        "title": "Photosynthesis",
        "synopsis": "How plants make sugar",
        "content": "Light in, sugar out.",
        "category_id": category.id,
    }
    body.update(fields)
    response = await client.post(ENTRIES, json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestAuthentication:
    """Tests for bearer token handling."""

    @pytest.mark.asyncio
    async def test_missing_token(self, client: AsyncClient, api):
        """Should reject requests without a bearer token."""
        response = await client.get(ENTRIES)

        api.assert_error(response, 401, "AUTH_UNAUTHORIZED")

    @pytest.mark.asyncio
    async def test_invalid_token(self, client: AsyncClient, api):
        """Should reject a malformed token."""
        response = await client.get(
            ENTRIES, headers={"Authorization": "Bearer not-a-jwt"}
        )

        api.assert_error(response, 401, "AUTH_UNAUTHORIZED")


class TestCreateEntry:
    """Tests for POST /api/v1/entries."""

    @pytest.mark.asyncio
    async def test_create_private_entry(self, client, auth_headers, category, api):
        """Should create a private entry with no share token."""
        response = await client.post(
            ENTRIES,
            json={
                "title": "Photosynthesis",
                "synopsis": "How plants make sugar",
                "content": "Light in, sugar out.",
                "category_id": category.id,
            },
            headers=auth_headers,
        )

        data = api.assert_success(response, expected_status=201)["data"]
        assert data["title"] == "Photosynthesis"
        assert data["is_public"] is False
        assert data["public_share_id"] is None
        assert data["category"]["name"] == "Biology"
        assert data["bookmarked"] is False

    @pytest.mark.asyncio
    async def test_create_public_entry(self, client, auth_headers, category):
        """Should bind a 16-character hex token to a public entry."""
        data = await _create(client, auth_headers, category, is_public=True)

        assert data["is_public"] is True
        assert len(data["public_share_id"]) == 16
        int(data["public_share_id"], 16)

    @pytest.mark.asyncio
    async def test_missing_fields(self, client, auth_headers, api):
        """Should reject an entry without a title."""
        response = await client.post(ENTRIES, json={"content": "x"}, headers=auth_headers)

        api.assert_validation_error(response, field="title")

    @pytest.mark.asyncio
    async def test_unknown_category(self, client, auth_headers, api):
        """Should reject an unknown category."""
        response = await client.post(
            ENTRIES,
            json={"title": "T", "synopsis": "S", "content": "C", "category_id": "nope"},
            headers=auth_headers,
        )

        api.assert_error(response, 404, "RES_NOT_FOUND")

    @pytest.mark.asyncio
    async def test_share_token_exhaustion(self, client, auth_headers, category, api):
        """Should fail with a server error when no token can be allocated."""
        allocator = ShareTokenAllocator(AsyncMock(return_value=True))

        with patch(
            "jotter.backend.services.entry.build_share_token_allocator",
            return_value=allocator,
        ):
            response = await client.post(
                ENTRIES,
                json={
                    "title": "T",
                    "synopsis": "S",
                    "content": "C",
                    "category_id": category.id,
                    "is_public": True,
                },
                headers=auth_headers,
            )

        api.assert_error(response, 500, "SYS_SHARE_TOKEN_EXHAUSTED")

        listed = await client.get(ENTRIES, headers=auth_headers)
        assert listed.json()["data"] == []


class TestReadEntries:
    """Tests for GET /api/v1/entries and GET /api/v1/entries/{id}."""

    @pytest.mark.asyncio
    async def test_list_pinned_first(self, client, auth_headers, category, api):
        """Should list pinned entries ahead of newer ones."""
        pinned = await _create(client, auth_headers, category, pinned=True)
        newer = await _create(client, auth_headers, category)

        response = await client.get(ENTRIES, headers=auth_headers)

        ids = [e["id"] for e in api.assert_success(response)["data"]]
        assert ids == [pinned["id"], newer["id"]]

    @pytest.mark.asyncio
    async def test_get_entry(self, client, auth_headers, category, api):
        created = await _create(client, auth_headers, category)

        response = await client.get(f"{ENTRIES}/{created['id']}", headers=auth_headers)

        assert api.assert_success(response)["data"]["id"] == created["id"]

    @pytest.mark.asyncio
    async def test_other_users_entry_is_hidden(
        self, client, auth_headers, other_auth_headers, category, api
    ):
        """Should 404 rather than reveal someone else's entry."""
        created = await _create(client, auth_headers, category, is_public=True)

        response = await client.get(
            f"{ENTRIES}/{created['id']}", headers=other_auth_headers
        )

        api.assert_error(response, 404, "RES_NOT_FOUND")


class TestUpdateEntry:
    """Tests for PATCH /api/v1/entries/{id}."""

    @pytest.mark.asyncio
    async def test_partial_update(self, client, auth_headers, category, api):
        created = await _create(client, auth_headers, category)

        response = await client.patch(
            f"{ENTRIES}/{created['id']}",
            json={"title": "Renamed"},
            headers=auth_headers,
        )

        data = api.assert_success(response)["data"]
        assert data["title"] == "Renamed"
        assert data["content"] == created["content"]

    @pytest.mark.asyncio
    async def test_republish_rotates_token(self, client, auth_headers, category, api):
        """Setting is_public on a public entry should issue a new token."""
        created = await _create(client, auth_headers, category, is_public=True)

        response = await client.patch(
            f"{ENTRIES}/{created['id']}",
            json={"is_public": True},
            headers=auth_headers,
        )

        data = api.assert_success(response)["data"]
        assert data["public_share_id"] not in (None, created["public_share_id"])

    @pytest.mark.asyncio
    async def test_unpublish_clears_token(self, client, auth_headers, category, api):
        created = await _create(client, auth_headers, category, is_public=True)

        response = await client.patch(
            f"{ENTRIES}/{created['id']}",
            json={"is_public": False},
            headers=auth_headers,
        )

        data = api.assert_success(response)["data"]
        assert data["is_public"] is False
        assert data["public_share_id"] is None


class TestSharing:
    """Tests for share, unshare, and the public view."""

    @pytest.mark.asyncio
    async def test_share_returns_public_url(self, client, auth_headers, category, api):
        created = await _create(client, auth_headers, category)

        response = await client.post(
            f"{ENTRIES}/{created['id']}/share", headers=auth_headers
        )

        data = api.assert_success(response)["data"]
        token = data["entry"]["public_share_id"]
        assert data["entry"]["is_public"] is True
        assert data["public_url"].endswith(f"/{token}")

    @pytest.mark.asyncio
    async def test_public_view_without_auth(self, client, auth_headers, category, api):
        """Anyone with the token can read the entry and its author."""
        created = await _create(client, auth_headers, category, is_public=True)

        response = await client.get(f"{ENTRIES}/public/{created['public_share_id']}")

        data = api.assert_success(response)["data"]
        assert data["id"] == created["id"]
        assert data["user"]["username"] == "alice"
        assert data["category"]["name"] == "Biology"
        assert "email" not in data["user"]

    @pytest.mark.asyncio
    async def test_reshare_invalidates_old_link(self, client, auth_headers, category, api):
        """The previous token should stop resolving after a re-share."""
        created = await _create(client, auth_headers, category, is_public=True)
        old_token = created["public_share_id"]

        response = await client.post(
            f"{ENTRIES}/{created['id']}/share", headers=auth_headers
        )
        new_token = api.assert_success(response)["data"]["entry"]["public_share_id"]

        assert new_token != old_token
        api.assert_error(await client.get(f"{ENTRIES}/public/{old_token}"), 404)
        api.assert_success(await client.get(f"{ENTRIES}/public/{new_token}"))

    @pytest.mark.asyncio
    async def test_unshare(self, client, auth_headers, category, api):
        created = await _create(client, auth_headers, category, is_public=True)

        response = await client.delete(
            f"{ENTRIES}/{created['id']}/share", headers=auth_headers
        )

        data = api.assert_success(response)["data"]
        assert data["is_public"] is False
        assert data["public_share_id"] is None
        api.assert_error(
            await client.get(f"{ENTRIES}/public/{created['public_share_id']}"), 404
        )

    @pytest.mark.asyncio
    async def test_share_exhaustion_keeps_existing_link(
        self, client, auth_headers, category, api
    ):
        """A failed re-share should leave the current link working."""
        created = await _create(client, auth_headers, category, is_public=True)
        allocator = ShareTokenAllocator(AsyncMock(return_value=True))

        with patch(
            "jotter.backend.services.entry.build_share_token_allocator",
            return_value=allocator,
        ):
            response = await client.post(
                f"{ENTRIES}/{created['id']}/share", headers=auth_headers
            )

        api.assert_error(response, 500, "SYS_SHARE_TOKEN_EXHAUSTED")
        api.assert_success(
            await client.get(f"{ENTRIES}/public/{created['public_share_id']}")
        )


class TestTrash:
    """Tests for trash, restore, and permanent delete."""

    @pytest.mark.asyncio
    async def test_trash_and_restore(self, client, auth_headers, category, api):
        created = await _create(client, auth_headers, category)

        deleted = await client.delete(f"{ENTRIES}/{created['id']}", headers=auth_headers)
        assert api.assert_success(deleted)["data"]["is_deleted"] is True

        listed = await client.get(ENTRIES, headers=auth_headers)
        assert listed.json()["data"] == []

        trash = await client.get(f"{ENTRIES}/trash", headers=auth_headers)
        assert [e["id"] for e in trash.json()["data"]] == [created["id"]]

        restored = await client.patch(
            f"{ENTRIES}/restore/{created['id']}", headers=auth_headers
        )
        assert api.assert_success(restored)["data"]["is_deleted"] is False

    @pytest.mark.asyncio
    async def test_trashed_public_entry_is_hidden(self, client, auth_headers, category, api):
        created = await _create(client, auth_headers, category, is_public=True)

        await client.delete(f"{ENTRIES}/{created['id']}", headers=auth_headers)

        api.assert_error(
            await client.get(f"{ENTRIES}/public/{created['public_share_id']}"), 404
        )

    @pytest.mark.asyncio
    async def test_delete_permanently(self, client, auth_headers, category, api):
        created = await _create(client, auth_headers, category)

        response = await client.delete(
            f"{ENTRIES}/permanent/{created['id']}", headers=auth_headers
        )

        assert response.status_code == 204
        api.assert_error(
            await client.get(f"{ENTRIES}/{created['id']}", headers=auth_headers), 404
        )
        trash = await client.get(f"{ENTRIES}/trash", headers=auth_headers)
        assert trash.json()["data"] == []


class TestBookmarks:
    """Tests for bookmark endpoints."""

    @pytest.mark.asyncio
    async def test_bookmark_flow(
        self, client, auth_headers, other_auth_headers, category, api
    ):
        """Another user can bookmark a public entry, list it, and remove it."""
        created = await _create(client, auth_headers, category, is_public=True)

        response = await client.post(
            f"{ENTRIES}/{created['id']}/bookmark", headers=other_auth_headers
        )
        assert api.assert_success(response)["data"]["message"] == "Entry bookmarked"

        listed = await client.get(f"{ENTRIES}/bookmarks/all", headers=other_auth_headers)
        data = api.assert_success(listed)["data"]
        assert [e["id"] for e in data] == [created["id"]]
        assert data[0]["bookmarked"] is True

        removed = await client.delete(
            f"{ENTRIES}/{created['id']}/bookmark", headers=other_auth_headers
        )
        api.assert_success(removed)

        listed = await client.get(f"{ENTRIES}/bookmarks/all", headers=other_auth_headers)
        assert listed.json()["data"] == []

    @pytest.mark.asyncio
    async def test_cannot_bookmark_private_entry_of_other_user(
        self, client, auth_headers, other_auth_headers, category, api
    ):
        created = await _create(client, auth_headers, category)

        response = await client.post(
            f"{ENTRIES}/{created['id']}/bookmark", headers=other_auth_headers
        )

        api.assert_error(response, 404, "RES_NOT_FOUND")

    @pytest.mark.asyncio
    async def test_bookmarks_follow_current_visibility(
        self, client, auth_headers, other_auth_headers, category, api
    ):
        """A bookmark on an unshared entry is hidden; after a re-share the new token stays with the owner."""
        created = await _create(client, auth_headers, category, is_public=True)
        await client.post(f"{ENTRIES}/{created['id']}/bookmark", headers=other_auth_headers)

        await client.delete(f"{ENTRIES}/{created['id']}/share", headers=auth_headers)
        listed = await client.get(f"{ENTRIES}/bookmarks/all", headers=other_auth_headers)
        assert api.assert_success(listed)["data"] == []

        reshared = await client.post(f"{ENTRIES}/{created['id']}/share", headers=auth_headers)
        new_token = api.assert_success(reshared)["data"]["entry"]["public_share_id"]

        listed = await client.get(f"{ENTRIES}/bookmarks/all", headers=other_auth_headers)
        data = api.assert_success(listed)["data"]
        assert [e["id"] for e in data] == [created["id"]]
        assert data[0]["public_share_id"] is None
        assert new_token not in listed.text

    @pytest.mark.asyncio
    async def test_owner_sees_own_share_token_in_bookmarks(
        self, client, auth_headers, category, api
    ):
        created = await _create(client, auth_headers, category, is_public=True)
        await client.post(f"{ENTRIES}/{created['id']}/bookmark", headers=auth_headers)

        listed = await client.get(f"{ENTRIES}/bookmarks/all", headers=auth_headers)

        data = api.assert_success(listed)["data"]
        assert data[0]["public_share_id"] == created["public_share_id"]

    @pytest.mark.asyncio
    async def test_remove_missing_bookmark(self, client, auth_headers, category, api):
        created = await _create(client, auth_headers, category)

        response = await client.delete(
            f"{ENTRIES}/{created['id']}/bookmark", headers=auth_headers
        )

        api.assert_error(response, 404, "RES_NOT_FOUND")
