"""
Unit Tests for Entry Service.

Repositories are mocked; these tests pin down call order around share
token allocation. Behaviour against a real database is covered in
tests/integration/backend/services/test_entry_service.py.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from jotter.backend.core.exceptions import NotFoundError, ShareTokenExhaustedError
from jotter.backend.schemas.entry import EntryCreate, EntryUpdate
from jotter.backend.services.entry import EntryService, build_share_token_allocator
from jotter.backend.services.share_token import ShareTokenAllocator


def _entry(**fields) -> MagicMock:
    entry = MagicMock()
    entry.id = "entry-1"
    entry.user_id = "user-1"
    entry.is_public = False
    entry.public_share_id = None
    entry.is_deleted = False
    for key, value in fields.items():
        setattr(entry, key, value)
    return entry


class TestBuildShareTokenAllocator:
    """Tests for allocator wiring."""

    def test_sized_from_config(self):
        """Should take attempts and token size from the sharing config."""
        repo = MagicMock()
        config = MagicMock()
        config.application.sharing.max_attempts = 3
        config.application.sharing.token_bytes = 10

        with patch("jotter.backend.services.entry.get_app_config", return_value=config):
            allocator = build_share_token_allocator(repo)

        assert allocator.max_attempts == 3
        assert allocator.token_length == 20


class TestEntryServiceAllocation:
    """Tests for when the allocator is consulted."""

    @pytest.fixture
    def allocator(self) -> MagicMock:
        allocator = MagicMock(spec=ShareTokenAllocator)
        allocator.allocate = AsyncMock(return_value="0123456789abcdef")
        return allocator

    @pytest.fixture
    def service(self, mock_db_session, allocator) -> EntryService:
        service = EntryService(mock_db_session, allocator=allocator)
        service.categories = MagicMock()
        service.categories.exists = AsyncMock(return_value=True)
        service.entries = MagicMock()
        service.entries.create = AsyncMock(return_value=_entry())
        service.entries.update = AsyncMock(side_effect=lambda entry, **kw: entry)
        service.entries.reload = AsyncMock(side_effect=lambda entry: entry)
        return service

    @pytest.mark.asyncio
    async def test_create_public_binds_allocated_token(self, service):
        """Should write the allocated token together with is_public."""
        data = EntryCreate(
            title="T", synopsis="S", content="C", category_id="cat-1", is_public=True
        )

        await service.create_entry("user-1", data)

        kwargs = service.entries.create.await_args.kwargs
        assert kwargs["is_public"] is True
        assert kwargs["public_share_id"] == "0123456789abcdef"

    @pytest.mark.asyncio
    async def test_create_private_skips_allocator(self, service, allocator):
        """Should not allocate for a private entry."""
        data = EntryCreate(title="T", synopsis="S", content="C", category_id="cat-1")

        await service.create_entry("user-1", data)

        allocator.allocate.assert_not_awaited()
        assert service.entries.create.await_args.kwargs["public_share_id"] is None

    @pytest.mark.asyncio
    async def test_create_exhausted_never_writes(self, service, allocator):
        """Should fail before the insert when allocation is exhausted."""
        allocator.allocate.side_effect = ShareTokenExhaustedError(attempts=5)
        data = EntryCreate(
            title="T", synopsis="S", content="C", category_id="cat-1", is_public=True
        )

        with pytest.raises(ShareTokenExhaustedError):
            await service.create_entry("user-1", data)

        service.entries.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_category_checked_before_allocation(self, service, allocator):
        """Should not spend allocation attempts on a request that will be rejected."""
        service.categories.exists.return_value = False
        data = EntryCreate(
            title="T", synopsis="S", content="C", category_id="nope", is_public=True
        )

        with pytest.raises(NotFoundError):
            await service.create_entry("user-1", data)

        allocator.allocate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_share_always_allocates(self, service, allocator):
        """Should allocate a new token even when the entry is already public."""
        entry = _entry(is_public=True, public_share_id="abc123")
        service.entries.get_owned = AsyncMock(return_value=entry)

        await service.share_entry("user-1", "entry-1")

        allocator.allocate.assert_awaited_once()
        service.entries.update.assert_awaited_once_with(
            entry, is_public=True, public_share_id="0123456789abcdef"
        )

    @pytest.mark.asyncio
    async def test_update_without_changes_is_noop(self, service):
        """Should return the entry untouched for an empty update."""
        entry = _entry()
        service.entries.get_owned = AsyncMock(return_value=entry)

        result = await service.update_entry("user-1", "entry-1", EntryUpdate())

        assert result is entry
        service.entries.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unshare_clears_token(self, service, allocator):
        """Should write is_public=False and a null token without allocating."""
        entry = _entry(is_public=True, public_share_id="abc123")
        service.entries.get_owned = AsyncMock(return_value=entry)

        await service.unshare_entry("user-1", "entry-1")

        allocator.allocate.assert_not_awaited()
        service.entries.update.assert_awaited_once_with(
            entry, is_public=False, public_share_id=None
        )
