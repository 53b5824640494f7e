"""
Entry Service.

Business logic for entries: authoring, trash, bookmarks, and public
sharing. Every change to visibility goes through `_publication_fields`,
which keeps `is_public` and `public_share_id` consistent:

- publishing (including re-publishing an already public entry) always
  binds a freshly allocated token, so earlier links stop working
- unpublishing clears the token

Tokens are allocated before anything is written, so an allocation
failure leaves the entry untouched.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from jotter.backend.core.config import get_app_config
from jotter.backend.core.exceptions import ConflictError, NotFoundError
from jotter.backend.models.entry import Entry
from jotter.backend.repositories.bookmark import BookmarkRepository
from jotter.backend.repositories.category import CategoryRepository
from jotter.backend.repositories.entry import EntryRepository
from jotter.backend.schemas.entry import EntryCreate, EntryUpdate
from jotter.backend.services.base import BaseService
from jotter.backend.services.share_token import ShareTokenAllocator

SHARE_CONFLICT_MESSAGE = "Unable to publish entry, please retry"


def build_share_token_allocator(repo: EntryRepository) -> ShareTokenAllocator:
    """Create an allocator probing the given repository, sized from application.yaml."""
    sharing = get_app_config().application.sharing
    return ShareTokenAllocator(
        repo.share_id_exists,
        max_attempts=sharing.max_attempts,
        token_bytes=sharing.token_bytes,
    )


class EntryService(BaseService):
    """
    Service for entry business logic.

    All operations except `get_public_entry` are scoped to the calling
    user. Entries in the trash are invisible to everything but the trash
    listing, restore, and permanent delete.
    """

    def __init__(
        self,
        session: AsyncSession,
        allocator: ShareTokenAllocator | None = None,
    ) -> None:
        super().__init__(session)
        self.entries = EntryRepository(session)
        self.categories = CategoryRepository(session)
        self.bookmarks = BookmarkRepository(session)
        self.allocator = allocator or build_share_token_allocator(self.entries)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _require_category(self, category_id: str) -> None:
        if not await self.categories.exists(category_id):
            raise NotFoundError("Invalid category_id provided")

    async def _get_live_entry(self, user_id: str, entry_id: str) -> Entry:
        entry = await self.entries.get_owned(entry_id, user_id)
        if entry is None:
            raise NotFoundError("Entry not found")
        return entry

    async def _publication_fields(self, is_public: bool) -> dict[str, Any]:
        """Visibility columns for a publish or unpublish."""
        if not is_public:
            return {"is_public": False, "public_share_id": None}
        return {"is_public": True, "public_share_id": await self.allocator.allocate()}

    async def _apply(self, operation: str, entry: Entry, **changes: Any) -> Entry:
        entry = await self._execute_db_operation(
            operation,
            self.entries.update(entry, **changes),
            conflict_message=SHARE_CONFLICT_MESSAGE,
        )
        return await self.entries.reload(entry)

    # -------------------------------------------------------------------------
    # Authoring
    # -------------------------------------------------------------------------

    async def create_entry(self, user_id: str, data: EntryCreate) -> Entry:
        """
        Create an entry, publishing it immediately if requested.

        Raises:
            NotFoundError: If the category does not exist
            ShareTokenExhaustedError: If no share token could be allocated
        """
        await self._require_category(data.category_id)
        publication = await self._publication_fields(data.is_public)

        self._log_operation(
            "Creating entry",
            user_id=user_id,
            is_public=data.is_public,
        )

        entry = await self._execute_db_operation(
            "create_entry",
            self.entries.create(
                title=data.title,
                synopsis=data.synopsis,
                content=data.content,
                category_id=data.category_id,
                pinned=data.pinned,
                user_id=user_id,
                **publication,
            ),
            conflict_message=SHARE_CONFLICT_MESSAGE,
        )

        self._log_debug("Entry created", entry_id=entry.id)
        return await self.entries.reload(entry)

    async def list_entries(self, user_id: str) -> list[Entry]:
        """List the user's live entries, pinned first then newest."""
        return await self.entries.list_for_user(user_id)

    async def get_entry(self, user_id: str, entry_id: str) -> Entry:
        """
        Get one of the user's live entries.

        Raises:
            NotFoundError: If not found, not owned, or in the trash
        """
        return await self._get_live_entry(user_id, entry_id)

    async def update_entry(self, user_id: str, entry_id: str, data: EntryUpdate) -> Entry:
        """
        Update an entry. Only provided fields change.

        Raises:
            NotFoundError: If the entry or the new category does not exist
            ShareTokenExhaustedError: If publishing and no token could be allocated
        """
        entry = await self._get_live_entry(user_id, entry_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if not changes:
            return entry

        if "category_id" in changes:
            await self._require_category(changes["category_id"])

        if "is_public" in changes:
            changes.update(await self._publication_fields(changes["is_public"]))

        self._log_operation(
            "Updating entry",
            entry_id=entry_id,
            fields=sorted(changes),
        )
        return await self._apply("update_entry", entry, **changes)

    # -------------------------------------------------------------------------
    # Sharing
    # -------------------------------------------------------------------------

    async def share_entry(self, user_id: str, entry_id: str) -> Entry:
        """
        Publish an entry under a new share token, replacing any existing one.

        Raises:
            NotFoundError: If the entry does not exist
            ShareTokenExhaustedError: If no token could be allocated
        """
        entry = await self._get_live_entry(user_id, entry_id)
        publication = await self._publication_fields(True)
        self._log_operation("Sharing entry", entry_id=entry_id, reshare=entry.is_public)
        return await self._apply("share_entry", entry, **publication)

    async def unshare_entry(self, user_id: str, entry_id: str) -> Entry:
        """Make an entry private and drop its share token."""
        entry = await self._get_live_entry(user_id, entry_id)
        self._log_operation("Unsharing entry", entry_id=entry_id)
        return await self._apply("unshare_entry", entry, **await self._publication_fields(False))

    async def get_public_entry(self, share_id: str) -> Entry:
        """
        Get a shared entry by its public token, with category and author.

        Raises:
            NotFoundError: If no live public entry holds the token
        """
        entry = await self.entries.get_by_share_id(share_id)
        if entry is None or not entry.is_public or entry.is_deleted:
            raise NotFoundError("Entry not found or is private")
        return entry

    # -------------------------------------------------------------------------
    # Trash
    # -------------------------------------------------------------------------

    async def list_trash(self, user_id: str) -> list[Entry]:
        """List the user's soft-deleted entries, newest first."""
        return await self.entries.list_trash(user_id)

    async def soft_delete_entry(self, user_id: str, entry_id: str) -> Entry:
        """Move an entry to the trash."""
        entry = await self._get_live_entry(user_id, entry_id)
        self._log_operation("Trashing entry", entry_id=entry_id)
        return await self._apply("soft_delete_entry", entry, is_deleted=True)

    async def restore_entry(self, user_id: str, entry_id: str) -> Entry:
        """
        Restore an entry from the trash.

        Raises:
            NotFoundError: If the entry is not in the user's trash
        """
        entry = await self.entries.get_owned(entry_id, user_id, include_deleted=True)
        if entry is None or not entry.is_deleted:
            raise NotFoundError("Entry not found in trash")
        self._log_operation("Restoring entry", entry_id=entry_id)
        return await self._apply("restore_entry", entry, is_deleted=False)

    async def delete_entry_permanently(self, user_id: str, entry_id: str) -> None:
        """Delete an entry for good, whether or not it is in the trash."""
        entry = await self.entries.get_owned(entry_id, user_id, include_deleted=True)
        if entry is None:
            raise NotFoundError("Entry not found")
        self._log_operation("Deleting entry permanently", entry_id=entry_id)
        await self._execute_db_operation(
            "delete_entry_permanently",
            self.entries.delete(entry),
        )

    # -------------------------------------------------------------------------
    # Bookmarks
    # -------------------------------------------------------------------------

    async def bookmark_entry(self, user_id: str, entry_id: str) -> None:
        """
        Bookmark an entry the user owns or that is public. Idempotent.

        Raises:
            NotFoundError: If the entry is missing, trashed, or private to someone else
        """
        entry = await self.entries.get_by_id_or_none(entry_id)
        if (
            entry is None
            or entry.is_deleted
            or (entry.user_id != user_id and not entry.is_public)
        ):
            raise NotFoundError("Entry not found")

        if await self.bookmarks.get_for(user_id, entry_id) is not None:
            return

        # A concurrent request may insert the same bookmark between the check
        # and the insert; the savepoint keeps the session usable when it does
        try:
            async with self.session.begin_nested():
                await self._execute_db_operation(
                    "bookmark_entry",
                    self.bookmarks.create(user_id=user_id, entry_id=entry_id),
                )
        except ConflictError:
            self._log_debug("Bookmark already present", entry_id=entry_id)

    async def remove_bookmark(self, user_id: str, entry_id: str) -> None:
        """
        Remove a bookmark.

        Raises:
            NotFoundError: If the user has not bookmarked the entry
        """
        bookmark = await self.bookmarks.get_for(user_id, entry_id)
        if bookmark is None:
            raise NotFoundError("Bookmark not found")
        await self._execute_db_operation(
            "remove_bookmark",
            self.bookmarks.delete(bookmark),
        )

    async def list_bookmarked_entries(self, user_id: str) -> list[Entry]:
        """List the live entries the user has bookmarked."""
        return await self.bookmarks.list_entries_for_user(user_id)
