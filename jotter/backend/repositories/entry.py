"""
Entry Repository.

Every per-user query filters on the owner. The only unscoped read is the
public share token lookup.
"""

from sqlalchemy import Select, select
from sqlalchemy.orm import selectinload

from jotter.backend.models.entry import Entry
from jotter.backend.repositories.base import BaseRepository

WITH_CATEGORY = (selectinload(Entry.category),)
WITH_CATEGORY_AND_AUTHOR = (selectinload(Entry.category), selectinload(Entry.user))


def _owned_by(user_id: str, deleted: bool) -> Select:
    return (
        select(Entry)
        .where(Entry.user_id == user_id, Entry.is_deleted == deleted)
        .options(*WITH_CATEGORY)
    )


class EntryRepository(BaseRepository[Entry]):
    model = Entry

    async def get_owned(
        self,
        entry_id: str,
        user_id: str,
        include_deleted: bool = False,
    ) -> Entry | None:
        """The user's entry with its category, or None. Trashed entries only on request."""
        query = (
            select(Entry)
            .where(Entry.id == entry_id, Entry.user_id == user_id)
            .options(*WITH_CATEGORY)
            .execution_options(populate_existing=True)
        )
        if not include_deleted:
            query = query.where(Entry.is_deleted == False)  # noqa: E712
        return await self._one_or_none(query)

    async def list_for_user(self, user_id: str) -> list[Entry]:
        """Live entries, pinned first, then newest first."""
        return await self._all(
            _owned_by(user_id, deleted=False).order_by(
                Entry.pinned.desc(), Entry.created_at.desc()
            )
        )

    async def list_trash(self, user_id: str) -> list[Entry]:
        """Trashed entries, newest first."""
        return await self._all(
            _owned_by(user_id, deleted=True).order_by(Entry.created_at.desc())
        )

    async def get_by_share_id(self, share_id: str) -> Entry | None:
        """Entry bound to a public share token, with category and author."""
        return await self._one_or_none(
            select(Entry)
            .where(Entry.public_share_id == share_id)
            .options(*WITH_CATEGORY_AND_AUTHOR)
            .execution_options(populate_existing=True)
        )

    async def share_id_exists(self, share_id: str) -> bool:
        """Whether any entry, live or trashed, currently holds the token."""
        return await self._any(select(Entry.id).where(Entry.public_share_id == share_id))

    async def reload(self, entry: Entry) -> Entry:
        """Re-read an entry with its category after a write."""
        return await self.get_by_id(entry.id, options=WITH_CATEGORY)
