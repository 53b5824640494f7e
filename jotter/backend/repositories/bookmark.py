"""
Bookmark Repository.
"""

from sqlalchemy import or_, select
from sqlalchemy.orm import selectinload

from jotter.backend.models.bookmark import Bookmark
from jotter.backend.models.entry import Entry
from jotter.backend.repositories.base import BaseRepository


class BookmarkRepository(BaseRepository[Bookmark]):
    model = Bookmark

    async def get_for(self, user_id: str, entry_id: str) -> Bookmark | None:
        return await self._one_or_none(
            select(Bookmark).where(
                Bookmark.user_id == user_id,
                Bookmark.entry_id == entry_id,
            )
        )

    async def list_entries_for_user(self, user_id: str) -> list[Entry]:
        """
        Bookmarked entries the user may still read, most recent bookmark first.

        Same visibility as bookmarking: the user's own live entries, or live
        entries that are public right now. A bookmark on an entry that was
        later made private stays stored but is not listed.
        """
        bookmarks = await self._all(
            select(Bookmark)
            .join(Bookmark.entry)
            .where(
                Bookmark.user_id == user_id,
                Entry.is_deleted == False,  # noqa: E712
                or_(Entry.user_id == user_id, Entry.is_public == True),  # noqa: E712
            )
            .order_by(Bookmark.created_at.desc())
            .options(selectinload(Bookmark.entry).selectinload(Entry.category))
        )
        return [bookmark.entry for bookmark in bookmarks]
