"""
Bookmark Model.
"""

from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jotter.backend.models.base import Base, TimestampMixin, UUIDMixin
from jotter.backend.models.entry import Entry


class Bookmark(UUIDMixin, TimestampMixin, Base):
    """A user's bookmark on an entry. One per (user, entry) pair."""

    __tablename__ = "bookmarks"
    __table_args__ = (UniqueConstraint("user_id", "entry_id", name="uq_bookmarks_user_entry"),)

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    entry_id: Mapped[str] = mapped_column(
        ForeignKey("entries.id", ondelete="CASCADE"),
        nullable=False,
    )

    entry: Mapped[Entry] = relationship(lazy="raise")
