"""
Entry Model.

Database model for entries, the notes users write. An entry is public
exactly when it holds a public share token; both columns change together.
"""

from sqlalchemy import CheckConstraint, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jotter.backend.core.config_schema import MAX_SHARE_TOKEN_BYTES
from jotter.backend.models.base import Base, TimestampMixin, UUIDMixin
from jotter.backend.models.category import Category
from jotter.backend.models.user import User

SHARE_ID_MAX_LENGTH = MAX_SHARE_TOKEN_BYTES * 2


class Entry(UUIDMixin, TimestampMixin, Base):
    """
    Entry database model.

    `public_share_id` is unique across all entries when present. The check
    constraint keeps `is_public` and `public_share_id` in lockstep.
    """

    __tablename__ = "entries"
    __table_args__ = (
        UniqueConstraint("public_share_id"),
        CheckConstraint(
            "(is_public AND public_share_id IS NOT NULL)"
            " OR (NOT is_public AND public_share_id IS NULL)",
            name="public_share_id",
        ),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    synopsis: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id: Mapped[str] = mapped_column(
        ForeignKey("categories.id"),
        nullable=False,
    )
    pinned: Mapped[bool] = mapped_column(default=False, nullable=False)
    is_public: Mapped[bool] = mapped_column(default=False, nullable=False)
    public_share_id: Mapped[str | None] = mapped_column(
        String(SHARE_ID_MAX_LENGTH),
        nullable=True,
    )
    is_deleted: Mapped[bool] = mapped_column(default=False, nullable=False)

    category: Mapped[Category] = relationship(lazy="raise")
    user: Mapped[User] = relationship(lazy="raise")

    def __repr__(self) -> str:
        return f"<Entry(id={self.id}, title={self.title!r}, is_public={self.is_public})>"
