"""
Category Model.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from jotter.backend.models.base import Base, TimestampMixin, UUIDMixin


class Category(UUIDMixin, TimestampMixin, Base):
    """Category an entry is filed under."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name!r})>"
