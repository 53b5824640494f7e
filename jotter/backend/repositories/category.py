"""
Category Repository.
"""

from sqlalchemy import select

from jotter.backend.models.category import Category
from jotter.backend.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    model = Category

    async def list_all(self) -> list[Category]:
        """All categories, alphabetical."""
        return await self._all(select(Category).order_by(Category.name))

    async def get_by_name(self, name: str) -> Category | None:
        return await self._one_or_none(select(Category).where(Category.name == name))
