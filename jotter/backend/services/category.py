"""
Category Service.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from jotter.backend.core.exceptions import ConflictError
from jotter.backend.models.category import Category
from jotter.backend.repositories.category import CategoryRepository
from jotter.backend.schemas.category import CategoryCreate
from jotter.backend.services.base import BaseService


class CategoryService(BaseService):
    """Categories are shared by all users and referenced by entries."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = CategoryRepository(session)

    async def list_categories(self) -> list[Category]:
        return await self.repo.list_all()

    async def create_category(self, data: CategoryCreate) -> Category:
        """
        Create a category.

        Raises:
            ConflictError: If a category with the same name exists
        """
        name = data.name
        if await self.repo.get_by_name(name) is not None:
            raise ConflictError("Category already exists")

        self._log_operation("Creating category", name=name)
        return await self._execute_db_operation(
            "create_category",
            self.repo.create(name=name),
            conflict_message="Category already exists",
        )
