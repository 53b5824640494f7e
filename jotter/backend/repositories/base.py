"""
Base Repository.

Repositories are the only code that builds SQL. Writes flush but never
commit; the request (or CLI command) owning the session decides that.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.interfaces import ORMOption

from jotter.backend.core.exceptions import NotFoundError
from jotter.backend.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic CRUD for one model.

        class CategoryRepository(BaseRepository[Category]):
            model = Category

    Relationships are declared lazy="raise", so reads that need them pass
    loader options such as `selectinload(Entry.category)`. Passing options
    also refreshes instances already in the identity map.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # -------------------------------------------------------------------------
    # Query helpers for subclasses
    # -------------------------------------------------------------------------

    async def _one_or_none(self, query: Select) -> Any:
        return (await self.session.execute(query)).scalar_one_or_none()

    async def _all(self, query: Select) -> list[Any]:
        return list((await self.session.execute(query)).scalars().all())

    async def _any(self, query: Select) -> bool:
        """True when the query matches at least one row."""
        return await self._one_or_none(query.limit(1)) is not None

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    async def get_by_id_or_none(
        self,
        id: str,
        options: tuple[ORMOption, ...] = (),
    ) -> ModelType | None:
        return await self._one_or_none(
            select(self.model)
            .where(self.model.id == id)
            .options(*options)
            .execution_options(populate_existing=bool(options))
        )

    async def get_by_id(
        self,
        id: str,
        options: tuple[ORMOption, ...] = (),
    ) -> ModelType:
        """Like get_by_id_or_none but raises NotFoundError."""
        instance = await self.get_by_id_or_none(id, options=options)
        if instance is None:
            raise NotFoundError(f"{self.model.__name__} not found")
        return instance

    async def exists(self, id: str) -> bool:
        return await self._any(select(self.model.id).where(self.model.id == id))

    async def create(self, **fields: Any) -> ModelType:
        """Insert and flush, so server side defaults and the ID are populated."""
        instance = self.model(**fields)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, instance: ModelType, **fields: Any) -> ModelType:
        """
        Set mapped attributes on a loaded instance and flush.

        Unknown field names raise AttributeError rather than being dropped.
        """
        for key, value in fields.items():
            if key not in self.model.__mapper__.attrs:
                raise AttributeError(f"{self.model.__name__} has no field {key!r}")
            setattr(instance, key, value)

        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, instance: ModelType) -> None:
        await self.session.delete(instance)
        await self.session.flush()
