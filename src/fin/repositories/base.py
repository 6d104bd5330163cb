"""Generic repository shared by every ledger table.

Repositories only build and run statements. They flush so generated ids and
defaults are visible, but they never commit: the calling service owns the
unit of work through ``transactional()``.
"""

from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from sqlalchemy import inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from fin.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Lookup, insert, update and delete for one mapped class.

    Every ledger table has a single-column primary key (``id``, or ``name``
    for currencies); it is discovered from the mapper so subclasses never
    declare it.

    Example:
        >>> repo = BaseRepository(Category, db)
        >>> async with transactional(db):
        ...     category = await repo.create(obj_in={"name": "Groceries"})
    """

    def __init__(self, model: type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db
        self.pk = inspect(model).primary_key[0]

    async def get(self, id: Any) -> ModelType | None:
        """Row with primary key ``id``, or None."""
        result = await self.db.execute(select(self.model).where(self.pk == id))
        return result.scalar_one_or_none()

    async def list_all(self) -> list[ModelType]:
        """Every row ordered by primary key."""
        result = await self.db.execute(select(self.model).order_by(self.pk))
        return list(result.scalars().all())

    async def exists(self, id: Any) -> bool:
        return await self.get(id) is not None

    async def create(self, *, obj_in: Mapping[str, Any]) -> ModelType:
        """Insert a row built from ``obj_in``.

        Returns:
            The new instance, flushed and refreshed so server-side values
            (ids, timestamps) are loaded
        """
        db_obj = self.model(**obj_in)
        self.db.add(db_obj)
        await self.db.flush()
        await self.db.refresh(db_obj)
        return db_obj

    async def update(self, *, db_obj: ModelType, obj_in: Mapping[str, Any]) -> ModelType:
        """Assign every key of ``obj_in`` on ``db_obj`` and flush."""
        for field, value in obj_in.items():
            setattr(db_obj, field, value)

        await self.db.flush()
        await self.db.refresh(db_obj)
        return db_obj

    async def delete(self, *, db_obj: ModelType) -> None:
        await self.db.delete(db_obj)
        await self.db.flush()
