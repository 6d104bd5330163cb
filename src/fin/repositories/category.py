"""Category repository."""

from sqlalchemy import func, select

from fin.models.category import Category
from fin.models.transaction import transactions_categories
from fin.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """Repository for Category rows and their usage by transactions."""

    async def count_references(self, category_id: int) -> int:
        """Number of transactions linked to the category."""
        result = await self.db.execute(
            select(func.count(transactions_categories.c.category_id)).where(
                transactions_categories.c.category_id == category_id
            )
        )
        return result.scalar_one()
