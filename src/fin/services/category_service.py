"""Category store operations."""

from sqlalchemy.ext.asyncio import AsyncSession

from fin.core.exceptions import ConflictError, NotFoundError
from fin.db.session import transactional
from fin.models.category import Category
from fin.repositories.category import CategoryRepository
from fin.schemas.category import CategoryCreate, CategoryUpdate
from fin.services.validation import validate_category


async def create_category(db: AsyncSession, data: CategoryCreate) -> Category:
    """Create a category.

    Raises:
        ValidationError: the name is empty
    """
    validate_category(data.name)
    async with transactional(db):
        return await CategoryRepository(Category, db).create(obj_in={"name": data.name})


async def get_category(db: AsyncSession, category_id: int) -> Category:
    category = await CategoryRepository(Category, db).get(category_id)
    if category is None:
        raise NotFoundError(f"category '{category_id}' not found")
    return category


async def list_categories(db: AsyncSession) -> list[Category]:
    return await CategoryRepository(Category, db).list_all()


async def update_category(db: AsyncSession, category_id: int, data: CategoryUpdate) -> Category:
    """Rename a category; an omitted name leaves it unchanged."""
    category = await get_category(db, category_id)
    if data.name is None:
        return category

    validate_category(data.name)
    async with transactional(db):
        return await CategoryRepository(Category, db).update(
            db_obj=category, obj_in={"name": data.name}
        )


async def delete_category(db: AsyncSession, category_id: int) -> None:
    """Delete a category no transaction refers to.

    The usage count and the delete share one unit of work, and the join
    table's RESTRICT foreign key rejects a link added concurrently.

    Raises:
        NotFoundError: no such category
        ConflictError: one or more transactions use the category
    """
    repo = CategoryRepository(Category, db)
    async with transactional(db):
        category = await repo.get(category_id)
        if category is None:
            raise NotFoundError(f"category '{category_id}' not found")
        if await repo.count_references(category_id) > 0:
            raise ConflictError(
                f"category '{category_id}' is being used in one or more transaction, "
                "please delete them first"
            )
        await repo.delete(db_obj=category)
