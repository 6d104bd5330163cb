"""Category endpoints."""

import logging

from fastapi import APIRouter, status

from fin.core.deps import DbSession
from fin.models.category import Category
from fin.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from fin.services import category_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=list[CategoryResponse])
async def list_categories(db: DbSession) -> list[Category]:
    """List all categories ordered by id."""
    return await category_service.list_categories(db)


@router.post("/", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(category: CategoryCreate, db: DbSession) -> Category:
    """
    Create a category.

    Raises:
        ValidationError: 400 if the name is empty
    """
    created = await category_service.create_category(db, category)
    logger.info(f"Created category {created.id}")
    return created


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: int, db: DbSession) -> Category:
    return await category_service.get_category(db, category_id)


@router.patch("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    category: CategoryUpdate,
    db: DbSession,
) -> Category:
    """Rename a category."""
    return await category_service.update_category(db, category_id, category)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: int, db: DbSession) -> None:
    """
    Delete a category.

    Raises:
        ConflictError: 409 if any transaction still uses the category
    """
    await category_service.delete_category(db, category_id)
    logger.info(f"Deleted category {category_id}")
