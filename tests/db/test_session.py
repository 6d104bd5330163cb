"""Tests for the unit-of-work context managers.

Tests verify that:
- Changes commit on success and roll back on any exception
- Database errors surface as StorageError
- Units exceeding their time budget roll back with StorageTimeoutError
- SQLite enforces the join table's foreign keys
"""

import asyncio

import pytest
from sqlalchemy import insert, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from fin.core.exceptions import NotFoundError, StorageError, StorageTimeoutError
from fin.db.session import read_only_transaction, transactional
from fin.models.category import Category
from fin.models.transaction import transactions_categories


async def _category_names(db: AsyncSession) -> list[str]:
    result = await db.execute(select(Category.name).order_by(Category.id))
    return list(result.scalars().all())


@pytest.mark.integration
class TestTransactional:
    """Tests for the transactional context manager."""

    async def test_commits_on_success(self, test_db: AsyncSession) -> None:
        async with transactional(test_db):
            test_db.add(Category(name="Rent"))

        await test_db.rollback()
        assert await _category_names(test_db) == ["Rent"]

    async def test_rolls_back_on_app_exception(self, test_db: AsyncSession) -> None:
        with pytest.raises(NotFoundError):
            async with transactional(test_db):
                test_db.add(Category(name="Rent"))
                await test_db.flush()
                raise NotFoundError()

        assert await _category_names(test_db) == []

    async def test_commit_false_rolls_back(self, test_db: AsyncSession) -> None:
        async with transactional(test_db, commit=False):
            test_db.add(Category(name="Rent"))
            await test_db.flush()

        assert await _category_names(test_db) == []

    async def test_database_error_becomes_storage_error(self, test_db: AsyncSession) -> None:
        with pytest.raises(StorageError) as exc_info:
            async with transactional(test_db):
                await test_db.execute(text("SELECT * FROM missing_table"))

        assert exc_info.value.status_code == 500
        assert "OperationalError" in exc_info.value.detail

    async def test_timeout_rolls_back(self, test_db: AsyncSession) -> None:
        with pytest.raises(StorageTimeoutError) as exc_info:
            async with transactional(test_db, timeout=0.01):
                test_db.add(Category(name="Slow"))
                await test_db.flush()
                await asyncio.sleep(1)

        assert exc_info.value.status_code == 504
        assert await _category_names(test_db) == []

    async def test_foreign_keys_are_enforced(self, test_db: AsyncSession) -> None:
        """A join row pointing at missing rows is rejected by the store."""
        with pytest.raises(StorageError):
            async with transactional(test_db):
                await test_db.execute(
                    insert(transactions_categories),
                    [{"transaction_id": 404, "category_id": 404}],
                )


@pytest.mark.integration
async def test_read_only_transaction_maps_errors(test_db: AsyncSession) -> None:
    with pytest.raises(StorageError):
        async with read_only_transaction(test_db):
            await test_db.execute(text("SELECT * FROM missing_table"))
