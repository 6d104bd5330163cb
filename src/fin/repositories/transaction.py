"""Transaction repository: rows, category links and balance aggregates."""

from collections.abc import Sequence
from decimal import Decimal

from sqlalchemy import delete, func, insert, select
from sqlalchemy.orm import selectinload

from fin.models.transaction import Transaction, TransactionType, transactions_categories
from fin.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for Transaction model and its category join rows.

    Join rows are written with plain statements rather than through the
    ORM collection so an update is always delete-all then insert-all.
    """

    async def get_in_account(self, account_id: int, transaction_id: int) -> Transaction | None:
        """Get a transaction with its categories, scoped to one account.

        Uses ``populate_existing`` so categories re-linked earlier in the
        session are reloaded instead of served from the identity map.
        """
        result = await self.db.execute(
            select(Transaction)
            .where(Transaction.id == transaction_id, Transaction.account_id == account_id)
            .options(selectinload(Transaction.categories))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_by_account(self, account_id: int) -> list[Transaction]:
        """Get all transactions of an account with their categories, oldest first."""
        result = await self.db.execute(
            select(Transaction)
            .where(Transaction.account_id == account_id)
            .options(selectinload(Transaction.categories))
            .order_by(Transaction.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def totals_by_type(self, account_id: int) -> dict[TransactionType, Decimal]:
        """Sum of transaction values per type for one account.

        A single grouped statement, so income and expense come from the same
        snapshot. Types without transactions are absent from the result.
        """
        result = await self.db.execute(
            select(Transaction.type, func.sum(Transaction.value))
            .where(Transaction.account_id == account_id)
            .group_by(Transaction.type)
        )
        return {TransactionType(kind): total for kind, total in result.all()}

    async def link_categories(self, transaction_id: int, category_ids: Sequence[int]) -> None:
        """Insert one join row per category id."""
        if not category_ids:
            return
        await self.db.execute(
            insert(transactions_categories),
            [
                {"transaction_id": transaction_id, "category_id": category_id}
                for category_id in category_ids
            ],
        )

    async def unlink_categories(self, transaction_id: int) -> None:
        """Delete every join row of a transaction."""
        await self.db.execute(
            delete(transactions_categories).where(
                transactions_categories.c.transaction_id == transaction_id
            )
        )
