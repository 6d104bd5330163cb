"""Account repository for account-specific database operations."""

from sqlalchemy import func, select

from fin.models.account import Account
from fin.models.transaction import Transaction
from fin.repositories.base import BaseRepository


class AccountRepository(BaseRepository[Account]):
    """Repository for Account model.

    Example:
        >>> repo = AccountRepository(Account, db)
        >>> accounts = await repo.list_all()
    """

    async def count_transactions(self, account_id: int) -> int:
        """Number of transactions booked against the account.

        Used to refuse deleting an account that still has history.
        """
        result = await self.db.execute(
            select(func.count(Transaction.id)).where(Transaction.account_id == account_id)
        )
        return result.scalar_one()
