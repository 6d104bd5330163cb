"""Repository layer for database operations.

Repositories centralize all query logic and never commit; the ledger
services open the unit of work around them.

Repositories:
    - BaseRepository: Generic CRUD operations for any model
    - CurrencyRepository: Currencies, rate appends and latest-rate lookup
    - CategoryRepository: Categories and their usage count
    - AccountRepository: Accounts and their transaction count
    - TransactionRepository: Transactions, category links and balance totals

Usage:
    >>> from fin.repositories import TransactionRepository
    >>> from fin.models.transaction import Transaction
    >>>
    >>> repo = TransactionRepository(Transaction, db)
    >>> totals = await repo.totals_by_type(account_id)
"""

from fin.repositories.account import AccountRepository
from fin.repositories.base import BaseRepository
from fin.repositories.category import CategoryRepository
from fin.repositories.currency import CurrencyRepository
from fin.repositories.transaction import TransactionRepository

__all__ = [
    "BaseRepository",
    "CurrencyRepository",
    "CategoryRepository",
    "AccountRepository",
    "TransactionRepository",
]
