"""ORM models.

Importing this package registers every table on ``Base.metadata`` so
relationships resolve and ``create_all``/Alembic see the full schema.
"""

from fin.models.account import Account
from fin.models.category import Category
from fin.models.currency import Currency, Rate
from fin.models.transaction import Transaction, TransactionType, transactions_categories

__all__ = [
    "Account",
    "Category",
    "Currency",
    "Rate",
    "Transaction",
    "TransactionType",
    "transactions_categories",
]
