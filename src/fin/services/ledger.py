"""Ledger: accounts, their derived balances and the transactions booked on them.

Balance Computation:
- balance = initial_balance + sum(INCOME) - sum(EXPENSE)
- Both sums come from one grouped aggregate so they share a snapshot
- Optional presentation conversion multiplies initial_balance and balance
  by the latest rate to the requested currency, truncated to 2 decimals
- Nothing computed here is ever persisted

Transaction Writes:
- Create and update run in a single unit of work: the row, every category
  lookup and every join row commit together or not at all
- Updating categories deletes all join rows and re-inserts the new set
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from fin.core.exceptions import ConflictError, DependencyError, NotFoundError, ValidationError
from fin.core.money import ZERO, convert
from fin.db.session import read_only_transaction, transactional
from fin.models.account import Account
from fin.models.category import Category
from fin.models.currency import Currency
from fin.models.transaction import Transaction, TransactionType
from fin.repositories.account import AccountRepository
from fin.repositories.category import CategoryRepository
from fin.repositories.currency import CurrencyRepository
from fin.repositories.transaction import TransactionRepository
from fin.schemas.account import AccountCreate, AccountUpdate
from fin.schemas.transaction import TransactionCreate, TransactionUpdate
from fin.services.currency_service import CurrencyWithRates, find_rate, get_currency
from fin.services.validation import validate_account, validate_transaction


@dataclass
class AccountWithBalance:
    """An account as presented to clients, with its computed balance."""

    id: int
    currency: CurrencyWithRates
    name: str
    initial_balance: Decimal
    balance: Decimal
    created_at: datetime
    updated_at: datetime


# ============================================================================
# Balance
# ============================================================================


async def compute_balance(
    db: AsyncSession, account: Account, rate_name: str | None = None
) -> AccountWithBalance:
    """Derive the balance of ``account``, optionally converted.

    Args:
        db: Database session
        account: Stored account
        rate_name: Presentation currency code; empty or the account's own
            currency means no conversion

    Raises:
        DependencyError: no usable (non-zero) rate from the account currency
            to ``rate_name``
    """
    currency = await get_currency(db, account.currency_name)

    async with read_only_transaction(db):
        totals = await TransactionRepository(Transaction, db).totals_by_type(account.id)

    income = totals.get(TransactionType.INCOME, ZERO)
    expense = totals.get(TransactionType.EXPENSE, ZERO)
    initial_balance = account.initial_balance
    balance = initial_balance + income - expense

    if rate_name and rate_name != currency.name:
        rate = find_rate(currency, rate_name)
        # A sub-cent rate truncates to 0.00 and cannot convert anything
        if rate is None or rate.value == ZERO:
            raise DependencyError(
                f"rate '{rate_name}' is not available for currency '{currency.name}'"
            )
        initial_balance = convert(initial_balance, rate.value)
        balance = convert(balance, rate.value)

    return AccountWithBalance(
        id=account.id,
        currency=currency,
        name=account.name,
        initial_balance=initial_balance,
        balance=balance,
        created_at=account.created_at,
        updated_at=account.updated_at,
    )


# ============================================================================
# Accounts
# ============================================================================


async def _load_account(db: AsyncSession, account_id: int) -> Account:
    account = await AccountRepository(Account, db).get(account_id)
    if account is None:
        raise NotFoundError()
    return account


async def create_account(db: AsyncSession, data: AccountCreate) -> AccountWithBalance:
    """Validate and store a new account, returning it with its native balance.

    Raises:
        ValidationError: last failing field check
        DependencyError: the currency does not exist
    """
    validate_account(data.currency.name, data.name, data.initial_balance)

    if not await CurrencyRepository(Currency, db).exists(data.currency.name):
        raise DependencyError(f"currency '{data.currency.name}' not found")

    async with transactional(db):
        account = await AccountRepository(Account, db).create(
            obj_in={
                "currency_name": data.currency.name,
                "name": data.name,
                "initial_balance": data.initial_balance,
            }
        )

    return await compute_balance(db, account)


async def get_account(
    db: AsyncSession, account_id: int, rate_name: str | None = None
) -> AccountWithBalance:
    """Get one account with its balance, converted when ``rate_name`` is given."""
    account = await _load_account(db, account_id)
    return await compute_balance(db, account, rate_name)


async def list_accounts(db: AsyncSession, rate_name: str | None = None) -> list[AccountWithBalance]:
    """Get every account with its balance, ordered by id.

    Conversion is all or nothing: one account without a usable ``rate_name``
    rate fails the whole list with ``DependencyError``.
    """
    accounts = await AccountRepository(Account, db).list_all()
    return [await compute_balance(db, account, rate_name) for account in accounts]


async def update_account(
    db: AsyncSession, account_id: int, data: AccountUpdate
) -> AccountWithBalance:
    """Rename an account.

    The currency cannot change; echoing the current one is accepted.

    Raises:
        NotFoundError: no such account
        ValidationError: empty name or a different currency
    """
    account = await _load_account(db, account_id)

    if data.currency is not None and data.currency.name != account.currency_name:
        raise ValidationError("field 'currency.name' must not change", field="currency.name")
    if data.name is not None and not data.name:
        raise ValidationError("field 'name' must not be empty", field="name")

    if data.name is not None:
        async with transactional(db):
            account = await AccountRepository(Account, db).update(
                db_obj=account, obj_in={"name": data.name}
            )

    return await compute_balance(db, account)


async def delete_account(db: AsyncSession, account_id: int) -> None:
    """Delete an account that has no transactions.

    Raises:
        NotFoundError: no such account
        ConflictError: the account still has transactions
    """
    repo = AccountRepository(Account, db)
    async with transactional(db):
        account = await repo.get(account_id)
        if account is None:
            raise NotFoundError()
        if await repo.count_transactions(account_id) > 0:
            raise ConflictError(
                f"account '{account_id}' has one or more transactions, please delete them first"
            )
        await repo.delete(db_obj=account)


# ============================================================================
# Transactions
# ============================================================================


async def _resolve_categories(db: AsyncSession, category_ids: Iterable[int]) -> list[int]:
    """Check every referenced category exists, dropping repeated ids."""
    repo = CategoryRepository(Category, db)
    resolved = []
    for category_id in dict.fromkeys(category_ids):
        if await repo.get(category_id) is None:
            raise DependencyError(f"category '{category_id}' not found")
        resolved.append(category_id)
    return resolved


async def _load_transaction(db: AsyncSession, account_id: int, transaction_id: int) -> Transaction:
    transaction = await TransactionRepository(Transaction, db).get_in_account(
        account_id, transaction_id
    )
    if transaction is None:
        raise NotFoundError()
    return transaction


async def create_transaction(
    db: AsyncSession, account_id: int, data: TransactionCreate
) -> Transaction:
    """Book a transaction and link its categories atomically.

    Raises:
        ValidationError: last failing field check
        NotFoundError: no such account
        DependencyError: a category does not exist; nothing is stored
    """
    validate_transaction(data.type, data.value, data.categories)
    await _load_account(db, account_id)

    repo = TransactionRepository(Transaction, db)
    async with transactional(db):
        transaction = await repo.create(
            obj_in={
                "account_id": account_id,
                "description": data.description,
                "value": data.value,
                "type": TransactionType(data.type),
            }
        )
        category_ids = await _resolve_categories(db, (ref.id for ref in data.categories))
        await repo.link_categories(transaction.id, category_ids)

    return await _load_transaction(db, account_id, transaction.id)


async def get_transaction(db: AsyncSession, account_id: int, transaction_id: int) -> Transaction:
    """Get a transaction of an account with its categories."""
    return await _load_transaction(db, account_id, transaction_id)


async def list_transactions(db: AsyncSession, account_id: int) -> list[Transaction]:
    """Get every transaction of an account, oldest first."""
    await _load_account(db, account_id)
    return await TransactionRepository(Transaction, db).list_by_account(account_id)


async def update_transaction(
    db: AsyncSession, account_id: int, transaction_id: int, data: TransactionUpdate
) -> Transaction:
    """Merge ``data`` onto the stored transaction and replace its categories.

    Omitted fields keep their stored values. The merged result is validated
    with the same rules as a new transaction.

    Raises:
        NotFoundError: no such transaction in this account
        ValidationError: last failing field check on the merged values
        DependencyError: a category does not exist; nothing is changed
    """
    stored = await _load_transaction(db, account_id, transaction_id)

    description = data.description if data.description is not None else stored.description
    value = data.value if data.value is not None else stored.value
    kind = data.type if data.type is not None else stored.type.value
    if data.categories is not None:
        category_ids = [ref.id for ref in data.categories]
    else:
        category_ids = [category.id for category in stored.categories]

    validate_transaction(kind, value, category_ids)

    repo = TransactionRepository(Transaction, db)
    async with transactional(db):
        await repo.update(
            db_obj=stored,
            obj_in={"description": description, "value": value, "type": TransactionType(kind)},
        )
        await repo.unlink_categories(transaction_id)
        await repo.link_categories(transaction_id, await _resolve_categories(db, category_ids))

    return await _load_transaction(db, account_id, transaction_id)


async def delete_transaction(db: AsyncSession, account_id: int, transaction_id: int) -> None:
    """Delete a transaction; its category links go with it."""
    async with transactional(db):
        transaction = await _load_transaction(db, account_id, transaction_id)
        await TransactionRepository(Transaction, db).delete(db_obj=transaction)
