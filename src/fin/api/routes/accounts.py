"""Account endpoints."""

import logging

from fastapi import APIRouter, status

from fin.core.deps import DbSession, PresentationRate
from fin.schemas.account import AccountCreate, AccountResponse, AccountUpdate
from fin.services import ledger
from fin.services.ledger import AccountWithBalance

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=list[AccountResponse])
async def get_accounts(db: DbSession, rate: PresentationRate) -> list[AccountWithBalance]:
    """
    Get all accounts with their balances.

    Args:
        db: Database session
        rate: Optional currency code; balances are converted into it

    Returns:
        List of accounts

    Example:
        GET /api/v1/accounts/?rate=BRL
    """
    return await ledger.list_accounts(db, rate)


@router.post("/", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def create_account(account: AccountCreate, db: DbSession) -> AccountWithBalance:
    """
    Create a new account.

    Args:
        account: Account data; currency must already exist
        db: Database session

    Returns:
        The created account with its native balance

    Example:
        POST /api/v1/accounts/
        {"currency": {"name": "USD"}, "name": "Wallet", "initial_balance": "100.00"}
    """
    created = await ledger.create_account(db, account)
    logger.info(f"Created account {created.id} in {created.currency.name}")
    return created


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: int,
    db: DbSession,
    rate: PresentationRate,
) -> AccountWithBalance:
    """
    Get a specific account with its computed balance.

    Raises:
        NotFoundError: 404 if the account does not exist
        DependencyError: 400 if no rate to ``rate`` was ever recorded
    """
    return await ledger.get_account(db, account_id, rate)


@router.patch("/{account_id}", response_model=AccountResponse)
async def update_account(
    account_id: int,
    account: AccountUpdate,
    db: DbSession,
) -> AccountWithBalance:
    """Rename an account. The currency cannot be changed."""
    return await ledger.update_account(db, account_id, account)


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(account_id: int, db: DbSession) -> None:
    """
    Delete an account without transactions.

    Raises:
        ConflictError: 409 if the account still has transactions
    """
    await ledger.delete_account(db, account_id)
    logger.info(f"Deleted account {account_id}")
