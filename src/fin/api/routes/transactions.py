"""Transaction endpoints nested under an account."""

import logging

from fastapi import APIRouter, status

from fin.core.deps import DbSession, VerifiedAccount
from fin.models.transaction import Transaction
from fin.schemas.transaction import TransactionCreate, TransactionResponse, TransactionUpdate
from fin.services import ledger

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=list[TransactionResponse])
async def list_transactions(account: VerifiedAccount, db: DbSession) -> list[Transaction]:
    """
    List the account's transactions with their categories, oldest first.

    Raises:
        NotFoundError: 404 if the account does not exist
    """
    return await ledger.list_transactions(db, account.id)


@router.post("/", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction: TransactionCreate,
    account: VerifiedAccount,
    db: DbSession,
) -> Transaction:
    """
    Book an income or expense on the account.

    Raises:
        ValidationError: 400 for the last failing field check
        DependencyError: 400 if a category does not exist

    Example:
        POST /api/v1/accounts/1/transactions/
        {"value": "0.99", "type": "INCOME", "categories": [{"id": 1}]}
    """
    created = await ledger.create_transaction(db, account.id, transaction)
    logger.info(f"Created transaction {created.id} on account {account.id}")
    return created


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: int,
    account: VerifiedAccount,
    db: DbSession,
) -> Transaction:
    return await ledger.get_transaction(db, account.id, transaction_id)


@router.patch("/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    transaction_id: int,
    transaction: TransactionUpdate,
    account: VerifiedAccount,
    db: DbSession,
) -> Transaction:
    """
    Update a transaction. Supplied categories replace the stored set.
    """
    return await ledger.update_transaction(db, account.id, transaction_id, transaction)


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: int,
    account: VerifiedAccount,
    db: DbSession,
) -> None:
    await ledger.delete_transaction(db, account.id, transaction_id)
    logger.info(f"Deleted transaction {transaction_id} from account {account.id}")
