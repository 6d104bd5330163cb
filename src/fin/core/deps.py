"""Dependencies for FastAPI routes."""

from typing import Annotated

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fin.core.exceptions import NotFoundError
from fin.db.session import get_db
from fin.models.account import Account
from fin.repositories.account import AccountRepository
from fin.services.rate_refresh import RateFetcher, fetch_exchange_rates


async def verify_account_exists(
    account_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Account:
    """
    Resolve the ``{account_id}`` path segment of nested transaction routes.

    Args:
        account_id: Id of the owning account
        db: Database session (injected)

    Returns:
        Account: The stored account

    Raises:
        NotFoundError: 404 if the account does not exist

    Example:
        @router.get("/")
        async def list_transactions(
            account: Annotated[Account, Depends(verify_account_exists)],
        ) -> list[Transaction]:
            ...
    """
    account = await AccountRepository(Account, db).get(account_id)
    if account is None:
        raise NotFoundError()
    return account


def presentation_rate(
    rate: str | None = Query(None, description="Currency code to convert balances into"),
) -> str | None:
    """Upper-cased ``?rate=`` query parameter, None when absent or blank."""
    if not rate:
        return None
    return rate.strip().upper() or None


def get_rate_fetcher() -> RateFetcher:
    """Exchange rate source used by the refresh endpoint."""
    return fetch_exchange_rates


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]
VerifiedAccount = Annotated[Account, Depends(verify_account_exists)]
PresentationRate = Annotated[str | None, Depends(presentation_rate)]
RatesSource = Annotated[RateFetcher, Depends(get_rate_fetcher)]
