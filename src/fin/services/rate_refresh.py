"""Exchange rate refresh job.

Fetches the latest rates for every supported currency from an
exchangeratesapi.io-compatible HTTP API and appends them as new Rate rows.

Exchange Rate Source:
- ``GET {RATES_API_URL}/latest?base=USD`` returns
  ``{"base": "USD", "date": "2019-01-28", "rates": {"BRL": 3.80, ...}}``
- An optional ``access_key`` query parameter is sent when configured

Failure Isolation:
- Each currency is fetched and appended in its own unit of work
- A failed fetch or append is logged and counted; the run continues with the
  next currency instead of aborting the whole refresh

The job runs from the CLI (``--scrape``), once at startup when the database
has no currencies, or from the per-currency maintenance endpoint. It never
runs inline with account or transaction requests.
"""

import logging
from collections.abc import Awaitable, Callable

import httpx
from pydantic import ValidationError as PayloadValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from fin.core.config import settings
from fin.core.constants import SUPPORTED_CURRENCY_SYMBOLS
from fin.core.exceptions import AppException, ExternalAPIError
from fin.db.session import read_only_transaction
from fin.models.currency import Currency
from fin.repositories.currency import CurrencyRepository
from fin.schemas.currency import CurrencyCreate, ExchangeRatesPayload
from fin.services.currency_service import append_rates, create_currency

logger = logging.getLogger(__name__)

RateFetcher = Callable[[str], Awaitable[dict[str, float]]]


def build_url() -> str:
    """URL of the latest-rates resource."""
    return f"{settings.RATES_API_URL.rstrip('/')}/latest"


async def fetch_exchange_rates(
    base_currency: str, client: httpx.AsyncClient | None = None
) -> dict[str, float]:
    """Fetch the latest rates for a base currency.

    Args:
        base_currency: ISO 4217 currency code (e.g., "USD")
        client: Optional preconfigured client (tests inject a MockTransport)

    Returns:
        Dictionary mapping target currency codes to float rates.
        Example: {"BRL": 3.8, "EUR": 0.87}

    Raises:
        ExternalAPIError: transport failure, non-2xx status or malformed body
    """
    params = {"base": base_currency.upper()}
    if settings.RATES_API_KEY:
        params["access_key"] = settings.RATES_API_KEY

    url = build_url()
    logger.info(f"Getting exchange rates for {params['base']} from {url}")

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.RATES_API_TIMEOUT) as own_client:
                response = await own_client.get(url, params=params)
        else:
            response = await client.get(url, params=params)
        response.raise_for_status()
        payload = ExchangeRatesPayload.model_validate(response.json())
    except httpx.HTTPError as e:
        raise ExternalAPIError(f"failed to fetch rates for {params['base']}: {e}") from e
    except (ValueError, PayloadValidationError) as e:
        raise ExternalAPIError(f"malformed rates payload for {params['base']}: {e}") from e

    return payload.rates


async def refresh_currency_rates(
    db: AsyncSession, name: str, fetch: RateFetcher = fetch_exchange_rates
) -> int:
    """Fetch and append the latest rates for one existing currency.

    Returns:
        Number of rate rows appended

    Raises:
        NotFoundError: the currency does not exist
        ExternalAPIError: the rate source failed
    """
    rates = await fetch(name)
    appended = await append_rates(db, name, rates)
    logger.info(f"Appended {len(appended)} rates for {name}")
    return len(appended)


async def refresh_all_rates(
    db: AsyncSession, fetch: RateFetcher = fetch_exchange_rates
) -> tuple[int, int]:
    """Refresh every supported currency, creating missing ones on the way.

    Returns:
        Tuple of (refreshed_count, failed_count) in currencies

    Example:
        >>> refreshed, failed = await refresh_all_rates(db)
        >>> print(f"Refreshed {refreshed} currencies, {failed} failures")
    """
    logger.info("Starting rate refresh")
    repo = CurrencyRepository(Currency, db)
    refreshed = 0
    failed = 0

    for name in sorted(SUPPORTED_CURRENCY_SYMBOLS):
        try:
            async with read_only_transaction(db):
                known = await repo.exists(name)
            if not known:
                await create_currency(db, CurrencyCreate(name=name))
                logger.info(f"Created currency {name}")
            await refresh_currency_rates(db, name, fetch)
            refreshed += 1
        except AppException as e:
            logger.error(f"Rate refresh failed for {name}: {e.detail}")
            failed += 1
            # Leave no failed statement behind for the next currency
            await db.rollback()

    logger.info(f"Finished rate refresh: {refreshed} refreshed, {failed} failed")
    return refreshed, failed


async def bootstrap_rates(db: AsyncSession, fetch: RateFetcher = fetch_exchange_rates) -> bool:
    """Run the refresh job only when no currency has been stored yet.

    Returns:
        True when the job ran
    """
    repo = CurrencyRepository(Currency, db)
    if await repo.count() > 0:
        return False
    logger.info("No currencies stored, bootstrapping exchange rates")
    await refresh_all_rates(db, fetch)
    return True
