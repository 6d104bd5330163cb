"""Currency API routes for currencies and their exchange rates."""

import logging

from fastapi import APIRouter, Request, status

from fin.core.config import settings
from fin.core.deps import DbSession, RatesSource
from fin.core.rate_limit import limiter
from fin.schemas.currency import CurrencyCreate, CurrencyResponse, RefreshRatesResponse
from fin.services import currency_service
from fin.services.currency_service import CurrencyWithRates
from fin.services.rate_refresh import refresh_currency_rates

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=list[CurrencyResponse])
async def list_currencies(db: DbSession) -> list[CurrencyWithRates]:
    """List every currency with its latest rates.

    Example:
        GET /api/v1/currencies/
    """
    currencies = await currency_service.list_currencies(db)
    logger.info(f"Found {len(currencies)} currencies")
    return currencies


@router.get("/{name}", response_model=CurrencyResponse)
async def get_currency(name: str, db: DbSession) -> CurrencyWithRates:
    """Get a currency and its latest rate per target.

    Raises:
        NotFoundError: 404 if the currency does not exist

    Example:
        GET /api/v1/currencies/USD
    """
    return await currency_service.get_currency(db, name.upper())


@router.post("/", response_model=CurrencyResponse, status_code=status.HTTP_201_CREATED)
async def create_currency(currency_data: CurrencyCreate, db: DbSession) -> CurrencyWithRates:
    """Create a currency, optionally with its first rates.

    Raises:
        ConflictError: 409 if the code already exists
        ValidationError: 400 if a rate value has more than two decimals

    Example:
        POST /api/v1/currencies/
        {
            "name": "USD",
            "symbol": "$",
            "rates": [{"name": "BRL", "symbol": "R$", "value": "3.80"}]
        }
    """
    logger.info(f"Creating currency: {currency_data.name}")
    currency = await currency_service.create_currency(db, currency_data)
    logger.info(f"Created currency {currency.name} with {len(currency.rates)} rates")
    return currency


@router.post("/{name}/rates/refresh", response_model=RefreshRatesResponse)
@limiter.limit(settings.REFRESH_RATE_LIMIT)
async def refresh_rates(
    request: Request,
    name: str,
    db: DbSession,
    fetch: RatesSource,
) -> RefreshRatesResponse:
    """Fetch the latest rates for one currency and append them to its history.

    Raises:
        NotFoundError: 404 if the currency does not exist
        ExternalAPIError: 503 if the rate source fails

    Example:
        POST /api/v1/currencies/USD/rates/refresh
    """
    name_upper = name.upper()
    logger.info(f"Refreshing rates for {name_upper}")
    await currency_service.get_currency(db, name_upper)
    appended = await refresh_currency_rates(db, name_upper, fetch)
    return RefreshRatesResponse(
        name=name_upper,
        appended_count=appended,
        message=f"Appended {appended} rates for {name_upper}",
    )
