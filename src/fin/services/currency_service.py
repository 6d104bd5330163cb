"""Currency and rate store.

Currencies are created once with an optional first batch of rates; later
observations are appended, never updated. Reads always expose only the
latest rate per target currency.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from fin.core.constants import SUPPORTED_CURRENCY_SYMBOLS
from fin.core.exceptions import ConflictError, NotFoundError
from fin.core.money import from_float
from fin.db.session import read_only_transaction, transactional
from fin.models.currency import Currency, Rate
from fin.repositories.currency import CurrencyRepository
from fin.schemas.currency import CurrencyCreate
from fin.services.validation import validate_rate


@dataclass(frozen=True)
class RateView:
    """Latest rate to one target currency, detached from the session."""

    name: str
    symbol: str
    value: Decimal


@dataclass
class CurrencyWithRates:
    """A currency together with its latest rate per target."""

    name: str
    symbol: str
    rates: list[RateView]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, currency: Currency, rates: list[Rate]) -> "CurrencyWithRates":
        return cls(
            name=currency.name,
            symbol=currency.symbol,
            rates=[RateView(rate.name, rate.symbol, rate.value) for rate in rates],
            created_at=currency.created_at,
            updated_at=currency.updated_at,
        )


def find_rate(currency: CurrencyWithRates, target: str) -> RateView | None:
    """Latest rate from ``currency`` to ``target``, or None when never recorded.

    A stored rate of 0.00 is returned as-is; only a missing row yields None.
    """
    for rate in currency.rates:
        if rate.name == target:
            return rate
    return None


def build_rates(values: Mapping[str, Decimal | float]) -> list[Rate]:
    """Turn ``{target: value}`` into unsaved Rate rows.

    Floats are truncated to two decimals through their shortest repr and the
    target symbol comes from the supported-currency table.
    """
    rates = []
    for target, value in values.items():
        amount = from_float(value) if isinstance(value, float) else Decimal(value)
        rates.append(
            Rate(name=target, symbol=SUPPORTED_CURRENCY_SYMBOLS.get(target, ""), value=amount)
        )
    return rates


async def _append_validated(repo: CurrencyRepository, name: str, rates: Iterable[Rate]) -> list[Rate]:
    rates = list(rates)
    for rate in rates:
        validate_rate(rate.value)
    return await repo.append_rates(name, rates)


async def create_currency(db: AsyncSession, data: CurrencyCreate) -> CurrencyWithRates:
    """Create a currency and its initial rates in one unit of work.

    Raises:
        ConflictError: the currency code already exists
        ValidationError: a rate value has more than two decimals or is negative
    """
    repo = CurrencyRepository(Currency, db)
    async with read_only_transaction(db):
        taken = await repo.exists(data.name)
    if taken:
        raise ConflictError(f"currency '{data.name}' already exists")

    symbol = data.symbol if data.symbol is not None else SUPPORTED_CURRENCY_SYMBOLS.get(data.name, "")
    async with transactional(db):
        currency = await repo.create(obj_in={"name": data.name, "symbol": symbol})
        await _append_validated(
            repo,
            currency.name,
            (
                Rate(
                    name=rate.name,
                    symbol=rate.symbol or SUPPORTED_CURRENCY_SYMBOLS.get(rate.name, ""),
                    value=rate.value,
                )
                for rate in data.rates
            ),
        )

    return await get_currency(db, data.name)


async def append_rates(
    db: AsyncSession, name: str, values: Mapping[str, Decimal | float]
) -> list[Rate]:
    """Append a new observation for every target in ``values``.

    Existing rows are never touched. The whole batch commits or none of it.

    Raises:
        NotFoundError: the base currency does not exist
        ValidationError: a value is negative
    """
    repo = CurrencyRepository(Currency, db)
    async with read_only_transaction(db):
        known = await repo.exists(name)
    if not known:
        raise NotFoundError(f"currency '{name}' not found")

    async with transactional(db):
        return await _append_validated(repo, name, build_rates(values))


async def get_currency(db: AsyncSession, name: str) -> CurrencyWithRates:
    """Get a currency with its latest rates.

    Raises:
        NotFoundError: no currency with that code
    """
    repo = CurrencyRepository(Currency, db)
    async with read_only_transaction(db):
        currency = await repo.get(name)
        if currency is None:
            raise NotFoundError(f"currency '{name}' not found")
        rates = await repo.latest_rates(name)
    return CurrencyWithRates.from_model(currency, rates)


async def list_currencies(db: AsyncSession) -> list[CurrencyWithRates]:
    """Get every currency with its latest rates, ordered by code."""
    repo = CurrencyRepository(Currency, db)
    async with read_only_transaction(db):
        currencies = await repo.list_all()
        return [
            CurrencyWithRates.from_model(currency, await repo.latest_rates(currency.name))
            for currency in currencies
        ]
