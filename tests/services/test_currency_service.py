"""Tests for currency service functions."""

from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fin.core.exceptions import ConflictError, NotFoundError, ValidationError
from fin.models.currency import Currency, Rate
from fin.schemas.currency import CurrencyCreate, RateCreate
from fin.services.currency_service import (
    CurrencyWithRates,
    RateView,
    append_rates,
    build_rates,
    create_currency,
    find_rate,
    get_currency,
    list_currencies,
)


@pytest.mark.unit
def test_build_rates_truncates_floats() -> None:
    rates = build_rates({"BRL": 3.8099, "EUR": Decimal("0.87"), "XXX": 1})

    assert [(rate.name, rate.symbol, rate.value) for rate in rates] == [
        ("BRL", "R$", Decimal("3.80")),
        ("EUR", "€", Decimal("0.87")),
        ("XXX", "", Decimal("1")),
    ]


@pytest.mark.unit
def test_find_rate_distinguishes_zero_from_missing() -> None:
    currency = CurrencyWithRates(
        name="USD",
        symbol="$",
        rates=[RateView("BRL", "R$", Decimal("0.00"))],
        created_at=None,
        updated_at=None,
    )

    assert find_rate(currency, "BRL").value == Decimal("0.00")
    assert find_rate(currency, "EUR") is None


@pytest.mark.integration
async def test_create_currency_with_rates(usd: CurrencyWithRates) -> None:
    assert usd.name == "USD"
    assert usd.symbol == "$"
    assert [(rate.name, rate.value) for rate in usd.rates] == [("BRL", Decimal("3.80"))]


@pytest.mark.integration
async def test_create_currency_defaults_symbol(test_db: AsyncSession) -> None:
    eur = await create_currency(
        test_db, CurrencyCreate(name="EUR", rates=[RateCreate(name="BRL", value=Decimal("4.30"))])
    )

    assert eur.symbol == "€"
    assert eur.rates[0].symbol == "R$"


@pytest.mark.integration
async def test_create_duplicate_currency(test_db: AsyncSession, usd: CurrencyWithRates) -> None:
    with pytest.raises(ConflictError, match="currency 'USD' already exists"):
        await create_currency(test_db, CurrencyCreate(name="USD"))


@pytest.mark.integration
async def test_invalid_rate_rolls_back_currency(test_db: AsyncSession) -> None:
    data = CurrencyCreate(
        name="GBP",
        rates=[
            RateCreate(name="USD", value=Decimal("1.27")),
            RateCreate(name="EUR", value=Decimal("1.171")),
        ],
    )

    with pytest.raises(ValidationError):
        await create_currency(test_db, data)

    assert await test_db.scalar(select(func.count()).select_from(Currency)) == 0
    assert await test_db.scalar(select(func.count()).select_from(Rate)) == 0


@pytest.mark.integration
async def test_append_rates_exposes_latest(test_db: AsyncSession, usd: CurrencyWithRates) -> None:
    appended = await append_rates(test_db, "USD", {"BRL": 3.95, "EUR": 0.88})
    assert len(appended) == 2

    currency = await get_currency(test_db, "USD")
    assert {rate.name: rate.value for rate in currency.rates} == {
        "BRL": Decimal("3.95"),
        "EUR": Decimal("0.88"),
    }
    assert await test_db.scalar(select(func.count()).select_from(Rate)) == 3


@pytest.mark.integration
async def test_append_rates_unknown_currency(test_db: AsyncSession) -> None:
    with pytest.raises(NotFoundError, match="currency 'JPY' not found"):
        await append_rates(test_db, "JPY", {"USD": 0.0067})


@pytest.mark.integration
async def test_get_and_list_currencies(test_db: AsyncSession, usd: CurrencyWithRates) -> None:
    await create_currency(test_db, CurrencyCreate(name="BRL"))

    assert [currency.name for currency in await list_currencies(test_db)] == ["BRL", "USD"]
    with pytest.raises(NotFoundError):
        await get_currency(test_db, "ZZZ")
