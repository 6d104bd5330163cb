"""Tests for the exchange rate refresh job."""

import json
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from fin.core.constants import SUPPORTED_CURRENCY_SYMBOLS
from fin.core.exceptions import ExternalAPIError
from fin.repositories.currency import CurrencyRepository
from fin.schemas.currency import CurrencyCreate
from fin.services.currency_service import CurrencyWithRates, create_currency, get_currency
from fin.services.rate_refresh import (
    bootstrap_rates,
    fetch_exchange_rates,
    refresh_all_rates,
    refresh_currency_rates,
)


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.unit
async def test_fetch_exchange_rates_parses_payload() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        body = {"base": "USD", "date": "2019-01-28", "rates": {"BRL": 3.80, "EUR": 0.87}}
        return httpx.Response(200, content=json.dumps(body))

    async with _client(handler) as client:
        rates = await fetch_exchange_rates("usd", client=client)

    assert rates == {"BRL": 3.80, "EUR": 0.87}
    assert seen[0].url.path == "/latest"
    assert seen[0].url.params["base"] == "USD"


@pytest.mark.unit
async def test_fetch_exchange_rates_sends_access_key() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"base": "USD", "rates": {}})

    with patch("fin.services.rate_refresh.settings.RATES_API_KEY", "secret"):
        async with _client(handler) as client:
            await fetch_exchange_rates("USD", client=client)

    assert seen[0].url.params["access_key"] == "secret"


@pytest.mark.unit
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="boom"),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"base": "USD"}),
    ],
)
async def test_fetch_exchange_rates_failures(response: httpx.Response) -> None:
    async with _client(lambda request: response) as client:
        with pytest.raises(ExternalAPIError):
            await fetch_exchange_rates("USD", client=client)


@pytest.mark.unit
async def test_fetch_exchange_rates_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(ExternalAPIError, match="failed to fetch rates for USD"):
            await fetch_exchange_rates("USD", client=client)


@pytest.mark.integration
async def test_refresh_currency_rates_appends(
    test_db: AsyncSession, usd: CurrencyWithRates
) -> None:
    fetch = AsyncMock(return_value={"BRL": 3.9999, "EUR": 0.87})

    appended = await refresh_currency_rates(test_db, "USD", fetch)

    assert appended == 2
    fetch.assert_awaited_once_with("USD")
    currency = await get_currency(test_db, "USD")
    assert {rate.name: rate.value for rate in currency.rates} == {
        "BRL": Decimal("3.99"),
        "EUR": Decimal("0.87"),
    }


@pytest.mark.integration
async def test_refresh_all_rates_creates_currencies(test_db: AsyncSession) -> None:
    async def fetch(base: str) -> dict[str, float]:
        return {"USD": 1.0} if base != "USD" else {"EUR": 0.87}

    refreshed, failed = await refresh_all_rates(test_db, fetch)

    assert (refreshed, failed) == (len(SUPPORTED_CURRENCY_SYMBOLS), 0)
    brl = await get_currency(test_db, "BRL")
    assert brl.symbol == "R$"
    assert [(rate.name, rate.symbol, rate.value) for rate in brl.rates] == [
        ("USD", "$", Decimal("1.00"))
    ]


@pytest.mark.integration
async def test_refresh_all_rates_isolates_failures(test_db: AsyncSession, caplog) -> None:
    async def fetch(base: str) -> dict[str, float]:
        if base == "EUR":
            raise ExternalAPIError("failed to fetch rates for EUR: timeout")
        return {"EUR": 0.5}

    with caplog.at_level("ERROR"):
        refreshed, failed = await refresh_all_rates(test_db, fetch)

    assert failed == 1
    assert refreshed == len(SUPPORTED_CURRENCY_SYMBOLS) - 1
    assert "Rate refresh failed for EUR" in caplog.text
    assert (await get_currency(test_db, "EUR")).rates == []
    assert (await get_currency(test_db, "USD")).rates[0].value == Decimal("0.50")


@pytest.mark.integration
async def test_bootstrap_runs_only_on_empty_database(test_db: AsyncSession) -> None:
    fetch = AsyncMock(return_value={})

    await create_currency(test_db, CurrencyCreate(name="USD"))
    assert await bootstrap_rates(test_db, fetch) is False
    fetch.assert_not_awaited()


@pytest.mark.integration
async def test_bootstrap_on_empty_database(test_db: AsyncSession) -> None:
    fetch = AsyncMock(return_value={})

    assert await bootstrap_rates(test_db, fetch) is True
    assert fetch.await_count == len(SUPPORTED_CURRENCY_SYMBOLS)


@pytest.mark.integration
async def test_refresh_all_rates_isolates_storage_failures(test_db: AsyncSession, caplog) -> None:
    exists = CurrencyRepository.exists

    async def flaky_exists(self: CurrencyRepository, name: str) -> bool:
        if name == "EUR":
            raise OperationalError("SELECT currencies", {}, Exception("connection reset"))
        return await exists(self, name)

    async def fetch(base: str) -> dict[str, float]:
        return {"EUR": 0.5} if base != "EUR" else {"USD": 2.0}

    with patch.object(CurrencyRepository, "exists", flaky_exists), caplog.at_level("ERROR"):
        refreshed, failed = await refresh_all_rates(test_db, fetch)

    assert (refreshed, failed) == (len(SUPPORTED_CURRENCY_SYMBOLS) - 1, 1)
    assert "Rate refresh failed for EUR: storage failure: OperationalError" in caplog.text
    assert (await get_currency(test_db, "USD")).rates[0].value == Decimal("0.50")
