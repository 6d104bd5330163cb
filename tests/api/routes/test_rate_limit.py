"""Tests for rate limiting of the rate refresh endpoint."""

import pytest
from httpx import AsyncClient

from fin.core.deps import get_rate_fetcher
from fin.services.currency_service import CurrencyWithRates
from main import app

pytestmark = pytest.mark.integration


async def _no_rates(base: str) -> dict[str, float]:
    return {}


async def test_refresh_endpoint_is_rate_limited(
    client: AsyncClient, usd: CurrencyWithRates
) -> None:
    """REFRESH_RATE_LIMIT is 10/minute; the eleventh call is rejected."""
    app.dependency_overrides[get_rate_fetcher] = lambda: _no_rates

    for i in range(10):
        response = await client.post("/api/v1/currencies/USD/rates/refresh")
        assert response.status_code == 200, f"Request {i + 1} failed"

    response = await client.post("/api/v1/currencies/USD/rates/refresh")

    assert response.status_code == 429
    assert response.json()["error_code"] == "RATE_LIMITED"
    assert response.headers["Retry-After"] == "60"


async def test_other_endpoints_are_not_limited(client: AsyncClient) -> None:
    for _ in range(15):
        response = await client.get("/api/v1/categories/")
        assert response.status_code == 200
