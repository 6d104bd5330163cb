"""Currency and rate schemas for request/response validation."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class RateCreate(BaseModel):
    """Schema for a rate supplied together with a new currency."""

    name: str = Field(..., min_length=3, max_length=3, pattern="^[A-Z]{3}$")
    symbol: str = Field("", max_length=10)
    value: Decimal


class RateResponse(BaseModel):
    """Schema for a latest-rate entry."""

    name: str
    symbol: str
    value: Decimal

    model_config = {"from_attributes": True}


class CurrencyCreate(BaseModel):
    """Schema for creating a currency.

    ``symbol`` falls back to the supported-currency table when omitted.
    """

    name: str = Field(..., min_length=3, max_length=3, pattern="^[A-Z]{3}$")
    symbol: str | None = Field(None, max_length=10)
    rates: list[RateCreate] = Field(default_factory=list)


class CurrencyResponse(BaseModel):
    """Schema for currency response with its latest rates."""

    name: str
    symbol: str
    rates: list[RateResponse]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RefreshRatesResponse(BaseModel):
    """Schema for a single-currency rate refresh."""

    name: str
    appended_count: int
    message: str


class ExchangeRatesPayload(BaseModel):
    """Body returned by the exchange rate source for ``/latest?base=XXX``."""

    base: str
    date: str | None = None
    rates: dict[str, float]
