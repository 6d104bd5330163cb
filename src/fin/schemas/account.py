"""Account schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from fin.schemas.currency import CurrencyResponse


class CurrencyRef(BaseModel):
    """Reference to an existing currency by code."""

    name: str = ""


class AccountCreate(BaseModel):
    """Schema for creating an account.

    Fields default to empty values so the ledger's ordered validation, not
    the request parser, decides which error is reported.
    """

    currency: CurrencyRef = Field(default_factory=CurrencyRef)
    name: str = ""
    initial_balance: Decimal = Decimal("0")


class AccountUpdate(BaseModel):
    """Schema for updating an account.

    Only the name is mutable. ``currency`` is accepted so clients can echo
    the account back, but it must name the account's current currency.
    """

    name: str | None = None
    currency: CurrencyRef | None = None


class AccountResponse(BaseModel):
    """Account with its derived balance.

    ``initial_balance`` and ``balance`` are in the requested presentation
    currency when a rate was given, otherwise in the native currency.
    """

    id: int
    currency: CurrencyResponse
    name: str
    initial_balance: Decimal
    balance: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
