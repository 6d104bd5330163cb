"""Schemas package."""

from fin.schemas.account import AccountCreate, AccountResponse, AccountUpdate, CurrencyRef
from fin.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from fin.schemas.currency import (
    CurrencyCreate,
    CurrencyResponse,
    ExchangeRatesPayload,
    RateCreate,
    RateResponse,
    RefreshRatesResponse,
)
from fin.schemas.transaction import (
    CategoryRef,
    TransactionCreate,
    TransactionResponse,
    TransactionUpdate,
)

__all__ = [
    # Currency schemas
    "CurrencyCreate",
    "CurrencyResponse",
    "ExchangeRatesPayload",
    "RateCreate",
    "RateResponse",
    "RefreshRatesResponse",
    # Category schemas
    "CategoryCreate",
    "CategoryResponse",
    "CategoryUpdate",
    # Account schemas
    "AccountCreate",
    "AccountResponse",
    "AccountUpdate",
    "CurrencyRef",
    # Transaction schemas
    "CategoryRef",
    "TransactionCreate",
    "TransactionResponse",
    "TransactionUpdate",
]
