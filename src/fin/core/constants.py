"""Application-wide constants.

Constants are organized into logical groups. The supported currency table is
exposed as a read-only mapping built once at import time.
"""

from collections.abc import Mapping
from types import MappingProxyType


class MoneyConstants:
    """Constants for monetary arithmetic."""

    # Fractional digits kept on every stored or presented amount
    SCALE = 2

    # NUMERIC(precision, scale) used for amount and rate columns
    COLUMN_PRECISION = 12


class TransactionConstants:
    """Constants for transaction classification."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


# Currencies the rate refresh job keeps up to date, with their display symbols
SUPPORTED_CURRENCY_SYMBOLS: Mapping[str, str] = MappingProxyType(
    {
        "AUD": "$",
        "BGN": "лв",
        "BRL": "R$",
        "CAD": "$",
        "CHF": "CHF",
        "CNY": "¥",
        "CZK": "Kč",
        "DKK": "kr",
        "EUR": "€",
        "GBP": "£",
        "HKD": "$",
        "HRK": "kn",
        "HUF": "Ft",
        "IDR": "Rp",
        "ILS": "₪",
        "INR": "₹",
        "ISK": "kr",
        "JPY": "¥",
        "KRW": "₩",
        "MXN": "$",
        "MYR": "RM",
        "NOK": "kr",
        "NZD": "$",
        "PHP": "₱",
        "PLN": "zł",
        "RON": "lei",
        "RUB": "₽",
        "SEK": "kr",
        "SGD": "$",
        "THB": "฿",
        "TRY": "₺",
        "USD": "$",
        "ZAR": "R",
    }
)
