"""Exact decimal arithmetic for monetary amounts and exchange rates.

All amounts are ``decimal.Decimal`` with a fixed scale of two fractional
digits. Truncation always rounds toward zero so converted balances and
stored rates reproduce historical values exactly.
"""

import re
from decimal import ROUND_DOWN, Decimal

from fin.core.constants import MoneyConstants

ZERO = Decimal("0")

# Zero or more digits, optionally a decimal point followed by 1 or 2 digits
AMOUNT_PATTERN = re.compile(r"^\d*(\.\d{1,2}|\d)$")

_QUANTUM = Decimal(1).scaleb(-MoneyConstants.SCALE)


def truncate(value: Decimal, places: int = MoneyConstants.SCALE) -> Decimal:
    """Cut ``value`` to ``places`` fractional digits, rounding toward zero.

    Example:
        >>> truncate(Decimal("3.999"))
        Decimal('3.99')
        >>> truncate(Decimal("-1.239"))
        Decimal('-1.23')
    """
    quantum = _QUANTUM if places == MoneyConstants.SCALE else Decimal(1).scaleb(-places)
    return value.quantize(quantum, rounding=ROUND_DOWN)


def from_float(value: float) -> Decimal:
    """Convert a float from the rate source into a truncated decimal.

    Goes through the float's shortest repr so ``0.29`` stays ``0.29``
    instead of becoming ``0.28999999...``.
    """
    return truncate(Decimal(str(value)))


def convert(amount: Decimal, rate: Decimal) -> Decimal:
    """Multiply ``amount`` by ``rate`` and truncate to the money scale."""
    return truncate(amount * rate)


def to_plain_string(value: Decimal) -> str:
    """Canonical string form: no exponent, no trailing fractional zeros.

    Example:
        >>> to_plain_string(Decimal("100.00"))
        '100'
        >>> to_plain_string(Decimal("1.50"))
        '1.5'
    """
    if value == ZERO:
        return "0"
    return format(value.normalize(), "f")


def is_valid_amount(value: Decimal) -> bool:
    """Check that ``value`` is non-negative with at most two decimal places."""
    if not value.is_finite():
        return False
    return AMOUNT_PATTERN.match(to_plain_string(value)) is not None
