"""Field rules for ledger entities.

Each validator runs its checks in a fixed order and every failing check
overwrites the previous one, so the error raised is the LAST failing check.
Clients and tests rely on this ordering: a transaction with a bad type and
no categories reports the categories error.
"""

from collections.abc import Sequence
from decimal import Decimal

from fin.core.exceptions import ValidationError
from fin.core.money import ZERO, is_valid_amount
from fin.models.transaction import TransactionType

_TRANSACTION_TYPES = frozenset(kind.value for kind in TransactionType)


def _raise_last(failure: tuple[str, str] | None) -> None:
    if failure is not None:
        field, message = failure
        raise ValidationError(message, field=field)


def validate_transaction(kind: str, value: Decimal, categories: Sequence[object]) -> None:
    """Check type, value and categories of a transaction.

    Raises:
        ValidationError: for the last failing check
    """
    failure = None

    if kind not in _TRANSACTION_TYPES:
        failure = ("type", "field 'type' must be 'INCOME' or 'EXPENSE'")

    if value <= ZERO:
        failure = ("value", "field 'value' must be more than 0")

    if not is_valid_amount(value):
        failure = ("value", "field 'value' must be like 1.99")

    if len(categories) <= 0:
        failure = ("categories", "field 'categories' must not be empty")

    _raise_last(failure)


def validate_account(currency_name: str, name: str, initial_balance: Decimal) -> None:
    """Check currency, name and initial balance of a new account.

    Raises:
        ValidationError: for the last failing check
    """
    failure = None

    if not currency_name:
        failure = ("currency.name", "field 'currency.name' must not be empty")

    if not name:
        failure = ("name", "field 'name' must not be empty")

    if initial_balance <= ZERO:
        failure = ("initial_balance", "field 'initial_balance' must be more than 0")

    if not is_valid_amount(initial_balance):
        failure = ("initial_balance", "field 'initial_balance' must be like 1.99")

    _raise_last(failure)


def validate_category(name: str) -> None:
    """Check that a category has a name."""
    if not name:
        raise ValidationError("field 'name' must not be empty", field="name")


def validate_rate(value: Decimal) -> None:
    """Check that a rate value has at most two decimal places."""
    if not is_valid_amount(value):
        raise ValidationError("field 'value' must be like 1.99", field="value")
