"""Currency and rate models.

A currency owns an append-only history of rates against other currencies.
Rates are never updated in place; the current rate for a target is the most
recently created row.
"""

from decimal import Decimal

from sqlalchemy import ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from fin.core.constants import MoneyConstants
from fin.db.base import Base, TimestampMixin


class Currency(Base, TimestampMixin):
    """Currency identified by its ISO 4217 code.

    Attributes:
        name: Currency code (e.g., "USD", "EUR") - primary key
        symbol: Display symbol (e.g., "$", "€")
    """

    __tablename__ = "currencies"

    name: Mapped[str] = mapped_column(String(3), primary_key=True)
    symbol: Mapped[str] = mapped_column(String(10), default="")


class Rate(Base, TimestampMixin):
    """One observation of a conversion rate from a base currency.

    ``value`` is how many target units one base unit buys (1 USD = 3.80 BRL
    means currency_name="USD", name="BRL", value=3.80).

    Attributes:
        id: Insertion-ordered identifier, breaks created_at ties
        currency_name: Base currency code
        name: Target currency code
        symbol: Target currency symbol
        value: Rate truncated to two decimal places
    """

    __tablename__ = "rates"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    currency_name: Mapped[str] = mapped_column(
        String(3), ForeignKey("currencies.name", ondelete="CASCADE"), index=True
    )
    name: Mapped[str] = mapped_column(String(3))
    symbol: Mapped[str] = mapped_column(String(10), default="")
    value: Mapped[Decimal] = mapped_column(
        Numeric(MoneyConstants.COLUMN_PRECISION, MoneyConstants.SCALE)
    )

    __table_args__ = (
        Index("ix_rates_currency_name_name_created_at", "currency_name", "name", "created_at"),
    )
