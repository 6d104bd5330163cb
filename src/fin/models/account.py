"""Account model for tracking financial accounts."""

from decimal import Decimal

from sqlalchemy import ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from fin.core.constants import MoneyConstants
from fin.db.base import Base, TimestampMixin


class Account(Base, TimestampMixin):
    """Account holding money in one native currency.

    The balance is not a column: it is derived from ``initial_balance`` and
    the account's transactions on every read.
    """

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    currency_name: Mapped[str] = mapped_column(
        String(3), ForeignKey("currencies.name"), index=True
    )
    name: Mapped[str] = mapped_column(String(255))
    initial_balance: Mapped[Decimal] = mapped_column(
        Numeric(MoneyConstants.COLUMN_PRECISION, MoneyConstants.SCALE)
    )
