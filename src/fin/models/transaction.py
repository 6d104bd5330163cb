"""Transaction model and its many-to-many link to categories."""

import enum
from decimal import Decimal

from sqlalchemy import Column, Enum, ForeignKey, Numeric, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fin.core.constants import MoneyConstants, TransactionConstants
from fin.db.base import Base, TimestampMixin


class TransactionType(str, enum.Enum):
    """Direction of a transaction relative to its account."""

    INCOME = TransactionConstants.INCOME
    EXPENSE = TransactionConstants.EXPENSE


# Join rows die with their transaction; a referenced category cannot be deleted
transactions_categories = Table(
    "transactions_categories",
    Base.metadata,
    Column(
        "transaction_id",
        ForeignKey("transactions.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "category_id",
        ForeignKey("categories.id", ondelete="RESTRICT"),
        primary_key=True,
        index=True,
    ),
)


class Transaction(Base, TimestampMixin):
    """Income or expense booked against one account."""

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"), index=True)
    description: Mapped[str] = mapped_column(String(255), default="")
    value: Mapped[Decimal] = mapped_column(
        Numeric(MoneyConstants.COLUMN_PRECISION, MoneyConstants.SCALE)
    )
    type: Mapped[TransactionType] = mapped_column(Enum(TransactionType, name="transaction_type"))

    # Join rows are written with explicit statements (full replace on update),
    # so the collection is read-only and must be eager-loaded
    categories: Mapped[list["Category"]] = relationship(
        "Category",
        secondary=transactions_categories,
        order_by="Category.id",
        viewonly=True,
        lazy="raise",
    )
