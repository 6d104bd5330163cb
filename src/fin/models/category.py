"""Category model for tagging transactions."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from fin.db.base import Base, TimestampMixin


class Category(Base, TimestampMixin):
    """Named tag shared by many transactions."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255))
