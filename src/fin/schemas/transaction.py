"""Transaction schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from fin.models.transaction import TransactionType
from fin.schemas.category import CategoryResponse


class CategoryRef(BaseModel):
    """Reference to an existing category by id."""

    id: int


class TransactionCreate(BaseModel):
    """Schema for creating a transaction.

    ``type`` is a plain string and everything defaults to empty so the
    ledger validator can apply its ordered checks.
    """

    description: str = ""
    value: Decimal = Decimal("0")
    type: str = ""
    categories: list[CategoryRef] = Field(default_factory=list)


class TransactionUpdate(BaseModel):
    """Schema for updating a transaction; omitted fields keep stored values."""

    description: str | None = None
    value: Decimal | None = None
    type: str | None = None
    categories: list[CategoryRef] | None = None


class TransactionResponse(BaseModel):
    """Schema for transaction response with resolved categories."""

    id: int
    account_id: int
    description: str
    value: Decimal
    type: TransactionType
    categories: list[CategoryResponse]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
