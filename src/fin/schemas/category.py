"""Category schemas."""

from datetime import datetime

from pydantic import BaseModel


class CategoryCreate(BaseModel):
    """Schema for creating a category.

    Emptiness is checked by the category service so the error carries the
    ledger's message instead of a framework 422.
    """

    name: str = ""


class CategoryUpdate(BaseModel):
    """Schema for renaming a category."""

    name: str | None = None


class CategoryResponse(BaseModel):
    """Schema for category response."""

    id: int
    name: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
