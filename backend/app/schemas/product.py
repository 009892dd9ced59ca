"""Pydantic schemas for Product API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ProductCreate(BaseModel):
    """Schema for creating a product."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    price: float = Field(..., gt=0)


class ProductUpdate(BaseModel):
    """Schema for a partial product update. Omitted fields are left alone."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    price: float | None = Field(None, gt=0)


class ProductResponse(BaseModel):
    """Schema for product response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None
    price: float
    created_at: datetime
    updated_at: datetime


class ProductEnvelope(BaseModel):
    """A single product, optionally with a status message."""

    message: str | None = None
    data: ProductResponse


class ProductListResponse(BaseModel):
    """Paginated product list."""

    data: list[ProductResponse]
    total: int
    page: int
    totalPages: int  # noqa: N815 - wire name kept camelCase for existing clients
