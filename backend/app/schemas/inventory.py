from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from backend.app.schemas.common import Money


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    barcode: str | None = Field(default=None, max_length=100)
    price: Money
    stock: int = 0
    category: str | None = None
    description: str | None = None

    @field_validator("price")
    @classmethod
    def price_non_negative(cls, v: Money) -> Money:
        if v < 0:
            raise ValueError("Price must be non-negative")
        return v

    @field_validator("stock")
    @classmethod
    def stock_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock must be non-negative")
        return v

    @field_validator("barcode")
    @classmethod
    def blank_barcode_is_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v


class ProductUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    barcode: str | None = Field(default=None, max_length=100)
    price: Money | None = None
    stock: int | None = None
    category: str | None = None
    description: str | None = None

    @field_validator("price")
    @classmethod
    def price_non_negative(cls, v: Money | None) -> Money | None:
        if v is not None and v < 0:
            raise ValueError("Price must be non-negative")
        return v

    @field_validator("stock")
    @classmethod
    def stock_non_negative(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError("Stock must be non-negative")
        return v

    @field_validator("barcode")
    @classmethod
    def blank_barcode_is_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v


class ProductOut(BaseModel):
    id: int
    name: str
    barcode: str | None
    price: Money
    stock: int
    category: str | None
    description: str | None
    created_at: datetime | None
    updated_at: datetime | None

    class Config:
        from_attributes = True


class ProductCreatedOut(BaseModel):
    id: int
    message: str = "Product created successfully"
