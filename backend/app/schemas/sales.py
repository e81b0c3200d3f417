from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from backend.app.schemas.common import CamelModel, Money


class CartLine(CamelModel):
    product_id: int
    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Quantity must be greater than zero")
        return v


class SaleRequest(CamelModel):
    items: list[CartLine] = []
    payment_method: str = Field(default="cash", min_length=1, max_length=20)

    @field_validator("items")
    @classmethod
    def at_least_one_item(cls, v: list[CartLine]) -> list[CartLine]:
        if not v:
            raise ValueError("Items are required")
        return v


class SaleCreatedOut(CamelModel):
    message: str = "Sale completed successfully"
    transaction_id: str
    sale_id: int
    total_amount: Money


class QuoteLineOut(CamelModel):
    product_id: int
    name: str
    quantity: int
    unit_price: Money
    line_total: Money


class CartQuoteOut(CamelModel):
    items: list[QuoteLineOut]
    subtotal: Money
    tax_rate: Money
    tax: Money
    total: Money


# ─── History (row-shaped, column names as keys) ──────────────────────────────


class SaleOut(BaseModel):
    id: int
    transaction_id: str
    cashier_id: int
    cashier_name: str | None
    total_amount: Money
    payment_method: str
    created_at: datetime | None


class SaleItemOut(BaseModel):
    id: int
    sale_id: int
    product_id: int
    product_name: str | None
    barcode: str | None
    quantity: int
    unit_price: Money
    total_price: Money


class SaleDetailOut(SaleOut):
    items: list[SaleItemOut]
