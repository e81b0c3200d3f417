from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.core.database import Base


class Sale(Base):
    """One committed POS transaction.

    ``total_amount`` is written once, after every line item has been priced.
    """

    __tablename__ = "sales"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    transaction_id: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    cashier_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2), nullable=False, default=Decimal("0")
    )
    payment_method: Mapped[str] = mapped_column(
        String(20), nullable=False, default="cash", server_default="cash"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    cashier: Mapped["User"] = relationship(back_populates="sales")  # noqa: F821
    items: Mapped[list[SaleItem]] = relationship(
        back_populates="sale", order_by="SaleItem.id"
    )

    __table_args__ = (
        Index("ix_sales_cashier", "cashier_id"),
        Index("ix_sales_created_at", "created_at"),
    )


class SaleItem(Base):
    """A line of a sale. ``unit_price`` is a snapshot of the product price."""

    __tablename__ = "sale_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sale_id: Mapped[int] = mapped_column(ForeignKey("sales.id"), nullable=False)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2), nullable=False
    )
    total_price: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2), nullable=False
    )

    sale: Mapped[Sale] = relationship(back_populates="items")
    product: Mapped["Product"] = relationship()  # noqa: F821

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_sale_item_quantity_positive"),
        Index("ix_sale_items_sale", "sale_id"),
        Index("ix_sale_items_product", "product_id"),
    )
