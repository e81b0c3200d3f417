"""Sale processing and sale history.

``process_sale`` is the only place stock is decremented. The whole sale runs
inside one ``transaction()`` block, so a failure on any line leaves no sale
header, no line items and no stock change behind.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Sequence
from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import desc, func, select, update
from sqlalchemy.orm import Session

from backend.app.core.config import settings
from backend.app.core.database import transaction
from backend.app.core.exceptions import (
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from backend.app.models.inventory import Product
from backend.app.models.sales import Sale, SaleItem
from backend.app.models.user import User
from backend.app.schemas.sales import CartLine
from backend.app.services.reports import day_range

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def generate_transaction_id(now: datetime | None = None) -> str:
    """``TXN`` + epoch milliseconds + random suffix.

    The timestamp alone repeats for sales issued in the same millisecond; the
    suffix makes a clash negligible and the unique column rejects the rest.
    """
    now = now or datetime.now(timezone.utc)
    return f"TXN{int(now.timestamp() * 1000)}{secrets.token_hex(4).upper()}"


def _load_products(
    db: Session, product_ids: Sequence[int], lock: bool = False
) -> dict[int, Product]:
    stmt = (
        select(Product)
        .where(Product.id.in_(sorted(set(product_ids))))
        .order_by(Product.id)
        .execution_options(populate_existing=True)
    )
    if lock:
        # Ascending id order keeps concurrent carts from deadlocking
        stmt = stmt.with_for_update()
    return {p.id: p for p in db.execute(stmt).scalars()}


def _price_cart(products: dict[int, Product], items: Sequence[CartLine]) -> list[dict]:
    """Check every line in cart order and snapshot prices.

    Stock is tracked per product across lines so a product listed twice is
    checked against what the earlier lines leave behind.
    """
    remaining = {pid: p.stock for pid, p in products.items()}
    lines: list[dict] = []
    for item in items:
        product = products.get(item.product_id)
        if product is None:
            raise NotFoundError(f"Product with ID {item.product_id} not found")

        available = remaining[product.id]
        if available < item.quantity:
            raise InsufficientStockError(
                product_id=product.id,
                product_name=product.name,
                available=available,
                required=item.quantity,
            )
        remaining[product.id] = available - item.quantity

        unit_price = Decimal(str(product.price)).quantize(CENT, rounding=ROUND_HALF_UP)
        lines.append({
            "product": product,
            "quantity": item.quantity,
            "unit_price": unit_price,
            "line_total": (unit_price * item.quantity).quantize(CENT, rounding=ROUND_HALF_UP),
        })
    return lines


def _decrement_stock(db: Session, product: Product, quantity: int) -> None:
    """Compare-and-set decrement; fails instead of going below zero."""
    result = db.execute(
        update(Product)
        .where(Product.id == product.id, Product.stock >= quantity)
        .values(stock=Product.stock - quantity, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        available = db.scalar(select(Product.stock).where(Product.id == product.id))
        raise InsufficientStockError(
            product_id=product.id,
            product_name=product.name,
            available=available or 0,
            required=quantity,
        )


def process_sale(
    db: Session,
    items: Sequence[CartLine],
    cashier_id: int,
    payment_method: str = "cash",
) -> dict:
    """Commit a sale for *items* or raise with nothing persisted.

    Returns ``transaction_id``, ``sale_id`` and ``total_amount``.
    """
    if not items:
        raise ValidationError("Items are required")
    if db.get(User, cashier_id) is None:
        raise NotFoundError(f"Cashier {cashier_id} not found")

    transaction_id = generate_transaction_id()
    try:
        with transaction(db):
            products = _load_products(db, [i.product_id for i in items], lock=True)
            lines = _price_cart(products, items)

            sale = Sale(
                transaction_id=transaction_id,
                cashier_id=cashier_id,
                total_amount=ZERO,
                payment_method=payment_method,
            )
            db.add(sale)
            db.flush()

            total_amount = ZERO
            for line in lines:
                product: Product = line["product"]
                total_amount += line["line_total"]
                db.add(SaleItem(
                    sale_id=sale.id,
                    product_id=product.id,
                    quantity=line["quantity"],
                    unit_price=line["unit_price"],
                    total_price=line["line_total"],
                ))
                db.flush()
                _decrement_stock(db, product, line["quantity"])

            sale.total_amount = total_amount
            db.flush()
            sale_id = sale.id
    except (NotFoundError, InsufficientStockError) as exc:
        logger.warning("Sale rejected for cashier %s: %s", cashier_id, exc.message)
        raise

    logger.info(
        "Sale %s committed by cashier %s: %d line(s), total %s",
        transaction_id, cashier_id, len(lines), total_amount,
    )
    return {
        "transaction_id": transaction_id,
        "sale_id": sale_id,
        "total_amount": total_amount,
    }


def quote_cart(db: Session, items: Sequence[CartLine]) -> dict:
    """Price a cart at current prices without touching stock."""
    if not items:
        raise ValidationError("Items are required")
    products = _load_products(db, [i.product_id for i in items])
    lines = _price_cart(products, items)

    subtotal = sum((ln["line_total"] for ln in lines), ZERO)
    tax = (subtotal * settings.VAT_RATE).quantize(CENT, rounding=ROUND_HALF_UP)
    return {
        "items": [
            {
                "product_id": ln["product"].id,
                "name": ln["product"].name,
                "quantity": ln["quantity"],
                "unit_price": ln["unit_price"],
                "line_total": ln["line_total"],
            }
            for ln in lines
        ],
        "subtotal": subtotal,
        "tax_rate": settings.VAT_RATE,
        "tax": tax,
        "total": subtotal + tax,
    }


# ─── History ─────────────────────────────────────────────────────────────────


def _sale_row(sale: Sale, cashier_name: str | None) -> dict:
    return {
        "id": sale.id,
        "transaction_id": sale.transaction_id,
        "cashier_id": sale.cashier_id,
        "cashier_name": cashier_name,
        "total_amount": sale.total_amount,
        "payment_method": sale.payment_method,
        "created_at": sale.created_at,
    }


def list_sales(
    db: Session,
    start_date: date | None = None,
    end_date: date | None = None,
    page: int = 1,
    limit: int = 20,
) -> list[dict]:
    """Sales newest first, with the cashier's username joined in."""
    query = (
        db.query(Sale, User.username)
        .outerjoin(User, Sale.cashier_id == User.id)
    )
    if start_date or end_date:
        start_dt, end_dt = day_range(start_date, end_date)
        if start_dt:
            query = query.filter(Sale.created_at >= start_dt)
        if end_dt:
            query = query.filter(Sale.created_at < end_dt)

    rows = (
        query.order_by(desc(Sale.created_at), desc(Sale.id))
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return [_sale_row(sale, username) for sale, username in rows]


def get_sale_detail(db: Session, sale_id: int) -> dict:
    row = (
        db.query(Sale, User.username)
        .outerjoin(User, Sale.cashier_id == User.id)
        .filter(Sale.id == sale_id)
        .first()
    )
    if row is None:
        raise NotFoundError("Sale not found")
    sale, username = row

    items = (
        db.query(SaleItem, Product.name, Product.barcode)
        .outerjoin(Product, SaleItem.product_id == Product.id)
        .filter(SaleItem.sale_id == sale.id)
        .order_by(SaleItem.id)
        .all()
    )
    detail = _sale_row(sale, username)
    detail["items"] = [
        {
            "id": item.id,
            "sale_id": item.sale_id,
            "product_id": item.product_id,
            "product_name": name,
            "barcode": barcode,
            "quantity": item.quantity,
            "unit_price": item.unit_price,
            "total_price": item.total_price,
        }
        for item, name, barcode in items
    ]
    return detail
