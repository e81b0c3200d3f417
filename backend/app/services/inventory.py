"""Product catalogue maintenance (admin operations)."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.core.database import transaction
from backend.app.core.exceptions import ConflictError, NotFoundError
from backend.app.models.inventory import Product
from backend.app.models.sales import SaleItem
from backend.app.schemas.inventory import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


def list_products(db: Session) -> list[Product]:
    return db.query(Product).order_by(Product.name).all()


def get_product(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product


def _ensure_barcode_free(
    db: Session, barcode: str | None, exclude_id: int | None = None
) -> None:
    if not barcode:
        return
    query = db.query(Product.id).filter(Product.barcode == barcode)
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)
    if query.first():
        raise ConflictError("Barcode already exists")


def create_product(db: Session, payload: ProductCreate) -> Product:
    _ensure_barcode_free(db, payload.barcode)
    product = Product(
        name=payload.name,
        barcode=payload.barcode,
        price=payload.price,
        stock=payload.stock,
        category=payload.category,
        description=payload.description,
    )
    try:
        with transaction(db):
            db.add(product)
    except IntegrityError:
        # Lost a race with a concurrent insert of the same barcode
        raise ConflictError("Barcode already exists")
    db.refresh(product)
    logger.info("Created product %s (%s)", product.id, product.name)
    return product


def update_product(db: Session, product_id: int, payload: ProductUpdate) -> Product:
    product = get_product(db, product_id)
    update_data = payload.model_dump(exclude_unset=True)
    if "barcode" in update_data:
        _ensure_barcode_free(db, update_data["barcode"], exclude_id=product_id)
    # Columns declared NOT NULL keep their value when sent as null
    for field in ("name", "price", "stock"):
        if field in update_data and update_data[field] is None:
            del update_data[field]

    try:
        with transaction(db):
            for field, value in update_data.items():
                setattr(product, field, value)
    except IntegrityError:
        raise ConflictError("Barcode already exists")
    db.refresh(product)
    return product


def delete_product(db: Session, product_id: int) -> None:
    product = get_product(db, product_id)
    has_sales = (
        db.query(SaleItem.id).filter(SaleItem.product_id == product_id).first()
        is not None
    )
    if has_sales:
        raise ConflictError("Product has recorded sales and cannot be deleted")
    with transaction(db):
        db.delete(product)
    logger.info("Deleted product %s", product_id)
