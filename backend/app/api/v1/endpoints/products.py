from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.api.deps import get_current_user, require_admin
from backend.app.core.database import get_db
from backend.app.models.inventory import Product
from backend.app.models.user import User
from backend.app.schemas.common import MessageOut
from backend.app.schemas.inventory import (
    ProductCreate,
    ProductCreatedOut,
    ProductOut,
    ProductUpdate,
)
from backend.app.services import inventory as inventory_service

router = APIRouter()


@router.get("", response_model=list[ProductOut])
def list_products(
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
) -> list[Product]:
    return inventory_service.list_products(db)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
) -> Product:
    return inventory_service.get_product(db, product_id)


@router.post("", response_model=ProductCreatedOut)
def create_product(
    payload: ProductCreate,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> dict:
    product = inventory_service.create_product(db, payload)
    return {"id": product.id}


@router.put("/{product_id}", response_model=MessageOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> dict[str, str]:
    inventory_service.update_product(db, product_id, payload)
    return {"message": "Product updated successfully"}


@router.delete("/{product_id}", response_model=MessageOut)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> dict[str, str]:
    inventory_service.delete_product(db, product_id)
    return {"message": "Product deleted successfully"}
