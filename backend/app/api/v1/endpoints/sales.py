from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from backend.app.api.deps import get_current_user
from backend.app.core.database import get_db
from backend.app.models.user import User
from backend.app.schemas.sales import (
    CartQuoteOut,
    SaleCreatedOut,
    SaleDetailOut,
    SaleOut,
    SaleRequest,
)
from backend.app.services.sales import (
    get_sale_detail,
    list_sales,
    process_sale,
    quote_cart,
)

router = APIRouter()


@router.post("", response_model=SaleCreatedOut)
def create_sale(
    payload: SaleRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    return process_sale(
        db,
        items=payload.items,
        cashier_id=current_user.id,
        payment_method=payload.payment_method,
    )


@router.post("/preview", response_model=CartQuoteOut)
def preview_sale(
    payload: SaleRequest,
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
) -> dict:
    return quote_cart(db, payload.items)


@router.get("", response_model=list[SaleOut])
def get_sales(
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
) -> list[dict]:
    return list_sales(db, start_date, end_date, page=page, limit=limit)


@router.get("/{sale_id}", response_model=SaleDetailOut)
def get_sale(
    sale_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
) -> dict:
    return get_sale_detail(db, sale_id)
