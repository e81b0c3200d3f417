from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from backend.app.api.deps import get_current_user
from backend.app.core.database import get_db
from backend.app.models.user import User
from backend.app.schemas.reports import (
    DashboardStatsOut,
    GroupBy,
    SalesReportRow,
    TopProductRow,
)
from backend.app.services.reports import (
    get_dashboard_stats,
    get_sales_report,
    get_top_products,
)

router = APIRouter()


@router.get("/stats", response_model=DashboardStatsOut)
def dashboard_stats(
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
) -> dict:
    return get_dashboard_stats(db)


@router.get("/reports/sales", response_model=list[SalesReportRow])
def sales_report(
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    group_by: GroupBy = Query(default=GroupBy.DAY, alias="groupBy"),
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
) -> list[dict]:
    return get_sales_report(db, start_date, end_date, group_by.value)


@router.get("/reports/products", response_model=list[TopProductRow])
def products_report(
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
) -> list[dict]:
    return get_top_products(db, start_date, end_date, limit=limit)
