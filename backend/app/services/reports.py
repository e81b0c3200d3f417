"""Read-only aggregations over sales and products for the dashboard."""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from sqlalchemy import desc, func, literal_column
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from backend.app.core.config import settings
from backend.app.core.exceptions import InternalError, ValidationError
from backend.app.models.inventory import Product
from backend.app.models.sales import Sale, SaleItem
from backend.app.models.user import User
from backend.app.schemas.inventory import ProductOut

RECENT_SALES_LIMIT = 10

# Period label formats per dialect: day YYYY-MM-DD, week YYYY-WW, month YYYY-MM
_PERIOD_FORMATS: dict[str, dict[str, str]] = {
    "postgresql": {"day": "YYYY-MM-DD", "week": "IYYY-IW", "month": "YYYY-MM"},
    "mysql": {"day": "%Y-%m-%d", "week": "%x-%v", "month": "%Y-%m"},
    "sqlite": {"day": "%Y-%m-%d", "week": "%Y-%W", "month": "%Y-%m"},
}


# ── Helpers ──────────────────────────────────────────────────────────────────


def _to_dt(d: date) -> datetime:
    """Convert a date to start-of-day UTC datetime."""
    return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)


def day_range(
    start_date: date | None, end_date: date | None
) -> tuple[datetime | None, datetime | None]:
    """Half-open datetime bounds covering both dates inclusively."""
    start_dt = _to_dt(start_date) if start_date else None
    end_dt = _to_dt(end_date + timedelta(days=1)) if end_date else None
    return start_dt, end_dt


def _period_expr(db: Session, group_by: str) -> ColumnElement[str]:
    dialect = db.get_bind().dialect.name
    formats = _PERIOD_FORMATS.get(dialect)
    if formats is None:
        raise InternalError(f"Period grouping not supported on {dialect}")
    # Formats come from the fixed table above, never from the request
    fmt = literal_column(f"'{formats[group_by]}'")
    if dialect == "sqlite":
        return func.strftime(fmt, Sale.created_at)
    if dialect == "mysql":
        return func.date_format(Sale.created_at, fmt)
    return func.to_char(Sale.created_at, fmt)


def _totals(db: Session, start_dt: datetime, end_dt: datetime) -> dict[str, object]:
    row = (
        db.query(
            func.count(Sale.id).label("transactions"),
            func.coalesce(func.sum(Sale.total_amount), 0).label("revenue"),
        )
        .filter(Sale.created_at >= start_dt, Sale.created_at < end_dt)
        .one()
    )
    return {"transactions": row.transactions, "revenue": row.revenue}


# ── Dashboard ────────────────────────────────────────────────────────────────


def list_low_stock(db: Session, threshold: int | None = None) -> list[Product]:
    limit = settings.LOW_STOCK_THRESHOLD if threshold is None else threshold
    return (
        db.query(Product)
        .filter(Product.stock <= limit)
        .order_by(Product.stock.asc(), Product.name)
        .all()
    )


def get_dashboard_stats(db: Session, today: date | None = None) -> dict[str, object]:
    today = today or datetime.now(timezone.utc).date()
    month_start = today.replace(day=1)
    next_month = (month_start + timedelta(days=32)).replace(day=1)

    recent = (
        db.query(Sale, User.username)
        .outerjoin(User, Sale.cashier_id == User.id)
        .order_by(desc(Sale.created_at), desc(Sale.id))
        .limit(RECENT_SALES_LIMIT)
        .all()
    )

    return {
        "today_sales": _totals(db, *day_range(today, today)),
        "month_sales": _totals(db, _to_dt(month_start), _to_dt(next_month)),
        "total_products": db.query(func.count(Product.id)).scalar() or 0,
        "low_stock_products": [
            ProductOut.model_validate(p) for p in list_low_stock(db)
        ],
        "recent_sales": [
            {
                "id": sale.id,
                "transaction_id": sale.transaction_id,
                "cashier_id": sale.cashier_id,
                "cashier_name": username,
                "total_amount": sale.total_amount,
                "payment_method": sale.payment_method,
                "created_at": sale.created_at,
            }
            for sale, username in recent
        ],
    }


# ── Reports ──────────────────────────────────────────────────────────────────


def get_sales_report(
    db: Session,
    start_date: date | None,
    end_date: date | None,
    group_by: str = "day",
) -> list[dict[str, object]]:
    """Transactions and revenue per day, week or month, oldest period first."""
    if not start_date or not end_date:
        raise ValidationError("Start date and end date are required")
    if start_date > end_date:
        raise ValidationError("Start date must not be after end date")

    start_dt, end_dt = day_range(start_date, end_date)
    period = _period_expr(db, group_by)
    rows = (
        db.query(
            period.label("period"),
            func.count(Sale.id).label("transactions"),
            func.coalesce(func.sum(Sale.total_amount), 0).label("revenue"),
        )
        .filter(Sale.created_at >= start_dt, Sale.created_at < end_dt)
        .group_by(period)
        .order_by(period)
        .all()
    )
    return [
        {"period": r.period, "transactions": r.transactions, "revenue": r.revenue}
        for r in rows
    ]


def get_top_products(
    db: Session,
    start_date: date | None = None,
    end_date: date | None = None,
    limit: int = 10,
) -> list[dict[str, object]]:
    """Best sellers by units sold; the date range applies only when both ends are given."""
    total_sold = func.sum(SaleItem.quantity).label("total_sold")
    query = (
        db.query(
            Product.id,
            Product.name,
            Product.price,
            total_sold,
            func.sum(SaleItem.total_price).label("total_revenue"),
        )
        .join(SaleItem, SaleItem.product_id == Product.id)
        .join(Sale, SaleItem.sale_id == Sale.id)
    )
    if start_date and end_date:
        start_dt, end_dt = day_range(start_date, end_date)
        query = query.filter(Sale.created_at >= start_dt, Sale.created_at < end_dt)

    rows = (
        query.group_by(Product.id, Product.name, Product.price)
        .order_by(desc(total_sold), Product.id)
        .limit(limit)
        .all()
    )
    return [
        {
            "id": r.id,
            "name": r.name,
            "price": r.price,
            "total_sold": r.total_sold,
            "total_revenue": r.total_revenue,
        }
        for r in rows
    ]
