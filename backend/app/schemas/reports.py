from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from backend.app.schemas.common import CamelModel, Money
from backend.app.schemas.inventory import ProductOut
from backend.app.schemas.sales import SaleOut


class GroupBy(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class PeriodTotals(BaseModel):
    transactions: int
    revenue: Money


class DashboardStatsOut(CamelModel):
    today_sales: PeriodTotals
    month_sales: PeriodTotals
    total_products: int
    low_stock_products: list[ProductOut]
    recent_sales: list[SaleOut]


class SalesReportRow(BaseModel):
    period: str
    transactions: int
    revenue: Money


class TopProductRow(BaseModel):
    id: int
    name: str
    price: Money
    total_sold: int
    total_revenue: Money
