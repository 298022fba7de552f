"""Analytics response schemas (camelCase on the wire)."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from storefront.domain.events import DailyStat


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DashboardSummary(CamelModel):
    total_revenue: float
    total_orders: int
    total_page_views: int
    total_product_views: int
    total_signups: int
    average_order_value: float
    conversion_rate: float


class DashboardSnapshot(CamelModel):
    """30-day flow metrics alongside all-time stock counts."""

    summary: DashboardSummary
    today: DailyStat
    chart_data: list[DailyStat]
    product_count: int
    pending_orders: int
    completed_orders: int


class ProductSales(CamelModel):
    id: str
    name: str | None = None
    quantity: int
    revenue: float


class SalesReport(CamelModel):
    period: str
    period_days: int
    total_orders: int
    total_sales: float
    average_order_value: float
    by_status: dict[str, int]
    top_products: list[ProductSales]
    orders: list[dict[str, Any]]
