"""AnalyticsReportBuilder: read-only dashboard, sales report and export.

Flow metrics (revenue, orders, views, signups) come from the DailyStat
rollups for a trailing window. Stock metrics (product count, pending and
completed orders) come from full prefix scans and are all-time.
"""

import math
from collections import Counter
from datetime import timedelta
from enum import Enum
from typing import Any

import structlog

from storefront.core.clock import Clock, business_date, isoformat_z, parse_instant, trailing_days, utc_now
from storefront.core.exceptions import ValidationError
from storefront.db.kv_store import KeyValueStore
from storefront.domain.events import DailyStat, daily_key
from storefront.schemas.analytics import DashboardSnapshot, DashboardSummary, ProductSales, SalesReport
from storefront.services.repositories import BLOG_POSTS, ORDERS, PRODUCTS, OrderStatus

logger = structlog.get_logger(__name__)

EXPORT_SCHEMA_VERSION = "1.0"


class ExportType(str, Enum):
    PRODUCTS = "products"
    ORDERS = "orders"
    BLOG = "blog"
    ANALYTICS = "analytics"
    ALL = "all"


def _number(value: Any) -> int | float:
    """Coerce a stored amount to a number; anything unusable or non-finite counts as 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return 0
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return 0
    if not math.isfinite(number):
        return 0
    return value if isinstance(value, int) else number


def _label(value: Any) -> str | None:
    return str(value) if value is not None else None


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0


class AnalyticsReportBuilder:
    def __init__(
        self,
        store: KeyValueStore,
        clock: Clock = utc_now,
        stats_timezone: str = "UTC",
        window_days: int = 30,
        export_days: int = 90,
        top_products_limit: int = 10,
    ):
        self.store = store
        self.clock = clock
        self.stats_timezone = stats_timezone
        self.window_days = window_days
        self.export_days = export_days
        self.top_products_limit = top_products_limit

    async def dashboard(self) -> DashboardSnapshot:
        today = business_date(self.clock(), self.stats_timezone)
        days = trailing_days(today, self.window_days)

        records = await self.store.mget([daily_key(day) for day in days])
        chart = [
            DailyStat.model_validate(record) if record is not None else DailyStat.empty(day)
            for day, record in zip(days, records)
        ]

        total_revenue = sum(stat.revenue for stat in chart)
        total_orders = sum(stat.orders for stat in chart)
        total_page_views = sum(stat.page_views for stat in chart)

        summary = DashboardSummary(
            total_revenue=total_revenue,
            total_orders=total_orders,
            total_page_views=total_page_views,
            total_product_views=sum(stat.product_views for stat in chart),
            total_signups=sum(stat.signups for stat in chart),
            average_order_value=_ratio(total_revenue, total_orders),
            conversion_rate=_ratio(total_orders, total_page_views) * 100,
        )

        today_record = await self.store.get(daily_key(today))
        today_stat = DailyStat.model_validate(today_record) if today_record is not None else DailyStat.empty(today)

        orders = await self.store.get_by_prefix(ORDERS.prefix)
        products = await self.store.get_by_prefix(PRODUCTS.prefix)
        statuses = Counter(order.get("status") for order in orders)

        return DashboardSnapshot(
            summary=summary,
            today=today_stat,
            chart_data=chart,
            product_count=len(products),
            pending_orders=statuses[OrderStatus.PENDING.value],
            completed_orders=statuses[OrderStatus.COMPLETED.value],
        )

    async def sales_report(self, period_days: int = 30) -> SalesReport:
        if period_days < 0:
            raise ValidationError("period must not be negative")

        cutoff = self.clock() - timedelta(days=period_days)
        in_period = []
        for order in await self.store.get_by_prefix(ORDERS.prefix):
            created_at = parse_instant(order.get("createdAt"))
            if created_at is not None and created_at >= cutoff:
                in_period.append((created_at, order))

        in_period.sort(key=lambda pair: pair[0], reverse=True)
        orders = [order for _, order in in_period]

        total_sales = sum(_number(order.get("total")) for order in orders)
        by_status = Counter(order.get("status") or OrderStatus.PENDING.value for order in orders)

        product_sales: dict[str, dict] = {}
        for order in orders:
            items = order.get("items")
            if not isinstance(items, list):
                continue
            for item in items:
                if not isinstance(item, dict) or item.get("id") is None:
                    continue
                product_id = str(item["id"])
                quantity = int(_number(item.get("quantity"))) or 1
                entry = product_sales.setdefault(
                    product_id,
                    {"id": product_id, "name": _label(item.get("name")), "quantity": 0, "revenue": 0},
                )
                entry["quantity"] += quantity
                entry["revenue"] += _number(item.get("price")) * quantity

        top_products = sorted(product_sales.values(), key=lambda entry: entry["revenue"], reverse=True)

        return SalesReport(
            period=f"Last {period_days} days",
            period_days=period_days,
            total_orders=len(orders),
            total_sales=total_sales,
            average_order_value=_ratio(total_sales, len(orders)),
            by_status=dict(by_status),
            top_products=[ProductSales(**entry) for entry in top_products[: self.top_products_limit]],
            orders=orders,
        )

    async def export(self, resource_type: str) -> dict[str, Any]:
        """Snapshot of the requested collections for backup."""
        try:
            export_type = ExportType(resource_type)
        except ValueError:
            allowed = ", ".join(t.value for t in ExportType)
            raise ValidationError(f"Unknown export type: {resource_type} (expected one of {allowed})") from None

        wanted = set(ExportType) if export_type is ExportType.ALL else {export_type}
        bundle: dict[str, Any] = {}

        if ExportType.PRODUCTS in wanted:
            bundle["products"] = await self.store.get_by_prefix(PRODUCTS.prefix)
        if ExportType.ORDERS in wanted:
            bundle["orders"] = await self.store.get_by_prefix(ORDERS.prefix)
        if ExportType.BLOG in wanted:
            bundle["blog"] = await self.store.get_by_prefix(BLOG_POSTS.prefix)
        if ExportType.ANALYTICS in wanted:
            now = self.clock()
            days = trailing_days(business_date(now, self.stats_timezone), self.export_days + 1)
            records = await self.store.mget([daily_key(day) for day in days])
            bundle["analytics"] = [record for record in records if record is not None]

        bundle["exportedAt"] = isoformat_z(self.clock())
        bundle["version"] = EXPORT_SCHEMA_VERSION

        logger.info("data_exported", export_type=export_type.value)
        return bundle
