"""Admin analytics and data export routes."""

from fastapi import APIRouter, Depends, Query

from storefront.api.deps import get_analytics
from storefront.core.auth import Identity, require_admin
from storefront.schemas.analytics import DashboardSnapshot, SalesReport
from storefront.services.analytics_service import AnalyticsReportBuilder

router = APIRouter()


@router.get("/analytics/dashboard", response_model=DashboardSnapshot)
async def dashboard(
    analytics: AnalyticsReportBuilder = Depends(get_analytics),
    _: Identity = Depends(require_admin),
):
    """Trailing 30-day summary, today's counters and all-time stock counts."""
    return await analytics.dashboard()


@router.get("/analytics/sales-report", response_model=SalesReport)
async def sales_report(
    period: int = Query(30, ge=0, le=3650, description="Look-back window in days"),
    analytics: AnalyticsReportBuilder = Depends(get_analytics),
    _: Identity = Depends(require_admin),
):
    return await analytics.sales_report(period)


@router.get("/export/{export_type}")
async def export_data(
    export_type: str,
    analytics: AnalyticsReportBuilder = Depends(get_analytics),
    _: Identity = Depends(require_admin),
):
    """Backup bundle: products, orders, blog, analytics or all."""
    return await analytics.export(export_type)
