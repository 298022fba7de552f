"""FastAPI dependency providers for the service layer.

Everything is built per request from the shared Redis pool and the clock;
tests override ``get_redis``, ``get_clock`` and ``get_identity_provider``.
"""

from fastapi import Depends
from redis.asyncio import Redis

from storefront.core.auth import get_identity_provider
from storefront.core.clock import Clock, get_clock
from storefront.core.config import get_settings
from storefront.db.kv_store import KeyValueStore
from storefront.db.redis import get_redis
from storefront.integrations.identity_provider import IdentityProvider
from storefront.services.account_service import AccountService
from storefront.services.analytics_service import AnalyticsReportBuilder
from storefront.services.event_tracker import EventTracker
from storefront.services.repositories import (
    BlogRepository,
    CategoryRepository,
    OrderRepository,
    ProductRepository,
)
from storefront.services.storage_service import StorageService


def get_store(redis: Redis = Depends(get_redis)) -> KeyValueStore:
    return KeyValueStore(redis, update_retries=get_settings().kv_update_retries)


def get_event_tracker(
    store: KeyValueStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> EventTracker:
    return EventTracker(store, clock=clock, stats_timezone=get_settings().stats_timezone)


def get_product_repository(
    store: KeyValueStore = Depends(get_store),
    tracker: EventTracker = Depends(get_event_tracker),
    clock: Clock = Depends(get_clock),
) -> ProductRepository:
    return ProductRepository(store, tracker, clock)


def get_blog_repository(
    store: KeyValueStore = Depends(get_store),
    tracker: EventTracker = Depends(get_event_tracker),
    clock: Clock = Depends(get_clock),
) -> BlogRepository:
    return BlogRepository(store, tracker, clock)


def get_order_repository(
    store: KeyValueStore = Depends(get_store),
    tracker: EventTracker = Depends(get_event_tracker),
    clock: Clock = Depends(get_clock),
) -> OrderRepository:
    return OrderRepository(store, tracker, clock)


def get_category_repository(store: KeyValueStore = Depends(get_store)) -> CategoryRepository:
    return CategoryRepository(store)


def get_analytics(
    store: KeyValueStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> AnalyticsReportBuilder:
    settings = get_settings()
    return AnalyticsReportBuilder(
        store,
        clock=clock,
        stats_timezone=settings.stats_timezone,
        window_days=settings.dashboard_window_days,
        export_days=settings.export_analytics_days,
        top_products_limit=settings.top_products_limit,
    )


def get_storage_service(clock: Clock = Depends(get_clock)) -> StorageService:
    return StorageService(clock=clock)


def get_account_service(
    provider: IdentityProvider = Depends(get_identity_provider),
    tracker: EventTracker = Depends(get_event_tracker),
) -> AccountService:
    return AccountService(provider, tracker)
