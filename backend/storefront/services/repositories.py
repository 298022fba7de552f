"""CRUD repositories over the key-value store.

Products, blog posts and orders share one pattern: documents live under a
type prefix, mutations are validated and sanitized before writing, and every
write is mirrored into the event log. Event recording is best-effort and
happens after the write, so it can never undo it.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

import structlog

from storefront.core.clock import Clock, epoch_millis, isoformat_z, utc_now
from storefront.core.exceptions import NotFoundError, UpstreamError, ValidationError
from storefront.db.kv_store import KeyValueStore
from storefront.domain.events import EventType
from storefront.domain.sanitize import (
    reject_non_finite,
    require_fields,
    require_line_items,
    require_numbers,
    sanitize,
    sanitize_fields,
)
from storefront.services.event_tracker import EventTracker

logger = structlog.get_logger(__name__)

# Attempts at reserving a generated id before giving up
_MAX_ID_ATTEMPTS = 50


class OrderStatus(str, Enum):
    """Order statuses. Any status may be set from any other."""

    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


@dataclass(frozen=True)
class ResourceKind:
    """Static description of one resource type."""

    label: str
    prefix: str
    required_fields: tuple[str, ...]
    sanitized_fields: tuple[str, ...]
    key_factory: Callable[[dict[str, Any], int | str], str]
    event_id_field: str
    event_label_field: str | None = None
    created_event: EventType | None = None
    deleted_event: EventType | None = None
    view_event: EventType | None = None
    view_label_key: str | None = None
    numeric_fields: tuple[str, ...] = ()
    defaults: dict[str, Any] = field(default_factory=dict)


PRODUCTS = ResourceKind(
    label="Product",
    prefix="products:",
    required_fields=("name", "price", "category", "store"),
    sanitized_fields=("name", "description"),
    key_factory=lambda data, suffix: f"products:{data['store']}:{suffix}",
    event_id_field="productId",
    event_label_field="name",
    created_event=EventType.PRODUCT_CREATED,
    deleted_event=EventType.PRODUCT_DELETED,
    view_event=EventType.PRODUCT_VIEW,
    view_label_key="productName",
    numeric_fields=("price",),
)

BLOG_POSTS = ResourceKind(
    label="Post",
    prefix="blog:",
    required_fields=("title", "content", "category"),
    sanitized_fields=("title", "excerpt"),
    key_factory=lambda data, suffix: f"blog:{suffix}",
    event_id_field="postId",
    event_label_field="title",
    created_event=EventType.BLOG_CREATED,
    deleted_event=EventType.BLOG_DELETED,
    view_event=EventType.BLOG_VIEW,
    view_label_key="title",
    defaults={"likes": 0, "comments": 0},
)

ORDERS = ResourceKind(
    label="Order",
    prefix="orders:",
    required_fields=("customerName", "phone", "total"),
    sanitized_fields=("customerName", "notes"),
    key_factory=lambda data, suffix: f"orders:{suffix}",
    event_id_field="orderId",
    numeric_fields=("total", "deliveryFee"),
)


class ResourceRepository:
    """Prefix-namespaced CRUD for one resource kind."""

    def __init__(
        self,
        kind: ResourceKind,
        store: KeyValueStore,
        tracker: EventTracker,
        clock: Clock = utc_now,
    ):
        self.kind = kind
        self.store = store
        self.tracker = tracker
        self.clock = clock

    def key_for(self, resource_id: str) -> str:
        """Accept both full keys (``blog:17``) and bare ids (``17``)."""
        if resource_id.startswith(self.kind.prefix):
            return resource_id
        return f"{self.kind.prefix}{resource_id}"

    def _key_for_supplied_id(self, record: dict[str, Any], resource_id: str) -> str:
        # Bare ids get the same scoping as generated ones (products land under their store)
        if resource_id.startswith(self.kind.prefix):
            return resource_id
        return self.kind.key_factory(record, resource_id)

    async def list(self, filter_prefix: str | None = None) -> list[dict]:
        return await self.store.get_by_prefix(filter_prefix or self.kind.prefix)

    async def get(self, resource_id: str) -> dict:
        record = await self.store.get(self.key_for(resource_id))
        if record is None:
            raise NotFoundError(f"{self.kind.label} not found")
        return record

    async def view(self, resource_id: str) -> dict:
        """Public read that also counts as a view."""
        record = await self.get(resource_id)
        if self.kind.view_event is not None:
            await self.tracker.record(self.kind.view_event, self._view_payload(record))
        return record

    async def upsert(self, data: dict[str, Any]) -> str:
        """Validate, sanitize and write ``data``; returns the record's key."""
        require_fields(data, self.kind.required_fields)
        require_numbers(data, self.kind.numeric_fields)
        reject_non_finite(data)
        record = sanitize_fields(data, self.kind.sanitized_fields)
        for name, default in self.kind.defaults.items():
            if not record.get(name):
                record[name] = default

        now = self.clock()
        record["updatedAt"] = isoformat_z(now)

        supplied_id = record.get("id")
        if supplied_id:
            key = self._key_for_supplied_id(record, str(supplied_id))
            record["id"] = key
            await self.store.set(key, record)
        else:
            key = await self._insert_with_generated_key(record, now)

        if self.kind.created_event is not None:
            payload = {self.kind.event_id_field: key}
            if self.kind.event_label_field:
                payload[self.kind.event_label_field] = record.get(self.kind.event_label_field)
            await self.tracker.record(self.kind.created_event, payload)

        logger.info("resource_saved", kind=self.kind.label.lower(), key=key)
        return key

    async def remove(self, resource_id: str) -> None:
        key = self.key_for(resource_id)
        await self.store.delete(key)
        if self.kind.deleted_event is not None:
            await self.tracker.record(self.kind.deleted_event, {self.kind.event_id_field: key})
        logger.info("resource_deleted", kind=self.kind.label.lower(), key=key)

    async def _insert_with_generated_key(self, record: dict[str, Any], now: datetime) -> str:
        """Write under a timestamp key, bumping the millisecond on collision."""
        millis = epoch_millis(now)
        for _ in range(_MAX_ID_ATTEMPTS):
            key = self.kind.key_factory(record, millis)
            if await self.store.add(key, {**record, "id": key}):
                record["id"] = key
                return key
            millis += 1
        raise UpstreamError(f"Could not allocate an id for {self.kind.label.lower()}")

    def _view_payload(self, record: dict) -> dict:
        payload = {self.kind.event_id_field: record.get("id")}
        if self.kind.view_label_key and self.kind.event_label_field:
            payload[self.kind.view_label_key] = record.get(self.kind.event_label_field)
        return payload


class ProductRepository(ResourceRepository):
    def __init__(self, store: KeyValueStore, tracker: EventTracker, clock: Clock = utc_now):
        super().__init__(PRODUCTS, store, tracker, clock)

    async def list_for_store(self, store_name: str | None = None) -> list[dict]:
        prefix = f"{PRODUCTS.prefix}{store_name}:" if store_name else None
        return await self.list(prefix)


class BlogRepository(ResourceRepository):
    def __init__(self, store: KeyValueStore, tracker: EventTracker, clock: Clock = utc_now):
        super().__init__(BLOG_POSTS, store, tracker, clock)


class OrderRepository(ResourceRepository):
    """Orders are created publicly, status-updated by admins and never deleted."""

    def __init__(self, store: KeyValueStore, tracker: EventTracker, clock: Clock = utc_now):
        super().__init__(ORDERS, store, tracker, clock)

    async def create(self, data: dict[str, Any]) -> dict:
        """Place a new order; returns the stored record."""
        require_fields(data, ORDERS.required_fields)
        require_numbers(data, ORDERS.numeric_fields)
        require_line_items(data.get("items"))
        reject_non_finite(data)
        record = sanitize_fields(data, ORDERS.sanitized_fields)
        record.pop("id", None)

        now = self.clock()
        record["status"] = OrderStatus.PENDING.value
        record["createdAt"] = isoformat_z(now)

        key = await self._insert_with_generated_key(record, now)

        items = record.get("items")
        await self.tracker.record(
            EventType.ORDER_CREATED,
            {
                "orderId": key,
                "amount": record.get("total"),
                "items": len(items) if isinstance(items, list) else 0,
            },
        )
        logger.info("order_created", order_id=key)
        return record

    async def patch(self, order_id: str, updates: dict[str, Any]) -> dict:
        """Merge ``updates`` into an existing order; returns the merged record."""
        status = updates.get("status")
        if status is not None and (not isinstance(status, str) or status not in {s.value for s in OrderStatus}):
            raise ValidationError(f"Invalid order status: {status!r}")
        require_numbers(updates, ORDERS.numeric_fields)
        if "items" in updates:
            require_line_items(updates["items"])
        reject_non_finite(updates)

        changes = sanitize_fields(updates, ORDERS.sanitized_fields)
        changes.pop("id", None)
        stamped_at = isoformat_z(self.clock())

        def merge(order: dict | None) -> dict:
            if order is None:
                raise NotFoundError("Order not found")
            return {**order, **changes, "updatedAt": stamped_at}

        key = self.key_for(order_id)
        merged = await self.store.update(key, merge)

        await self.tracker.record(EventType.ORDER_UPDATED, {"orderId": key, "status": status})
        logger.info("order_updated", order_id=key, status=status)
        return merged

    async def upsert(self, data: dict[str, Any]) -> str:
        record = await self.create(data)
        return record["id"]

    async def remove(self, resource_id: str) -> None:
        raise ValidationError("Orders cannot be deleted")


class CategoryRepository:
    """Per-store category list, replaced wholesale by admins."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    @staticmethod
    def key_for(store_name: str) -> str:
        return f"categories:{store_name}"

    async def get(self, store_name: str) -> list:
        return await self.store.get(self.key_for(store_name)) or []

    async def replace(self, store_name: str, categories: Any) -> list:
        if not isinstance(categories, list):
            raise ValidationError("categories must be a list")
        reject_non_finite(categories, "categories")
        cleaned = [sanitize(c) if isinstance(c, str) else c for c in categories]
        await self.store.set(self.key_for(store_name), cleaned)
        logger.info("categories_replaced", store=store_name, count=len(cleaned))
        return cleaned
