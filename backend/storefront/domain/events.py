"""Business events and the per-day aggregate they fold into."""

import math
from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

EVENT_KEY_PREFIX = "analytics:events:"
DAILY_KEY_PREFIX = "analytics:daily:"
META_KEY = "analytics:meta"


class EventType(str, Enum):
    """Discrete business occurrences recorded in the append-only event log."""

    PAGE_VIEW = "page_view"
    PRODUCT_VIEW = "product_view"
    ORDER_CREATED = "order_created"
    ORDER_UPDATED = "order_updated"
    USER_SIGNUP = "user_signup"
    PRODUCT_CREATED = "product_created"
    PRODUCT_DELETED = "product_deleted"
    BLOG_CREATED = "blog_created"
    BLOG_DELETED = "blog_deleted"
    BLOG_VIEW = "blog_view"


# Event types that move a DailyStat counter; everything else is log-only.
COUNTED_EVENTS = frozenset({
    EventType.PAGE_VIEW,
    EventType.PRODUCT_VIEW,
    EventType.ORDER_CREATED,
    EventType.USER_SIGNUP,
})


class Event(BaseModel):
    """Immutable event record."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: EventType
    payload: dict[str, Any] = Field(default_factory=dict)
    timestamp: str


class DailyStat(BaseModel):
    """Aggregate counters for one calendar day. Counters only ever grow."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date: str
    page_views: int = Field(default=0, ge=0)
    product_views: int = Field(default=0, ge=0)
    orders: int = Field(default=0, ge=0)
    revenue: float = Field(default=0, ge=0)
    signups: int = Field(default=0, ge=0)

    @classmethod
    def empty(cls, day: date | str) -> "DailyStat":
        return cls(date=day if isinstance(day, str) else day.isoformat())

    def folded(self, event_type: EventType, payload: dict[str, Any]) -> "DailyStat":
        """Return a copy with the counter for ``event_type`` incremented."""
        if event_type == EventType.PAGE_VIEW:
            return self.model_copy(update={"page_views": self.page_views + 1})
        if event_type == EventType.PRODUCT_VIEW:
            return self.model_copy(update={"product_views": self.product_views + 1})
        if event_type == EventType.ORDER_CREATED:
            return self.model_copy(update={
                "orders": self.orders + 1,
                "revenue": self.revenue + order_amount(payload),
            })
        if event_type == EventType.USER_SIGNUP:
            return self.model_copy(update={"signups": self.signups + 1})
        return self

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def daily_key(day: date | str) -> str:
    return f"{DAILY_KEY_PREFIX}{day if isinstance(day, str) else day.isoformat()}"


def order_amount(payload: dict[str, Any]) -> float:
    """Revenue contribution of an order_created payload (0 when absent or invalid)."""
    amount = payload.get("amount")
    if isinstance(amount, bool) or not isinstance(amount, (int, float, str)):
        return 0
    try:
        value = float(amount)
    except (ValueError, OverflowError):
        return 0
    return value if math.isfinite(value) and value > 0 else 0
