"""EventTracker: append-only event log plus per-day aggregate counters."""

import secrets
from datetime import date
from typing import Any

import structlog

from storefront.core.clock import Clock, business_date, epoch_millis, isoformat_z, utc_now
from storefront.db.kv_store import KeyValueStore
from storefront.domain.events import (
    COUNTED_EVENTS,
    EVENT_KEY_PREFIX,
    META_KEY,
    DailyStat,
    Event,
    EventType,
    daily_key,
)

logger = structlog.get_logger(__name__)

ANALYTICS_SCHEMA_VERSION = "1.0"


class EventTracker:
    """Records business events and folds them into the day's DailyStat.

    Best-effort: ``record`` never raises. Analytics must not block or roll
    back the business write that triggered it.
    """

    def __init__(self, store: KeyValueStore, clock: Clock = utc_now, stats_timezone: str = "UTC"):
        self.store = store
        self.clock = clock
        self.stats_timezone = stats_timezone

    def today(self) -> date:
        return business_date(self.clock(), self.stats_timezone)

    async def record(self, event_type: EventType | str, payload: dict[str, Any] | None = None) -> None:
        try:
            await self._record(EventType(event_type), payload or {})
        except Exception as e:
            logger.warning(
                "event_tracking_failed",
                event_type=str(getattr(event_type, "value", event_type)),
                error=str(e),
                error_type=type(e).__name__,
            )

    async def _record(self, event_type: EventType, payload: dict[str, Any]) -> None:
        now = self.clock()
        event_id = f"{EVENT_KEY_PREFIX}{epoch_millis(now)}:{secrets.token_hex(4)}"
        event = Event(id=event_id, type=event_type, payload=payload, timestamp=isoformat_z(now))
        await self.store.set(event_id, event.model_dump(mode="json"))

        if event_type not in COUNTED_EVENTS:
            return

        day = business_date(now, self.stats_timezone)

        def fold(current: dict) -> dict:
            stat = DailyStat.model_validate(current)
            return stat.folded(event_type, payload).to_record()

        await self.store.update(
            daily_key(day),
            fold,
            default=lambda: DailyStat.empty(day).to_record(),
        )
        logger.debug("event_recorded", event_type=event_type.value, day=day.isoformat())

    async def get_daily_stat(self, day: date) -> DailyStat | None:
        record = await self.store.get(daily_key(day))
        return DailyStat.model_validate(record) if record is not None else None

    async def ensure_meta(self) -> None:
        """Stamp analytics metadata once; later calls leave it untouched."""
        await self.store.add(
            META_KEY,
            {"initialized": isoformat_z(self.clock()), "version": ANALYTICS_SCHEMA_VERSION},
        )
