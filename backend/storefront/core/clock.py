"""Injectable time source and business-day truncation."""

from collections.abc import Callable
from datetime import UTC, date, datetime, timedelta, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


def fixed_clock(moment: datetime) -> Clock:
    """Clock that always returns ``moment`` (for deterministic tests)."""
    return lambda: moment


@lru_cache
def resolve_timezone(name: str) -> tzinfo:
    if name.upper() == "UTC":
        return UTC
    return ZoneInfo(name)


def business_date(now: datetime, tz_name: str = "UTC") -> date:
    """Calendar day of ``now`` in the statistics timezone."""
    return now.astimezone(resolve_timezone(tz_name)).date()


def trailing_days(today: date, count: int) -> list[date]:
    """``count`` consecutive days ending with ``today``, oldest first."""
    return [today - timedelta(days=offset) for offset in range(count - 1, -1, -1)]


def epoch_millis(now: datetime) -> int:
    return int(now.timestamp() * 1000)


def isoformat_z(now: datetime) -> str:
    """ISO-8601 instant in UTC with millisecond precision and a ``Z`` suffix."""
    return now.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_instant(value: object) -> datetime | None:
    """Parse an ISO-8601 instant; naive values are taken as UTC. None if unparseable."""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def get_clock() -> Clock:
    """FastAPI dependency; tests override it with a fixed clock."""
    return utc_now
