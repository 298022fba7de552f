"""Tests for clock helpers: business-day truncation and timestamp formats."""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from storefront.core.clock import (
    business_date,
    epoch_millis,
    fixed_clock,
    isoformat_z,
    parse_instant,
    trailing_days,
)

pytestmark = pytest.mark.unit


def test_fixed_clock_always_returns_same_moment():
    moment = datetime(2030, 6, 15, 10, 30, tzinfo=UTC)
    clock = fixed_clock(moment)

    assert clock() == moment
    assert clock() == moment


def test_business_date_in_utc():
    assert business_date(datetime(2030, 6, 15, 23, 59, tzinfo=UTC)) == date(2030, 6, 15)


def test_business_date_respects_configured_zone():
    # 22:30 UTC is already the next day in Nairobi (UTC+3)
    late = datetime(2030, 6, 15, 22, 30, tzinfo=UTC)

    assert business_date(late, "Africa/Nairobi") == date(2030, 6, 16)


def test_business_date_converts_offset_aware_input():
    eastern = timezone(timedelta(hours=-5))
    moment = datetime(2030, 6, 15, 21, 0, tzinfo=eastern)

    assert business_date(moment) == date(2030, 6, 16)


def test_trailing_days_oldest_first_and_ends_today():
    days = trailing_days(date(2030, 3, 2), 3)

    assert days == [date(2030, 2, 28), date(2030, 3, 1), date(2030, 3, 2)]


def test_trailing_days_thirty_day_window():
    days = trailing_days(date(2030, 6, 15), 30)

    assert len(days) == 30
    assert days[0] == date(2030, 5, 17)
    assert days[-1] == date(2030, 6, 15)


def test_isoformat_z_uses_milliseconds_and_z_suffix():
    moment = datetime(2030, 6, 15, 10, 30, 0, 123456, tzinfo=UTC)

    assert isoformat_z(moment) == "2030-06-15T10:30:00.123Z"


def test_epoch_millis():
    assert epoch_millis(datetime(1970, 1, 1, 0, 0, 1, tzinfo=UTC)) == 1000


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2030-06-15T10:30:00.000Z", datetime(2030, 6, 15, 10, 30, tzinfo=UTC)),
        ("2030-06-15T13:30:00+03:00", datetime(2030, 6, 15, 10, 30, tzinfo=UTC)),
        ("2030-06-15T10:30:00", datetime(2030, 6, 15, 10, 30, tzinfo=UTC)),
    ],
)
def test_parse_instant_accepts_iso_forms(raw, expected):
    assert parse_instant(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "yesterday", 1718000000])
def test_parse_instant_rejects_garbage(raw):
    assert parse_instant(raw) is None
