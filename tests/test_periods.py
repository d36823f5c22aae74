from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from config import get_settings
from periods import (
    InvalidRange,
    Period,
    ensure_ordered,
    local_today,
    parse_iso_date,
    resolve_period,
)

TODAY = date(2024, 3, 15)


def test_default_period_is_recent_days_ending_today() -> None:
    period = resolve_period(None, None, None, today=TODAY)
    assert period.slug == "recent"
    assert period.end == TODAY
    assert period.days == 30
    assert period.start == date(2024, 2, 15)


def test_calendar_periods() -> None:
    this_month = resolve_period("this_month", None, None, today=TODAY)
    assert (this_month.start, this_month.end) == (date(2024, 3, 1), date(2024, 3, 31))

    last_month = resolve_period("last_month", None, None, today=TODAY)
    assert (last_month.start, last_month.end) == (date(2024, 2, 1), date(2024, 2, 29))

    december = resolve_period("this_month", None, None, today=date(2023, 12, 5))
    assert december.end == date(2023, 12, 31)


def test_custom_period() -> None:
    period = resolve_period("custom", "2024-01-01", "2024-01-31", today=TODAY)
    assert period == Period("custom", date(2024, 1, 1), date(2024, 1, 31))


def test_custom_period_requires_both_bounds() -> None:
    with pytest.raises(ValueError):
        resolve_period("custom", "2024-01-01", None, today=TODAY)


def test_inverted_range_is_rejected() -> None:
    with pytest.raises(InvalidRange) as excinfo:
        resolve_period("custom", "2024-02-01", "2024-01-01", today=TODAY)
    assert excinfo.value.start == date(2024, 2, 1)
    assert isinstance(excinfo.value, ValueError)


def test_ensure_ordered_allows_open_bounds() -> None:
    ensure_ordered(None, date(2024, 1, 1))
    ensure_ordered(date(2024, 1, 1), None)
    ensure_ordered(date(2024, 1, 1), date(2024, 1, 1))
    with pytest.raises(InvalidRange):
        ensure_ordered(date(2024, 1, 2), date(2024, 1, 1))


def test_parse_iso_date() -> None:
    assert parse_iso_date(None) is None
    assert parse_iso_date("  ") is None
    assert parse_iso_date("2024-01-15") == date(2024, 1, 15)
    with pytest.raises(ValueError):
        parse_iso_date("not-a-date")


def test_local_today_follows_configured_timezone(monkeypatch) -> None:
    zone = "Pacific/Kiritimati"
    monkeypatch.setattr(get_settings(), "timezone", zone)

    before = datetime.now(ZoneInfo(zone)).date()
    today = local_today()
    after = datetime.now(ZoneInfo(zone)).date()

    assert today in {before, after}
