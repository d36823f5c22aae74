from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from config import get_settings


class InvalidRange(ValueError):
    """Raised when a date range starts after it ends."""

    def __init__(self, start: date, end: date) -> None:
        super().__init__(
            f"Start date {start.isoformat()} must not be after end date {end.isoformat()}"
        )
        self.start = start
        self.end = end


@dataclass(frozen=True)
class Period:
    slug: str
    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidRange(self.start, self.end)

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1


def local_today() -> date:
    settings = get_settings()
    tz = ZoneInfo(settings.timezone)
    return datetime.now(tz).date()


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    if value is None or not value.strip():
        return None
    return date.fromisoformat(value.strip())


def ensure_ordered(start: Optional[date], end: Optional[date]) -> None:
    if start is not None and end is not None and start > end:
        raise InvalidRange(start, end)


def resolve_period(
    period: Optional[str],
    start: Optional[str],
    end: Optional[str],
    *,
    today: Optional[date] = None,
) -> Period:
    today = today or local_today()
    if period == "all":
        return Period("all", date(1970, 1, 1), today)
    if period == "last_month":
        first_this = today.replace(day=1)
        last_month_end = first_this - date.resolution
        last_month_start = last_month_end.replace(day=1)
        return Period("last_month", last_month_start, last_month_end)
    if period == "this_month":
        first = today.replace(day=1)
        if first.month == 12:
            next_month = first.replace(year=first.year + 1, month=1)
        else:
            next_month = first.replace(month=first.month + 1)
        return Period("this_month", first, next_month - date.resolution)
    if period == "custom":
        if not start or not end:
            raise ValueError("Custom period requires start and end dates")
        return Period("custom", date.fromisoformat(start), date.fromisoformat(end))

    days = get_settings().daily_series_days
    return Period("recent", today - timedelta(days=days - 1), today)
