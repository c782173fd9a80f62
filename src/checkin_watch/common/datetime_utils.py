from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator
from zoneinfo import ZoneInfo


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_utc() -> datetime:
    """Current aware UTC time.

    Note: Wrapped so tests can inject a frozen clock.
    """
    return datetime.now(timezone.utc)


def to_local(moment: datetime, tz_name: str) -> datetime:
    """Convert a moment to the tenant's wall clock.

    Naive values are treated as UTC (that is how MySQL DATETIME columns are written).
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(ZoneInfo(tz_name))


def local_date(moment: datetime, tz_name: str) -> date:
    return to_local(moment, tz_name).date()


def day_of_week(day: date) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return day.isoweekday() % 7


def week_of_month(day: date) -> int:
    return (day.day + 6) // 7


def format_time_12h(value: time) -> str:
    period = "PM" if value.hour >= 12 else "AM"
    hour = value.hour % 12 or 12
    return f"{hour}:{value.minute:02d} {period}"


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every date in [start, end)."""
    day = start
    while day < end:
        yield day
        day += timedelta(days=1)
