"""
Time helpers.

Timestamps are stored in UTC. "Today" for orders, reservations and opening
hours is the restaurant's local day, set by ``settings.restaurant_timezone``.
"""

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from ordo_shared.config.settings import settings


def restaurant_tz() -> ZoneInfo:
    return ZoneInfo(settings.restaurant_timezone)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def restaurant_now() -> datetime:
    return datetime.now(restaurant_tz())


def restaurant_today() -> date:
    return restaurant_now().date()


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes read back from backends without tz support."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_day_bounds(day: date) -> tuple[datetime, datetime]:
    """UTC [start, end) of a restaurant-local calendar day."""
    tz = restaurant_tz()
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = start + timedelta(days=1)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def local_range_bounds(start_day: date, end_day: date) -> tuple[datetime, datetime]:
    """UTC [start, end) covering start_day through end_day inclusive."""
    start, _ = local_day_bounds(start_day)
    _, end = local_day_bounds(end_day)
    return start, end
