"""Period boundaries for the donation statistics.

All functions are pure: they take the reference instant and the calendar
timezone and return timezone-aware datetimes. Storage always compares in UTC,
so callers convert with ``to_utc`` before querying.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from charitybox.core.exceptions import InvalidInput

WEEK = "week"
MONTH = "month"
YEAR = "year"

PERIOD_NAMES = {
    WEEK: "7 hari terakhir",
    MONTH: "bulan ini",
    YEAR: "tahun ini",
}


@dataclass(frozen=True)
class Window:
    start: datetime
    end: datetime


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    # naive values come back from SQLite and are UTC already
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def get_zone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {name}") from exc


def local_date(now: datetime, tz: tzinfo) -> date:
    return to_utc(now).astimezone(tz).date()


def midnight(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def day_window(now: datetime, tz: tzinfo) -> Window:
    """Calendar day containing ``now``: [midnight, next midnight)."""
    today = local_date(now, tz)
    return Window(start=midnight(today, tz), end=midnight(today + timedelta(days=1), tz))


def week_start(now: datetime) -> datetime:
    # rolling window, not calendar aligned
    return now - timedelta(days=7)


def month_start(now: datetime, tz: tzinfo) -> datetime:
    return midnight(local_date(now, tz).replace(day=1), tz)


def year_start(now: datetime, tz: tzinfo) -> datetime:
    return midnight(local_date(now, tz).replace(month=1, day=1), tz)


def period_window(period: str, now: datetime, tz: tzinfo) -> Window:
    """Window for a named period, always ending at ``now``.

    Raises:
        InvalidInput: if ``period`` is not week, month or year.
    """
    key = (period or "").lower()
    if key == WEEK:
        start = week_start(now)
    elif key == MONTH:
        start = month_start(now, tz)
    elif key == YEAR:
        start = year_start(now, tz)
    else:
        raise InvalidInput("Invalid period. Use: week, month, or year")
    return Window(start=start, end=now)
