"""
Date helpers shared by the warehouse reports.

Stored timestamps are kept as ISO-8601 text. Everything here tolerates
missing or malformed values: parsing returns None and formatting returns a
sentinel string instead of raising.
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional, Tuple, Union

from services.config_service import get_timezone, get_week_starts_on

NOT_AVAILABLE = "N/A"
INVALID_DATE = "Invalid Date"
FORM_PLACEHOLDER = "....................."

# Display formats matching the printed reports.
DATE_FORMAT = "%b %d, %Y"
DATETIME_FORMAT = "%b %d, %Y, %I:%M:%S %p"
FORM_DATE_FORMAT = "%d/%m/%Y"
DAY_KEY_FORMAT = "%Y-%m-%d"

DateLike = Union[str, datetime, date, None]

_ONE_TICK = timedelta(microseconds=1)


def parse_iso(value: DateLike, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Parse an ISO-8601 value into an aware datetime, or None.

    Naive values are taken to be in the configured zone. A plain date is the
    start of that day.
    """
    if value is None or value == "":
        return None
    zone = tz or get_timezone()
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=zone)
    return parsed


def format_safe(value: DateLike, fmt: str = DATE_FORMAT, tz: Optional[tzinfo] = None) -> str:
    """Format a stored timestamp for display.

    Returns "N/A" when the value is missing and "Invalid Date" when it cannot
    be parsed.
    """
    if value is None or value == "":
        return NOT_AVAILABLE
    zone = tz or get_timezone()
    parsed = parse_iso(value, zone)
    if parsed is None:
        return INVALID_DATE
    return parsed.astimezone(zone).strftime(fmt)


def to_local(value: datetime, tz: Optional[tzinfo] = None) -> datetime:
    zone = tz or get_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=zone)
    return value.astimezone(zone)


def day_key(value: datetime, tz: Optional[tzinfo] = None) -> str:
    return to_local(value, tz).strftime(DAY_KEY_FORMAT)


def start_of_day(value: datetime, tz: Optional[tzinfo] = None) -> datetime:
    local = to_local(value, tz)
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


def week_bounds(
    reference: datetime,
    week_starts_on: Optional[int] = None,
    tz: Optional[tzinfo] = None,
) -> Tuple[datetime, datetime]:
    """Return the inclusive [start, end] of the week containing reference."""
    first_weekday = get_week_starts_on() if week_starts_on is None else week_starts_on
    day_start = start_of_day(reference, tz)
    offset = (day_start.weekday() - first_weekday) % 7
    start = day_start - timedelta(days=offset)
    end = start + timedelta(days=7) - _ONE_TICK
    return start, end


def month_bounds(reference: datetime, tz: Optional[tzinfo] = None) -> Tuple[datetime, datetime]:
    """Return the inclusive [start, end] of the calendar month containing reference."""
    start = start_of_day(reference, tz).replace(day=1)
    if start.month == 12:
        next_month = start.replace(year=start.year + 1, month=1)
    else:
        next_month = start.replace(month=start.month + 1)
    return start, next_month - _ONE_TICK


def is_within(value: Optional[datetime], start: datetime, end: datetime) -> bool:
    """Inclusive on both boundaries; None is never within."""
    if value is None:
        return False
    return start <= value <= end


def days_between(later: datetime, earlier: datetime) -> int:
    """Whole days from earlier to later, truncated toward zero."""
    seconds = (later - earlier).total_seconds()
    days = int(abs(seconds) // 86400)
    return days if seconds >= 0 else -days


def week_days(start: datetime) -> list[datetime]:
    return [start + timedelta(days=offset) for offset in range(7)]
