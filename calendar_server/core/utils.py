"""
Core Utilities.

Date and time helpers shared by the service, schemas and store.
All modules should import utilities from this module.
"""

import re
from collections.abc import Iterator
from datetime import date, datetime, timedelta, timezone

_DAY_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

ONE_DAY = timedelta(days=1)


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application should be timezone-naive
    and assumed to be UTC. This ensures consistent behavior across
    the codebase.

    Returns:
        Current UTC time with tzinfo stripped
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_day(value: date | datetime) -> date:
    """
    Truncate a date or datetime to its calendar day in UTC.

    Aware datetimes are converted to UTC first; naive datetimes are
    assumed to already be UTC. Plain dates are returned unchanged.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def parse_day(value: str) -> date:
    """
    Parse a YYYY-MM-DD string.

    Raises:
        ValueError: If the string is not a valid calendar date
    """
    if not _DAY_PATTERN.fullmatch(value):
        raise ValueError(f"not a YYYY-MM-DD date: {value!r}")
    return date.fromisoformat(value)


def week_bounds(day: date) -> tuple[date, date | None]:
    """
    Half-open [monday, next_monday) range of the ISO week containing day.

    The end is None for the last week of 9999, whose next Monday is past
    date.max.
    """
    monday = day - timedelta(days=day.weekday())
    if date.max - monday < timedelta(days=7):
        return monday, None
    return monday, monday + timedelta(days=7)


def month_bounds(day: date) -> tuple[date, date | None]:
    """
    Half-open [first_of_month, first_of_next_month) range containing day.

    The end is None for December 9999.
    """
    first = day.replace(day=1)
    if first.month == 12:
        if first.year == date.max.year:
            return first, None
        return first, first.replace(year=first.year + 1, month=1)
    return first, first.replace(month=first.month + 1)


def iter_days(start: date, end: date | None) -> Iterator[date]:
    """Yield every day in the half-open range [start, end); None runs through date.max."""
    current = start
    while end is None or current < end:
        yield current
        if current == date.max:
            return
        current += ONE_DAY
