"""Proleptic Gregorian calendar arithmetic over UTC timestamps.

The standard library ``datetime`` type stops at year 9999, while the engine
works over roughly half a million years in both directions. This module
converts between epoch seconds and civil calendar fields with plain integer
arithmetic, which is exact over the whole supported domain.

Years use astronomical numbering: year 0 exists and is a leap year, and
year -1 precedes it. Weekdays follow the cron convention, 0 is Sunday.

Usage:
    >>> to_calendar(0)
    CalendarTime(year=1970, month=1, day=1, hour=0, minute=0, second=0, weekday=4)
    >>> timestamp(2021, 1, 1)
    1609459200
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import NamedTuple

from cronkit.exceptions import TimestampRangeError


# =============================================================================
# Domain
# =============================================================================

#: First supported instant, -262144-01-01T00:00:00Z.
MIN_TS = -8334632851200

#: Last supported instant, 262143-12-31T23:59:59Z.
MAX_TS = 8210298412799

MIN_YEAR = -262144
MAX_YEAR = 262143

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400

# Days in a 400-year Gregorian cycle; also a whole number of weeks.
DAYS_PER_ERA = 146097

# Day number of 0000-03-01 relative to the epoch, negated.
_EPOCH_SHIFT = 719468

# 1970-01-01 was a Thursday.
_EPOCH_WEEKDAY = 4

_MONTH_DAYS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


class CalendarTime(NamedTuple):
    """Civil UTC calendar fields of a timestamp."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    weekday: int


# =============================================================================
# Calendar Rules
# =============================================================================


def is_leap_year(year: int) -> bool:
    """Check the Gregorian leap-year rule."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    """Number of days in a month, 28 to 31."""
    if month == 2 and is_leap_year(year):
        return 29
    return _MONTH_DAYS[month - 1]


def days_from_civil(year: int, month: int, day: int) -> int:
    """Count days from the epoch to a civil date.

    Counting starts the year in March so that the leap day falls at the end
    of the shifted year, which keeps month lengths regular.

    Args:
        year: Astronomical year.
        month: Month, 1-12.
        day: Day of month, 1-31.

    Returns:
        Days since 1970-01-01 (negative before it).
    """
    if month <= 2:
        year -= 1
    era = year // 400
    year_of_era = year - era * 400
    shifted_month = month - 3 if month > 2 else month + 9
    day_of_year = (153 * shifted_month + 2) // 5 + day - 1
    day_of_era = year_of_era * 365 + year_of_era // 4 - year_of_era // 100 + day_of_year
    return era * DAYS_PER_ERA + day_of_era - _EPOCH_SHIFT


def civil_from_days(days: int) -> tuple[int, int, int]:
    """Inverse of :func:`days_from_civil`.

    Args:
        days: Days since 1970-01-01.

    Returns:
        Tuple of (year, month, day).
    """
    days += _EPOCH_SHIFT
    era = days // DAYS_PER_ERA
    day_of_era = days - era * DAYS_PER_ERA
    year_of_era = (
        day_of_era - day_of_era // 1460 + day_of_era // 36524 - day_of_era // 146096
    ) // 365
    day_of_year = day_of_era - (365 * year_of_era + year_of_era // 4 - year_of_era // 100)
    shifted_month = (5 * day_of_year + 2) // 153
    day = day_of_year - (153 * shifted_month + 2) // 5 + 1
    month = shifted_month + 3 if shifted_month < 10 else shifted_month - 9
    year = year_of_era + era * 400
    if month <= 2:
        year += 1
    return year, month, day


def weekday_of(year: int, month: int, day: int) -> int:
    """Weekday of a civil date, 0 (Sunday) to 6 (Saturday)."""
    return weekday_of_days(days_from_civil(year, month, day))


def weekday_of_days(days: int) -> int:
    return (days + _EPOCH_WEEKDAY) % 7


# =============================================================================
# Timestamp Conversion
# =============================================================================


def in_range(ts: int) -> bool:
    return MIN_TS <= ts <= MAX_TS


def check_timestamp(ts: int) -> int:
    """Validate that a timestamp lies inside the supported domain.

    Returns:
        The timestamp unchanged.

    Raises:
        TimestampRangeError: If ``ts`` is outside ``[MIN_TS, MAX_TS]``.
    """
    if not in_range(ts):
        raise TimestampRangeError(ts)
    return ts


def to_calendar(ts: int) -> CalendarTime:
    """Convert epoch seconds to calendar fields."""
    days, secs = divmod(ts, SECONDS_PER_DAY)
    year, month, day = civil_from_days(days)
    hour, secs = divmod(secs, SECONDS_PER_HOUR)
    minute, second = divmod(secs, SECONDS_PER_MINUTE)
    return CalendarTime(year, month, day, hour, minute, second, weekday_of_days(days))


def to_timestamp(cal: CalendarTime) -> int:
    """Convert calendar fields back to epoch seconds.

    The ``weekday`` field is derived data and is ignored.
    """
    return timestamp(cal.year, cal.month, cal.day, cal.hour, cal.minute, cal.second)


def timestamp(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
) -> int:
    """Epoch seconds for a UTC civil date and time."""
    return (
        days_from_civil(year, month, day) * SECONDS_PER_DAY
        + hour * SECONDS_PER_HOUR
        + minute * SECONDS_PER_MINUTE
        + second
    )


def floor_minute(ts: int) -> int:
    """Truncate a timestamp to the start of its minute."""
    return ts - ts % SECONDS_PER_MINUTE


# =============================================================================
# Formatting and Interop
# =============================================================================


_ISO_PATTERN = re.compile(
    r"^(?P<year>[+-]?\d{4,6})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"(?:[T ](?P<hour>\d{2}):(?P<minute>\d{2})(?::(?P<second>\d{2}))?)?"
    r"(?:Z|[+-]00:?00)?$"
)


def format_timestamp(ts: int) -> str:
    """Format a timestamp as ISO-8601 UTC.

    Years outside 0..9999 use the expanded form with an explicit sign,
    e.g. ``-262144-01-01T00:00:00Z``.
    """
    cal = to_calendar(ts)
    if 0 <= cal.year <= 9999:
        year = f"{cal.year:04d}"
    else:
        year = f"{'-' if cal.year < 0 else '+'}{abs(cal.year):04d}"
    return (
        f"{year}-{cal.month:02d}-{cal.day:02d}"
        f"T{cal.hour:02d}:{cal.minute:02d}:{cal.second:02d}Z"
    )


def parse_timestamp(text: str) -> int:
    """Parse epoch seconds or a UTC ISO-8601 date/time into a timestamp.

    Accepts plain integers (``"1609459200"``) and ISO strings such as
    ``"2021-01-01"``, ``"2021-01-01T09:30"`` or ``"+12021-01-01T00:00:00Z"``.

    Raises:
        ValueError: If the text is neither form or names an invalid date.
    """
    text = text.strip()
    try:
        return int(text)
    except ValueError:
        pass

    match = _ISO_PATTERN.match(text)
    if match is None:
        raise ValueError(f"Invalid timestamp: {text!r}")

    year = int(match.group("year"))
    month = int(match.group("month"))
    day = int(match.group("day"))
    hour = int(match.group("hour") or 0)
    minute = int(match.group("minute") or 0)
    second = int(match.group("second") or 0)

    if not 1 <= month <= 12 or not 1 <= day <= days_in_month(year, month):
        raise ValueError(f"Invalid date: {text!r}")
    if hour > 23 or minute > 59 or second > 59:
        raise ValueError(f"Invalid time: {text!r}")

    return timestamp(year, month, day, hour, minute, second)


def from_datetime(dt: datetime) -> int:
    """Epoch seconds for a datetime, truncating microseconds.

    Naive datetimes are taken to be UTC.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return timestamp(dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second)


def to_datetime(ts: int) -> datetime:
    """Aware UTC datetime for a timestamp.

    Raises:
        TimestampRangeError: If the year falls outside what ``datetime`` supports.
    """
    cal = to_calendar(ts)
    if not 1 <= cal.year <= 9999:
        raise TimestampRangeError(ts, f"Timestamp {ts} (year {cal.year}) is not representable as datetime")
    return datetime(
        cal.year, cal.month, cal.day, cal.hour, cal.minute, cal.second, tzinfo=timezone.utc
    )
