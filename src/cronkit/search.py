"""Next-time search.

The search walks the calendar from the most significant field down. Each
field either already satisfies its set, advances to the next member of the
set, or wraps and carries into the next more significant field. The number
of steps depends on the number of fields and years crossed, never on the
number of seconds between the bound and the match.

Results resolve to minutes: apart from :func:`next_from` returning its bound
unchanged when the bound itself matches, every result has ``second == 0``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cronkit.config import get_config
from cronkit.gregorian import (
    MAX_TS,
    MAX_YEAR,
    SECONDS_PER_MINUTE,
    check_timestamp,
    days_in_month,
    floor_minute,
    timestamp,
    to_calendar,
    weekday_of,
)

if TYPE_CHECKING:
    from cronkit.schedule import Schedule

logger = logging.getLogger(__name__)


def next_from(schedule: "Schedule", ts: int, *, year_cap: int | None = None) -> int | None:
    """Smallest matching timestamp ``>= ts``.

    Args:
        schedule: Schedule to search.
        ts: Inclusive lower bound.
        year_cap: Override for the configured calendar-cycle cap.

    Returns:
        Matching timestamp, or None if nothing matches before the cap or MAX_TS.

    Raises:
        TimestampRangeError: If ``ts`` is outside the supported domain.
    """
    check_timestamp(ts)
    if schedule.contains(ts):
        return ts
    return find_next(schedule, floor_minute(ts) + SECONDS_PER_MINUTE, year_cap)


def next_after(schedule: "Schedule", ts: int, *, year_cap: int | None = None) -> int | None:
    """Smallest matching minute start ``> ts``.

    Raises:
        TimestampRangeError: If ``ts`` is outside the supported domain.
    """
    check_timestamp(ts)
    return find_next(schedule, floor_minute(ts) + SECONDS_PER_MINUTE, year_cap)


def find_next(schedule: "Schedule", start: int, year_cap: int | None = None) -> int | None:
    """Smallest matching minute start ``>= start``.

    Args:
        schedule: Schedule to search.
        start: Minute-aligned inclusive lower bound.
        year_cap: Maximum number of years to carry through.
    """
    if start > MAX_TS:
        return None
    if year_cap is None:
        year_cap = get_config().search_year_cap

    cal = to_calendar(start)

    if schedule.matches_date(cal.year, cal.month, cal.day, cal.weekday):
        found = next_time(schedule, cal.hour, cal.minute)
        if found is not None:
            return timestamp(cal.year, cal.month, cal.day, *found)

    date = next_date(schedule, cal.year, cal.month, cal.day + 1, year_cap)
    if date is None:
        return None

    result = timestamp(*date, schedule.hours.first(), schedule.minutes.first())
    return result if result <= MAX_TS else None


def next_time(schedule: "Schedule", hour: int, minute: int) -> tuple[int, int] | None:
    """First matching (hour, minute) at or after the given time of day."""
    if hour in schedule.hours:
        next_minute = schedule.minutes.next_at_or_after(minute)
        if next_minute is not None:
            return hour, next_minute

    next_hour = schedule.hours.next_at_or_after(hour + 1)
    if next_hour is None:
        return None
    return next_hour, schedule.minutes.first()


def next_date(
    schedule: "Schedule",
    year: int,
    month: int,
    day: int,
    year_cap: int,
) -> tuple[int, int, int] | None:
    """First matching date at or after (year, month, day).

    ``day`` may run past the end of the month, which carries into the next
    month. Gives up after ``year_cap`` years or past MAX_YEAR.
    """
    last_year = min(year + year_cap, MAX_YEAR)
    first_month = month

    while year <= last_year:
        current = schedule.months.next_at_or_after(month)
        while current is not None:
            found = next_day(schedule, year, current, day if current == first_month else 1)
            if found is not None:
                return year, current, found
            current = schedule.months.next_at_or_after(current + 1)
        year += 1
        month = first_month = 1
        day = 1

    logger.debug("No match for %r within %d years", schedule, year_cap)
    return None


def next_day(schedule: "Schedule", year: int, month: int, day: int) -> int | None:
    """First day ``>= day`` in the given month satisfying the day rule.

    Day-of-month and day-of-week are combined as in :meth:`Schedule.matches_day`:
    with both restricted, the earlier of the two candidates wins.
    """
    last = days_in_month(year, month)
    if day > last:
        return None

    if schedule.dom_is_wildcard and schedule.dow_is_wildcard:
        return day
    if schedule.dow_is_wildcard:
        return _next_day_of_month(schedule, day, last)
    if schedule.dom_is_wildcard:
        return _next_weekday(schedule, year, month, day, last)

    candidates = [
        found
        for found in (
            _next_day_of_month(schedule, day, last),
            _next_weekday(schedule, year, month, day, last),
        )
        if found is not None
    ]
    return min(candidates) if candidates else None


def _next_day_of_month(schedule: "Schedule", day: int, last: int) -> int | None:
    found = schedule.days_of_month.next_at_or_after(day)
    if found is None or found > last:
        return None
    return found


def _next_weekday(schedule: "Schedule", year: int, month: int, day: int, last: int) -> int | None:
    weekday = weekday_of(year, month, day)
    # Days until the next member, wrapping Saturday to Sunday
    ahead = schedule.days_of_week.next_at_or_after(weekday)
    if ahead is None:
        ahead = schedule.days_of_week.first() + 7
    found = day + ahead - weekday
    return found if found <= last else None
