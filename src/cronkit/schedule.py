"""Parsed cron schedules.

A :class:`Schedule` is the immutable result of parsing a cron expression:
five field sets plus two flags recording whether day-of-month and
day-of-week were written as wildcards. It is safe to share between threads.

Day matching follows the classic cron rule:

    ========  ========  =====================================
    dom       dow       a date matches when
    ========  ========  =====================================
    ``*``     ``*``     always
    ``*``     set       its weekday is in dow
    set       ``*``     its day of month is in dom
    set       set       day of month in dom **or** weekday in dow
    ========  ========  =====================================

Example:
    >>> schedule = Schedule.parse("0 0 1,15 * MON")
    >>> schedule.contains(timestamp(2021, 3, 15))   # the 15th, a Monday
    True
    >>> schedule.contains(timestamp(2021, 3, 8))    # a Monday
    True
    >>> format_timestamp(schedule.next_after(timestamp(2021, 3, 15)))
    '2021-03-22T00:00:00Z'
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from cronkit import search
from cronkit.fields import CronFieldType, FieldSet
from cronkit.gregorian import MIN_TS, CalendarTime, check_timestamp, from_datetime, to_calendar
from cronkit.iterator import ScheduleIterator

if TYPE_CHECKING:
    from cronkit.parser import ExpressionInput


class Schedule:
    """Parsed cron expression.

    Attributes:
        minutes: Minute set, 0-59.
        hours: Hour set, 0-23.
        days_of_month: Day-of-month set, 1-31.
        months: Month set, 1-12.
        days_of_week: Day-of-week set, 0-6 with 0 as Sunday.
        dom_is_wildcard: Day-of-month was written as ``*``.
        dow_is_wildcard: Day-of-week was written as ``*``.
    """

    __slots__ = (
        "_minutes",
        "_hours",
        "_days_of_month",
        "_months",
        "_days_of_week",
        "_dom_is_wildcard",
        "_dow_is_wildcard",
        "_expression",
        "_any",
    )

    def __init__(
        self,
        minutes: FieldSet,
        hours: FieldSet,
        days_of_month: FieldSet,
        months: FieldSet,
        days_of_week: FieldSet,
        *,
        dom_is_wildcard: bool = False,
        dow_is_wildcard: bool = False,
        expression: str = "",
    ) -> None:
        """Initialize schedule.

        Args:
            minutes: Minute set.
            hours: Hour set.
            days_of_month: Day-of-month set.
            months: Month set.
            days_of_week: Day-of-week set.
            dom_is_wildcard: Treat day-of-month as unrestricted.
            dow_is_wildcard: Treat day-of-week as unrestricted.
            expression: Source text, kept for display.
        """
        expected = (
            (minutes, CronFieldType.MINUTE),
            (hours, CronFieldType.HOUR),
            (days_of_month, CronFieldType.DAY_OF_MONTH),
            (months, CronFieldType.MONTH),
            (days_of_week, CronFieldType.DAY_OF_WEEK),
        )
        for field_set, field_type in expected:
            if field_set.field_type is not field_type:
                raise ValueError(
                    f"Expected a {field_type.name} set, got {field_set.field_type.name}"
                )

        self._minutes = minutes
        self._hours = hours
        self._days_of_month = days_of_month
        self._months = months
        self._days_of_week = days_of_week
        self._dom_is_wildcard = dom_is_wildcard
        self._dow_is_wildcard = dow_is_wildcard
        self._expression = expression
        self._any: bool | None = None

    @classmethod
    def parse(cls, expression: "ExpressionInput", length: int | None = None) -> "Schedule":
        """Parse a cron expression.

        Args:
            expression: Cron expression as text or raw UTF-8 bytes.
            length: Optional number of leading bytes/characters to read.

        Returns:
            Parsed Schedule.

        Raises:
            CronParseError: If expression is invalid.
        """
        # Import here to avoid circular imports
        from cronkit.parser import parse

        return parse(expression, length)

    @property
    def minutes(self) -> FieldSet:
        return self._minutes

    @property
    def hours(self) -> FieldSet:
        return self._hours

    @property
    def days_of_month(self) -> FieldSet:
        return self._days_of_month

    @property
    def months(self) -> FieldSet:
        return self._months

    @property
    def days_of_week(self) -> FieldSet:
        return self._days_of_week

    @property
    def dom_is_wildcard(self) -> bool:
        return self._dom_is_wildcard

    @property
    def dow_is_wildcard(self) -> bool:
        return self._dow_is_wildcard

    @property
    def expression(self) -> str:
        """Get original expression string."""
        return self._expression

    def get_field(self, field_type: CronFieldType) -> FieldSet:
        """Get a specific field set by type."""
        return {
            CronFieldType.MINUTE: self._minutes,
            CronFieldType.HOUR: self._hours,
            CronFieldType.DAY_OF_MONTH: self._days_of_month,
            CronFieldType.MONTH: self._months,
            CronFieldType.DAY_OF_WEEK: self._days_of_week,
        }[field_type]

    # -------------------------------------------------------------------------
    # Matching
    # -------------------------------------------------------------------------

    def matches_day(self, day: int, weekday: int) -> bool:
        """Apply the day-of-month/day-of-week rule to one date."""
        if self._dom_is_wildcard:
            return self._dow_is_wildcard or weekday in self._days_of_week
        if self._dow_is_wildcard:
            return day in self._days_of_month
        return day in self._days_of_month or weekday in self._days_of_week

    def matches_date(self, year: int, month: int, day: int, weekday: int) -> bool:
        return month in self._months and self.matches_day(day, weekday)

    def matches_calendar(self, cal: CalendarTime) -> bool:
        """Check calendar fields against the schedule; seconds are ignored."""
        return (
            cal.minute in self._minutes
            and cal.hour in self._hours
            and self.matches_date(cal.year, cal.month, cal.day, cal.weekday)
        )

    def contains(self, ts: int) -> bool:
        """Check if a timestamp matches this schedule.

        Args:
            ts: UTC epoch seconds.

        Returns:
            True if the minute containing ``ts`` matches.

        Raises:
            TimestampRangeError: If ``ts`` is outside the supported domain.
        """
        check_timestamp(ts)
        return self.matches_calendar(to_calendar(ts))

    def matches(self, dt: datetime) -> bool:
        """Check if a datetime matches; naive datetimes are taken as UTC."""
        return self.contains(from_datetime(dt))

    def any(self) -> bool:
        """Check whether any timestamp in the supported domain matches.

        Some schedules never match, e.g. the 31st of February. The answer is
        the same one the search gives, computed once and cached.
        """
        if self._any is None:
            self._any = search.next_from(self, MIN_TS) is not None
        return self._any

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def next_from(self, ts: int) -> int | None:
        """Next matching timestamp, ``ts`` included."""
        return search.next_from(self, ts)

    def next_after(self, ts: int) -> int | None:
        """Next matching timestamp strictly after ``ts``."""
        return search.next_after(self, ts)

    def next_n(self, n: int, after: int) -> list[int]:
        """Get next n matching timestamps after ``after``.

        Args:
            n: Number of matches to find.
            after: Start searching after this timestamp.

        Returns:
            List of matching timestamps, shorter than n if the schedule runs out.
        """
        return self.iter_after(after).take(n)

    def iter_from(self, ts: int) -> ScheduleIterator:
        """Iterate matches starting at ``ts`` inclusive.

        Raises:
            TimestampRangeError: If ``ts`` is outside the supported domain.
        """
        return ScheduleIterator(self, ts, inclusive=True)

    def iter_after(self, ts: int) -> ScheduleIterator:
        """Iterate matches strictly after ``ts``.

        Raises:
            TimestampRangeError: If ``ts`` is outside the supported domain.
        """
        return ScheduleIterator(self, ts, inclusive=False)

    # -------------------------------------------------------------------------
    # Dunder
    # -------------------------------------------------------------------------

    def _key(self) -> tuple:
        return (
            self._minutes,
            self._hours,
            self._days_of_month,
            self._months,
            self._days_of_week,
            self._dom_is_wildcard,
            self._dow_is_wildcard,
        )

    def __repr__(self) -> str:
        return f"Schedule({self._expression!r})"

    def __str__(self) -> str:
        return self._expression

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Schedule):
            return self._key() == other._key()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._key())
