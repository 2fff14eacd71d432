"""cronkit: a cron expression engine.

Parses five-field cron expressions, tests timestamps against them, finds the
next matching instant and iterates over all future matches. All arithmetic is
UTC over a proleptic Gregorian calendar spanning years -262144 to 262143.

Syntax Reference:
    Field         Values          Special Characters
    ─────────────────────────────────────────────────
    Minute        0-59            * / , -
    Hour          0-23            * / , -
    Day of Month  1-31            * / , - ?
    Month         1-12 or JAN-DEC * / , -
    Day of Week   0-6 or SUN-SAT  * / , - ?

Usage:
    >>> from cronkit import Schedule, timestamp, format_timestamp
    >>>
    >>> schedule = Schedule.parse("0 9 * * MON-FRI")
    >>> schedule.contains(timestamp(2021, 1, 4, 9, 0))
    True
    >>> format_timestamp(schedule.next_after(timestamp(2021, 1, 1)))
    '2021-01-04T09:00:00Z'
    >>> schedule.iter_from(timestamp(2021, 1, 1)).take(3)
    [1609750800, 1609837200, 1609923600]
"""

from cronkit.exceptions import (
    ConfigError,
    CronError,
    CronParseError,
    HandleError,
    HandleKindError,
    ParseErrorKind,
    StaleHandleError,
    TimestampRangeError,
)
from cronkit.fields import CronFieldType, FieldSet
from cronkit.gregorian import (
    MAX_TS,
    MIN_TS,
    CalendarTime,
    format_timestamp,
    from_datetime,
    to_calendar,
    to_datetime,
    to_timestamp,
    timestamp,
)
from cronkit.iterator import ScheduleIterator
from cronkit.parser import CronParser, is_valid_expression, parse, validate_expression
from cronkit.schedule import Schedule
from cronkit.describe import describe
from cronkit.handles import Handle, HandleKind, HandleRegistry, get_registry

__version__ = "0.1.0"

__all__ = [
    # Core
    "Schedule",
    "ScheduleIterator",
    "CronFieldType",
    "FieldSet",
    # Parser
    "CronParser",
    "parse",
    "validate_expression",
    "is_valid_expression",
    # Calendar
    "MIN_TS",
    "MAX_TS",
    "CalendarTime",
    "to_calendar",
    "to_timestamp",
    "timestamp",
    "format_timestamp",
    "from_datetime",
    "to_datetime",
    # Boundary
    "Handle",
    "HandleKind",
    "HandleRegistry",
    "get_registry",
    # Description
    "describe",
    # Errors
    "CronError",
    "CronParseError",
    "ParseErrorKind",
    "TimestampRangeError",
    "HandleError",
    "StaleHandleError",
    "HandleKindError",
    "ConfigError",
]
