"""English descriptions of schedules.

Example:
    >>> describe(Schedule.parse("0 9 * * MON-FRI"))
    'At 09:00, on Monday through Friday'
    >>> describe(Schedule.parse("*/15 * 1,15 * 1"))
    'Every 15 minutes, on day 1 and 15 of the month or on Monday'
"""

from __future__ import annotations

from typing import Callable

from cronkit.fields import FieldSet
from cronkit.schedule import Schedule

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

WEEKDAY_NAMES = (
    "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday",
)


def describe(schedule: Schedule) -> str:
    """Describe a schedule in English.

    Args:
        schedule: Schedule to describe.

    Returns:
        Human-readable description.
    """
    parts = [_describe_time(schedule)]

    day_parts = []
    if not schedule.dom_is_wildcard:
        day_parts.append(f"on day {_format_values(schedule.days_of_month, str)} of the month")
    if not schedule.dow_is_wildcard:
        day_parts.append(f"on {_format_values(schedule.days_of_week, _weekday_name)}")
    if day_parts:
        parts.append(" or ".join(day_parts))

    if not schedule.months.is_full:
        parts.append(f"in {_format_values(schedule.months, _month_name)}")

    return ", ".join(parts)


def _describe_time(schedule: Schedule) -> str:
    minutes = schedule.minutes
    hours = schedule.hours

    if len(minutes) == 1 and len(hours) == 1:
        return f"At {hours.first():02d}:{minutes.first():02d}"

    if len(minutes) == 1 and hours.is_full:
        return f"At minute {minutes.first()} past every hour"

    if minutes.is_full:
        minute_text = "Every minute"
    elif (step := _step_of(minutes)) is not None:
        minute_text = f"Every {step} minutes"
    else:
        minute_text = f"At minute {_format_values(minutes, str)}"

    if hours.is_full:
        return minute_text
    if (step := _step_of(hours)) is not None:
        return f"{minute_text}, every {step} hours"
    label = "hour" if len(hours) == 1 else "hours"
    return f"{minute_text}, during {label} {_format_values(hours, str)}"


def _step_of(field_set: FieldSet) -> int | None:
    """Step of a set that is exactly ``*/n`` for some n > 1, else None."""
    values = sorted(field_set)
    constraints = field_set.constraints
    if len(values) < 2 or values[0] != constraints.min_value:
        return None
    step = values[1] - values[0]
    if step < 2:
        return None
    expected = list(range(constraints.min_value, constraints.max_value + 1, step))
    return step if values == expected else None


def _runs(values: list[int]) -> list[tuple[int, int]]:
    """Group sorted values into runs of consecutive integers."""
    runs: list[tuple[int, int]] = []
    for value in values:
        if runs and runs[-1][1] == value - 1:
            runs[-1] = (runs[-1][0], value)
        else:
            runs.append((value, value))
    return runs


def _format_values(field_set: FieldSet, name: Callable[[int], str]) -> str:
    items = []
    for start, end in _runs(sorted(field_set)):
        if end - start >= 2:
            items.append(f"{name(start)} through {name(end)}")
        else:
            items.extend(name(v) for v in range(start, end + 1))
    return _join(items)


def _join(items: list[str]) -> str:
    if len(items) == 1:
        return items[0]
    return f"{', '.join(items[:-1])} and {items[-1]}"


def _month_name(value: int) -> str:
    return MONTH_NAMES[value - 1]


def _weekday_name(value: int) -> str:
    return WEEKDAY_NAMES[value]
