"""Predefined schedules.

This module provides commonly used schedules as constants for easy reuse
and readability.

Usage:
    >>> from cronkit.presets import DAILY, WEEKDAYS_9AM
    >>>
    >>> DAILY.next_after(0)
    86400
    >>> get_preset("weekdays-9am") is WEEKDAYS_9AM
    True
"""

from __future__ import annotations

from cronkit.parser import parse
from cronkit.schedule import Schedule


# =============================================================================
# Standard Intervals
# =============================================================================

# Every year on January 1st at midnight
YEARLY = parse("@yearly")
ANNUALLY = YEARLY

# First day of every month at midnight
MONTHLY = parse("@monthly")

# Every Sunday at midnight
WEEKLY = parse("@weekly")

# Every day at midnight
DAILY = parse("@daily")
MIDNIGHT = DAILY

# Every hour at minute 0
HOURLY = parse("@hourly")

# Every minute
EVERY_MINUTE = parse("* * * * *")


# =============================================================================
# Business Schedule Presets
# =============================================================================

# Weekdays (Monday-Friday) at 9 AM
WEEKDAYS_9AM = parse("0 9 * * MON-FRI")

# Weekdays (Monday-Friday) at 6 PM
WEEKDAYS_6PM = parse("0 18 * * MON-FRI")

# Every 15 minutes during business hours (9 AM - 5 PM, weekdays)
BUSINESS_HOURS_15MIN = parse("*/15 9-17 * * MON-FRI")

# Every hour during business hours
BUSINESS_HOURS_HOURLY = parse("0 9-17 * * MON-FRI")


# =============================================================================
# Data Pipeline Presets
# =============================================================================

EVERY_5_MIN = parse("*/5 * * * *")
EVERY_15_MIN = parse("*/15 * * * *")
EVERY_30_MIN = parse("*/30 * * * *")
EVERY_6_HOURS = parse("0 */6 * * *")

# Midnight and noon
TWICE_DAILY = parse("0 0,12 * * *")


# =============================================================================
# Off-hours Presets
# =============================================================================

# Every night at 2 AM
NIGHTLY_2AM = parse("0 2 * * *")

# Overnight window crossing midnight, hourly from 10 PM to 4 AM
OVERNIGHT_HOURLY = parse("0 22-4 * * *")

# Sunday at 3 AM
SUNDAY_MAINTENANCE = parse("0 3 * * SUN")

# First day of each quarter at midnight
QUARTERLY = parse("0 0 1 JAN,APR,JUL,OCT *")


PRESETS: dict[str, Schedule] = {
    "yearly": YEARLY,
    "annually": ANNUALLY,
    "monthly": MONTHLY,
    "weekly": WEEKLY,
    "daily": DAILY,
    "midnight": MIDNIGHT,
    "hourly": HOURLY,
    "every_minute": EVERY_MINUTE,
    # Business
    "weekdays_9am": WEEKDAYS_9AM,
    "weekdays_6pm": WEEKDAYS_6PM,
    "business_hours_15min": BUSINESS_HOURS_15MIN,
    "business_hours_hourly": BUSINESS_HOURS_HOURLY,
    # Data pipeline
    "every_5_min": EVERY_5_MIN,
    "every_15_min": EVERY_15_MIN,
    "every_30_min": EVERY_30_MIN,
    "every_6_hours": EVERY_6_HOURS,
    "twice_daily": TWICE_DAILY,
    # Off-hours
    "nightly_2am": NIGHTLY_2AM,
    "overnight_hourly": OVERNIGHT_HOURLY,
    "sunday_maintenance": SUNDAY_MAINTENANCE,
    "quarterly": QUARTERLY,
}


def get_preset(name: str) -> Schedule | None:
    """Get a preset schedule by name.

    Args:
        name: Preset name (case-insensitive, dashes allowed).

    Returns:
        Schedule or None if not found.
    """
    return PRESETS.get(name.lower().replace("-", "_"))


def list_presets() -> list[str]:
    """List all available preset names.

    Returns:
        List of preset names.
    """
    return list(PRESETS.keys())
