"""Tests for Schedule matching and the day-of-month/day-of-week rule."""

from datetime import datetime, timezone

import pytest

from cronkit import (
    MAX_TS,
    MIN_TS,
    CronFieldType,
    FieldSet,
    Schedule,
    TimestampRangeError,
    parse,
    timestamp,
)


# =============================================================================
# Day Rule
# =============================================================================


class TestDayRule:
    """Tests for combining day-of-month and day-of-week."""

    def test_both_wildcards_match_every_day(self):
        """Test '* *' matches every day."""
        schedule = parse("0 0 * * *")
        for day in range(1, 32):
            assert schedule.matches_day(day, day % 7)

    def test_dom_wildcard_uses_weekday(self):
        """Test a restricted weekday with wildcard day of month."""
        schedule = parse("0 0 * * 1")
        assert schedule.matches_day(13, 1)
        assert not schedule.matches_day(1, 2)

    def test_dow_wildcard_uses_day_of_month(self):
        """Test a restricted day of month with wildcard weekday."""
        schedule = parse("0 0 1 * *")
        assert schedule.matches_day(1, 5)
        assert not schedule.matches_day(2, 1)

    def test_both_restricted_is_union(self):
        """Test either field may satisfy the rule."""
        schedule = parse("0 0 1,15 * 1")
        assert schedule.matches_day(1, 3)
        assert schedule.matches_day(8, 1)
        assert not schedule.matches_day(9, 2)

    def test_full_dom_with_weekday_matches_every_day(self):
        """Test '1-31' is restricted, so the union covers every day."""
        schedule = parse("0 0 1-31 * 1")
        for day in range(1, 29):
            assert schedule.contains(timestamp(2021, 2, day))

    def test_wildcard_dom_full_dow(self):
        """Test '0-6' on weekday with wildcard day of month matches every day."""
        schedule = parse("0 0 * * 0-6")
        for day in range(1, 8):
            assert schedule.contains(timestamp(2021, 3, day))


# =============================================================================
# Contains
# =============================================================================


class TestContains:
    """Tests for Schedule.contains."""

    def test_minute_and_hour(self):
        """Test time-of-day matching."""
        schedule = parse("30 9 * * *")
        assert schedule.contains(timestamp(2021, 1, 1, 9, 30))
        assert not schedule.contains(timestamp(2021, 1, 1, 9, 31))
        assert not schedule.contains(timestamp(2021, 1, 1, 10, 30))

    def test_seconds_ignored(self):
        """Test any second inside a matching minute matches."""
        schedule = parse("30 9 * * *")
        assert schedule.contains(timestamp(2021, 1, 1, 9, 30, 59))

    def test_month(self):
        """Test month matching."""
        schedule = parse("0 0 * FEB *")
        assert schedule.contains(timestamp(2021, 2, 10))
        assert not schedule.contains(timestamp(2021, 3, 10))

    def test_yearly(self):
        """Test a yearly schedule."""
        schedule = parse("0 0 1 1 *")
        assert schedule.contains(timestamp(2021, 1, 1))
        assert schedule.contains(timestamp(-5000, 1, 1))
        assert not schedule.contains(timestamp(2021, 1, 2))

    def test_domain_bounds(self):
        """Test the first and last instants of the domain."""
        schedule = parse("* * * * *")
        assert schedule.contains(MIN_TS)
        assert schedule.contains(MAX_TS)

    @pytest.mark.parametrize("ts", [MIN_TS - 1, MAX_TS + 1])
    def test_out_of_range(self, ts):
        """Test timestamps outside the domain raise."""
        with pytest.raises(TimestampRangeError):
            parse("* * * * *").contains(ts)

    def test_matches_datetime(self):
        """Test the datetime convenience wrapper."""
        schedule = parse("0 9 * * MON-FRI")
        assert schedule.matches(datetime(2021, 1, 4, 9, 0, tzinfo=timezone.utc))
        assert not schedule.matches(datetime(2021, 1, 2, 9, 0))


# =============================================================================
# Scenarios
# =============================================================================


class TestScenarios:
    """End-to-end scenarios."""

    def test_yearly_midnight(self):
        """Test the next January 1st after a January 1st."""
        schedule = parse("0 0 1 1 *")
        assert schedule.next_from(1609459200) == 1609459200
        assert schedule.next_after(1609459200) == 1640995200

    def test_impossible_date(self):
        """Test February 31st never matches."""
        assert not parse("* * 31 2 *").any()
        assert not parse("0 0 30 2 *").any()
        assert not parse("0 0 31 APR,JUN,SEP,NOV *").any()

    def test_impossible_date_rescued_by_weekday(self):
        """Test a restricted weekday makes an impossible date satisfiable."""
        assert parse("0 0 31 2 1").any()

    def test_possible_dates(self):
        """Test satisfiable schedules."""
        assert parse("0 0 31 * *").any()
        assert parse("0 0 29 2 *").any()
        assert parse("* * * * *").any()

    def test_day_or_weekday(self):
        """Test the 1st and 15th or any Monday."""
        schedule = parse("0 0 1,15 * 1")
        assert schedule.contains(timestamp(2021, 3, 8))  # Monday
        assert schedule.contains(timestamp(2021, 4, 15))  # Thursday
        assert not schedule.contains(timestamp(2021, 3, 9))  # Tuesday
        assert schedule.next_after(timestamp(2021, 3, 1)) == timestamp(2021, 3, 8)
        assert schedule.next_after(timestamp(2021, 3, 8)) == timestamp(2021, 3, 15)

    def test_any_is_cached(self):
        """Test any() gives the same answer on repeated calls."""
        schedule = parse("0 0 31 2 *")
        assert schedule.any() is False
        assert schedule.any() is False


# =============================================================================
# Construction and Identity
# =============================================================================


class TestScheduleObject:
    """Tests for construction, equality and display."""

    def test_direct_construction(self):
        """Test building a schedule from field sets."""
        schedule = Schedule(
            FieldSet.from_values(CronFieldType.MINUTE, [0]),
            FieldSet.from_values(CronFieldType.HOUR, [0]),
            FieldSet.from_values(CronFieldType.DAY_OF_MONTH, [1]),
            FieldSet.from_values(CronFieldType.MONTH, [1]),
            FieldSet.full(CronFieldType.DAY_OF_WEEK),
            dow_is_wildcard=True,
        )
        assert schedule == parse("0 0 1 1 *")

    def test_field_type_checked(self):
        """Test sets must be passed in field order."""
        hours = FieldSet.from_values(CronFieldType.HOUR, [0])
        with pytest.raises(ValueError):
            Schedule(
                hours,
                hours,
                FieldSet.full(CronFieldType.DAY_OF_MONTH),
                FieldSet.full(CronFieldType.MONTH),
                FieldSet.full(CronFieldType.DAY_OF_WEEK),
            )

    def test_equality_and_hash(self):
        """Test schedules compare by meaning, not text."""
        a = parse("0 9 * * MON-FRI")
        b = parse("0 9 * * 1-5")
        c = parse("0 9 * * 1-6")
        assert a == b
        assert hash(a) == hash(b)
        assert a != c
        assert len({a, b, c}) == 2

    def test_repr_and_str(self):
        """Test display forms."""
        schedule = parse("  0 9 * * MON-FRI ")
        assert str(schedule) == "0 9 * * MON-FRI"
        assert repr(schedule) == "Schedule('0 9 * * MON-FRI')"

    def test_next_n(self):
        """Test listing several matches."""
        schedule = parse("0 0 * * *")
        assert schedule.next_n(3, 0) == [86400, 172800, 259200]

    def test_next_n_short_when_exhausted(self):
        """Test fewer results come back when the schedule runs out."""
        assert parse("0 0 31 2 *").next_n(3, 0) == []
