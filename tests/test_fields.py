"""Tests for field constraints and bitmask value sets."""

import pytest

from cronkit.fields import FIELD_CONSTRAINTS, FIELD_ORDER, CronFieldType, FieldSet


class TestFieldConstraints:
    """Tests for per-field domains."""

    def test_field_order(self):
        """Test fields are listed in expression order."""
        assert FIELD_ORDER == (
            CronFieldType.MINUTE,
            CronFieldType.HOUR,
            CronFieldType.DAY_OF_MONTH,
            CronFieldType.MONTH,
            CronFieldType.DAY_OF_WEEK,
        )

    def test_domains(self):
        """Test domain limits and spans."""
        minute = FIELD_CONSTRAINTS[CronFieldType.MINUTE]
        assert (minute.min_value, minute.max_value, minute.span) == (0, 59, 60)
        dom = FIELD_CONSTRAINTS[CronFieldType.DAY_OF_MONTH]
        assert (dom.min_value, dom.max_value, dom.span) == (1, 31, 31)
        dow = FIELD_CONSTRAINTS[CronFieldType.DAY_OF_WEEK]
        assert (dow.min_value, dow.max_value, dow.span) == (0, 6, 7)

    def test_max_step(self):
        """Test the largest step stops one short of the span."""
        assert FIELD_CONSTRAINTS[CronFieldType.MINUTE].max_step == 59
        assert FIELD_CONSTRAINTS[CronFieldType.DAY_OF_MONTH].max_step == 30
        assert FIELD_CONSTRAINTS[CronFieldType.DAY_OF_WEEK].max_step == 6

    def test_full_mask(self):
        """Test the full mask sets exactly the domain bits."""
        assert FIELD_CONSTRAINTS[CronFieldType.MONTH].full_mask == 0b1111111111110
        assert FIELD_CONSTRAINTS[CronFieldType.DAY_OF_WEEK].full_mask == 0b1111111

    def test_question_mark_support(self):
        """Test only day fields accept '?'."""
        supported = {t for t, c in FIELD_CONSTRAINTS.items() if c.supports_question}
        assert supported == {CronFieldType.DAY_OF_MONTH, CronFieldType.DAY_OF_WEEK}


class TestFieldSet:
    """Tests for FieldSet."""

    def test_from_values(self):
        """Test building a set from values."""
        hours = FieldSet.from_values(CronFieldType.HOUR, [9, 17, 12])
        assert hours.values == {9, 12, 17}
        assert list(hours) == [9, 12, 17]
        assert len(hours) == 3

    def test_full(self):
        """Test a full set covers the domain."""
        days = FieldSet.full(CronFieldType.DAY_OF_MONTH)
        assert days.is_full
        assert days.values == frozenset(range(1, 32))
        assert 0 not in days

    def test_empty_rejected(self):
        """Test empty sets are invalid."""
        with pytest.raises(ValueError):
            FieldSet(CronFieldType.MINUTE, 0)
        with pytest.raises(ValueError):
            FieldSet.from_values(CronFieldType.MINUTE, [])

    @pytest.mark.parametrize(
        "field_type,value",
        [
            (CronFieldType.MINUTE, 60),
            (CronFieldType.HOUR, 24),
            (CronFieldType.DAY_OF_MONTH, 0),
            (CronFieldType.MONTH, 13),
            (CronFieldType.DAY_OF_WEEK, 7),
        ],
    )
    def test_out_of_range_rejected(self, field_type, value):
        """Test values outside the domain are invalid."""
        with pytest.raises(ValueError):
            FieldSet.from_values(field_type, [value])

    def test_first(self):
        """Test the smallest member."""
        assert FieldSet.from_values(CronFieldType.MINUTE, [45, 15, 30]).first() == 15
        assert FieldSet.full(CronFieldType.MONTH).first() == 1

    def test_next_at_or_after(self):
        """Test finding the next member."""
        minutes = FieldSet.from_values(CronFieldType.MINUTE, [0, 15, 30, 45])
        assert minutes.next_at_or_after(0) == 0
        assert minutes.next_at_or_after(1) == 15
        assert minutes.next_at_or_after(30) == 30
        assert minutes.next_at_or_after(46) is None
        assert minutes.next_at_or_after(100) is None

    def test_next_at_or_after_below_domain(self):
        """Test lower bounds below the domain start at the first member."""
        days = FieldSet.from_values(CronFieldType.DAY_OF_MONTH, [1, 31])
        assert days.next_at_or_after(0) == 1
        assert days.next_at_or_after(-5) == 1
        assert days.next_at_or_after(2) == 31

    def test_contains(self):
        """Test membership."""
        weekdays = FieldSet.from_values(CronFieldType.DAY_OF_WEEK, range(1, 6))
        assert 1 in weekdays
        assert 0 not in weekdays
        assert -1 not in weekdays
        assert "1" not in weekdays

    def test_equality_and_hash(self):
        """Test sets compare by type and members."""
        a = FieldSet.from_values(CronFieldType.HOUR, [1, 2])
        b = FieldSet(CronFieldType.HOUR, 0b110)
        c = FieldSet.from_values(CronFieldType.MINUTE, [1, 2])
        assert a == b
        assert hash(a) == hash(b)
        assert a != c
        assert len({a, b, c}) == 2

    def test_repr(self):
        """Test repr lists members."""
        assert repr(FieldSet.from_values(CronFieldType.HOUR, [2, 1])) == "FieldSet(HOUR, [1, 2])"
