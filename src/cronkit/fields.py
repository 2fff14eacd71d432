"""Field types, constraints and bitmask-backed value sets.

Each of the five cron fields is stored as a :class:`FieldSet`, an immutable
set of integers packed into a single Python ``int`` where bit ``n`` is set
when value ``n`` is a member. Membership is a shift and a mask, and finding
the next member at or above a value is a couple of bit operations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, Iterator


# =============================================================================
# Field Types
# =============================================================================


class CronFieldType(Enum):
    """Types of cron fields, in expression order."""

    MINUTE = auto()
    HOUR = auto()
    DAY_OF_MONTH = auto()
    MONTH = auto()
    DAY_OF_WEEK = auto()


@dataclass(frozen=True)
class FieldConstraints:
    """Constraints for a cron field."""

    min_value: int
    max_value: int
    names: dict[str, int] = field(default_factory=dict)
    supports_question: bool = False

    @property
    def span(self) -> int:
        return self.max_value - self.min_value + 1

    @property
    def max_step(self) -> int:
        """Largest step a ``/`` item may use."""
        return self.max_value - self.min_value

    @property
    def full_mask(self) -> int:
        return ((1 << self.span) - 1) << self.min_value


FIELD_CONSTRAINTS: dict[CronFieldType, FieldConstraints] = {
    CronFieldType.MINUTE: FieldConstraints(0, 59),
    CronFieldType.HOUR: FieldConstraints(0, 23),
    CronFieldType.DAY_OF_MONTH: FieldConstraints(1, 31, supports_question=True),
    CronFieldType.MONTH: FieldConstraints(
        1, 12,
        names={
            "JAN": 1, "FEB": 2, "MAR": 3, "APR": 4,
            "MAY": 5, "JUN": 6, "JUL": 7, "AUG": 8,
            "SEP": 9, "OCT": 10, "NOV": 11, "DEC": 12,
        },
    ),
    CronFieldType.DAY_OF_WEEK: FieldConstraints(
        0, 6,
        names={
            "SUN": 0, "MON": 1, "TUE": 2, "WED": 3,
            "THU": 4, "FRI": 5, "SAT": 6,
        },
        supports_question=True,
    ),
}

FIELD_ORDER: tuple[CronFieldType, ...] = (
    CronFieldType.MINUTE,
    CronFieldType.HOUR,
    CronFieldType.DAY_OF_MONTH,
    CronFieldType.MONTH,
    CronFieldType.DAY_OF_WEEK,
)


# =============================================================================
# Field Set
# =============================================================================


class FieldSet:
    """Immutable set of values for one cron field.

    Attributes:
        field_type: The field this set belongs to.
        mask: Bitmask of members; bit ``n`` set means ``n`` is a member.
    """

    __slots__ = ("_field_type", "_mask")

    def __init__(self, field_type: CronFieldType, mask: int) -> None:
        constraints = FIELD_CONSTRAINTS[field_type]
        if mask == 0:
            raise ValueError(f"{field_type.name} set must not be empty")
        if mask & ~constraints.full_mask:
            raise ValueError(f"{field_type.name} set has values outside its range")
        self._field_type = field_type
        self._mask = mask

    @classmethod
    def from_values(cls, field_type: CronFieldType, values: Iterable[int]) -> "FieldSet":
        mask = 0
        for value in values:
            mask |= 1 << value
        return cls(field_type, mask)

    @classmethod
    def full(cls, field_type: CronFieldType) -> "FieldSet":
        """Set containing every value of the field's domain."""
        return cls(field_type, FIELD_CONSTRAINTS[field_type].full_mask)

    @property
    def field_type(self) -> CronFieldType:
        return self._field_type

    @property
    def mask(self) -> int:
        return self._mask

    @property
    def constraints(self) -> FieldConstraints:
        return FIELD_CONSTRAINTS[self._field_type]

    @property
    def values(self) -> frozenset[int]:
        return frozenset(self)

    @property
    def is_full(self) -> bool:
        """True if every value of the domain is a member."""
        return self._mask == self.constraints.full_mask

    def first(self) -> int:
        """Smallest member."""
        return (self._mask & -self._mask).bit_length() - 1

    def next_at_or_after(self, value: int) -> int | None:
        """Smallest member ``>= value``, or None if there is none.

        Args:
            value: Lower bound (inclusive); may exceed the domain.
        """
        if value < 0:
            value = 0
        remaining = (self._mask >> value) << value
        if remaining == 0:
            return None
        return (remaining & -remaining).bit_length() - 1

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, int) or value < 0:
            return False
        return bool((self._mask >> value) & 1)

    def __iter__(self) -> Iterator[int]:
        mask = self._mask
        while mask:
            low = mask & -mask
            yield low.bit_length() - 1
            mask ^= low

    def __len__(self) -> int:
        return bin(self._mask).count("1")

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FieldSet):
            return self._field_type == other._field_type and self._mask == other._mask
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._field_type, self._mask))

    def __repr__(self) -> str:
        return f"FieldSet({self._field_type.name}, {sorted(self)!r})"
