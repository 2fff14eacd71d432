"""Cron expression parser.

Grammar, per field::

    field := item ("," item)*
    item  := "*" ["/" step]
           | value ["-" value] ["/" step]
    value := digits | name

Day-of-month and day-of-week additionally accept ``?`` as the whole field,
meaning the same as ``*``. Month and weekday fields accept three-letter
English names (``JAN``, ``MON``), case-insensitively. A range whose start is
greater than its end wraps around the field's domain (``22-2`` on hours).

Parsing is all-or-nothing: either a complete :class:`~cronkit.schedule.Schedule`
is returned or :class:`~cronkit.exceptions.CronParseError` is raised.
"""

from __future__ import annotations

import logging
import re
from typing import Union

from cronkit.exceptions import CronParseError, ParseErrorKind
from cronkit.fields import (
    FIELD_CONSTRAINTS,
    FIELD_ORDER,
    CronFieldType,
    FieldConstraints,
    FieldSet,
)
from cronkit.schedule import Schedule

logger = logging.getLogger(__name__)

ExpressionInput = Union[str, bytes, bytearray, memoryview]

_ITEM_PATTERN = re.compile(
    r"^(?:(?P<star>\*)|(?P<start>[0-9A-Za-z]+)(?:-(?P<end>[0-9A-Za-z]+))?)"
    r"(?:/(?P<step>[0-9]+))?$"
)

# ASCII whitespace only; other Unicode spaces are not separators
_WHITESPACE = " \t\r\n\f\v"

_FIELD_PATTERN = re.compile(r"[^ \t\r\n\f\v]+")

_WILDCARD_TOKENS = frozenset({"*", "?"})


class CronParser:
    """Parser for five-field cron expressions.

    Example:
        >>> CronParser("*/15 9-17 * * MON-FRI").parse()
        Schedule('*/15 9-17 * * MON-FRI')
        >>> CronParser(b"0 0 1 1 *").parse()
        Schedule('0 0 1 1 *')
    """

    # Predefined expression macros
    ALIASES: dict[str, str] = {
        "@yearly": "0 0 1 1 *",
        "@annually": "0 0 1 1 *",
        "@monthly": "0 0 1 * *",
        "@weekly": "0 0 * * 0",
        "@daily": "0 0 * * *",
        "@midnight": "0 0 * * *",
        "@hourly": "0 * * * *",
    }

    def __init__(self, expression: ExpressionInput, length: int | None = None) -> None:
        """Initialize parser with expression.

        Args:
            expression: Cron expression as text or raw UTF-8 bytes.
            length: Number of leading bytes (or characters, for text) to read.
                Defaults to the whole input.

        Raises:
            CronParseError: If the bytes are not valid UTF-8 or ``length``
                does not fit the input.
        """
        self._original = self._decode(expression, length)
        stripped = self._original.lstrip(_WHITESPACE)
        # Offset of the first field in the source text
        self._offset = len(self._original) - len(stripped)
        self._expression = self._resolve_alias(stripped.rstrip(_WHITESPACE))

    @property
    def expression(self) -> str:
        """Decoded source text."""
        return self._original

    @staticmethod
    def _decode(expression: ExpressionInput, length: int | None) -> str:
        if length is not None and (length < 0 or length > len(expression)):
            raise CronParseError(
                f"Length {length} does not fit input of size {len(expression)}",
            )

        if isinstance(expression, str):
            return expression if length is None else expression[:length]

        data = bytes(expression)
        if length is not None:
            data = data[:length]
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CronParseError(
                f"Expression is not valid UTF-8: {e.reason}",
                position=e.start,
                kind=ParseErrorKind.ENCODING,
            ) from e

    def _resolve_alias(self, expression: str) -> str:
        """Resolve predefined macros such as ``@daily``."""
        if not expression.startswith("@"):
            return expression
        resolved = self.ALIASES.get(expression.lower())
        if resolved is None:
            raise CronParseError(
                f"Unknown macro: {expression}",
                self._original,
                self._offset,
            )
        return resolved

    def parse(self) -> Schedule:
        """Parse the cron expression.

        Returns:
            The parsed Schedule.

        Raises:
            CronParseError: If expression is invalid.
        """
        matches = list(_FIELD_PATTERN.finditer(self._expression))

        if len(matches) != len(FIELD_ORDER):
            raise CronParseError(
                f"Invalid number of fields: {len(matches)}. Expected 5 fields.",
                self._original,
                kind=ParseErrorKind.FIELD_COUNT,
            )

        sets: list[FieldSet] = []
        wildcards: dict[CronFieldType, bool] = {}
        for match, field_type in zip(matches, FIELD_ORDER):
            text = match.group()
            wildcards[field_type] = text in _WILDCARD_TOKENS
            sets.append(self._parse_field(text, field_type, self._offset + match.start()))

        minutes, hours, days_of_month, months, days_of_week = sets
        return Schedule(
            minutes,
            hours,
            days_of_month,
            months,
            days_of_week,
            dom_is_wildcard=wildcards[CronFieldType.DAY_OF_MONTH],
            dow_is_wildcard=wildcards[CronFieldType.DAY_OF_WEEK],
            expression=self._original.strip(_WHITESPACE),
        )

    def _parse_field(self, text: str, field_type: CronFieldType, position: int) -> FieldSet:
        """Parse a single cron field.

        Args:
            text: Field expression string.
            field_type: Type of this field.
            position: Offset of the field in the expression.

        Returns:
            Parsed FieldSet.
        """
        constraints = FIELD_CONSTRAINTS[field_type]

        if text == "?":
            if not constraints.supports_question:
                raise CronParseError(
                    f"? not supported for {field_type.name}",
                    self._original,
                    position,
                )
            return FieldSet.full(field_type)

        mask = 0
        offset = position
        for item in text.split(","):
            if not item:
                raise CronParseError(
                    f"Empty list item in {field_type.name}",
                    self._original,
                    offset,
                )
            for value in self._parse_item(item, constraints, field_type, offset):
                mask |= 1 << value
            offset += len(item) + 1

        return FieldSet(field_type, mask)

    def _parse_item(
        self,
        item: str,
        constraints: FieldConstraints,
        field_type: CronFieldType,
        position: int,
    ) -> list[int]:
        """Expand one list item to the values it denotes."""
        match = _ITEM_PATTERN.match(item)
        if match is None:
            raise CronParseError(
                f"Invalid {field_type.name} expression: {item}",
                self._original,
                position,
            )

        step = 1
        if match.group("step") is not None:
            step = int(match.group("step"))
            if step < 1 or step > constraints.max_step:
                raise CronParseError(
                    f"Step {step} out of range [1-{constraints.max_step}]",
                    self._original,
                    position,
                    ParseErrorKind.RANGE,
                )

        if match.group("star"):
            return list(range(constraints.min_value, constraints.max_value + 1, step))

        start = self._resolve_value(match.group("start"), constraints, position)

        if match.group("end") is None:
            if match.group("step") is None:
                return [start]
            # n/s runs from n to the end of the domain
            return list(range(start, constraints.max_value + 1, step))

        end = self._resolve_value(match.group("end"), constraints, position)

        if start <= end:
            return list(range(start, end + 1, step))

        # Wraparound, e.g. 22-2 on hours or FRI-MON on weekdays
        sequence = list(range(start, constraints.max_value + 1))
        sequence.extend(range(constraints.min_value, end + 1))
        return sequence[::step]

    def _resolve_value(self, value: str, constraints: FieldConstraints, position: int) -> int:
        """Resolve a value (number or name) to integer."""
        if value.isdigit():
            num = int(value)
            if num < constraints.min_value or num > constraints.max_value:
                raise CronParseError(
                    f"Value {num} out of range "
                    f"[{constraints.min_value}-{constraints.max_value}]",
                    self._original,
                    position,
                    ParseErrorKind.RANGE,
                )
            return num

        named = constraints.names.get(value.upper())
        if named is None:
            raise CronParseError(f"Invalid value: {value}", self._original, position)
        return named


# =============================================================================
# Module Functions
# =============================================================================


def parse(expression: ExpressionInput, length: int | None = None) -> Schedule:
    """Parse a cron expression into a Schedule.

    Args:
        expression: Cron expression as text or raw UTF-8 bytes.
        length: Optional number of leading bytes/characters to read.

    Returns:
        Parsed Schedule.

    Raises:
        CronParseError: If the expression is malformed, out of range or not
            valid UTF-8.
    """
    try:
        return CronParser(expression, length).parse()
    except CronParseError as e:
        logger.debug("Rejected cron expression %r: %s", e.expression or expression, e)
        raise


def validate_expression(expression: ExpressionInput) -> list[str]:
    """Validate a cron expression.

    Args:
        expression: Cron expression to validate.

    Returns:
        List of validation errors (empty if valid).
    """
    errors = []

    try:
        CronParser(expression).parse()
    except CronParseError as e:
        errors.append(str(e))

    return errors


def is_valid_expression(expression: ExpressionInput) -> bool:
    """Check if a cron expression is valid.

    Args:
        expression: Cron expression to check.

    Returns:
        True if valid.
    """
    try:
        CronParser(expression).parse()
        return True
    except CronParseError:
        return False
