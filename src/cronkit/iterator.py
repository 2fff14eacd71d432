"""Lazy iteration over matching timestamps."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

from cronkit import search
from cronkit.gregorian import check_timestamp

if TYPE_CHECKING:
    from cronkit.schedule import Schedule


class ScheduleIterator(Iterator[int]):
    """Iterator over matching timestamps.

    Each item is the next match after the previous one, so the sequence is
    strictly increasing. Once the search reports no further match the
    iterator is exhausted for good; it is not restartable. A single iterator
    must not be advanced from several threads at once.

    Example:
        >>> it = Schedule.parse("*/10 * * * *").iter_from(0)
        >>> it.take(3)
        [0, 600, 1200]
    """

    __slots__ = ("_schedule", "_cursor", "_pending_start", "_exhausted")

    def __init__(self, schedule: "Schedule", start: int, *, inclusive: bool = True) -> None:
        """Initialize iterator.

        Args:
            schedule: Schedule to iterate.
            start: Seed timestamp.
            inclusive: If True the first item may be ``start`` itself.

        Raises:
            TimestampRangeError: If ``start`` is outside the supported domain.
        """
        check_timestamp(start)
        self._schedule = schedule
        self._cursor = start
        self._pending_start = inclusive
        self._exhausted = False

    @property
    def schedule(self) -> "Schedule":
        return self._schedule

    @property
    def cursor(self) -> int:
        """Last produced timestamp, or the seed before the first production."""
        return self._cursor

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def next_timestamp(self) -> int | None:
        """Advance and return the next match, or None once exhausted."""
        if self._exhausted:
            return None

        if self._pending_start:
            self._pending_start = False
            found = search.next_from(self._schedule, self._cursor)
        else:
            found = search.next_after(self._schedule, self._cursor)

        if found is None:
            self._exhausted = True
            return None

        self._cursor = found
        return found

    def peek(self) -> int | None:
        """Return the next match without consuming it."""
        if self._exhausted:
            return None
        if self._pending_start:
            return search.next_from(self._schedule, self._cursor)
        return search.next_after(self._schedule, self._cursor)

    def take(self, n: int) -> list[int]:
        """Consume up to n matches."""
        results = []
        for _ in range(n):
            found = self.next_timestamp()
            if found is None:
                break
            results.append(found)
        return results

    def __iter__(self) -> "ScheduleIterator":
        return self

    def __next__(self) -> int:
        found = self.next_timestamp()
        if found is None:
            raise StopIteration
        return found

    def __repr__(self) -> str:
        state = "exhausted" if self._exhausted else f"cursor={self._cursor}"
        return f"ScheduleIterator({self._schedule!r}, {state})"
