"""Handle-based boundary for embedding the engine.

Foreign callers (FFI layers, RPC servers, plugin hosts) cannot hold Python
objects directly, so they address schedules and iterators through small
immutable :class:`Handle` values issued by a :class:`HandleRegistry`.

Every slot in the registry carries a generation counter that is bumped on
release. A handle remembers the generation it was issued with, so using a
released handle, releasing it twice, or passing an iterator handle where a
schedule handle belongs raises a :class:`~cronkit.exceptions.HandleError`
instead of touching the wrong object.

Results that the underlying engine reports as exceptions collapse at this
boundary into ``None``: a failed parse returns ``None`` and so does an
iterator seeded outside the supported range.

Usage:
    >>> registry = HandleRegistry()
    >>> handle = registry.parse(b"0 0 1 1 *")
    >>> registry.next_after(handle, 1609459200)
    1640995200
    >>> registry.release_schedule(handle)
    >>>
    >>> # Scoped ownership: released exactly once on every exit path
    >>> with registry.open_schedule(b"*/5 * * * *") as handle:
    ...     with registry.open_iterator(handle, 0) as it:
    ...         registry.iter_next(it)
    0
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator

from cronkit.exceptions import (
    CronParseError,
    HandleKindError,
    StaleHandleError,
    TimestampRangeError,
)
from cronkit.iterator import ScheduleIterator
from cronkit.parser import ExpressionInput, parse
from cronkit.schedule import Schedule

logger = logging.getLogger(__name__)


class HandleKind(Enum):
    """What a handle refers to."""

    SCHEDULE = "schedule"
    ITERATOR = "iterator"


@dataclass(frozen=True)
class Handle:
    """Opaque, generation-checked reference into a registry."""

    kind: HandleKind
    index: int
    generation: int


class _Slot:
    __slots__ = ("value", "generation")

    def __init__(self) -> None:
        self.value: Any = None
        self.generation = 0


class HandleRegistry:
    """Arena of schedules and iterators addressed by handles.

    The registry's own tables are guarded by a lock. Individual iterators
    are not: advancing one iterator handle from several threads at once is
    unsupported.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._slots: dict[HandleKind, list[_Slot]] = {kind: [] for kind in HandleKind}
        self._free: dict[HandleKind, list[int]] = {kind: [] for kind in HandleKind}

    # -------------------------------------------------------------------------
    # Arena
    # -------------------------------------------------------------------------

    def _insert(self, kind: HandleKind, value: Any) -> Handle:
        with self._lock:
            slots = self._slots[kind]
            free = self._free[kind]
            if free:
                index = free.pop()
            else:
                index = len(slots)
                slots.append(_Slot())
            slot = slots[index]
            slot.value = value
            handle = Handle(kind, index, slot.generation)
        logger.debug("Issued %s handle %d/%d", kind.value, index, handle.generation)
        return handle

    def _slot_for(self, handle: Handle, kind: HandleKind) -> _Slot:
        # Caller holds the lock.
        if not isinstance(handle, Handle):
            raise HandleKindError(f"Expected a {kind.value} handle, got {type(handle).__name__}")
        if handle.kind is not kind:
            raise HandleKindError(f"Expected a {kind.value} handle, got a {handle.kind.value} handle")
        slots = self._slots[kind]
        if not 0 <= handle.index < len(slots):
            raise StaleHandleError(f"Unknown {kind.value} handle {handle.index}")
        slot = slots[handle.index]
        if slot.generation != handle.generation or slot.value is None:
            raise StaleHandleError(
                f"{kind.value.capitalize()} handle {handle.index} was already released"
            )
        return slot

    def _get(self, handle: Handle, kind: HandleKind) -> Any:
        with self._lock:
            return self._slot_for(handle, kind).value

    def _free_slot(self, slot: _Slot, handle: Handle) -> None:
        # Caller holds the lock.
        slot.value = None
        slot.generation += 1
        self._free[handle.kind].append(handle.index)

    def _release(self, handle: Handle, kind: HandleKind) -> None:
        with self._lock:
            self._free_slot(self._slot_for(handle, kind), handle)
        logger.debug("Released %s handle %d/%d", kind.value, handle.index, handle.generation)

    def is_live(self, handle: Handle) -> bool:
        """Check whether a handle still refers to a live object."""
        if not isinstance(handle, Handle):
            return False
        with self._lock:
            try:
                self._slot_for(handle, handle.kind)
            except (StaleHandleError, HandleKindError):
                return False
        return True

    def live_count(self, kind: HandleKind | None = None) -> int:
        """Number of live handles, optionally of one kind."""
        kinds = [kind] if kind is not None else list(HandleKind)
        with self._lock:
            return sum(
                1 for k in kinds for slot in self._slots[k] if slot.value is not None
            )

    def schedule(self, handle: Handle) -> Schedule:
        """Resolve a schedule handle to its Schedule."""
        return self._get(handle, HandleKind.SCHEDULE)

    def iterator(self, handle: Handle) -> ScheduleIterator:
        """Resolve an iterator handle to its ScheduleIterator."""
        return self._get(handle, HandleKind.ITERATOR)

    # -------------------------------------------------------------------------
    # Schedules
    # -------------------------------------------------------------------------

    def parse(self, data: ExpressionInput, length: int | None = None) -> Handle | None:
        """Parse an expression and register the resulting schedule.

        Args:
            data: Expression bytes (UTF-8) or text.
            length: Number of leading bytes to read; defaults to all of them.

        Returns:
            Schedule handle, or None if the input could not be parsed.
        """
        try:
            schedule = parse(data, length)
        except CronParseError as e:
            logger.debug("Parse failed at boundary: %s", e)
            return None
        return self._insert(HandleKind.SCHEDULE, schedule)

    def release_schedule(self, handle: Handle) -> None:
        """Release a schedule handle.

        Iterators created from the schedule keep working.

        Raises:
            StaleHandleError: If the handle was already released.
        """
        self._release(handle, HandleKind.SCHEDULE)

    def any(self, handle: Handle) -> bool:
        return self.schedule(handle).any()

    def contains(self, handle: Handle, ts: int) -> bool:
        """Check whether the schedule matches ``ts``.

        Raises:
            TimestampRangeError: If ``ts`` is outside the supported domain.
        """
        return self.schedule(handle).contains(ts)

    def next_from(self, handle: Handle, ts: int) -> int | None:
        return self.schedule(handle).next_from(ts)

    def next_after(self, handle: Handle, ts: int) -> int | None:
        return self.schedule(handle).next_after(ts)

    # -------------------------------------------------------------------------
    # Iterators
    # -------------------------------------------------------------------------

    def iter_from(self, handle: Handle, ts: int) -> Handle | None:
        """Create an iterator whose first item is ``next_from(ts)``.

        Returns:
            Iterator handle, or None if ``ts`` is outside the supported domain.
        """
        return self._new_iterator(handle, ts, inclusive=True)

    def iter_after(self, handle: Handle, ts: int) -> Handle | None:
        """Create an iterator whose first item is ``next_after(ts)``."""
        return self._new_iterator(handle, ts, inclusive=False)

    def _new_iterator(self, handle: Handle, ts: int, *, inclusive: bool) -> Handle | None:
        schedule = self.schedule(handle)
        try:
            iterator = ScheduleIterator(schedule, ts, inclusive=inclusive)
        except TimestampRangeError as e:
            logger.debug("Iterator seed rejected at boundary: %s", e)
            return None
        return self._insert(HandleKind.ITERATOR, iterator)

    def iter_next(self, handle: Handle) -> int | None:
        """Advance an iterator; None once it is exhausted, and forever after."""
        return self.iterator(handle).next_timestamp()

    def release_iterator(self, handle: Handle) -> None:
        """Release an iterator handle.

        Raises:
            StaleHandleError: If the handle was already released.
        """
        self._release(handle, HandleKind.ITERATOR)

    # -------------------------------------------------------------------------
    # Scoped Ownership
    # -------------------------------------------------------------------------

    @contextmanager
    def open_schedule(
        self, data: ExpressionInput, length: int | None = None
    ) -> Iterator[Handle]:
        """Parse and register a schedule for the duration of a ``with`` block.

        Unlike :meth:`parse`, failures raise, since there is no handle to
        yield.

        Raises:
            CronParseError: If the input could not be parsed.
        """
        handle = self._insert(HandleKind.SCHEDULE, parse(data, length))
        try:
            yield handle
        finally:
            self._release_if_live(handle)

    @contextmanager
    def open_iterator(
        self, handle: Handle, ts: int, *, inclusive: bool = True
    ) -> Iterator[Handle]:
        """Register an iterator for the duration of a ``with`` block.

        Raises:
            TimestampRangeError: If ``ts`` is outside the supported domain.
        """
        iterator = ScheduleIterator(self.schedule(handle), ts, inclusive=inclusive)
        iter_handle = self._insert(HandleKind.ITERATOR, iterator)
        try:
            yield iter_handle
        finally:
            self._release_if_live(iter_handle)

    def _release_if_live(self, handle: Handle) -> None:
        # The block may have released the handle itself.
        with self._lock:
            try:
                slot = self._slot_for(handle, handle.kind)
            except StaleHandleError:
                return
            self._free_slot(slot, handle)
        logger.debug("Released %s handle %d/%d on scope exit", handle.kind.value, handle.index, handle.generation)


_default_registry: HandleRegistry | None = None
_default_lock = threading.Lock()


def get_registry() -> HandleRegistry:
    """Get the process-wide default registry."""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = HandleRegistry()
        return _default_registry
