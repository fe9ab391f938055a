from __future__ import annotations

import operator
import sys
from typing import Iterator, Optional, Sequence

import structlog

from btsearch.core.engine.cancellation import CancellationToken
from btsearch.core.engine.predicate import ValidityPredicate
from btsearch.core.engine.state import UNASSIGNED, EngineStats, SearchState
from btsearch.core.errors import Cancelled, IndexOutOfRange, InvalidArgument, InvalidValue

log = structlog.get_logger()


class BacktrackingEngine:
    """
    Resumable depth-first backtracking search over fixed-size integer assignments.

    A partial assignment maps positions 0..cursor to values in [0, top_limit).
    After each value change the predicate is asked whether the prefix is still
    admissible; a complete solution is a full buffer the predicate accepts.

    Enumeration order is fixed: positions are filled left to right, values are
    tried in ascending order, so the rightmost position changes fastest.

    The search state survives between calls:
      - find_next() after a solution continues with the next one
      - Cancelled pauses the search; calling find_next() again resumes it
      - reset() / seed_from() restart from the beginning or from a given prefix

    Not thread-safe: every call mutates the buffer and cursor in place.
    """

    COUNT_MIN: int = 1
    COUNT_MAX: int = sys.maxsize - 1
    TOP_LIMIT_MIN: int = 1
    TOP_LIMIT_MAX: int = sys.maxsize

    def __init__(self, count: int, top_limit: int, predicate: ValidityPredicate) -> None:
        _require_int_in_range("count", count, self.COUNT_MIN, self.COUNT_MAX)
        _require_int_in_range("top_limit", top_limit, self.TOP_LIMIT_MIN, self.TOP_LIMIT_MAX)
        if predicate is None:
            raise InvalidArgument("predicate", "The validity predicate cannot be None.")
        if not callable(predicate):
            raise InvalidArgument("predicate", f"The validity predicate must be callable, got {type(predicate).__name__}.")

        self._count = count
        self._top_limit = top_limit
        self._predicate = predicate
        self._state = SearchState(count=count)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(count={self._count}, top_limit={self._top_limit}, "
            f"cursor={self._state.cursor})"
        )

    # ---------------- Configuration / inspection ----------------

    @property
    def count(self) -> int:
        return self._count

    @property
    def top_limit(self) -> int:
        return self._top_limit

    @property
    def predicate(self) -> ValidityPredicate:
        return self._predicate

    @property
    def cursor(self) -> int:
        return self._state.cursor

    @property
    def is_exhausted(self) -> bool:
        return self._state.is_exhausted

    @property
    def stats(self) -> EngineStats:
        return self._state.stats

    # ---------------- Repositioning ----------------

    def reset(self) -> None:
        """
        Restart the enumeration from the beginning, discarding all progress.
        """
        self._state.reset()
        log.debug("engine.reset", count=self._count, top_limit=self._top_limit)

    def seed_from(self, values: Sequence[int], offset: int = 0, length: Optional[int] = None) -> None:
        """
        Restart the enumeration from a given partial or complete assignment.

        Copies values[offset:offset + length] into the front of the buffer and
        places the cursor on the last copied position. The next find_next()
        advances that position first, so the seeded prefix is treated as
        already explored: seeding a complete solution resumes right after it,
        and an empty seed leaves the engine exhausted.

        The prefix is NOT checked against the predicate. Supplying a prefix the
        predicate would reject leaves the subsequent search unspecified.

        Raises IndexOutOfRange / InvalidValue without touching the engine state.
        """
        source_length = len(values)
        if length is None:
            length = source_length - offset
        if offset < 0 or length < 0 or offset + length > source_length or length > self._count:
            raise IndexOutOfRange(
                offset=offset,
                length=length,
                source_length=source_length,
                capacity=self._count,
            )

        window: list[int] = []
        for position in range(length):
            raw = values[offset + position]
            if isinstance(raw, bool):
                raise InvalidValue(value=raw, position=position, top_limit=self._top_limit)
            try:
                value = operator.index(raw)
            except TypeError:
                raise InvalidValue(value=raw, position=position, top_limit=self._top_limit) from None
            if not 0 <= value < self._top_limit:
                raise InvalidValue(value=raw, position=position, top_limit=self._top_limit)
            window.append(value)

        self._state.load(window)
        log.debug("engine.seeded", length=length, cursor=self._state.cursor)

    # ---------------- Enumeration ----------------

    def find_next(self, cancel: Optional[CancellationToken] = None) -> Optional[list[int]]:
        """
        Advance to the next complete solution and return an independent copy.

        Returns None once the search space is exhausted (and keeps returning
        None until reset() / seed_from()). Raises Cancelled if `cancel` is set
        while searching; the search can be resumed by calling again.
        """
        if not self._advance(cancel):
            return None
        return self._state.buffer.tolist()

    def find_next_view(self, cancel: Optional[CancellationToken] = None) -> Optional[memoryview]:
        """
        Zero-copy variant of find_next().

        Returns a read-only view over the live buffer. The view is only valid
        until the next find_next*/reset/seed_from call on this engine; after
        that it shows whatever the search has written since.
        """
        if not self._advance(cancel):
            return None
        return memoryview(self._state.buffer).toreadonly()

    def iter_solutions(self, cancel: Optional[CancellationToken] = None) -> Iterator[list[int]]:
        """
        Yield copies of the remaining solutions until the search is exhausted.
        """
        while True:
            solution = self.find_next(cancel)
            if solution is None:
                return
            yield solution

    def _advance(self, cancel: Optional[CancellationToken]) -> bool:
        state = self._state
        if state.is_exhausted:
            return False

        buf = state.buffer
        stats = state.stats
        top = self._top_limit
        last = self._count - 1
        predicate = self._predicate
        view = memoryview(buf).toreadonly()

        cursor = state.cursor
        try:
            while cursor >= 0:
                if cancel is not None and cancel.is_set():
                    log.info("engine.cancelled", cursor=cursor, steps=stats.steps)
                    raise Cancelled(cursor=cursor)

                stats.steps += 1
                buf[cursor] += 1
                if buf[cursor] == top:
                    # domain exhausted at this position
                    stats.backtracks += 1
                    cursor -= 1
                    continue

                stats.predicate_calls += 1
                if not predicate(view, cursor):
                    continue

                if cursor == last:
                    stats.solutions += 1
                    return True

                cursor += 1
                buf[cursor] = UNASSIGNED
        finally:
            state.cursor = cursor

        log.info("engine.exhausted", solutions=stats.solutions, steps=stats.steps)
        return False


def _require_int_in_range(name: str, value: object, lower: int, upper: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not lower <= value <= upper:
        raise InvalidArgument.out_of_range(name, lower, upper, value)
