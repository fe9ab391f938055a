from __future__ import annotations

from typing import Protocol, Sequence


class ValidityPredicate(Protocol):
    """
    Admissibility test over a partial assignment.

    Called with the assignment buffer and the index of its last filled
    position; returns True if the prefix [0 .. last_index] can still be
    extended to a solution. Must not mutate the buffer (the engine hands
    out a read-only view).
    """

    def __call__(self, prefix: Sequence[int], last_index: int) -> bool:
        ...
