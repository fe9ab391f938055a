from __future__ import annotations

from typing import Callable, Literal, Mapping, Sequence

from btsearch.core.engine.engine import BacktrackingEngine

ProblemKind = Literal["permutations", "queens"]


def permutations_condition(prefix: Sequence[int], last_index: int) -> bool:
    """
    Reject a value already used at an earlier position.
    """
    candidate = prefix[last_index]
    for i in range(last_index):
        if prefix[i] == candidate:
            return False
    return True


def queens_condition(prefix: Sequence[int], last_index: int) -> bool:
    """
    One queen per row; prefix[row] is its column.

    Reject a column shared with an earlier row, or a square on an earlier
    queen's diagonal (|row delta| == |column delta|).
    """
    column = prefix[last_index]
    for row in range(last_index):
        other = prefix[row]
        if other == column or abs(column - other) == last_index - row:
            return False
    return True


def permutations(n: int) -> BacktrackingEngine:
    """Engine enumerating the n! orderings of [0, n) in lexicographic order."""
    return BacktrackingEngine(n, n, permutations_condition)


def queens(n: int) -> BacktrackingEngine:
    """Engine enumerating the placements of n non-attacking queens on an n x n board."""
    return BacktrackingEngine(n, n, queens_condition)


PROBLEMS: Mapping[str, Callable[[int], BacktrackingEngine]] = {
    "permutations": permutations,
    "queens": queens,
}
