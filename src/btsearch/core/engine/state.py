from __future__ import annotations

from array import array
from dataclasses import asdict, dataclass, field
from typing import Sequence

UNASSIGNED = -1


@dataclass(slots=True)
class EngineStats:
    """
    Observational counters. Never influence the search.
    """

    steps: int = 0
    predicate_calls: int = 0
    backtracks: int = 0
    solutions: int = 0

    def clear(self) -> None:
        self.steps = 0
        self.predicate_calls = 0
        self.backtracks = 0
        self.solutions = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(slots=True)
class SearchState:
    """
    Mutable search state owned by a single engine.

    - buffer: fixed-length assignment buffer; entries are UNASSIGNED or a domain value
    - cursor: highest assigned position, -1 once the search space is exhausted

    Guardrails:
      - the buffer is allocated once and never resized
        (borrowed read-only views over it stay valid for the engine's lifetime)
      - load() writes the prefix only; callers validate before calling it
    """

    count: int
    cursor: int = 0
    buffer: array = field(init=False, repr=False)
    stats: EngineStats = field(default_factory=EngineStats)

    def __post_init__(self) -> None:
        if self.count <= 0:
            raise ValueError("count must be > 0")
        self.buffer = array("q", [UNASSIGNED]) * self.count
        self.reset()

    @property
    def is_exhausted(self) -> bool:
        return self.cursor < 0

    def reset(self) -> None:
        self.cursor = 0
        self.buffer[0] = UNASSIGNED
        self.stats.clear()

    def load(self, values: Sequence[int]) -> None:
        n = len(values)
        if n > self.count:
            raise ValueError("prefix longer than buffer")
        # element-wise: slice assignment is refused while read-only views are exported
        for i, value in enumerate(values):
            self.buffer[i] = value
        self.cursor = n - 1
        self.stats.clear()

    def prefix(self) -> list[int]:
        return self.buffer[: self.cursor + 1].tolist()
