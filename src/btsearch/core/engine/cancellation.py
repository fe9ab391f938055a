from __future__ import annotations

import time
from typing import Protocol


class CancellationToken(Protocol):
    """
    Cooperative cancellation signal, polled once per engine step.

    threading.Event satisfies this protocol as-is.
    """

    def is_set(self) -> bool:
        ...


class Deadline:
    """
    Time-budget cancellation signal.

    Becomes set once `seconds` have elapsed since construction (monotonic clock).
    """

    __slots__ = ("_expires_at",)

    def __init__(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("seconds must be >= 0")
        self._expires_at = time.monotonic() + seconds

    @property
    def remaining(self) -> float:
        return max(0.0, self._expires_at - time.monotonic())

    def is_set(self) -> bool:
        return time.monotonic() >= self._expires_at
