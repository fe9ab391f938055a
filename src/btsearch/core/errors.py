from __future__ import annotations


class SearchError(Exception):
    """
    Base class for every error raised by the search engine.
    """


class InvalidArgument(SearchError, ValueError):
    """
    Raised when an engine is constructed with an out-of-range parameter
    or a missing predicate. No engine is produced.
    """

    def __init__(self, parameter: str, message: str) -> None:
        self.parameter = parameter
        super().__init__(message)

    @classmethod
    def out_of_range(cls, parameter: str, lower: int, upper: int, actual: object) -> "InvalidArgument":
        return cls(
            parameter,
            f"{parameter} should be between {lower} and {upper}. Actual value: {actual!r}",
        )


class IndexOutOfRange(SearchError, IndexError):
    """
    Raised when a seed's offset/length do not fit the source or the buffer.
    """

    def __init__(self, *, offset: int, length: int, source_length: int, capacity: int) -> None:
        self.offset = offset
        self.length = length
        self.source_length = source_length
        self.capacity = capacity
        super().__init__(
            f"seed window offset={offset} length={length} does not fit "
            f"source_length={source_length} capacity={capacity}"
        )


class InvalidValue(SearchError, ValueError):
    """
    Raised when a seeded value lies outside [0, top_limit).
    """

    def __init__(self, *, value: object, position: int, top_limit: int) -> None:
        self.value = value
        self.position = position
        self.top_limit = top_limit
        super().__init__(f"bad value {value!r} at position {position} (expected 0 <= value < {top_limit})")


class Cancelled(SearchError):
    """
    Raised when a cancellation signal is observed inside the step loop.

    This is a pause, not an abort: the engine keeps its buffer and cursor
    and the next find_next() call continues the same enumeration.
    """

    def __init__(self, *, cursor: int) -> None:
        self.cursor = cursor
        super().__init__(f"search cancelled at cursor={cursor}")
