"""Span of a detected term match."""

from collections.abc import Iterator


class OffsetPosition:
    """A matched span expressed as a (start, end) pair.

    In token-index mode `end` is the index of the last matched token. In
    character-offset mode `end` is the offset just past the last matched
    character, so `text[start:end]` is the matched text.
    """

    __slots__ = ("start", "end")

    def __init__(self, start: int, end: int) -> None:
        self.start = start
        self.end = end

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OffsetPosition):
            return NotImplemented
        return (self.start, self.end) == (other.start, other.end)

    def __hash__(self) -> int:
        return hash((self.start, self.end))

    def __iter__(self) -> Iterator[int]:
        yield self.start
        yield self.end

    def __repr__(self) -> str:
        return f"OffsetPosition(start={self.start}, end={self.end})"

    def to_dict(self) -> dict[str, int]:
        """Return the span as a JSON-serializable dictionary."""
        return {"start": self.start, "end": self.end}
