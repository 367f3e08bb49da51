"""Source spans for Qubit tokens, AST nodes and diagnostics."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Span:
    """A half-open range ``[start, end)`` of character offsets in a source string.

    ``line`` and ``column`` locate the first character; ``end_line`` and
    ``end_column`` locate the position just past the last one.  Lines and
    columns are 1-indexed, offsets are 0-indexed.
    """

    file: str
    start: int
    end: int
    line: int
    column: int
    end_line: int
    end_column: int

    def __len__(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"

    def merge(self, other: Span) -> Span:
        """Return the smallest span covering both *self* and *other*."""
        first = self if self.start <= other.start else other
        last = self if self.end >= other.end else other
        return Span(
            file=self.file,
            start=first.start,
            end=last.end,
            line=first.line,
            column=first.column,
            end_line=last.end_line,
            end_column=last.end_column,
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "start": self.start,
            "end": self.end,
            "line": self.line,
            "column": self.column,
            "end_line": self.end_line,
            "end_column": self.end_column,
        }
