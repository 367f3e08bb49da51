"""Parse error types for the Qubit parser."""

from __future__ import annotations

from qubitlib.diagnostics.span import Span


class ParseError(Exception):
    """Raised inside the parser to unwind to the nearest statement boundary."""

    def __init__(self, message: str, span: Span | None = None) -> None:
        super().__init__(message)
        self.span = span


class NestingLimitError(ParseError):
    """Raised when expressions nest deeper than the configured limit.

    Unlike a plain :class:`ParseError` this ends the whole parse.
    """
