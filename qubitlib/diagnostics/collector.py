"""Diagnostic collector for accumulating messages during lexing and parsing."""

from __future__ import annotations

from collections.abc import Iterator

from qubitlib.diagnostics.diagnostic import Diagnostic
from qubitlib.diagnostics.severity import DiagnosticSeverity
from qubitlib.diagnostics.span import Span


class DiagnosticCollector:
    """Accumulates diagnostics during lexing and parsing."""

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []

    def __len__(self) -> int:
        return len(self._diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(list(self._diagnostics))

    def error(
        self,
        message: str,
        span: Span | None = None,
        *,
        production: str | None = None,
    ) -> None:
        """Record an error diagnostic."""
        self._diagnostics.append(Diagnostic(DiagnosticSeverity.ERROR, message, span, production))

    def has_errors(self) -> bool:
        """Return True if any error diagnostics have been recorded."""
        return any(d.severity == DiagnosticSeverity.ERROR for d in self._diagnostics)

    def get_all(self) -> list[Diagnostic]:
        """Return a copy of all collected diagnostics."""
        return list(self._diagnostics)

    def format_all(self) -> str:
        """Format all diagnostics as a newline-separated string."""
        return "\n".join(str(d) for d in self._diagnostics)
