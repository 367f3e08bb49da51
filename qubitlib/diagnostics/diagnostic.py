"""Diagnostic message representation for Qubit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from qubitlib.diagnostics.severity import DiagnosticSeverity
from qubitlib.diagnostics.span import Span


@dataclass(frozen=True)
class Diagnostic:
    """A single diagnostic message.

    ``production`` names the grammar rule that was being parsed when the
    problem was found; lexical diagnostics leave it as ``None``.
    """

    severity: DiagnosticSeverity
    message: str
    span: Span | None = None
    production: str | None = None

    def __str__(self) -> str:
        loc = f"{self.span}: " if self.span else ""
        return f"{loc}{self.severity}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity.value,
            "message": self.message,
            "span": self.span.to_dict() if self.span else None,
            "production": self.production,
        }
