"""Qubit diagnostics subpackage (Layer 0 -- zero internal dependencies)."""

from qubitlib.diagnostics.collector import DiagnosticCollector
from qubitlib.diagnostics.diagnostic import Diagnostic
from qubitlib.diagnostics.severity import DiagnosticSeverity
from qubitlib.diagnostics.span import Span

__all__ = ["Span", "DiagnosticSeverity", "Diagnostic", "DiagnosticCollector"]
