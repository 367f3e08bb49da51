"""qubitlib: lexer and parser for the Qubit rule language."""

from qubitlib.config import ConfigError, ParserOptions, load_options
from qubitlib.diagnostics import Diagnostic, DiagnosticCollector, DiagnosticSeverity, Span
from qubitlib.parser import Program, lex, parse, parse_expression_source

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ConfigError",
    "ParserOptions",
    "load_options",
    "Diagnostic",
    "DiagnosticCollector",
    "DiagnosticSeverity",
    "Span",
    "Program",
    "lex",
    "parse",
    "parse_expression_source",
]
