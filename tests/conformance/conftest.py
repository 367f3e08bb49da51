"""Pytest configuration for conformance tests.

Each case is checked by every available runner.  A runner turns source text
into a :class:`ValidationResult`; cases then assert on validity and on
diagnostic text only, so they do not depend on AST details.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from qubitlib.parser import format_program, parse, to_dict


@dataclass
class ValidationResult:
    """Result of validating a Qubit program."""

    valid: bool
    diagnostics: list[str] = field(default_factory=list)
    statements: int = 0


class ParserRunner:
    """Validate by parsing the source once."""

    name = "parser"

    def validate(self, source: str) -> ValidationResult:
        program, diag = parse(source, "<test>")
        return ValidationResult(
            valid=not diag.has_errors(),
            diagnostics=[str(d) for d in diag],
            statements=len(program.statements),
        )


class RoundTripRunner:
    """Validate by parsing, printing and parsing the printed text again.

    The reprinted program must parse cleanly to the same tree shape as the
    statements that survived the first parse.
    """

    name = "roundtrip"

    def validate(self, source: str) -> ValidationResult:
        program, diag = parse(source, "<test>")
        reparsed, rediag = parse(format_program(program), "<reprinted>")
        assert not rediag.has_errors(), rediag.format_all()
        assert to_dict(reparsed, include_spans=False) == to_dict(program, include_spans=False)
        return ValidationResult(
            valid=not diag.has_errors(),
            diagnostics=[str(d) for d in diag],
            statements=len(program.statements),
        )


def get_available_runners():
    """Return list of available conformance runners."""
    return [ParserRunner(), RoundTripRunner()]


@pytest.fixture(params=get_available_runners(), ids=lambda r: r.name)
def runner(request):
    """Provide a conformance runner for testing.

    This fixture is parametrized to run tests against all available runners:
    - parser: a single parse of the source
    - roundtrip: parse, print, re-parse and compare tree shapes
    """
    return request.param


def check_case(result: ValidationResult, expected: str) -> None:
    """Assert a ``"valid"`` or ``"error: <text>"`` expectation."""
    if expected == "valid":
        assert result.valid, f"Expected valid but got errors: {result.diagnostics}"
    else:
        assert not result.valid, "Expected error but got valid"
        error_text = expected.removeprefix("error: ")
        assert any(error_text.lower() in d.lower() for d in result.diagnostics), (
            f"Expected '{error_text}' in diagnostics: {result.diagnostics}"
        )


@pytest.fixture
def check():
    return check_case
