"""Tests for AST printing and JSON serialization."""

from __future__ import annotations

import json

import pytest

from qubitlib.diagnostics.span import Span
from qubitlib.parser.ast_nodes import (
    BinaryExpression,
    ExpressionStatement,
    Identifier,
    Literal,
    Program,
    UnaryExpression,
)
from qubitlib.parser.lexer import lex
from qubitlib.parser.parser import parse
from qubitlib.parser.printer import format_expression, format_literal, format_program
from qubitlib.parser.serialize import to_dict, to_json, token_to_dict

SPAN = Span("<test>", 0, 0, 1, 1, 1, 1)


def parse_ok(source: str) -> Program:
    ast, diag = parse(source, "<test>")
    assert len(diag) == 0, diag.format_all()
    return ast


def shape(program: Program) -> dict:
    return to_dict(program, include_spans=False)


# ---------------------------------------------------------------------------
# Printer
# ---------------------------------------------------------------------------


class TestFormatExpression:
    @pytest.mark.parametrize(
        "source,expected",
        [
            ("RSI(14)<30", "RSI(14) < 30"),
            ("a+b*c", "a + b * c"),
            ("(a+b)*c", "(a + b) * c"),
            ("a-(b-c)", "a - (b - c)"),
            ("(a-b)-c", "a - b - c"),
            ("a or (b and c)", "a or b and c"),
            ("(a or b) and c", "(a or b) and c"),
            ("(a < b) == c", "(a < b) == c"),
            ("a == (b < c)", "a == (b < c)"),
            ("-(a + b)", "-(a + b)"),
            ("-(-a)", "-(-a)"),
            ("!f()", "!f()"),
            ("-a * b", "-a * b"),
            ("MACD(12,26 , 9)", "MACD(12, 26, 9)"),
        ],
    )
    def test_format(self, source: str, expected: str) -> None:
        stmt = parse_ok(source).statements[0]
        assert format_expression(stmt.expression) == expected

    def test_unknown_node_rejected(self) -> None:
        with pytest.raises(TypeError):
            format_expression(object())  # type: ignore[arg-type]


class TestFormatLiteral:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (42, "42"),
            (0.5, "0.5"),
            (2.0, "2.0"),
            (1e20, "100000000000000000000.0"),
            (1e-7, "0.0000001"),
            (True, "true"),
            (False, "false"),
            ('say "hi"\n\\', '"say \\"hi\\"\\n\\\\"'),
        ],
    )
    def test_literal(self, value, expected: str) -> None:
        assert format_literal(Literal(value=value, span=SPAN)) == expected


class TestFormatProgram:
    def test_statements_terminated(self) -> None:
        ast = parse_ok("var x = 42\n")
        assert format_program(ast) == "var x = 42;\n"

    def test_empty_program(self) -> None:
        assert format_program(parse_ok("")) == ""

    def test_hand_built_tree(self) -> None:
        # (a < b) < c cannot come out of the parser but must still print
        # as something that parses back to the same shape.
        inner = BinaryExpression("<", Identifier("a", SPAN), Identifier("b", SPAN), SPAN)
        outer = BinaryExpression("<", inner, Identifier("c", SPAN), SPAN)
        program = Program((ExpressionStatement(outer, SPAN),), SPAN)
        text = format_program(program)
        assert text == "(a < b) < c;\n"
        assert shape(parse_ok(text)) == shape(program)

    def test_nested_unary_hand_built(self) -> None:
        expr = UnaryExpression("!", UnaryExpression("!", Identifier("x", SPAN), SPAN), SPAN)
        assert format_expression(expr) == "!(!x)"


class TestIdempotence:
    @pytest.mark.parametrize(
        "source",
        [
            "var x = 42;",
            "RSI(14) < 30 and EMA(9) > EMA(21)",
            "var signal = (close - open) / open * 100 >= 2.5 or !halted;",
            'var name = "line\\nbreak \\"quoted\\"";',
            "a - (b - c) - -d; (x or y) and (p == (q != r));",
            "f(g(h(1, 2), -3), (4 + 5) * 6);",
            "var big = 123456789012345678901234567890.125;",
        ],
    )
    def test_reparse_is_structurally_identical(self, source: str) -> None:
        first = parse_ok(source)
        text = format_program(first)
        second = parse_ok(text)
        assert shape(second) == shape(first)
        # Printing is stable once normalized.
        assert format_program(second) == text

    @pytest.mark.parametrize("op", ["+", "and", "or"])
    def test_longest_accepted_chain(self, op: str) -> None:
        first = parse_ok(f" {op} ".join(["x"] * 64))
        text = format_program(first)
        assert shape(parse_ok(text)) == shape(first)
        assert json.loads(to_json(first)) == to_dict(first)


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


class TestToDict:
    def test_variable_declaration(self) -> None:
        out = to_dict(parse_ok("var x = 42;"), include_spans=False)
        assert out == {
            "type": "Program",
            "statements": [
                {
                    "type": "VariableDeclaration",
                    "name": {"type": "Identifier", "name": "x"},
                    "initializer": {"type": "Literal", "kind": "number", "value": 42},
                }
            ],
        }

    def test_rule_expression(self) -> None:
        out = to_dict(parse_ok("RSI(14) < 30").statements[0], include_spans=False)
        assert out == {
            "type": "ExpressionStatement",
            "expression": {
                "type": "BinaryExpression",
                "operator": "<",
                "left": {
                    "type": "CallExpression",
                    "callee": {"type": "Identifier", "name": "RSI"},
                    "arguments": [{"type": "Literal", "kind": "number", "value": 14}],
                },
                "right": {"type": "Literal", "kind": "number", "value": 30},
            },
        }

    def test_booleans_differ_from_numbers(self) -> None:
        one = to_dict(Literal(1, SPAN))
        true = to_dict(Literal(True, SPAN))
        assert one != true
        assert true["kind"] == "boolean"

    def test_spans_included_by_default(self) -> None:
        out = to_dict(parse_ok("x;"))
        assert out["span"]["end"] == 2
        assert out["statements"][0]["expression"]["span"] == {
            "start": 0,
            "end": 1,
            "line": 1,
            "column": 1,
            "end_line": 1,
            "end_column": 2,
        }

    def test_unary(self) -> None:
        out = to_dict(parse_ok("!x").statements[0].expression, include_spans=False)
        assert out == {
            "type": "UnaryExpression",
            "operator": "!",
            "operand": {"type": "Identifier", "name": "x"},
        }


class TestToJson:
    def test_round_trips_through_json(self) -> None:
        program = parse_ok('var s = "a"; s == "a"')
        assert json.loads(to_json(program)) == to_dict(program)

    def test_compact(self) -> None:
        assert "\n" not in to_json(parse_ok("x"), indent=None)


class TestTokenToDict:
    def test_number_token(self) -> None:
        tokens, _ = lex("3.5")
        out = token_to_dict(tokens[0])
        assert out["kind"] == "NUMBER"
        assert out["lexeme"] == "3.5"
        assert out["value"] == 3.5
        assert out["span"]["end"] == 3

    def test_eof_token(self) -> None:
        tokens, _ = lex("")
        assert token_to_dict(tokens[0])["kind"] == "EOF"
