"""Turn a Qubit AST back into source text.

Output uses single spaces around binary operators, ``;`` after every
statement, and only the parentheses needed to keep the tree shape when the
text is parsed again.
"""

from __future__ import annotations

from decimal import Decimal

from qubitlib.parser.ast_nodes import (
    BinaryExpression,
    CallExpression,
    Expression,
    ExpressionStatement,
    Identifier,
    Literal,
    Program,
    Statement,
    UnaryExpression,
    VariableDeclaration,
)

# Binding strength of each binary operator; higher binds tighter.
_PRECEDENCE: dict[str, int] = {
    "or": 1,
    "and": 2,
    "<": 3,
    "<=": 3,
    ">": 3,
    ">=": 3,
    "==": 3,
    "!=": 3,
    "+": 4,
    "-": 4,
    "*": 5,
    "/": 5,
}
_COMPARISON = 3
_UNARY = 6
_ATOM = 7

_STRING_ESCAPES: dict[str, str] = {"\\": "\\\\", '"': '\\"', "\n": "\\n"}


def _precedence(expr: Expression) -> int:
    if isinstance(expr, BinaryExpression):
        return _PRECEDENCE[expr.operator]
    if isinstance(expr, UnaryExpression):
        return _UNARY
    return _ATOM


def _format_number(value: int | float) -> str:
    if isinstance(value, int):
        return str(value)
    # Positional notation only; the lexer has no exponent form.
    text = format(Decimal(repr(value)), "f")
    return text if "." in text else text + ".0"


def format_literal(literal: Literal) -> str:
    value = literal.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return '"' + "".join(_STRING_ESCAPES.get(ch, ch) for ch in value) + '"'
    return _format_number(value)


def _wrap(expr: Expression, min_precedence: int) -> str:
    text = format_expression(expr)
    if _precedence(expr) < min_precedence:
        return f"({text})"
    return text


def format_expression(expr: Expression) -> str:
    """Format a single expression."""
    if isinstance(expr, Literal):
        return format_literal(expr)
    if isinstance(expr, Identifier):
        return expr.name
    if isinstance(expr, CallExpression):
        args = ", ".join(format_expression(a) for a in expr.arguments)
        return f"{expr.callee.name}({args})"
    if isinstance(expr, UnaryExpression):
        # The grammar allows one prefix operator on a primary only.
        return f"{expr.operator}{_wrap(expr.operand, _ATOM)}"
    if isinstance(expr, BinaryExpression):
        prec = _PRECEDENCE[expr.operator]
        if prec == _COMPARISON:
            # Comparisons do not chain, so neither side may be one.
            left = _wrap(expr.left, prec + 1)
        else:
            left = _wrap(expr.left, prec)
        right = _wrap(expr.right, prec + 1)
        return f"{left} {expr.operator} {right}"
    raise TypeError(f"Unknown expression node: {type(expr).__name__}")


def format_statement(stmt: Statement) -> str:
    """Format a statement, including its terminating ';'."""
    if isinstance(stmt, VariableDeclaration):
        return f"var {stmt.name.name} = {format_expression(stmt.initializer)};"
    if isinstance(stmt, ExpressionStatement):
        return f"{format_expression(stmt.expression)};"
    raise TypeError(f"Unknown statement node: {type(stmt).__name__}")


def format_program(program: Program) -> str:
    """Format a whole program, one statement per line."""
    return "".join(format_statement(s) + "\n" for s in program.statements)
