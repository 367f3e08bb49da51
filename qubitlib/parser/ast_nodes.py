"""AST node types for the Qubit parser.

The tree is a closed union of frozen dataclasses.  There is no shared base
class: consumers dispatch on the concrete node type, and every node owns its
children outright (sequences are tuples, there are no parent links).  Each
node records the :class:`Span` of its full source extent so the evaluator can
report problems against the source text.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union

from qubitlib.diagnostics.span import Span

__all__ = [
    # Expression nodes
    "Literal",
    "Identifier",
    "CallExpression",
    "UnaryExpression",
    "BinaryExpression",
    "Expression",
    # Statement nodes
    "VariableDeclaration",
    "ExpressionStatement",
    "Statement",
    # Program node
    "Program",
    "Node",
    "walk",
]


# ---------------------------------------------------------------------------
# Expression nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Literal:
    """Number, string or boolean literal: ``42``, ``1.5``, ``"abc"``, ``true``."""

    value: int | float | str | bool
    span: Span


@dataclass(frozen=True)
class Identifier:
    """Identifier reference: variable or indicator name."""

    name: str
    span: Span


@dataclass(frozen=True)
class CallExpression:
    """Call: ``callee(arg, arg, ...)``, e.g. ``RSI(14)``."""

    callee: Identifier
    arguments: tuple[Expression, ...]
    span: Span


@dataclass(frozen=True)
class UnaryExpression:
    """Prefix operation: ``-operand`` or ``!operand``."""

    operator: str
    operand: Expression
    span: Span


@dataclass(frozen=True)
class BinaryExpression:
    """Binary operation: ``left operator right``."""

    operator: str
    left: Expression
    right: Expression
    span: Span


Expression = Union[Literal, Identifier, CallExpression, UnaryExpression, BinaryExpression]


# ---------------------------------------------------------------------------
# Statement nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VariableDeclaration:
    """``var NAME = expr;`` declaration."""

    name: Identifier
    initializer: Expression
    span: Span


@dataclass(frozen=True)
class ExpressionStatement:
    """``expr;`` -- a bare rule expression."""

    expression: Expression
    span: Span


# Union of all statement types the parser can produce.
Statement = Union[VariableDeclaration, ExpressionStatement]


# ---------------------------------------------------------------------------
# Program node
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Program:
    """Root of the tree: the statements of one source string, in order."""

    statements: tuple[Statement, ...]
    span: Span


Node = Union[Program, Statement, Expression]


def walk(node: Node) -> Iterator[Node]:
    """Yield *node* and all of its descendants in pre-order."""
    yield node
    if isinstance(node, Program):
        for stmt in node.statements:
            yield from walk(stmt)
    elif isinstance(node, VariableDeclaration):
        yield from walk(node.name)
        yield from walk(node.initializer)
    elif isinstance(node, ExpressionStatement):
        yield from walk(node.expression)
    elif isinstance(node, CallExpression):
        yield from walk(node.callee)
        for arg in node.arguments:
            yield from walk(arg)
    elif isinstance(node, UnaryExpression):
        yield from walk(node.operand)
    elif isinstance(node, BinaryExpression):
        yield from walk(node.left)
        yield from walk(node.right)
    elif not isinstance(node, (Literal, Identifier)):
        raise TypeError(f"Unknown AST node: {type(node).__name__}")
