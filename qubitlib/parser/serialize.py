"""JSON-ready dumps of tokens and AST nodes."""

from __future__ import annotations

import json
from typing import Any

from qubitlib.parser.ast_nodes import (
    BinaryExpression,
    CallExpression,
    ExpressionStatement,
    Identifier,
    Literal,
    Node,
    Program,
    UnaryExpression,
    VariableDeclaration,
)
from qubitlib.parser.tokens import Token


def _literal_kind(value: object) -> str:
    # bool before int: True is an int in Python.
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return "string"
    return "number"


def to_dict(node: Node, *, include_spans: bool = True) -> dict[str, Any]:
    """Convert *node* and its children to plain dicts tagged with ``"type"``.

    With ``include_spans=False`` the result only describes the tree shape,
    which makes it usable for comparing trees parsed from different text.
    """

    def conv(n: Node) -> dict[str, Any]:
        return to_dict(n, include_spans=include_spans)

    out: dict[str, Any] = {"type": type(node).__name__}
    if isinstance(node, Program):
        out["statements"] = [conv(s) for s in node.statements]
    elif isinstance(node, VariableDeclaration):
        out["name"] = conv(node.name)
        out["initializer"] = conv(node.initializer)
    elif isinstance(node, ExpressionStatement):
        out["expression"] = conv(node.expression)
    elif isinstance(node, Literal):
        out["kind"] = _literal_kind(node.value)
        out["value"] = node.value
    elif isinstance(node, Identifier):
        out["name"] = node.name
    elif isinstance(node, CallExpression):
        out["callee"] = conv(node.callee)
        out["arguments"] = [conv(a) for a in node.arguments]
    elif isinstance(node, UnaryExpression):
        out["operator"] = node.operator
        out["operand"] = conv(node.operand)
    elif isinstance(node, BinaryExpression):
        out["operator"] = node.operator
        out["left"] = conv(node.left)
        out["right"] = conv(node.right)
    else:
        raise TypeError(f"Unknown AST node: {type(node).__name__}")
    if include_spans:
        out["span"] = node.span.to_dict()
    return out


def to_json(node: Node, *, include_spans: bool = True, indent: int | None = 2) -> str:
    """Serialize *node* with :func:`to_dict` and :func:`json.dumps`."""
    return json.dumps(to_dict(node, include_spans=include_spans), indent=indent)


def token_to_dict(token: Token) -> dict[str, Any]:
    return {
        "kind": token.kind.name,
        "lexeme": token.lexeme,
        "value": token.value,
        "span": token.span.to_dict(),
    }
