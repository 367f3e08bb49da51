"""Qubit parser subpackage (Layer 1 -- depends on diagnostics, config)."""

from qubitlib.parser.ast_nodes import (
    BinaryExpression,
    CallExpression,
    Expression,
    ExpressionStatement,
    Identifier,
    Literal,
    Node,
    Program,
    Statement,
    UnaryExpression,
    VariableDeclaration,
    walk,
)
from qubitlib.parser.errors import NestingLimitError, ParseError
from qubitlib.parser.lexer import Lexer, lex
from qubitlib.parser.parser import Parser, parse, parse_expression_source
from qubitlib.parser.printer import format_expression, format_program, format_statement
from qubitlib.parser.serialize import to_dict, to_json, token_to_dict
from qubitlib.parser.tokens import Token, TokenKind

__all__ = [
    "TokenKind",
    "Token",
    "Lexer",
    "lex",
    "Program",
    "VariableDeclaration",
    "ExpressionStatement",
    "Literal",
    "Identifier",
    "CallExpression",
    "UnaryExpression",
    "BinaryExpression",
    "Expression",
    "Statement",
    "Node",
    "walk",
    "Parser",
    "parse",
    "parse_expression_source",
    "ParseError",
    "NestingLimitError",
    "format_expression",
    "format_statement",
    "format_program",
    "to_dict",
    "to_json",
    "token_to_dict",
]
