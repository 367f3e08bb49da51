"""Token definitions for the Qubit lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from qubitlib.diagnostics.span import Span


class TokenKind(Enum):
    """All token types recognized by the Qubit lexer."""

    # === Literals ===
    NUMBER = auto()
    STRING = auto()
    IDENT = auto()

    # === Keywords ===
    VAR = auto()
    AND = auto()
    OR = auto()
    TRUE = auto()
    FALSE = auto()

    # === Operators ===
    EQUAL = auto()  # =
    EQUAL_EQUAL = auto()  # ==
    BANG_EQUAL = auto()  # !=
    LESS = auto()  # <
    LESS_EQUAL = auto()  # <=
    GREATER = auto()  # >
    GREATER_EQUAL = auto()  # >=
    PLUS = auto()  # +
    MINUS = auto()  # -
    STAR = auto()  # *
    SLASH = auto()  # /
    BANG = auto()  # !

    # === Punctuation ===
    SEMICOLON = auto()  # ;
    COMMA = auto()  # ,
    LPAREN = auto()  # (
    RPAREN = auto()  # )

    # === Special ===
    EOF = auto()
    INVALID = auto()


# Keyword string -> TokenKind mapping.
# Identifiers are checked against this table during lexing.
KEYWORDS: dict[str, TokenKind] = {
    "var": TokenKind.VAR,
    "and": TokenKind.AND,
    "or": TokenKind.OR,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
}

KEYWORD_KINDS: frozenset[TokenKind] = frozenset(KEYWORDS.values())

OPERATOR_KINDS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.EQUAL,
        TokenKind.EQUAL_EQUAL,
        TokenKind.BANG_EQUAL,
        TokenKind.LESS,
        TokenKind.LESS_EQUAL,
        TokenKind.GREATER,
        TokenKind.GREATER_EQUAL,
        TokenKind.PLUS,
        TokenKind.MINUS,
        TokenKind.STAR,
        TokenKind.SLASH,
        TokenKind.BANG,
    }
)

PUNCT_KINDS: frozenset[TokenKind] = frozenset(
    {TokenKind.SEMICOLON, TokenKind.COMMA, TokenKind.LPAREN, TokenKind.RPAREN}
)


@dataclass(frozen=True)
class Token:
    """A single token produced by the Qubit lexer.

    ``value`` holds the decoded literal for NUMBER and STRING tokens and is
    ``None`` for every other kind.
    """

    kind: TokenKind
    lexeme: str
    span: Span
    value: int | float | str | None = None
