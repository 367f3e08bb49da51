"""Lexer (tokenizer) for Qubit rule source."""

from __future__ import annotations

import logging
import math

from qubitlib.diagnostics.collector import DiagnosticCollector
from qubitlib.diagnostics.span import Span
from qubitlib.parser.tokens import KEYWORDS, Token, TokenKind

logger = logging.getLogger(__name__)

_ESCAPES: dict[str, str] = {'"': '"', "\\": "\\", "n": "\n"}


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_ident_start(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


def _is_ident_part(ch: str) -> bool:
    return ch.isalpha() or _is_digit(ch) or ch == "_"


class Lexer:
    """Tokenize Qubit source into a flat token stream.

    The lexer skips whitespace and ``//`` comments and recognizes numbers,
    strings, identifiers, keywords, operators and punctuation.  Malformed
    input never stops the scan: each bad character, malformed or oversized
    number and unterminated string becomes an INVALID token plus a diagnostic, and
    scanning resumes right after it.  The stream always ends in one EOF.
    """

    # Operators and punctuation that are a single character long.
    _SINGLE_CHAR: dict[str, TokenKind] = {
        "=": TokenKind.EQUAL,
        "<": TokenKind.LESS,
        ">": TokenKind.GREATER,
        "!": TokenKind.BANG,
        "+": TokenKind.PLUS,
        "-": TokenKind.MINUS,
        "*": TokenKind.STAR,
        "/": TokenKind.SLASH,
        ";": TokenKind.SEMICOLON,
        ",": TokenKind.COMMA,
        "(": TokenKind.LPAREN,
        ")": TokenKind.RPAREN,
    }

    # Two-character operators, tried before their one-character prefixes.
    _DOUBLE_CHAR: dict[str, TokenKind] = {
        "==": TokenKind.EQUAL_EQUAL,
        "!=": TokenKind.BANG_EQUAL,
        "<=": TokenKind.LESS_EQUAL,
        ">=": TokenKind.GREATER_EQUAL,
    }

    def __init__(
        self,
        source: str,
        filename: str = "<string>",
        diagnostics: DiagnosticCollector | None = None,
    ) -> None:
        self._source = source
        self._filename = filename
        self._diag = diagnostics if diagnostics is not None else DiagnosticCollector()
        self._pos = 0
        self._line = 1
        self._col = 1

    # ------------------------------------------------------------------
    # Helper methods
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> str:
        """Return character at current position + offset, or '' at EOF."""
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _advance(self) -> str:
        """Consume and return the current character, updating line/col."""
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _at_end(self) -> bool:
        return self._pos >= len(self._source)

    def _span_from(self, start: int, line: int, col: int) -> Span:
        """Span from a saved start position up to the current position."""
        return Span(
            file=self._filename,
            start=start,
            end=self._pos,
            line=line,
            column=col,
            end_line=self._line,
            end_column=self._col,
        )

    def _token(
        self,
        kind: TokenKind,
        start: int,
        line: int,
        col: int,
        value: int | float | str | None = None,
    ) -> Token:
        return Token(kind, self._source[start : self._pos], self._span_from(start, line, col), value)

    # ------------------------------------------------------------------
    # Scanning helpers
    # ------------------------------------------------------------------

    def _skip_comment(self) -> None:
        """Skip from '//' to end of line (the newline itself is NOT consumed)."""
        while not self._at_end() and self._peek() != "\n":
            self._advance()

    def _scan_string(self, start: int, line: int, col: int) -> Token:
        """Scan a double-quoted string literal. Opening '"' already consumed."""
        chars: list[str] = []
        while not self._at_end():
            ch = self._advance()
            if ch == '"':
                return self._token(TokenKind.STRING, start, line, col, "".join(chars))
            if ch == "\\":
                if self._at_end():
                    break
                esc_start, esc_line, esc_col = self._pos - 1, self._line, self._col - 1
                esc = self._advance()
                if esc in _ESCAPES:
                    chars.append(_ESCAPES[esc])
                else:
                    self._diag.error(
                        f"Unknown escape sequence '\\{esc}' in string literal",
                        self._span_from(esc_start, esc_line, esc_col),
                    )
                    chars.append("\\" + esc)
            else:
                chars.append(ch)
        # Reached EOF without closing quote
        tok = self._token(TokenKind.INVALID, start, line, col)
        self._diag.error("Unterminated string literal", tok.span)
        return tok

    def _scan_number(self, start: int, line: int, col: int) -> Token:
        """Scan an integer or decimal literal. First digit already consumed."""
        while _is_digit(self._peek()):
            self._advance()

        if self._peek() != ".":
            try:
                value: int | float = int(self._source[start : self._pos])
            except ValueError:
                # Longer than the interpreter's int conversion limit.
                return self._number_too_large(start, line, col)
            return self._token(TokenKind.NUMBER, start, line, col, value)

        self._advance()  # consume '.'
        if not _is_digit(self._peek()):
            tok = self._token(TokenKind.INVALID, start, line, col)
            self._diag.error(
                f"Malformed number literal {tok.lexeme!r}: expected digits after '.'",
                tok.span,
            )
            return tok
        while _is_digit(self._peek()):
            self._advance()
        value = float(self._source[start : self._pos])
        if not math.isfinite(value):
            return self._number_too_large(start, line, col)
        return self._token(TokenKind.NUMBER, start, line, col, value)

    def _number_too_large(self, start: int, line: int, col: int) -> Token:
        tok = self._token(TokenKind.INVALID, start, line, col)
        self._diag.error("Number literal too large", tok.span)
        return tok

    def _scan_identifier_or_keyword(self, start: int, line: int, col: int) -> Token:
        """Scan an identifier or keyword. First char already consumed."""
        while _is_ident_part(self._peek()):
            self._advance()
        kind = KEYWORDS.get(self._source[start : self._pos], TokenKind.IDENT)
        return self._token(kind, start, line, col)

    # ------------------------------------------------------------------
    # Main entry point
    # ------------------------------------------------------------------

    def tokenize(self) -> list[Token]:
        """Tokenize the entire source. Returns list ending with an EOF token."""
        tokens: list[Token] = []

        while not self._at_end():
            ch = self._peek()

            # --- Whitespace ---
            if ch in (" ", "\t", "\r", "\n"):
                self._advance()
                continue

            # --- Comments ---
            if ch == "/" and self._peek(1) == "/":
                self._skip_comment()
                continue

            start, line, col = self._pos, self._line, self._col
            self._advance()

            # --- String literal ---
            if ch == '"':
                tokens.append(self._scan_string(start, line, col))
                continue

            # --- Number literal ---
            if _is_digit(ch):
                tokens.append(self._scan_number(start, line, col))
                continue

            # --- Identifier / keyword ---
            if _is_ident_start(ch):
                tokens.append(self._scan_identifier_or_keyword(start, line, col))
                continue

            # --- Operators and punctuation (longest match first) ---
            double = self._DOUBLE_CHAR.get(ch + self._peek())
            if double is not None:
                self._advance()
                tokens.append(self._token(double, start, line, col))
                continue
            if ch in self._SINGLE_CHAR:
                tokens.append(self._token(self._SINGLE_CHAR[ch], start, line, col))
                continue

            # --- Unknown character ---
            tok = self._token(TokenKind.INVALID, start, line, col)
            self._diag.error(f"Unexpected character: {ch!r}", tok.span)
            tokens.append(tok)

        tokens.append(self._token(TokenKind.EOF, self._pos, self._line, self._col))
        logger.debug("lexed %s: %d tokens", self._filename, len(tokens))
        return tokens


def lex(source: str, filename: str = "<string>") -> tuple[list[Token], DiagnosticCollector]:
    """Tokenize Qubit source code.

    Returns:
        A ``(tokens, diagnostics)`` tuple.
    """
    diag = DiagnosticCollector()
    tokens = Lexer(source, filename, diag).tokenize()
    return tokens, diag
