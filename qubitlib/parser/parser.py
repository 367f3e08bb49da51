"""Recursive-descent parser for Qubit rule source.

Handles:
- ``var NAME = expr;``   variable declarations
- ``expr;``              rule expressions (the final ``;`` may be omitted)
- Expressions with logical, comparison, additive and multiplicative tiers,
  prefix ``-`` / ``!``, calls such as ``RSI(14)`` and parentheses

Syntax errors are recorded as diagnostics.  The parser then skips past the
next ``;`` and carries on with the following statement, so one run can
report several independent mistakes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace

from qubitlib.config import ParserOptions
from qubitlib.diagnostics.collector import DiagnosticCollector
from qubitlib.diagnostics.span import Span
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
from qubitlib.parser.errors import NestingLimitError, ParseError
from qubitlib.parser.lexer import Lexer
from qubitlib.parser.tokens import Token, TokenKind

logger = logging.getLogger(__name__)

_COMPARISON_TOKENS: tuple[TokenKind, ...] = (
    TokenKind.LESS,
    TokenKind.LESS_EQUAL,
    TokenKind.GREATER,
    TokenKind.GREATER_EQUAL,
    TokenKind.EQUAL_EQUAL,
    TokenKind.BANG_EQUAL,
)


def _describe(tok: Token) -> str:
    if tok.kind == TokenKind.EOF:
        return "end of input"
    return f"{tok.kind.name} {tok.lexeme!r}"


class Parser:
    """Recursive-descent parser for Qubit programs."""

    def __init__(
        self,
        tokens: list[Token],
        diagnostics: DiagnosticCollector | None = None,
        options: ParserOptions | None = None,
    ) -> None:
        if not tokens or tokens[-1].kind != TokenKind.EOF:
            raise ValueError("token stream must end with an EOF token")
        self._tokens = tokens
        self._diag = diagnostics if diagnostics is not None else DiagnosticCollector()
        self._max_depth = (options or ParserOptions()).max_depth
        self._pos = 0
        self._depth = 0

    # ------------------------------------------------------------------
    # Token stream helpers
    # ------------------------------------------------------------------

    def _peek(self) -> Token:
        """Return the current token without consuming it."""
        return self._tokens[self._pos]

    def _at_end(self) -> bool:
        return self._peek().kind == TokenKind.EOF

    def _advance(self) -> Token:
        """Consume and return the current token."""
        tok = self._tokens[self._pos]
        if tok.kind != TokenKind.EOF:
            self._pos += 1
        return tok

    def _check(self, *kinds: TokenKind) -> bool:
        """Return True if the current token is any of *kinds*."""
        return self._peek().kind in kinds

    def _match(self, *kinds: TokenKind) -> Token | None:
        """If current token matches any of *kinds*, consume and return it."""
        if self._check(*kinds):
            return self._advance()
        return None

    def _error(self, message: str, tok: Token, production: str) -> ParseError:
        """Record a syntax error at *tok* and return the exception to raise.

        INVALID tokens were already reported by the lexer, so they only
        trigger recovery and no second diagnostic.
        """
        if tok.kind != TokenKind.INVALID:
            self._diag.error(
                f"{message} (got {_describe(tok)})",
                tok.span,
                production=production,
            )
        return ParseError(message, tok.span)

    def _expect(self, kind: TokenKind, message: str, production: str) -> Token:
        """Consume a token of *kind* or report an error."""
        tok = self._peek()
        if tok.kind == kind:
            return self._advance()
        raise self._error(message, tok, production)

    def _synchronize(self) -> None:
        """Discard tokens up to and including the next ';' (or up to EOF)."""
        while not self._at_end():
            if self._advance().kind == TokenKind.SEMICOLON:
                return

    # ------------------------------------------------------------------
    # Top-level program parsing
    # ------------------------------------------------------------------

    def parse_program(self) -> Program:
        """Parse a complete Qubit program."""
        stmts: list[Statement] = []
        while not self._at_end():
            try:
                stmts.append(self.parse_statement())
            except NestingLimitError:
                logger.warning("nesting limit of %d reached, parse stopped", self._max_depth)
                break
            except ParseError:
                self._synchronize()

        eof = self._tokens[-1].span
        span = Span(
            file=eof.file,
            start=0,
            end=eof.end,
            line=1,
            column=1,
            end_line=eof.end_line,
            end_column=eof.end_column,
        )
        return Program(statements=tuple(stmts), span=span)

    def parse_statement(self) -> Statement:
        """Parse ``var NAME = expr;`` or ``expr;``."""
        if self._check(TokenKind.VAR):
            decl = self._parse_var_decl()
            end = self._finish_statement("Expected ';' after variable declaration", "VarDecl")
            return replace(decl, span=decl.span.merge(end)) if end else decl

        expr = self.parse_expression()
        stmt = ExpressionStatement(expression=expr, span=expr.span)
        end = self._finish_statement("Expected ';' after expression", "ExprStmt")
        return replace(stmt, span=stmt.span.merge(end)) if end else stmt

    def _finish_statement(self, message: str, production: str) -> Span | None:
        """Consume the statement terminator and return its span.

        The last statement may end at EOF without a ';', in which case
        ``None`` is returned.
        """
        semi = self._match(TokenKind.SEMICOLON)
        if semi is not None:
            return semi.span
        if self._at_end():
            return None
        raise self._error(message, self._peek(), production)

    # ------------------------------------------------------------------
    # var declaration
    # ------------------------------------------------------------------

    def _parse_var_decl(self) -> VariableDeclaration:
        """Parse ``var NAME = expr`` (without the terminator)."""
        var_tok = self._expect(TokenKind.VAR, "Expected 'var'", "VarDecl")
        name_tok = self._expect(TokenKind.IDENT, "Expected variable name after 'var'", "VarDecl")
        self._expect(TokenKind.EQUAL, "Expected '=' after variable name", "VarDecl")
        initializer = self.parse_expression()
        return VariableDeclaration(
            name=Identifier(name=name_tok.lexeme, span=name_tok.span),
            initializer=initializer,
            span=var_tok.span.merge(initializer.span),
        )

    # ------------------------------------------------------------------
    # Standalone rule expressions
    # ------------------------------------------------------------------

    def parse_rule(self) -> Expression | None:
        """Parse exactly one expression, optionally followed by ';'.

        Returns ``None`` when the input is not a single well-formed
        expression; the reason is in the diagnostics.
        """
        try:
            expr = self.parse_expression()
            self._match(TokenKind.SEMICOLON)
            self._expect(TokenKind.EOF, "Expected end of input after expression", "Rule")
        except ParseError:
            return None
        return expr

    # ------------------------------------------------------------------
    # Expression parsing (one method per precedence tier)
    # ------------------------------------------------------------------

    def parse_expression(self) -> Expression:
        """Parse an expression, enforcing the nesting limit."""
        depth = self._depth
        try:
            self._nest(self._peek())
            return self._parse_or()
        finally:
            self._depth = depth

    def _nest(self, tok: Token) -> None:
        """Enter one more level of tree depth at *tok*."""
        self._depth += 1
        if self._depth > self._max_depth:
            message = f"Expression nesting exceeds maximum depth of {self._max_depth}"
            self._diag.error(message, tok.span, production="Expression")
            raise NestingLimitError(message, tok.span)

    def _binary(self, tok: Token, left: Expression, right: Expression) -> BinaryExpression:
        return BinaryExpression(
            operator=tok.lexeme,
            left=left,
            right=right,
            span=left.span.merge(right.span),
        )

    def _fold(self, operand: Callable[[], Expression], *kinds: TokenKind) -> Expression:
        """Left-associative chain of *operand* joined by any of *kinds*.

        Every folded operator puts the chain so far one level deeper in the
        tree, so it counts toward the nesting limit like a parenthesis.
        """
        depth = self._depth
        try:
            left = operand()
            while True:
                tok = self._match(*kinds)
                if tok is None:
                    return left
                self._nest(tok)
                right = operand()
                left = self._binary(tok, left, right)
        finally:
            self._depth = depth

    def _parse_or(self) -> Expression:
        """Left-associative ``or``."""
        return self._fold(self._parse_and, TokenKind.OR)

    def _parse_and(self) -> Expression:
        """Left-associative ``and``."""
        return self._fold(self._parse_comparison, TokenKind.AND)

    def _parse_comparison(self) -> Expression:
        """At most one of ``< <= > >= == !=``; chains are rejected."""
        left = self._parse_additive()
        tok = self._match(*_COMPARISON_TOKENS)
        if tok is None:
            return left
        right = self._parse_additive()
        if self._check(*_COMPARISON_TOKENS):
            raise self._error(
                "Comparison operators cannot be chained", self._peek(), "Comparison"
            )
        return self._binary(tok, left, right)

    def _parse_additive(self) -> Expression:
        return self._fold(self._parse_multiplicative, TokenKind.PLUS, TokenKind.MINUS)

    def _parse_multiplicative(self) -> Expression:
        return self._fold(self._parse_unary, TokenKind.STAR, TokenKind.SLASH)

    def _parse_unary(self) -> Expression:
        """A single optional prefix ``-`` or ``!``."""
        tok = self._match(TokenKind.MINUS, TokenKind.BANG)
        if tok is None:
            return self._parse_primary()
        operand = self._parse_primary()
        return UnaryExpression(
            operator=tok.lexeme,
            operand=operand,
            span=tok.span.merge(operand.span),
        )

    def _parse_primary(self) -> Expression:
        """Parse a literal, identifier, call or parenthesized expression."""
        tok = self._peek()

        if tok.kind in (TokenKind.NUMBER, TokenKind.STRING):
            self._advance()
            return Literal(value=tok.value, span=tok.span)

        if tok.kind in (TokenKind.TRUE, TokenKind.FALSE):
            self._advance()
            return Literal(value=tok.kind == TokenKind.TRUE, span=tok.span)

        if tok.kind == TokenKind.IDENT:
            self._advance()
            ident = Identifier(name=tok.lexeme, span=tok.span)
            if self._check(TokenKind.LPAREN):
                return self._parse_call(ident)
            return ident

        if tok.kind == TokenKind.LPAREN:
            self._advance()
            expr = self.parse_expression()
            rparen = self._expect(TokenKind.RPAREN, "Expected ')' after expression", "Primary")
            return replace(expr, span=tok.span.merge(rparen.span))

        raise self._error("Expected expression", tok, "Primary")

    def _parse_call(self, callee: Identifier) -> CallExpression:
        """Parse ``(arg, arg, ...)`` after a callee name."""
        self._expect(TokenKind.LPAREN, "Expected '('", "Call")
        args: list[Expression] = []
        if not self._check(TokenKind.RPAREN):
            args.append(self.parse_expression())
            while self._match(TokenKind.COMMA):
                args.append(self.parse_expression())
        rparen = self._expect(TokenKind.RPAREN, "Expected ')' after call arguments", "ArgList")
        return CallExpression(
            callee=callee,
            arguments=tuple(args),
            span=callee.span.merge(rparen.span),
        )


# ------------------------------------------------------------------
# Convenience functions
# ------------------------------------------------------------------


def parse(
    source: str,
    filename: str | None = None,
    options: ParserOptions | None = None,
) -> tuple[Program, DiagnosticCollector]:
    """Parse Qubit source code.

    Returns:
        A ``(program_ast, diagnostics)`` tuple.  The program is always
        returned; statements that could not be parsed are left out of it.
    """
    options = options or ParserOptions()
    filename = filename or options.filename
    diag = DiagnosticCollector()
    tokens = Lexer(source, filename, diag).tokenize()
    program = Parser(tokens, diag, options).parse_program()
    logger.debug(
        "parsed %s: %d statements, %d diagnostics",
        filename,
        len(program.statements),
        len(diag),
    )
    return program, diag


def parse_expression_source(
    source: str,
    filename: str | None = None,
    options: ParserOptions | None = None,
) -> tuple[Expression | None, DiagnosticCollector]:
    """Parse a single rule expression such as ``RSI(14) < 30``.

    Returns:
        An ``(expression, diagnostics)`` tuple; the expression is ``None``
        when the source is not exactly one well-formed expression.
    """
    options = options or ParserOptions()
    filename = filename or options.filename
    diag = DiagnosticCollector()
    tokens = Lexer(source, filename, diag).tokenize()
    expr = Parser(tokens, diag, options).parse_rule()
    if diag.has_errors():
        return None, diag
    return expr, diag
