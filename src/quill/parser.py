"""Quill parser — converts a token stream into a list of statements."""

from __future__ import annotations

from quill.ast import Block, Call, Expr, Expression, Function, Grouping, Literal, Stmt, Unary
from quill.errors import ParseError, ParseErrors, UnimplementedError
from quill.lexer import DEFAULT_TAB_WIDTH, tokenize
from quill.tokens import Token, TokenKind
from quill.values import Boolean

MAX_PARAMETERS = 255
MAX_ARGUMENTS = 255
DEFAULT_MAX_DEPTH = 128

# Tokens that begin a new statement; synchronize() stops in front of them
_STATEMENT_STARTS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.CLASS,
        TokenKind.FN,
        TokenKind.LET,
        TokenKind.IF,
        TokenKind.WHILE,
        TokenKind.FOR,
        TokenKind.RETURN,
        TokenKind.ENUM,
        TokenKind.MATCH,
    }
)


class Parser:
    """Recursive descent parser for Quill token streams.

    Errors do not stop the parse: each failing declaration is recorded,
    the parser skips to the next statement boundary, and all errors are
    raised together from parse().
    """

    def __init__(
        self,
        tokens: list[Token],
        source: str = "",
        filename: str = "<input>",
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self._tokens = tokens
        self._source = source
        self._filename = filename
        self._max_depth = max_depth
        self._pos = 0
        self._depth = 0
        self._errors: list[ParseError] = []

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _peek(self) -> Token:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return self._tokens[-1]  # EOF

    def _peek_next(self) -> Token:
        idx = self._pos + 1
        if idx < len(self._tokens):
            return self._tokens[idx]
        return self._tokens[-1]

    def _previous(self) -> Token | None:
        if self._pos > 0:
            return self._tokens[self._pos - 1]
        return None

    def _at_eof(self) -> bool:
        return self._peek().kind == TokenKind.EOF

    def _advance(self) -> Token:
        tok = self._peek()
        if tok.kind != TokenKind.EOF:
            self._pos += 1
        return tok

    def _check(self, kind: TokenKind) -> bool:
        return self._peek().kind == kind

    def _match(self, *kinds: TokenKind) -> bool:
        """Consume the next token if it is one of *kinds*."""
        if self._peek().kind in kinds:
            self._advance()
            return True
        return False

    def _expect(self, kind: TokenKind, message: str) -> Token:
        if not self._check(kind):
            raise self._error(message)
        return self._advance()

    def _error(self, message: str, token: Token | None = None) -> ParseError:
        if token is None:
            token = self._peek()
        return ParseError(message, token.span, self._source, self._filename)

    def _enter(self) -> None:
        if self._depth >= self._max_depth:
            raise self._error(f"Nesting exceeds maximum depth of {self._max_depth}.")
        self._depth += 1

    def _leave(self) -> None:
        self._depth -= 1

    # ------------------------------------------------------------------
    # Program level
    # ------------------------------------------------------------------

    def parse(self) -> list[Stmt]:
        if not self._tokens:
            return []

        statements: list[Stmt] = []
        while not self._at_eof():
            stmt = self._declaration()
            if stmt is not None:
                statements.append(stmt)

        if self._errors:
            raise ParseErrors(self._errors, statements)
        return statements

    def _declaration(self) -> Stmt | None:
        try:
            # 'fn' without a name is a function literal, handled by _primary
            if self._check(TokenKind.FN) and self._peek_next().kind == TokenKind.IDENTIFIER:
                self._advance()
                return self._function("function")
            return self._statement()
        except ParseError as exc:
            self._errors.append(exc)
            self._synchronize()
            return None

    def _synchronize(self) -> None:
        """Skip tokens until the start of the next statement."""
        self._advance()
        while not self._at_eof():
            prev = self._previous()
            if prev is not None and prev.kind == TokenKind.SEMICOLON:
                return
            if self._peek().kind in _STATEMENT_STARTS:
                return
            self._advance()

    # ------------------------------------------------------------------
    # Declarations and statements
    # ------------------------------------------------------------------

    def _function(self, kind: str) -> Function:
        name = self._expect(TokenKind.IDENTIFIER, f"Expected {kind} name.")
        self._expect(TokenKind.LEFT_PAREN, f"Expected '(' after {kind} name '{name.lexeme}'.")

        params: list[Token] = []
        if not self._check(TokenKind.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_PARAMETERS:
                    raise self._error(
                        f"Can't have more than {MAX_PARAMETERS} parameters "
                        f"in {kind} '{name.lexeme}'."
                    )
                params.append(self._expect(TokenKind.IDENTIFIER, "Expected parameter name."))
                if not self._match(TokenKind.COMMA):
                    break

        self._expect(TokenKind.RIGHT_PAREN, "Expected ')' after parameters.")
        self._expect(TokenKind.LEFT_BRACE, f"Expected '{{' before {kind} body.")
        body = self._block()
        return Function(name, tuple(params), body)

    def _statement(self) -> Stmt:
        if self._match(TokenKind.LEFT_BRACE):
            return Block(self._block())
        return self._expression_statement()

    def _block(self) -> tuple[Stmt, ...]:
        """Parse declarations up to the closing '}' (the '{' is already consumed)."""
        self._enter()
        try:
            statements: list[Stmt] = []
            while not self._check(TokenKind.RIGHT_BRACE) and not self._at_eof():
                stmt = self._declaration()
                if stmt is not None:
                    statements.append(stmt)
            self._expect(TokenKind.RIGHT_BRACE, "Expected '}' after block.")
            return tuple(statements)
        finally:
            self._leave()

    def _expression_statement(self) -> Expression:
        expr = self._expression()
        self._expect(TokenKind.SEMICOLON, "Expected ';' after expression.")
        return Expression(expr)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _expression(self) -> Expr:
        # TODO: binary precedence levels, assignment and logical operators
        # slot in here once their grammar is settled.
        return self._unary()

    def _unary(self) -> Expr:
        self._enter()
        try:
            tok = self._peek()
            if tok.kind in (TokenKind.BANG, TokenKind.MINUS):
                self._advance()
                return Unary(tok, self._unary())
            return self._call()
        finally:
            self._leave()

    def _call(self) -> Expr:
        expr = self._primary()
        while self._match(TokenKind.LEFT_PAREN):
            expr = self._finish_call(expr)
        return expr

    def _finish_call(self, callee: Expr) -> Call:
        arguments: list[Expr] = []
        if not self._check(TokenKind.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGUMENTS:
                    raise self._error(f"Can't have more than {MAX_ARGUMENTS} arguments.")
                arguments.append(self._expression())
                if not self._match(TokenKind.COMMA):
                    break

        paren = self._expect(TokenKind.RIGHT_PAREN, "Expected ')' after arguments.")
        return Call(callee, paren, tuple(arguments))

    def _primary(self) -> Expr:
        tok = self._peek()

        if tok.kind == TokenKind.FALSE:
            self._advance()
            return Literal(Boolean(False))
        if tok.kind == TokenKind.TRUE:
            self._advance()
            return Literal(Boolean(True))
        if tok.kind in (TokenKind.NUMBER, TokenKind.STRING):
            self._advance()
            assert tok.literal is not None
            return Literal(tok.literal)

        if tok.kind == TokenKind.LEFT_PAREN:
            self._advance()
            expr = self._expression()
            self._expect(TokenKind.RIGHT_PAREN, "Expected ')' after expression.")
            return Grouping(expr)

        if tok.kind == TokenKind.IDENTIFIER:
            raise UnimplementedError(
                f"Variable references are not supported yet: '{tok.lexeme}'.",
                tok.span,
                self._source,
                self._filename,
            )
        if tok.kind == TokenKind.FN:
            raise UnimplementedError(
                "Function literals are not supported yet.",
                tok.span,
                self._source,
                self._filename,
            )

        raise self._error("Expected expression.")


def parse(
    source: str,
    filename: str = "<input>",
    max_depth: int = DEFAULT_MAX_DEPTH,
    tab_width: int = DEFAULT_TAB_WIDTH,
) -> list[Stmt]:
    """Convenience function: tokenize and parse source text."""
    tokens = tokenize(source, filename, tab_width)
    return Parser(tokens, source, filename, max_depth).parse()
