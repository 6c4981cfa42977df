"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from quill.ast import Stmt
from quill.lexer import tokenize
from quill.parser import parse
from quill.tokens import Position, Token, TokenKind


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        tokens = tokenize(source)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.kind != TokenKind.EOF]

    return _lex


@pytest.fixture
def parse_source():
    """Return a helper that parses source and returns the statement list."""

    def _parse(source: str, filename: str = "test.ql") -> list[Stmt]:
        return parse(source, filename)

    return _parse


def assert_kinds(tokens: list[Token], expected: list[TokenKind]) -> None:
    """Assert that the token kinds match the expected list."""
    actual = [t.kind for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_lexemes(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token lexemes match the expected list."""
    actual = [t.lexeme for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def op(kind: TokenKind, line: int = 1, column: int = 1) -> Token:
    """Build a fixed-spelling token for hand-built AST nodes."""
    return Token.fixed(kind, Position(line, column, column - 1), "test.ql")
