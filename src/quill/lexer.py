"""Quill lexer — converts source text into a flat token stream."""

from __future__ import annotations

from pathlib import Path

from quill.errors import LexError, LexErrors
from quill.tokens import KEYWORDS, Position, Span, Token, TokenKind

DEFAULT_TAB_WIDTH = 4

_SINGLE: dict[str, TokenKind] = {
    "(": TokenKind.LEFT_PAREN,
    ")": TokenKind.RIGHT_PAREN,
    "{": TokenKind.LEFT_BRACE,
    "}": TokenKind.RIGHT_BRACE,
    ",": TokenKind.COMMA,
    ".": TokenKind.DOT,
    ";": TokenKind.SEMICOLON,
    "?": TokenKind.QUESTION,
    ":": TokenKind.COLON,
    "-": TokenKind.MINUS,
    "+": TokenKind.PLUS,
    "*": TokenKind.STAR,
}

# first char → (kind alone, kind when followed by '=')
_ONE_OR_TWO: dict[str, tuple[TokenKind, TokenKind]] = {
    "!": (TokenKind.BANG, TokenKind.BANG_EQUAL),
    "=": (TokenKind.EQUAL, TokenKind.EQUAL_EQUAL),
    ">": (TokenKind.GREATER, TokenKind.GREATER_EQUAL),
    "<": (TokenKind.LESS, TokenKind.LESS_EQUAL),
}

_DIGITS = frozenset("0123456789")


def _is_ident_start(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


def _is_ident_char(ch: str) -> bool:
    return ch.isalpha() or ch in _DIGITS or ch == "_"


class Lexer:
    """Tokenize Quill source text, collecting every lexical error."""

    def __init__(
        self,
        source: str,
        filename: str = "<input>",
        tab_width: int = DEFAULT_TAB_WIDTH,
    ) -> None:
        self._source = source
        self._filename = filename
        self._tab_width = tab_width
        self._pos = 0
        self._line = 1
        self._col = 1
        self._tokens: list[Token] = []
        self._errors: list[LexError] = []

    def tokenize(self) -> list[Token]:
        """Tokenize the full source and return the token list ending in EOF.

        Raises LexErrors if any character could not be scanned; scanning
        continues past each bad character so that all of them are reported.
        """
        while self._pos < len(self._source):
            self._scan_token()

        self._tokens.append(Token.eof(self._current_pos(), self._filename))
        if self._errors:
            raise LexErrors(self._errors)
        return self._tokens

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        elif ch == "\t":
            self._col += self._tab_width
        else:
            self._col += 1
        return ch

    def _match(self, expected: str) -> bool:
        if self._peek() != expected:
            return False
        self._advance()
        return True

    def _emit_fixed(self, kind: TokenKind, start: Position) -> None:
        self._tokens.append(Token.fixed(kind, start, self._filename, self._current_pos()))

    def _emit_content(self, kind: TokenKind, text: str, start: Position) -> None:
        self._tokens.append(Token.content(kind, text, start, self._filename, self._current_pos()))

    def _error(self, message: str, start: Position) -> None:
        span = Span(start, self._current_pos())
        self._errors.append(LexError(message, span, self._source, self._filename))

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _scan_token(self) -> None:
        start = self._current_pos()
        ch = self._advance()

        if ch in _SINGLE:
            self._emit_fixed(_SINGLE[ch], start)
            return

        if ch in _ONE_OR_TWO:
            alone, with_equal = _ONE_OR_TWO[ch]
            self._emit_fixed(with_equal if self._match("=") else alone, start)
            return

        if ch == "/":
            if self._match("/"):
                self._skip_line_comment()
            elif self._match("*"):
                self._skip_block_comment(start)
            else:
                self._emit_fixed(TokenKind.SLASH, start)
            return

        if ch in " \t\r\n":
            return

        if ch == '"':
            self._lex_string(start)
            return

        if ch in _DIGITS:
            self._lex_number(start)
            return

        if _is_ident_start(ch):
            self._lex_identifier(start)
            return

        self._error(f"Unexpected character: '{ch}'.", start)

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def _skip_line_comment(self) -> None:
        while self._pos < len(self._source) and self._peek() != "\n":
            self._advance()

    def _skip_block_comment(self, start: Position) -> None:
        """Skip to the first '*/'. Block comments do not nest."""
        while self._pos < len(self._source):
            if self._peek() == "*" and self._peek(1) == "/":
                self._advance()
                self._advance()
                return
            self._advance()
        self._error("Unterminated block comment.", start)

    # ------------------------------------------------------------------
    # Literals and identifiers
    # ------------------------------------------------------------------

    def _lex_string(self, start: Position) -> None:
        content_start = self._pos
        while self._pos < len(self._source) and self._peek() != '"':
            self._advance()

        if self._pos >= len(self._source):
            self._error("Unterminated string.", start)
            return

        text = self._source[content_start : self._pos]
        self._advance()  # closing quote
        self._emit_content(TokenKind.STRING, text, start)

    def _lex_number(self, start: Position) -> None:
        while self._peek() in _DIGITS:
            self._advance()

        # Fractional part only when a digit follows the dot
        if self._peek() == "." and self._peek(1) in _DIGITS:
            self._advance()
            while self._peek() in _DIGITS:
                self._advance()

        text = self._source[start.offset : self._pos]
        self._emit_content(TokenKind.NUMBER, text, start)

    def _lex_identifier(self, start: Position) -> None:
        while self._pos < len(self._source) and _is_ident_char(self._peek()):
            self._advance()

        text = self._source[start.offset : self._pos]
        kind = KEYWORDS.get(text)
        if kind is not None:
            self._emit_fixed(kind, start)
        else:
            self._emit_content(TokenKind.IDENTIFIER, text, start)


def tokenize(
    source: str,
    filename: str = "<input>",
    tab_width: int = DEFAULT_TAB_WIDTH,
) -> list[Token]:
    """Convenience function: tokenize source text and return token list."""
    return Lexer(source, filename, tab_width).tokenize()


def tokenize_file(path: str | Path, tab_width: int = DEFAULT_TAB_WIDTH) -> list[Token]:
    """Read a UTF-8 source file and tokenize it, using the path as filename."""
    path = Path(path)
    source = path.read_text(encoding="utf-8")
    return tokenize(source, str(path), tab_width)
