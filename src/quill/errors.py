"""Error types with formatted source context."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from quill.ast import Stmt
    from quill.tokens import Span, TokenKind


def _snippet(message: str, span: Span, source: str, filename: str) -> str:
    """Format *message* like a compiler diagnostic pointing into *source*."""
    lines = source.splitlines(keepends=True)
    line_idx = span.start.line - 1
    col = span.start.column

    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx].rstrip("\n").rstrip("\r")
    else:
        source_line = ""

    # Underline the full span when on one line, otherwise to end of line
    if span.end.line == span.start.line:
        underline_len = max(1, span.end.column - col)
    else:
        underline_len = max(1, len(source_line) - col + 1)

    pad = " " * (col - 1)
    carets = "^" * underline_len

    line_num = str(span.start.line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"error: {message}\n"
        f"{' ' * gutter_width}--> {filename}:{span.start.line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )


class TokenError(Exception):
    """Raised when a token constructor is asked for a kind it cannot build."""

    def __init__(self, message: str, kind: TokenKind) -> None:
        self.message = message
        self.kind = kind
        super().__init__(message)


class LexError(Exception):
    """A single lexical error. The lexer collects these and keeps scanning."""

    def __init__(self, message: str, span: Span, source: str, filename: str = "<input>") -> None:
        self.message = message
        self.span = span
        self.source = source
        self.filename = filename
        super().__init__(self.format())

    def format(self, filename: str | None = None) -> str:
        return _snippet(self.message, self.span, self.source, filename or self.filename)


class ParseError(Exception):
    """A single parse error, collected by the parser before it synchronizes."""

    def __init__(self, message: str, span: Span, source: str, filename: str = "<input>") -> None:
        self.message = message
        self.span = span
        self.source = source
        self.filename = filename
        super().__init__(self.format())

    def format(self, filename: str | None = None) -> str:
        return _snippet(self.message, self.span, self.source, filename or self.filename)


class UnimplementedError(ParseError):
    """Syntax the grammar reserves but the language does not support yet."""


class EvalError(Exception):
    """Raised on the first evaluation error, with span and source context."""

    def __init__(
        self,
        message: str,
        span: Span,
        source: str = "",
        filename: str = "<input>",
    ) -> None:
        self.message = message
        self.span = span
        self.source = source
        self.filename = filename
        super().__init__(self.format())

    def format(self, filename: str | None = None) -> str:
        return _snippet(self.message, self.span, self.source, filename or self.filename)


class LexErrors(Exception):
    """Every lexical error found in one source text."""

    def __init__(self, errors: list[LexError]) -> None:
        self.errors = errors
        super().__init__("\n".join(e.format() for e in errors))

    @property
    def messages(self) -> list[str]:
        return [e.message for e in self.errors]


class ParseErrors(Exception):
    """Every parse error collected across one token stream.

    *statements* holds the declarations that did parse, in source order.
    """

    def __init__(self, errors: list[ParseError], statements: list[Stmt] | None = None) -> None:
        self.errors = errors
        self.statements = statements or []
        super().__init__("\n".join(e.format() for e in errors))

    @property
    def messages(self) -> list[str]:
        return [e.message for e in self.errors]
