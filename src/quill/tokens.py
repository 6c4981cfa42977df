"""Token kinds, spelling tables, and the Token data structure."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from quill.errors import TokenError
from quill.values import Array, Boolean, Number, Object, String, Value


class TokenKind(Enum):
    # Symbols (single-character)
    LEFT_PAREN = auto()  # (
    RIGHT_PAREN = auto()  # )
    LEFT_BRACE = auto()  # {
    RIGHT_BRACE = auto()  # }
    COMMA = auto()  # ,
    DOT = auto()  # .
    MINUS = auto()  # -
    PLUS = auto()  # +
    SEMICOLON = auto()  # ;
    SLASH = auto()  # /
    STAR = auto()  # *
    QUESTION = auto()  # ?
    COLON = auto()  # :

    # Operators (one or two characters)
    BANG = auto()  # !
    BANG_EQUAL = auto()  # !=
    EQUAL = auto()  # =
    EQUAL_EQUAL = auto()  # ==
    GREATER = auto()  # >
    GREATER_EQUAL = auto()  # >=
    LESS = auto()  # <
    LESS_EQUAL = auto()  # <=

    # Content-bearing
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()
    BOOLEAN = auto()
    ARRAY = auto()
    OBJECT = auto()

    # Keywords
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    TRUE = auto()
    FN = auto()
    FOR = auto()
    IF = auto()
    NULL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    LET = auto()
    WHILE = auto()
    # Reserved for future use
    ENUM = auto()
    MATCH = auto()
    IS = auto()
    MUT = auto()

    # Flow control
    BREAK = auto()
    CONTINUE = auto()

    EOF = auto()


SYMBOLS: dict[TokenKind, str] = {
    TokenKind.LEFT_PAREN: "(",
    TokenKind.RIGHT_PAREN: ")",
    TokenKind.LEFT_BRACE: "{",
    TokenKind.RIGHT_BRACE: "}",
    TokenKind.COMMA: ",",
    TokenKind.DOT: ".",
    TokenKind.MINUS: "-",
    TokenKind.PLUS: "+",
    TokenKind.SEMICOLON: ";",
    TokenKind.SLASH: "/",
    TokenKind.STAR: "*",
    TokenKind.QUESTION: "?",
    TokenKind.COLON: ":",
}

OPERATORS: dict[TokenKind, str] = {
    TokenKind.BANG: "!",
    TokenKind.BANG_EQUAL: "!=",
    TokenKind.EQUAL: "=",
    TokenKind.EQUAL_EQUAL: "==",
    TokenKind.GREATER: ">",
    TokenKind.GREATER_EQUAL: ">=",
    TokenKind.LESS: "<",
    TokenKind.LESS_EQUAL: "<=",
}

KEYWORD_SPELLINGS: dict[TokenKind, str] = {
    TokenKind.AND: "and",
    TokenKind.CLASS: "class",
    TokenKind.ELSE: "else",
    TokenKind.FALSE: "false",
    TokenKind.TRUE: "true",
    TokenKind.FN: "fn",
    TokenKind.FOR: "for",
    TokenKind.IF: "if",
    TokenKind.NULL: "null",
    TokenKind.OR: "or",
    TokenKind.PRINT: "print",
    TokenKind.RETURN: "return",
    TokenKind.SUPER: "super",
    TokenKind.THIS: "this",
    TokenKind.LET: "let",
    TokenKind.WHILE: "while",
    TokenKind.ENUM: "enum",
    TokenKind.MATCH: "match",
    TokenKind.IS: "is",
    TokenKind.MUT: "mut",
}

FLOW_CONTROL: dict[TokenKind, str] = {
    TokenKind.BREAK: "break",
    TokenKind.CONTINUE: "continue",
}

# Every kind whose lexeme is fully determined by the kind itself
SPELLINGS: dict[TokenKind, str] = {**SYMBOLS, **OPERATORS, **KEYWORD_SPELLINGS, **FLOW_CONTROL}

# Reserved word → kind, consulted by the lexer after scanning an identifier
KEYWORDS: dict[str, TokenKind] = {
    spelling: kind for kind, spelling in {**KEYWORD_SPELLINGS, **FLOW_CONTROL}.items()
}

CONTENT_KINDS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.IDENTIFIER,
        TokenKind.STRING,
        TokenKind.NUMBER,
        TokenKind.BOOLEAN,
        TokenKind.ARRAY,
        TokenKind.OBJECT,
    }
)

EOF_LEXEME = "End of File"


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int = 0


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexical unit with its source text and optional literal value."""

    kind: TokenKind
    lexeme: str
    literal: Value | None
    span: Span
    filename: str = "<input>"

    @property
    def line(self) -> int:
        return self.span.start.line

    @property
    def column(self) -> int:
        return self.span.start.column

    @classmethod
    def fixed(
        cls,
        kind: TokenKind,
        start: Position,
        filename: str = "<input>",
        end: Position | None = None,
    ) -> Token:
        """Build a symbol, operator, keyword or flow-control token."""
        spelling = SPELLINGS.get(kind)
        if spelling is None:
            raise TokenError(f"{kind.name} has no fixed spelling", kind)
        if end is None:
            end = Position(start.line, start.column + len(spelling), start.offset + len(spelling))
        return cls(kind, spelling, None, Span(start, end), filename)

    @classmethod
    def content(
        cls,
        kind: TokenKind,
        text: str,
        start: Position,
        filename: str = "<input>",
        end: Position | None = None,
    ) -> Token:
        """Build a token whose lexeme is *text*, deriving its literal value."""
        if kind not in CONTENT_KINDS:
            raise TokenError(f"{kind.name} does not carry content", kind)
        if end is None:
            end = Position(start.line, start.column + len(text), start.offset + len(text))
        return cls(kind, text, _literal_for(kind, text), Span(start, end), filename)

    @classmethod
    def eof(cls, start: Position, filename: str = "<input>") -> Token:
        return cls(TokenKind.EOF, EOF_LEXEME, None, Span(start, start), filename)


def _literal_for(kind: TokenKind, text: str) -> Value | None:
    if kind == TokenKind.STRING:
        return String(text)
    if kind == TokenKind.NUMBER:
        try:
            return Number(float(text))
        except ValueError:
            raise TokenError(f"malformed number literal '{text}'", kind) from None
    if kind == TokenKind.BOOLEAN:
        if text == "true":
            return Boolean(True)
        if text == "false":
            return Boolean(False)
        raise TokenError(f"malformed boolean literal '{text}'", kind)
    if kind == TokenKind.ARRAY:
        # Element parsing belongs to the parser; the token only marks the container
        return Array()
    if kind == TokenKind.OBJECT:
        return Object()
    return None
