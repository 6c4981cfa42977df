"""AST node types for parsed Quill programs."""

from __future__ import annotations

from dataclasses import dataclass

from quill.tokens import Token
from quill.values import Value

# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Literal:
    value: Value


@dataclass(frozen=True, slots=True)
class Grouping:
    """Parenthesized expression."""

    expression: Expr


@dataclass(frozen=True, slots=True)
class Binary:
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, slots=True)
class Unary:
    operator: Token
    right: Expr


@dataclass(frozen=True, slots=True)
class Call:
    """Call expression. *paren* is the closing ')' token, used for error locations."""

    callee: Expr
    paren: Token
    arguments: tuple[Expr, ...]


Expr = Literal | Grouping | Binary | Unary | Call

# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Expression:
    """Expression statement: an expression followed by ';'."""

    expression: Expr


@dataclass(frozen=True, slots=True)
class Let:
    name: Token
    initializer: Expr


@dataclass(frozen=True, slots=True)
class Function:
    """Named function declaration."""

    name: Token
    params: tuple[Token, ...]
    body: tuple[Stmt, ...]


@dataclass(frozen=True, slots=True)
class Block:
    statements: tuple[Stmt, ...]


Stmt = Expression | Let | Function | Block
