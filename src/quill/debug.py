"""--tokens / --debug dumps to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from quill.ast import (
    Binary,
    Block,
    Call,
    Expr,
    Expression,
    Function,
    Grouping,
    Let,
    Literal,
    Stmt,
    Unary,
)
from quill.tokens import Token
from quill.values import format_value, type_name


def dump_tokens(tokens: list[Token], *, file: TextIO = sys.stderr) -> None:
    """Print one line per token: position, kind, lexeme."""
    for tok in tokens:
        file.write(f"{tok.line}:{tok.column} {tok.kind.name} {tok.lexeme!r}\n")


def dump_ast(statements: list[Stmt], *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable AST tree to *file*."""
    file.write("Program\n")
    for stmt in statements:
        _dump_stmt(stmt, 1, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_stmt(stmt: Stmt, depth: int, f: TextIO) -> None:
    if isinstance(stmt, Expression):
        f.write(f"{_indent(depth)}Expression\n")
        _dump_expr(stmt.expression, depth + 1, f)
    elif isinstance(stmt, Let):
        f.write(f"{_indent(depth)}Let {stmt.name.lexeme}\n")
        _dump_expr(stmt.initializer, depth + 1, f)
    elif isinstance(stmt, Function):
        params = ", ".join(p.lexeme for p in stmt.params)
        f.write(f"{_indent(depth)}Function {stmt.name.lexeme}({params})\n")
        for child in stmt.body:
            _dump_stmt(child, depth + 1, f)
    elif isinstance(stmt, Block):
        f.write(f"{_indent(depth)}Block\n")
        for child in stmt.statements:
            _dump_stmt(child, depth + 1, f)


def _dump_expr(expr: Expr, depth: int, f: TextIO) -> None:
    if isinstance(expr, Literal):
        f.write(f"{_indent(depth)}Literal {type_name(expr.value)}({format_value(expr.value)!r})\n")
    elif isinstance(expr, Grouping):
        f.write(f"{_indent(depth)}Grouping\n")
        _dump_expr(expr.expression, depth + 1, f)
    elif isinstance(expr, Binary):
        f.write(f"{_indent(depth)}Binary {expr.operator.lexeme}\n")
        _dump_expr(expr.left, depth + 1, f)
        _dump_expr(expr.right, depth + 1, f)
    elif isinstance(expr, Unary):
        f.write(f"{_indent(depth)}Unary {expr.operator.lexeme}\n")
        _dump_expr(expr.right, depth + 1, f)
    elif isinstance(expr, Call):
        f.write(f"{_indent(depth)}Call ({len(expr.arguments)} args)\n")
        _dump_expr(expr.callee, depth + 1, f)
        for arg in expr.arguments:
            _dump_expr(arg, depth + 1, f)
