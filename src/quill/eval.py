"""Tree-walking evaluator — reduces expressions to values and runs statements."""

from __future__ import annotations

import operator
from dataclasses import dataclass

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
from quill.errors import EvalError
from quill.tokens import Position, Span, Token, TokenKind
from quill.values import Array, Boolean, Callable, Number, String, Value, type_name

DEFAULT_MAX_DEPTH = 128

_ORIGIN = Position(1, 1, 0)


@dataclass
class EvalContext:
    """State carried through evaluation."""

    filename: str = "<input>"
    source: str = ""
    max_depth: int = DEFAULT_MAX_DEPTH
    depth: int = 0

    def error(self, message: str, span: Span) -> EvalError:
        return EvalError(message, span, self.source, self.filename)


def evaluate(expr: Expr, ctx: EvalContext | None = None) -> Value:
    """Reduce *expr* to a value. Raises EvalError on the first failure."""
    if ctx is None:
        ctx = EvalContext()

    if ctx.depth >= ctx.max_depth:
        raise ctx.error(
            f"Expression nesting exceeds maximum depth of {ctx.max_depth}.",
            _expr_span(expr),
        )
    ctx.depth += 1
    try:
        if isinstance(expr, Literal):
            return expr.value
        if isinstance(expr, Grouping):
            return evaluate(expr.expression, ctx)
        if isinstance(expr, Binary):
            # Both operands are always evaluated; 'and'/'or' do not short-circuit
            left = evaluate(expr.left, ctx)
            right = evaluate(expr.right, ctx)
            return _apply_binary(expr.operator, left, right, ctx)
        if isinstance(expr, Unary):
            return _apply_unary(expr.operator, evaluate(expr.right, ctx), ctx)
        if isinstance(expr, Call):
            return _call(expr, ctx)
        raise TypeError(f"not an expression node: {expr!r}")
    finally:
        ctx.depth -= 1


def execute(stmt: Stmt, ctx: EvalContext | None = None) -> Value | None:
    """Run one statement, returning the value it produced (if any)."""
    if ctx is None:
        ctx = EvalContext()

    if isinstance(stmt, Expression):
        return evaluate(stmt.expression, ctx)
    if isinstance(stmt, Block):
        if ctx.depth >= ctx.max_depth:
            raise ctx.error(
                f"Block nesting exceeds maximum depth of {ctx.max_depth}.",
                Span(_ORIGIN, _ORIGIN),
            )
        ctx.depth += 1
        try:
            result: Value | None = None
            for child in stmt.statements:
                result = execute(child, ctx)
            return result
        finally:
            ctx.depth -= 1
    if isinstance(stmt, Function):
        raise ctx.error(
            f"Cannot declare function '{stmt.name.lexeme}' at line {stmt.name.line}, "
            f"column {stmt.name.column}: variable binding is not available yet.",
            stmt.name.span,
        )
    if isinstance(stmt, Let):
        raise ctx.error(
            f"Cannot bind '{stmt.name.lexeme}' at line {stmt.name.line}, "
            f"column {stmt.name.column}: variable binding is not available yet.",
            stmt.name.span,
        )
    raise TypeError(f"not a statement node: {stmt!r}")


def run(statements: list[Stmt], ctx: EvalContext | None = None) -> list[Value]:
    """Execute statements in order, collecting the value of each one that produced one."""
    if ctx is None:
        ctx = EvalContext()
    results: list[Value] = []
    for stmt in statements:
        value = execute(stmt, ctx)
        if value is not None:
            results.append(value)
    return results


# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------

_ARITHMETIC = {
    TokenKind.PLUS: operator.add,
    TokenKind.MINUS: operator.sub,
    TokenKind.STAR: operator.mul,
    TokenKind.SLASH: operator.truediv,
}

_COMPARISON = {
    TokenKind.GREATER: operator.gt,
    TokenKind.GREATER_EQUAL: operator.ge,
    TokenKind.LESS: operator.lt,
    TokenKind.LESS_EQUAL: operator.le,
    TokenKind.EQUAL_EQUAL: operator.eq,
    TokenKind.BANG_EQUAL: operator.ne,
}


def _where(op: Token) -> str:
    return f"at line {op.line}, column {op.column}"


def _apply_binary(op: Token, left: Value, right: Value, ctx: EvalContext) -> Value:
    kind = op.kind

    if isinstance(left, Number) and isinstance(right, Number):
        if kind == TokenKind.SLASH and right.value == 0:
            raise ctx.error(f"Division by zero {_where(op)}.", op.span)
        if kind in _ARITHMETIC:
            return Number(_ARITHMETIC[kind](left.value, right.value))
        if kind in _COMPARISON:
            return Boolean(_COMPARISON[kind](left.value, right.value))
        raise _unsupported_binary(op, "Numbers", ctx)

    if isinstance(left, Boolean) and isinstance(right, Boolean):
        if kind == TokenKind.AND:
            return Boolean(left.value and right.value)
        if kind == TokenKind.OR:
            return Boolean(left.value or right.value)
        raise _unsupported_binary(op, "Booleans", ctx)

    if isinstance(left, String) and isinstance(right, String):
        if kind == TokenKind.PLUS:
            return String(left.value + right.value)
        raise _unsupported_binary(op, "Strings", ctx)

    if isinstance(left, Array) and isinstance(right, Array):
        if kind == TokenKind.PLUS:
            return Array(left.elements + right.elements)
        raise _unsupported_binary(op, "Arrays", ctx)

    raise ctx.error(
        f"Binary operator '{op.lexeme}' is not supported for {type_name(left)} "
        f"and {type_name(right)} {_where(op)}.",
        op.span,
    )


def _unsupported_binary(op: Token, operands: str, ctx: EvalContext) -> EvalError:
    return ctx.error(
        f"Unsupported binary operator '{op.lexeme}' for {operands} {_where(op)}.",
        op.span,
    )


def _apply_unary(op: Token, operand: Value, ctx: EvalContext) -> Value:
    kind = op.kind
    if isinstance(operand, Number):
        if kind == TokenKind.MINUS:
            return Number(-operand.value)
        if kind == TokenKind.PLUS:
            return operand
    elif isinstance(operand, Boolean):
        if kind == TokenKind.BANG:
            return Boolean(not operand.value)
    elif isinstance(operand, Array):
        if kind == TokenKind.BANG:
            return Boolean(len(operand.elements) == 0)

    raise ctx.error(
        f"Unsupported unary operator '{op.lexeme}' for {type_name(operand)} {_where(op)}.",
        op.span,
    )


# ---------------------------------------------------------------------------
# Calls
# ---------------------------------------------------------------------------


def _call(expr: Call, ctx: EvalContext) -> Value:
    callee = evaluate(expr.callee, ctx)
    paren = expr.paren

    if not isinstance(callee, Callable):
        raise ctx.error(
            f"Can only call callables, got {type_name(callee)} {_where(paren)}.",
            paren.span,
        )

    if len(expr.arguments) != callee.arity:
        raise ctx.error(
            f"Callable '{callee.name}' expected {callee.arity} arguments "
            f"but got {len(expr.arguments)} {_where(paren)}.",
            paren.span,
        )

    arguments = [evaluate(arg, ctx) for arg in expr.arguments]
    return callee.function(arguments)


def _expr_span(expr: Expr) -> Span:
    """Best-effort source span for an expression, for depth errors."""
    while isinstance(expr, Grouping):
        expr = expr.expression
    if isinstance(expr, (Binary, Unary)):
        return expr.operator.span
    if isinstance(expr, Call):
        return expr.paren.span
    # Literals carry no position
    return Span(_ORIGIN, _ORIGIN)
