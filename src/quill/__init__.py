"""Quill scripting language — lexer, parser and tree-walking evaluator."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from quill.values import Value

__version__ = "0.1.0"


def run_source(source: str, filename: str = "<input>") -> list[Value]:
    """Tokenize, parse, and run Quill source, returning the statement results."""
    from quill.eval import EvalContext, run
    from quill.parser import parse

    statements = parse(source, filename)
    return run(statements, EvalContext(filename=filename, source=source))
