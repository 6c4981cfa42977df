"""Minimal LSP server for Quill — diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from quill import __version__
from quill.errors import EvalError, LexErrors, ParseErrors
from quill.eval import EvalContext, run
from quill.lexer import tokenize
from quill.parser import Parser
from quill.tokens import Span

server = LanguageServer("quill-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full)


def _diagnostic(message: str, span: Span, severity: DiagnosticSeverity) -> Diagnostic:
    """Build a diagnostic, converting 1-based positions to 0-based."""
    start = Position(line=span.start.line - 1, character=span.start.column - 1)
    end = Position(line=span.end.line - 1, character=span.end.column - 1)
    if end == start:
        end = Position(line=start.line, character=start.character + 1)
    return Diagnostic(
        range=Range(start=start, end=end),
        message=message,
        severity=severity,
        source="quill",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Run the Quill pipeline and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    diagnostics: list[Diagnostic] = []

    try:
        # LSP characters count a tab as one column
        tokens = tokenize(source, filename, tab_width=1)
        statements = Parser(tokens, source, filename).parse()
    except (LexErrors, ParseErrors) as exc:
        for err in exc.errors:
            diagnostics.append(_diagnostic(err.message, err.span, DiagnosticSeverity.Error))
    else:
        try:
            run(statements, EvalContext(filename=filename, source=source))
        except EvalError as exc:
            diagnostics.append(_diagnostic(exc.message, exc.span, DiagnosticSeverity.Warning))

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
