"""Minimal LSP server for layoutlex: lex diagnostics only."""

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

from layoutlex import __version__
from layoutlex.errors import LexError
from layoutlex.lexer import tokenize

server = LanguageServer(
    "layoutlex-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _to_diagnostic(exc: LexError) -> Diagnostic:
    # Lexer positions are already 0-based; columns count code points
    if exc.span is None:
        start = Position(line=0, character=0)
        end = Position(line=0, character=1)
    else:
        start = Position(line=exc.span.start.line, character=exc.span.start.column)
        end = Position(line=exc.span.end.line, character=exc.span.end.column)
    return Diagnostic(
        range=Range(start=start, end=end),
        message=exc.message,
        severity=DiagnosticSeverity.Error,
        code=exc.kind,
        source="layoutlex",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Lex the document and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    diagnostics: list[Diagnostic] = []

    try:
        tokenize(doc.source)
    except LexError as exc:
        diagnostics.append(_to_diagnostic(exc))

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
