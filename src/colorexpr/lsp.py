"""Minimal LSP server for colorexpr: diagnostics only."""

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

from colorexpr import __version__
from colorexpr.errors import LexError, ParseError
from colorexpr.parser import parse
from colorexpr.tokens import Position as SourcePosition

server = LanguageServer(
    "colorexpr-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _lsp_position(source: str, pos: SourcePosition) -> Position:
    """Convert a code-point column into the UTF-16 offset LSP clients expect."""
    lines = source.split("\n")
    line = lines[pos.line - 1] if pos.line <= len(lines) else ""
    prefix = line[: pos.column - 1]
    return Position(line=pos.line - 1, character=len(prefix.encode("utf-16-le")) // 2)


def diagnostics_for(source: str) -> list[Diagnostic]:
    """Parse *source* and describe the first error, if any."""
    try:
        parse(source)
    except LexError as exc:
        start = _lsp_position(exc.source, exc.position)
        end = _lsp_position(
            exc.source,
            SourcePosition(exc.position.index + 1, exc.position.line, exc.position.column + 1),
        )
        if end.character == start.character:
            end = Position(line=start.line, character=start.character + 1)
        return [
            Diagnostic(
                range=Range(start=start, end=end),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="colorexpr",
            )
        ]
    except ParseError as exc:
        return [
            Diagnostic(
                range=Range(
                    start=_lsp_position(exc.source, exc.span.start),
                    end=_lsp_position(exc.source, exc.span.end),
                ),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="colorexpr",
            )
        ]
    return []


def _validate(ls: LanguageServer, uri: str) -> None:
    """Run the parser and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics_for(doc.source))
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
