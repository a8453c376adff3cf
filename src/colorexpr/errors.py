"""Error types with formatted source context."""

from __future__ import annotations

from typing import TYPE_CHECKING

from colorexpr.tokens import Position, Span

if TYPE_CHECKING:
    from colorexpr.tokens import Token


def _snippet(
    message: str,
    source: str,
    start: Position,
    underline_len: int,
    filename: str,
) -> str:
    lines = source.splitlines(keepends=True)
    line_idx = start.line - 1
    col = start.column

    # Build the source line (strip trailing newline for display)
    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx].rstrip("\n").rstrip("\r")
    else:
        source_line = ""

    pad = " " * (col - 1)
    carets = "^" * max(1, underline_len)

    line_num = str(start.line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"error: {message}\n"
        f"{' ' * gutter_width}--> {filename}:{start.line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )


# ----------------------------------------------------------------------
# Character stream
# ----------------------------------------------------------------------


class StreamError(Exception):
    """Base class for misuse of a CharacterStream."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidArgumentError(StreamError, ValueError):
    """Raised for a negative lookahead distance."""


class RewindUnderflowError(StreamError):
    """Raised when back() asks for more steps than the history holds."""


class NoActiveMarkError(StreamError):
    """Raised by commit() or reset() with an empty mark stack."""


# ----------------------------------------------------------------------
# Lexing
# ----------------------------------------------------------------------


class LexError(Exception):
    """Raised on the first lexing error, with position and source context."""

    def __init__(self, message: str, position: Position, source: str) -> None:
        self.message = message
        self.position = position
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "<input>") -> str:
        return _snippet(self.message, self.source, self.position, 1, filename)


class EmptyTokenBufferError(LexError):
    """Raised when a token would be built from no characters."""


# ----------------------------------------------------------------------
# Parsing
# ----------------------------------------------------------------------


class ParseError(Exception):
    """Raised on the first parse error, with span and source context."""

    def __init__(self, message: str, span: Span, source: str) -> None:
        self.message = message
        self.span = span
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "<input>") -> str:
        start, end = self.span.start, self.span.end
        # Underline the full span when on one line, otherwise to end of line
        if end.line == start.line:
            underline_len = end.column - start.column
        else:
            lines = self.source.splitlines()
            line = lines[start.line - 1] if start.line <= len(lines) else ""
            underline_len = len(line) - start.column + 1
        return _snippet(self.message, self.source, start, underline_len, filename)


class UnexpectedTokenError(ParseError):
    """Raised when the parser meets a token no rule accepts."""

    def __init__(self, message: str, token: Token, source: str) -> None:
        self.token = token
        super().__init__(message, token.span, source)


class InvalidAssignmentTargetError(ParseError):
    """Raised when the left side of '=' is not an identifier."""


class InvalidDimensionUnitError(ParseError):
    """Raised when a dimension carries a unit outside the known set."""
