"""Tokenizer: drives a CharacterStream through the LexicalContext."""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterable
from typing import TextIO

from colorexpr.chars import Character, CharKind
from colorexpr.context import LexicalContext
from colorexpr.debug import DEFAULT_WIDTH, box_text, dump_tokens, print_line
from colorexpr.errors import EmptyTokenBufferError
from colorexpr.stream import CharacterStream, advance
from colorexpr.strings import unescape_string
from colorexpr.tokens import START, Position, Span, Token, TokenType, symbol_type, word_type

_TRIVIA_KINDS = (TokenType.WHITESPACE, TokenType.NEWLINE)


class Tokenizer:
    """Turn source text into a flat list of Token objects ending in END.

    With ``keep_trivia`` (the default) whitespace and newlines are reported
    as WHITESPACE and NEWLINE tokens so every input character belongs to
    exactly one token.
    """

    def __init__(self, *, keep_trivia: bool = True) -> None:
        self.keep_trivia = keep_trivia
        self._ctx = LexicalContext()
        self._source = ""
        self._tokens: list[Token] = []
        self._buffer: list[Character] = []
        self._raw: list[str] = []
        self._start: Position | None = None
        self._trivia: list[Character] = []
        self._trivia_type: TokenType | None = None

        self._log_enabled = False
        self._log_message = "TOKENIZER"
        self._log_width = DEFAULT_WIDTH
        self._log_file: TextIO | None = None

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    def tokenize(self, source: str | CharacterStream) -> list[Token]:
        """Tokenize a string or the remainder of an existing stream."""
        stream = source if isinstance(source, CharacterStream) else CharacterStream(source)
        self._log_header(stream.source)
        tokens = self._run(stream, stream.source, stream.at_end_of_stream)
        self._log_results(tokens)
        return tokens

    def tokenize_characters(self, chars: Iterable[Character]) -> list[Token]:
        """Tokenize an already classified character sequence."""
        chars = list(chars)
        source = "".join(char.value for char in chars)
        if chars:
            end = advance(chars[-1].position, chars[-1].value)
        else:
            end = START
        self._log_header(source)
        tokens = self._run(
            chars, source, lambda: Character("", CharKind.END_OF_STREAM, end)
        )
        self._log_results(tokens)
        return tokens

    @staticmethod
    def get_characters(text: str) -> list[Character]:
        """Return every classified character of *text*, without END_OF_STREAM."""
        return list(CharacterStream(text))

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def _run(
        self,
        chars: Iterable[Character],
        source: str,
        end_of_stream: Callable[[], Character],
    ) -> list[Token]:
        self._ctx.reset()
        self._source = source
        self._tokens = []
        self._buffer = []
        self._raw = []
        self._start = None
        self._trivia = []
        self._trivia_type = None

        for char in chars:
            self._feed(char)

        # Let pending runs finish through their own transitions
        eos = end_of_stream()
        self._feed(eos)
        if self._buffer:
            self._flush(self._ctx.pending_kind(), eos.position)
        self._flush_trivia()
        self._ctx.finish()

        self._tokens.append(Token(TokenType.END, "", "", Span(eos.position, eos.position)))
        return self._tokens

    def _feed(self, char: Character) -> None:
        while True:
            action = self._ctx.process(char)

            if action.emit:
                if action.ignore:
                    # The closing quote or comment slash belongs to the token
                    self._raw.append(char.value)
                    end = advance(char.position, char.value)
                else:
                    end = char.position
                self._flush(action.kind, end, closed=action.ignore)

            if action.reprocess:
                continue

            if action.ignore:
                if action.kind in _TRIVIA_KINDS:
                    self._add_trivia(char, action.kind)
                elif not action.emit and action.kind is TokenType.STRING:
                    # Opening quote
                    self._begin(char)
                    self._raw.append(char.value)
            elif char.kind is not CharKind.END_OF_STREAM:
                self._begin(char)
                self._buffer.append(char)
                self._raw.append(char.value)
            return

    def _begin(self, char: Character) -> None:
        if self._start is None:
            self._flush_trivia()
            self._start = char.position

    # ------------------------------------------------------------------
    # Token construction
    # ------------------------------------------------------------------

    def _flush(self, kind: TokenType | None, end: Position, closed: bool = False) -> None:
        if self._buffer:
            start = self._start if self._start is not None else self._buffer[0].position
            raw = "".join(self._raw)
            token = self._build_token(kind, self._buffer, raw, Span(start, end), closed)
            self._tokens.append(token)
        # An empty string literal leaves nothing to emit
        self._buffer = []
        self._raw = []
        self._start = None

    def _build_token(
        self,
        kind: TokenType | None,
        chars: list[Character],
        raw: str,
        span: Span,
        closed: bool = False,
    ) -> Token:
        if not chars:
            raise EmptyTokenBufferError(
                "cannot build a token from an empty buffer", span.start, self._source
            )
        value = "".join(char.value for char in chars)

        match kind:
            case TokenType.STRING:
                return Token(TokenType.STRING, unescape_string(value), raw, span)
            case TokenType.IDENTIFIER:
                return Token(word_type(value), value, raw, span)
            case TokenType.SYMBOL:
                return Token(symbol_type(value), value, raw, span)
            case TokenType.COMMENT if closed:
                return Token(TokenType.COMMENT, value + "/", raw, span)
            case None:
                return Token(TokenType.SYMBOL, value, raw, span)
            case _:
                return Token(kind, value, raw, span)

    # ------------------------------------------------------------------
    # Trivia
    # ------------------------------------------------------------------

    def _add_trivia(self, char: Character, kind: TokenType) -> None:
        if self._trivia:
            same_run = kind is TokenType.WHITESPACE and self._trivia_type is kind
            crlf = (
                kind is TokenType.NEWLINE
                and self._trivia_type is kind
                and len(self._trivia) == 1
                and self._trivia[0].value == "\r"
                and char.value == "\n"
            )
            if not (same_run or crlf):
                self._flush_trivia()
        self._trivia.append(char)
        self._trivia_type = kind

    def _flush_trivia(self) -> None:
        if not self._trivia:
            return
        if self.keep_trivia:
            value = "".join(char.value for char in self._trivia)
            last = self._trivia[-1]
            span = Span(self._trivia[0].position, advance(last.position, last.value))
            self._tokens.append(Token(self._trivia_type, value, value, span))
        self._trivia = []
        self._trivia_type = None

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    def with_logging(
        self,
        message: str | None = None,
        *,
        width: int | None = None,
        file: TextIO | None = None,
    ) -> Tokenizer:
        """Dump the source and resulting tokens of the next tokenize call."""
        self._log_enabled = True
        if message:
            self._log_message = message
        if width:
            self._log_width = width
        self._log_file = file
        return self

    def without_logging(self) -> Tokenizer:
        self._log_enabled = False
        return self

    def _log_out(self) -> TextIO:
        return self._log_file if self._log_file is not None else sys.stderr

    def _log_header(self, source: str) -> None:
        if not self._log_enabled:
            return
        box_text(
            f"{self._log_message}\nSOURCE: {source!r}",
            width=self._log_width,
            style="double",
            file=self._log_out(),
        )

    def _log_results(self, tokens: list[Token]) -> None:
        if not self._log_enabled:
            return
        out = self._log_out()
        out.write("RESULT (TOKENS):\n")
        dump_tokens(tokens, file=out)
        print_line(self._log_width, file=out)
        self._log_enabled = False


def tokenize(source: str, *, keep_trivia: bool = True) -> list[Token]:
    """Convenience function: tokenize source and return the token list."""
    return Tokenizer(keep_trivia=keep_trivia).tokenize(source)
