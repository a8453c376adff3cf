"""Position-tracking character stream with peek, lookback and backtracking.

The stream owns an NFC-normalized copy of the source and a history of every
character it has handed out. ``back()`` and ``reset()`` rewind by truncating
that history and recomputing the cursor from its new tail, so speculative
reads never need to rescan the source.
"""

from __future__ import annotations

import sys
import unicodedata
from collections.abc import Callable, Iterator
from typing import TextIO

from colorexpr.chars import Character, CharKind, classify
from colorexpr.debug import DEFAULT_WIDTH, box_text, format_character, print_line
from colorexpr.errors import InvalidArgumentError, NoActiveMarkError, RewindUnderflowError
from colorexpr.tokens import START, Position

CharPredicate = Callable[[Character], bool]


def advance(position: Position, value: str) -> Position:
    """Return the position just past *value* read at *position*."""
    if value == "\n":
        return Position(position.index + len(value), position.line + 1, 1)
    return Position(position.index + len(value), position.line, position.column + len(value))


class CharacterStream:
    """Iterate classified characters of a source string."""

    def __init__(self, source: str = "") -> None:
        self._source = unicodedata.normalize("NFC", source or "")
        self._position = START
        self._history: list[Character] = []
        self._marks: list[int] = []

        self._log_enabled = False
        self._log_active = False
        self._log_message = "CHARACTER STREAM"
        self._log_width = DEFAULT_WIDTH
        self._log_file: TextIO | None = None

    def __repr__(self) -> str:
        pos = self._position
        return f"CharacterStream(index={pos.index}, line={pos.line}, column={pos.column})"

    # ------------------------------------------------------------------
    # Source and cursor
    # ------------------------------------------------------------------

    @property
    def source(self) -> str:
        """The normalized source text."""
        return self._source

    def set(self, source: str) -> CharacterStream:
        """Replace the source and clear cursor, history and marks."""
        self._source = unicodedata.normalize("NFC", source or "")
        self._position = START
        self._history = []
        self._marks = []
        return self

    @property
    def position(self) -> Position:
        return self._position

    def set_position(
        self, index_or_position: int | Position, line: int = 1, column: int = 1
    ) -> None:
        """Move the cursor without touching history or marks."""
        if isinstance(index_or_position, Position):
            self._position = index_or_position
        else:
            self._position = Position(index_or_position, line, column)

    @property
    def history(self) -> tuple[Character, ...]:
        """Characters consumed so far, oldest first."""
        return tuple(self._history)

    @property
    def mark_depth(self) -> int:
        return len(self._marks)

    # ------------------------------------------------------------------
    # Forward reading
    # ------------------------------------------------------------------

    def __iter__(self) -> Iterator[Character]:
        self._log_active = False
        return self

    def __next__(self) -> Character:
        char = self.next()
        if char.kind is CharKind.END_OF_STREAM:
            raise StopIteration
        return char

    def next(self) -> Character:
        """Consume and return the current character.

        Once the source is exhausted every call returns an END_OF_STREAM
        character at the end position.
        """
        if self._log_enabled and not self._log_active:
            self._log_header()
            self._log_active = True

        if self.is_end_of_stream():
            if self._log_active:
                self._log_footer()
            return self.at_end_of_stream()

        char = self.peek()
        self._position = advance(self._position, char.value)
        self._history.append(char)

        if self._log_active:
            self._log_out().write(format_character(char) + "\n")
        return char

    def peek(self, n: int = 0) -> Character:
        """Return the character *n* steps ahead without consuming anything."""
        pos = self._peek_position(n)
        if self.is_end_of_stream(pos.index):
            return self.at_end_of_stream(pos)
        value = self._source[pos.index]
        return Character(value, classify(value), pos)

    def lookahead(self, n: int = 0) -> str:
        """Like peek() but return only the value, or '' past the end."""
        pos = self._peek_position(n)
        if self.is_end_of_stream(pos.index):
            return ""
        return self._source[pos.index]

    def consume_while(self, predicate: CharPredicate) -> list[Character]:
        """Consume characters while *predicate* holds for the next one."""
        consumed: list[Character] = []
        while not self.is_end_of_stream() and predicate(self.peek()):
            consumed.append(self.next())
        return consumed

    def _peek_position(self, n: int) -> Position:
        if n < 0:
            raise InvalidArgumentError(f"Lookahead distance `{n}` must be non-negative.")
        pos = self._position
        for _ in range(n):
            if self.is_end_of_stream(pos.index):
                break
            pos = advance(pos, self._source[pos.index])
        return pos

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def lookback(self) -> Character | None:
        """Return the most recently consumed character, if any."""
        if not self._history:
            return None
        return self._history[-1]

    def lookback_while(self, predicate: CharPredicate) -> list[Character]:
        """Return the trailing run of history matching *predicate*, in order."""
        run: list[Character] = []
        for char in reversed(self._history):
            if not predicate(char):
                break
            run.append(char)
        run.reverse()
        return run

    def back(self, steps: int = 1) -> None:
        """Un-consume the last *steps* characters."""
        if steps <= 0:
            return
        if steps > len(self._history):
            raise RewindUnderflowError(
                f"Cannot go back {steps} steps. "
                f"History only contains {len(self._history)} characters to go back to."
            )
        if self._marks and steps > len(self._history) - self._marks[-1]:
            raise RewindUnderflowError(
                f"Cannot go back {steps} steps. Only "
                f"{len(self._history) - self._marks[-1]} characters were read since the last mark."
            )
        del self._history[-steps:]
        self._position = self._tail_position()

    def mark(self) -> None:
        """Save the current history length for a later commit() or reset()."""
        self._marks.append(len(self._history))

    def commit(self) -> None:
        """Drop the innermost mark and keep everything read since."""
        if not self._marks:
            raise NoActiveMarkError("Cannot commit. No mark has been set.")
        self._marks.pop()

    def reset(self) -> None:
        """Rewind to the innermost mark and drop it."""
        if not self._marks:
            raise NoActiveMarkError("Cannot reset. No mark has been set.")
        length = self._marks.pop()
        del self._history[length:]
        self._position = self._tail_position()

    def _tail_position(self) -> Position:
        if not self._history:
            return START
        last = self._history[-1]
        return advance(last.position, last.value)

    # ------------------------------------------------------------------
    # Sentinels
    # ------------------------------------------------------------------

    def is_end_of_stream(self, index: int | None = None) -> bool:
        if index is None:
            index = self._position.index
        return index >= len(self._source)

    def at_end_of_stream(self, position: Position | None = None) -> Character:
        """Build the END_OF_STREAM character, by default at the cursor."""
        return Character("", CharKind.END_OF_STREAM, position or self._position)

    def at_error(self) -> Character:
        return Character("Error", CharKind.OTHER, self._position)

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    def with_logging(
        self,
        message: str | None = None,
        *,
        width: int | None = None,
        file: TextIO | None = None,
    ) -> CharacterStream:
        """Dump every character of the next full iteration."""
        self._log_enabled = True
        if message:
            self._log_message = message
        if width:
            self._log_width = width
        self._log_file = file
        return self

    def without_logging(self) -> CharacterStream:
        self._log_enabled = False
        self._log_active = False
        return self

    def _log_out(self) -> TextIO:
        return self._log_file if self._log_file is not None else sys.stderr

    def _log_header(self) -> None:
        out = self._log_out()
        box_text(
            f"{self._log_message}\nSOURCE: {self._source!r}",
            width=self._log_width,
            style="double",
            file=out,
        )

    def _log_footer(self) -> None:
        print_line(self._log_width, file=self._log_out())
        self._log_active = False
        self._log_enabled = False
