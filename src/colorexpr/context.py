"""Lexical state machine: one classified character in, one Action out.

Each state has a pure handler mapping ``(character, delimiter)`` to the next
state and an Action. The Action tells the tokenizer whether to flush its
buffer into a token (``emit``), whether to feed the same character again
under the new state (``reprocess``), and whether to drop the character
instead of buffering it (``ignore``). ``kind`` names the token type being
emitted, or the type the buffered run is building towards.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto

from colorexpr.chars import QUOTE_KINDS, Character, CharKind, is_hex_digit
from colorexpr.tokens import TokenType


class LexState(Enum):
    INITIAL = auto()
    IN_IDENTIFIER = auto()
    IN_STRING = auto()
    IN_HEX = auto()
    IN_NUMBER = auto()
    IN_PERCENT = auto()
    IN_DIMENSION = auto()
    SEEN_SLASH = auto()
    IN_SINGLE_LINE_COMMENT = auto()
    IN_MULTI_LINE_COMMENT = auto()
    IN_MULTI_LINE_COMMENT_SAW_STAR = auto()
    IN_ESCAPE = auto()
    IN_SYMBOL = auto()
    END = auto()


# Token type produced by a run that is flushed while in each state
STATE_KINDS: dict[LexState, TokenType] = {
    LexState.IN_IDENTIFIER: TokenType.IDENTIFIER,
    LexState.IN_STRING: TokenType.STRING,
    LexState.IN_ESCAPE: TokenType.STRING,
    LexState.IN_HEX: TokenType.HEXVALUE,
    LexState.IN_NUMBER: TokenType.NUMBER,
    LexState.IN_PERCENT: TokenType.PERCENT,
    LexState.IN_DIMENSION: TokenType.DIMENSION,
    LexState.SEEN_SLASH: TokenType.SLASH,
    LexState.IN_SINGLE_LINE_COMMENT: TokenType.COMMENT,
    LexState.IN_MULTI_LINE_COMMENT: TokenType.COMMENT,
    LexState.IN_MULTI_LINE_COMMENT_SAW_STAR: TokenType.COMMENT,
    LexState.IN_SYMBOL: TokenType.SYMBOL,
}


@dataclass(frozen=True, slots=True)
class Action:
    emit: bool = False
    reprocess: bool = False
    ignore: bool = False
    kind: TokenType | None = None


@dataclass(frozen=True, slots=True)
class Transition:
    state: LexState
    action: Action
    delimiter: str | None = None


Handler = Callable[[Character, str | None], Transition]


def _to(state: LexState, delimiter: str | None = None) -> Transition:
    """Buffer the character and move to (or stay in) *state*."""
    return Transition(state, Action(kind=STATE_KINDS.get(state)), delimiter)


def _emit(kind: TokenType, *, ignore: bool = False) -> Transition:
    """Flush the buffer as *kind* and return to INITIAL.

    An ignored character has been consumed as part of the token (closing
    quote, closing comment slash); otherwise it is fed again.
    """
    return Transition(
        LexState.INITIAL, Action(emit=True, reprocess=not ignore, ignore=ignore, kind=kind)
    )


# ----------------------------------------------------------------------
# State handlers
# ----------------------------------------------------------------------


def _initial(char: Character, delimiter: str | None) -> Transition:
    kind = char.kind
    if kind is CharKind.LETTER:
        return _to(LexState.IN_IDENTIFIER)
    if kind is CharKind.NUMBER:
        return _to(LexState.IN_NUMBER)
    if kind is CharKind.HASH:
        return _to(LexState.IN_HEX)
    if kind in QUOTE_KINDS:
        action = Action(ignore=True, kind=TokenType.STRING)
        return Transition(LexState.IN_STRING, action, char.value)
    if kind is CharKind.SLASH:
        return _to(LexState.SEEN_SLASH)
    if kind is CharKind.WHITESPACE:
        return Transition(LexState.INITIAL, Action(ignore=True, kind=TokenType.WHITESPACE))
    if kind is CharKind.NEWLINE:
        return Transition(LexState.INITIAL, Action(ignore=True, kind=TokenType.NEWLINE))
    if kind in (CharKind.END_OF_STREAM, CharKind.ERROR):
        return Transition(LexState.INITIAL, Action(ignore=True, kind=TokenType.END))
    return _to(LexState.IN_SYMBOL)


def _in_identifier(char: Character, delimiter: str | None) -> Transition:
    if char.kind in (CharKind.LETTER, CharKind.NUMBER):
        return _to(LexState.IN_IDENTIFIER)
    return _emit(TokenType.IDENTIFIER)


def _in_number(char: Character, delimiter: str | None) -> Transition:
    if char.kind in (CharKind.NUMBER, CharKind.DOT):
        return _to(LexState.IN_NUMBER)
    if char.kind is CharKind.PERCENT:
        return _to(LexState.IN_PERCENT)
    if char.kind is CharKind.LETTER:
        return _to(LexState.IN_DIMENSION)
    return _emit(TokenType.NUMBER)


def _in_percent(char: Character, delimiter: str | None) -> Transition:
    return _emit(TokenType.PERCENT)


def _in_dimension(char: Character, delimiter: str | None) -> Transition:
    if char.kind is CharKind.LETTER:
        return _to(LexState.IN_DIMENSION)
    return _emit(TokenType.DIMENSION)


def _in_hex(char: Character, delimiter: str | None) -> Transition:
    if is_hex_digit(char.value):
        return _to(LexState.IN_HEX)
    return _emit(TokenType.HEXVALUE)


def _in_string(char: Character, delimiter: str | None) -> Transition:
    if char.kind is CharKind.BACKSLASH:
        return _to(LexState.IN_ESCAPE, delimiter)
    if char.kind in QUOTE_KINDS and char.value == delimiter:
        return _emit(TokenType.STRING, ignore=True)
    if char.kind in (CharKind.END_OF_STREAM, CharKind.NEWLINE):
        # Unterminated: emit what we have, the newline is reprocessed as trivia
        return _emit(TokenType.STRING)
    return _to(LexState.IN_STRING, delimiter)


def _in_escape(char: Character, delimiter: str | None) -> Transition:
    if char.kind is CharKind.END_OF_STREAM:
        return Transition(
            LexState.IN_STRING, Action(reprocess=True, kind=TokenType.STRING), delimiter
        )
    return _to(LexState.IN_STRING, delimiter)


def _seen_slash(char: Character, delimiter: str | None) -> Transition:
    if char.kind is CharKind.SLASH:
        return _to(LexState.IN_SINGLE_LINE_COMMENT)
    if char.kind is CharKind.STAR:
        return _to(LexState.IN_MULTI_LINE_COMMENT)
    return _emit(TokenType.SLASH)


def _in_single_line_comment(char: Character, delimiter: str | None) -> Transition:
    if char.kind in (CharKind.NEWLINE, CharKind.END_OF_STREAM):
        return _emit(TokenType.COMMENT)
    return _to(LexState.IN_SINGLE_LINE_COMMENT)


def _in_multi_line_comment(char: Character, delimiter: str | None) -> Transition:
    if char.kind is CharKind.STAR:
        return _to(LexState.IN_MULTI_LINE_COMMENT_SAW_STAR)
    if char.kind is CharKind.END_OF_STREAM:
        return _emit(TokenType.COMMENT)
    return _to(LexState.IN_MULTI_LINE_COMMENT)


def _in_multi_line_comment_saw_star(char: Character, delimiter: str | None) -> Transition:
    if char.kind is CharKind.SLASH:
        return _emit(TokenType.COMMENT, ignore=True)
    if char.kind is CharKind.STAR:
        return _to(LexState.IN_MULTI_LINE_COMMENT_SAW_STAR)
    if char.kind is CharKind.END_OF_STREAM:
        return _emit(TokenType.COMMENT)
    return _to(LexState.IN_MULTI_LINE_COMMENT)


def _in_symbol(char: Character, delimiter: str | None) -> Transition:
    return _emit(TokenType.SYMBOL)


def _end(char: Character, delimiter: str | None) -> Transition:
    if char.kind is CharKind.END_OF_STREAM:
        return Transition(LexState.END, Action(ignore=True, kind=TokenType.END))
    return Transition(LexState.INITIAL, Action(reprocess=True))


_HANDLERS: dict[LexState, Handler] = {
    LexState.INITIAL: _initial,
    LexState.IN_IDENTIFIER: _in_identifier,
    LexState.IN_STRING: _in_string,
    LexState.IN_HEX: _in_hex,
    LexState.IN_NUMBER: _in_number,
    LexState.IN_PERCENT: _in_percent,
    LexState.IN_DIMENSION: _in_dimension,
    LexState.SEEN_SLASH: _seen_slash,
    LexState.IN_SINGLE_LINE_COMMENT: _in_single_line_comment,
    LexState.IN_MULTI_LINE_COMMENT: _in_multi_line_comment,
    LexState.IN_MULTI_LINE_COMMENT_SAW_STAR: _in_multi_line_comment_saw_star,
    LexState.IN_ESCAPE: _in_escape,
    LexState.IN_SYMBOL: _in_symbol,
    LexState.END: _end,
}


class LexicalContext:
    """Current DFA state plus the delimiter of the string being read."""

    def __init__(self) -> None:
        self._state = LexState.INITIAL
        self._delimiter: str | None = None

    @property
    def state(self) -> LexState:
        return self._state

    @property
    def delimiter(self) -> str | None:
        """Opening quote of the current string, or None outside strings."""
        return self._delimiter

    def transition_to(self, state: LexState) -> None:
        self._state = state

    def is_in_string(self) -> bool:
        return self._state in (LexState.IN_STRING, LexState.IN_ESCAPE)

    def pending_kind(self) -> TokenType:
        """Token type for a buffer flushed in the current state."""
        return STATE_KINDS.get(self._state, TokenType.SYMBOL)

    def process(self, char: Character) -> Action:
        handler = _HANDLERS.get(self._state)
        if handler is None:
            self._state = LexState.INITIAL
            self._delimiter = None
            return Action(reprocess=True)
        transition = handler(char, self._delimiter)
        self._state = transition.state
        self._delimiter = transition.delimiter
        return transition.action

    def reset(self) -> None:
        self._state = LexState.INITIAL
        self._delimiter = None

    def finish(self) -> None:
        self._state = LexState.END
        self._delimiter = None
