"""Character kinds, the Character record, and the Unicode-aware classifier."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from enum import Enum, auto

import regex

from colorexpr.tokens import Position


class CharKind(Enum):
    # Stream control
    END_OF_STREAM = auto()
    ERROR = auto()

    # Whitespace
    WHITESPACE = auto()
    NEWLINE = auto()

    # Unicode general categories
    LETTER = auto()
    NUMBER = auto()
    EMOJI = auto()
    CURRENCY = auto()

    # Named ASCII punctuation and symbols
    HASH = auto()  # #
    PERCENT = auto()  # %
    SLASH = auto()  # /
    COMMA = auto()  # ,
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    PLUS = auto()  # +
    MINUS = auto()  # -
    STAR = auto()  # *
    DOT = auto()  # .
    BACKTICK = auto()  # `
    SINGLE_QUOTE = auto()  # '
    DOUBLE_QUOTE = auto()  # "
    BACKSLASH = auto()  # \
    TILDE = auto()  # ~
    EXCLAMATION = auto()  # !
    AT = auto()  # @
    DOLLAR = auto()  # $
    QUESTION = auto()  # ?
    CARET = auto()  # ^
    AMPERSAND = auto()  # &
    LESS_THAN = auto()  # <
    GREATER_THAN = auto()  # >
    UNDERSCORE = auto()  # _
    EQUALS = auto()  # =
    LBRACKET = auto()  # [
    RBRACKET = auto()  # ]
    LBRACE = auto()  # {
    RBRACE = auto()  # }
    SEMICOLON = auto()  # ;
    COLON = auto()  # :
    PIPE = auto()  # |

    # Fallbacks
    PUNCTUATION = auto()
    SYMBOL = auto()
    UNICODE = auto()
    OTHER = auto()


@dataclass(frozen=True, slots=True)
class Character:
    """One classified code point and where it sits in the source."""

    value: str
    kind: CharKind
    position: Position


_SYMBOL_KINDS: dict[str, CharKind] = {
    "#": CharKind.HASH,
    "%": CharKind.PERCENT,
    "/": CharKind.SLASH,
    ",": CharKind.COMMA,
    "(": CharKind.LPAREN,
    ")": CharKind.RPAREN,
    "+": CharKind.PLUS,
    "-": CharKind.MINUS,
    "*": CharKind.STAR,
    ".": CharKind.DOT,
    "`": CharKind.BACKTICK,
    "'": CharKind.SINGLE_QUOTE,
    '"': CharKind.DOUBLE_QUOTE,
    "\\": CharKind.BACKSLASH,
    "~": CharKind.TILDE,
    "!": CharKind.EXCLAMATION,
    "@": CharKind.AT,
    "$": CharKind.DOLLAR,
    "?": CharKind.QUESTION,
    "^": CharKind.CARET,
    "&": CharKind.AMPERSAND,
    "<": CharKind.LESS_THAN,
    ">": CharKind.GREATER_THAN,
    "_": CharKind.UNDERSCORE,
    "=": CharKind.EQUALS,
    "[": CharKind.LBRACKET,
    "]": CharKind.RBRACKET,
    "{": CharKind.LBRACE,
    "}": CharKind.RBRACE,
    ";": CharKind.SEMICOLON,
    ":": CharKind.COLON,
    "|": CharKind.PIPE,
}

QUOTE_KINDS: frozenset[CharKind] = frozenset(
    {CharKind.SINGLE_QUOTE, CharKind.DOUBLE_QUOTE, CharKind.BACKTICK}
)

_EMOJI_PRESENTATION = regex.compile(r"\p{Emoji_Presentation}")

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def classify(ch: str | None) -> CharKind:
    """Map a single character (or the empty string) to its CharKind.

    Rules are tried in order and the first match wins. Strings longer than
    one code point are classified by their first code point. Never raises.
    """
    if ch is None or not isinstance(ch, str):
        return CharKind.ERROR
    if ch == "":
        return CharKind.END_OF_STREAM

    ch = ch[0]
    if ch in "\r\n":
        return CharKind.NEWLINE
    if ch.isspace():
        return CharKind.WHITESPACE

    category = unicodedata.category(ch)
    if category.startswith("L"):
        return CharKind.LETTER
    if category.startswith("N"):
        return CharKind.NUMBER
    if _EMOJI_PRESENTATION.match(ch):
        return CharKind.EMOJI
    # '$' keeps its own named kind
    if category == "Sc" and ch not in _SYMBOL_KINDS:
        return CharKind.CURRENCY

    kind = _SYMBOL_KINDS.get(ch)
    if kind is not None:
        return kind

    if category.startswith("P"):
        return CharKind.PUNCTUATION
    if category.startswith("S"):
        return CharKind.SYMBOL
    if ord(ch) > 0x7F:
        return CharKind.UNICODE
    return CharKind.OTHER


def is_hex_digit(ch: str) -> bool:
    """Return True if ch is an ASCII hexadecimal digit."""
    return ch in _HEX_DIGITS
