"""Token types, source positions, and the keyword and symbol tables."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType


class TokenType(Enum):
    END = auto()

    # Trivia
    WHITESPACE = auto()  # run of horizontal whitespace
    NEWLINE = auto()  # \n, \r, or \r\n
    COMMENT = auto()  # // line or /* block */

    # Words
    IDENTIFIER = auto()
    KEYWORD = auto()  # declaration, reserved, or named color
    FUNCTION = auto()  # color function name
    DIMENSION = auto()  # angle unit word, or number + unit

    # Literals
    NUMBER = auto()
    PERCENT = auto()  # number followed by %
    HEXVALUE = auto()  # #rrggbb
    STRING = auto()  # value is unescaped, quotes dropped

    # Single-character symbols
    SYMBOL = auto()  # any symbol without its own type
    EQUALS = auto()  # =
    PLUS = auto()  # +
    MINUS = auto()  # -
    STAR = auto()  # *
    SLASH = auto()  # /
    DOT = auto()  # .
    COMMA = auto()  # ,
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    MODULO = auto()  # %
    SEMICOLON = auto()  # ;


@dataclass(frozen=True, slots=True)
class Position:
    """Source position: 0-based code-point index, 1-based line and column."""

    index: int
    line: int
    column: int


START = Position(0, 1, 1)


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token with converted value and original source text."""

    type: TokenType
    value: str
    raw: str
    span: Span


TRIVIA: frozenset[TokenType] = frozenset(
    {TokenType.WHITESPACE, TokenType.NEWLINE, TokenType.COMMENT}
)

DECLARATION_KEYWORDS: frozenset[str] = frozenset({"const", "let", "var"})

RESERVED_KEYWORDS: frozenset[str] = frozenset({"for", "of", "new"})

NAMED_COLORS: frozenset[str] = frozenset(
    {
        "aqua",
        "black",
        "blue",
        "fuchsia",
        "gray",
        "green",
        "lime",
        "maroon",
        "navy",
        "olive",
        "orange",
        "purple",
        "red",
        "silver",
        "teal",
        "white",
        "yellow",
        "transparent",
        "currentcolor",
    }
)

COLOR_FUNCTIONS: frozenset[str] = frozenset(
    {
        "rgb",
        "rgba",
        "hsl",
        "hsla",
        "hwb",
        "lab",
        "lch",
        "oklab",
        "oklch",
        "ictcp",
        "jzazbz",
        "jzczhz",
        "alpha",
        "color",
    }
)

DIMENSION_UNITS: frozenset[str] = frozenset({"deg", "grad", "rad", "turn"})


def _build_keywords() -> dict[str, TokenType]:
    table: dict[str, TokenType] = {}
    for word in DECLARATION_KEYWORDS | RESERVED_KEYWORDS | NAMED_COLORS:
        table[word] = TokenType.KEYWORD
    for word in COLOR_FUNCTIONS:
        table[word] = TokenType.FUNCTION
    for word in DIMENSION_UNITS:
        table[word] = TokenType.DIMENSION
    return table


KEYWORDS = MappingProxyType(_build_keywords())

SYMBOLS = MappingProxyType(
    {
        "=": TokenType.EQUALS,
        "+": TokenType.PLUS,
        "-": TokenType.MINUS,
        "*": TokenType.STAR,
        ".": TokenType.DOT,
        ",": TokenType.COMMA,
        "/": TokenType.SLASH,
        "(": TokenType.LPAREN,
        ")": TokenType.RPAREN,
        "%": TokenType.MODULO,
        ";": TokenType.SEMICOLON,
    }
)


def word_type(word: str) -> TokenType:
    """Return the token type for an identifier-shaped word."""
    return KEYWORDS.get(word, TokenType.IDENTIFIER)


def symbol_type(ch: str) -> TokenType:
    """Return the token type for a single-character symbol."""
    return SYMBOLS.get(ch, TokenType.SYMBOL)
