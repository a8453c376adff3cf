"""Diagnostic dumps of characters, tokens and ASTs to stderr."""

from __future__ import annotations

import sys
import textwrap
from collections.abc import Iterable
from dataclasses import fields, is_dataclass
from typing import Any, TextIO

from colorexpr.ast import Node
from colorexpr.chars import Character
from colorexpr.tokens import Position, Span, Token

DEFAULT_WIDTH = 80

_BOXES = {
    # top-left, horizontal, top-right, vertical, bottom-left, bottom-right
    "single": ("┌", "─", "┐", "│", "└", "┘"),
    "double": ("╔", "═", "╗", "║", "╚", "╝"),
    "heavy": ("┏", "━", "┓", "┃", "┗", "┛"),
}

BOX_STYLES = tuple(_BOXES)


def print_line(
    width: int = DEFAULT_WIDTH, line: str = "═", *, file: TextIO = sys.stderr
) -> None:
    """Write a horizontal divider *width* characters wide."""
    file.write(line * width + "\n")


def box_text(
    text: str,
    *,
    width: int = DEFAULT_WIDTH,
    style: str = "single",
    file: TextIO = sys.stderr,
) -> None:
    """Write *text* inside a box, wrapping lines that do not fit."""
    if style not in _BOXES:
        raise ValueError(f"unknown box style {style!r}, expected one of {BOX_STYLES}")
    tl, h, tr, v, bl, br = _BOXES[style]
    inner = max(1, width - 4)

    rows: list[str] = []
    for paragraph in text.splitlines() or [""]:
        rows.extend(textwrap.wrap(paragraph, inner) or [""])

    file.write(f"{tl}{h * (inner + 2)}{tr}\n")
    for row in rows:
        file.write(f"{v} {row:<{inner}} {v}\n")
    file.write(f"{bl}{h * (inner + 2)}{br}\n")


def format_position(pos: Position) -> str:
    return f"{pos.line}:{pos.column}"


def format_span(span: Span) -> str:
    return f"{format_position(span.start)}-{format_position(span.end)}"


def format_character(char: Character) -> str:
    return (
        f"{char.position.index:>5}  {format_position(char.position):<8}"
        f"{char.kind.name:<16}{char.value!r}"
    )


def format_token(token: Token) -> str:
    return f"{format_span(token.span):<16}{token.type.name:<12}{token.value!r}"


def dump_characters(chars: Iterable[Character], *, file: TextIO = sys.stderr) -> None:
    """Write one line per classified character."""
    for char in chars:
        file.write(format_character(char) + "\n")


def dump_tokens(tokens: Iterable[Token], *, file: TextIO = sys.stderr) -> None:
    """Write one line per token."""
    for token in tokens:
        file.write(format_token(token) + "\n")


# ----------------------------------------------------------------------
# AST
# ----------------------------------------------------------------------


def dump_ast(node: Node, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable AST tree to *file*."""
    _dump_node(node, 0, "", file)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_node(node: Any, depth: int, label: str, f: TextIO) -> None:
    scalars: list[str] = []
    children: list[tuple[str, Any]] = []
    for field in fields(node):
        if field.name == "span":
            continue
        value = getattr(node, field.name)
        if is_dataclass(value):
            children.append((f"{field.name}: ", value))
        elif isinstance(value, tuple):
            children.extend(("", item) for item in value)
        else:
            scalars.append(f"{field.name}={value!r}")

    head = type(node).__name__
    if scalars:
        head += " " + " ".join(scalars)
    f.write(f"{_indent(depth)}{label}{head} [{format_span(node.span)}]\n")
    for child_label, child in children:
        _dump_node(child, depth + 1, child_label, f)


def ast_to_dict(node: Node) -> dict[str, Any]:
    """Convert an AST into plain dicts and lists, ready for json.dumps."""
    return _to_plain(node)


def _to_plain(value: Any) -> Any:
    if isinstance(value, (Position, Span)):
        return {field.name: _to_plain(getattr(value, field.name)) for field in fields(value)}
    if is_dataclass(value):
        result: dict[str, Any] = {"type": type(value).__name__}
        for field in fields(value):
            result[field.name] = _to_plain(getattr(value, field.name))
        return result
    if isinstance(value, tuple):
        return [_to_plain(item) for item in value]
    return value
