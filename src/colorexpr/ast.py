"""AST node types for parsed colorexpr programs."""

from __future__ import annotations

from dataclasses import dataclass

from colorexpr.tokens import Span


# ----------------------------------------------------------------------
# Literals and names
# ----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Identifier:
    """Variable, named color, or function name."""

    name: str
    span: Span


@dataclass(frozen=True, slots=True)
class NumericLiteral:
    """Plain number. Integral text gives an int, anything with '.' a float."""

    value: int | float
    raw: str
    span: Span


@dataclass(frozen=True, slots=True)
class StringLiteral:
    """Quoted string with escapes resolved."""

    value: str
    raw: str
    span: Span


@dataclass(frozen=True, slots=True)
class HexLiteral:
    """Hex color such as #ff00ff; value and raw both keep the leading '#'."""

    value: str
    raw: str
    span: Span


@dataclass(frozen=True, slots=True)
class PercentLiteral:
    value: int | float
    raw: str
    span: Span


@dataclass(frozen=True, slots=True)
class DimensionLiteral:
    """Number with an angle unit, e.g. 90deg."""

    value: int | float
    unit: str
    raw: str
    span: Span


# ----------------------------------------------------------------------
# Expressions
# ----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GroupExpression:
    """Parenthesized expression; span covers both parentheses."""

    expression: Expression
    span: Span


@dataclass(frozen=True, slots=True)
class CallExpression:
    callee: Identifier
    arguments: tuple[Expression, ...]
    span: Span


@dataclass(frozen=True, slots=True)
class UnaryExpression:
    operator: str
    argument: Expression
    span: Span


@dataclass(frozen=True, slots=True)
class BinaryExpression:
    operator: str
    left: Expression
    right: Expression
    span: Span


@dataclass(frozen=True, slots=True)
class SeriesExpression:
    """Comma-separated expressions, only built when a comma is present."""

    expressions: tuple[Expression, ...]
    span: Span


@dataclass(frozen=True, slots=True)
class AssignmentExpression:
    target: Identifier
    value: Expression
    span: Span


# ----------------------------------------------------------------------
# Statements
# ----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class VariableDeclaration:
    """const/let/var name = init"""

    kind: str
    name: Identifier
    init: Expression
    span: Span


@dataclass(frozen=True, slots=True)
class ExpressionStatement:
    expression: Expression
    span: Span


@dataclass(frozen=True, slots=True)
class Program:
    """Root node: the statements of one source string."""

    body: tuple[Statement, ...]
    span: Span


Literal = NumericLiteral | StringLiteral | HexLiteral | PercentLiteral | DimensionLiteral

Expression = (
    Identifier
    | Literal
    | GroupExpression
    | CallExpression
    | UnaryExpression
    | BinaryExpression
    | SeriesExpression
    | AssignmentExpression
)

Statement = VariableDeclaration | ExpressionStatement

Node = Program | Statement | Expression
