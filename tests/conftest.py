"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from colorexpr.ast import ExpressionStatement, Program
from colorexpr.lexer import tokenize
from colorexpr.parser import parse
from colorexpr.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding END)."""

    def _lex(source: str, keep_trivia: bool = True) -> list[Token]:
        tokens = tokenize(source, keep_trivia=keep_trivia)
        # Strip trailing END for convenience
        return [t for t in tokens if t.type != TokenType.END]

    return _lex


@pytest.fixture
def parse_source():
    """Return a helper that parses source and returns a Program."""

    def _parse(source: str) -> Program:
        return parse(source)

    return _parse


@pytest.fixture
def parse_expr():
    """Return a helper that parses a single expression statement."""

    def _parse(source: str):
        program = parse(source)
        assert len(program.body) == 1, f"Expected 1 statement, got {len(program.body)}"
        stmt = program.body[0]
        assert isinstance(stmt, ExpressionStatement), (
            f"Expected ExpressionStatement, got {type(stmt).__name__}"
        )
        return stmt.expression

    return _parse


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def find_tokens(tokens: list[Token], tt: TokenType) -> list[Token]:
    """Return all tokens of the given type."""
    return [t for t in tokens if t.type == tt]
