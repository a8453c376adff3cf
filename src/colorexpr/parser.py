"""Recursive descent parser: token list to positioned AST."""

from __future__ import annotations

import regex

from colorexpr.ast import (
    AssignmentExpression,
    BinaryExpression,
    CallExpression,
    DimensionLiteral,
    Expression,
    ExpressionStatement,
    GroupExpression,
    HexLiteral,
    Identifier,
    NumericLiteral,
    PercentLiteral,
    Program,
    SeriesExpression,
    Statement,
    StringLiteral,
    UnaryExpression,
    VariableDeclaration,
)
from colorexpr.errors import (
    InvalidAssignmentTargetError,
    InvalidDimensionUnitError,
    UnexpectedTokenError,
)
from colorexpr.lexer import Tokenizer
from colorexpr.stream import CharacterStream
from colorexpr.tokens import (
    DECLARATION_KEYWORDS,
    DIMENSION_UNITS,
    NAMED_COLORS,
    START,
    TRIVIA,
    Position,
    Span,
    Token,
    TokenType,
)

_ADDITIVE = (TokenType.PLUS, TokenType.MINUS)
_MULTIPLICATIVE = (TokenType.STAR, TokenType.SLASH, TokenType.MODULO)

_DIMENSION = regex.compile(r"(?P<number>[\p{N}.]+)(?P<unit>\p{L}+)")


class Parser:
    """Recursive descent parser for colorexpr token lists.

    Trivia tokens (whitespace, newlines, comments) are dropped up front.
    The first error aborts the parse.
    """

    def __init__(self, tokens: list[Token], source: str = "") -> None:
        self._tokens = [tok for tok in tokens if tok.type not in TRIVIA]
        if not self._tokens or self._tokens[-1].type != TokenType.END:
            end = self._tokens[-1].span.end if self._tokens else START
            self._tokens.append(Token(TokenType.END, "", "", Span(end, end)))
        self._source = source
        self._pos = 0

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> Token:
        idx = self._pos + offset
        if idx < len(self._tokens):
            return self._tokens[idx]
        return self._tokens[-1]  # END

    def _at(self, *types: TokenType) -> bool:
        return self._peek().type in types

    def _at_end(self) -> bool:
        return self._peek().type == TokenType.END

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        if tok.type != TokenType.END:
            self._pos += 1
        return tok

    def _expect(self, tt: TokenType, message: str) -> Token:
        tok = self._peek()
        if tok.type != tt:
            raise self._unexpected(tok, message)
        return self._advance()

    def _prev_end(self) -> Position:
        """End position of the previously consumed token."""
        if self._pos > 0:
            return self._tokens[self._pos - 1].span.end
        return self._tokens[0].span.start

    def _unexpected(self, tok: Token, expected: str | None = None) -> UnexpectedTokenError:
        if tok.type == TokenType.END:
            message = "unexpected end of input"
        else:
            message = f"unexpected {tok.type.name.lower()} {tok.value!r}"
        if expected:
            message += f", {expected}"
        return UnexpectedTokenError(message, tok, self._source)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def parse(self) -> Program:
        if self._at_end():
            return Program((), Span(START, START))

        start = self._peek().span.start
        body: list[Statement] = []
        while not self._at_end():
            body.append(self._parse_statement())
        return Program(tuple(body), Span(start, self._prev_end()))

    def _parse_statement(self) -> Statement:
        tok = self._peek()
        if tok.type == TokenType.KEYWORD and tok.value in DECLARATION_KEYWORDS:
            stmt: Statement = self._parse_declaration()
        else:
            expr = self._parse_expression()
            stmt = ExpressionStatement(expr, expr.span)

        if self._at(TokenType.SEMICOLON):
            semi = self._advance()
            stmt = _with_end(stmt, semi.span.end)
        return stmt

    def _parse_declaration(self) -> VariableDeclaration:
        keyword = self._advance()
        name_tok = self._expect(
            TokenType.IDENTIFIER, f"expected a variable name after '{keyword.value}'"
        )
        self._expect(TokenType.EQUALS, f"expected '=' after '{name_tok.value}'")
        init = self._parse_expression()
        name = Identifier(name_tok.value, name_tok.span)
        return VariableDeclaration(
            keyword.value, name, init, Span(keyword.span.start, init.span.end)
        )

    # ------------------------------------------------------------------
    # Expressions, loosest to tightest
    # ------------------------------------------------------------------

    def _parse_expression(self) -> Expression:
        return self._parse_assignment()

    def _parse_assignment(self) -> Expression:
        left = self._parse_series()
        if not self._at(TokenType.EQUALS):
            return left

        eq = self._advance()
        if not isinstance(left, Identifier):
            raise InvalidAssignmentTargetError(
                "invalid assignment target, expected an identifier before '='",
                Span(left.span.start, eq.span.end),
                self._source,
            )
        value = self._parse_assignment()
        return AssignmentExpression(left, value, Span(left.span.start, value.span.end))

    def _parse_series(self) -> Expression:
        first = self._parse_addition()
        if not self._at(TokenType.COMMA):
            return first

        items = [first]
        while self._at(TokenType.COMMA):
            self._advance()
            items.append(self._parse_addition())
        return SeriesExpression(tuple(items), Span(first.span.start, items[-1].span.end))

    def _parse_addition(self) -> Expression:
        left = self._parse_multiplication()
        while self._at(*_ADDITIVE):
            op = self._advance()
            right = self._parse_multiplication()
            left = BinaryExpression(
                op.value, left, right, Span(left.span.start, right.span.end)
            )
        return left

    def _parse_multiplication(self) -> Expression:
        left = self._parse_unary()
        while self._at(*_MULTIPLICATIVE):
            op = self._advance()
            right = self._parse_unary()
            left = BinaryExpression(
                op.value, left, right, Span(left.span.start, right.span.end)
            )
        return left

    def _parse_unary(self) -> Expression:
        if self._at(*_ADDITIVE):
            op = self._advance()
            argument = self._parse_unary()
            return UnaryExpression(op.value, argument, Span(op.span.start, argument.span.end))
        return self._parse_call()

    def _parse_call(self) -> Expression:
        callee = self._parse_primary()
        if not (isinstance(callee, Identifier) and self._at(TokenType.LPAREN)):
            return callee

        self._advance()
        args: list[Expression] = []
        if not self._at(TokenType.RPAREN):
            # Arguments sit below the series level so commas separate them
            args.append(self._parse_addition())
            while self._at(TokenType.COMMA):
                self._advance()
                args.append(self._parse_addition())
        rparen = self._expect(
            TokenType.RPAREN, f"expected ')' to close the call to '{callee.name}'"
        )
        return CallExpression(callee, tuple(args), Span(callee.span.start, rparen.span.end))

    def _parse_primary(self) -> Expression:
        tok = self._peek()

        match tok.type:
            case TokenType.NUMBER:
                self._advance()
                return NumericLiteral(self._number(tok, tok.value), tok.raw, tok.span)
            case TokenType.PERCENT:
                self._advance()
                return PercentLiteral(self._number(tok, tok.value[:-1]), tok.raw, tok.span)
            case TokenType.DIMENSION:
                self._advance()
                return self._dimension(tok)
            case TokenType.HEXVALUE:
                if len(tok.value) < 2:
                    raise self._unexpected(tok, "expected hex digits after '#'")
                self._advance()
                return HexLiteral(tok.value, tok.raw, tok.span)
            case TokenType.STRING:
                self._advance()
                return StringLiteral(tok.value, tok.raw, tok.span)
            case TokenType.IDENTIFIER | TokenType.FUNCTION:
                self._advance()
                return Identifier(tok.value, tok.span)
            case TokenType.KEYWORD if tok.value in NAMED_COLORS:
                self._advance()
                return Identifier(tok.value, tok.span)
            case TokenType.LPAREN:
                lparen = self._advance()
                expr = self._parse_expression()
                rparen = self._expect(TokenType.RPAREN, "expected ')' to close the group")
                return GroupExpression(expr, Span(lparen.span.start, rparen.span.end))
            case _:
                raise self._unexpected(tok, "expected an expression")

    # ------------------------------------------------------------------
    # Literal helpers
    # ------------------------------------------------------------------

    def _number(self, tok: Token, text: str) -> int | float:
        try:
            if "." in text:
                return float(text)
            return int(text)
        except ValueError:
            raise self._unexpected(tok, f"malformed number {text!r}") from None

    def _dimension(self, tok: Token) -> DimensionLiteral:
        match = _DIMENSION.fullmatch(tok.value)
        if match is None:
            raise self._unexpected(tok, "expected a number before the unit")
        unit = match.group("unit")
        if unit not in DIMENSION_UNITS:
            units = ", ".join(sorted(DIMENSION_UNITS))
            raise InvalidDimensionUnitError(
                f"invalid dimension unit {unit!r}, expected one of: {units}",
                tok.span,
                self._source,
            )
        value = self._number(tok, match.group("number"))
        return DimensionLiteral(value, unit, tok.raw, tok.span)


def _with_end(stmt: Statement, end: Position) -> Statement:
    """Extend a statement's span to cover a trailing ';'."""
    span = Span(stmt.span.start, end)
    if isinstance(stmt, VariableDeclaration):
        return VariableDeclaration(stmt.kind, stmt.name, stmt.init, span)
    return ExpressionStatement(stmt.expression, span)


def parse(source: str) -> Program:
    """Convenience function: parse source text and return a Program AST."""
    stream = CharacterStream(source)
    tokens = Tokenizer(keep_trivia=False).tokenize(stream)
    return Parser(tokens, stream.source).parse()
