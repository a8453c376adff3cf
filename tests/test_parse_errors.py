"""Tests for parser error messages and positions."""

from __future__ import annotations

import pytest

from colorexpr.errors import (
    InvalidAssignmentTargetError,
    InvalidDimensionUnitError,
    ParseError,
    UnexpectedTokenError,
)
from colorexpr.parser import parse
from colorexpr.tokens import TokenType


class TestUnexpectedToken:
    def test_dangling_operator(self):
        with pytest.raises(UnexpectedTokenError, match="unexpected end of input") as exc_info:
            parse("1 +")
        err = exc_info.value
        assert err.token.type == TokenType.END
        assert err.span.start.index == 3

    def test_expected_expression(self):
        with pytest.raises(UnexpectedTokenError, match="expected an expression"):
            parse("1 + ")

    def test_stray_rparen(self):
        with pytest.raises(UnexpectedTokenError, match="unexpected rparen '\\)'"):
            parse(")")

    def test_keyword_in_expression_position(self):
        with pytest.raises(UnexpectedTokenError, match="unexpected keyword 'let'"):
            parse("1 + let")

    def test_reserved_keyword(self):
        with pytest.raises(UnexpectedTokenError, match="unexpected keyword 'for'"):
            parse("for")

    def test_is_a_parse_error(self):
        with pytest.raises(ParseError):
            parse("*")


class TestMissingParts:
    def test_missing_variable_name(self):
        with pytest.raises(
            UnexpectedTokenError, match="expected a variable name after 'let'"
        ) as exc_info:
            parse("let = 1")
        assert exc_info.value.token.type == TokenType.EQUALS

    def test_missing_equals(self):
        with pytest.raises(UnexpectedTokenError, match="expected '=' after 'x'"):
            parse("const x 1")

    def test_missing_initializer(self):
        with pytest.raises(UnexpectedTokenError, match="unexpected end of input"):
            parse("var x =")

    def test_unclosed_call(self):
        with pytest.raises(
            UnexpectedTokenError, match="expected '\\)' to close the call to 'rgb'"
        ):
            parse("rgb(1")

    def test_unclosed_call_after_comma(self):
        with pytest.raises(UnexpectedTokenError, match="expected an expression"):
            parse("rgb(1,")

    def test_unclosed_group(self):
        with pytest.raises(UnexpectedTokenError, match="expected '\\)' to close the group"):
            parse("(1 + 2")

    def test_lone_hash(self):
        with pytest.raises(UnexpectedTokenError, match="expected hex digits after '#'"):
            parse("#")


class TestLiteralErrors:
    def test_malformed_number(self):
        with pytest.raises(UnexpectedTokenError, match="malformed number '1.2.3'"):
            parse("1.2.3")

    @pytest.mark.parametrize("digits", ["²", "½", "1²"])
    def test_non_decimal_digits(self, digits):
        with pytest.raises(UnexpectedTokenError, match=f"malformed number '{digits}'") as exc_info:
            parse(digits)
        assert exc_info.value.token.type == TokenType.NUMBER

    def test_malformed_percent(self):
        with pytest.raises(UnexpectedTokenError, match="malformed number"):
            parse("1..5%")

    def test_unit_without_number(self):
        with pytest.raises(UnexpectedTokenError, match="expected a number before the unit"):
            parse("deg")

    def test_unknown_unit(self):
        with pytest.raises(InvalidDimensionUnitError, match="invalid dimension unit 'px'") as exc_info:
            parse("90px")
        err = exc_info.value
        assert "deg, grad, rad, turn" in err.message
        assert (err.span.start.index, err.span.end.index) == (0, 4)

    def test_unit_is_case_sensitive(self):
        with pytest.raises(InvalidDimensionUnitError):
            parse("90DEG")


class TestAssignmentTarget:
    def test_number_target(self):
        with pytest.raises(InvalidAssignmentTargetError, match="invalid assignment target"):
            parse("1 = 2")

    def test_call_target(self):
        with pytest.raises(InvalidAssignmentTargetError):
            parse("rgb(1) = red")

    def test_series_target(self):
        with pytest.raises(InvalidAssignmentTargetError):
            parse("a, b = 1")

    def test_target_span_runs_to_equals(self):
        with pytest.raises(InvalidAssignmentTargetError) as exc_info:
            parse("1 = 2")
        span = exc_info.value.span
        assert (span.start.index, span.end.index) == (0, 3)


class TestErrorPosition:
    def test_error_on_second_line(self):
        with pytest.raises(ParseError) as exc_info:
            parse("let a = 1;\nlet = 2")
        start = exc_info.value.span.start
        assert (start.line, start.column) == (2, 5)

    def test_error_format_contains_arrow(self):
        with pytest.raises(ParseError) as exc_info:
            parse("rgb(1")
        formatted = exc_info.value.format("test.cexpr")
        assert "-->" in formatted
        assert "test.cexpr" in formatted

    def test_error_format_underlines_token(self):
        with pytest.raises(ParseError) as exc_info:
            parse("1 + 90px")
        formatted = exc_info.value.format()
        assert formatted.splitlines()[-1] == "  |     ^^^^"
