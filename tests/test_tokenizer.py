"""Test the tokenizer: token types, values, spans and trivia."""

import io

import pytest

from colorexpr.chars import Character, CharKind
from colorexpr.errors import EmptyTokenBufferError
from colorexpr.lexer import Tokenizer, tokenize
from colorexpr.stream import CharacterStream
from colorexpr.tokens import Position, Span, TokenType

from .conftest import assert_types, assert_values, find_tokens


class TestEnd:
    def test_empty_input(self):
        tokens = tokenize("")
        assert_types(tokens, [TokenType.END])
        assert tokens[0].value == ""
        assert tokens[0].span == Span(Position(0, 1, 1), Position(0, 1, 1))

    def test_exactly_one_end(self):
        for source in ["", "a", "rgb(1,2,3)", '"open', "/* open", "x // c"]:
            tokens = tokenize(source)
            assert tokens[-1].type == TokenType.END
            assert len(find_tokens(tokens, TokenType.END)) == 1

    def test_end_position(self):
        tokens = tokenize("ab\ncd")
        assert tokens[-1].span.start == Position(5, 2, 3)


class TestColorFunctions:
    def test_rgb_call(self, lex):
        tokens = lex("rgb(255, 0, 0)")
        assert_types(
            tokens,
            [
                TokenType.FUNCTION,
                TokenType.LPAREN,
                TokenType.NUMBER,
                TokenType.COMMA,
                TokenType.WHITESPACE,
                TokenType.NUMBER,
                TokenType.COMMA,
                TokenType.WHITESPACE,
                TokenType.NUMBER,
                TokenType.RPAREN,
            ],
        )
        assert_values(tokens, ["rgb", "(", "255", ",", " ", "0", ",", " ", "0", ")"])

    def test_hex_value(self, lex):
        tokens = lex("#ff00ff")
        assert_types(tokens, [TokenType.HEXVALUE])
        assert tokens[0].value == "#ff00ff"

    def test_hex_stops_at_non_hex_letter(self, lex):
        tokens = lex("#abcg")
        assert_types(tokens, [TokenType.HEXVALUE, TokenType.IDENTIFIER])
        assert_values(tokens, ["#abc", "g"])

    def test_percent(self, lex):
        tokens = lex("50%")
        assert_types(tokens, [TokenType.PERCENT])
        assert tokens[0].value == "50%"

    def test_dimension(self, lex):
        tokens = lex("90deg")
        assert_types(tokens, [TokenType.DIMENSION])
        assert tokens[0].value == "90deg"

    def test_decimal_number(self, lex):
        tokens = lex("0.5")
        assert_types(tokens, [TokenType.NUMBER])
        assert tokens[0].value == "0.5"

    def test_hsl_with_mixed_literals(self, lex):
        tokens = lex("hsl(120deg, 50%, 25%)", keep_trivia=False)
        assert_types(
            tokens,
            [
                TokenType.FUNCTION,
                TokenType.LPAREN,
                TokenType.DIMENSION,
                TokenType.COMMA,
                TokenType.PERCENT,
                TokenType.COMMA,
                TokenType.PERCENT,
                TokenType.RPAREN,
            ],
        )


class TestWords:
    def test_declaration_statement(self, lex):
        tokens = lex('let name = "John";', keep_trivia=False)
        assert_types(
            tokens,
            [
                TokenType.KEYWORD,
                TokenType.IDENTIFIER,
                TokenType.EQUALS,
                TokenType.STRING,
                TokenType.SEMICOLON,
            ],
        )
        assert_values(tokens, ["let", "name", "=", "John", ";"])

    def test_keywords(self, lex):
        tokens = lex("const let var for of new", keep_trivia=False)
        assert all(t.type == TokenType.KEYWORD for t in tokens)

    def test_named_colors_are_keywords(self, lex):
        tokens = lex("red transparent currentcolor", keep_trivia=False)
        assert_types(tokens, [TokenType.KEYWORD] * 3)

    def test_function_names(self, lex):
        tokens = lex("oklch hwb color alpha", keep_trivia=False)
        assert_types(tokens, [TokenType.FUNCTION] * 4)

    def test_unit_word(self, lex):
        tokens = lex("turn", keep_trivia=False)
        assert_types(tokens, [TokenType.DIMENSION])

    def test_identifier_with_digits(self, lex):
        tokens = lex("color2")
        assert_types(tokens, [TokenType.IDENTIFIER])
        assert tokens[0].value == "color2"

    def test_unicode_identifier(self, lex):
        tokens = lex("größe")
        assert_types(tokens, [TokenType.IDENTIFIER])
        assert tokens[0].value == "größe"

    def test_lookup_is_case_sensitive(self, lex):
        tokens = lex("RGB")
        assert_types(tokens, [TokenType.IDENTIFIER])


class TestSymbols:
    def test_arithmetic(self, lex):
        tokens = lex("12+34")
        assert_types(tokens, [TokenType.NUMBER, TokenType.PLUS, TokenType.NUMBER])

    def test_every_operator(self, lex):
        tokens = lex("= + - * . , / ( ) %", keep_trivia=False)
        assert_types(
            tokens,
            [
                TokenType.EQUALS,
                TokenType.PLUS,
                TokenType.MINUS,
                TokenType.STAR,
                TokenType.DOT,
                TokenType.COMMA,
                TokenType.SLASH,
                TokenType.LPAREN,
                TokenType.RPAREN,
                TokenType.MODULO,
            ],
        )

    def test_division_between_numbers(self, lex):
        tokens = lex("10/2")
        assert_types(tokens, [TokenType.NUMBER, TokenType.SLASH, TokenType.NUMBER])

    def test_trailing_slash(self, lex):
        tokens = lex("1/")
        assert_types(tokens, [TokenType.NUMBER, TokenType.SLASH])

    def test_generic_symbols(self, lex):
        tokens = lex("@€", keep_trivia=False)
        assert_types(tokens, [TokenType.SYMBOL, TokenType.SYMBOL])
        assert_values(tokens, ["@", "€"])

    def test_symbols_are_single_characters(self, lex):
        tokens = lex("((")
        assert_types(tokens, [TokenType.LPAREN, TokenType.LPAREN])


class TestStrings:
    def test_double_quoted(self, lex):
        tokens = lex('"hello"')
        assert_types(tokens, [TokenType.STRING])
        assert tokens[0].value == "hello"
        assert tokens[0].raw == '"hello"'

    def test_single_and_backtick(self, lex):
        tokens = lex("'a' `b`", keep_trivia=False)
        assert_values(tokens, ["a", "b"])

    def test_other_quotes_inside(self, lex):
        tokens = lex("\"it's\"")
        assert_values(tokens, ["it's"])

    def test_unterminated_string(self, lex):
        tokens = lex('"hello')
        assert_types(tokens, [TokenType.STRING])
        assert tokens[0].value == "hello"

    def test_unterminated_at_newline(self, lex):
        tokens = lex('"abc\nx')
        assert_types(tokens, [TokenType.STRING, TokenType.NEWLINE, TokenType.IDENTIFIER])
        assert tokens[0].value == "abc"

    def test_empty_string_has_no_token(self, lex):
        tokens = lex('""')
        assert tokens == []

    def test_empty_string_between_tokens(self, lex):
        tokens = lex('a""b')
        assert_types(tokens, [TokenType.IDENTIFIER, TokenType.IDENTIFIER])

    def test_string_span_covers_quotes(self, lex):
        tokens = lex(' "ab" ')
        string = find_tokens(tokens, TokenType.STRING)[0]
        assert string.span.start == Position(1, 1, 2)
        assert string.span.end == Position(5, 1, 6)


class TestTrivia:
    def test_whitespace_run_coalesces(self, lex):
        tokens = lex("a \t  b")
        assert_types(tokens, [TokenType.IDENTIFIER, TokenType.WHITESPACE, TokenType.IDENTIFIER])
        assert tokens[1].value == " \t  "

    def test_crlf_is_one_newline(self, lex):
        tokens = lex("a\r\nb")
        assert_types(tokens, [TokenType.IDENTIFIER, TokenType.NEWLINE, TokenType.IDENTIFIER])
        assert tokens[1].value == "\r\n"

    def test_each_newline_is_separate(self, lex):
        tokens = lex("\n\n")
        assert_types(tokens, [TokenType.NEWLINE, TokenType.NEWLINE])

    def test_lone_carriage_returns(self, lex):
        tokens = lex("\r\r")
        assert_types(tokens, [TokenType.NEWLINE, TokenType.NEWLINE])

    def test_no_trivia(self, lex):
        tokens = lex("a \n b", keep_trivia=False)
        assert_types(tokens, [TokenType.IDENTIFIER, TokenType.IDENTIFIER])

    def test_every_character_accounted_for(self):
        source = "let c = rgb(255, 0, 0); // red\n/* block */ 'q'\r\n#fff"
        tokens = tokenize(source)
        assert "".join(t.raw for t in tokens) == source

    def test_spans_are_contiguous(self):
        tokens = tokenize("hsl(1deg,  2%)\n")
        for prev, cur in zip(tokens, tokens[1:]):
            assert prev.span.end == cur.span.start


class TestPositions:
    def test_token_spans(self, lex):
        tokens = lex("ab + 1")
        assert tokens[0].span == Span(Position(0, 1, 1), Position(2, 1, 3))
        assert tokens[2].span == Span(Position(3, 1, 4), Position(4, 1, 5))

    def test_second_line(self, lex):
        tokens = lex("a\n  b", keep_trivia=False)
        assert tokens[1].span.start == Position(4, 2, 3)


class TestEntryPoints:
    def test_tokenize_stream(self):
        stream = CharacterStream("1+2")
        tokens = Tokenizer().tokenize(stream)
        assert_types(
            tokens, [TokenType.NUMBER, TokenType.PLUS, TokenType.NUMBER, TokenType.END]
        )

    def test_tokenize_characters(self):
        chars = Tokenizer.get_characters("rgb(1)")
        tokens = Tokenizer().tokenize_characters(chars)
        assert_values(tokens, ["rgb", "(", "1", ")", ""])

    def test_tokenize_characters_empty(self):
        tokens = Tokenizer().tokenize_characters([])
        assert_types(tokens, [TokenType.END])

    def test_get_characters(self):
        chars = Tokenizer.get_characters("a b")
        assert [c.kind for c in chars] == [CharKind.LETTER, CharKind.WHITESPACE, CharKind.LETTER]

    def test_tokenizer_is_reusable(self):
        tokenizer = Tokenizer()
        first = tokenizer.tokenize('"open')
        second = tokenizer.tokenize("1")
        assert_types(first, [TokenType.STRING, TokenType.END])
        assert_types(second, [TokenType.NUMBER, TokenType.END])


class TestInternalErrors:
    def test_empty_buffer_raises(self):
        tokenizer = Tokenizer()
        span = Span(Position(0, 1, 1), Position(0, 1, 1))
        with pytest.raises(EmptyTokenBufferError, match="empty buffer"):
            tokenizer._build_token(TokenType.NUMBER, [], "", span)

    def test_build_token_from_characters(self):
        tokenizer = Tokenizer()
        chars = [Character("+", CharKind.PLUS, Position(0, 1, 1))]
        span = Span(Position(0, 1, 1), Position(1, 1, 2))
        token = tokenizer._build_token(TokenType.SYMBOL, chars, "+", span)
        assert token.type == TokenType.PLUS


class TestLogging:
    def test_logs_header_and_tokens(self):
        out = io.StringIO()
        Tokenizer().with_logging("DEMO", file=out).tokenize("rgb(1)")
        text = out.getvalue()
        assert "DEMO" in text
        assert "RESULT (TOKENS):" in text
        assert "FUNCTION" in text

    def test_logging_is_one_shot(self):
        out = io.StringIO()
        tokenizer = Tokenizer().with_logging(file=out)
        tokenizer.tokenize("a")
        logged = out.getvalue()
        tokenizer.tokenize("b")
        assert out.getvalue() == logged

    def test_without_logging(self):
        out = io.StringIO()
        Tokenizer().with_logging(file=out).without_logging().tokenize("a")
        assert out.getvalue() == ""
