"""Tests for the Geode shorthand lexer."""

from __future__ import annotations

import pytest

from geode.core.errors import LexicalError, ParseError
from geode.core.lexer import Lexer, TokenType, tokenize


def values(text: str) -> list[str]:
    return [t.value for t in tokenize(text)]


def types(text: str) -> list[TokenType]:
    return [t.type for t in tokenize(text)]


class TestWhitespaceAndComments:
    def test_whitespace_is_not_a_token(self) -> None:
        assert values("  a \t b\n c  ") == ["a", "b", "c"]

    def test_leading_whitespace_kept_on_token(self) -> None:
        tokens = tokenize("a  b\nc")
        assert [t.leading for t in tokens] == ["", "  ", "\n"]

    def test_comment_discarded_with_marker(self) -> None:
        assert values("x # the x value\ny") == ["x", "y"]

    def test_comment_newline_survives_as_whitespace(self) -> None:
        tokens = tokenize("x # note\ny")
        assert tokens[1].leading == " \n"

    def test_trailing_whitespace_recorded(self) -> None:
        lexer = Lexer("a = 1\n\n")
        lexer.tokenize()
        assert lexer.trailing == "\n\n"

    def test_empty_input(self) -> None:
        assert tokenize("") == []
        assert tokenize("   # only a comment") == []


class TestStructuralTokens:
    def test_delimiters(self) -> None:
        assert types("()[]{}") == [
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.LBRACKET,
            TokenType.RBRACKET,
            TokenType.LBRACE,
            TokenType.RBRACE,
        ]

    def test_map_and_array_openers_are_single_tokens(self) -> None:
        tokens = tokenize("\\h{ } \\a[ ]")
        assert [(t.type, t.value) for t in tokens] == [
            (TokenType.MAP_OPEN, "\\h{"),
            (TokenType.RBRACE, "}"),
            (TokenType.ARRAY_OPEN, "\\a["),
            (TokenType.RBRACKET, "]"),
        ]

    def test_backslash_without_opener_is_plain(self) -> None:
        assert values("\\h x") == ["\\", "h", "x"]

    def test_arrow(self) -> None:
        assert types("a -> b") == [TokenType.ATOM, TokenType.ARROW, TokenType.ATOM]

    def test_arrow_without_spaces(self) -> None:
        assert values("a->b") == ["a", "->", "b"]


class TestOperators:
    @pytest.mark.parametrize(
        "op",
        ["**", "<=>", "<<", ">>", "<=", ">=", "<", ">", "!~", "==", "=~", "="],
    )
    def test_multi_character_operators(self, op: str) -> None:
        tokens = tokenize(f"a {op} b")
        assert tokens[1].type == TokenType.OPERATOR
        assert tokens[1].value == op

    @pytest.mark.parametrize("op", ["+", "-", "*", "/", "^", "&", "|", "!"])
    def test_single_character_operators_with_assignment(self, op: str) -> None:
        assert values(f"a {op} b") == ["a", op, "b"]
        assert values(f"a {op}= b") == ["a", f"{op}=", "b"]

    def test_longest_operator_wins(self) -> None:
        assert values("a<=>b") == ["a", "<=>", "b"]
        assert values("2**3") == ["2", "**", "3"]

    def test_increment_and_decrement(self) -> None:
        assert types("x++ y--") == [
            TokenType.ATOM,
            TokenType.INCREMENT,
            TokenType.ATOM,
            TokenType.DECREMENT,
        ]

    def test_unknown_punctuation_passes_as_operator(self) -> None:
        tokens = tokenize("a; b % c")
        assert [(t.type, t.value) for t in tokens[1::2]] == [
            (TokenType.OPERATOR, ";"),
            (TokenType.OPERATOR, "%"),
        ]


class TestStrings:
    def test_string_keeps_quotes(self) -> None:
        tokens = tokenize('puts "hello world"')
        assert tokens[1].type == TokenType.STRING
        assert tokens[1].value == '"hello world"'

    def test_escaped_quote(self) -> None:
        tokens = tokenize('"say \\"hi\\""')
        assert len(tokens) == 1
        assert tokens[0].value == '"say \\"hi\\""'

    def test_brackets_inside_string_are_not_structural(self) -> None:
        assert types('"(]{"') == [TokenType.STRING]

    def test_hash_inside_string_is_not_a_comment(self) -> None:
        assert values('"#{name}" x') == ['"#{name}"', "x"]

    def test_unterminated_string(self) -> None:
        with pytest.raises(LexicalError, match="Unexpected '\"'"):
            tokenize('x = "abc')

    def test_lone_quote(self) -> None:
        with pytest.raises(ParseError):
            tokenize('"')

    def test_error_location(self) -> None:
        with pytest.raises(LexicalError) as exc_info:
            tokenize('a\nx = "abc')
        assert exc_info.value.context is not None
        assert exc_info.value.context.line == 2
        assert exc_info.value.context.column == 5


class TestAtoms:
    @pytest.mark.parametrize(
        "atom",
        ["name", "42", "3.14", ".upcase", "empty?", "save!", ":sym", "A::B", "@ivar", "$stdout", "1..5"],
    )
    def test_atom(self, atom: str) -> None:
        tokens = tokenize(atom)
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.ATOM
        assert tokens[0].value == atom

    def test_short_lambda_symbol_is_one_atom(self) -> None:
        tokens = tokenize("&:upcase")
        assert [(t.type, t.value) for t in tokens] == [(TokenType.ATOM, "&:upcase")]

    def test_comma_is_its_own_atom(self) -> None:
        tokens = tokenize("a,b")
        assert [t.value for t in tokens] == ["a", ",", "b"]
        assert tokens[1].type == TokenType.ATOM

    def test_method_chain(self) -> None:
        assert values("list.map.first") == ["list.map.first"]


class TestPositions:
    def test_line_and_column(self) -> None:
        tokens = tokenize("a\n  bb c")
        assert [(t.line, t.column) for t in tokens] == [(1, 1), (2, 3), (2, 6)]

    def test_no_empty_tokens(self) -> None:
        assert all(t.value for t in tokenize("a (b) [c] {d} \\a[e] -> x++ # z\n"))
