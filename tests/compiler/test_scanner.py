# Copyright 2026 ShapeQL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the declaration scanner."""

import pytest

from shapeql.compiler.scanner import LexerError, Token, TokenType, clean_doc_comment, tokenize

# ###############
# Test Helpers
# ###############


def _tokens_no_eof(source: str) -> list[Token]:
    """Return all tokens except the terminal EOF token."""
    result = tokenize(source)
    assert result[-1].type == TokenType.EOF
    return result[:-1]


def _types(source: str) -> list[TokenType]:
    return [tok.type for tok in _tokens_no_eof(source)]


def _values(source: str) -> list[str]:
    return [tok.value for tok in _tokens_no_eof(source)]


# ###############
# EOF Handling
# ###############


class TestEof:
    def test_empty_string_produces_eof(self) -> None:
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF
        assert (tokens[0].line, tokens[0].column) == (1, 1)

    def test_whitespace_only_produces_eof(self) -> None:
        assert _types("  \t\r\n  ") == []

    def test_byte_order_mark_is_whitespace(self) -> None:
        assert _types("\ufeffinterface") == [TokenType.INTERFACE]


# ###############
# Keywords and Identifiers
# ###############


class TestKeywords:
    @pytest.mark.parametrize(
        ("source", "expected_type"),
        [
            ("interface", TokenType.INTERFACE),
            ("type", TokenType.TYPE),
            ("enum", TokenType.ENUM),
            ("export", TokenType.EXPORT),
            ("declare", TokenType.DECLARE),
            ("extends", TokenType.EXTENDS),
            ("readonly", TokenType.READONLY),
            ("null", TokenType.NULL),
            ("undefined", TokenType.UNDEFINED),
            ("true", TokenType.TRUE),
            ("false", TokenType.FALSE),
        ],
    )
    def test_keyword(self, source: str, expected_type: TokenType) -> None:
        assert _types(source) == [expected_type]

    def test_builtin_type_names_are_identifiers(self) -> None:
        assert _types("string number boolean") == [TokenType.IDENTIFIER] * 3

    def test_keyword_prefix_is_identifier(self) -> None:
        tokens = _tokens_no_eof("interfaces")
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].value == "interfaces"

    def test_identifier_with_dollar_and_underscore(self) -> None:
        assert _values("$ref _private a1") == ["$ref", "_private", "a1"]


# ###############
# Symbols
# ###############


class TestSymbols:
    def test_object_body_symbols(self) -> None:
        assert _types("{ a?: b; }") == [
            TokenType.LBRACE,
            TokenType.IDENTIFIER,
            TokenType.QUESTION,
            TokenType.COLON,
            TokenType.IDENTIFIER,
            TokenType.SEMICOLON,
            TokenType.RBRACE,
        ]

    def test_fat_arrow_is_one_token(self) -> None:
        assert _types("() => T") == [
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.FAT_ARROW,
            TokenType.IDENTIFIER,
        ]

    def test_equals_alone(self) -> None:
        assert _types("= >") == [TokenType.EQUALS, TokenType.RANGLE]

    def test_generic_and_union_symbols(self) -> None:
        assert _values("Array<A | B>[]") == ["Array", "<", "A", "|", "B", ">", "[", "]"]

    def test_unexpected_character_raises(self) -> None:
        with pytest.raises(LexerError) as exc_info:
            tokenize("interface A # {}")
        assert exc_info.value.line == 1
        assert exc_info.value.column == 13
        assert "Unexpected character" in str(exc_info.value)


# ###############
# Literals
# ###############


class TestLiterals:
    def test_double_quoted_string(self) -> None:
        tokens = _tokens_no_eof('"hello"')
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].value == "hello"

    def test_single_quoted_string(self) -> None:
        tokens = _tokens_no_eof("'it\\'s'")
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].value == "it's"

    def test_escape_sequences(self) -> None:
        assert _values(r'"a\nb\tc\\d"') == ["a\nb\tc\\d"]

    def test_invalid_escape_raises(self) -> None:
        with pytest.raises(LexerError, match="Invalid escape sequence"):
            tokenize(r'"\q"')

    def test_unterminated_string_raises(self) -> None:
        with pytest.raises(LexerError, match="Unterminated string literal"):
            tokenize("'open")

    def test_newline_in_string_raises(self) -> None:
        with pytest.raises(LexerError, match="Unterminated string literal"):
            tokenize("'line\nbreak'")

    def test_integer(self) -> None:
        tokens = _tokens_no_eof("12")
        assert tokens[0].type == TokenType.INTEGER
        assert tokens[0].value == "12"

    def test_float(self) -> None:
        tokens = _tokens_no_eof("1.25")
        assert tokens[0].type == TokenType.FLOAT
        assert tokens[0].value == "1.25"

    def test_trailing_dot_is_not_float(self) -> None:
        assert _types("1.") == [TokenType.INTEGER, TokenType.DOT]

    def test_negative_number_is_minus_then_number(self) -> None:
        assert _types("-3") == [TokenType.MINUS, TokenType.INTEGER]


# ###############
# Comments
# ###############


class TestComments:
    def test_line_comment_skipped(self) -> None:
        assert _types("// comment\ninterface") == [TokenType.INTERFACE]

    def test_block_comment_skipped(self) -> None:
        assert _types("/* block\ncomment */ type") == [TokenType.TYPE]

    def test_block_comment_has_no_doc(self) -> None:
        tokens = _tokens_no_eof("/* plain */ type")
        assert tokens[0].doc is None

    def test_doc_comment_attached_to_next_token(self) -> None:
        tokens = _tokens_no_eof("/** The user. */ interface User")
        assert tokens[0].doc == "The user."
        assert tokens[1].doc is None

    def test_empty_comment_is_not_doc(self) -> None:
        tokens = _tokens_no_eof("/**/ type")
        assert tokens[0].doc is None

    def test_multiline_doc_comment(self) -> None:
        source = "/**\n * First line.\n * Second line.\n */\ninterface A"
        tokens = _tokens_no_eof(source)
        assert tokens[0].doc == "First line.\nSecond line."

    def test_unterminated_block_comment_raises(self) -> None:
        with pytest.raises(LexerError, match="Unterminated block comment"):
            tokenize("/** never closed")

    def test_line_tracking_after_comment(self) -> None:
        tokens = _tokens_no_eof("/* a\nb */\n  type")
        assert tokens[0].line == 3
        assert tokens[0].column == 3


class TestCleanDocComment:
    def test_strips_gutters(self) -> None:
        assert clean_doc_comment("\n * Hello\n * world\n ") == "Hello\nworld"

    def test_stops_at_tag(self) -> None:
        assert clean_doc_comment(" Summary.\n * @deprecated use B\n") == "Summary."

    def test_blank_comment_is_none(self) -> None:
        assert clean_doc_comment("\n *\n ") is None
