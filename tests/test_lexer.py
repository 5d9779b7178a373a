"""Lexer tests: token classification, positions, and lossless reconstruction."""

from __future__ import annotations

import pytest

from sparkfmt.lexer import Lexer, tokenize
from sparkfmt.tokens import TokenType

from .conftest import assert_types, assert_values, find_tokens

WS = TokenType.WS


class TestWords:
    def test_keyword_is_upper_cased(self, lex):
        tokens = lex("select")
        assert_types(tokens, [TokenType.KEYWORD])
        assert tokens[0].value == "SELECT"
        assert tokens[0].raw == "select"

    def test_mixed_case_keyword(self, lex):
        tokens = lex("SeLeCt")
        assert tokens[0].value == "SELECT"
        assert tokens[0].raw == "SeLeCt"

    def test_identifier_keeps_case(self, lex):
        tokens = lex("MyTable")
        assert_types(tokens, [TokenType.IDENTIFIER])
        assert tokens[0].value == "MyTable"

    def test_common_column_names_are_identifiers(self, lex):
        tokens = lex("value name id key source target type")
        words = [t for t in tokens if t.type != WS]
        assert all(t.type == TokenType.IDENTIFIER for t in words)

    def test_function_names_are_keywords(self, lex):
        tokens = lex("count coalesce row_number concat_ws")
        words = [t for t in tokens if t.type != WS]
        assert all(t.type == TokenType.KEYWORD for t in words)

    def test_underscore_and_digits(self, lex):
        tokens = lex("_col_1")
        assert_types(tokens, [TokenType.IDENTIFIER])
        assert tokens[0].value == "_col_1"

    def test_unicode_letters_stay_in_one_word(self, lex):
        tokens = lex("café")
        assert_types(tokens, [TokenType.IDENTIFIER])
        assert tokens[0].value == "café"


class TestQuoted:
    def test_single_quoted_string(self, lex):
        tokens = lex("'hello world'")
        assert_types(tokens, [TokenType.STRING])
        assert tokens[0].value == "'hello world'"

    def test_doubled_quote_is_kept(self, lex):
        tokens = lex("'it''s'")
        assert_types(tokens, [TokenType.STRING])
        assert tokens[0].value == "'it''s'"

    def test_unterminated_string_runs_to_end(self, lex):
        tokens = lex("'abc def")
        assert_types(tokens, [TokenType.STRING])
        assert tokens[0].value == "'abc def"

    def test_double_quoted_identifier(self, lex):
        tokens = lex('"My Col"')
        assert_types(tokens, [TokenType.IDENTIFIER])
        assert tokens[0].value == '"My Col"'

    def test_backtick_identifier(self, lex):
        tokens = lex("`my table`")
        assert_types(tokens, [TokenType.BACKTICK])
        assert tokens[0].value == "`my table`"

    def test_unterminated_backtick(self, lex):
        tokens = lex("`abc")
        assert_types(tokens, [TokenType.BACKTICK])
        assert tokens[0].value == "`abc"


class TestNumbers:
    @pytest.mark.parametrize("text", ["42", "3.14", ".5", "1e10", "1.5E-3", "2e+8"])
    def test_number_forms(self, lex, text):
        tokens = lex(text)
        assert_types(tokens, [TokenType.NUMBER])
        assert tokens[0].value == text

    def test_lone_dot_is_structural(self, lex):
        tokens = lex("a.b")
        assert_types(tokens, [TokenType.IDENTIFIER, TokenType.DOT, TokenType.IDENTIFIER])


class TestStructural:
    def test_all_structural_characters(self, lex):
        tokens = lex("(),;.")
        assert_types(
            tokens,
            [
                TokenType.LPAREN,
                TokenType.RPAREN,
                TokenType.COMMA,
                TokenType.SEMICOLON,
                TokenType.DOT,
            ],
        )


class TestOperators:
    @pytest.mark.parametrize("op", ["!=", "<>", ">=", "<=", "||", "->"])
    def test_two_char_operators(self, lex, op):
        tokens = lex(op)
        assert_types(tokens, [TokenType.OPERATOR])
        assert tokens[0].value == op

    def test_one_char_operators(self, lex):
        tokens = lex("+-*/%=<>")
        # "<>" pairs up, the rest are single characters
        assert_values(tokens, ["+", "-", "*", "/", "%", "=", "<>"])

    def test_unknown_character_is_operator(self, lex):
        tokens = lex("#")
        assert_types(tokens, [TokenType.OPERATOR])
        assert tokens[0].value == "#"

    def test_lone_dollar_is_operator(self, lex):
        tokens = lex("$")
        assert_types(tokens, [TokenType.OPERATOR])


class TestComments:
    def test_line_comment_stops_at_newline(self, lex):
        tokens = lex("-- note\nx")
        assert_types(tokens, [TokenType.COMMENT, TokenType.NEWLINE, TokenType.IDENTIFIER])
        assert tokens[0].value == "-- note"

    def test_block_comment(self, lex):
        tokens = lex("/* a\nb */")
        assert_types(tokens, [TokenType.BLOCK_COMMENT])
        assert tokens[0].value == "/* a\nb */"

    def test_unterminated_block_comment(self, lex):
        tokens = lex("/* open")
        assert_types(tokens, [TokenType.BLOCK_COMMENT])

    def test_minus_is_not_a_comment(self, lex):
        tokens = lex("a - b")
        assert find_tokens(tokens, TokenType.COMMENT) == []


class TestParameters:
    def test_colon_parameter(self, lex):
        tokens = lex(":catalog")
        assert_types(tokens, [TokenType.PARAMETER])
        assert tokens[0].value == ":catalog"

    def test_at_parameter(self, lex):
        tokens = lex("@run_date")
        assert_types(tokens, [TokenType.PARAMETER])

    def test_dollar_brace_parameter(self, lex):
        tokens = lex("${env}.t")
        assert_types(tokens, [TokenType.PARAMETER, TokenType.DOT, TokenType.IDENTIFIER])
        assert tokens[0].value == "${env}"

    def test_unterminated_dollar_brace(self, lex):
        tokens = lex("${env")
        assert_types(tokens, [TokenType.PARAMETER])

    def test_template_parameter(self, lex):
        tokens = lex("{{ target_schema }}")
        assert_types(tokens, [TokenType.PARAMETER])
        assert tokens[0].value == "{{ target_schema }}"

    def test_qualified_parameters(self, lex):
        tokens = lex(":catalog.:schema.t")
        assert_values(tokens, [":catalog", ".", ":schema", ".", "t"])


class TestDollarStrings:
    def test_dollar_string(self, lex):
        tokens = lex("$$ key: value $$")
        assert_types(tokens, [TokenType.DOLLAR_STRING])
        assert tokens[0].value == "$$ key: value $$"

    def test_empty_dollar_string(self, lex):
        tokens = lex("$$$$")
        assert_types(tokens, [TokenType.DOLLAR_STRING])
        assert tokens[0].value == "$$$$"

    def test_unterminated_dollar_string(self, lex):
        tokens = lex("$$ open")
        assert_types(tokens, [TokenType.DOLLAR_STRING])


class TestLayout:
    def test_whitespace_run(self, lex):
        tokens = lex(" \t ")
        assert_types(tokens, [TokenType.WS])
        assert tokens[0].value == " \t "

    @pytest.mark.parametrize("nl", ["\n", "\r\n", "\r"])
    def test_newline_forms(self, lex, nl):
        tokens = lex(nl)
        assert_types(tokens, [TokenType.NEWLINE])
        assert tokens[0].value == nl


class TestPositions:
    def test_line_and_column(self, lex):
        tokens = lex("a\n  b")
        b = tokens[-1]
        assert b.span.start.line == 2
        assert b.span.start.column == 3
        assert b.span.start.offset == 4

    def test_crlf_counts_one_line(self, lex):
        tokens = lex("a\r\nb")
        assert tokens[-1].span.start.line == 2

    def test_span_end(self, lex):
        tokens = lex("select")
        assert tokens[0].span.end.column == 7
        assert tokens[0].span.end.offset == 6


class TestTokenize:
    def test_eof_always_last(self):
        tokens = tokenize("select 1")
        assert tokens[-1].type == TokenType.EOF

    def test_empty_input(self):
        tokens = tokenize("")
        assert_types(tokens, [TokenType.EOF])

    def test_lexer_class(self):
        tokens = Lexer("a").tokenize()
        assert_types(tokens, [TokenType.IDENTIFIER, TokenType.EOF])

    @pytest.mark.parametrize(
        "source",
        [
            "select a, b from t where x = 'y''z' -- c\n",
            "SELECT $$ body $$ /* c */ ${p} {{ q }} :r @s `t` \"u\"",
            "  \r\n\t odd # chars ~ ^ & | \r",
            "'unterminated",
        ],
    )
    def test_raw_reconstructs_source(self, source):
        tokens = tokenize(source)
        assert "".join(t.raw for t in tokens) == source
