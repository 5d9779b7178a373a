"""Comment placement: own line, blank-line separation, indentation."""

from __future__ import annotations


class TestBlankLines:
    def test_block_comment_before_left_join(self, fmt):
        result = fmt(
            "SELECT * FROM orders /* Get link */ LEFT JOIN order_lines "
            "ON orders.id = order_lines.id"
        )
        assert result == (
            "SELECT *\n"
            "FROM orders\n"
            "\n"
            "/* Get link */\n"
            "LEFT JOIN order_lines\n"
            "  ON orders.id = order_lines.id\n"
        )

    def test_line_comment_before_join(self, fmt):
        result = fmt("SELECT * FROM a\n-- join to b\nJOIN b ON a.id = b.id")
        assert result == (
            "SELECT *\n"
            "FROM a\n"
            "\n"
            "-- join to b\n"
            "JOIN b\n"
            "  ON a.id = b.id\n"
        )

    def test_inline_comment_moves_to_own_line(self, fmt):
        result = fmt("SELECT a /* inline */ FROM t")
        assert result == "SELECT a\n\n/* inline */\nFROM t\n"

    def test_consecutive_comments_grouped(self, fmt):
        result = fmt(
            "SELECT * FROM a /* first comment */ /* second comment */ "
            "LEFT JOIN b ON a.id = b.id"
        )
        assert result == (
            "SELECT *\n"
            "FROM a\n"
            "\n"
            "/* first comment */\n"
            "/* second comment */\n"
            "LEFT JOIN b\n"
            "  ON a.id = b.id\n"
        )

    def test_no_blank_line_at_statement_start(self, fmt):
        result = fmt("/* Starting comment */ SELECT a FROM t")
        assert result == "/* Starting comment */\nSELECT a\nFROM t\n"

    def test_no_blank_line_after_semicolon(self, fmt):
        result = fmt("SELECT 1;\n-- next\nSELECT 2")
        assert result == "SELECT 1;\n\n-- next\nSELECT 2\n"


class TestIndentation:
    def test_comment_after_comma_in_select_list(self, fmt):
        result = fmt("SELECT a, /* comment about b */ b, c FROM t")
        assert result == (
            "SELECT\n"
            "  a,\n"
            "  /* comment about b */\n"
            "  b,\n"
            "  c\n"
            "FROM t\n"
        )

    def test_comment_inside_subquery(self, fmt):
        result = fmt("SELECT * FROM (SELECT a FROM x /* link tables */ JOIN y ON x.id = y.id) t")
        assert result == (
            "SELECT *\n"
            "FROM (\n"
            "  SELECT a\n"
            "  FROM x\n"
            "\n"
            "  /* link tables */\n"
            "  JOIN y\n"
            "    ON x.id = y.id\n"
            ") t\n"
        )

    def test_comment_aligned_with_on(self, fmt):
        result = fmt("SELECT * FROM a LEFT JOIN b /* join condition */ ON a.id = b.id")
        assert result == (
            "SELECT *\n"
            "FROM a\n"
            "LEFT JOIN b\n"
            "\n"
            "  /* join condition */\n"
            "  ON a.id = b.id\n"
        )

    def test_comment_aligned_with_when(self, fmt):
        result = fmt("SELECT CASE /* check value */ WHEN x > 0 THEN 'pos' ELSE 'neg' END FROM t")
        assert result == (
            "SELECT\n"
            "  CASE\n"
            "    /* check value */\n"
            "    WHEN x > 0 THEN 'pos'\n"
            "    ELSE 'neg'\n"
            "  END\n"
            "FROM t\n"
        )

    def test_trailing_line_comment(self, fmt):
        result = fmt("SELECT a -- the a column\nFROM t")
        assert result == "SELECT a\n\n-- the a column\nFROM t\n"

    def test_comment_text_verbatim(self, fmt):
        result = fmt("/* KEEP select CASE */ select 1", {"keyword_case": "lower"})
        assert result.startswith("/* KEEP select CASE */\n")
