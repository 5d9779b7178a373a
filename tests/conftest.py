"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from sparkfmt import format as format_sql
from sparkfmt.lexer import tokenize
from sparkfmt.merge import merge
from sparkfmt.tokens import LAYOUT, Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        tokens = tokenize(source)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.type != TokenType.EOF]

    return _lex


@pytest.fixture
def lex_merged():
    """Return a helper that tokenizes and merges source, dropping layout and EOF."""

    def _lex(source: str) -> list[Token]:
        tokens = merge(tokenize(source))
        return [t for t in tokens if t.type not in LAYOUT and t.type != TokenType.EOF]

    return _lex


@pytest.fixture
def fmt():
    """Return the formatter entry point."""
    return format_sql


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
