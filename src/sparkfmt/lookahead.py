"""Bounded forward scans over an immutable token sequence."""

from __future__ import annotations

from collections.abc import Sequence

from sparkfmt.keywords import CLAUSE_KEYWORDS
from sparkfmt.tokens import COMMENTS, LAYOUT, Token, TokenType


def skip_layout(tokens: Sequence[Token], start: int) -> int:
    """Return the index of the first non-whitespace, non-newline token at or after start."""
    i = start
    while i < len(tokens) and tokens[i].type in LAYOUT:
        i += 1
    return i


def next_significant(tokens: Sequence[Token], start: int) -> Token | None:
    """Return the next token that is not whitespace or a newline."""
    i = skip_layout(tokens, start)
    return tokens[i] if i < len(tokens) else None


def next_meaningful(tokens: Sequence[Token], start: int) -> Token | None:
    """Return the next token that is not layout or a comment."""
    for tok in tokens[start:]:
        if tok.type not in LAYOUT and tok.type not in COMMENTS:
            return tok
    return None


def count_top_level_args(tokens: Sequence[Token], start: int) -> int:
    """Count comma-separated arguments from start up to the matching close paren."""
    depth = 0
    commas = 0
    for tok in tokens[start:]:
        if tok.type == TokenType.LPAREN:
            depth += 1
        elif tok.type == TokenType.RPAREN:
            if depth == 0:
                break
            depth -= 1
        elif tok.type == TokenType.COMMA and depth == 0:
            commas += 1
    return commas + 1


def count_select_items(tokens: Sequence[Token], start: int) -> int:
    """Count top-level SELECT list items up to the next clause keyword, ';' or end.

    Parenthesised regions are skipped, so commas inside function calls and
    subqueries do not count. A close paren that was opened before start
    (the SELECT sits inside a subquery) also ends the list. CASE ... END
    bodies are skipped so their WHEN does not end the list early.
    """
    depth = 0
    case_depth = 0
    commas = 0
    for tok in tokens[start:]:
        if tok.type == TokenType.EOF:
            break
        if tok.type == TokenType.LPAREN:
            depth += 1
            continue
        if tok.type == TokenType.RPAREN:
            if depth == 0:
                break
            depth -= 1
            continue
        if depth > 0:
            continue
        if tok.type == TokenType.SEMICOLON:
            break
        if tok.type == TokenType.KEYWORD and tok.value == "CASE":
            case_depth += 1
            continue
        if case_depth > 0:
            if tok.type == TokenType.KEYWORD and tok.value == "END":
                case_depth -= 1
            continue
        if tok.type == TokenType.KEYWORD and tok.value in CLAUSE_KEYWORDS:
            break
        if tok.type == TokenType.COMMA:
            commas += 1
    return commas + 1
