"""Post-lexing passes that fuse token runs the format engine treats as one unit."""

from __future__ import annotations

from collections.abc import Sequence

from sparkfmt.keywords import MERGE_RULES
from sparkfmt.lookahead import skip_layout
from sparkfmt.tokens import Span, Token, TokenType


def merge(tokens: Sequence[Token]) -> list[Token]:
    """Run both merge passes.

    LANGUAGE bodies are fused first so keyword runs inside them stay verbatim.
    """
    return merge_keywords(merge_language_bodies(tokens))


def merge_keywords(tokens: Sequence[Token]) -> list[Token]:
    """Fuse keyword runs such as GROUP BY or LEFT OUTER JOIN into single tokens.

    Whitespace and newlines between the fused keywords are dropped; the
    format engine re-spaces the compound keyword anyway.
    """
    result: list[Token] = []
    i = 0
    while i < len(tokens):
        tok = tokens[i]
        suffixes = MERGE_RULES.get(tok.value) if tok.type == TokenType.KEYWORD else None
        if suffixes:
            matched = _match_suffix(tokens, i + 1, suffixes)
            if matched is not None:
                suffix, parts, after = matched
                result.append(
                    Token(
                        TokenType.KEYWORD,
                        f"{tok.value} {suffix}",
                        " ".join([tok.raw] + [p.raw for p in parts]),
                        Span(tok.span.start, parts[-1].span.end),
                    )
                )
                i = after
                continue
        result.append(tok)
        i += 1
    return result


def _match_suffix(
    tokens: Sequence[Token], start: int, suffixes: Sequence[str]
) -> tuple[str, list[Token], int] | None:
    """Return the first suffix phrase found at start, its keyword tokens, and the next index."""
    for suffix in suffixes:
        parts: list[Token] = []
        j = start
        for word in suffix.split(" "):
            j = skip_layout(tokens, j)
            if j >= len(tokens):
                break
            candidate = tokens[j]
            if candidate.type != TokenType.KEYWORD or candidate.value != word:
                break
            parts.append(candidate)
            j += 1
        else:
            return suffix, parts, j
    return None


def merge_language_bodies(tokens: Sequence[Token]) -> list[Token]:
    """Fuse an unquoted body after ``LANGUAGE <name> AS`` into one verbatim token.

    The body runs to the next semicolon (or end of input) and keeps the
    source text of every token, so embedded YAML or code passes through the
    format engine untouched. Bodies already written as a string or a $$
    literal are left alone.
    """
    result: list[Token] = []
    i = 0
    while i < len(tokens):
        tok = tokens[i]
        as_pos = _language_header_end(tokens, i)
        if as_pos is None:
            result.append(tok)
            i += 1
            continue

        result.extend(tokens[i : as_pos + 1])

        end = as_pos + 1
        while end < len(tokens) and tokens[end].type not in (
            TokenType.SEMICOLON,
            TokenType.EOF,
        ):
            end += 1

        body = "".join(t.raw for t in tokens[as_pos + 1 : end]).rstrip().lstrip(" \t")
        if body:
            span = Span(tokens[as_pos + 1].span.start, tokens[end - 1].span.end)
            result.append(Token(TokenType.DOLLAR_STRING, body, body, span))
        i = end
    return result


def _language_header_end(tokens: Sequence[Token], i: int) -> int | None:
    """If tokens[i] starts ``LANGUAGE <name> AS <unquoted>``, return the index of AS."""
    tok = tokens[i]
    if tok.type != TokenType.KEYWORD or tok.value != "LANGUAGE":
        return None

    j = skip_layout(tokens, i + 1)
    if j >= len(tokens) or tokens[j].type not in (TokenType.IDENTIFIER, TokenType.KEYWORD):
        return None

    j = skip_layout(tokens, j + 1)
    if j >= len(tokens) or tokens[j].type != TokenType.KEYWORD or tokens[j].value != "AS":
        return None
    as_pos = j

    j = skip_layout(tokens, as_pos + 1)
    if j >= len(tokens) or tokens[j].type in (
        TokenType.STRING,
        TokenType.DOLLAR_STRING,
        TokenType.SEMICOLON,
        TokenType.EOF,
    ):
        return None
    return as_pos

