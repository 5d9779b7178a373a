"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    # Words
    KEYWORD = auto()  # value is upper-cased, raw keeps source casing
    IDENTIFIER = auto()  # bare word or "double quoted"
    BACKTICK = auto()  # `quoted identifier`
    PARAMETER = auto()  # :name @name ${name} {{ name }}

    # Literals
    NUMBER = auto()
    STRING = auto()  # 'single quoted', '' escapes kept
    DOLLAR_STRING = auto()  # $$...$$ or a fused LANGUAGE body, emitted verbatim

    # Structural (single-character)
    COMMA = auto()  # ,
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    SEMICOLON = auto()  # ;
    DOT = auto()  # .

    OPERATOR = auto()  # + - * / ... and any unrecognized character

    # Comments
    COMMENT = auto()  # -- to end of line
    BLOCK_COMMENT = auto()  # /* ... */

    # Whitespace
    WS = auto()  # horizontal whitespace (spaces/tabs)
    NEWLINE = auto()  # \n, \r\n or \r

    EOF = auto()


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token with canonical value and original source text."""

    type: TokenType
    value: str
    raw: str
    span: Span


# Tokens the format engine never renders; layout is regenerated.
LAYOUT = frozenset({TokenType.WS, TokenType.NEWLINE})

COMMENTS = frozenset({TokenType.COMMENT, TokenType.BLOCK_COMMENT})

TWO_CHAR_OPERATORS = frozenset({"!=", "<>", ">=", "<=", "||", "->"})

ONE_CHAR_OPERATORS = frozenset("+-*/%=<>|&^~!")


def is_word_start(ch: str) -> bool:
    """Return True if ch can start an identifier or keyword."""
    return ch == "_" or ch.isalpha()


def is_word_char(ch: str) -> bool:
    """Return True if ch can continue an identifier, keyword, or parameter name."""
    return ch == "_" or ch.isalnum()


def is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"
