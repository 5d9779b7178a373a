"""SQL lexer: converts source text into a flat, lossless token stream."""

from __future__ import annotations

from sparkfmt.keywords import KEYWORDS
from sparkfmt.tokens import (
    ONE_CHAR_OPERATORS,
    TWO_CHAR_OPERATORS,
    Position,
    Span,
    Token,
    TokenType,
    is_digit,
    is_word_char,
    is_word_start,
)

_STRUCTURAL = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    ".": TokenType.DOT,
}


class Lexer:
    """Tokenize SQL source text into a stream of Token objects.

    The lexer is total: every character of the input lands in exactly one
    token, and unterminated strings, identifiers, comments and placeholders
    simply run to the end of the input.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._line = 1
        self._col = 1
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Tokenize the full source and return the token list."""
        while self._pos < len(self._source):
            self._lex_token()

        self._emit(TokenType.EOF, "", "")
        return self._tokens

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _at_end(self) -> bool:
        return self._pos >= len(self._source)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n" or (ch == "\r" and self._peek() != "\n"):
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _advance_while(self, predicate) -> None:
        while not self._at_end() and predicate(self._peek()):
            self._advance()

    def _emit(self, tt: TokenType, value: str, raw: str, start: Position | None = None) -> Token:
        end = self._current_pos()
        if start is None:
            start = end
        tok = Token(tt, value, raw, Span(start, end))
        self._tokens.append(tok)
        return tok

    def _emit_source(self, tt: TokenType, start: Position) -> Token:
        """Emit a token whose value and raw text are the source consumed since start."""
        text = self._source[start.offset : self._pos]
        return self._emit(tt, text, text, start)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _lex_token(self) -> None:
        ch = self._peek()
        nxt = self._peek(1)
        start = self._current_pos()

        if ch in " \t":
            self._advance_while(lambda c: c in " \t")
            self._emit_source(TokenType.WS, start)
            return

        if ch in "\r\n":
            self._advance()
            if ch == "\r" and self._peek() == "\n":
                self._advance()
            self._emit_source(TokenType.NEWLINE, start)
            return

        if ch == "-" and nxt == "-":
            self._advance_while(lambda c: c not in "\r\n")
            self._emit_source(TokenType.COMMENT, start)
            return

        if ch == "/" and nxt == "*":
            self._lex_block_comment(start)
            return

        if ch == "'":
            self._lex_string(start)
            return

        if ch == '"':
            self._lex_quoted('"', TokenType.IDENTIFIER, start)
            return

        if ch == "`":
            self._lex_quoted("`", TokenType.BACKTICK, start)
            return

        if is_digit(ch) or (ch == "." and is_digit(nxt)):
            self._lex_number(start)
            return

        if ch in _STRUCTURAL:
            self._advance()
            self._emit_source(_STRUCTURAL[ch], start)
            return

        if ch + nxt in TWO_CHAR_OPERATORS:
            self._advance()
            self._advance()
            self._emit_source(TokenType.OPERATOR, start)
            return

        if ch in ONE_CHAR_OPERATORS:
            self._advance()
            self._emit_source(TokenType.OPERATOR, start)
            return

        if ch == "$" and nxt == "$":
            self._lex_dollar_string(start)
            return

        if ch == "$" and nxt == "{":
            self._advance_while(lambda c: c != "}")
            if not self._at_end():
                self._advance()
            self._emit_source(TokenType.PARAMETER, start)
            return

        if ch == "{" and nxt == "{":
            self._lex_template(start)
            return

        if ch in ":@":
            self._advance()
            self._advance_while(is_word_char)
            self._emit_source(TokenType.PARAMETER, start)
            return

        if is_word_start(ch):
            self._lex_word(start)
            return

        # Anything else is a one-character operator
        self._advance()
        self._emit_source(TokenType.OPERATOR, start)

    # ------------------------------------------------------------------
    # Literals and comments
    # ------------------------------------------------------------------

    def _lex_block_comment(self, start: Position) -> None:
        """Consume /* ... */ (non-nesting); an unclosed comment runs to end of input."""
        self._advance()
        self._advance()
        while not self._at_end():
            if self._peek() == "*" and self._peek(1) == "/":
                self._advance()
                self._advance()
                break
            self._advance()
        self._emit_source(TokenType.BLOCK_COMMENT, start)

    def _lex_string(self, start: Position) -> None:
        """Consume a single-quoted string; '' is an escaped quote and stays doubled."""
        self._advance()
        while not self._at_end():
            if self._peek() == "'":
                self._advance()
                if self._peek() == "'":
                    self._advance()
                    continue
                break
            self._advance()
        self._emit_source(TokenType.STRING, start)

    def _lex_quoted(self, quote: str, tt: TokenType, start: Position) -> None:
        self._advance()
        self._advance_while(lambda c: c != quote)
        if not self._at_end():
            self._advance()
        self._emit_source(tt, start)

    def _lex_number(self, start: Position) -> None:
        self._advance_while(lambda c: is_digit(c) or c == ".")
        if self._peek() in ("e", "E"):
            self._advance()
            if self._peek() in ("+", "-"):
                self._advance()
            self._advance_while(is_digit)
        self._emit_source(TokenType.NUMBER, start)

    def _lex_dollar_string(self, start: Position) -> None:
        """Consume $$...$$ verbatim; an unclosed body runs to end of input."""
        self._advance()
        self._advance()
        while not self._at_end():
            if self._peek() == "$" and self._peek(1) == "$":
                self._advance()
                self._advance()
                break
            self._advance()
        self._emit_source(TokenType.DOLLAR_STRING, start)

    def _lex_template(self, start: Position) -> None:
        """Consume a {{ ... }} placeholder, tolerant of a missing }}."""
        self._advance()
        self._advance()
        while not self._at_end():
            if self._peek() == "}" and self._peek(1) == "}":
                self._advance()
                self._advance()
                break
            self._advance()
        self._emit_source(TokenType.PARAMETER, start)

    def _lex_word(self, start: Position) -> None:
        self._advance_while(is_word_char)
        word = self._source[start.offset : self._pos]
        upper = word.upper()
        if upper in KEYWORDS:
            self._emit(TokenType.KEYWORD, upper, word, start)
        else:
            self._emit(TokenType.IDENTIFIER, word, word, start)


def tokenize(source: str) -> list[Token]:
    """Convenience function: tokenize source text and return token list."""
    return Lexer(source).tokenize()
