"""Format engine: re-emits a merged token stream as laid-out SQL text.

The engine is a single forward pass. Every layout decision is made from the
current token, an ``EngineState`` threaded through small per-token handlers,
and bounded peeks at the tokens that follow (see ``sparkfmt.lookahead``).
Source whitespace and newlines are discarded; all layout is regenerated.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto

from sparkfmt.keywords import (
    CLAUSE_KEYWORDS,
    CONCAT_FUNCTIONS,
    DDL_KEYWORDS,
    NON_FUNCTION_KEYWORDS,
)
from sparkfmt.lookahead import (
    count_select_items,
    count_top_level_args,
    next_meaningful,
    next_significant,
)
from sparkfmt.options import DEFAULT_OPTIONS, FormatOptions
from sparkfmt.tokens import COMMENTS, LAYOUT, Token, TokenType


class ConstructKind(Enum):
    SUBQUERY = auto()  # ( followed by a clause keyword
    GROUPING = auto()  # function call, IN list, plain grouping: stays inline
    BLOCK = auto()  # column definitions, TBLPROPERTIES
    CONCAT = auto()  # CONCAT / CONCAT_WS with more than two arguments


# Construct kinds whose body goes on its own indented lines.
MULTILINE = frozenset({ConstructKind.SUBQUERY, ConstructKind.BLOCK, ConstructKind.CONCAT})


@dataclass(frozen=True, slots=True)
class Construct:
    """An open parenthesis: why it was opened and where its lines sit."""

    kind: ConstructKind
    outer_level: int  # indent level restored when the paren closes
    column_level: int  # indent level of the line holding the opening paren


@dataclass
class EngineState:
    """Mutable layout state for one ``render()`` call."""

    options: FormatOptions
    out: list[str] = field(default_factory=list)
    indent_level: int = 0
    line_start: bool = True
    statement_start: bool = True
    constructs: list[Construct] = field(default_factory=list)
    case_depths: list[int] = field(default_factory=list)
    ddl_context: bool = False
    pending_column_block: bool = False
    function_definition_context: bool = False
    after_multiline_block_close: bool = False
    pending_first_column_break: bool = False
    last_significant: Token | None = None

    def indent(self, extra: int = 0) -> str:
        return " " * (self.options.indent_size * (self.indent_level + extra))

    def content_level(self) -> int:
        """Extra levels for an item that starts a line inside the current clause."""
        if self.statement_start or self.top() in (ConstructKind.BLOCK, ConstructKind.CONCAT):
            return 0
        return 1

    def top(self) -> ConstructKind | None:
        return self.constructs[-1].kind if self.constructs else None

    def write(self, text: str) -> None:
        self.out.append(text)

    def newline(self) -> None:
        self.out.append("\n")
        self.line_start = True

    def reset_statement(self) -> None:
        """Drop all per-statement state; statements are formatted independently."""
        self.indent_level = 0
        self.line_start = True
        self.statement_start = True
        self.constructs.clear()
        self.case_depths.clear()
        self.ddl_context = False
        self.pending_column_block = False
        self.function_definition_context = False
        self.after_multiline_block_close = False
        self.pending_first_column_break = False


def render(tokens: Sequence[Token], options: FormatOptions = DEFAULT_OPTIONS) -> str:
    """Lay out a merged token stream and return the formatted text.

    The result is trimmed and always ends with exactly one newline.
    """
    state = EngineState(options)

    for i, tok in enumerate(tokens):
        if tok.type in LAYOUT:
            continue
        if tok.type == TokenType.EOF:
            break
        if tok.type in COMMENTS:
            _comment(state, tokens, i)
        else:
            _track_context(state, tok)
            match tok.type:
                case TokenType.SEMICOLON:
                    _semicolon(state)
                case TokenType.LPAREN:
                    _open_paren(state, tokens, i)
                case TokenType.RPAREN:
                    _close_paren(state)
                case TokenType.COMMA:
                    _comma(state)
                case TokenType.DOT:
                    state.write(".")
                    state.line_start = False
                case TokenType.KEYWORD:
                    _keyword(state, tokens, i)
                case TokenType.DOLLAR_STRING:
                    _verbatim(state, tok)
                case _:
                    _default(state, tok)
        state.last_significant = tok

    return "".join(state.out).strip() + "\n"


def apply_case(tok: Token, options: FormatOptions) -> str:
    """Return the rendered text of tok under the keyword case policy."""
    if tok.type != TokenType.KEYWORD:
        return tok.value
    match options.keyword_case:
        case "lower":
            return tok.value.lower()
        case "preserve":
            return tok.raw
        case _:
            return tok.value.upper()


# ---------------------------------------------------------------------------
# Context tracking
# ---------------------------------------------------------------------------


def _track_context(state: EngineState, tok: Token) -> None:
    """Update DDL / function-definition flags from a keyword."""
    if tok.type != TokenType.KEYWORD:
        return
    value = tok.value
    if value in DDL_KEYWORDS:
        state.ddl_context = True
    elif value in ("TABLE", "VIEW") and state.ddl_context:
        state.pending_column_block = True
    elif value == "FUNCTION" and state.ddl_context:
        state.function_definition_context = True
    elif value == "AS" and state.ddl_context:
        # CTAS: no column definitions follow
        state.pending_column_block = False
        state.ddl_context = False

    if value == "TBLPROPERTIES":
        state.pending_column_block = True
    elif value in CLAUSE_KEYWORDS:
        # the column block must directly follow the object name
        state.pending_column_block = False


def _is_function_call(prev: Token | None) -> bool:
    """True if an open paren after prev belongs to a call and takes no space."""
    if prev is None:
        return False
    if prev.type in (TokenType.IDENTIFIER, TokenType.BACKTICK):
        return True
    return (
        prev.type == TokenType.KEYWORD
        and prev.value not in CLAUSE_KEYWORDS
        and prev.value not in NON_FUNCTION_KEYWORDS
    )


def _break_if_pending(state: EngineState) -> None:
    """Honor a pending first-column or after-block line break."""
    if state.pending_first_column_break:
        state.pending_first_column_break = False
        if not state.line_start:
            state.newline()
    if state.after_multiline_block_close:
        state.after_multiline_block_close = False
        if not state.line_start:
            state.newline()


def _lead(state: EngineState) -> None:
    """Write what precedes an ordinary token: indentation or a single space."""
    if state.line_start:
        state.write(state.indent(state.content_level()))
    elif state.last_significant is None or state.last_significant.type != TokenType.LPAREN:
        state.write(" ")


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _comment(state: EngineState, tokens: Sequence[Token], i: int) -> None:
    """Place a comment on its own line, indented for the token that follows it."""
    prev = state.last_significant
    if not state.line_start:
        state.newline()

    grouped = prev is not None and (
        prev.type in (TokenType.COMMA, TokenType.LPAREN)
        or prev.type in COMMENTS
        or (prev.type == TokenType.KEYWORD and prev.value == "CASE")
    )
    if state.out and not state.statement_start and not grouped:
        state.newline()

    nxt = next_meaningful(tokens, i + 1)
    extra = state.content_level()
    if nxt is not None and nxt.type == TokenType.KEYWORD:
        value = nxt.value
        if value in ("WHEN", "ELSE") and state.case_depths:
            extra = 1
        elif value == "END" and state.case_depths:
            extra = 0
        elif value == "ON":
            extra = 1
        elif value in CLAUSE_KEYWORDS:
            extra = 0

    state.write(state.indent(extra) + tokens[i].value)
    state.newline()


def _semicolon(state: EngineState) -> None:
    state.write(";\n\n")
    state.reset_statement()


def classify_paren(state: EngineState, tokens: Sequence[Token], index: int) -> ConstructKind:
    """Decide what kind of construct the open paren at index starts.

    Pure: reads the state and the following tokens but changes nothing.
    """
    nxt = next_significant(tokens, index + 1)
    if nxt is not None and nxt.type == TokenType.KEYWORD and nxt.value in CLAUSE_KEYWORDS:
        return ConstructKind.SUBQUERY
    if state.pending_column_block:
        return ConstructKind.BLOCK
    prev = state.last_significant
    if (
        prev is not None
        and prev.type == TokenType.KEYWORD
        and prev.value in CONCAT_FUNCTIONS
        and count_top_level_args(tokens, index + 1) > 2
    ):
        return ConstructKind.CONCAT
    return ConstructKind.GROUPING


def _open_paren(state: EngineState, tokens: Sequence[Token], i: int) -> None:
    kind = classify_paren(state, tokens, i)
    if kind == ConstructKind.BLOCK:
        state.pending_column_block = False

    _break_if_pending(state)

    prev = state.last_significant
    column = state.indent_level
    if state.line_start:
        column += state.content_level()
        state.write(state.indent(state.content_level()))
    elif prev is not None and prev.type == TokenType.LPAREN:
        pass
    elif kind in (ConstructKind.SUBQUERY, ConstructKind.BLOCK):
        state.write(" ")
    elif kind == ConstructKind.GROUPING and not _is_function_call(prev):
        state.write(" ")

    state.write("(")
    state.constructs.append(Construct(kind, state.indent_level, column))
    state.statement_start = False
    if kind in MULTILINE:
        state.indent_level = column + 1
        state.newline()
    else:
        state.line_start = False


def _close_paren(state: EngineState) -> None:
    # an unbalanced close paren renders like the end of a grouping
    construct = state.constructs.pop() if state.constructs else None
    if construct is not None and construct.kind in MULTILINE:
        state.indent_level = construct.outer_level
        if not state.line_start:
            state.newline()
        state.write(" " * (state.options.indent_size * construct.column_level) + ")")
        # a multi-line block inside a call: continue its arguments on new lines
        if state.top() == ConstructKind.GROUPING:
            state.after_multiline_block_close = True
    else:
        state.after_multiline_block_close = False
        if state.line_start:
            state.write(state.indent())
        state.write(")")
    state.line_start = False


def _comma(state: EngineState) -> None:
    if state.top() == ConstructKind.GROUPING and not state.after_multiline_block_close:
        state.write(",")
        state.line_start = False
    elif state.options.comma_position == "trailing":
        state.write(",")
        state.newline()
    else:
        if not state.line_start:
            state.newline()
        state.write(state.indent() + ",")
        state.line_start = False
    state.after_multiline_block_close = False


def _keyword(state: EngineState, tokens: Sequence[Token], i: int) -> None:
    tok = tokens[i]
    value = tok.value

    if value == "CASE":
        _case(state, tok)
        return

    if value in ("WHEN", "ELSE") and state.case_depths:
        if not state.line_start:
            state.newline()
        _write_keyword_line(state, tok, 1)
        return

    if value == "END" and state.case_depths:
        if not state.line_start:
            state.newline()
        _write_keyword_line(state, tok, 0)
        state.indent_level = state.case_depths.pop()
        return

    if value in CLAUSE_KEYWORDS or (value == "COMMENT" and state.function_definition_context):
        if not state.line_start and state.out:
            state.newline()
        _write_keyword_line(state, tok, 1 if value == "ON" else 0)
        if value == "SELECT":
            state.pending_first_column_break = count_select_items(tokens, i + 1) > 1
        return

    _default(state, tok)


def _write_keyword_line(state: EngineState, tok: Token, extra: int) -> None:
    state.write(state.indent(extra) + apply_case(tok, state.options))
    state.line_start = False
    state.statement_start = False


def _case(state: EngineState, tok: Token) -> None:
    """Open a CASE block on its own line; WHEN / ELSE / END align to it."""
    state.pending_first_column_break = False
    state.after_multiline_block_close = False
    if not state.line_start:
        state.newline()

    level = state.indent_level + state.content_level()
    state.case_depths.append(state.indent_level)
    state.indent_level = level
    _write_keyword_line(state, tok, 0)


def _verbatim(state: EngineState, tok: Token) -> None:
    """Emit a dollar-quoted or fused body exactly as written."""
    if _after_dot(state, tok):
        return
    _break_if_pending(state)
    if state.line_start:
        state.write(state.indent(state.content_level()))
    elif not (
        (state.last_significant is not None and state.last_significant.type == TokenType.LPAREN)
        or tok.value.startswith(("\n", "\r"))
    ):
        state.write(" ")
    state.write(tok.value)
    state.line_start = False
    state.statement_start = False


def _after_dot(state: EngineState, tok: Token) -> bool:
    """Glue a qualified-name part to the preceding dot."""
    prev = state.last_significant
    if prev is None or prev.type != TokenType.DOT or state.line_start:
        return False
    state.write(apply_case(tok, state.options))
    state.line_start = False
    return True


def _default(state: EngineState, tok: Token) -> None:
    if _after_dot(state, tok):
        return

    # DISTINCT / ALL stay on the SELECT line; the first column still breaks
    if not (tok.type == TokenType.KEYWORD and tok.value in ("DISTINCT", "ALL")):
        _break_if_pending(state)
    elif state.after_multiline_block_close:
        state.after_multiline_block_close = False
        if not state.line_start:
            state.newline()

    _lead(state)
    state.write(apply_case(tok, state.options))
    state.line_start = False
    state.statement_start = False
