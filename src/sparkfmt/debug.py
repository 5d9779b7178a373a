"""--debug token stream dump to stderr."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO

from sparkfmt.tokens import LAYOUT, Token


def dump_tokens(
    tokens: Iterable[Token], *, file: TextIO = sys.stderr, layout: bool = False
) -> None:
    """Print one line per token to *file*: position, type, and value.

    Whitespace and newline tokens are skipped unless *layout* is true.
    """
    for tok in tokens:
        if tok.type in LAYOUT and not layout:
            continue
        start = tok.span.start
        file.write(f"{start.line}:{start.column:<4} {tok.type.name:<14} {tok.value!r}\n")
