"""Spark / Databricks SQL formatter."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sparkfmt.options import FormatOptions

__version__ = "0.1.0"


def format(
    source: str,
    options: FormatOptions | Mapping[str, Any] | None = None,
) -> str:
    """Tokenize, merge, and lay out Spark SQL source text.

    ``options`` may be a ``FormatOptions``, a partial mapping of option
    names to values, or ``None`` for the defaults.
    """
    from sparkfmt.lexer import tokenize
    from sparkfmt.merge import merge
    from sparkfmt.options import DEFAULT_OPTIONS, FormatOptions, resolve_options
    from sparkfmt.render import render

    if options is None:
        resolved = DEFAULT_OPTIONS
    elif isinstance(options, FormatOptions):
        resolved = options
    else:
        resolved = resolve_options(options)

    return render(merge(tokenize(source)), resolved)
