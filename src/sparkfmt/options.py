"""Formatting options, defaults, and merging of partial option mappings."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Literal

from sparkfmt.errors import OptionsError

KeywordCase = Literal["upper", "lower", "preserve"]
CommaPosition = Literal["leading", "trailing"]

KEYWORD_CASES: tuple[str, ...] = ("upper", "lower", "preserve")
COMMA_POSITIONS: tuple[str, ...] = ("leading", "trailing")


@dataclass(frozen=True, slots=True)
class FormatOptions:
    """Layout settings consumed verbatim by the format engine."""

    indent_size: int = 2
    keyword_case: KeywordCase = "upper"
    comma_position: CommaPosition = "trailing"


DEFAULT_OPTIONS = FormatOptions()

# Accepted spellings for each field: config files use snake_case, editor
# settings arrive in camelCase.
_ALIASES = {
    "indent_size": "indent_size",
    "indentSize": "indent_size",
    "keyword_case": "keyword_case",
    "keywordCase": "keyword_case",
    "comma_position": "comma_position",
    "commaPosition": "comma_position",
}


def resolve_options(
    overrides: Mapping[str, Any] | None,
    base: FormatOptions = DEFAULT_OPTIONS,
    origin: str = "options",
) -> FormatOptions:
    """Merge a partial option mapping over base, validating each value.

    Unknown keys are ignored; ``None`` values leave the base value in place.
    """
    if not overrides:
        return base

    changes: dict[str, Any] = {}
    for key, value in overrides.items():
        field_name = _ALIASES.get(key)
        if field_name is None or value is None:
            continue
        changes[field_name] = _validate(field_name, value, key, origin)

    return replace(base, **changes)


def _validate(field_name: str, value: Any, key: str, origin: str) -> Any:
    if field_name == "indent_size":
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise OptionsError(
                f"indent size must be a positive integer, got {value!r}", key, origin
            )
        return value

    if field_name == "keyword_case":
        if value not in KEYWORD_CASES:
            raise OptionsError(
                f"keyword case must be one of {', '.join(KEYWORD_CASES)}, got {value!r}",
                key,
                origin,
            )
        return value

    if value not in COMMA_POSITIONS:
        raise OptionsError(
            f"comma position must be one of {', '.join(COMMA_POSITIONS)}, got {value!r}",
            key,
            origin,
        )
    return value
