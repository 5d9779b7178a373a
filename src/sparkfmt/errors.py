"""Error types with formatted origin context."""

from __future__ import annotations


class OptionsError(Exception):
    """Raised when a formatting option has an invalid value.

    ``origin`` names where the value came from: a config file path, a CLI
    flag, or an editor setting.
    """

    def __init__(self, message: str, option: str, origin: str = "options") -> None:
        self.message = message
        self.option = option
        self.origin = origin
        super().__init__(self.format())

    def format(self) -> str:
        gutter = "  "
        return f"error: {self.message}\n{gutter}--> {self.origin}: {self.option}"
