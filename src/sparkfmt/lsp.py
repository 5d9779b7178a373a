"""Minimal LSP server for sparkfmt: whole-document formatting, optionally on save."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from lsprotocol.types import (
    INITIALIZE,
    TEXT_DOCUMENT_FORMATTING,
    TEXT_DOCUMENT_WILL_SAVE_WAIT_UNTIL,
    WORKSPACE_DID_CHANGE_CONFIGURATION,
    DidChangeConfigurationParams,
    DocumentFormattingParams,
    FormattingOptions,
    InitializeParams,
    Position,
    Range,
    TextDocumentSyncKind,
    TextEdit,
    WillSaveTextDocumentParams,
)
from pygls.lsp.server import LanguageServer

from sparkfmt import __version__
from sparkfmt import format as format_sql
from sparkfmt.errors import OptionsError
from sparkfmt.options import DEFAULT_OPTIONS, FormatOptions, resolve_options

log = logging.getLogger(__name__)

server = LanguageServer(
    "sparkfmt-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


@dataclass
class ServerSettings:
    """Editor settings in effect for every formatting request."""

    format_options: FormatOptions = DEFAULT_OPTIONS
    indent_size_explicit: bool = False
    format_on_save: bool = False

    def update(self, raw: Any) -> None:
        """Replace the settings from a client settings object.

        Accepts ``{"sparkfmt": {...}}`` or the flat settings object. Invalid
        values are logged and the previous settings stay in effect.
        """
        if not isinstance(raw, Mapping):
            return
        section = raw.get("sparkfmt")
        if isinstance(section, Mapping):
            raw = section

        try:
            format_options = resolve_options(raw, DEFAULT_OPTIONS, "editor settings")
        except OptionsError as exc:
            log.warning("ignoring sparkfmt settings: %s", exc.format())
            return

        self.format_options = format_options
        self.indent_size_explicit = any(
            raw.get(key) is not None for key in ("indent_size", "indentSize")
        )
        on_save = raw.get("format_on_save", raw.get("formatOnSave", False))
        self.format_on_save = on_save is True

    def reset(self) -> None:
        self.format_options = DEFAULT_OPTIONS
        self.indent_size_explicit = False
        self.format_on_save = False


settings = ServerSettings()


def _format_edits(
    ls: LanguageServer, uri: str, formatting: FormattingOptions | None = None
) -> list[TextEdit]:
    """Format the document at uri and return a whole-document edit, if any."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source

    options = settings.format_options
    if formatting is not None and not settings.indent_size_explicit and formatting.tab_size > 0:
        options = replace(options, indent_size=formatting.tab_size)

    formatted = format_sql(source, options)
    if formatted == source:
        return []

    log.debug("formatted %s", uri)
    return [
        TextEdit(
            range=Range(
                start=Position(line=0, character=0),
                end=Position(line=len(doc.lines), character=0),
            ),
            new_text=formatted,
        )
    ]


@server.feature(INITIALIZE)
def initialize(ls: LanguageServer, params: InitializeParams) -> None:
    settings.update(params.initialization_options)


@server.feature(WORKSPACE_DID_CHANGE_CONFIGURATION)
def did_change_configuration(ls: LanguageServer, params: DidChangeConfigurationParams) -> None:
    settings.update(params.settings)


@server.feature(TEXT_DOCUMENT_FORMATTING)
def formatting(ls: LanguageServer, params: DocumentFormattingParams) -> list[TextEdit]:
    return _format_edits(ls, params.text_document.uri, params.options)


@server.feature(TEXT_DOCUMENT_WILL_SAVE_WAIT_UNTIL)
def will_save_wait_until(ls: LanguageServer, params: WillSaveTextDocumentParams) -> list[TextEdit]:
    if not settings.format_on_save:
        return []
    return _format_edits(ls, params.text_document.uri)


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    server.start_io()
