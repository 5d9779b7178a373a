"""Command-line interface for sparkfmt."""

from __future__ import annotations

import argparse
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sparkfmt.errors import OptionsError
from sparkfmt.options import (
    COMMA_POSITIONS,
    DEFAULT_OPTIONS,
    KEYWORD_CASES,
    FormatOptions,
)
from sparkfmt.options import resolve_options as resolve_format_options

CONFIG_NAME = "sparkfmt.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_files: list[Path]  # empty means stdin
    output_file: Path | None
    in_place: bool
    check: bool
    format_options: FormatOptions
    watch: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="sparkfmt",
        description="Spark / Databricks SQL formatter",
    )
    p.add_argument(
        "files",
        nargs="*",
        metavar="FILE",
        help="SQL files to format (default: stdin; '-' also reads stdin)",
    )
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-i",
        "--in-place",
        action="store_true",
        help="Rewrite each file with its formatted text",
    )
    p.add_argument(
        "--check",
        action="store_true",
        help="Write nothing; exit 1 if any file would be reformatted",
    )
    p.add_argument(
        "--indent-size",
        type=int,
        default=None,
        metavar="N",
        help="Spaces per indent level (default: 2)",
    )
    p.add_argument(
        "--keyword-case",
        choices=KEYWORD_CASES,
        default=None,
        help="Keyword casing (default: upper)",
    )
    p.add_argument(
        "--comma-position",
        choices=COMMA_POSITIONS,
        default=None,
        help="Where list commas go (default: trailing)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument(
        "--watch",
        action="store_true",
        help="Watch a file for changes and reformat it",
    )
    p.add_argument("--debug", action="store_true", help="Dump tokens to stderr")
    return p


def config_location(config_path: Path | None, input_dir: Path) -> Path:
    return config_path if config_path is not None else input_dir / CONFIG_NAME


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_location(config_path, input_dir)

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    files = [f for f in args.files if f != "-"]
    if len(files) != len(args.files) and files:
        raise argparse.ArgumentTypeError("'-' (stdin) cannot be mixed with file arguments")
    input_files = [Path(f) for f in files]

    if args.output and len(input_files) > 1:
        raise argparse.ArgumentTypeError("-o/--output requires a single input")
    if args.in_place and not input_files:
        raise argparse.ArgumentTypeError("--in-place requires file arguments")
    if args.in_place and args.output:
        raise argparse.ArgumentTypeError("--in-place and -o/--output are exclusive")
    if args.watch and len(input_files) != 1:
        raise argparse.ArgumentTypeError("--watch requires exactly one file")

    input_dir = input_files[0].parent if input_files else Path(".")
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    # Format options: defaults < config < CLI
    format_options = DEFAULT_OPTIONS
    cfg_format = config.get("format")
    if isinstance(cfg_format, dict):
        origin = str(config_location(config_path, input_dir))
        format_options = resolve_format_options(cfg_format, format_options, origin)
    format_options = resolve_format_options(
        {
            "indent_size": args.indent_size,
            "keyword_case": args.keyword_case,
            "comma_position": args.comma_position,
        },
        format_options,
        "command line",
    )

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_files=input_files,
        output_file=output_file,
        in_place=args.in_place,
        check=args.check,
        format_options=format_options,
        watch=args.watch,
        debug=args.debug,
    )


def format_source(source: str, options: CliOptions) -> str:
    """Tokenize, merge, and render one SQL text, dumping tokens when debugging."""
    from sparkfmt.debug import dump_tokens
    from sparkfmt.lexer import tokenize
    from sparkfmt.merge import merge
    from sparkfmt.render import render

    tokens = merge(tokenize(source))

    if options.debug:
        dump_tokens(tokens, file=sys.stderr)

    return render(tokens, options.format_options)


def format_file(path: Path, options: CliOptions) -> tuple[str, str]:
    """Read and format a SQL file. Returns ``(original, formatted)``."""
    source = path.read_text(encoding="utf-8")
    return source, format_source(source, options)


def watch_loop(options: CliOptions) -> None:
    """Poll the input file for changes, reformat on each modification."""
    path = options.input_files[0]
    target = options.output_file or path
    last_mtime = 0.0
    print(f"Watching {path} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = path.stat().st_mtime
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    source, formatted = format_file(path, options)
                    if target != path or formatted != source:
                        target.write_text(formatted, encoding="utf-8")
                        if target == path:
                            last_mtime = path.stat().st_mtime
                    print(f"Formatted {path}", file=sys.stderr)
                except OSError as exc:
                    print(f"error: {exc}", file=sys.stderr)
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except OptionsError as exc:
        print(exc.format(), file=sys.stderr)
        return 2
    except (OSError, tomllib.TOMLDecodeError) as exc:
        print(f"error: cannot read config: {exc}", file=sys.stderr)
        return 2

    if options.watch:
        watch_loop(options)
        return 0

    try:
        if not options.input_files:
            return _format_stdin(options)
        changed = 0
        for path in options.input_files:
            changed += _format_one(path, options)
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    return 1 if changed else 0


def _format_stdin(options: CliOptions) -> int:
    source = sys.stdin.read()
    formatted = format_source(source, options)
    if options.check:
        if formatted != source:
            print("would reformat <stdin>", file=sys.stderr)
            return 1
        return 0
    _write_output(formatted, options.output_file)
    return 0


def _format_one(path: Path, options: CliOptions) -> int:
    """Format one file per the output mode; returns 1 if --check found a change."""
    source, formatted = format_file(path, options)
    if options.check:
        if formatted != source:
            print(f"would reformat {path}", file=sys.stderr)
            return 1
    elif options.in_place:
        if formatted != source:
            path.write_text(formatted, encoding="utf-8")
            print(f"Formatted {path}", file=sys.stderr)
    else:
        _write_output(formatted, options.output_file)
    return 0


def _write_output(text: str, output_file: Path | None) -> None:
    if output_file:
        output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)
