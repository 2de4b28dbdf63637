"""Command-line entry point: load, merge and render configuration files."""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterator, Sequence
from pathlib import Path

from claudemerge.generator import generate_markdown
from claudemerge.loader import load_config, validate_config
from claudemerge.merger import MergeError, PriorityMerger
from claudemerge.types import Config, ConfigError, FileFormat

VERSION = "0.1.0"
DEFAULT_OUTPUT = "CLAUDE.merged.md"
PROGRAM = "claude-merge"

_OPTIONS: tuple[tuple[str, str], ...] = (
    ("-files string", "Comma-separated paths to configuration files (required)"),
    ("-output string", f"Output filename (default: {DEFAULT_OUTPUT})"),
    ("-order string", "Comma-separated file order for merging (optional)"),
    ("-validate", "Validate only, don't generate output"),
    ("-debug", "Enable debug output"),
    ("-help", "Show this help message"),
)

_PRIORITY_RULES: tuple[str, ...] = (
    "Explicit priority values override everything else",
    "Relative priority values prevent override by lower priorities",
    "File order determines precedence when no priorities set",
)

_FORMAT_NAMES = {
    FileFormat.TOML: "TOML",
    FileFormat.YAML: "YAML",
    FileFormat.MARKDOWN: "Markdown",
}


class UsageError(Exception):
    """Raised when the command-line arguments are unusable."""


def validate_args(files: Sequence[str], output: str) -> None:
    """Check that input files were given and exist and that the output is named."""
    if not files or (len(files) == 1 and files[0] == ""):
        raise UsageError("no input files specified")
    if output == "":
        raise UsageError("output filename cannot be empty")
    for name in files:
        if name and not os.path.lexists(name):
            raise UsageError(f"file not found: {name}")


def parse_file_order(files: Sequence[str], order_spec: str) -> list[str]:
    """Put the files named in ``order_spec`` first, then the rest in input order."""
    if order_spec == "":
        return list(files)

    known = set(files)
    result: list[str] = []
    used: set[str] = set()
    for name in (part.strip() for part in order_spec.split(",")):
        if name in known and name not in used:
            result.append(name)
            used.add(name)
    result.extend(name for name in files if name not in used)
    return result


def format_name(format: FileFormat | int) -> str:
    """Return a readable name for a file format."""
    try:
        return _FORMAT_NAMES[FileFormat(format)]
    except (ValueError, KeyError):
        return "Unknown"


def _help_lines() -> Iterator[str]:
    yield f"{PROGRAM} - Configuration file merger for CLAUDE.md generation"
    yield ""
    yield "Usage:"
    yield f"  {PROGRAM} -files file1.toml,file2.yaml,file3.md [options]"
    yield ""
    yield "Options:"
    width = max(len(spec) for spec, _ in _OPTIONS) + 2
    for spec, description in _OPTIONS:
        yield f"  {spec.ljust(width)}{description}"
    yield ""
    yield "Supported formats: TOML (.toml), YAML (.yaml, .yml), Markdown (.md)"
    yield ""
    yield "Priority-based merging:"
    for number, rule in enumerate(_PRIORITY_RULES, start=1):
        yield f"  {number}. {rule}"


def print_help() -> None:
    """Print usage information built from the option table."""
    sys.stdout.write("\n".join(_help_lines()) + "\n")


def _go_list(items: Sequence[str]) -> str:
    return "[" + " ".join(items) + "]"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROGRAM, add_help=False, allow_abbrev=False
    )
    parser.add_argument("-files", "--files", dest="files", default="")
    parser.add_argument("-output", "--output", dest="output", default=DEFAULT_OUTPUT)
    parser.add_argument("-order", "--order", dest="order", default="")
    parser.add_argument("-validate", "--validate", dest="validate", action="store_true")
    parser.add_argument("-debug", "--debug", dest="debug", action="store_true")
    parser.add_argument("-help", "--help", "-h", dest="help", action="store_true")
    return parser


def _fail(message: str) -> int:
    print(message, file=sys.stderr)
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command; return the process exit status."""
    args = _build_parser().parse_args(argv)

    if args.help:
        print_help()
        return 0

    input_files = [name.strip() for name in args.files.split(",")]
    try:
        validate_args(input_files, args.output)
    except UsageError as exc:
        return _fail(f"Invalid arguments: {exc}")

    file_order = parse_file_order(input_files, args.order)

    if args.debug:
        print(f"Input files: {_go_list(input_files)}")
        print(f"Merge order: {_go_list(file_order)}")
        print(f"Output file: {args.output}")

    configs: list[Config] = []
    for filename in file_order:
        try:
            cfg = load_config(filename)
        except ConfigError as exc:
            return _fail(f"Failed to load config {filename}: {exc}")

        if args.validate:
            try:
                validate_config(cfg)
            except ConfigError as exc:
                return _fail(f"Invalid config {filename}: {exc}")
            print(f"✓ {filename} validated successfully")

        configs.append(cfg)

        if args.debug:
            print(f"✓ Loaded {filename} ({format_name(cfg.source_format)} format)")

    if args.validate:
        print("✓ All configurations validated successfully")
        return 0

    try:
        merged = PriorityMerger(args.debug).merge_all(configs)
    except MergeError as exc:
        return _fail(f"Failed to merge configurations: {exc}")

    markdown = generate_markdown(merged)

    try:
        Path(args.output).write_text(markdown, encoding="utf-8")
    except OSError as exc:
        return _fail(f"Failed to write output: {exc}")

    print(f"✓ Generated {args.output} successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())