"""Main CLI entry point for the ``sml`` command-line tool.

Sub-commands:
    parse     Print parsed trees as JSON or as a text outline
    format    Rewrite a document in canonical form
    validate  Report row-indexed errors without printing trees
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from sml_parser import __version__
from sml_parser.api import ParseResult, SMLParser
from sml_parser.shared import (
    ColumnAlignment,
    ConfigError,
    ConfigValidationError,
    ParserConfig,
    SMLWriterError,
    configure_logging,
    get_logger,
)
from sml_parser.tree import SMLElement, SMLWriter

OUTLINE_INDENT = "  "
MAX_ERRORS_SHOWN = 3
OUTPUT_FORMATS = ("json", "text")


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self, parser_config: Optional[ParserConfig] = None):
        self.parser_config = parser_config or ParserConfig()
        self.output_format = "json"

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        The file holds :class:`ParserConfig` fields plus an optional
        ``output_format`` key.

        Raises:
            ConfigError: If the file cannot be read or is invalid.
        """
        try:
            data = json.loads(config_path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not load config file {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_path} must contain a JSON object")

        output_format = data.pop("output_format", None)
        if output_format is not None and output_format not in OUTPUT_FORMATS:
            raise ConfigValidationError(
                f"output_format must be one of {list(OUTPUT_FORMATS)}",
                field_name="output_format",
                suggestions=list(OUTPUT_FORMATS),
            )
        config = cls(ParserConfig.from_dict(data))
        if output_format:
            config.output_format = output_format
        return config


class SMLProcessor:
    """Core processing logic for CLI operations."""

    def __init__(self, config: CLIConfig):
        self.config = config
        self.parser = SMLParser(config.parser_config)
        self.logger = get_logger(__name__, None, "cli_processor")

    def process_file(self, file_path: Path) -> ParseResult:
        result = self.parser.parse_file(file_path)
        self.logger.debug(
            "Processed file",
            extra={"file_path": str(file_path), "success": result.success},
        )
        return result

    def process_files(self, paths: List[Path]) -> List[ParseResult]:
        return [self.process_file(path) for path in paths]


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="sml",
        description="Parse, validate and reformat Simple Markup Language documents"
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Parse SML files")
    parse_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="SML files to parse"
    )
    parse_parser.add_argument(
        "--format", "-f",
        choices=list(OUTPUT_FORMATS),
        default=None,
        help="Output format (default: json)"
    )
    parse_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )

    # Format command
    format_parser = subparsers.add_parser("format", help="Rewrite an SML file canonically")
    format_parser.add_argument(
        "path",
        type=Path,
        help="SML file to format"
    )
    indent_group = format_parser.add_mutually_exclusive_group()
    indent_group.add_argument(
        "--indent-width",
        type=int,
        help="Indent with this many spaces"
    )
    indent_group.add_argument(
        "--tabs",
        action="store_true",
        help="Indent with tabs"
    )
    format_parser.add_argument(
        "--end-keyword", "-e",
        help="Closing keyword (default: -)"
    )
    format_parser.add_argument(
        "--align", "-a",
        choices=[member.name.lower() for member in ColumnAlignment],
        help="Attribute column alignment"
    )
    format_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate SML files")
    validate_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="SML files to validate"
    )
    validate_parser.add_argument(
        "--format", "-f",
        choices=list(OUTPUT_FORMATS),
        default="text",
        help="Output format"
    )

    return parser


def format_outline(root: SMLElement) -> str:
    """Render a tree as an indented outline with one line per element and attribute."""
    lines = []
    for element, depth in root.iter_with_depth():
        prefix = OUTLINE_INDENT * depth
        lines.append(f"{prefix}{element.name}")
        for attribute in element.attributes:
            values = ", ".join(
                "null" if value is None else json.dumps(value) for value in attribute.values
            )
            lines.append(f"{prefix}{OUTLINE_INDENT}@{attribute.name}: {values}")
    return "\n".join(lines)


def format_results(results: List[ParseResult], format_type: str) -> str:
    """Format parse results for output."""
    if format_type == "text":
        if not results:
            return "No results to display."
        blocks = []
        for result in results:
            header = f"== {result.source}"
            if result.success and result.root is not None:
                blocks.append(f"{header}\n{format_outline(result.root)}")
            else:
                messages = "\n".join(f"   Error: {diag.message}" for diag in result.diagnostics)
                blocks.append(f"{header}\n{messages}")
        return "\n\n".join(blocks)

    entries: List[Dict[str, Any]] = []
    for result in results:
        entry = result.summary()
        if result.root is not None:
            entry["root"] = result.root.to_dict()
        entries.append(entry)
    return dumps_json(entries)


def dumps_json(value: Any, indent: int = 2) -> str:
    """Same text as ``json.dumps(value, indent=indent)`` for any nesting depth.

    Containers are expanded from an explicit stack of pending tokens.
    """
    parts: List[str] = []
    stack: List[Tuple[bool, Any, int]] = [(False, value, 0)]
    while stack:
        is_text, item, level = stack.pop()
        if is_text:
            parts.append(item)
            continue

        if isinstance(item, dict) and item:
            opening, closing = "{", "}"
            members = [(json.dumps(key) + ": ", member) for key, member in item.items()]
        elif isinstance(item, (list, tuple)) and item:
            opening, closing = "[", "]"
            members = [("", member) for member in item]
        else:
            parts.append(json.dumps(item))
            continue

        padding = "\n" + " " * (indent * (level + 1))
        pending: List[Tuple[bool, Any, int]] = [(True, opening, level)]
        for index, (prefix, member) in enumerate(members):
            separator = "," if index else ""
            pending.append((True, separator + padding + prefix, level))
            pending.append((False, member, level + 1))
        pending.append((True, "\n" + " " * (indent * level) + closing, level))
        stack.extend(reversed(pending))
    return "".join(parts)


def _emit(text: str, output: Optional[Path]) -> None:
    if output:
        output.write_text(text + "\n")
        print(f"Results written to {output}", file=sys.stderr)
    else:
        print(text)


def cmd_parse(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle parse command."""
    processor = SMLProcessor(config)
    results = processor.process_files(args.paths)

    output_format = args.format or config.output_format
    try:
        _emit(format_results(results, output_format), args.output)
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        return 1

    return 0 if all(result.success for result in results) else 1


def cmd_format(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle format command."""
    processor = SMLProcessor(config)
    result = processor.process_file(args.path)
    if not result.success or result.root is None:
        for diag in result.diagnostics:
            print(f"{args.path}: {diag.message}", file=sys.stderr)
        return 1

    overrides: Dict[str, Any] = {}
    if args.tabs:
        overrides["indent"] = "\t"
    elif args.indent_width is not None:
        if args.indent_width < 0:
            print("--indent-width must be >= 0", file=sys.stderr)
            return 2
        overrides["indent"] = " " * args.indent_width
    if args.end_keyword is not None:
        overrides["end_keyword"] = args.end_keyword
    if args.align:
        overrides["column_alignment"] = ColumnAlignment[args.align.upper()]

    try:
        writer_config = config.parser_config.writer.override(**overrides)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    try:
        text = SMLWriter(result.root, writer_config).to_string()
    except SMLWriterError as e:
        print(f"Cannot format {args.path}: {e}", file=sys.stderr)
        return 1

    try:
        if args.output:
            args.output.write_text(text + "\n", encoding="utf-8")
        else:
            print(text)
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        return 1
    return 0


def cmd_validate(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle validate command."""
    processor = SMLProcessor(config)
    results = processor.process_files(args.paths)

    report = []
    for result in results:
        entry: Dict[str, Any] = {"file": result.source, "valid": result.success}
        if not result.success:
            entry["errors"] = [diag.to_dict() for diag in result.diagnostics]
        report.append(entry)

    if args.format == "json":
        print(dumps_json(report))
    else:
        valid_count = sum(1 for entry in report if entry["valid"])
        print(f"Validated {len(report)} files, {valid_count} valid")
        print("-" * 50)
        for entry in report:
            status = "✓" if entry["valid"] else "✗"
            print(f"{status} {entry['file']}")
            for error in entry.get("errors", [])[:MAX_ERRORS_SHOWN]:
                print(f"   Error: {error['message']}")

    return 0 if all(entry["valid"] for entry in report) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = CLIConfig.from_file(args.config) if args.config else CLIConfig()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging(config.parser_config.logging_level)

    handlers = {
        "parse": cmd_parse,
        "format": cmd_format,
        "validate": cmd_validate,
    }

    try:
        return handlers[args.command](args, config)
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
