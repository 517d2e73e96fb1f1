"""Main CLI entry point for the strict-xml command-line tool.

Provides commands to parse documents into JSON or normalized markup, to
validate documents, and to dump the token stream for debugging.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from strict_xml_parser import __version__
from strict_xml_parser.api import StrictXMLParser
from strict_xml_parser.shared import ConfigError, ParserConfig, XMLSyntaxError
from strict_xml_parser.shared.logging import get_logger
from strict_xml_parser.tree import XMLElement

logger = get_logger(__name__, None, "cli")


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self) -> None:
        self.parser_config = ParserConfig()
        self.output_format = "json"
        self.indent: Optional[int] = 2

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        The file may hold ``parser`` (a ``ParserConfig`` mapping),
        ``output_format`` and ``indent`` keys.

        Raises:
            ConfigError: If the file cannot be read or holds invalid settings.
        """
        config = cls()
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not load config file {config_path}: {e}") from e

        if "parser" in data:
            config.parser_config = ParserConfig.from_dict(data["parser"])
        config.output_format = data.get("output_format", config.output_format)
        config.indent = data.get("indent", config.indent)
        return config


def _element_to_text(element: XMLElement, level: int = 0) -> List[str]:
    attributes = " ".join(f'{name}="{value}"' for name, value in element.attributes.items())
    line = "  " * level + element.tag
    if attributes:
        line += f" [{attributes}]"
    if element.value is not None:
        line += f": {element.value!r}"
    lines = [line]
    for child in element.children:
        lines.extend(_element_to_text(child, level + 1))
    return lines


def format_tree(root: XMLElement, format_type: str, indent: Optional[int]) -> str:
    """Format a parsed tree for output."""
    if format_type == "xml":
        return root.to_xml(indent=indent)
    if format_type == "text":
        return "\n".join(_element_to_text(root))
    return json.dumps(root.to_dict(), indent=indent)


def _error_record(path: Path, error: Exception) -> Dict[str, Any]:
    record: Dict[str, Any] = {"file": str(path), "valid": False, "error": str(error)}
    if isinstance(error, XMLSyntaxError) and error.position is not None:
        record["line"] = error.position.line
        record["column"] = error.position.column
    return record


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="strict-xml",
        description="Strict XML parser with positional syntax errors"
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only log errors")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parse_parser = subparsers.add_parser("parse", help="Parse XML files")
    parse_parser.add_argument("paths", nargs="+", type=Path, help="XML files to parse")
    parse_parser.add_argument(
        "--format", "-f",
        choices=["json", "xml", "text"],
        help="Output format (default: json)"
    )
    parse_parser.add_argument(
        "--indent",
        type=int,
        help="Indentation width for json and xml output"
    )
    parse_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    parse_parser.add_argument("--config", "-c", type=Path, help="Configuration file path")
    parse_parser.add_argument(
        "--lenient",
        action="store_true",
        help="Drop untokenizable trailing input instead of failing"
    )

    validate_parser = subparsers.add_parser("validate", help="Validate XML files")
    validate_parser.add_argument("paths", nargs="+", type=Path, help="XML files to validate")
    validate_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format"
    )

    tokens_parser = subparsers.add_parser("tokens", help="Print the token stream of a file")
    tokens_parser.add_argument("path", type=Path, help="XML file to tokenize")
    tokens_parser.add_argument(
        "--lenient",
        action="store_true",
        help="Drop untokenizable trailing input instead of failing"
    )

    return parser


def _load_config(args: argparse.Namespace) -> CLIConfig:
    config = CLIConfig()
    if getattr(args, "config", None):
        config = CLIConfig.from_file(args.config)
    if getattr(args, "lenient", False):
        config.parser_config = config.parser_config.override(tokenization__strict=False)
    if getattr(args, "format", None):
        config.output_format = args.format
    if getattr(args, "indent", None) is not None:
        config.indent = args.indent
    if not (args.verbose or args.quiet):
        logging.getLogger("strict_xml_parser").setLevel(
            config.parser_config.global_.logging_level
        )
    return config


def cmd_parse(args: argparse.Namespace) -> int:
    """Handle parse command."""
    config = _load_config(args)
    parser = StrictXMLParser(config.parser_config)

    outputs = []
    failures = 0
    for path in args.paths:
        try:
            result = parser.parse_detailed(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, XMLSyntaxError) as e:
            print(f"{path}: {e}", file=sys.stderr)
            failures += 1
            continue
        for diagnostic in result.diagnostics:
            print(f"{path}: warning: {diagnostic.message}", file=sys.stderr)
        outputs.append(format_tree(result.root, config.output_format, config.indent))

    formatted_output = "\n".join(outputs)
    if args.output:
        try:
            args.output.write_text(formatted_output + "\n", encoding="utf-8")
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    elif outputs:
        print(formatted_output)

    return 0 if failures == 0 else 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle validate command."""
    parser = StrictXMLParser(_load_config(args).parser_config)
    results: List[Dict[str, Any]] = []

    for path in args.paths:
        try:
            root = parser.parse(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, XMLSyntaxError) as e:
            results.append(_error_record(path, e))
            continue
        results.append({"file": str(path), "valid": True, "root": root.tag})

    if args.format == "json":
        print(json.dumps(results, indent=2))
    else:
        valid_count = sum(1 for r in results if r["valid"])
        print(f"Validated {len(results)} files, {valid_count} valid")
        print("-" * 50)
        for result in results:
            if result["valid"]:
                print(f"ok    {result['file']}")
            else:
                print(f"FAIL  {result['file']}")
                print(f"      {result['error']}")

    return 0 if all(r["valid"] for r in results) else 1


def cmd_tokens(args: argparse.Namespace) -> int:
    """Handle tokens command."""
    config = _load_config(args)
    parser = StrictXMLParser(config.parser_config)
    try:
        result = parser.tokenize(args.path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, XMLSyntaxError) as e:
        print(f"{args.path}: {e}", file=sys.stderr)
        return 1

    for token in result.tokens:
        print(f"{token.type.name:<16} {token.value!r} @{token.position.line}:{token.position.column}")
    for diagnostic in result.diagnostics:
        print(f"{args.path}: warning: {diagnostic.message}", file=sys.stderr)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)
    else:
        logging.basicConfig(level=logging.WARNING)

    handlers = {
        "parse": cmd_parse,
        "validate": cmd_validate,
        "tokens": cmd_tokens,
    }
    try:
        return handlers[args.command](args)
    except ConfigError as e:
        logger.error("Invalid configuration", extra={"error": str(e)})
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
