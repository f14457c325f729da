"""Main CLI entry point for the loose-xml command-line tool.

Provides commands to parse markup files (re-serializing them, dumping their
tree as JSON or summarizing them) and to check files for tolerated
malformations.
"""

import argparse
import json
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from loose_xml import __version__
from loose_xml.api import LooseXMLParser
from loose_xml.shared import ConfigError, MarkupError, ParserConfig
from loose_xml.shared.logging import get_logger

MARKUP_SUFFIXES = {".xml", ".xhtml", ".svg", ".html", ".htm"}
MAX_ERRORS_SHOWN = 3


class FileProcessor:
    """Core file processing logic for CLI operations."""

    def __init__(self, config: ParserConfig, max_workers: Optional[int] = None):
        self.config = config
        self.max_workers = max_workers
        self.parser = LooseXMLParser(config=config)
        self.logger = get_logger(__name__, config.correlation_id, "cli_processor")

    def process_single_file(self, file_path: Path) -> Dict[str, Any]:
        """Parse a single file and return a JSON-friendly result."""
        try:
            result = self.parser.parse_file(file_path)
        except (OSError, UnicodeDecodeError, LookupError, RecursionError, MarkupError) as e:
            self.logger.error(
                "Failed to process file",
                extra={"file": str(file_path)},
                exc_info=False,
            )
            return {"file": str(file_path), "success": False, "error": str(e)}

        return {
            "file": str(file_path),
            "success": True,
            "node_count": result.node_count,
            "element_count": result.element_count,
            "max_depth": result.performance.max_depth,
            "processing_time_ms": result.performance.processing_time_ms,
            "has_warnings": result.has_warnings,
            "diagnostics": [diag.to_dict() for diag in result.diagnostics],
            "serialized": result.document.serialize(),
            "tree": result.document.to_dict(),
        }

    def find_markup_files(self, path: Path, recursive: bool = True) -> Iterator[Path]:
        """Find markup files in path; explicit file paths are always used."""
        if path.is_file():
            yield path
        elif path.is_dir():
            candidates = path.rglob("*") if recursive else path.glob("*")
            for candidate in sorted(candidates):
                if candidate.is_file() and candidate.suffix.lower() in MARKUP_SUFFIXES:
                    yield candidate
        else:
            yield path  # reported as a failure by process_single_file

    def batch_process(self, paths: List[Path], recursive: bool = True) -> List[Dict[str, Any]]:
        """Process files, in parallel threads when several workers are allowed."""
        all_files: List[Path] = []
        for path in paths:
            all_files.extend(self.find_markup_files(path, recursive))

        if len(all_files) <= 1 or self.max_workers == 1:
            return [self.process_single_file(file_path) for file_path in all_files]

        # The parser and its registry are read-only, so threads can share them
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(self.process_single_file, all_files))


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="loose-xml",
        description="Tolerant markup parser: re-serialize, inspect and check files"
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

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parse_parser = subparsers.add_parser("parse", help="Parse markup files")
    _add_common_arguments(parse_parser)
    parse_parser.add_argument(
        "--format", "-f",
        choices=["xml", "json", "text"],
        default="xml",
        help="Output format (default: xml)"
    )
    parse_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    parse_parser.add_argument(
        "--workers", "-w",
        type=int,
        help="Number of parallel worker threads"
    )

    check_parser = subparsers.add_parser(
        "check", help="Report tolerated malformations in markup files"
    )
    _add_common_arguments(check_parser)
    check_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format"
    )

    return parser


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Markup files or directories"
    )
    parser.add_argument(
        "--recursive", "-r",
        action="store_true",
        help="Recursively process directories"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )
    parser.add_argument(
        "--encoding", "-e",
        help="File encoding (default: from config, utf-8)"
    )


def load_config(args: argparse.Namespace) -> ParserConfig:
    """Build the parser configuration from the config file and arguments."""
    config = ParserConfig()
    if args.config:
        config = ParserConfig.from_file(args.config)
    if args.encoding:
        config = config.override(encoding=args.encoding)
    return config


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format processing results for output."""
    if format_type == "xml":
        if len(results) == 1 and results[0]["success"]:
            return results[0]["serialized"]
        blocks = []
        for result in results:
            body = result["serialized"] if result["success"] else f"Error: {result['error']}"
            blocks.append(f"==> {result['file']} <==\n{body}")
        return "\n\n".join(blocks)

    if format_type == "json":
        return json.dumps(
            [{key: value for key, value in result.items() if key != "serialized"}
             for result in results],
            indent=2,
        )

    if not results:
        return "No results to display."

    lines = []
    successful = sum(1 for r in results if r["success"])
    lines.append(f"Processed {len(results)} files, {successful} successful")
    lines.append("-" * 60)

    for result in results:
        if not result["success"]:
            lines.append(f"✗ {result['file']}")
            lines.append(f"   Error: {result['error']}")
            lines.append("")
            continue

        status = "!" if result["has_warnings"] else "✓"
        lines.append(f"{status} {result['file']}")
        lines.append(
            f"   Nodes: {result['node_count']}, Elements: {result['element_count']}, "
            f"Depth: {result['max_depth']}, Time: {result['processing_time_ms']:.1f}ms"
        )
        diagnostics = result["diagnostics"]
        for diagnostic in diagnostics[:MAX_ERRORS_SHOWN]:
            lines.append(
                f"   Warning at {diagnostic.get('position', '?')}: {diagnostic['message']}"
            )
        if len(diagnostics) > MAX_ERRORS_SHOWN:
            lines.append(f"   ... and {len(diagnostics) - MAX_ERRORS_SHOWN} more warnings")
        lines.append("")

    return "\n".join(lines)


def cmd_parse(args: argparse.Namespace, config: ParserConfig) -> int:
    """Handle parse command."""
    processor = FileProcessor(config, max_workers=args.workers)
    results = processor.batch_process(args.paths, args.recursive)

    formatted_output = format_results(results, args.format)
    if args.output:
        try:
            args.output.write_text(formatted_output, encoding=config.encoding)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
        print(f"Results written to {args.output}", file=sys.stderr)
    else:
        print(formatted_output)

    if not results:
        return 1
    return 0 if all(r["success"] for r in results) else 1


def cmd_check(args: argparse.Namespace, config: ParserConfig) -> int:
    """Handle check command."""
    processor = FileProcessor(config)
    results = processor.batch_process(args.paths, args.recursive)

    print(format_results(results, args.format))

    clean = [r for r in results if r["success"] and not r["has_warnings"]]
    return 0 if results and len(clean) == len(results) else 1


def configure_logging(args: argparse.Namespace, config: ParserConfig) -> None:
    """Set up logging verbosity; command-line flags win over the config."""
    if args.verbose:
        level = "DEBUG"
    elif args.quiet:
        level = "ERROR"
    else:
        level = config.logging_level
    logging.basicConfig(level=getattr(logging, level))


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_config(args)
        configure_logging(args, config)

        if args.command == "parse":
            return cmd_parse(args, config)
        if args.command == "check":
            return cmd_check(args, config)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
