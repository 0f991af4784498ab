# ============================================================================
# SOURCEFILE: analyzer_cli.py
# RELPATH: indexed_file_analyzer/src/analyzer_cli.py
# PROJECT: Indexed File Analyzer
# VERSION: 1.0.0
# LIFECYCLE: Proposed
# DESCRIPTION: Command-line interface: dump, explode, implode, patch
# ============================================================================

"""Command-Line Interface for the Indexed File Analyzer.

Exit codes: 0 on success, 1 on a configuration error (bad arguments, bad
bounds, unreadable config, missing input file), 2 on an error while running
the action.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from fileanalyzer.analyzer import IndexedFileAnalyzer
from fileanalyzer.config import ConfigManager
from fileanalyzer.exceptions import ConfigError, ConfigValidationError
from fileanalyzer.logging import StructuredLogger, configure_utf8_logging
from fileanalyzer.models import (
    Action,
    DisplayOptions,
    DumpAction,
    ExplodeAction,
    ImplodeAction,
    PatchAction,
    RecordBounds
)

EXIT_OK = 0
EXIT_CONFIGURATION_ERROR = 1
EXIT_EXECUTION_ERROR = 2
EXIT_INTERRUPTED = 130


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors as configuration errors (exit 1)."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_CONFIGURATION_ERROR, f"{self.prog}: error: {message}\n")


def _add_bounds(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--lower", "-l", type=int,
                        help="zero-based lowest record number to process (>= 0)")
    parser.add_argument("--upper", "-u", type=int,
                        help="zero-based highest record number to process (>= -1, -1 for no limit)")


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = _ArgumentParser(
        prog="indexed-file-analyzer",
        description="Inspect, explode, implode and patch indexed files"
    )
    parser.add_argument("--config", type=Path, help="JSON configuration file")

    subparsers = parser.add_subparsers(dest="command", required=True, parser_class=_ArgumentParser)

    # DUMP
    parser_dump = subparsers.add_parser("dump", help="print records or their count")
    parser_dump.add_argument("input_file", type=Path)
    parser_dump.add_argument("--counts", "-c", action="store_true",
                             help="show record labels, or only the total count if nothing else is shown")
    parser_dump.add_argument("--sizes", "-s", action="store_true", help="show record sizes")
    parser_dump.add_argument("--binary", "-b", action="store_true", help="show record contents in hex")
    parser_dump.add_argument("--text", "-t", action="store_true",
                             help="decode records as UTF-8, or add an ASCII column with --binary")
    parser_dump.add_argument("--metadata", "-m", action="store_true", help="also show the metadata")
    _add_bounds(parser_dump)

    # EXPLODE
    parser_explode = subparsers.add_parser("explode", help="write each record to its own file")
    parser_explode.add_argument("input_file", type=Path)
    parser_explode.add_argument("directory", type=Path)
    parser_explode.add_argument("--text", "-t", action="store_true", help="name files with a .txt suffix")
    parser_explode.add_argument("--metadata", "-m", action="store_true", help="also write the metadata")
    _add_bounds(parser_explode)

    # IMPLODE
    parser_implode = subparsers.add_parser("implode", help="build an indexed file from a directory")
    parser_implode.add_argument("directory", type=Path)
    parser_implode.add_argument("--header", help="header string of the new indexed file")
    parser_implode.add_argument("--output", "-o", type=Path, required=True)

    # PATCH
    parser_patch = subparsers.add_parser("patch", help="strip one layer of UTF-8 from every record")
    parser_patch.add_argument("input_file", type=Path)
    parser_patch.add_argument("--output", "-o", type=Path, required=True)
    _add_bounds(parser_patch)

    return parser


def build_action(args: argparse.Namespace, config: ConfigManager) -> Action:
    """
    Turn parsed arguments into the action to run.

    Raises:
        ConfigValidationError: For invalid bounds, header, or a missing input file
    """
    input_file = getattr(args, "input_file", None)
    if input_file is not None and not input_file.is_file():
        raise ConfigValidationError("input_file", str(input_file), "File not found")

    if args.command == "implode":
        header = args.header if args.header is not None else config.get("app_defaults.default_header", "")
        return ImplodeAction(args.directory, header, args.output)

    bounds = RecordBounds(args.lower, args.upper)

    if args.command == "patch":
        return PatchAction(input_file, args.output, bounds)

    if args.command == "explode":
        return ExplodeAction(input_file, args.directory, args.text, args.metadata, bounds)

    options = DisplayOptions(
        counts=args.counts,
        sizes=args.sizes,
        binary=args.binary,
        text=args.text,
        metadata=args.metadata
    )
    if not options.any_selected:
        options = DisplayOptions(counts=True, metadata=args.metadata)
    return DumpAction(input_file, options, bounds)


def load_config(config_file: Optional[Path]) -> ConfigManager:
    config = ConfigManager(str(config_file) if config_file else None)
    config.validate()
    return config


def run(argv: Optional[List[str]] = None) -> int:
    """Parse ``argv``, run the action, and return the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        action = build_action(args, config)
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_CONFIGURATION_ERROR

    session_log = None
    if config.get("global_settings.session_log", False):
        session_log = StructuredLogger(config.get("global_settings.log_dir", "logs"))

    analyzer = IndexedFileAnalyzer(action, session_log=session_log)
    try:
        analyzer.analyze(sys.stdout)
        sys.stdout.flush()
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_EXECUTION_ERROR
    return EXIT_OK


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    configure_utf8_logging()
    try:
        sys.exit(run(argv))
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        sys.exit(EXIT_INTERRUPTED)


if __name__ == "__main__":
    main()


# ============================================================================
# LIFECYCLE STATUS: Proposed
# DEPENDENCIES: fileanalyzer.*
# TESTS: tests/unit/test_cli.py, tests/integration/test_cli.py
# ============================================================================
