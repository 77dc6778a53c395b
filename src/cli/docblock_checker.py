# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Check PHP files within a directory for appropriate use of docblocks."""

import argparse
import logging
import sys
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler

from pdc.checker import CheckerConfig, DocblockChecker
from pdc.discovery import (
    ConfigurationError,
    discover_php_files,
    parse_exclude_option,
    validate_base_dir,
)
from pdc.reporters import ConsoleReporter, write_json, write_json_file

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_USAGE = 2

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler on stderr.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=Console(stderr=True), rich_tracebacks=True, show_path=False
            )
        ],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser.

    Returns:
        Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(
        prog="pdc",
        description="Check PHP files within a directory for appropriate use of docblocks.",
    )
    parser.add_argument("file", nargs="?", default="", help="File to scan.")
    parser.add_argument(
        "-x", "--exclude", default=None, help="Files and directories to exclude."
    )
    parser.add_argument("-d", "--directory", default="./", help="Directory to scan.")
    parser.add_argument(
        "--skip-classes",
        action="store_true",
        help="Don't check classes for docblocks.",
    )
    parser.add_argument(
        "--skip-methods",
        action="store_true",
        help="Don't check methods for docblocks.",
    )
    parser.add_argument(
        "-e",
        "--errors",
        action="store_true",
        help="Only check validity of docblocks.",
    )
    parser.add_argument(
        "-j", "--json", action="store_true", help="Output JSON instead of a log."
    )
    parser.add_argument("--oks", default="true", help="Report OK classes.")
    parser.add_argument(
        "--output",
        required=False,
        help="Optional output file path for raw JSON when --json is used.",
    )
    parser.add_argument(
        "--jobs", type=int, default=1, help="Number of files checked concurrently."
    )
    return parser


def parse_bool_option(value: str) -> bool:
    """Parse a boolean option value.

    Args:
        value: Raw option value.

    Returns:
        Parsed flag.

    Raises:
        ConfigurationError: If the value is not a recognized boolean.
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean value: {value}")


def run(argv: list[str], stdout: TextIO, stderr: TextIO) -> int:
    """Run the docblock check.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code: 0 without findings, 1 with findings, 2 on usage errors.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return EXIT_USAGE

    try:
        config, file_paths, base_dir = _prepare(args)
    except ConfigurationError as exc:
        logger.warning(f"Invalid configuration (error={exc})")
        stderr.write(f"{exc}\n")
        return EXIT_USAGE

    checker = DocblockChecker(config=config)
    if args.json:
        result = checker.check_files(base_dir, file_paths, max_workers=args.jobs)
        if args.output:
            try:
                write_json_file(result=result, output_path=Path(args.output))
            except OSError as exc:
                logger.warning(
                    f"Failed to write JSON output file (output_path={args.output} error={exc})"
                )
                stderr.write(f"Failed to write JSON output file: {args.output}\n")
                return EXIT_USAGE
        else:
            write_json(result=result, stdout=stdout)
    else:
        reporter = ConsoleReporter(
            console=Console(file=stdout, force_terminal=False, color_system="truecolor"),
            error_console=Console(file=stderr, force_terminal=False, color_system="truecolor"),
        )
        result = checker.check_files(
            base_dir, file_paths, listener=reporter, max_workers=args.jobs
        )

    return EXIT_OK if result.succeeded else EXIT_FINDINGS


def _prepare(args: argparse.Namespace) -> tuple[CheckerConfig, list[str], Path]:
    """Turn parsed arguments into checker inputs.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Checker configuration, files relative to the base directory, and the
        base directory.

    Raises:
        ConfigurationError: If an option value or path is invalid.
    """
    if args.jobs <= 0:
        raise ConfigurationError("jobs must be > 0")
    if args.output and not args.json:
        raise ConfigurationError("--output requires --json")

    config = CheckerConfig(
        check_class_docblocks=not args.skip_classes,
        check_method_docblocks=not args.skip_methods,
        errors_only=args.errors,
        report_ok=parse_bool_option(args.oks),
    )
    base_dir = validate_base_dir(Path(args.directory))
    if args.file:
        if not (base_dir / args.file).is_file():
            raise ConfigurationError(f"File does not exist: {base_dir / args.file}")
        return config, [args.file], base_dir

    file_paths = discover_php_files(base_dir, parse_exclude_option(args.exclude))
    return config, file_paths, base_dir


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
