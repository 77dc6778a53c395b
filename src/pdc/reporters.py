# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Console and JSON rendering of check results."""

import json
import logging
from pathlib import Path
from typing import Any, TextIO

from rich.console import Console
from rich.text import Text

from pdc.analyzer import ParseFailure
from pdc.model import CheckResult, Finding

logger = logging.getLogger(__name__)


def format_finding(finding: Finding) -> str:
    """Render one finding as a log line."""
    if finding.scope == "class":
        return (
            f"{finding.file_path}: {finding.line}  - Class {finding.class_name} "
            f"> {finding.message}"
        )
    return (
        f"{finding.file_path}: {finding.line} - Method "
        f"{finding.class_name}::{finding.method_name} > {finding.message}"
    )


def format_parse_failure(failure: ParseFailure) -> str:
    return f"{failure.file_path}: parse error > {failure.message}"


class ConsoleReporter:
    """Stream findings to a console as they are discovered."""

    def __init__(self, console: Console, error_console: Console | None = None) -> None:
        """Initialize reporter.

        Args:
            console: Console receiving findings and OK lines.
            error_console: Console receiving parse failures; defaults to
                ``console``.
        """
        self._console = console
        self._error_console = error_console or console

    def on_finding(self, finding: Finding) -> None:
        self._print(self._console, Text(format_finding(finding), style="red"))

    def on_class_ok(self, class_name: str) -> None:
        line = Text(f"{class_name} ")
        line.append("OK", style="green")
        self._print(self._console, line)

    def on_parse_failure(self, failure: ParseFailure) -> None:
        self._print(self._error_console, Text(format_parse_failure(failure), style="yellow"))

    def _print(self, console: Console, text: Text) -> None:
        console.print(text, highlight=False, soft_wrap=True)


def build_json_payload(result: CheckResult) -> dict[str, Any]:
    """Build the structured document for a run.

    Args:
        result: Accumulated run result.

    Returns:
        Findings and parse errors in discovery order.
    """
    return {
        "findings": [finding.to_dict() for finding in result.findings],
        "parse_errors": [
            {"file": failure.file_path, "message": failure.message}
            for failure in result.parse_failures
        ],
    }


def write_json(result: CheckResult, stdout: TextIO) -> None:
    """Write the structured document to a stream.

    Args:
        result: Accumulated run result.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.print(
        json.dumps(build_json_payload(result), indent=2, sort_keys=True),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def write_json_file(result: CheckResult, output_path: Path) -> None:
    """Write the structured document to a file.

    Args:
        result: Accumulated run result.
        output_path: Target file path.

    Raises:
        OSError: If directory creation or file writing fails.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(build_json_payload(result), indent=2, sort_keys=True), encoding="utf-8"
    )
    logger.info(f"Wrote JSON report (output_path={output_path})")
