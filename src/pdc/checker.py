# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Docblock checking orchestration over extracted declarations."""

import concurrent.futures
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Protocol

from pdc.analyzer import ClassDeclaration, Extractor, ParseError, ParseFailure
from pdc.analyzers import PhpExtractor, extract_classes
from pdc.model import CheckResult, ClassOutcome, FileReport, Finding
from pdc.rules import check_class_docblock, check_method_docblock, check_method_params

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckerConfig:
    """Select which rules run.

    Attributes:
        check_class_docblocks: Report classes without a docblock.
        check_method_docblocks: Visit methods at all. When false neither the
            method presence rule nor the parameter rule runs.
        errors_only: Switch off both presence rules; parameter checks still run.
        report_ok: Acknowledge classes that produced no findings.
    """

    check_class_docblocks: bool = True
    check_method_docblocks: bool = True
    errors_only: bool = False
    report_ok: bool = True

    @property
    def reports_missing_classes(self) -> bool:
        return self.check_class_docblocks and not self.errors_only

    @property
    def visits_methods(self) -> bool:
        return self.check_method_docblocks

    @property
    def reports_missing_methods(self) -> bool:
        return self.check_method_docblocks and not self.errors_only


class CheckListener(Protocol):
    """Receive check events in deterministic order while a run proceeds."""

    def on_finding(self, finding: Finding) -> None:
        """Handle one finding."""

    def on_class_ok(self, class_name: str) -> None:
        """Handle a class that produced no findings."""

    def on_parse_failure(self, failure: ParseFailure) -> None:
        """Handle a file that could not be checked."""


class DocblockChecker:
    """Apply docblock rules to PHP files."""

    def __init__(self, config: CheckerConfig, extractor: Extractor | None = None) -> None:
        """Initialize the checker.

        Args:
            config: Rule selection.
            extractor: Source extractor; defaults to the PHP extractor.
        """
        self._config = config
        self._extractor = extractor or PhpExtractor()

    def check_classes(
        self, file_path: str, classes: dict[str, ClassDeclaration]
    ) -> FileReport:
        """Evaluate the configured rules against one file's declarations.

        Args:
            file_path: Path reported in findings.
            classes: Declarations in file order.

        Returns:
            One outcome per declaration, in order.
        """
        outcomes = tuple(
            self._check_class(file_path, declaration) for declaration in classes.values()
        )
        return FileReport(file_path=file_path, outcomes=outcomes)

    def _check_class(self, file_path: str, declaration: ClassDeclaration) -> ClassOutcome:
        findings: list[Finding] = []
        if self._config.reports_missing_classes:
            findings.extend(check_class_docblock(file_path, declaration))
        if self._config.visits_methods:
            for method in declaration.methods:
                if method.docblock is None:
                    if self._config.reports_missing_methods:
                        findings.extend(
                            check_method_docblock(file_path, declaration.name, method)
                        )
                    continue
                findings.extend(check_method_params(file_path, declaration.name, method))
        return ClassOutcome(class_name=declaration.name, findings=tuple(findings))

    def check_source(self, file_path: str, source: str) -> FileReport:
        """Check PHP source text.

        Raises:
            ParseError: If the source cannot be tokenized.
        """
        return self.check_classes(file_path, extract_classes(source))

    def check_file(self, root_path: Path, file_path: str) -> FileReport:
        """Check one file below ``root_path``.

        Args:
            root_path: Base directory.
            file_path: Path relative to ``root_path``; reported in findings.

        Returns:
            The file's report.

        Raises:
            ParseError: If the file cannot be read or tokenized.
        """
        classes = self._extractor.extract_file(root_path / file_path)
        return self.check_classes(file_path, classes)

    def check_files(
        self,
        root_path: Path,
        file_paths: list[str],
        listener: CheckListener | None = None,
        max_workers: int = 1,
    ) -> CheckResult:
        """Check files in order and accumulate their findings.

        A file that fails to parse is recorded and skipped; later files are
        still checked.

        Args:
            root_path: Base directory.
            file_paths: Paths relative to ``root_path``, in reporting order.
            listener: Optional receiver of streamed events.
            max_workers: Worker threads; ``1`` checks sequentially.

        Returns:
            Ordered findings and parse failures.

        Raises:
            ValueError: If ``max_workers`` is not greater than zero.
        """
        if max_workers <= 0:
            raise ValueError("max_workers must be > 0")

        findings: list[Finding] = []
        failures: list[ParseFailure] = []
        files_checked = 0

        if max_workers == 1 or len(file_paths) <= 1:
            reports = (self._check_isolated(root_path, path) for path in file_paths)
            files_checked = self._collect(reports, findings, failures, listener)
        else:
            with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
                # map() yields in submission order.
                reports = executor.map(
                    lambda path: self._check_isolated(root_path, path), file_paths
                )
                files_checked = self._collect(reports, findings, failures, listener)

        logger.info(
            f"Docblock check completed (files={len(file_paths)} findings={len(findings)} "
            f"parse_errors={len(failures)})"
        )
        return CheckResult(
            findings=tuple(findings),
            parse_failures=tuple(failures),
            files_checked=files_checked,
        )

    def _check_isolated(self, root_path: Path, file_path: str) -> FileReport | ParseFailure:
        try:
            return self.check_file(root_path, file_path)
        except ParseError as exc:
            logger.warning(f"Skipping file due to parse/read failure (file_path={file_path} error={exc})")
            return ParseFailure(file_path=file_path, message=str(exc))

    def _collect(
        self,
        reports: Iterable[FileReport | ParseFailure],
        findings: list[Finding],
        failures: list[ParseFailure],
        listener: CheckListener | None,
    ) -> int:
        checked = 0
        for report in reports:
            if isinstance(report, ParseFailure):
                failures.append(report)
                if listener is not None:
                    listener.on_parse_failure(report)
                continue
            checked += 1
            logger.debug(
                f"Checked file (file_path={report.file_path} classes={len(report.outcomes)})"
            )
            for outcome in report.outcomes:
                findings.extend(outcome.findings)
                if listener is None:
                    continue
                for finding in outcome.findings:
                    listener.on_finding(finding)
                if outcome.ok and self._config.report_ok:
                    listener.on_class_ok(outcome.class_name)
        return checked
