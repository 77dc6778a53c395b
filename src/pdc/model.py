# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Domain models for check results."""

from dataclasses import dataclass
from typing import Any, Literal

from pdc.analyzer import ParseFailure

FindingKind = Literal[
    "missing-class-docblock",
    "missing-method-docblock",
    "undocumented-signature-param",
    "unused-docblock-param",
]
FindingScope = Literal["class", "method"]


@dataclass(frozen=True)
class Finding:
    """Represent one reported docblock problem.

    Attributes:
        kind: Problem category.
        file_path: Path of the checked file as given to the checker.
        class_name: Enclosing class-like declaration.
        method_name: Method name; ``None`` for class findings.
        line: Start line of the offending declaration (1-based).
        message: Human readable description.
    """

    kind: FindingKind
    file_path: str
    class_name: str
    method_name: str | None
    line: int
    message: str

    @property
    def scope(self) -> FindingScope:
        return "class" if self.kind == "missing-class-docblock" else "method"

    def to_dict(self) -> dict[str, Any]:
        """Return the structured form used by JSON output."""
        payload: dict[str, Any] = {
            "kind": self.kind,
            "type": self.scope,
            "file": self.file_path,
            "class": self.class_name,
            "line": self.line,
            "message": self.message,
        }
        if self.method_name is not None:
            payload["method"] = self.method_name
        return payload


@dataclass(frozen=True)
class ClassOutcome:
    """Represent the findings produced for one class-like declaration."""

    class_name: str
    findings: tuple[Finding, ...]

    @property
    def ok(self) -> bool:
        return not self.findings


@dataclass(frozen=True)
class FileReport:
    """Represent the check outcome of one file."""

    file_path: str
    outcomes: tuple[ClassOutcome, ...]

    @property
    def findings(self) -> tuple[Finding, ...]:
        return tuple(finding for outcome in self.outcomes for finding in outcome.findings)


@dataclass(frozen=True)
class CheckResult:
    """Represent the accumulated outcome of one run.

    Attributes:
        findings: All findings in file order, then declaration order.
        parse_failures: Files that could not be checked.
        files_checked: Number of files successfully checked.
    """

    findings: tuple[Finding, ...]
    parse_failures: tuple[ParseFailure, ...]
    files_checked: int

    @property
    def succeeded(self) -> bool:
        return not self.findings
