# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for the docblock rule engine."""

from pathlib import Path

import pytest

from pdc.analyzer import ParseFailure
from pdc.checker import CheckerConfig, DocblockChecker
from pdc.model import Finding

SOURCE = "\n".join(
    [
        "<?php",
        "class Undocumented",
        "{",
        "    /**",
        "     * @param int $alpha",
        "     */",
        "    public function mismatch($beta) {}",
        "",
        "    public function bare($value) {}",
        "}",
        "",
        "/** Clean. */",
        "class Clean",
        "{",
        "    /**",
        "     * @param int $count",
        "     */",
        "    public function add($count) {}",
        "}",
        "",
    ]
)


class _RecordingListener:
    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def on_finding(self, finding: Finding) -> None:
        self.events.append(("finding", f"{finding.class_name}:{finding.kind}"))

    def on_class_ok(self, class_name: str) -> None:
        self.events.append(("ok", class_name))

    def on_parse_failure(self, failure: ParseFailure) -> None:
        self.events.append(("parse_failure", failure.file_path))


def _kinds(findings: tuple[Finding, ...]) -> list[str]:
    return [finding.kind for finding in findings]


def test_chk_001_default_config_reports_findings_in_declaration_order() -> None:
    report = DocblockChecker(CheckerConfig()).check_source("a.php", SOURCE)

    assert _kinds(report.findings) == [
        "missing-class-docblock",
        "unused-docblock-param",
        "undocumented-signature-param",
        "missing-method-docblock",
    ]
    assert [f.line for f in report.findings] == [2, 7, 7, 9]
    assert [(o.class_name, o.ok) for o in report.outcomes] == [
        ("Undocumented", False),
        ("Clean", True),
    ]


def test_chk_002_errors_only_keeps_param_checks_but_drops_presence_checks() -> None:
    config = CheckerConfig(errors_only=True)

    report = DocblockChecker(config).check_source("a.php", SOURCE)

    assert _kinds(report.findings) == [
        "unused-docblock-param",
        "undocumented-signature-param",
    ]
    assert not config.reports_missing_classes
    assert not config.reports_missing_methods


def test_chk_003_skipping_methods_skips_param_checks_too() -> None:
    config = CheckerConfig(check_method_docblocks=False)

    report = DocblockChecker(config).check_source("a.php", SOURCE)

    assert _kinds(report.findings) == ["missing-class-docblock"]


def test_chk_004_skipping_classes_still_checks_methods() -> None:
    config = CheckerConfig(check_class_docblocks=False)

    report = DocblockChecker(config).check_source("a.php", SOURCE)

    assert "missing-class-docblock" not in _kinds(report.findings)
    assert len(report.findings) == 3


def test_chk_005_fully_documented_class_has_no_findings() -> None:
    source = "<?php\n/** Doc. */\nclass Doc\n{\n    /** @param int $count */\n    public function add($count) {}\n}\n"

    report = DocblockChecker(CheckerConfig()).check_source("doc.php", source)

    assert report.findings == ()
    assert report.outcomes[0].ok


def test_chk_006_check_files_isolates_parse_failures_and_keeps_order(
    tmp_path: Path, write_file
) -> None:
    write_file(tmp_path / "a.php", SOURCE)
    write_file(tmp_path / "b.php", "<?php\nclass Broken {\n")
    write_file(tmp_path / "c.php", "<?php\nclass Late {}\n")
    listener = _RecordingListener()

    result = DocblockChecker(CheckerConfig()).check_files(
        tmp_path, ["a.php", "b.php", "c.php"], listener=listener
    )

    assert [f.file_path for f in result.findings] == ["a.php"] * 4 + ["c.php"]
    assert [failure.file_path for failure in result.parse_failures] == ["b.php"]
    assert result.files_checked == 2
    assert not result.succeeded
    assert listener.events == [
        ("finding", "Undocumented:missing-class-docblock"),
        ("finding", "Undocumented:unused-docblock-param"),
        ("finding", "Undocumented:undocumented-signature-param"),
        ("finding", "Undocumented:missing-method-docblock"),
        ("ok", "Clean"),
        ("parse_failure", "b.php"),
        ("finding", "Late:missing-class-docblock"),
    ]


def test_chk_007_report_ok_disabled_suppresses_acknowledgements(tmp_path: Path, write_file) -> None:
    write_file(tmp_path / "a.php", SOURCE)
    listener = _RecordingListener()

    DocblockChecker(CheckerConfig(report_ok=False)).check_files(
        tmp_path, ["a.php"], listener=listener
    )

    assert ("ok", "Clean") not in listener.events


def test_chk_008_parse_failures_alone_do_not_fail_the_run(tmp_path: Path, write_file) -> None:
    write_file(tmp_path / "broken.php", "<?php\n/* unterminated\n")

    result = DocblockChecker(CheckerConfig()).check_files(tmp_path, ["broken.php"])

    assert result.findings == ()
    assert len(result.parse_failures) == 1
    assert result.succeeded


def test_chk_009_worker_pool_and_repeated_runs_produce_identical_results(
    tmp_path: Path, write_file
) -> None:
    paths = []
    for index in range(8):
        name = f"f{index}.php"
        write_file(tmp_path / name, SOURCE.replace("Undocumented", f"Undocumented{index}"))
        paths.append(name)
    checker = DocblockChecker(CheckerConfig())

    sequential = checker.check_files(tmp_path, paths)
    again = checker.check_files(tmp_path, paths)
    pooled = checker.check_files(tmp_path, paths, max_workers=4)

    assert sequential == again
    assert sequential == pooled
    assert [f.class_name for f in pooled.findings][::4] == [
        f"Undocumented{index}" for index in range(8)
    ]


def test_chk_010_check_files_rejects_non_positive_worker_count(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        DocblockChecker(CheckerConfig()).check_files(tmp_path, [], max_workers=0)


def test_chk_011_end_to_end_undocumented_class_with_matching_method(
    tmp_path: Path, write_file
) -> None:
    write_file(
        tmp_path / "only.php",
        "<?php\nclass Only\n{\n    /**\n     * @param int $count\n     */\n"
        "    public function add($count) {}\n}\n",
    )

    result = DocblockChecker(CheckerConfig()).check_files(tmp_path, ["only.php"])

    assert _kinds(result.findings) == ["missing-class-docblock"]
    assert result.findings[0].line == 2
    assert not result.succeeded


def test_chk_012_function_imports_do_not_turn_files_into_parse_failures(
    tmp_path: Path, write_file
) -> None:
    write_file(
        tmp_path / "a.php",
        "<?php\nnamespace App;\n\nuse function Foo\\bar;\n\n"
        "class Undocumented\n{\n    public function run($value) {}\n}\n",
    )

    result = DocblockChecker(CheckerConfig()).check_files(tmp_path, ["a.php"])

    assert result.parse_failures == ()
    assert _kinds(result.findings) == ["missing-class-docblock", "missing-method-docblock"]
    assert not result.succeeded
