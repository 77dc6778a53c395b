# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
from pdc.analyzer import ClassDeclaration, MethodDeclaration
from pdc.rules import check_class_docblock, check_method_docblock, check_method_params


def _method(docblock: str | None, signature: str = "") -> MethodDeclaration:
    return MethodDeclaration(name="run", start_line=12, signature=signature, docblock=docblock)


def test_rul_001_class_without_docblock_reports_one_finding_at_start_line() -> None:
    declaration = ClassDeclaration(name="Job", kind="class", start_line=7, docblock=None)

    findings = check_class_docblock("src/Job.php", declaration)

    assert len(findings) == 1
    finding = findings[0]
    assert finding.kind == "missing-class-docblock"
    assert finding.scope == "class"
    assert (finding.file_path, finding.class_name, finding.method_name, finding.line) == (
        "src/Job.php",
        "Job",
        None,
        7,
    )
    assert finding.message == "Class is missing a docblock."


def test_rul_002_documented_class_and_method_pass_presence_rules() -> None:
    declaration = ClassDeclaration(name="Job", kind="class", start_line=7, docblock="/** Job. */")

    assert check_class_docblock("Job.php", declaration) == ()
    assert check_method_docblock("Job.php", "Job", _method("/** Run. */")) == ()


def test_rul_003_method_without_docblock_reports_missing_and_no_param_findings() -> None:
    method = _method(None, signature="$payload")

    missing = check_method_docblock("Job.php", "Job", method)

    assert [f.kind for f in missing] == ["missing-method-docblock"]
    assert missing[0].method_name == "run"
    assert missing[0].line == 12
    assert missing[0].message == "Method is missing a docblock."
    assert check_method_params("Job.php", "Job", method) == ()


def test_rul_004_mismatched_param_reports_unused_then_undocumented() -> None:
    method = _method("/**\n * @param int $alpha\n */", signature="int $beta")

    findings = check_method_params("Job.php", "Job", method)

    assert [(f.kind, f.message) for f in findings] == [
        ("unused-docblock-param", "Argument $alpha in DocBlock isn't used."),
        ("undocumented-signature-param", "Argument $beta isn't specified in DocBlock."),
    ]
    assert all(f.scope == "method" and f.line == 12 for f in findings)


def test_rul_005_docblock_without_param_tags_requires_documenting_all_params() -> None:
    method = _method("/** Runs. */", signature="$first, $second")

    findings = check_method_params("Job.php", "Job", method)

    assert [f.kind for f in findings] == ["undocumented-signature-param"] * 2


def test_rul_006_matching_params_produce_no_findings() -> None:
    method = _method(
        "/**\n * @param int $first\n * @param string $second\n */",
        signature="int $first, string $second = 'x'",
    )

    assert check_method_params("Job.php", "Job", method) == ()
