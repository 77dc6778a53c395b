# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Docblock rules evaluated per declaration."""

from pdc.analyzer import ClassDeclaration, MethodDeclaration
from pdc.model import Finding, FindingKind
from pdc.params import compare_params, extract_docblock_params, extract_signature_params

MISSING_CLASS_DOCBLOCK = "Class is missing a docblock."
MISSING_METHOD_DOCBLOCK = "Method is missing a docblock."


def check_class_docblock(file_path: str, declaration: ClassDeclaration) -> tuple[Finding, ...]:
    """Report a class-like declaration without a docblock."""
    if declaration.docblock is not None:
        return ()
    return (
        Finding(
            kind="missing-class-docblock",
            file_path=file_path,
            class_name=declaration.name,
            method_name=None,
            line=declaration.start_line,
            message=MISSING_CLASS_DOCBLOCK,
        ),
    )


def check_method_docblock(
    file_path: str, class_name: str, method: MethodDeclaration
) -> tuple[Finding, ...]:
    """Report a method without a docblock."""
    if method.docblock is not None:
        return ()
    return (
        Finding(
            kind="missing-method-docblock",
            file_path=file_path,
            class_name=class_name,
            method_name=method.name,
            line=method.start_line,
            message=MISSING_METHOD_DOCBLOCK,
        ),
    )


def check_method_params(
    file_path: str, class_name: str, method: MethodDeclaration
) -> tuple[Finding, ...]:
    """Report ``@param`` names that disagree with the method signature.

    Args:
        file_path: Path of the checked file.
        class_name: Enclosing class name.
        method: Method to check.

    Returns:
        Unused docblock parameters first, then undocumented signature
        parameters; empty when the method has no docblock.
    """
    if method.docblock is None:
        return ()
    diff = compare_params(
        extract_docblock_params(method.docblock),
        extract_signature_params(method.signature),
    )

    def finding(kind: FindingKind, message: str) -> Finding:
        return Finding(
            kind=kind,
            file_path=file_path,
            class_name=class_name,
            method_name=method.name,
            line=method.start_line,
            message=message,
        )

    unused = [
        finding("unused-docblock-param", f"Argument {name} in DocBlock isn't used.")
        for name in diff.unused
    ]
    undocumented = [
        finding("undocumented-signature-param", f"Argument {name} isn't specified in DocBlock.")
        for name in diff.undocumented
    ]
    return tuple(unused + undocumented)
