# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Extractor interfaces and DTOs for PHP source structure."""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Protocol


DeclarationKind = Literal["class", "interface", "trait", "enum"]


class ParseError(RuntimeError):
    """Represent a source file that could not be read or tokenized."""


@dataclass(frozen=True)
class MethodDeclaration:
    """Represent one method declared inside a class-like body.

    Attributes:
        name: Method name as written.
        start_line: Line of the ``function`` keyword (1-based).
        signature: Verbatim text between the parameter-list parentheses.
        docblock: Raw text of the adjacent ``/**`` comment; ``None`` if absent.
    """

    name: str
    start_line: int
    signature: str
    docblock: str | None


@dataclass(frozen=True)
class ClassDeclaration:
    """Represent one class-like declaration and its methods.

    Attributes:
        name: Declared name, case-sensitive.
        kind: Declaring keyword.
        start_line: Line of the declaring keyword (1-based).
        docblock: Raw text of the adjacent ``/**`` comment; ``None`` if absent.
        methods: Methods in declaration order.
    """

    name: str
    kind: DeclarationKind
    start_line: int
    docblock: str | None
    methods: tuple[MethodDeclaration, ...] = ()


@dataclass(frozen=True)
class ParseFailure:
    """Represent a parse failure for one file."""

    file_path: str
    message: str


class Extractor(Protocol):
    """Source structure extraction contract."""

    def extract_file(self, file_path: Path) -> dict[str, ClassDeclaration]:
        """Extract class-like declarations from one file.

        Raises:
            ParseError: If the file cannot be read or tokenized.
        """
