# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Parameter name extraction and comparison helpers."""

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# At least two UTF-8 bytes after the sigil: ``$x`` is not a match, ``$é`` is.
VARIABLE_PATTERN = (
    r"\$(?:[a-zA-Z_\x7f][a-zA-Z0-9_\x7f-\U0010ffff]+"
    r"|[\x80-\U0010ffff][a-zA-Z0-9_\x7f-\U0010ffff]*)"
)

_VARIABLE_RE = re.compile(f"({VARIABLE_PATTERN})")
_DOCBLOCK_PARAM_RE = re.compile(f"@param.+?({VARIABLE_PATTERN})")


@dataclass(frozen=True)
class ParamDiff:
    """Represent the two directions of a parameter mismatch.

    Attributes:
        unused: Documented names missing from the signature.
        undocumented: Signature names missing from the docblock.
    """

    unused: tuple[str, ...]
    undocumented: tuple[str, ...]

    @property
    def matches(self) -> bool:
        return not self.unused and not self.undocumented


def extract_docblock_params(docblock: str) -> tuple[str, ...]:
    """Extract the names annotated with ``@param`` in a docblock.

    Each ``@param`` occurrence contributes the first variable that follows it
    on the same line; a type before the variable is skipped.

    Args:
        docblock: Raw docblock text.

    Returns:
        Unique names in encounter order.
    """
    return _unique(_DOCBLOCK_PARAM_RE.findall(docblock))


def extract_signature_params(signature: str) -> tuple[str, ...]:
    """Extract every variable-like token from a raw parameter list.

    Defaults and type hints are scanned too, so a variable inside a default
    value expression is reported as a parameter.

    Args:
        signature: Raw text between the parameter-list parentheses.

    Returns:
        Unique names in encounter order.
    """
    return _unique(_VARIABLE_RE.findall(signature))


def compare_params(
    docblock_params: tuple[str, ...], signature_params: tuple[str, ...]
) -> ParamDiff:
    """Compute both set differences between documented and declared names.

    Args:
        docblock_params: Names annotated in the docblock.
        signature_params: Names declared in the signature.

    Returns:
        Differences in encounter order.
    """
    declared = set(signature_params)
    documented = set(docblock_params)
    return ParamDiff(
        unused=tuple(name for name in docblock_params if name not in declared),
        undocumented=tuple(name for name in signature_params if name not in documented),
    )


def _unique(names: list[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(names))
