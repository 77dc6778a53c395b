# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""PHP file discovery with exclusion patterns."""

import logging
import os
from pathlib import Path

import pathspec

logger = logging.getLogger(__name__)

PHP_SUFFIX = ".php"


class ConfigurationError(RuntimeError):
    """Represent invalid run configuration detected before checking."""


class ExcludeMatcher:
    """Match project paths against exclusion patterns."""

    def __init__(self, spec: pathspec.GitIgnoreSpec) -> None:
        """Initialize matcher.

        Args:
            spec: Compiled gitignore-style matcher.
        """
        self._spec = spec

    @classmethod
    def from_patterns(cls, patterns: list[str] | tuple[str, ...]) -> "ExcludeMatcher":
        """Build a matcher from exclusion entries.

        Plain relative paths such as ``vendor`` or ``src/Legacy.php`` are
        valid patterns; gitignore wildcards are accepted as well.

        Args:
            patterns: Exclusion entries.

        Returns:
            Configured matcher.
        """
        lines = [pattern.strip() for pattern in patterns if pattern.strip()]
        return cls(spec=pathspec.GitIgnoreSpec.from_lines(lines))

    def matches(self, relative_path: str, is_dir: bool) -> bool:
        """Check whether a path is excluded.

        Args:
            relative_path: Path relative to the base directory.
            is_dir: Whether the path is a directory.

        Returns:
            True when the path should be skipped.
        """
        normalized = relative_path.replace(os.sep, "/").strip("/")
        if not normalized:
            return False
        if self._spec.match_file(normalized):
            return True
        if is_dir and self._spec.match_file(f"{normalized}/"):
            return True
        return False


def parse_exclude_option(value: str | None) -> list[str]:
    """Split a comma separated exclusion option.

    Args:
        value: Raw option value; ``None`` when not given.

    Returns:
        Trimmed, non-empty entries.
    """
    if value is None:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def validate_base_dir(base_dir: Path) -> Path:
    """Ensure the base directory can be scanned.

    Raises:
        ConfigurationError: If the path is missing or not a directory.
    """
    if not base_dir.exists():
        raise ConfigurationError(f"Directory does not exist: {base_dir}")
    if not base_dir.is_dir():
        raise ConfigurationError(f"Path is not a directory: {base_dir}")
    return base_dir


def discover_php_files(
    base_dir: Path, excludes: list[str] | tuple[str, ...] = ()
) -> list[str]:
    """List PHP files below a base directory.

    Directories are walked depth-first in name order; the files of a
    directory are listed before the contents of its subdirectories.

    Args:
        base_dir: Directory to scan.
        excludes: Exclusion patterns relative to ``base_dir``.

    Returns:
        POSIX paths relative to ``base_dir``.

    Raises:
        ConfigurationError: If ``base_dir`` cannot be scanned.
    """
    validate_base_dir(base_dir)
    matcher = ExcludeMatcher.from_patterns(excludes)
    found: list[str] = []
    skipped = 0
    pending: list[Path] = [base_dir]

    while pending:
        current = pending.pop()
        try:
            children = sorted(current.iterdir(), key=lambda item: item.name)
        except OSError as exc:
            if current == base_dir:
                raise ConfigurationError(f"Unable to read directory {base_dir}: {exc}") from exc
            logger.warning(f"Skipping unreadable directory (path={current} error={exc})")
            continue

        subdirs: list[Path] = []
        for child in children:
            relative = child.relative_to(base_dir).as_posix()
            is_dir = child.is_dir()
            if is_dir and child.name == ".git":
                continue
            if matcher.matches(relative_path=relative, is_dir=is_dir):
                skipped += 1
                continue
            if is_dir:
                subdirs.append(child)
            elif child.suffix == PHP_SUFFIX:
                found.append(relative)
        # Depth-first, in name order.
        pending.extend(reversed(subdirs))

    logger.info(
        f"File discovery completed (base_dir={base_dir} files={len(found)} excluded={skipped})"
    )
    return found
