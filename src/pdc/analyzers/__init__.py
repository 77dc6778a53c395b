# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Extractor package for the docblock checker."""

from pdc.analyzers.php import PhpExtractor, extract_classes, tokenize

__all__ = ["PhpExtractor", "extract_classes", "tokenize"]
