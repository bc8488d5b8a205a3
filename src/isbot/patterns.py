# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Pattern text parsing and the bundled default bot list.

Patterns are regular expressions, one per line. The only normalization applied is
ASCII lowercasing; regex metacharacters are not escaped.
"""

from __future__ import annotations

from collections.abc import Iterable
from importlib import resources

from .config import IsbotSettings, load_settings

DEFAULT_PATTERNS_RESOURCE = "bot_patterns.txt"

_ASCII_LOWER = str.maketrans("ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz")


def ascii_lower(value: str) -> str:
    """Lowercase ``A-Z`` only; non-ASCII characters are left untouched."""
    return value.translate(_ASCII_LOWER)


def normalize_pattern(pattern: str) -> str:
    return ascii_lower(pattern)


def normalize_patterns(patterns: Iterable[str]) -> set[str]:
    """Lowercase a batch of patterns, dropping blank entries."""
    return {normalize_pattern(pattern) for pattern in patterns if pattern.strip()}


def parse_patterns(text: str) -> set[str]:
    """Split newline-delimited pattern text into a de-duplicated set, skipping blank lines."""
    return normalize_patterns(line.removesuffix("\r") for line in text.split("\n"))


def read_default_patterns() -> str:
    """Return the bundled default pattern text."""
    return resources.files("isbot").joinpath(DEFAULT_PATTERNS_RESOURCE).read_text(encoding="utf-8")


def load_default_patterns(settings: IsbotSettings | None = None) -> str:
    """Return the default pattern text, or an empty string when the bundled list is excluded."""
    settings = settings or load_settings()
    if not settings.include_default_bots:
        return ""
    return read_default_patterns()


__all__ = [
    "DEFAULT_PATTERNS_RESOURCE",
    "ascii_lower",
    "load_default_patterns",
    "normalize_pattern",
    "normalize_patterns",
    "parse_patterns",
    "read_default_patterns",
]
