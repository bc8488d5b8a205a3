# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Bot user-agent matcher.

All patterns are joined into a single alternation and compiled once, so a query costs
one regex search regardless of how many patterns are installed. Every mutation rebuilds
the combined expression from the full pattern set before returning.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Protocol

from .errors import InvalidPatternError
from .patterns import ascii_lower, load_default_patterns, normalize_pattern, normalize_patterns, parse_patterns

logger = logging.getLogger(__name__)


class BotMatcher(Protocol):
    """Anything that classifies a user-agent, e.g. Bots or SynchronizedBots."""

    def is_bot(self, user_agent: str) -> bool: ...


# An empty pattern set must reject everything, including the empty string.
_NEVER_MATCH = re.compile(r"(?!)")


def validate_patterns(patterns: Iterable[str]) -> None:
    """
    Compile each pattern on its own.

    Malformed fragments can cancel out once joined (``(a`` and ``b)`` form ``(a|b)``), so
    every new pattern is checked individually before the combined build.
    """
    for pattern in sorted(patterns):
        try:
            re.compile(pattern)
        except re.error as exc:
            raise InvalidPatternError(f"Invalid bot pattern: {pattern!r} ({exc})", pattern=pattern) from exc


def compile_patterns(patterns: Iterable[str]) -> re.Pattern[str]:
    """
    Build the combined matcher for a pattern set.

    Patterns are sorted before joining so the same set always yields the same expression.
    Raises InvalidPatternError when the combined expression does not compile.
    """
    ordered = sorted(patterns)
    if not ordered:
        return _NEVER_MATCH
    try:
        return re.compile("|".join(ordered))
    except re.error as exc:
        validate_patterns(ordered)
        raise InvalidPatternError(f"Invalid combined bot expression ({exc})") from exc


def _as_pattern_list(patterns: Iterable[str] | str) -> list[str]:
    # A bare string is one pattern, not a sequence of single-character patterns.
    if isinstance(patterns, str):
        return [patterns]
    return list(patterns)


class Bots:
    """
    Set of bot user-agent regular expressions backed by one compiled matcher.

    Patterns and queried user-agents are lowercased (ASCII only) before use, so matching
    is case-insensitive. Patterns match anywhere in the user-agent unless they anchor
    themselves with ``^``/``$``.

    Queries are safe to run from many threads at once. ``append`` and ``remove`` are not
    synchronized; wrap the store in :class:`isbot.sync.SynchronizedBots` when mutations
    can race with other calls.
    """

    def __init__(self, patterns: str = ""):
        self._patterns: frozenset[str] = frozenset()
        self._matcher: re.Pattern[str] = _NEVER_MATCH
        self._replace(parse_patterns(patterns))

    @classmethod
    def default(cls) -> Bots:
        """Construct a store from the bundled bot list (empty when it is excluded by configuration)."""
        return cls(load_default_patterns())

    @property
    def patterns(self) -> frozenset[str]:
        """Snapshot of the installed (lowercased) patterns."""
        return self._patterns

    @property
    def expression(self) -> str:
        """Source of the combined matcher."""
        return self._matcher.pattern

    def is_bot(self, user_agent: str) -> bool:
        """Return True when any installed pattern occurs in the user-agent."""
        return self._matcher.search(ascii_lower(user_agent)) is not None

    def append(self, patterns: Iterable[str] | str) -> None:
        """Add patterns; ones already installed are ignored."""
        self._replace(self._patterns | normalize_patterns(_as_pattern_list(patterns)))

    def remove(self, patterns: Iterable[str] | str) -> None:
        """
        Remove patterns by exact (lowercased) value.

        Patterns that are not installed are ignored. Removal never affects other patterns
        that happen to match the same user-agents.
        """
        self._replace(self._patterns - normalize_patterns(_as_pattern_list(patterns)))

    def matching_patterns(self, user_agent: str) -> list[str]:
        """
        List the installed patterns that match a user-agent.

        Intended for diagnostics: each pattern is searched on its own, so this is much
        slower than ``is_bot``.
        """
        candidate = ascii_lower(user_agent)
        return [pattern for pattern in sorted(self._patterns) if re.search(pattern, candidate)]

    def _replace(self, patterns: Iterable[str]) -> None:
        # Compile before assigning so a failed rebuild leaves the store untouched.
        updated = frozenset(patterns)
        validate_patterns(updated - self._patterns)
        matcher = compile_patterns(updated)
        self._patterns = updated
        self._matcher = matcher
        logger.debug("Rebuilt bot matcher with %d patterns", len(updated))

    def __contains__(self, pattern: object) -> bool:
        return isinstance(pattern, str) and normalize_pattern(pattern) in self._patterns

    def __len__(self) -> int:
        return len(self._patterns)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(patterns={len(self._patterns)})"


__all__ = ["BotMatcher", "Bots", "compile_patterns", "validate_patterns"]
