# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Exception taxonomy for isbot."""

from __future__ import annotations


class IsbotError(Exception):
    """Base class for errors raised by isbot."""


class InvalidPatternError(IsbotError, ValueError):
    """
    The combined bot expression failed to compile.

    Raised uniformly by construction, ``append`` and ``remove``. ``pattern`` holds the
    first stored pattern that does not compile on its own, when one can be identified.
    """

    def __init__(self, message: str, pattern: str | None = None):
        super().__init__(message)
        self.pattern = pattern


class FixtureError(IsbotError):
    """Fixture data could not be downloaded, parsed or loaded."""


__all__ = ["FixtureError", "InvalidPatternError", "IsbotError"]
