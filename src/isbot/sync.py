# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Thread-safe wrapper for sharing one Bots store between request handlers."""

from __future__ import annotations

import threading
from collections.abc import Iterable

from .bots import Bots


class SynchronizedBots:
    """
    Serializes mutations of a wrapped :class:`Bots` store.

    ``append`` and ``remove`` run under a lock. ``is_bot`` does not take the lock: the store
    swaps in a fully built matcher in a single assignment, so a concurrent query sees
    either the old matcher or the new one.
    """

    def __init__(self, bots: Bots | None = None):
        self._bots = bots if bots is not None else Bots.default()
        self._lock = threading.RLock()

    @property
    def patterns(self) -> frozenset[str]:
        with self._lock:
            return self._bots.patterns

    def is_bot(self, user_agent: str) -> bool:
        return self._bots.is_bot(user_agent)

    def append(self, patterns: Iterable[str] | str) -> None:
        with self._lock:
            self._bots.append(patterns)

    def remove(self, patterns: Iterable[str] | str) -> None:
        with self._lock:
            self._bots.remove(patterns)

    def __len__(self) -> int:
        with self._lock:
            return len(self._bots)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._bots!r})"


__all__ = ["SynchronizedBots"]
