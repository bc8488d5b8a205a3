# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Detect bots and crawlers by matching a user-agent against known bot patterns.

Patterns are maintained as a single combined regular expression so each lookup is one
regex search. The bundled list balances a broad set of known bots against never
flagging real browsers; patterns can be appended or removed at runtime:

    >>> bots = Bots.default()
    >>> bots.is_bot("Googlebot-Image/1.0")
    True
    >>> bots.is_bot("Opera/9.60 (Windows NT 6.0; U; en) Presto/2.1.1")
    False
"""

from .bots import BotMatcher, Bots
from .config import HttpSettings, IsbotSettings, load_http_settings, load_settings
from .errors import FixtureError, InvalidPatternError, IsbotError
from .log import setup_logging
from .middleware import BotFilterMiddleware, get_user_agent
from .patterns import load_default_patterns
from .sync import SynchronizedBots
from .version import __version__

__all__ = [
    "BotFilterMiddleware",
    "BotMatcher",
    "Bots",
    "FixtureError",
    "HttpSettings",
    "InvalidPatternError",
    "IsbotError",
    "IsbotSettings",
    "SynchronizedBots",
    "get_user_agent",
    "load_default_patterns",
    "load_http_settings",
    "load_settings",
    "setup_logging",
    "__version__",
]
