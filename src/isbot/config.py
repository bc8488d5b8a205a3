# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for isbot."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_USER_AGENT = f"isbot-fixtures/{__version__} (+https://github.com/BryanMorgan/isbot)"
DEFAULT_FIXTURES_DIR = "fixtures"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class IsbotSettings:
    """Matcher and fixture defaults."""

    include_default_bots: bool = True
    fixtures_dir: str = DEFAULT_FIXTURES_DIR

    @classmethod
    def from_env(cls) -> "IsbotSettings":
        """Create settings from environment variables (evaluated at call time)."""
        return cls(
            include_default_bots=_bool_env("ISBOT_INCLUDE_DEFAULT_BOTS", cls.include_default_bots),
            fixtures_dir=os.getenv("ISBOT_FIXTURES_DIR") or cls.fixtures_dir,
        )


@dataclass
class HttpSettings:
    """HTTP client defaults for fixture downloads."""

    timeout: float = 10.0
    max_retries: int = 2
    backoff_factor: float = 2.0
    initial_delay: float = 1.0
    user_agent: str = DEFAULT_USER_AGENT
    verify_ssl: bool = True

    @classmethod
    def from_env(cls) -> "HttpSettings":
        """Create settings from environment variables (evaluated at call time)."""
        return cls(
            timeout=_float_env("ISBOT_HTTP_TIMEOUT", cls.timeout),
            max_retries=_int_env("ISBOT_HTTP_RETRIES", cls.max_retries),
            backoff_factor=_float_env("ISBOT_HTTP_BACKOFF", cls.backoff_factor),
            initial_delay=_float_env("ISBOT_HTTP_INITIAL_DELAY", cls.initial_delay),
            user_agent=os.getenv("ISBOT_USER_AGENT", cls.user_agent),
            verify_ssl=_bool_env("ISBOT_HTTP_VERIFY_SSL", cls.verify_ssl),
        )


def load_settings() -> IsbotSettings:
    """Load matcher settings from environment with sensible defaults."""
    return IsbotSettings.from_env()


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()
