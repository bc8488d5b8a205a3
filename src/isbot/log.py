# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging setup for the isbot command line."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "ISBOT_LOG_LEVEL"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def resolve_log_level(level: str | None = None) -> int:
    """Map a level name (or ``$ISBOT_LOG_LEVEL``) to a logging level; unknown names mean WARNING."""
    name = (level or os.getenv(LOG_LEVEL_ENV) or "WARNING").strip().upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.WARNING


def setup_logging(level: str | None = None) -> int:
    effective_level = resolve_log_level(level)
    logging.basicConfig(level=effective_level, format=LOG_FORMAT)
    # httpx logs every request at INFO.
    httpx_level = logging.DEBUG if effective_level <= logging.DEBUG else max(effective_level, logging.WARNING)
    logging.getLogger("httpx").setLevel(httpx_level)
    return effective_level


__all__ = ["resolve_log_level", "setup_logging"]
