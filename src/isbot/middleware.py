# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""WSGI integration: reject requests whose User-Agent is a known bot."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from .bots import BotMatcher, Bots

logger = logging.getLogger(__name__)

WSGIApp = Callable[[dict[str, Any], Callable[..., Any]], Iterable[bytes]]

_ENVIRON_USER_AGENT = "HTTP_USER_AGENT"


def get_user_agent(headers: Mapping[Any, Any] | None) -> str | None:
    """
    Return the User-Agent from a WSGI environ or a plain header mapping.

    Header names are matched case-insensitively. Missing or blank values yield None.
    """
    if not headers:
        return None

    value = headers.get(_ENVIRON_USER_AGENT)
    if value is None:
        for key in ("User-Agent", "user-agent"):
            if key in headers:
                value = headers[key]
                break
        else:
            for key, candidate in headers.items():
                if isinstance(key, str) and key.lower() == "user-agent":
                    value = candidate
                    break

    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("latin-1")
    value = str(value).strip()
    return value or None


class BotFilterMiddleware:
    """
    WSGI middleware answering bot traffic with a plain-text rejection.

    Requests without a User-Agent pass through unless ``allow_missing_user_agent`` is False.
    """

    def __init__(
        self,
        app: WSGIApp,
        bots: BotMatcher | None = None,
        *,
        status: str = "403 Forbidden",
        body: bytes = b"Bots not allowed",
        allow_missing_user_agent: bool = True,
    ):
        self.app = app
        self.bots = bots if bots is not None else Bots.default()
        self.status = status
        self.body = body
        self.allow_missing_user_agent = allow_missing_user_agent

    def is_rejected(self, environ: Mapping[str, Any]) -> bool:
        user_agent = get_user_agent(environ)
        if user_agent is None:
            return not self.allow_missing_user_agent
        return self.bots.is_bot(user_agent)

    def __call__(self, environ: dict[str, Any], start_response: Callable[..., Any]) -> Iterable[bytes]:
        if self.is_rejected(environ):
            logger.debug(
                "Rejected %s %s for user-agent %r",
                environ.get("REQUEST_METHOD", "GET"),
                environ.get("PATH_INFO", "/"),
                environ.get(_ENVIRON_USER_AGENT),
            )
            start_response(
                self.status,
                [("Content-Type", "text/plain; charset=utf-8"), ("Content-Length", str(len(self.body)))],
            )
            return [self.body]
        return self.app(environ, start_response)


__all__ = ["BotFilterMiddleware", "get_user_agent"]
