# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request/response records exchanged with fixture download clients."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from ..config import HttpSettings

Headers = dict[str, str]


@dataclass
class HttpRequest:
    url: str
    method: str = "GET"
    headers: Headers | None = None
    timeout: float | None = None


@dataclass
class HttpResponse:
    """
    Outcome of one download attempt.

    Transport failures (DNS, refused connection, timeout) have ``ok=False`` and no status
    code; HTTP error statuses keep their code.
    """

    ok: bool
    status_code: int | None = None
    headers: Headers = field(default_factory=dict)
    text: str = ""
    url: str | None = None
    error_message: str | None = None
    error_type: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def transport_failed(self) -> bool:
        return not self.ok and self.status_code is None

    def failure_reason(self) -> str | None:
        """Short description of why the download failed, or None for a successful response."""
        if self.ok:
            return None
        if self.error_message:
            return self.error_message
        if self.status_code is not None:
            return f"HTTP {self.status_code}"
        return "no response"


@dataclass
class RetryConfig:
    max_attempts: int = 2
    backoff_factor: float = 2.0
    initial_delay: float = 1.0

    @classmethod
    def from_settings(cls, settings: HttpSettings) -> RetryConfig:
        return cls(
            max_attempts=max(1, settings.max_retries),
            backoff_factor=settings.backoff_factor,
            initial_delay=settings.initial_delay,
        )

    def delays(self) -> Iterator[float]:
        """Sleep intervals between attempts (one fewer than ``max_attempts``)."""
        delay = self.initial_delay
        for _ in range(self.max_attempts - 1):
            yield delay
            delay *= self.backoff_factor
