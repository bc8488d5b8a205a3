# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Client protocol used by the fixture downloader, plus an offline implementation."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from ..config import HttpSettings, load_http_settings
from .models import HttpRequest, HttpResponse


class HttpClient(Protocol):
    def request(self, request: HttpRequest) -> HttpResponse: ...

    def close(self) -> None: ...


def create_default_http_client(settings: HttpSettings | None = None) -> HttpClient:
    from .httpx_client import HttpxClient

    return HttpxClient(settings or load_http_settings())


class StaticHttpClient:
    """
    Serve canned bodies by URL without touching the network.

    URLs without a registered response fail as transport errors, so they are retried
    and then reported like an unreachable host.
    """

    def __init__(self, bodies: Mapping[str, str] | None = None):
        self._responses: dict[str, HttpResponse] = {}
        self.requests: list[HttpRequest] = []
        for url, text in (bodies or {}).items():
            self.add_text(url, text)

    def add_text(self, url: str, text: str, *, status_code: int = 200) -> None:
        ok = 200 <= status_code < 300
        self.add(
            url,
            HttpResponse(
                ok=ok,
                status_code=status_code,
                text=text,
                url=url,
                error_message=None if ok else f"HTTP {status_code}",
            ),
        )

    def add(self, url: str, response: HttpResponse) -> None:
        self._responses[url] = response

    def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        response = self._responses.get(request.url)
        if response is None:
            return HttpResponse(ok=False, error_message=f"No response registered for {request.url}", error_type="LookupError")
        return response

    def close(self) -> None:
        return None
