# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed client for downloading fixture sources."""

from __future__ import annotations

import httpx

from ..config import HttpSettings, load_http_settings
from .models import HttpRequest, HttpResponse


class HttpxClient:
    """Blocking httpx client; safe to share between the download worker threads."""

    def __init__(self, settings: HttpSettings | None = None, client: httpx.Client | None = None):
        self.settings = settings or load_http_settings()
        self._client = client or httpx.Client(
            follow_redirects=True,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
            headers={"User-Agent": self.settings.user_agent},
        )

    def request(self, request: HttpRequest) -> HttpResponse:
        headers = {"User-Agent": self.settings.user_agent, **(request.headers or {})}
        timeout = self.settings.timeout if request.timeout is None else request.timeout
        try:
            resp = self._client.request(request.method, request.url, headers=headers, timeout=timeout)
        except httpx.HTTPError as exc:
            return HttpResponse(ok=False, url=request.url, error_message=str(exc), error_type=type(exc).__name__)

        failed = not resp.is_success
        return HttpResponse(
            ok=not failed,
            status_code=resp.status_code,
            headers=dict(resp.headers),
            text=resp.text,
            url=str(resp.url),
            error_message=f"HTTP {resp.status_code} {resp.reason_phrase}".rstrip() if failed else None,
            meta={"encoding": resp.encoding},
        )

    def close(self) -> None:
        self._client.close()
