# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Retry with exponential backoff for fixture downloads."""

from __future__ import annotations

import logging
import time

from ..config import load_http_settings
from .client import HttpClient
from .models import HttpRequest, HttpResponse, RetryConfig

logger = logging.getLogger(__name__)


def build_default_retry_config() -> RetryConfig:
    return RetryConfig.from_settings(load_http_settings())


def _attempt(client: HttpClient, request: HttpRequest) -> HttpResponse:
    try:
        return client.request(request)
    except Exception as exc:  # noqa: BLE001
        return HttpResponse(ok=False, error_message=str(exc), error_type=type(exc).__name__)


def send_with_retries(
    client: HttpClient,
    request: HttpRequest,
    *,
    retry_config: RetryConfig | None = None,
) -> HttpResponse:
    """
    Send a request, retrying transport failures.

    Responses carrying a status code (including HTTP errors) are returned as-is. The
    number of retries is recorded in ``meta["retry_count"]``; ``meta["retry_exhausted"]``
    is set when every attempt failed at the transport level.
    """
    cfg = retry_config or build_default_retry_config()

    response = _attempt(client, request)
    retries = 0
    for delay in cfg.delays():
        if not response.transport_failed:
            break
        logger.debug("Retrying %s in %.1fs after %s", request.url, delay, response.failure_reason())
        time.sleep(delay)
        retries += 1
        response = _attempt(client, request)

    if retries:
        response.meta["retry_count"] = retries
    if response.transport_failed:
        response.meta.setdefault("retry_count", retries)
        response.meta["retry_exhausted"] = True
    return response
