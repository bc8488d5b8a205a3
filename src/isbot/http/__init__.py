# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP plumbing for fixture downloads."""

from .client import HttpClient, StaticHttpClient, create_default_http_client
from .httpx_client import HttpxClient
from .models import Headers, HttpRequest, HttpResponse, RetryConfig
from .retry import build_default_retry_config, send_with_retries

__all__ = [
    "Headers",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpxClient",
    "RetryConfig",
    "StaticHttpClient",
    "build_default_retry_config",
    "create_default_http_client",
    "send_with_retries",
]
