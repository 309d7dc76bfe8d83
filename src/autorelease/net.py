# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""HTTP utilities for autorelease.

Provides a managed :class:`httpx.AsyncClient` and a thin request wrapper
that turns transport failures and error statuses into
:class:`~autorelease.errors.TransportError` (or :class:`NotFoundError`
for 404s) with structured logging of every request.

Requests are issued once. A failed call is fatal to the run unless the
caller recovers from the specific error type.

Usage::

    from autorelease.net import http_client, send_request

    async with http_client(headers=headers) as client:
        response = await send_request(client, 'GET', url)
        raise_for_status(response, action='get release')
"""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Final

import httpx

from autorelease.errors import NotFoundError, TransportError
from autorelease.logging import get_logger

log = get_logger('autorelease.net')

DEFAULT_POOL_SIZE: Final[int] = 10
DEFAULT_TIMEOUT: Final[float] = 30.0


@asynccontextmanager
async def http_client(
    *,
    pool_size: int = DEFAULT_POOL_SIZE,
    timeout: float = DEFAULT_TIMEOUT,
    base_url: str = '',
    headers: dict[str, str] | None = None,
) -> AsyncGenerator[httpx.AsyncClient]:
    """Create a managed async HTTP client with connection pooling.

    Args:
        pool_size: Maximum number of connections in the pool.
        timeout: Request timeout in seconds.
        base_url: Optional base URL for all requests.
        headers: Optional default headers.

    Yields:
        An :class:`httpx.AsyncClient` instance.
    """
    limits = httpx.Limits(
        max_connections=pool_size,
        max_keepalive_connections=pool_size,
    )
    async with httpx.AsyncClient(
        limits=limits,
        timeout=httpx.Timeout(timeout),
        base_url=base_url,
        headers=headers or {},
        follow_redirects=True,
    ) as client:
        yield client


async def send_request(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    **kwargs: object,
) -> httpx.Response:
    """Send a single HTTP request.

    Args:
        client: The httpx async client to use.
        method: HTTP method (GET, POST, etc.).
        url: Request URL.
        **kwargs: Additional keyword arguments passed to ``client.request()``.

    Returns:
        The :class:`httpx.Response`, whatever its status.

    Raises:
        TransportError: If no response was received (connection error,
            timeout, protocol error).
    """
    try:
        response = await client.request(method, url, **kwargs)  # type: ignore[arg-type]
    except httpx.HTTPError as exc:
        log.warning('http_error', method=method, url=url, error=str(exc))
        raise TransportError(
            f'{method} {url} failed: {exc}',
            hint='Check network connectivity and the API URL.',
        ) from exc

    log.debug('http_request', method=method, url=url, status=response.status_code)
    return response


def error_detail(response: httpx.Response) -> str:
    """Extract the most useful error text from an API response."""
    try:
        data = response.json()
    except (ValueError, json.JSONDecodeError):
        return response.text.strip() or response.reason_phrase

    if isinstance(data, dict):
        message = str(data.get('message', '')).strip()
        errors = data.get('errors') or []
        details = [str(e.get('message') or e.get('code') or e) if isinstance(e, dict) else str(e) for e in errors]
        if details:
            message = f'{message} ({"; ".join(details)})' if message else '; '.join(details)
        if message:
            return message
    return response.text.strip() or response.reason_phrase


def raise_for_status(response: httpx.Response, *, action: str) -> None:
    """Raise a typed error for a non-2xx response.

    Args:
        response: The response to check.
        action: Short description of the call, used in the message.

    Raises:
        NotFoundError: For 404 responses.
        TransportError: For any other non-2xx response.
    """
    if response.is_success:
        return

    detail = error_detail(response)
    if response.status_code == 404:
        raise NotFoundError(f'{action}: not found ({detail})')
    raise TransportError(
        f'{action} failed with HTTP {response.status_code}: {detail}',
        status=response.status_code,
    )


def next_page_url(response: httpx.Response) -> str | None:
    """Return the ``rel="next"`` URL from the ``Link`` header, if any."""
    return response.links.get('next', {}).get('url')


__all__ = [
    'DEFAULT_POOL_SIZE',
    'DEFAULT_TIMEOUT',
    'error_detail',
    'http_client',
    'next_page_url',
    'raise_for_status',
    'send_request',
]
