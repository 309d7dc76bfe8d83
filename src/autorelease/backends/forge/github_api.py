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

"""GitHub REST API forge backend for autorelease.

Implements the :class:`~autorelease.backends.forge.Forge` protocol using
the GitHub REST API v3 via ``httpx``.

Authentication:

    Resolves a token in order of precedence:

    1. ``token`` constructor parameter.
    2. ``GITHUB_TOKEN`` env var (set automatically by GitHub Actions).
    3. ``GH_TOKEN`` env var (used by the ``gh`` CLI).

    If none are set, the backend raises ``ValueError`` at construction
    to fail fast rather than on the first API call.

Connection reuse:

    Used as an async context manager, the backend keeps one
    :class:`httpx.AsyncClient` for all calls. Outside of ``async with``,
    each call opens a short-lived client.

Usage::

    from autorelease.backends.forge.github_api import GitHubAPIBackend

    async with GitHubAPIBackend(owner='octo', repo='app', token=token) as forge:
        release = await forge.create_release('v1.0.0', body=changelog)
        await forge.upload_release_asset(release.upload_url, Path('dist/app.tar.gz'))

.. seealso::

    `GitHub REST API <https://docs.github.com/en/rest>`_
"""

from __future__ import annotations

import os
from contextlib import AsyncExitStack
from pathlib import Path
from types import TracebackType
from typing import Any
from urllib.parse import quote

import aiofiles
import httpx

from autorelease.backends.forge._types import ReleaseInfo, strip_uri_template
from autorelease.commit_parsing import Commit, PullRequestRef
from autorelease.errors import ConflictError, FileReadError, TransportError
from autorelease.logging import get_logger
from autorelease.net import (
    DEFAULT_POOL_SIZE,
    DEFAULT_TIMEOUT,
    error_detail,
    http_client,
    next_page_url,
    raise_for_status,
    send_request,
)

log = get_logger('autorelease.backends.forge.github_api')

# GitHub REST API base URL.
DEFAULT_BASE_URL = 'https://api.github.com'

# API version header for stable API behavior.
_API_VERSION = '2022-11-28'

# Largest page size the list endpoints accept.
_PER_PAGE = 100


class GitHubAPIBackend:
    """Forge implementation using the GitHub REST API.

    Args:
        owner: Repository owner (e.g., ``"octo"``).
        repo: Repository name (e.g., ``"app"``).
        token: GitHub API token. Falls back to ``GITHUB_TOKEN`` or
            ``GH_TOKEN`` env vars.
        base_url: API base URL (override for GitHub Enterprise Server).
        pool_size: HTTP connection pool size.
        timeout: HTTP request timeout in seconds.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        *,
        token: str = '',
        base_url: str = DEFAULT_BASE_URL,
        pool_size: int = DEFAULT_POOL_SIZE,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize with owner, repo, and API token."""
        self._owner = owner
        self._repo = repo
        self._base_url = base_url.rstrip('/')
        self._repo_url = f'{self._base_url}/repos/{owner}/{repo}'
        self._pool_size = pool_size
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None
        self._stack: AsyncExitStack | None = None

        resolved_token = token or os.environ.get('GITHUB_TOKEN', '') or os.environ.get('GH_TOKEN', '')
        if not resolved_token:
            msg = 'GitHub API token required: pass token= or set GITHUB_TOKEN or GH_TOKEN env var.'
            raise ValueError(msg)

        self._headers = {
            'Authorization': f'Bearer {resolved_token}',
            'Accept': 'application/vnd.github+json',
            'X-GitHub-Api-Version': _API_VERSION,
        }

    def __repr__(self) -> str:
        """Return a safe repr that never exposes the API token."""
        return f'GitHubAPIBackend(owner={self._owner!r}, repo={self._repo!r})'

    async def __aenter__(self) -> GitHubAPIBackend:
        """Open the shared HTTP client."""
        self._stack = AsyncExitStack()
        self._client = await self._stack.enter_async_context(
            http_client(pool_size=self._pool_size, timeout=self._timeout, headers=self._headers),
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Close the shared HTTP client."""
        stack, self._stack, self._client = self._stack, None, None
        if stack is not None:
            await stack.aclose()

    async def _request(self, method: str, url: str, **kwargs: object) -> httpx.Response:
        """Send one request on the shared client, or on a short-lived one."""
        if self._client is not None:
            return await send_request(self._client, method, url, **kwargs)
        async with http_client(
            pool_size=self._pool_size,
            timeout=self._timeout,
            headers=self._headers,
        ) as client:
            return await send_request(client, method, url, **kwargs)

    async def _paginate(self, url: str, *, action: str, key: str = '') -> list[Any]:
        """Collect the items of every page of a list endpoint.

        Args:
            url: First page URL (query string included).
            action: Description for error messages.
            key: When set, items are read from this key of a JSON object
                instead of a top-level JSON array.
        """
        items: list[Any] = []
        next_url: str | None = url
        while next_url:
            response = await self._request('GET', next_url)
            raise_for_status(response, action=action)
            data = response.json()
            page = data.get(key, []) if key else data
            items.extend(page)
            next_url = next_page_url(response)
        return items

    async def list_tags(self) -> list[str]:
        """List every tag name in the repository."""
        tags = await self._paginate(f'{self._repo_url}/tags?per_page={_PER_PAGE}', action='list tags')
        names = [t.get('name', '') for t in tags if t.get('name')]
        log.debug('list_tags', count=len(names))
        return names

    async def get_tag_sha(self, tag: str) -> str:
        """Resolve ``tags/<tag>`` to the SHA of the object it points at."""
        url = f'{self._repo_url}/git/ref/tags/{quote(tag, safe="/")}'
        response = await self._request('GET', url)
        raise_for_status(response, action=f'get ref tags/{tag}')
        return response.json().get('object', {}).get('sha', '')

    async def compare_commits(self, base: str, head: str) -> list[Commit]:
        """Compare ``base...head`` and return the commits, oldest first."""
        basehead = f'{quote(base, safe="")}...{quote(head, safe="")}'
        raw = await self._paginate(
            f'{self._repo_url}/compare/{basehead}?per_page={_PER_PAGE}',
            action=f'compare {base}...{head}',
            key='commits',
        )
        commits = [
            Commit(
                sha=c.get('sha', ''),
                message=c.get('commit', {}).get('message', ''),
                html_url=c.get('html_url', ''),
            )
            for c in raw
        ]
        log.debug('compare_commits', base=base, head=head, count=len(commits))
        return commits

    async def list_pull_requests_for_commit(self, sha: str) -> list[PullRequestRef]:
        """List pull requests associated with a commit."""
        pulls = await self._paginate(
            f'{self._repo_url}/commits/{sha}/pulls?per_page={_PER_PAGE}',
            action=f'list pull requests for {sha[:7]}',
        )
        return [PullRequestRef(number=int(pr.get('number', 0)), url=pr.get('html_url', '')) for pr in pulls]

    async def create_tag(self, tag: str, *, sha: str, message: str = '') -> str:
        """Create an annotated tag object and return its SHA."""
        payload = {
            'tag': tag,
            'message': message,
            'object': sha,
            'type': 'commit',
        }
        response = await self._request('POST', f'{self._repo_url}/git/tags', json=payload)
        raise_for_status(response, action=f'create tag object {tag}')
        tag_sha = response.json().get('sha', '')
        log.info('create_tag', tag=tag, object=sha[:7], tag_sha=tag_sha[:7])
        return tag_sha

    async def create_ref(self, ref: str, *, sha: str) -> None:
        """Create a ref; raise :class:`ConflictError` if it exists."""
        response = await self._request('POST', f'{self._repo_url}/git/refs', json={'ref': ref, 'sha': sha})
        if response.status_code in (409, 422):
            raise ConflictError(f'create ref {ref}: {error_detail(response)}', status=response.status_code)
        raise_for_status(response, action=f'create ref {ref}')
        log.info('create_ref', ref=ref, sha=sha[:7])

    async def update_ref(self, ref: str, *, sha: str, force: bool = False) -> None:
        """Point an existing ref at ``sha``."""
        url = f'{self._repo_url}/git/refs/{quote(ref, safe="/")}'
        response = await self._request('PATCH', url, json={'sha': sha, 'force': force})
        raise_for_status(response, action=f'update ref {ref}')
        log.info('update_ref', ref=ref, sha=sha[:7], force=force)

    async def get_release_by_tag(self, tag: str) -> ReleaseInfo:
        """Find the release attached to ``tag``."""
        url = f'{self._repo_url}/releases/tags/{quote(tag, safe="")}'
        response = await self._request('GET', url)
        raise_for_status(response, action=f'get release for tag {tag}')
        return _release_info(response.json(), tag)

    async def delete_release(self, release_id: int) -> None:
        """Delete a release by ID."""
        response = await self._request('DELETE', f'{self._repo_url}/releases/{release_id}')
        raise_for_status(response, action=f'delete release {release_id}')
        log.info('delete_release', id=release_id)

    async def create_release(
        self,
        tag: str,
        *,
        title: str | None = None,
        body: str = '',
        draft: bool = False,
        prerelease: bool = False,
    ) -> ReleaseInfo:
        """Create a GitHub Release."""
        payload: dict[str, Any] = {
            'tag_name': tag,
            'name': title or tag,
            'body': body,
            'draft': draft,
            'prerelease': prerelease,
        }
        response = await self._request('POST', f'{self._repo_url}/releases', json=payload)
        raise_for_status(response, action=f'create release {tag}')
        release = _release_info(response.json(), tag)
        log.info('create_release', tag=tag, id=release.id, draft=draft, prerelease=prerelease)
        return release

    async def upload_release_asset(self, upload_url: str, path: Path) -> None:
        """Upload a file to a release's asset endpoint."""
        try:
            async with aiofiles.open(path, mode='rb') as f:
                content = await f.read()
        except OSError as exc:
            raise FileReadError(
                f'Failed to read {path}: {exc}',
                hint=f'Check that {path} exists and is readable.',
            ) from exc

        response = await self._request(
            'POST',
            strip_uri_template(upload_url),
            params={'name': path.name},
            content=content,
            headers={'Content-Type': 'application/octet-stream'},
        )
        if not response.is_success:
            raise TransportError(
                f'upload {path.name} failed with HTTP {response.status_code}: {error_detail(response)}',
                status=response.status_code,
            )
        log.info('upload_release_asset', name=path.name, size=len(content))


def _release_info(data: dict[str, Any], tag: str) -> ReleaseInfo:
    """Normalize a release JSON object."""
    return ReleaseInfo(
        id=int(data.get('id', 0)),
        tag=data.get('tag_name', tag),
        upload_url=data.get('upload_url', ''),
        html_url=data.get('html_url', ''),
    )


__all__ = [
    'DEFAULT_BASE_URL',
    'GitHubAPIBackend',
]
