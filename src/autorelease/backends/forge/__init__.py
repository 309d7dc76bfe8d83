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

"""Forge protocol for autorelease.

The :class:`Forge` protocol defines the async interface to the hosting
platform: tags and refs, commit comparison, pull request lookup, and
releases. Implementations:

- :class:`~autorelease.backends.forge.github_api.GitHubAPIBackend`: GitHub REST API

Error contract: methods raise :class:`~autorelease.errors.NotFoundError`
when the object does not exist, :class:`~autorelease.errors.ConflictError`
when creating something that already exists, and
:class:`~autorelease.errors.TransportError` for any other failure.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from autorelease.backends.forge._types import ReleaseInfo as ReleaseInfo
from autorelease.backends.forge.github_api import GitHubAPIBackend as GitHubAPIBackend
from autorelease.commit_parsing import Commit, PullRequestRef

__all__ = [
    'Forge',
    'GitHubAPIBackend',
    'ReleaseInfo',
]


@runtime_checkable
class Forge(Protocol):
    """Protocol for hosting platform operations.

    All methods are async; callers await each call and impose no timeout
    of their own.
    """

    async def list_tags(self) -> list[str]:
        """Return the names of all tags in the repository (all pages)."""
        ...

    async def get_tag_sha(self, tag: str) -> str:
        """Return the object SHA the ``tags/<tag>`` ref points at.

        Raises:
            NotFoundError: If the tag ref does not exist.
        """
        ...

    async def compare_commits(self, base: str, head: str) -> list[Commit]:
        """Return the commits reachable from ``head`` but not ``base``.

        Args:
            base: Base ref (tag name, SHA, or ``HEAD``).
            head: Head commit SHA.

        Returns:
            Commits oldest first.
        """
        ...

    async def list_pull_requests_for_commit(self, sha: str) -> list[PullRequestRef]:
        """Return the pull requests associated with a commit."""
        ...

    async def create_tag(self, tag: str, *, sha: str, message: str = '') -> str:
        """Create an annotated tag object pointing at commit ``sha``.

        Returns:
            The SHA of the new tag object.
        """
        ...

    async def create_ref(self, ref: str, *, sha: str) -> None:
        """Create a fully-qualified ref (``refs/tags/<tag>``).

        Raises:
            ConflictError: If the ref already exists.
        """
        ...

    async def update_ref(self, ref: str, *, sha: str, force: bool = False) -> None:
        """Move an existing ref (``tags/<tag>``) to ``sha``."""
        ...

    async def get_release_by_tag(self, tag: str) -> ReleaseInfo:
        """Return the release attached to ``tag``.

        Raises:
            NotFoundError: If no release uses the tag.
        """
        ...

    async def delete_release(self, release_id: int) -> None:
        """Delete a release by its ID."""
        ...

    async def create_release(
        self,
        tag: str,
        *,
        title: str | None = None,
        body: str = '',
        draft: bool = False,
        prerelease: bool = False,
    ) -> ReleaseInfo:
        """Create a release.

        Args:
            tag: Git tag for the release.
            title: Release title. Defaults to the tag name.
            body: Release body (markdown).
            draft: Create as a draft release.
            prerelease: Mark as a pre-release.
        """
        ...

    async def upload_release_asset(self, upload_url: str, path: Path) -> None:
        """Upload ``path`` as a release asset named after its basename."""
        ...
