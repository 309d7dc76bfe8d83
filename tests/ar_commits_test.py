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

"""Tests for autorelease.commits."""

from __future__ import annotations

import pytest
from autorelease.commit_parsing import Commit
from autorelease.commits import HEAD_SENTINEL, fetch_commits
from autorelease.errors import TransportError
from autorelease.logging import configure_logging

from tests._fakes import FakeForge

configure_logging(quiet=True)

_COMMITS = [
    Commit(sha='1' * 40, message='feat: one'),
    Commit(sha='2' * 40, message='fix: two'),
]


class TestFetchCommits:
    """Tests for fetch_commits()."""

    @pytest.mark.asyncio
    async def test_range_from_previous_tag(self) -> None:
        """An existing previous tag is the comparison base."""
        forge = FakeForge(tag_shas={'v1.0.0': 'f' * 40}, commits=_COMMITS)
        commits = await fetch_commits(forge, 'v1.0.0', 'abc')
        if commits != _COMMITS:
            raise AssertionError(f'Unexpected commits: {commits}')
        if ('compare_commits', ('v1.0.0', 'abc')) not in forge.calls:
            raise AssertionError(f'Unexpected calls: {forge.calls}')

    @pytest.mark.asyncio
    async def test_first_release_uses_head(self) -> None:
        """No previous tag compares from HEAD without a ref lookup."""
        forge = FakeForge(commits=_COMMITS)
        commits = await fetch_commits(forge, '', 'abc')
        if len(commits) != 2:
            raise AssertionError(f'Expected 2 commits, got {len(commits)}')
        if forge.calls != [('compare_commits', (HEAD_SENTINEL, 'abc'))]:
            raise AssertionError(f'Unexpected calls: {forge.calls}')

    @pytest.mark.asyncio
    async def test_missing_tag_ref_falls_back_to_head(self) -> None:
        """A deleted previous tag is treated as no previous release."""
        forge = FakeForge(commits=_COMMITS)
        await fetch_commits(forge, 'v0.9.0', 'abc')
        if forge.call_names() != ['get_tag_sha', 'compare_commits']:
            raise AssertionError(f'Unexpected calls: {forge.calls}')
        if forge.calls[-1] != ('compare_commits', ('HEAD', 'abc')):
            raise AssertionError(f'Expected HEAD base, got {forge.calls[-1]}')

    @pytest.mark.asyncio
    async def test_comparison_failure_gives_empty_list(self) -> None:
        """A failed comparison degrades to no commits."""
        forge = FakeForge(
            tag_shas={'v1.0.0': 'f' * 40},
            commits=_COMMITS,
            compare_error=TransportError('compare failed with HTTP 500', status=500),
        )
        if await fetch_commits(forge, 'v1.0.0', 'abc') != []:
            raise AssertionError('Expected an empty commit list')

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self) -> None:
        """Only platform errors are absorbed."""
        forge = FakeForge(compare_error=None)

        async def boom(base: str, head: str) -> list[Commit]:
            raise RuntimeError('bug')

        forge.compare_commits = boom  # type: ignore[method-assign]
        with pytest.raises(RuntimeError):
            await fetch_commits(forge, '', 'abc')
