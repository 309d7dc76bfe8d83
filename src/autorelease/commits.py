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

"""Fetch the commits that went into a release.

The range is ``previous_tag...target_sha``. When there is no previous
release, or its tag ref has disappeared, the base is ``HEAD``. A failed
comparison yields no commits, so the release still goes out with an
empty changelog.
"""

from __future__ import annotations

from autorelease.backends.forge import Forge
from autorelease.commit_parsing import Commit
from autorelease.errors import AutoReleaseError, NotFoundError
from autorelease.logging import get_logger

logger = get_logger(__name__)

# Comparison base used when there is no previous release.
HEAD_SENTINEL = 'HEAD'


async def fetch_commits(forge: Forge, previous_tag: str, target_sha: str) -> list[Commit]:
    """Return the commits between the previous release and ``target_sha``.

    Args:
        forge: Forge backend.
        previous_tag: Previous release tag, or ``''`` for a first release.
        target_sha: Commit being released.

    Returns:
        Commits oldest first, or an empty list if the comparison failed.
    """
    base = HEAD_SENTINEL
    if previous_tag:
        try:
            await forge.get_tag_sha(previous_tag)
            base = previous_tag
        except NotFoundError:
            logger.info('previous_tag_ref_missing', tag=previous_tag, base=HEAD_SENTINEL)

    try:
        commits = await forge.compare_commits(base, target_sha)
    except AutoReleaseError as exc:
        logger.warning('commit_comparison_failed', base=base, head=target_sha, error=exc.message)
        return []

    logger.info('commits_fetched', base=base, head=target_sha[:7], count=len(commits))
    return commits


__all__ = [
    'HEAD_SENTINEL',
    'fetch_commits',
]
