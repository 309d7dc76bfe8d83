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

"""Release tag resolution.

Works out which tag a run releases and which earlier tag its changelog
starts from.

Key Concepts (ELI5)::

    ┌─────────────────────────┬─────────────────────────────────────────────┐
    │ Concept                 │ Plain-English                               │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ Release tag             │ The tag being released, e.g. ``v1.1.0``.    │
    │                         │ From the input or from ``refs/tags/*``.     │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ Previous release tag    │ The newest tag that is a valid semver and   │
    │                         │ strictly older than the release tag.        │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ ``''``                  │ No previous release: this is the first one. │
    └─────────────────────────┴─────────────────────────────────────────────┘

Resolution flow::

    forge.list_tags()                  ['v1.0.0', 'nightly', 'v1.1.0', 'v1.0.1']
         │
         ▼
    drop non-semver tags               ['v1.0.0', 'v1.1.0', 'v1.0.1']
         │
         ▼
    sort descending by precedence      ['v1.1.0', 'v1.0.1', 'v1.0.0']
         │
         ▼
    first one < candidate (v1.1.0)     'v1.0.1'
"""

from __future__ import annotations

import re

from autorelease.backends.forge import Forge
from autorelease.errors import InvalidVersionError
from autorelease.logging import get_logger
from autorelease.semver import SemVer

logger = get_logger(__name__)

_TAG_REF_PATTERN: re.Pattern[str] = re.compile(r'^(?:refs/)?tags/(?P<tag>.+)$')


def parse_git_tag(ref: str) -> str:
    """Extract the tag name from a git ref.

    >>> parse_git_tag('refs/tags/v1.2.0')
    'v1.2.0'
    >>> parse_git_tag('tags/latest')
    'latest'
    >>> parse_git_tag('refs/heads/main')
    ''
    """
    match = _TAG_REF_PATTERN.match(ref or '')
    if match is None:
        logger.debug('ref_not_a_tag', ref=ref)
        return ''
    return match.group('tag')


def resolve_previous_tag(candidate_tag: str, all_tags: list[str]) -> str:
    """Return the nearest tag strictly older than ``candidate_tag``.

    Args:
        candidate_tag: The tag being released. Must be a valid semver.
        all_tags: Every tag in the repository, in any order.

    Returns:
        The highest-precedence valid semver tag lower than the candidate,
        or ``''`` when there is none.

    Raises:
        InvalidVersionError: If ``candidate_tag`` is not a valid semver.
    """
    candidate = SemVer.parse(candidate_tag)
    if candidate is None:
        raise InvalidVersionError(
            f'Cannot find the previous release: {candidate_tag!r} is not a valid semantic version.',
            hint="Use a tag such as 'v1.2.3', or set 'is_tag_static' for rolling tags.",
        )

    versions: list[tuple[SemVer, str]] = []
    for tag in all_tags:
        version = SemVer.parse(tag)
        if version is None:
            logger.debug('tag_not_semver', tag=tag)
            continue
        versions.append((version, tag))

    # Stable sort keeps the listing order among equal precedences (v1.0.0 vs 1.0.0+build).
    versions.sort(key=lambda pair: pair[0], reverse=True)
    for version, tag in versions:
        if version < candidate:
            return tag
    return ''


async def search_previous_release_tag(forge: Forge, candidate_tag: str) -> str:
    """List the repository tags and resolve the previous release tag.

    Args:
        forge: Forge backend used to list tags.
        candidate_tag: The tag being released.

    Returns:
        The previous release tag, or ``''`` for a first release.
    """
    all_tags = await forge.list_tags()
    previous = resolve_previous_tag(candidate_tag, all_tags)
    if previous:
        logger.info('previous_release_tag', tag=candidate_tag, previous=previous, candidates=len(all_tags))
    else:
        logger.info('no_previous_release_tag', tag=candidate_tag, candidates=len(all_tags))
    return previous


__all__ = [
    'parse_git_tag',
    'resolve_previous_tag',
    'search_previous_release_tag',
]
