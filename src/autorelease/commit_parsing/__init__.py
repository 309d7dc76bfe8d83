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

"""Commit message parsing and classification.

The :class:`CommitParser` protocol turns a raw message into a
:class:`ParsedCommit`; :func:`classify` does the same for a platform
:class:`Commit` and attaches its associated pull requests.

Built-in parsers:

- :class:`ConventionalCommitParser`: ``type(scope)!: subject``

Usage::

    from autorelease.commit_parsing import Commit, PullRequestRef, classify

    commit = Commit(sha='3f2a9c1...', message='feat(api): add foo')
    parsed = classify(commit, [PullRequestRef(12, 'https://github.com/o/r/pull/12')])
    assert parsed.type == 'feat'
    assert parsed.scope == 'api'
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable

from autorelease.commit_parsing._conventional import (
    ConventionalCommitParser,
    is_breaking,
    is_merge_commit,
    split_message,
)
from autorelease.commit_parsing._types import (
    Commit,
    CommitMessage,
    CommitParser,
    ParsedCommit,
    PullRequestRef,
)

# Module-level singleton for convenience.
_DEFAULT_PARSER = ConventionalCommitParser()


def parse_commit_message(message: str, sha: str = '') -> ParsedCommit | None:
    """Parse a single commit message as a Conventional Commit.

    Convenience wrapper around :meth:`ConventionalCommitParser.parse`.
    Returns ``None`` for merge commits.
    """
    return _DEFAULT_PARSER.parse(message, sha=sha)


def classify(
    commit: Commit,
    pull_requests: Iterable[PullRequestRef] = (),
    *,
    parser: CommitParser | None = None,
) -> ParsedCommit | None:
    """Classify a commit and attach its associated pull requests.

    Args:
        commit: The commit to classify.
        pull_requests: Pull requests the platform associates with the
            commit, in the order it reported them.
        parser: Optional custom parser. Defaults to
            :class:`ConventionalCommitParser`.

    Returns:
        A new :class:`ParsedCommit`, or ``None`` for merge commits.
    """
    parsed = (parser or _DEFAULT_PARSER).parse(commit.message, sha=commit.sha)
    if parsed is None:
        return None
    return dataclasses.replace(
        parsed,
        html_url=commit.html_url,
        pull_requests=tuple(PullRequestRef(number=pr.number, url=pr.url) for pr in pull_requests),
    )


__all__ = [
    'Commit',
    'CommitMessage',
    'CommitParser',
    'ConventionalCommitParser',
    'ParsedCommit',
    'PullRequestRef',
    'classify',
    'is_breaking',
    'is_merge_commit',
    'parse_commit_message',
    'split_message',
]
