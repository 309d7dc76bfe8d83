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

"""Pure types for commit message parsing.

This module has **zero** runtime dependencies beyond the standard library.
Everything here is a frozen dataclass or protocol: no I/O, no logging,
no side effects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class PullRequestRef:
    """A pull request associated with a commit.

    Attributes:
        number: The pull request number.
        url: The pull request web URL.
    """

    number: int
    url: str


@dataclass(frozen=True)
class Commit:
    """A commit as reported by the hosting platform.

    Attributes:
        sha: The full commit SHA.
        message: The full commit message (header, body, footer).
        html_url: Web URL of the commit, if known.
    """

    sha: str
    message: str
    html_url: str = ''

    @property
    def short_sha(self) -> str:
        """The first 7 characters of the SHA."""
        return self.sha[:7]


@dataclass(frozen=True)
class CommitMessage:
    """A commit message split into its three parts.

    Attributes:
        header: The first line.
        body: Free-form text between the header and the footer.
        footer: Trailer lines (notes and issue references).
    """

    header: str
    body: str = ''
    footer: str = ''


@dataclass(frozen=True)
class ParsedCommit:
    """A classified commit.

    Built once from a :class:`Commit` (or a bare message) plus the
    parser's classification. Never mutated afterwards.

    Attributes:
        sha: The full commit SHA.
        header: The original first line of the message.
        subject: The description after ``type(scope):``, or the whole
            header when the message is not conventional.
        type: The conventional type (``"feat"``, ``"fix"``), or ``None``.
        scope: The optional scope (e.g. ``"api"``).
        body: Message body.
        footer: Message footer.
        breaking: Whether the commit declares a breaking change.
        is_revert: Whether this commit reverts another commit.
        html_url: Web URL of the commit.
        pull_requests: Associated pull requests.
    """

    sha: str
    header: str
    subject: str
    type: str | None = None
    scope: str = ''
    body: str = ''
    footer: str = ''
    breaking: bool = False
    is_revert: bool = False
    html_url: str = ''
    pull_requests: tuple[PullRequestRef, ...] = ()

    @property
    def short_sha(self) -> str:
        """The first 7 characters of the SHA."""
        return self.sha[:7]


@runtime_checkable
class CommitParser(Protocol):
    """Protocol for commit message parsers.

    A parser receives a full commit message and returns a
    :class:`ParsedCommit`, or ``None`` when the commit must be left out
    of the changelog (merge commits).

    Built-in implementations:

    - :class:`~autorelease.commit_parsing.ConventionalCommitParser`
    """

    def parse(self, message: str, sha: str = '') -> ParsedCommit | None:
        """Parse a commit message.

        Args:
            message: The full commit message.
            sha: The commit SHA (for reference).

        Returns:
            A :class:`ParsedCommit`, or ``None`` to skip the commit.
        """
        ...
