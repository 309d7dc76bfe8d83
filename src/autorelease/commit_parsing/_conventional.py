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

"""Conventional Commits parser.

Pure implementation: depends only on ``re`` and :mod:`._types`.
No I/O, no logging, no side effects.

Message anatomy::

    feat(api)!: drop the v1 endpoints        ← header: type(scope)!: subject
                                             ← blank line
    The v1 endpoints were deprecated in 2.3. ← body
                                             ← blank line
    BREAKING CHANGE: clients must use /v2.   ← footer starts at the first
    Closes #123                                note or issue reference
"""

from __future__ import annotations

import re

from autorelease.commit_parsing._types import CommitMessage, ParsedCommit

# Regex for Conventional Commits headers: type(scope)!: subject
HEADER_PATTERN: re.Pattern[str] = re.compile(
    r'^(?P<type>\w+)'  # type (e.g. feat, fix, chore)
    r'(?:\((?P<scope>[^()]*)\))?'  # optional scope in parens
    r'(?P<breaking>!)?'  # optional breaking change indicator
    r': '  # colon + space
    r'(?P<subject>.+)$',  # subject
)

# Headers produced by merges; these commits never reach the changelog.
MERGE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r'^Merge pull request #\d+ from \S+'),
    re.compile(r"^Merge (?:remote-tracking )?branch '[^']+'"),
    re.compile(r"^Merge tag '[^']+'"),
)

# GitHub's default revert format: Revert "feat: add X"
REVERT_PATTERN: re.Pattern[str] = re.compile(r'^[Rr]evert\s+"(?P<inner>.+)"')

# Breaking change notes, case-sensitive, at the start of a line.
BREAKING_PATTERN: re.Pattern[str] = re.compile(r'^BREAKING[ -]CHANGES?:\s', re.MULTILINE)

# Lines that open the footer: notes and issue references.
_NOTE_LINE: re.Pattern[str] = re.compile(r'^BREAKING[ -]CHANGES?:')
_REFERENCE_LINE: re.Pattern[str] = re.compile(
    r'^(?:close[sd]?|fix(?:e[sd])?|resolve[sd]?|refs?)\s+#\d+',
    re.IGNORECASE,
)


def is_breaking(body: str, footer: str) -> bool:
    """Return ``True`` if the body or footer carries a breaking change note.

    Recognized notes are ``BREAKING CHANGE:`` and its synonym
    ``BREAKING-CHANGE:`` (the plural form is accepted too) at the start of
    a line, followed by whitespace. Matching is case-sensitive.

    >>> is_breaking('', 'BREAKING CHANGE: removes bar')
    True
    >>> is_breaking('breaking change: removes bar', '')
    False
    """
    return bool(BREAKING_PATTERN.search(body or '') or BREAKING_PATTERN.search(footer or ''))


def is_merge_commit(header: str) -> bool:
    """Return ``True`` if the header has the shape of a merge commit."""
    return any(pattern.match(header) for pattern in MERGE_PATTERNS)


def split_message(message: str) -> CommitMessage:
    """Split a commit message into header, body and footer."""
    lines = message.replace('\r\n', '\n').split('\n')
    header = lines[0].strip()
    rest = lines[1:]

    footer_start = len(rest)
    for index, line in enumerate(rest):
        stripped = line.strip()
        if _NOTE_LINE.match(stripped) or _REFERENCE_LINE.match(stripped):
            footer_start = index
            break

    body = '\n'.join(rest[:footer_start]).strip()
    footer = '\n'.join(rest[footer_start:]).strip()
    return CommitMessage(header=header, body=body, footer=footer)


class ConventionalCommitParser:
    """Parser for `Conventional Commits <https://www.conventionalcommits.org/>`_.

    Headers that do not follow ``type(scope): subject`` still produce a
    :class:`ParsedCommit`, with ``type=None`` and the whole header as the
    subject. Only merge commits are skipped.

    Handles revert commits in two formats:

    - GitHub default: ``Revert "feat: add X"``
    - Conventional: ``revert: feat: add X``
    """

    def parse(self, message: str, sha: str = '') -> ParsedCommit | None:
        """Parse a full commit message.

        Args:
            message: The commit message.
            sha: The commit SHA (for reference).

        Returns:
            A :class:`ParsedCommit`, or ``None`` for merge commits.
        """
        parts = split_message(message)
        header = parts.header

        if is_merge_commit(header):
            return None

        breaking = is_breaking(parts.body, parts.footer)

        revert_match = REVERT_PATTERN.match(header)
        if revert_match:
            inner = revert_match.group('inner')
            inner_match = HEADER_PATTERN.match(inner)
            return ParsedCommit(
                sha=sha,
                header=header,
                subject=inner_match.group('subject').strip() if inner_match else inner,
                type='revert',
                scope=(inner_match.group('scope') or '').strip() if inner_match else '',
                body=parts.body,
                footer=parts.footer,
                breaking=breaking,
                is_revert=True,
            )

        match = HEADER_PATTERN.match(header)
        if not match:
            return ParsedCommit(
                sha=sha,
                header=header,
                subject=header,
                body=parts.body,
                footer=parts.footer,
                breaking=breaking,
            )

        cc_type = match.group('type').lower()
        return ParsedCommit(
            sha=sha,
            header=header,
            subject=match.group('subject').strip(),
            type=cc_type,
            scope=(match.group('scope') or '').strip(),
            body=parts.body,
            footer=parts.footer,
            breaking=breaking or bool(match.group('breaking')),
            is_revert=cc_type == 'revert',
        )
