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

"""Release changelog generation from Conventional Commits.

Generates the markdown changelog that opens a release body, grouped by
commit type (Breaking Changes, Features, Bug Fixes, etc.).

Key Concepts (ELI5)::

    ┌─────────────────────────┬─────────────────────────────────────────────┐
    │ Concept                 │ Plain-English                               │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ ChangelogSection        │ A heading such as "Features". The order of  │
    │                         │ the enum is the order in the output.        │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ Breaking change         │ Goes to "Breaking Changes" and nowhere else.│
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ Unknown type            │ No type, or one we don't know, goes to      │
    │                         │ "Miscellaneous".                            │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ Full Changelog link     │ ``compare/<previous>...<tag>`` footer.      │
    │                         │ Left out for a first release.               │
    └─────────────────────────┴─────────────────────────────────────────────┘

Changelog generation flow::

    commits (oldest first)
         │
         ▼
    forge.list_pull_requests_for_commit(sha)   ← per commit
         │
         ▼
    classify(commit, pulls)                    ← None for merges: skipped
         │
         ▼
    group_commits → [(section, commits), ...]
         │
         ▼
    render_changelog → markdown string

Rendered output::

    ## Breaking Changes

    - **auth**: drop OAuth1 support ([abc1234](https://github.com/o/r/commit/abc1234...))

    ## Features

    - **api**: add foo ([def5678](https://github.com/o/r/commit/def5678...)) [#12](https://github.com/o/r/pull/12)
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import Enum

from autorelease.backends.forge import Forge
from autorelease.commit_parsing import Commit, CommitParser, ParsedCommit, classify
from autorelease.logging import get_logger

logger = get_logger(__name__)


class ChangelogSection(Enum):
    """Changelog headings, in display order."""

    BREAKING = 'Breaking Changes'
    FEATURES = 'Features'
    BUG_FIXES = 'Bug Fixes'
    DOCUMENTATION = 'Documentation'
    STYLES = 'Styles'
    REFACTORING = 'Code Refactoring'
    PERFORMANCE = 'Performance Improvements'
    TESTS = 'Tests'
    BUILDS = 'Builds'
    CI = 'Continuous Integration'
    CHORES = 'Chores'
    REVERTS = 'Reverts'
    MISCELLANEOUS = 'Miscellaneous'

    @property
    def heading(self) -> str:
        """The section's markdown heading text."""
        return self.value


# Conventional type → section. Anything else is Miscellaneous.
TYPE_SECTIONS: dict[str, ChangelogSection] = {
    'feat': ChangelogSection.FEATURES,
    'fix': ChangelogSection.BUG_FIXES,
    'docs': ChangelogSection.DOCUMENTATION,
    'style': ChangelogSection.STYLES,
    'refactor': ChangelogSection.REFACTORING,
    'perf': ChangelogSection.PERFORMANCE,
    'test': ChangelogSection.TESTS,
    'build': ChangelogSection.BUILDS,
    'ci': ChangelogSection.CI,
    'chore': ChangelogSection.CHORES,
    'revert': ChangelogSection.REVERTS,
}


def section_for(commit: ParsedCommit) -> ChangelogSection:
    """Return the section a commit belongs to."""
    if commit.breaking:
        return ChangelogSection.BREAKING
    return TYPE_SECTIONS.get(commit.type or '', ChangelogSection.MISCELLANEOUS)


def group_commits(parsed: Iterable[ParsedCommit]) -> list[tuple[ChangelogSection, list[ParsedCommit]]]:
    """Group commits into sections.

    Sections come out in :class:`ChangelogSection` order, empty ones are
    omitted, and commits keep their input order within a section.
    """
    buckets: dict[ChangelogSection, list[ParsedCommit]] = {}
    for commit in parsed:
        buckets.setdefault(section_for(commit), []).append(commit)
    return [(section, buckets[section]) for section in ChangelogSection if section in buckets]


def _render_entry(commit: ParsedCommit) -> str:
    """Render one commit as a markdown bullet.

    Format: ``- **scope**: subject ([sha](url)) [#pr](url), [#pr](url)``
    """
    parts: list[str] = ['- ']

    if commit.scope:
        parts.append(f'**{commit.scope}**: ')

    parts.append(commit.subject)

    if commit.sha:
        if commit.html_url:
            parts.append(f' ([{commit.short_sha}]({commit.html_url}))')
        else:
            parts.append(f' (`{commit.short_sha}`)')

    if commit.pull_requests:
        links = ', '.join(f'[#{pr.number}]({pr.url})' for pr in commit.pull_requests)
        parts.append(f' {links}')

    return ''.join(parts)


def render_changelog(parsed: Sequence[ParsedCommit]) -> str:
    """Render classified commits as markdown.

    Args:
        parsed: Classified commits, oldest first.

    Returns:
        The markdown changelog, or ``''`` when there are no commits.
        Identical input always yields identical output.
    """
    lines: list[str] = []
    for section, commits in group_commits(parsed):
        lines.append(f'## {section.heading}')
        lines.append('')
        lines.extend(_render_entry(commit) for commit in commits)
        lines.append('')

    return '\n'.join(lines).rstrip()


def full_changelog_url(server_url: str, owner: str, repo: str, previous_tag: str, release_tag: str) -> str:
    """Return the web URL comparing two tags."""
    return f'{server_url.rstrip("/")}/{owner}/{repo}/compare/{previous_tag}...{release_tag}'


def append_full_changelog_link(
    changelog: str,
    *,
    server_url: str,
    owner: str,
    repo: str,
    previous_tag: str,
    release_tag: str,
) -> str:
    """Append a ``**Full Changelog**`` comparison link.

    The link is left out when ``previous_tag`` is empty, so a first
    release never gets a ``compare/...v1.0.0`` URL.
    """
    if not previous_tag:
        return changelog
    link = f'**Full Changelog**: {full_changelog_url(server_url, owner, repo, previous_tag, release_tag)}'
    return f'{changelog}\n\n{link}' if changelog else link


async def generate_changelog(
    forge: Forge,
    commits: Sequence[Commit],
    *,
    commit_parser: CommitParser | None = None,
) -> str:
    """Classify commits and render the changelog.

    Pull requests are looked up one commit at a time, in order.

    Args:
        forge: Forge backend used to look up associated pull requests.
        commits: Commits in the release range, oldest first.
        commit_parser: Optional custom commit parser.

    Returns:
        The rendered markdown changelog.
    """
    parsed: list[ParsedCommit] = []
    for commit in commits:
        pulls = await forge.list_pull_requests_for_commit(commit.sha)
        if pulls:
            logger.debug('pull_requests_found', sha=commit.short_sha, count=len(pulls))

        result = classify(commit, pulls, parser=commit_parser)
        if result is None:
            logger.debug('merge_commit_skipped', sha=commit.short_sha)
            continue
        parsed.append(result)

    changelog = render_changelog(parsed)
    logger.info(
        'changelog_generated',
        commits=len(commits),
        entries=len(parsed),
        breaking=sum(1 for c in parsed if c.breaking),
    )
    return changelog


__all__ = [
    'TYPE_SECTIONS',
    'ChangelogSection',
    'append_full_changelog_link',
    'full_changelog_url',
    'generate_changelog',
    'group_commits',
    'render_changelog',
    'section_for',
]
