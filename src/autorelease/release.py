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

"""Release publishing: tag, changelog, checksums, release, uploads.

Orchestrates one automatic release run against a :class:`Forge`.

Key Concepts (ELI5)::

    ┌─────────────────────────┬─────────────────────────────────────────────┐
    │ Concept                 │ ELI5 Explanation                            │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ Dynamic tag             │ The run was triggered by pushing a tag such │
    │                         │ as ``v1.2.0``. We only create the release.  │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ Explicit tag            │ ``automatic_release_tag`` is set, e.g.      │
    │                         │ ``latest``. We (re)point the tag at this    │
    │                         │ commit and replace the release it carries.  │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ Static tag              │ Explicit tag whose changelog starts at the  │
    │                         │ tag itself, not the previous semver tag.    │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ RunResult               │ What happened: tag, upload URL, body.       │
    │                         │ The CLI turns it into step outputs.         │
    └─────────────────────────┴─────────────────────────────────────────────┘

Publish flow::

    resolve_release_tag(config)                      ─ NoTagError if none
         │
         ├──────────────────────────────┐            ─ tasks, the survivor is cancelled on failure
         ▼                              ▼
    previous tag                   resolve_paths(files)
    fetch_commits                  compute_checksums
    generate_changelog                  │
         │                              │
         └──────────────┬───────────────┘
                        ▼
    body = changelog + blank line + checksums        ─ dry run stops here
                        │
                        ▼
    explicit tag? ── create_release_tag (ConflictError → force update)
                     delete_previous_release (NotFoundError → nothing to do)
                        │
                        ▼
    forge.create_release(tag, title, body, draft, prerelease)
                        │
                        ▼
    forge.upload_release_asset(...) per artifact, in order
                        │
                        ▼
    RunResult(release_tag, upload_url, ...)

A failure in any phase stops the run. Completed phases are not rolled
back: a tag created before a failed upload stays in place.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from autorelease.actions import group
from autorelease.artifacts import Artifact, compute_checksums, render_checksums, resolve_paths
from autorelease.backends.forge import Forge
from autorelease.changelog import append_full_changelog_link, generate_changelog
from autorelease.commits import fetch_commits
from autorelease.config import RunConfig
from autorelease.errors import ConflictError, NoTagError, NotFoundError
from autorelease.logging import get_logger
from autorelease.tags import parse_git_tag, search_previous_release_tag

logger = get_logger(__name__)


@dataclass(frozen=True)
class RunResult:
    """Outcome of a release run.

    Attributes:
        release_tag: The tag that was released.
        previous_tag: The tag the changelog starts from, or ``''``.
        upload_url: Asset upload URL of the new release (``''`` on a
            dry run).
        html_url: Web URL of the new release (``''`` on a dry run).
        body: The release body.
        artifacts: Checksummed artifacts, in upload order.
        dry_run: Whether side effects were skipped.
    """

    release_tag: str
    previous_tag: str = ''
    upload_url: str = ''
    html_url: str = ''
    body: str = ''
    artifacts: tuple[Artifact, ...] = field(default=())
    dry_run: bool = False


def resolve_release_tag(config: RunConfig) -> str:
    """Return the explicit release tag, or the tag of the triggering ref.

    Raises:
        NoTagError: If neither yields a tag.
    """
    if config.automatic_release_tag:
        return config.automatic_release_tag
    tag = parse_git_tag(config.ref)
    if not tag:
        raise NoTagError(
            f'No release tag: automatic_release_tag is not set and {config.ref or "the ref"!r} is not a tag.',
            hint="Set 'automatic_release_tag', or trigger the workflow on a tag push.",
        )
    return tag


def build_body(changelog: str, checksums: str) -> str:
    """Join the changelog and the checksums block with a blank line."""
    return '\n\n'.join(part for part in (changelog, checksums) if part)


async def create_release_tag(forge: Forge, tag: str, *, sha: str, message: str = '') -> None:
    """Create or move ``tag`` so it points at ``sha``.

    Creates an annotated tag object, then the ``refs/tags/<tag>`` ref. If
    the ref already exists it is force-updated instead.
    """
    tag_sha = await forge.create_tag(tag, sha=sha, message=message)
    try:
        await forge.create_ref(f'refs/tags/{tag}', sha=tag_sha)
    except ConflictError as exc:
        logger.info('tag_exists_updating', tag=tag, reason=exc.message)
        await forge.update_ref(f'tags/{tag}', sha=tag_sha, force=True)
    logger.info('release_tag_ready', tag=tag, sha=sha[:7])


async def delete_previous_release(forge: Forge, tag: str) -> bool:
    """Delete the release attached to ``tag``, if there is one.

    Returns:
        ``True`` if a release was deleted.
    """
    try:
        previous = await forge.get_release_by_tag(tag)
    except NotFoundError:
        logger.info('no_previous_release', tag=tag)
        return False
    await forge.delete_release(previous.id)
    logger.info('previous_release_deleted', tag=tag, id=previous.id)
    return True


async def build_changelog(forge: Forge, config: RunConfig, release_tag: str) -> tuple[str, str]:
    """Resolve the previous tag and render the changelog for ``release_tag``.

    Static tags start the range at the tag itself; otherwise the nearest
    older semver tag is searched for.

    Returns:
        ``(previous_tag, changelog)``, the changelog ending with the
        Full Changelog link when there is a previous tag.
    """
    if config.is_tag_static:
        previous_tag = config.automatic_release_tag
    else:
        previous_tag = await search_previous_release_tag(forge, release_tag)

    commits = await fetch_commits(forge, previous_tag, config.sha)
    changelog = await generate_changelog(forge, commits)
    changelog = append_full_changelog_link(
        changelog,
        server_url=config.server_url,
        owner=config.owner,
        repo=config.repo,
        previous_tag=previous_tag,
        release_tag=release_tag,
    )
    return previous_tag, changelog


async def _checksum_pipeline(config: RunConfig) -> list[Artifact]:
    """Resolve the artifact globs and hash the files."""
    paths = resolve_paths(config.files, root=config.workspace)
    return await compute_checksums(paths)


async def publish_release(forge: Forge, config: RunConfig, *, dry_run: bool = False) -> RunResult:
    """Run the full release.

    Args:
        forge: Forge backend.
        config: Validated run configuration.
        dry_run: Compute the body but create, delete and upload nothing.

    Returns:
        A :class:`RunResult` for the caller to export.
    """
    release_tag = resolve_release_tag(config)
    logger.info('release_started', tag=release_tag, sha=config.sha[:7], dry_run=dry_run)

    changelog_task = asyncio.create_task(build_changelog(forge, config, release_tag))
    checksum_task = asyncio.create_task(_checksum_pipeline(config))
    try:
        (previous_tag, changelog), artifacts = await asyncio.gather(changelog_task, checksum_task)
    finally:
        # When one side fails the other must not outlive the run.
        for task in (changelog_task, checksum_task):
            if not task.done():
                task.cancel()
        await asyncio.gather(changelog_task, checksum_task, return_exceptions=True)
    body = build_body(changelog, render_checksums(artifacts))

    if dry_run:
        logger.info('dry_run_complete', tag=release_tag, artifacts=len(artifacts))
        return RunResult(
            release_tag=release_tag,
            previous_tag=previous_tag,
            body=body,
            artifacts=tuple(artifacts),
            dry_run=True,
        )

    if config.automatic_release_tag:
        with group('Generating release tag'):
            await create_release_tag(
                forge,
                release_tag,
                sha=config.sha,
                message=config.tag_annotation or release_tag,
            )
        with group('Deleting previous release'):
            await delete_previous_release(forge, release_tag)

    with group('Creating release'):
        release = await forge.create_release(
            release_tag,
            title=config.title or release_tag,
            body=body,
            draft=config.draft,
            prerelease=config.prerelease,
        )

    if artifacts:
        with group('Uploading release artifacts'):
            for artifact in artifacts:
                await forge.upload_release_asset(release.upload_url, artifact.path)

    logger.info('release_published', tag=release_tag, id=release.id, url=release.html_url, assets=len(artifacts))
    return RunResult(
        release_tag=release_tag,
        previous_tag=previous_tag,
        upload_url=release.upload_url,
        html_url=release.html_url,
        body=body,
        artifacts=tuple(artifacts),
    )


__all__ = [
    'RunResult',
    'build_body',
    'build_changelog',
    'create_release_tag',
    'delete_previous_release',
    'publish_release',
    'resolve_release_tag',
]
