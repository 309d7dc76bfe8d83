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

"""Run configuration for autorelease.

Reads the action inputs (``INPUT_*`` variables) and the GitHub Actions
run context (``GITHUB_*`` variables) once at startup and returns a
validated, frozen :class:`RunConfig`. CLI flags are passed in as
overrides and win over the environment.

Key Concepts (ELI5)::

    ┌─────────────────────────┬────────────────────────────────────────────┐
    │ Concept                 │ ELI5 Explanation                           │
    ├─────────────────────────┼────────────────────────────────────────────┤
    │ Input                   │ A setting from the workflow's ``with:``    │
    │                         │ block. ``repo_token`` → INPUT_REPO_TOKEN.  │
    ├─────────────────────────┼────────────────────────────────────────────┤
    │ Run context             │ Facts about the run GitHub provides:       │
    │                         │ repository, ref, sha, API URL.             │
    ├─────────────────────────┼────────────────────────────────────────────┤
    │ RunConfig               │ Both of the above, checked and frozen.     │
    └─────────────────────────┴────────────────────────────────────────────┘

Validation::

    INPUT_* / GITHUB_* / CLI flags
             │
             ▼
    ┌──────────────────┐     ┌──────────────────────────────┐
    │ 1. Required      │────→│ AR-CONFIG-MISSING-REQUIRED:  │
    │    inputs        │     │ repo_token, repository, sha  │
    └────────┬─────────┘     └──────────────────────────────┘
             │
             ▼
    ┌──────────────────┐     ┌──────────────────────────────┐
    │ 2. Value check   │────→│ AR-CONFIG-INVALID-VALUE:     │
    │    (bools, repo) │     │ draft must be true or false  │
    └────────┬─────────┘     └──────────────────────────────┘
             │
             ▼
    ┌──────────────────┐
    │ RunConfig()      │  ← frozen dataclass, ready to use
    └──────────────────┘
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from autorelease.errors import E, ConfigurationError

DEFAULT_API_URL = 'https://api.github.com'
DEFAULT_SERVER_URL = 'https://github.com'

# Inputs read from INPUT_<NAME>; also the keys accepted as overrides.
INPUT_NAMES: frozenset[str] = frozenset({
    'repo_token',
    'automatic_release_tag',
    'is_tag_static',
    'draft',
    'prerelease',
    'title',
    'tag_annotation',
    'files',
})

# Run context keys accepted as overrides, with the variable they replace.
CONTEXT_VARIABLES: dict[str, str] = {
    'repository': 'GITHUB_REPOSITORY',
    'ref': 'GITHUB_REF',
    'sha': 'GITHUB_SHA',
    'api_url': 'GITHUB_API_URL',
    'server_url': 'GITHUB_SERVER_URL',
    'workspace': 'GITHUB_WORKSPACE',
}


@dataclass(frozen=True)
class RunConfig:
    """Validated configuration for one release run.

    Attributes:
        token: GitHub API token. Never shown in ``repr``.
        owner: Repository owner.
        repo: Repository name.
        sha: Commit being released.
        ref: Ref that triggered the run (e.g. ``refs/tags/v1.2.0``).
        automatic_release_tag: Explicit release tag, or ``''``.
        is_tag_static: Use ``automatic_release_tag`` as the previous tag
            instead of searching for one.
        draft: Create the release as a draft.
        prerelease: Mark the release as a pre-release.
        title: Release title; defaults to the tag.
        tag_annotation: Message of the annotated tag object.
        files: Glob patterns for artifacts to checksum and upload.
        api_url: GitHub REST API base URL.
        server_url: GitHub web URL, used for links in the changelog.
        workspace: Directory the globs are resolved against.
    """

    token: str = field(repr=False)
    owner: str
    repo: str
    sha: str
    ref: str = ''
    automatic_release_tag: str = ''
    is_tag_static: bool = False
    draft: bool = False
    prerelease: bool = True
    title: str = ''
    tag_annotation: str = ''
    files: tuple[str, ...] = ()
    api_url: str = DEFAULT_API_URL
    server_url: str = DEFAULT_SERVER_URL
    workspace: Path = field(default_factory=Path.cwd)

    @property
    def repository(self) -> str:
        """``owner/repo``."""
        return f'{self.owner}/{self.repo}'


def input_variable(name: str) -> str:
    """Return the environment variable holding action input ``name``.

    >>> input_variable('repo_token')
    'INPUT_REPO_TOKEN'
    """
    return 'INPUT_' + name.replace(' ', '_').upper()


def parse_bool(name: str, value: str | bool, *, default: bool) -> bool:
    """Parse a boolean input.

    Accepts ``true`` or ``false`` in any case. An empty value gives
    ``default``.

    Raises:
        ConfigurationError: For any other value.
    """
    if isinstance(value, bool):
        return value
    text = value.strip().lower()
    if not text:
        return default
    if text == 'true':
        return True
    if text == 'false':
        return False
    raise ConfigurationError(
        f'Input {name!r} must be true or false, got {value!r}.',
        hint=f"Set {input_variable(name)} to 'true' or 'false'.",
    )


def parse_files(value: str | list[str] | tuple[str, ...]) -> tuple[str, ...]:
    """Split the ``files`` input into glob patterns, one per line."""
    lines = value.splitlines() if isinstance(value, str) else value
    return tuple(p.strip() for p in lines if p.strip())


def _parse_repository(value: str) -> tuple[str, str]:
    owner, sep, repo = value.strip().partition('/')
    if not sep or not owner or not repo or '/' in repo:
        raise ConfigurationError(
            f'Repository must be "owner/repo", got {value!r}.',
            hint='Set GITHUB_REPOSITORY or pass --repository.',
        )
    return owner, repo


def _missing(name: str, hint: str) -> ConfigurationError:
    return ConfigurationError(
        f'Input required and not supplied: {name}',
        hint=hint,
        code=E.CONFIG_MISSING_REQUIRED,
    )


def load_config(
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, object] | None = None,
) -> RunConfig:
    """Build a :class:`RunConfig` from the environment and CLI overrides.

    Args:
        env: Environment to read. Defaults to ``os.environ``.
        overrides: Values that take precedence over the environment,
            keyed by input name (``draft``) or context key
            (``repository``). ``None`` values are ignored.

    Returns:
        A validated :class:`RunConfig`.

    Raises:
        ConfigurationError: If a required value is missing or a value
            is malformed.
    """
    env = os.environ if env is None else env
    given = {k: v for k, v in (overrides or {}).items() if v is not None}

    unknown = set(given) - INPUT_NAMES - set(CONTEXT_VARIABLES)
    if unknown:
        raise ConfigurationError(f'Unknown configuration keys: {", ".join(sorted(unknown))}')

    def value(name: str) -> object:
        if name in given:
            return given[name]
        variable = CONTEXT_VARIABLES.get(name) or input_variable(name)
        return env.get(variable, '').strip()

    token = str(value('repo_token')) or env.get('GITHUB_TOKEN', '') or env.get('GH_TOKEN', '')
    if not token:
        raise _missing('repo_token', 'Pass --token, or set INPUT_REPO_TOKEN or GITHUB_TOKEN.')

    repository = str(value('repository'))
    if not repository:
        raise _missing('repository', 'Set GITHUB_REPOSITORY or pass --repository.')
    owner, repo = _parse_repository(repository)

    sha = str(value('sha'))
    if not sha:
        raise _missing('sha', 'Set GITHUB_SHA or pass --sha.')

    automatic_release_tag = str(value('automatic_release_tag'))
    is_tag_static = parse_bool('is_tag_static', value('is_tag_static'), default=False)  # type: ignore[arg-type]
    if is_tag_static and not automatic_release_tag:
        raise ConfigurationError(
            "'is_tag_static' requires 'automatic_release_tag'.",
            hint='Set automatic_release_tag to the rolling tag name, e.g. "latest".',
        )

    workspace = value('workspace')
    return RunConfig(
        token=token,
        owner=owner,
        repo=repo,
        sha=sha,
        ref=str(value('ref')),
        automatic_release_tag=automatic_release_tag,
        is_tag_static=is_tag_static,
        draft=parse_bool('draft', value('draft'), default=False),  # type: ignore[arg-type]
        prerelease=parse_bool('prerelease', value('prerelease'), default=True),  # type: ignore[arg-type]
        title=str(value('title')),
        tag_annotation=str(value('tag_annotation')),
        files=parse_files(value('files')),  # type: ignore[arg-type]
        api_url=str(value('api_url')) or DEFAULT_API_URL,
        server_url=str(value('server_url')) or DEFAULT_SERVER_URL,
        workspace=Path(workspace) if workspace else Path.cwd(),  # type: ignore[arg-type]
    )


__all__ = [
    'DEFAULT_API_URL',
    'DEFAULT_SERVER_URL',
    'RunConfig',
    'input_variable',
    'load_config',
    'parse_bool',
    'parse_files',
]
