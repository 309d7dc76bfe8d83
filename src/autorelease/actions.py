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

"""GitHub Actions integration.

Workflow commands and run outputs for when autorelease runs as a step
in a GitHub Actions job. Outside of Actions every helper degrades to
plain logging, so the CLI behaves the same on a laptop.

Outputs::

    $GITHUB_OUTPUT   automatic_releases_tag=<tag>
                     upload_url=<release asset upload url>
    $GITHUB_ENV      AUTOMATIC_RELEASES_TAG=<tag>
"""

from __future__ import annotations

import os
import sys
import uuid
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from autorelease.logging import get_logger

if TYPE_CHECKING:
    from autorelease.release import RunResult

log = get_logger('autorelease.actions')


def is_github_actions(env: Mapping[str, str] | None = None) -> bool:
    """Return ``True`` when running inside a GitHub Actions job."""
    env = os.environ if env is None else env
    return env.get('GITHUB_ACTIONS', '').lower() == 'true'


def escape_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace('%', '%25').replace('\r', '%0D').replace('\n', '%0A')


@contextmanager
def group(title: str, *, env: Mapping[str, str] | None = None) -> Iterator[None]:
    """Fold the log lines of a phase under ``title``.

    Emits ``::group::``/``::endgroup::`` under GitHub Actions and binds
    ``phase=<title>`` to every log event inside the block.
    """
    in_actions = is_github_actions(env)
    if in_actions:
        print(f'::group::{escape_data(title)}', flush=True)  # noqa: T201 - workflow command
    try:
        with structlog.contextvars.bound_contextvars(phase=title):
            yield
    finally:
        if in_actions:
            print('::endgroup::', flush=True)  # noqa: T201 - workflow command


def _append_to_file(variable: str, name: str, value: str, env: Mapping[str, str]) -> bool:
    """Append ``name=value`` to the file named by ``variable``.

    Uses the heredoc form so values may span lines. Returns ``False``
    when the variable is unset.
    """
    path = env.get(variable, '')
    if not path:
        return False
    delimiter = f'ghadelimiter_{uuid.uuid4()}'
    with Path(path).open('a', encoding='utf-8') as f:
        f.write(f'{name}<<{delimiter}\n{value}\n{delimiter}\n')
    return True


def set_output(name: str, value: str, *, env: Mapping[str, str] | None = None) -> None:
    """Set a step output."""
    env = os.environ if env is None else env
    written = _append_to_file('GITHUB_OUTPUT', name, value, env)
    log.info('output_set', name=name, value=value, written=written)


def export_variable(name: str, value: str, *, env: Mapping[str, str] | None = None) -> None:
    """Export an environment variable to later steps of the job."""
    env = os.environ if env is None else env
    written = _append_to_file('GITHUB_ENV', name, value, env)
    log.info('variable_exported', name=name, value=value, written=written)


def write_outputs(result: RunResult, *, env: Mapping[str, str] | None = None) -> None:
    """Export the outputs of a release run."""
    set_output('automatic_releases_tag', result.release_tag, env=env)
    set_output('upload_url', result.upload_url, env=env)
    export_variable('AUTOMATIC_RELEASES_TAG', result.release_tag, env=env)


def set_failed(message: str, *, env: Mapping[str, str] | None = None) -> None:
    """Report a run failure as an ``::error::`` annotation.

    Outside of GitHub Actions this is a no-op; the CLI renders the
    error itself.
    """
    if is_github_actions(env):
        print(f'::error::{escape_data(message)}', file=sys.stdout, flush=True)  # noqa: T201 - workflow command


__all__ = [
    'escape_data',
    'export_variable',
    'group',
    'is_github_actions',
    'set_failed',
    'set_output',
    'write_outputs',
]
