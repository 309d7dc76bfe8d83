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

"""Structured logging for autorelease.

Configures `structlog <https://www.structlog.org/>`_ with two output modes:

- **Console** (default): human-readable output, colored on a TTY.
- **JSON** (``--json-log``): one JSON object per line.

Both modes write to stderr. Stdout is reserved for command output such as
``autorelease changelog``, and for the workflow commands emitted by
:mod:`autorelease.actions`.

Inside a GitHub Actions job, warnings and errors are additionally echoed
to stdout as workflow commands so they show up as run annotations::

    log.error('glob_no_match', pattern='dist/*.zip')
        stderr: 2026-10-19T12:00:00Z [error] glob_no_match  pattern=dist/*.zip
        stdout: ::error::glob_no_match: pattern=dist/*.zip

Usage::

    from autorelease.logging import configure_logging, get_logger

    configure_logging(verbose=True)
    log = get_logger(__name__)
    log.info('release_created', tag='v1.2.0', id=42)
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable, Mapping, MutableMapping
from typing import Any

import structlog

# structlog method name → workflow command.
_ANNOTATION_COMMANDS: dict[str, str] = {
    'warning': 'warning',
    'warn': 'warning',
    'error': 'error',
    'exception': 'error',
    'critical': 'error',
}

# Keys added by the processor chain; not part of the event's own context.
_META_KEYS = frozenset({'event', 'level', 'logger', 'timestamp', 'exc_info', 'stack_info'})


class WorkflowAnnotations:
    """structlog processor echoing warnings and errors as workflow commands.

    The event dict passes through unchanged, so the normal renderer still
    logs the event to stderr.

    Args:
        escape: Escapes the annotation message for a workflow command.
    """

    def __init__(self, escape: Callable[[str], str]) -> None:
        """Initialize with the message escape function."""
        self._escape = escape

    def __call__(
        self,
        logger: Any,  # noqa: ANN401
        method_name: str,
        event_dict: MutableMapping[str, Any],
    ) -> MutableMapping[str, Any]:
        """Print the annotation for warning and error events."""
        command = _ANNOTATION_COMMANDS.get(method_name)
        if command is not None:
            context = ' '.join(f'{k}={v}' for k, v in event_dict.items() if k not in _META_KEYS)
            message = f'{event_dict.get("event", "")}: {context}' if context else str(event_dict.get('event', ''))
            print(f'::{command}::{self._escape(message)}', file=sys.stdout, flush=True)  # noqa: T201 - workflow command
        return event_dict


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    json_log: bool = False,
    env: Mapping[str, str] | None = None,
) -> None:
    """Configure structlog for autorelease.

    Should be called once at startup, before any logging calls.

    Args:
        verbose: Enable debug-level output.
        quiet: Suppress info-level output (only warnings and errors).
        json_log: Use JSON output instead of console output.
        env: Environment used to detect GitHub Actions. Defaults to
            ``os.environ``.
    """
    # actions logs through this module, so it is imported on use.
    from autorelease.actions import escape_data, is_github_actions  # noqa: PLC0415

    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        format='%(message)s',
        stream=sys.stderr,
        level=level,
        force=True,
    )
    # httpx logs every request at INFO; our own request events cover that.
    logging.getLogger('httpx').setLevel(logging.WARNING)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if is_github_actions(os.environ if env is None else env):
        shared_processors.append(WorkflowAnnotations(escape_data))

    if json_log:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
        )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    for handler in logging.root.handlers:
        handler.setFormatter(formatter)


def get_logger(name: str = 'autorelease') -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger.

    Args:
        name: Logger name, used for filtering and identification.

    Returns:
        A :class:`structlog.stdlib.BoundLogger` instance.
    """
    return structlog.get_logger(name)


__all__ = [
    'WorkflowAnnotations',
    'configure_logging',
    'get_logger',
]
