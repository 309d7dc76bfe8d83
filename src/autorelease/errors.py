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

"""Structured error system for autorelease.

Every error has a unique ``AR-NAMED-KEY`` code, a human-readable message,
and an optional hint with a suggested fix.

Key Concepts (ELI5)::

    ┌─────────────────────┬────────────────────────────────────────────────┐
    │ Concept             │ ELI5 Explanation                               │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ ErrorCode           │ A unique named ID like "AR-TAG-NOT-FOUND" for  │
    │                     │ each error. Readable at a glance.              │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ ErrorInfo           │ A bundle of code + message + hint.             │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ AutoReleaseError    │ An exception you can raise. Carries the error  │
    │                     │ card so renderers can display it.              │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ Subclasses          │ One per failure family (config, version,       │
    │                     │ forge, artifacts) so callers can catch the     │
    │                     │ recoverable ones by type.                      │
    └─────────────────────┴────────────────────────────────────────────────┘

Code categories::

    AR-CONFIG-*       Run configuration errors
    AR-TAG-*          Release tag resolution errors
    AR-VERSION-*      Semantic version errors
    AR-FORGE-*        Hosting platform (GitHub API) errors
    AR-ARTIFACT-*     Release artifact errors

Recovery policy: :class:`NotFoundError` is caught locally wherever
"nothing found" has a safe default (no previous release, no release to
delete) and :class:`ConflictError` is caught once, when the release tag
ref already exists. Everything else propagates to the CLI, which renders
it and exits non-zero.

Usage::

    from autorelease.errors import E, AutoReleaseError

    raise AutoReleaseError(
        code=E.CONFIG_MISSING_REQUIRED,
        message='Input required and not supplied: repo_token',
        hint='Pass --token or set GITHUB_TOKEN.',
    )
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from rich.console import Console
from rich.markup import escape as rich_escape


class ErrorCode(str, Enum):
    """Enumeration of all autorelease diagnostic codes."""

    # Configuration
    CONFIG_MISSING_REQUIRED = 'AR-CONFIG-MISSING-REQUIRED'
    CONFIG_INVALID_VALUE = 'AR-CONFIG-INVALID-VALUE'

    # Tags and versions
    TAG_NOT_FOUND = 'AR-TAG-NOT-FOUND'
    VERSION_INVALID = 'AR-VERSION-INVALID'

    # Forge
    FORGE_NOT_FOUND = 'AR-FORGE-NOT-FOUND'
    FORGE_CONFLICT = 'AR-FORGE-CONFLICT'
    FORGE_REQUEST_FAILED = 'AR-FORGE-REQUEST-FAILED'

    # Artifacts
    ARTIFACT_READ_FAILED = 'AR-ARTIFACT-READ-FAILED'


# Convenience alias for shorter imports.
E = ErrorCode


@dataclass(frozen=True)
class ErrorInfo:
    """Metadata for a single error code.

    Attributes:
        code: The ``AR-NAMED-KEY`` error code.
        message: Human-readable description of what went wrong.
        hint: Optional suggestion for how to fix the error.
    """

    code: ErrorCode
    message: str
    hint: str = ''


class AutoReleaseError(Exception):
    """Base exception for all autorelease errors.

    Args:
        code: The error code from :class:`ErrorCode`.
        message: Human-readable description of what went wrong.
        hint: Optional suggestion for how to fix the error.
    """

    def __init__(self, code: ErrorCode, message: str, hint: str = '') -> None:
        """Initialize with an error code, message, and optional hint."""
        self.info = ErrorInfo(code=code, message=message, hint=hint)
        super().__init__(f'[{code.value}] {message}')

    @property
    def code(self) -> ErrorCode:
        """The error code."""
        return self.info.code

    @property
    def message(self) -> str:
        """The message without the code prefix."""
        return self.info.message

    @property
    def hint(self) -> str:
        """Suggestion for fixing this error, or empty string."""
        return self.info.hint


class ConfigurationError(AutoReleaseError):
    """A required input is missing or an input value is malformed."""

    def __init__(self, message: str, hint: str = '', *, code: ErrorCode = E.CONFIG_INVALID_VALUE) -> None:
        """Initialize with a configuration error code."""
        super().__init__(code, message, hint)


class NoTagError(ConfigurationError):
    """Neither an explicit tag nor a tag ref was available."""

    def __init__(self, message: str, hint: str = '') -> None:
        """Initialize with :attr:`ErrorCode.TAG_NOT_FOUND`."""
        super().__init__(message, hint, code=E.TAG_NOT_FOUND)


class InvalidVersionError(AutoReleaseError):
    """A tag that must be ordered is not valid semantic version text."""

    def __init__(self, message: str, hint: str = '') -> None:
        """Initialize with :attr:`ErrorCode.VERSION_INVALID`."""
        super().__init__(E.VERSION_INVALID, message, hint)


# Name used by the error taxonomy for the same failure.
VersionParseError = InvalidVersionError


class TransportError(AutoReleaseError):
    """A hosting platform request failed.

    Attributes:
        status: HTTP status code, or ``0`` when no response was received.
    """

    def __init__(
        self,
        message: str,
        hint: str = '',
        *,
        status: int = 0,
        code: ErrorCode = E.FORGE_REQUEST_FAILED,
    ) -> None:
        """Initialize with the HTTP status of the failed request."""
        self.status = status
        super().__init__(code, message, hint)


class NotFoundError(TransportError):
    """The requested object (tag, ref, release) does not exist."""

    def __init__(self, message: str, hint: str = '') -> None:
        """Initialize with :attr:`ErrorCode.FORGE_NOT_FOUND`."""
        super().__init__(message, hint, status=404, code=E.FORGE_NOT_FOUND)


class ConflictError(TransportError):
    """The object being created already exists."""

    def __init__(self, message: str, hint: str = '', *, status: int = 422) -> None:
        """Initialize with :attr:`ErrorCode.FORGE_CONFLICT`."""
        super().__init__(message, hint, status=status, code=E.FORGE_CONFLICT)


class FileReadError(AutoReleaseError):
    """A resolved artifact could not be read."""

    def __init__(self, message: str, hint: str = '') -> None:
        """Initialize with :attr:`ErrorCode.ARTIFACT_READ_FAILED`."""
        super().__init__(E.ARTIFACT_READ_FAILED, message, hint)


ERRORS: dict[ErrorCode, ErrorInfo] = {
    E.CONFIG_MISSING_REQUIRED: ErrorInfo(
        code=E.CONFIG_MISSING_REQUIRED,
        message='A required input was not supplied.',
        hint='Set the matching INPUT_* environment variable or pass the CLI flag.',
    ),
    E.CONFIG_INVALID_VALUE: ErrorInfo(
        code=E.CONFIG_INVALID_VALUE,
        message='An input has a value that cannot be parsed.',
        hint="Boolean inputs accept 'true' or 'false'; repository must be 'owner/repo'.",
    ),
    E.TAG_NOT_FOUND: ErrorInfo(
        code=E.TAG_NOT_FOUND,
        message='No release tag could be determined for this run.',
        hint="Set 'automatic_release_tag' or run on a tag push (refs/tags/*).",
    ),
    E.VERSION_INVALID: ErrorInfo(
        code=E.VERSION_INVALID,
        message='The release tag is not a semantic version, so the previous release cannot be found.',
        hint="Use a tag such as 'v1.2.3', or enable 'is_tag_static' for rolling tags like 'latest'.",
    ),
    E.FORGE_NOT_FOUND: ErrorInfo(
        code=E.FORGE_NOT_FOUND,
        message='The requested GitHub object does not exist.',
    ),
    E.FORGE_CONFLICT: ErrorInfo(
        code=E.FORGE_CONFLICT,
        message='The GitHub object being created already exists.',
    ),
    E.FORGE_REQUEST_FAILED: ErrorInfo(
        code=E.FORGE_REQUEST_FAILED,
        message='A GitHub API request failed.',
        hint='Check the token permissions (contents: write) and the API URL.',
    ),
    E.ARTIFACT_READ_FAILED: ErrorInfo(
        code=E.ARTIFACT_READ_FAILED,
        message='A release artifact could not be read.',
        hint='Make sure the build step produced the file and it is readable.',
    ),
}


def explain(code: str) -> str | None:
    """Return a detailed explanation for an error code.

    Args:
        code: The error code string, e.g. ``"AR-TAG-NOT-FOUND"``.

    Returns:
        A formatted explanation string, or ``None`` if the code is unknown.
    """
    try:
        error_code = ErrorCode(code)
    except ValueError:
        return None

    info = ERRORS.get(error_code)
    if info is None:
        return f'{code}: No detailed explanation available.'

    lines = [f'{code}: {info.message}']
    if info.hint:
        lines.append(f'  Hint: {info.hint}')
    return '\n'.join(lines)


def render_error(exc: AutoReleaseError, *, file: TextIO | None = None) -> None:
    """Render an error in Rust-compiler style.

    Output format::

        error[AR-TAG-NOT-FOUND]: No release tag could be determined.
          |
          = hint: Set 'automatic_release_tag' or run on a tag push.

    Args:
        exc: The error to render.
        file: Output stream (defaults to ``sys.stderr``).
    """
    out = file or sys.stderr

    if out.isatty():
        console = Console(file=out, highlight=False)
        msg = rich_escape(exc.message)
        console.print(
            f'[bold red]error[/bold red][bold red]\\[{exc.code.value}][/bold red][bold]: {msg}[/bold]',
        )
        if exc.hint:
            hint = rich_escape(exc.hint)
            console.print('  [dim]|[/dim]')
            console.print(f'  [dim]=[/dim] [cyan]hint[/cyan]: {hint}')
        console.print()
    else:
        print(f'error[{exc.code.value}]: {exc.message}', file=out)  # noqa: T201 - CLI output
        if exc.hint:
            print('  |', file=out)  # noqa: T201 - CLI output
            print(f'  = hint: {exc.hint}', file=out)  # noqa: T201 - CLI output
        print(file=out)  # noqa: T201 - CLI output


__all__ = [
    'ERRORS',
    'AutoReleaseError',
    'ConfigurationError',
    'ConflictError',
    'E',
    'ErrorCode',
    'ErrorInfo',
    'FileReadError',
    'InvalidVersionError',
    'NoTagError',
    'NotFoundError',
    'TransportError',
    'VersionParseError',
    'explain',
    'render_error',
]
