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

"""Command-line interface for autorelease.

Subcommands::

    autorelease publish      Create the release and upload its artifacts.
    autorelease changelog    Print the changelog a release would get.
    autorelease checksums    Print the checksums block for file globs.
    autorelease explain      Explain an error code.

Settings come from the same ``INPUT_*`` and ``GITHUB_*`` variables the
GitHub Action receives; flags override them. Logs go to stderr, command
output to stdout.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

from rich_argparse import RichHelpFormatter

from autorelease import __version__
from autorelease.actions import set_failed, write_outputs
from autorelease.artifacts import checksum, resolve_paths
from autorelease.backends.forge import GitHubAPIBackend
from autorelease.config import RunConfig, load_config
from autorelease.errors import AutoReleaseError, explain, render_error
from autorelease.logging import configure_logging, get_logger
from autorelease.net import DEFAULT_TIMEOUT
from autorelease.release import build_changelog, publish_release, resolve_release_tag

logger = get_logger(__name__)


def _overrides(args: argparse.Namespace) -> dict[str, object]:
    """Map CLI flags onto configuration keys; unset flags are ``None``."""
    return {
        'repo_token': getattr(args, 'token', None),
        'repository': getattr(args, 'repository', None),
        'sha': getattr(args, 'sha', None),
        'ref': getattr(args, 'ref', None),
        'automatic_release_tag': getattr(args, 'tag', None),
        'is_tag_static': True if getattr(args, 'static', False) else None,
        'draft': getattr(args, 'draft', None),
        'prerelease': getattr(args, 'prerelease', None),
        'title': getattr(args, 'title', None),
        'tag_annotation': getattr(args, 'annotation', None),
        'files': getattr(args, 'files', None) or None,
        'api_url': getattr(args, 'api_url', None),
        'server_url': getattr(args, 'server_url', None),
        'workspace': getattr(args, 'root', None),
    }


def _backend(config: RunConfig, args: argparse.Namespace) -> GitHubAPIBackend:
    return GitHubAPIBackend(
        config.owner,
        config.repo,
        token=config.token,
        base_url=config.api_url,
        timeout=getattr(args, 'timeout', DEFAULT_TIMEOUT),
    )


async def _cmd_publish(args: argparse.Namespace, env: Mapping[str, str] | None = None) -> int:
    """Handle the ``publish`` subcommand."""
    config = load_config(env, _overrides(args))
    async with _backend(config, args) as forge:
        result = await publish_release(forge, config, dry_run=args.dry_run)

    if result.dry_run:
        print(result.body)  # noqa: T201 - CLI output
        return 0

    write_outputs(result, env=env)
    return 0


async def _cmd_changelog(args: argparse.Namespace, env: Mapping[str, str] | None = None) -> int:
    """Handle the ``changelog`` subcommand."""
    config = load_config(env, _overrides(args))
    release_tag = resolve_release_tag(config)
    async with _backend(config, args) as forge:
        _, changelog = await build_changelog(forge, config, release_tag)

    print(changelog)  # noqa: T201 - CLI output
    return 0


async def _cmd_checksums(args: argparse.Namespace) -> int:
    """Handle the ``checksums`` subcommand."""
    paths = resolve_paths(args.patterns, root=args.root)
    if not paths:
        return 1
    print(await checksum(paths))  # noqa: T201 - CLI output
    return 0


def _cmd_explain(args: argparse.Namespace) -> int:
    """Handle the ``explain`` subcommand."""
    result = explain(args.code)
    if result is None:
        print(f'Unknown error code: {args.code}')  # noqa: T201 - CLI output
        return 1
    print(result)  # noqa: T201 - CLI output
    return 0


def _bool_flag(value: str) -> bool:
    text = value.strip().lower()
    if text not in ('true', 'false'):
        msg = f"expected 'true' or 'false', got {value!r}"
        raise argparse.ArgumentTypeError(msg)
    return text == 'true'


def _add_run_arguments(parser: argparse.ArgumentParser) -> None:
    """Flags shared by the commands that talk to GitHub."""
    parser.add_argument('--token', help='GitHub API token (default: INPUT_REPO_TOKEN, GITHUB_TOKEN, GH_TOKEN).')
    parser.add_argument('--repository', metavar='OWNER/REPO', help='Repository (default: GITHUB_REPOSITORY).')
    parser.add_argument('--sha', help='Commit to release (default: GITHUB_SHA).')
    parser.add_argument('--ref', help='Triggering ref, e.g. refs/tags/v1.2.0 (default: GITHUB_REF).')
    parser.add_argument(
        '--tag',
        help='Explicit release tag, e.g. latest (default: INPUT_AUTOMATIC_RELEASE_TAG).',
    )
    parser.add_argument(
        '--static',
        action='store_true',
        default=False,
        help='Start the changelog at --tag instead of the previous semver tag.',
    )
    parser.add_argument('--api-url', help='GitHub API URL (default: GITHUB_API_URL or https://api.github.com).')
    parser.add_argument('--server-url', help='GitHub web URL (default: GITHUB_SERVER_URL or https://github.com).')
    parser.add_argument(
        '--timeout',
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f'HTTP timeout in seconds (default: {DEFAULT_TIMEOUT:g}).',
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser.

    Returns:
        Configured :class:`argparse.ArgumentParser`.
    """
    RichHelpFormatter.styles['argparse.groups'] = 'bold yellow'
    parser = argparse.ArgumentParser(
        prog='autorelease',
        description='Automatic GitHub releases with Conventional Commits changelogs.',
        formatter_class=RichHelpFormatter,
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}',
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging.')
    parser.add_argument('--quiet', '-q', action='store_true', help='Only log warnings and errors.')
    parser.add_argument('--json-log', action='store_true', help='Log JSON lines instead of console output.')

    subparsers = parser.add_subparsers(dest='command')

    publish_parser = subparsers.add_parser(
        'publish',
        help='Create the release, then upload its artifacts.',
        formatter_class=RichHelpFormatter,
    )
    _add_run_arguments(publish_parser)
    publish_parser.add_argument('--title', help='Release title (default: INPUT_TITLE or the tag).')
    publish_parser.add_argument('--annotation', help='Annotated tag message (default: INPUT_TAG_ANNOTATION).')
    publish_parser.add_argument(
        '--draft',
        type=_bool_flag,
        metavar='true|false',
        help='Create a draft release (default: INPUT_DRAFT or false).',
    )
    publish_parser.add_argument(
        '--prerelease',
        type=_bool_flag,
        metavar='true|false',
        help='Mark the release as a pre-release (default: INPUT_PRERELEASE or true).',
    )
    publish_parser.add_argument(
        '--file',
        dest='files',
        action='append',
        metavar='GLOB',
        help='Artifact glob; repeat for more (default: INPUT_FILES, one per line).',
    )
    publish_parser.add_argument('--root', type=Path, help='Directory globs are relative to (default: GITHUB_WORKSPACE).')
    publish_parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Print the release body without creating anything.',
    )

    changelog_parser = subparsers.add_parser(
        'changelog',
        help='Print the changelog for a release without creating it.',
        formatter_class=RichHelpFormatter,
    )
    _add_run_arguments(changelog_parser)

    checksums_parser = subparsers.add_parser(
        'checksums',
        help='Print the SHA-256 checksums block for file globs.',
        formatter_class=RichHelpFormatter,
    )
    checksums_parser.add_argument('patterns', nargs='+', metavar='GLOB', help='File globs.')
    checksums_parser.add_argument('--root', type=Path, default=None, help='Directory globs are relative to.')

    explain_parser = subparsers.add_parser(
        'explain',
        help='Explain an error code (e.g. AR-TAG-NOT-FOUND).',
        formatter_class=RichHelpFormatter,
    )
    explain_parser.add_argument('code', help='The error code.')

    return parser


def main(argv: Sequence[str] | None = None, env: Mapping[str, str] | None = None) -> int:
    """CLI entry point.

    Args:
        argv: Arguments, without the program name. Defaults to
            ``sys.argv[1:]``.
        env: Environment to read settings from. Defaults to
            ``os.environ``.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet, json_log=args.json_log, env=env)

    try:
        command = args.command
        if command == 'publish':
            return asyncio.run(_cmd_publish(args, env))
        if command == 'changelog':
            return asyncio.run(_cmd_changelog(args, env))
        if command == 'checksums':
            return asyncio.run(_cmd_checksums(args))
        if command == 'explain':
            return _cmd_explain(args)

        parser.print_help()  # noqa: T201 - CLI output
        print(  # noqa: T201 - CLI output
            f'\n{parser.prog}: error: please provide a command',
            file=sys.stderr,
        )
        return 2

    except AutoReleaseError as exc:
        render_error(exc)
        set_failed(exc.message, env=env)
        return 1
    except KeyboardInterrupt:
        logger.info('interrupted')
        return 130
    except Exception as exc:
        set_failed(f'{type(exc).__name__}: {exc}', env=env)
        raise


def _main() -> None:
    """Wrapper for pyproject.toml [project.scripts] entry point."""
    sys.exit(main())


__all__ = [
    'build_parser',
    'main',
]
