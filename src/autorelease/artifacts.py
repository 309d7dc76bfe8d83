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

"""Release artifact resolution and SHA-256 checksums.

Glob patterns from the ``files`` input are expanded into a list of
files; each file is hashed and the digests are rendered as the
``## Checksums`` block at the end of the release body::

    ## Checksums
    sha256
    ```
    2d711642b726b04401627ca9fbac32f5c8530fb1903cc4db02258717921a4881  a.txt
    2d711642b726b04401627ca9fbac32f5c8530fb1903cc4db02258717921a4881  b.txt
    ```
"""

from __future__ import annotations

import asyncio
import glob
import hashlib
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

import aiofiles

from autorelease.errors import FileReadError
from autorelease.logging import get_logger

logger = get_logger(__name__)

# Read size for hashing; files are hashed incrementally.
_CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class Artifact:
    """A release artifact and its checksum.

    Attributes:
        path: Path of the file on disk.
        sha256: Hex-encoded SHA-256 digest of the file contents.
    """

    path: Path
    sha256: str

    @property
    def basename(self) -> str:
        """File name without directories; also the uploaded asset name."""
        return self.path.name


def _directory_pattern(pattern: str, base: Path) -> str:
    """Turn a pattern naming a directory into one matching everything under it."""
    if (base / pattern).is_dir():
        return f'{glob.escape(pattern.rstrip("/"))}/**'
    return pattern


def resolve_paths(patterns: Iterable[str], *, root: Path | None = None) -> list[Path]:
    """Expand glob patterns into a deduplicated list of files.

    Each pattern is expanded on its own (``**`` matches across
    directories). A pattern naming a directory stands for every file
    beneath it, so ``dist`` uploads the whole folder; other directory
    matches are skipped. A pattern that matches no files is logged as an
    error and skipped. Paths matched by several patterns are kept once,
    at their first position.

    Args:
        patterns: Glob patterns, relative to ``root`` or absolute.
        root: Directory relative patterns are resolved against.
            Defaults to the current directory.

    Returns:
        Matched files, in pattern order then sorted within a pattern.
    """
    base = root or Path.cwd()
    seen: dict[Path, None] = {}
    for pattern in patterns:
        pattern = pattern.strip()
        if not pattern:
            continue
        matches = sorted(glob.glob(_directory_pattern(pattern, base), root_dir=base, recursive=True))
        files = [base / m for m in matches if (base / m).is_file()]
        if not files:
            logger.error('glob_no_match', pattern=pattern, root=str(base))
            continue
        for path in files:
            seen.setdefault(path, None)

    paths = list(seen)
    logger.debug('artifact_paths', paths=[str(p) for p in paths])
    return paths


async def compute_sha256(path: Path) -> str:
    """Hash a file's full contents.

    Raises:
        FileReadError: If the file cannot be read.
    """
    digest = hashlib.sha256()
    try:
        async with aiofiles.open(path, mode='rb') as f:
            while chunk := await f.read(_CHUNK_SIZE):
                digest.update(chunk)
    except OSError as exc:
        raise FileReadError(
            f'Cannot read artifact {path}: {exc}',
            hint=f'Check that {path} still exists and is readable.',
        ) from exc
    sha = digest.hexdigest()
    logger.debug('sha256_computed', file=path.name, digest=sha)
    return sha


async def compute_checksums(paths: Sequence[Path]) -> list[Artifact]:
    """Hash every file concurrently, keeping the input order."""
    digests = await asyncio.gather(*(compute_sha256(path) for path in paths))
    return [Artifact(path=path, sha256=sha) for path, sha in zip(paths, digests, strict=True)]


def render_checksums(artifacts: Sequence[Artifact]) -> str:
    """Render the checksums block; ``''`` when there are no artifacts."""
    if not artifacts:
        return ''
    lines = ['## Checksums', 'sha256', '```']
    lines.extend(f'{a.sha256}  {a.basename}' for a in artifacts)
    lines.append('```')
    return '\n'.join(lines)


async def checksum(paths: Sequence[Path]) -> str:
    """Hash ``paths`` and render the checksums block."""
    return render_checksums(await compute_checksums(paths))


__all__ = [
    'Artifact',
    'checksum',
    'compute_checksums',
    'compute_sha256',
    'render_checksums',
    'resolve_paths',
]
