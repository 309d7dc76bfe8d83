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

"""Tests for autorelease.artifacts."""

from __future__ import annotations

import hashlib
from pathlib import Path

import pytest
from autorelease.artifacts import (
    Artifact,
    checksum,
    compute_checksums,
    compute_sha256,
    render_checksums,
    resolve_paths,
)
from autorelease.errors import E, FileReadError
from autorelease.logging import configure_logging

configure_logging(quiet=True)


@pytest.fixture()
def dist(tmp_path: Path) -> Path:
    """Create a small artifact tree."""
    (tmp_path / 'dist').mkdir()
    (tmp_path / 'dist' / 'app.tar.gz').write_bytes(b'tarball')
    (tmp_path / 'dist' / 'app.whl').write_bytes(b'wheel')
    (tmp_path / 'dist' / 'nested').mkdir()
    (tmp_path / 'dist' / 'nested' / 'notes.txt').write_text('notes')
    (tmp_path / 'a.txt').write_text('x')
    (tmp_path / 'b.txt').write_text('x')
    return tmp_path


class TestResolvePaths:
    """Tests for resolve_paths()."""

    def test_single_pattern(self, dist: Path) -> None:
        """Matches are relative to the root and sorted."""
        paths = resolve_paths(['dist/*'], root=dist)
        if paths != [dist / 'dist' / 'app.tar.gz', dist / 'dist' / 'app.whl']:
            raise AssertionError(f'Unexpected paths: {paths}')

    def test_directories_excluded(self, dist: Path) -> None:
        """Only files are artifacts."""
        paths = resolve_paths(['dist/*'], root=dist)
        if any(p.is_dir() for p in paths):
            raise AssertionError(f'Directory matched: {paths}')

    def test_directory_pattern_expands(self, dist: Path) -> None:
        """A bare directory stands for every file beneath it."""
        for pattern in ('dist', 'dist/'):
            paths = resolve_paths([pattern], root=dist)
            if paths != [
                dist / 'dist' / 'app.tar.gz',
                dist / 'dist' / 'app.whl',
                dist / 'dist' / 'nested' / 'notes.txt',
            ]:
                raise AssertionError(f'{pattern!r} did not expand to its files: {paths}')

    def test_directory_pattern_absolute(self, dist: Path) -> None:
        """Absolute directory patterns expand too."""
        paths = resolve_paths([str(dist / 'dist' / 'nested')], root=dist / 'dist')
        if paths != [dist / 'dist' / 'nested' / 'notes.txt']:
            raise AssertionError(f'Unexpected paths: {paths}')

    def test_recursive_glob(self, dist: Path) -> None:
        """** crosses directories."""
        paths = resolve_paths(['dist/**/*.txt'], root=dist)
        if paths != [dist / 'dist' / 'nested' / 'notes.txt']:
            raise AssertionError(f'Unexpected paths: {paths}')

    def test_overlapping_patterns_deduplicated(self, dist: Path) -> None:
        """A file matched twice is listed once, at its first position."""
        paths = resolve_paths(['dist/*.whl', 'dist/*', '*.txt', 'a.txt'], root=dist)
        if paths != [
            dist / 'dist' / 'app.whl',
            dist / 'dist' / 'app.tar.gz',
            dist / 'a.txt',
            dist / 'b.txt',
        ]:
            raise AssertionError(f'Unexpected paths: {paths}')

    def test_no_match_is_not_fatal(self, dist: Path) -> None:
        """A pattern with no matches contributes nothing."""
        paths = resolve_paths(['missing/*.zip', 'a.txt'], root=dist)
        if paths != [dist / 'a.txt']:
            raise AssertionError(f'Unexpected paths: {paths}')

    def test_blank_patterns_skipped(self, dist: Path) -> None:
        """Blank lines from the files input are ignored."""
        if resolve_paths(['', '   '], root=dist) != []:
            raise AssertionError('Expected no paths')

    def test_absolute_pattern(self, dist: Path) -> None:
        """Absolute patterns ignore the root."""
        paths = resolve_paths([str(dist / 'a.txt')], root=dist / 'dist')
        if paths != [dist / 'a.txt']:
            raise AssertionError(f'Unexpected paths: {paths}')


class TestChecksums:
    """Tests for checksum computation and rendering."""

    @pytest.mark.asyncio
    async def test_same_content_same_digest(self, dist: Path) -> None:
        """Files with identical bytes share a digest but keep their names."""
        artifacts = await compute_checksums([dist / 'a.txt', dist / 'b.txt'])
        expected = hashlib.sha256(b'x').hexdigest()
        if [a.sha256 for a in artifacts] != [expected, expected]:
            raise AssertionError(f'Unexpected digests: {artifacts}')
        if [a.basename for a in artifacts] != ['a.txt', 'b.txt']:
            raise AssertionError(f'Unexpected names: {artifacts}')

    @pytest.mark.asyncio
    async def test_stable_across_runs(self, dist: Path) -> None:
        """Hashing the same file twice gives the same digest."""
        first = await compute_sha256(dist / 'dist' / 'app.whl')
        second = await compute_sha256(dist / 'dist' / 'app.whl')
        if first != second or first != hashlib.sha256(b'wheel').hexdigest():
            raise AssertionError(f'Unstable digest: {first} vs {second}')

    @pytest.mark.asyncio
    async def test_large_file(self, tmp_path: Path) -> None:
        """Files larger than one read chunk hash over all their bytes."""
        data = b'0123456789abcdef' * (1024 * 160)
        path = tmp_path / 'big.bin'
        path.write_bytes(data)
        if await compute_sha256(path) != hashlib.sha256(data).hexdigest():
            raise AssertionError('Digest of a multi-chunk file is wrong')

    @pytest.mark.asyncio
    async def test_unreadable_file_raises(self, tmp_path: Path) -> None:
        """A resolved file that vanished is fatal."""
        with pytest.raises(FileReadError) as exc_info:
            await compute_checksums([tmp_path / 'gone.zip'])
        if exc_info.value.code != E.ARTIFACT_READ_FAILED:
            raise AssertionError(f'Unexpected code {exc_info.value.code}')

    def test_render(self) -> None:
        """Heading, algorithm line, fenced digest lines."""
        md = render_checksums([
            Artifact(path=Path('/w/dist/a.txt'), sha256='aa'),
            Artifact(path=Path('/w/dist/b.txt'), sha256='bb'),
        ])
        if md != '## Checksums\nsha256\n```\naa  a.txt\nbb  b.txt\n```':
            raise AssertionError(f'Unexpected markdown:\n{md}')

    def test_render_nothing(self) -> None:
        """No artifacts, no checksum section."""
        if render_checksums([]) != '':
            raise AssertionError('Expected empty output')

    @pytest.mark.asyncio
    async def test_checksum_convenience(self, dist: Path) -> None:
        """checksum() hashes and renders."""
        md = await checksum([dist / 'a.txt'])
        if f'{hashlib.sha256(b"x").hexdigest()}  a.txt' not in md:
            raise AssertionError(f'Unexpected markdown:\n{md}')
        if await checksum([]) != '':
            raise AssertionError('Expected empty output for no paths')
