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

"""Tests for autorelease.actions."""

from __future__ import annotations

import re
from pathlib import Path

import pytest
from autorelease.actions import (
    escape_data,
    export_variable,
    group,
    is_github_actions,
    set_failed,
    set_output,
    write_outputs,
)
from autorelease.logging import configure_logging
from autorelease.release import RunResult

configure_logging(quiet=True)

_HEREDOC = re.compile(r'^(?P<name>[^<\n]+)<<(?P<delim>ghadelimiter_[0-9a-f-]+)\n(?P<value>.*?)\n(?P=delim)$', re.M | re.S)


def _read_pairs(path: Path) -> dict[str, str]:
    return {m.group('name'): m.group('value') for m in _HEREDOC.finditer(path.read_text(encoding='utf-8'))}


class TestIsGithubActions:
    """Tests for is_github_actions()."""

    def test_detection(self) -> None:
        """Only GITHUB_ACTIONS=true counts."""
        assert is_github_actions({'GITHUB_ACTIONS': 'true'}) is True
        assert is_github_actions({'GITHUB_ACTIONS': 'false'}) is False
        assert is_github_actions({}) is False


class TestOutputs:
    """Tests for step outputs and exported variables."""

    def test_set_output_appends(self, tmp_path: Path) -> None:
        """Outputs are appended in heredoc form."""
        out = tmp_path / 'output'
        out.write_text('existing<<EOF\nkeep\nEOF\n', encoding='utf-8')
        set_output('upload_url', 'https://uploads.github.com/x{?name,label}', env={'GITHUB_OUTPUT': str(out)})
        text = out.read_text(encoding='utf-8')
        if not text.startswith('existing<<EOF\nkeep\nEOF\n'):
            raise AssertionError('Existing outputs must be kept')
        if _read_pairs(out) != {'upload_url': 'https://uploads.github.com/x{?name,label}'}:
            raise AssertionError(f'Unexpected outputs: {text!r}')

    def test_multiline_value(self, tmp_path: Path) -> None:
        """Values may span lines."""
        out = tmp_path / 'output'
        set_output('body', 'line 1\nline 2', env={'GITHUB_OUTPUT': str(out)})
        if _read_pairs(out) != {'body': 'line 1\nline 2'}:
            raise AssertionError(f'Unexpected outputs: {out.read_text()!r}')

    def test_no_output_file(self) -> None:
        """Outside of Actions outputs are only logged."""
        set_output('automatic_releases_tag', 'v1.0.0', env={})

    def test_write_outputs(self, tmp_path: Path) -> None:
        """A run result becomes two outputs and one variable."""
        out = tmp_path / 'output'
        env_file = tmp_path / 'env'
        result = RunResult(release_tag='latest', upload_url='https://uploads.github.com/u')
        write_outputs(result, env={'GITHUB_OUTPUT': str(out), 'GITHUB_ENV': str(env_file)})
        if _read_pairs(out) != {'automatic_releases_tag': 'latest', 'upload_url': 'https://uploads.github.com/u'}:
            raise AssertionError(f'Unexpected outputs: {out.read_text()!r}')
        if _read_pairs(env_file) != {'AUTOMATIC_RELEASES_TAG': 'latest'}:
            raise AssertionError(f'Unexpected env: {env_file.read_text()!r}')

    def test_export_variable(self, tmp_path: Path) -> None:
        """Variables go to GITHUB_ENV."""
        env_file = tmp_path / 'env'
        export_variable('FOO', 'bar', env={'GITHUB_ENV': str(env_file)})
        if _read_pairs(env_file) != {'FOO': 'bar'}:
            raise AssertionError(f'Unexpected env: {env_file.read_text()!r}')


class TestWorkflowCommands:
    """Tests for workflow commands."""

    def test_escape_data(self) -> None:
        """Percent, CR and LF are escaped."""
        assert escape_data('50%\r\ndone') == '50%25%0D%0Adone'

    def test_group_in_actions(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Groups are folded under Actions."""
        with group('Creating release', env={'GITHUB_ACTIONS': 'true'}):
            print('inside')  # noqa: T201 - test output
        assert capsys.readouterr().out == '::group::Creating release\ninside\n::endgroup::\n'

    def test_group_closed_on_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        """The group is closed even when the block fails."""
        with pytest.raises(RuntimeError):
            with group('Uploading', env={'GITHUB_ACTIONS': 'true'}):
                raise RuntimeError('boom')
        assert capsys.readouterr().out.endswith('::endgroup::\n')

    def test_group_outside_actions(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Outside of Actions nothing is printed."""
        with group('Creating release', env={}):
            pass
        assert capsys.readouterr().out == ''

    def test_set_failed(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Failures become ::error:: annotations under Actions."""
        set_failed('[AR-TAG-NOT-FOUND] no tag\nsecond line', env={'GITHUB_ACTIONS': 'true'})
        assert capsys.readouterr().out == '::error::[AR-TAG-NOT-FOUND] no tag%0Asecond line\n'
        set_failed('quiet', env={})
        assert capsys.readouterr().out == ''
