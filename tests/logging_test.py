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

"""Tests for autorelease.logging module."""

from __future__ import annotations

import logging

import pytest
from autorelease.logging import configure_logging, get_logger


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_default_level_is_info(self) -> None:
        """Default logging level should be INFO."""
        configure_logging()
        assert logging.root.level == logging.INFO

    def test_verbose_sets_debug(self) -> None:
        """Verbose flag should set DEBUG level."""
        configure_logging(verbose=True)
        assert logging.root.level == logging.DEBUG

    def test_quiet_sets_warning(self) -> None:
        """Quiet flag should set WARNING level."""
        configure_logging(quiet=True)
        assert logging.root.level == logging.WARNING

    def test_quiet_wins_over_verbose(self) -> None:
        """Quiet takes precedence."""
        configure_logging(verbose=True, quiet=True)
        assert logging.root.level == logging.WARNING

    def test_httpx_is_quieted(self) -> None:
        """httpx request logs are suppressed below WARNING."""
        configure_logging(verbose=True)
        assert logging.getLogger('httpx').level == logging.WARNING

    def test_json_log_does_not_crash(self) -> None:
        """JSON log mode should configure without errors."""
        configure_logging(json_log=True)
        log = get_logger()
        log.info('test_json', key='value')
        configure_logging(quiet=True)


class TestGetLogger:
    """Tests for get_logger()."""

    def test_logger_can_log(self) -> None:
        """Logger should be able to emit messages without crashing."""
        configure_logging(quiet=True)
        log = get_logger('test')
        log.info('test message', key='value')
        log.debug('debug message')
        log.warning('warning message')


class TestWorkflowAnnotations:
    """Tests for GitHub Actions annotations of warnings and errors."""

    def test_warning_and_error_annotated(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Warnings and errors are echoed as workflow commands on stdout."""
        configure_logging(quiet=True, env={'GITHUB_ACTIONS': 'true'})
        log = get_logger('autorelease.test_annotations')
        log.warning('commit_comparison_failed', base='v1.0.0', error='boom')
        log.error('glob_no_match', pattern='dist/*.zip')
        out = capsys.readouterr().out
        configure_logging(quiet=True)

        assert '::warning::commit_comparison_failed: base=v1.0.0 error=boom\n' in out
        assert '::error::glob_no_match: pattern=dist/*.zip\n' in out

    def test_message_is_escaped(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Newlines and percent signs cannot break the command."""
        configure_logging(quiet=True, env={'GITHUB_ACTIONS': 'true'})
        get_logger('autorelease.test_escape').error('upload_failed', error='50%\nretry')
        out = capsys.readouterr().out
        configure_logging(quiet=True)

        assert '::error::upload_failed: error=50%25%0Aretry\n' in out

    def test_info_not_annotated(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Info events stay on stderr only."""
        configure_logging(env={'GITHUB_ACTIONS': 'true'})
        get_logger('autorelease.test_info').info('release_published', tag='v1.0.0')
        out = capsys.readouterr().out
        configure_logging(quiet=True)

        assert '::' not in out

    def test_outside_actions(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Without GITHUB_ACTIONS nothing goes to stdout."""
        configure_logging(quiet=True, env={})
        get_logger('autorelease.test_local').error('glob_no_match', pattern='x')
        assert capsys.readouterr().out == ''
