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

"""Semantic Versioning 2.0.0 parsing and precedence.

Pure module: no I/O, no logging.

Tags are accepted the way ``semver.valid()`` accepts them: surrounding
whitespace is ignored and a single leading ``v`` is allowed, so ``v1.2.3``
and ``1.2.3`` parse to the same version. Anything else (``latest``,
``1.2``, ``v01.2.3``, ``release-1.2.3``) is not a version.

Precedence::

    1.0.0-alpha < 1.0.0-alpha.1 < 1.0.0-alpha.beta < 1.0.0-beta
        < 1.0.0-beta.2 < 1.0.0-beta.11 < 1.0.0-rc.1 < 1.0.0

Build metadata (``+build.5``) is kept but ignored for ordering.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass

_NUM = r'0|[1-9]\d*'
_PRE_ID = r'(?:0|[1-9]\d*|\d*[a-zA-Z-][a-zA-Z0-9-]*)'
_BUILD_ID = r'[0-9A-Za-z-]+'

SEMVER_PATTERN: re.Pattern[str] = re.compile(
    rf'^v?(?P<major>{_NUM})\.(?P<minor>{_NUM})\.(?P<patch>{_NUM})'
    rf'(?:-(?P<prerelease>{_PRE_ID}(?:\.{_PRE_ID})*))?'
    rf'(?:\+(?P<build>{_BUILD_ID}(?:\.{_BUILD_ID})*))?$',
    re.ASCII,
)

# Longer strings are rejected outright.
MAX_LENGTH = 256


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class SemVer:
    """A parsed semantic version.

    Attributes:
        major: Major version number.
        minor: Minor version number.
        patch: Patch version number.
        prerelease: Dot-separated pre-release identifiers.
        build: Dot-separated build metadata identifiers.
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> SemVer | None:
        """Parse ``text`` as a semantic version, or return ``None``."""
        if len(text) > MAX_LENGTH:
            return None
        match = SEMVER_PATTERN.match(text.strip())
        if match is None:
            return None
        prerelease = match.group('prerelease')
        build = match.group('build')
        return cls(
            major=int(match.group('major')),
            minor=int(match.group('minor')),
            patch=int(match.group('patch')),
            prerelease=tuple(prerelease.split('.')) if prerelease else (),
            build=tuple(build.split('.')) if build else (),
        )

    def _precedence_key(self) -> tuple[object, ...]:
        # A release sorts above all of its pre-releases; numeric identifiers
        # sort below alphanumeric ones and compare numerically.
        if not self.prerelease:
            pre: tuple[object, ...] = (1,)
        else:
            pre = (0, tuple((0, int(p), '') if p.isdigit() else (1, 0, p) for p in self.prerelease))
        return (self.major, self.minor, self.patch, pre)

    def __eq__(self, other: object) -> bool:
        """Compare by precedence; build metadata is ignored."""
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._precedence_key() == other._precedence_key()

    def __lt__(self, other: object) -> bool:
        """Compare by precedence; build metadata is ignored."""
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._precedence_key() < other._precedence_key()

    def __hash__(self) -> int:
        """Hash consistently with :meth:`__eq__`."""
        return hash(self._precedence_key())

    def __str__(self) -> str:
        """Return the canonical form, without any ``v`` prefix."""
        text = f'{self.major}.{self.minor}.{self.patch}'
        if self.prerelease:
            text += '-' + '.'.join(self.prerelease)
        if self.build:
            text += '+' + '.'.join(self.build)
        return text


__all__ = [
    'SEMVER_PATTERN',
    'SemVer',
]
