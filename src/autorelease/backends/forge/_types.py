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

"""Value types returned by forge backends."""

from __future__ import annotations

import re
from dataclasses import dataclass

# Upload URLs are RFC 6570 templates, e.g. ".../assets{?name,label}".
_URI_TEMPLATE_SUFFIX = re.compile(r'\{[^}]*\}$')


@dataclass(frozen=True)
class ReleaseInfo:
    """A release object on the forge.

    Attributes:
        id: Numeric release ID.
        tag: Tag the release is attached to.
        upload_url: Asset upload URL as returned by the API (may be a
            URI template).
        html_url: Web URL of the release page.
    """

    id: int
    tag: str
    upload_url: str = ''
    html_url: str = ''


def strip_uri_template(url: str) -> str:
    """Remove a trailing ``{?name,label}`` style template from ``url``."""
    return _URI_TEMPLATE_SUFFIX.sub('', url)


__all__ = [
    'ReleaseInfo',
    'strip_uri_template',
]
