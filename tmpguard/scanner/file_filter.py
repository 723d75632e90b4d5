# tmpguard — Predictable Temp Path Guard
# Copyright (C) 2026 tmpguard Project Contributors
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.

"""Test/fixture exemption for runtime source scanning.

Files matching any skip pattern are never reported, whatever they contain.
Patterns accept both forward- and back-slash separators so the same
relative path check works on POSIX and Windows checkouts.
"""

from __future__ import annotations

import re

SKIP_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\.test\.tsx?$"),
    re.compile(r"\.test-helpers\.tsx?$"),
    re.compile(r"\.test-utils\.tsx?$"),
    re.compile(r"\.e2e\.tsx?$"),
    re.compile(r"\.d\.ts$"),
    re.compile(r"(?:^|[\\/])(?:__tests__|tests)[\\/]"),
    # test-helpers.ts, sessions-test-helpers.ts, test-helpers.mock.ts
    re.compile(r"(?:^|[\\/])[^\\/]*test-helpers(?:\.[^\\/]+)?\.ts$"),
)


def should_skip(relative_path: str) -> bool:
    """Return True if the path is test, helper, e2e or declaration code."""
    return any(pattern.search(relative_path) for pattern in SKIP_PATTERNS)
