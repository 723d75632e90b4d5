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

"""Pydantic models for the temp-path scan report."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from tmpguard import __version__


class TempPathOccurrence(BaseModel):
    """One path.join(os.tmpdir(), `...${x}`) call inside a file.

    line is 1-based, col is the 0-based byte column of the call.
    """

    line: int
    col: int = 0
    source_line: str = ""


class Offender(BaseModel):
    """A runtime source file containing at least one dynamic tmpdir join."""

    file: str  # repo-relative, POSIX separators
    occurrences: list[TempPathOccurrence] = Field(default_factory=list)


class ParseFailure(BaseModel):
    """A candidate file that could not be parsed cleanly."""

    file: str
    message: str


class RootScan(BaseModel):
    """How the candidate set of one runtime root was produced."""

    root: str
    candidate_source: str = "directory"  # "ripgrep", "directory" or "missing"
    candidate_count: int = 0


class ScanReport(BaseModel):
    """The complete scan result (tmpguard_report.json)."""

    tmpguard_version: str = __version__
    repo_root: str = ""
    scan_timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    roots: list[RootScan] = Field(default_factory=list)
    files_scanned: int = 0
    files_skipped: int = 0
    offenders: list[Offender] = Field(default_factory=list)
    parse_failures: list[ParseFailure] = Field(default_factory=list)

    @property
    def offender_paths(self) -> list[str]:
        """Offending relative paths in root-then-file order."""
        return [o.file for o in self.offenders]

    @property
    def passed(self) -> bool:
        return not self.offenders and not self.parse_failures
