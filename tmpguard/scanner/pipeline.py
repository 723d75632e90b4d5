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

"""Scan pipeline — runtime roots → candidates → exemptions → matcher → report."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from tmpguard.config import GuardConfig
from tmpguard.models.report import Offender, ParseFailure, RootScan, ScanReport
from tmpguard.scanner.coordinator import discover_candidates
from tmpguard.scanner.file_filter import should_skip
from tmpguard.scanner.ts_matcher import SourceParseError, find_dynamic_tmpdir_joins

logger = logging.getLogger(__name__)


def relative_posix(path: Path, repo_root: Path) -> str:
    """Repo-relative path with forward slashes, for reporting and skipping."""
    return Path(os.path.relpath(path, repo_root)).as_posix()


def scan_file(path: Path, relative_path: str) -> Offender | None:
    """Match one candidate file.

    Read errors propagate; an unreadable file cannot pass the guard.
    """
    source = path.read_text(encoding="utf-8")
    occurrences = find_dynamic_tmpdir_joins(source, relative_path)
    if not occurrences:
        return None
    return Offender(file=relative_path, occurrences=occurrences)


def scan(repo_root: Path, config: GuardConfig) -> ScanReport:
    """Scan every configured runtime root under repo_root.

    Offenders are collected in root-then-file order. Files with syntax
    errors are recorded as parse failures and fail the report.
    """
    repo_root = Path(os.path.abspath(repo_root))

    if not repo_root.exists():
        raise FileNotFoundError(f"Repository root does not exist: {repo_root}")

    if not repo_root.is_dir():
        raise NotADirectoryError(f"Repository root is not a directory: {repo_root}")

    report = ScanReport(repo_root=str(repo_root))

    for root in config.runtime_roots:
        abs_root = repo_root / root
        if not abs_root.is_dir():
            logger.warning("Runtime root not found, skipping: %s", abs_root)
            report.roots.append(RootScan(root=root, candidate_source="missing"))
            continue

        files, candidate_source = discover_candidates(abs_root, config)
        report.roots.append(
            RootScan(root=root, candidate_source=candidate_source, candidate_count=len(files))
        )

        for file_path in files:
            relative_path = relative_posix(file_path, repo_root)
            if should_skip(relative_path):
                report.files_skipped += 1
                continue

            report.files_scanned += 1
            try:
                offender = scan_file(file_path, relative_path)
            except SourceParseError as e:
                logger.error("%s", e)
                report.parse_failures.append(ParseFailure(file=relative_path, message=str(e)))
                continue
            if offender is not None:
                logger.debug("Offender: %s", relative_path)
                report.offenders.append(offender)

    logger.info(
        "Scanned %d files (%d skipped): %d offenders, %d parse failures",
        report.files_scanned,
        report.files_skipped,
        len(report.offenders),
        len(report.parse_failures),
    )
    return report
