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

"""Candidate discovery — finds files that may contain a dynamic tmpdir join.

Primary strategy: ripgrep pre-filter (textual superset of real matches)
Fallback: recursive directory walk over the configured source extensions
Records the candidate source ("ripgrep" or "directory") for the report.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Optional

from tmpguard.config import GuardConfig

logger = logging.getLogger(__name__)

# Literal token every match contains (the matcher pre-check requires it too).
# Comments may sit between path.join( and os.tmpdir(), so nothing stricter.
PREFILTER_PATTERN = "os.tmpdir"

# Globs ripgrep excludes up front; file_filter.should_skip still applies after.
PREFILTER_EXCLUDE_GLOBS = (
    "**/*.test.ts",
    "**/*.test.tsx",
    "**/*.e2e.ts",
    "**/*.e2e.tsx",
    "**/*.d.ts",
)


def _build_rg_command(root: Path, config: GuardConfig) -> list[str]:
    cmd = [
        config.ripgrep_binary,
        "--files-with-matches",
        "--no-messages",
        # gitignore rules must not hide files the directory walk would scan
        "--no-ignore",
        "--fixed-strings",
    ]
    for ext in config.source_extensions:
        cmd += ["--glob", f"*{ext}"]
    for glob in PREFILTER_EXCLUDE_GLOBS:
        cmd += ["--glob", f"!{glob}"]
    for name in config.ignored_dir_names:
        cmd += ["--glob", f"!{name}"]
    cmd += [PREFILTER_PATTERN, str(root)]
    return cmd


def parse_path_list(stdout: str) -> set[Path]:
    """Turn ripgrep's one-path-per-line output into a set of absolute paths."""
    paths: set[Path] = set()
    for line in stdout.splitlines():
        line = line.strip()
        if line:
            paths.add(Path(os.path.abspath(line)))
    return paths


def prefilter_with_ripgrep(root: Path, config: GuardConfig) -> Optional[set[Path]]:
    """Ask ripgrep which files under root textually look like a tmpdir join.

    Exit status 0 lists matches, 1 means no matches. Returns None when rg
    is missing, times out, or exits with any other status.
    """
    try:
        result = subprocess.run(
            _build_rg_command(root, config),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=config.prefilter_timeout,
        )
    except FileNotFoundError:
        logger.debug("%s not found in PATH", config.ripgrep_binary)
        return None
    except subprocess.TimeoutExpired:
        logger.warning("ripgrep pre-filter timed out on %s", root)
        return None
    except OSError as e:
        logger.debug("ripgrep could not be started: %s", e)
        return None

    if result.returncode == 1:
        return set()
    if result.returncode != 0:
        logger.debug("ripgrep exited with status %d: %s", result.returncode, result.stderr)
        return None
    return parse_path_list(result.stdout)


def _should_ignore(entry: Path, config: GuardConfig) -> bool:
    return entry.name in config.ignored_dir_names or entry.name.startswith(".")


def list_source_files(directory: Path, config: GuardConfig) -> list[Path]:
    """Recursively collect source files under directory.

    Skips ignored directories, hidden entries and symlinks.
    """
    files: list[Path] = []
    for entry in sorted(directory.iterdir()):
        if _should_ignore(entry, config) or entry.is_symlink():
            continue
        if entry.is_dir():
            files.extend(list_source_files(entry, config))
        elif entry.is_file() and entry.name.endswith(tuple(config.source_extensions)):
            files.append(entry)
    return files


def discover_candidates(root: Path, config: GuardConfig) -> tuple[list[Path], str]:
    """Discover candidate files under one runtime root.

    Returns:
        tuple of (files, candidate_source) where candidate_source is
        "ripgrep" or "directory". Files are absolute and sorted.
    """
    if config.use_prefilter:
        prefiltered = prefilter_with_ripgrep(root, config)
        if prefiltered is not None:
            logger.info("Using ripgrep pre-filter for %s (%d candidates)", root, len(prefiltered))
            return sorted(prefiltered), "ripgrep"
        logger.info("ripgrep unavailable, falling back to directory walk for %s", root)

    files = list_source_files(root, config)
    logger.info("Using directory walk for %s (%d files)", root, len(files))
    return files, "directory"
