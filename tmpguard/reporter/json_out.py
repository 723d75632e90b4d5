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

"""Canonical JSON output for scan reports.

Produces deterministic JSON output:
- Sorted keys
- 2-space indentation
- Trailing newline
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from tmpguard.models.report import ScanReport

logger = logging.getLogger(__name__)


def report_to_dict(report: ScanReport) -> dict[str, Any]:
    """Dump the report with the derived verdict fields included."""
    data = report.model_dump()
    data["passed"] = report.passed
    data["offender_paths"] = report.offender_paths
    return data


def to_canonical_json(report: ScanReport) -> str:
    """Convert a report to its canonical JSON string.

    json.dumps escapes control characters inside strings, so the only line
    breaks in the output are the LF separators added by indent.
    """
    return json.dumps(report_to_dict(report), sort_keys=True, indent=2, ensure_ascii=False) + "\n"


def write_report(report: ScanReport, output_path: Path) -> None:
    """Write scan report as canonical JSON to file."""
    content = to_canonical_json(report)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8", newline="\n")
    logger.info("Wrote report to %s", output_path)
