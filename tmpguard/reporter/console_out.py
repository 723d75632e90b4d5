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

"""Rich terminal output for temp path guard results.

A failing run names every offending file and line so all occurrences can
be fixed in one pass. Per-root candidate details appear with --verbose.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tmpguard.models.report import Offender, ParseFailure, ScanReport


def _make_console() -> Console:
    """Console with soft wrap. Uses live terminal size."""
    return Console(soft_wrap=True)


console = _make_console()


def _safe_print(*args: Any, **kwargs: Any) -> None:
    """Print without cropping long paths."""
    kwargs.setdefault("crop", False)
    kwargs.setdefault("overflow", "fold")
    console.print(*args, **kwargs)


# ── Verdict icons ──────────────────────────────────────────────────

ICON_PASS = "[bold green][OK][/bold green]"
ICON_DANGER = "[bold red][ALERT][/bold red]"
ICON_INFO = "[bold blue][INFO][/bold blue]"

_FIX_HINT = (
    "Create temp directories with fs.mkdtemp(path.join(os.tmpdir(), \"prefix-\")) "
    "so the OS picks an unpredictable name, instead of interpolating "
    "runtime values into a fixed location."
)


def _offender_table(offenders: list[Offender]) -> Table:
    table = Table(show_header=True, header_style="bold", expand=True, safe_box=True)
    table.add_column("File", style="red", overflow="fold")
    table.add_column("Line", justify="right", width=6)
    table.add_column("Code", overflow="fold")
    for offender in offenders:
        if not offender.occurrences:
            table.add_row(offender.file, "", "")
            continue
        for occ in offender.occurrences:
            table.add_row(offender.file, str(occ.line), occ.source_line)
    return table


def _parse_failure_table(failures: list[ParseFailure]) -> Table:
    table = Table(show_header=True, header_style="bold", expand=True, safe_box=True)
    table.add_column("File", style="yellow", overflow="fold")
    table.add_column("Problem", overflow="fold")
    for failure in failures:
        table.add_row(failure.file, failure.message)
    return table


def print_roots(report: ScanReport) -> None:
    """Show how each runtime root's candidate set was produced."""
    table = Table(title="Runtime roots", show_header=True, header_style="bold", safe_box=True)
    table.add_column("Root")
    table.add_column("Candidates from")
    table.add_column("Count", justify="right")
    for root in report.roots:
        table.add_row(root.root, root.candidate_source, str(root.candidate_count))
    _safe_print(table)


def print_scan_report(report: ScanReport, verbose: bool = False) -> None:
    """Print the pass/fail verdict and every offender."""
    if verbose:
        print_roots(report)

    summary = (
        f"{report.files_scanned} files checked, "
        f"{report.files_skipped} test/fixture files skipped"
    )

    if report.passed:
        body = (
            f"  {ICON_PASS}  [bold green]NO DYNAMIC TEMP PATHS[/bold green]\n\n"
            "  No runtime source joins os.tmpdir() with an interpolated "
            f"template segment.\n\n  [dim]{summary}[/dim]"
        )
        _safe_print(
            Panel(body, border_style="green", title="[bold green]tmpguard[/bold green]",
                  expand=True, safe_box=True)
        )
        return

    lines = [f"  {ICON_DANGER}  [bold red]PREDICTABLE TEMP PATHS FOUND[/bold red]\n"]
    if report.offenders:
        lines.append(
            f"  {len(report.offenders)} file(s) build a path under os.tmpdir() "
            "from a runtime-interpolated template. Anyone who can guess that "
            "value can pre-create or symlink the path before it is used."
        )
        lines.append(f"\n  [dim]{_FIX_HINT}[/dim]")
    if report.parse_failures:
        lines.append(
            f"\n  {ICON_INFO}  {len(report.parse_failures)} file(s) could not be "
            "parsed and therefore could not be verified."
        )
    lines.append(f"\n  [dim]{summary}[/dim]")

    _safe_print(
        Panel("\n".join(lines), border_style="red", title="[bold red]tmpguard[/bold red]",
              expand=True, safe_box=True)
    )
    if report.offenders:
        _safe_print(_offender_table(report.offenders))
    if report.parse_failures:
        _safe_print(_parse_failure_table(report.parse_failures))


def print_check_result(offenders: list[Offender], failures: list[ParseFailure]) -> None:
    """Compact output for `tmpguard check`."""
    for offender in offenders:
        for occ in offender.occurrences:
            _safe_print(f"{ICON_DANGER} {offender.file}:{occ.line}  {occ.source_line}")
    for failure in failures:
        _safe_print(f"{ICON_INFO} {failure.message}")
    if not offenders and not failures:
        _safe_print(f"{ICON_PASS} no dynamic temp paths")
