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

"""tmpguard CLI — Typer entry point.

Commands:
- tmpguard scan [REPO_ROOT]  — scan runtime roots, fail on dynamic temp paths
- tmpguard check FILE...     — run the matcher on individual files
- tmpguard version           — print the version
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from tmpguard import __version__
from tmpguard.config import load_config
from tmpguard.models.report import Offender, ParseFailure
from tmpguard.reporter.console_out import console, print_check_result, print_scan_report
from tmpguard.reporter.json_out import to_canonical_json, write_report
from tmpguard.scanner.file_filter import should_skip
from tmpguard.scanner.pipeline import scan as run_scan
from tmpguard.scanner.ts_matcher import SourceParseError, find_dynamic_tmpdir_joins

app = typer.Typer(
    name="tmpguard",
    help=(
        "tmpguard: blocks path.join(os.tmpdir(), `...${value}`) in runtime TypeScript. "
        "Run 'tmpguard <command> --help' for flags."
    ),
    add_completion=False,
)

logger = logging.getLogger("tmpguard")


def _configure_logging(verbose: bool, quiet: bool) -> None:
    if quiet:
        logging.basicConfig(level=logging.ERROR)
    elif verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO)


@app.command()
def scan(
    path: str = typer.Argument(".", help="Repository root (default: current directory)"),
    roots: Optional[list[str]] = typer.Option(
        None, "--root", "-r", help="Runtime root to scan, relative to the repository (repeatable)"
    ),
    config_file: Optional[str] = typer.Option(
        None, "--config", help="Path to a config file (default: <repo>/.tmpguard.yaml)"
    ),
    no_prefilter: bool = typer.Option(False, "--no-prefilter", help="Skip ripgrep, walk every directory"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Also write the JSON report to this file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show per-root candidate details"),
    output_json: bool = typer.Option(False, "--json", help="Output raw JSON to stdout (for CI)"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress all output except errors"),
) -> None:
    """Scan runtime source roots for dynamic temp paths.

    Exits 1 if any file outside test/fixture code joins os.tmpdir() with
    an interpolated template segment, or if a candidate cannot be parsed.
    """
    _configure_logging(verbose, quiet)

    repo_root = Path(path).resolve()

    if not repo_root.exists():
        console.print(f"[red]Error: Directory not found: {repo_root}[/red]")
        raise typer.Exit(code=1)

    if not repo_root.is_dir():
        console.print(f"[red]Error: Not a directory: {repo_root}[/red]")
        raise typer.Exit(code=1)

    try:
        config = load_config(repo_root, Path(config_file).resolve() if config_file else None)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    overrides: dict = {}
    if roots:
        overrides["runtime_roots"] = list(roots)
    if no_prefilter:
        overrides["use_prefilter"] = False
    if overrides:
        config = config.model_copy(update=overrides)

    try:
        report = run_scan(repo_root, config)
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Error: scan aborted, could not read source: {e}[/red]")
        raise typer.Exit(code=1)

    if output:
        write_report(report, Path(output))

    if output_json:
        print(to_canonical_json(report), end="")
    elif not quiet:
        print_scan_report(report, verbose=verbose)

    if not report.passed:
        raise typer.Exit(code=1)


@app.command()
def check(
    files: list[str] = typer.Argument(..., help="TypeScript files to check"),
    include_tests: bool = typer.Option(
        False, "--include-tests", help="Also check files that match the test/fixture skip patterns"
    ),
) -> None:
    """Check individual files for dynamic temp paths.

    Useful from pre-commit hooks. Exits 1 on any match or parse failure.
    """
    offenders: list[Offender] = []
    failures: list[ParseFailure] = []

    for name in files:
        display = Path(name).as_posix()
        if not include_tests and should_skip(display):
            logger.debug("Skipping test/fixture file %s", display)
            continue
        try:
            source = Path(name).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            console.print(f"[red]Error: could not read {display}: {e}[/red]")
            raise typer.Exit(code=1)
        try:
            occurrences = find_dynamic_tmpdir_joins(source, display)
        except SourceParseError as e:
            failures.append(ParseFailure(file=display, message=str(e)))
            continue
        if occurrences:
            offenders.append(Offender(file=display, occurrences=occurrences))

    print_check_result(offenders, failures)

    if offenders or failures:
        raise typer.Exit(code=1)


@app.command()
def version() -> None:
    """Show the tmpguard version."""
    console.print(f"tmpguard v{__version__}")


if __name__ == "__main__":
    app()
