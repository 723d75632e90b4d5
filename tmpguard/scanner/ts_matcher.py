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

"""Structural matcher for path.join(os.tmpdir(), `...${x}`) in TypeScript.

A call matches when:
- its callee is `path.join`
- it has at least two arguments
- the first argument is a zero-argument `os.tmpdir()` call
- any later argument is a template string with a ${...} substitution

Matching runs on the tree-sitter syntax tree, so text inside comments and
string literals never matches. Sources lacking the three required tokens
are rejected before parsing.
"""

from __future__ import annotations

import functools
import logging
from typing import Iterator

import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser

from tmpguard.models.report import TempPathOccurrence
from tmpguard.scanner.path_classifier import (
    call_arguments,
    is_dynamic_template_segment,
    is_os_tmpdir_call,
    is_path_join_call,
)

logger = logging.getLogger(__name__)

# Suffixes parsed with the JSX-aware grammar; everything else uses plain TypeScript.
JSX_SUFFIXES = (".tsx", ".jsx")

_PRECHECK_TOKENS = ("path.join", "os.tmpdir", "`")


class SourceParseError(ValueError):
    """Raised when a source file has syntax errors and no match was found."""

    def __init__(self, file_path: str, line: int):
        self.file_path = file_path
        self.line = line
        super().__init__(f"{file_path}:{line}: syntax error, file cannot be verified")


@functools.lru_cache(maxsize=None)
def _get_parser(dialect: str) -> Parser:
    if dialect == "tsx":
        language = Language(tsts.language_tsx())
    else:
        language = Language(tsts.language_typescript())
    return Parser(language)


def dialect_for(file_path: str) -> str:
    """Return "tsx" for JSX-flavored files, "typescript" otherwise."""
    return "tsx" if file_path.lower().endswith(JSX_SUFFIXES) else "typescript"


def might_contain_dynamic_tmpdir_join(source: str) -> bool:
    """Cheap textual check; False means a match is impossible."""
    return all(token in source for token in _PRECHECK_TOKENS)


def is_dynamic_tmpdir_join(node: Node) -> bool:
    """Apply the full call shape check to a single node."""
    if node.type != "call_expression":
        return False
    if not is_path_join_call(node.child_by_field_name("function")):
        return False
    args = call_arguments(node)
    if args is None or len(args) < 2:
        return False
    if not is_os_tmpdir_call(args[0]):
        return False
    return any(is_dynamic_template_segment(arg) for arg in args[1:])


def _walk(root: Node) -> Iterator[Node]:
    """Pre-order depth-first traversal without recursion."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def _first_error_line(root: Node) -> int:
    for node in _walk(root):
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
    return 1


def _iter_matches(source: str, file_path: str) -> Iterator[Node]:
    tree = _get_parser(dialect_for(file_path)).parse(source.encode("utf-8"))
    root = tree.root_node
    found = False
    for node in _walk(root):
        if is_dynamic_tmpdir_join(node):
            found = True
            yield node
    if not found and root.has_error:
        raise SourceParseError(file_path, _first_error_line(root))


def has_dynamic_tmpdir_join(source: str, file_path: str = "fixture.ts") -> bool:
    """Return True if source builds a temp path from a dynamic template.

    Stops at the first match. Raises SourceParseError when nothing matched
    and the source has syntax errors.
    """
    if not might_contain_dynamic_tmpdir_join(source):
        return False
    for _ in _iter_matches(source, file_path):
        return True
    return False


def find_dynamic_tmpdir_joins(
    source: str, file_path: str = "fixture.ts"
) -> list[TempPathOccurrence]:
    """Return every matching call with its location, in source order."""
    if not might_contain_dynamic_tmpdir_join(source):
        return []

    # tree-sitter rows end at "\n" only; splitlines() also breaks on \f and \u2028
    lines = source.split("\n")
    occurrences: list[TempPathOccurrence] = []
    for node in _iter_matches(source, file_path):
        row, col = node.start_point
        source_line = lines[row].strip() if row < len(lines) else ""
        occurrences.append(TempPathOccurrence(line=row + 1, col=col, source_line=source_line))
    logger.debug("%s: %d dynamic tmpdir join(s)", file_path, len(occurrences))
    return occurrences
