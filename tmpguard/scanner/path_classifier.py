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

"""Syntactic predicates over tree-sitter TypeScript nodes.

Matching is by identifier text only: `path` and `os` are recognized as
written, never resolved to their imports. `import nodePath from "node:path"`
followed by `nodePath.join(...)` is therefore not detected.
"""

from __future__ import annotations

from typing import Optional

from tree_sitter import Node


def _node_text(node: Node) -> str:
    return node.text.decode("utf-8", errors="replace") if node.text else ""


def is_identifier_named(node: Optional[Node], name: str) -> bool:
    """True if node is a plain identifier spelled exactly `name`."""
    return node is not None and node.type == "identifier" and _node_text(node) == name


def _is_member_access(node: Optional[Node], receiver: str, member: str) -> bool:
    if node is None or node.type != "member_expression":
        return False
    prop = node.child_by_field_name("property")
    if prop is None or prop.type != "property_identifier" or _node_text(prop) != member:
        return False
    return is_identifier_named(node.child_by_field_name("object"), receiver)


def call_arguments(call: Node) -> Optional[list[Node]]:
    """Return the argument expressions of a call_expression.

    Comments between arguments are dropped. Tagged templates (path.join`x`)
    also parse as call_expression but take no argument list; they yield None.
    """
    args = call.child_by_field_name("arguments")
    if args is None or args.type != "arguments":
        return None
    return [child for child in args.named_children if child.type != "comment"]


def is_path_join_call(expr: Optional[Node]) -> bool:
    """True if expr is the callee `path.join`."""
    return _is_member_access(expr, "path", "join")


def is_os_tmpdir_call(node: Optional[Node]) -> bool:
    """True if node is `os.tmpdir()` called with no arguments."""
    if node is None or node.type != "call_expression":
        return False
    args = call_arguments(node)
    if args is None or args:
        return False
    return _is_member_access(node.child_by_field_name("function"), "os", "tmpdir")


def is_dynamic_template_segment(node: Optional[Node]) -> bool:
    """True if node is a template string with at least one ${...} substitution.

    `openclaw-fixed` written with backticks is static and does not count.
    """
    if node is None or node.type != "template_string":
        return False
    return any(child.type == "template_substitution" for child in node.children)
