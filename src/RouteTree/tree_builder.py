"""Fold flat route strings into a nested route tree."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from RouteTree.models import TreeNode, TreeStats
from RouteTree.route_parser import split_route

logger = logging.getLogger(__name__)


def build_tree(routes: Iterable[str]) -> TreeNode:
    """Build a nested dict from a list of slash-delimited routes.

    Shared prefixes share one node and duplicate routes are no-ops.
    Siblings keep the order in which they were first seen.

    Example:
        >>> build_tree(["a/b", "a/c"])
        {'a': {'b': {}, 'c': {}}}

    Raises:
        InvalidRouteError: on the first empty or malformed route. No tree is
            returned in that case.
    """
    tree: TreeNode = {}
    route_count = 0
    for route in routes:
        parts = split_route(route)
        node = tree
        for part in parts:
            node = node.setdefault(part, {})
        route_count += 1

    if logger.isEnabledFor(logging.DEBUG):
        stats = tree_stats(tree, route_count=route_count)
        logger.debug(
            "Built route tree: %d routes, %d nodes, depth %d",
            stats.route_count,
            stats.node_count,
            stats.max_depth,
        )
    return tree


def lookup(tree: TreeNode, route: str | Sequence[str]) -> TreeNode | None:
    """Return the node reached by following *route* from the root.

    *route* may be a route string or a sequence of segments. Returns None
    when any segment is missing; an empty segment sequence returns the root.
    The tree is never modified.
    """
    parts = split_route(route) if isinstance(route, str) else route
    node = tree
    for part in parts:
        child = node.get(part)
        if child is None:
            return None
        node = child
    return node


def sort_tree(tree: TreeNode) -> TreeNode:
    """Return a copy of *tree* with siblings sorted at every level."""
    result: TreeNode = {}
    stack = [(tree, result)]
    while stack:
        source, target = stack.pop()
        for key in sorted(source):
            child: TreeNode = {}
            target[key] = child
            stack.append((source[key], child))
    return result


def tree_stats(tree: TreeNode, route_count: int = 0) -> TreeStats:
    stats = TreeStats(route_count=route_count)
    # Explicit stack: route depth is unbounded
    stack = [(tree, 1)]
    while stack:
        node, depth = stack.pop()
        for children in node.values():
            stats.node_count += 1
            stats.max_depth = max(stats.max_depth, depth)
            if children:
                stack.append((children, depth + 1))
            else:
                stats.leaf_count += 1
    return stats


def render_tree(tree: TreeNode) -> str:
    """Render the route tree as ASCII.

    Example output:
        ├── products/
        │   └── mini
        └── careers
    """
    if not tree:
        return ""

    lines: list[str] = []
    stack = _child_entries(tree, prefix="")
    while stack:
        name, children, prefix, is_last = stack.pop()
        connector = "└── " if is_last else "├── "

        # Routes that have sub-routes get a trailing "/"
        display_name = f"{name}/" if children else name
        lines.append(f"{prefix}{connector}{display_name}")

        if children:
            extension = "    " if is_last else "│   "
            stack.extend(_child_entries(children, prefix + extension))
    return "\n".join(lines)


def _child_entries(
    tree: TreeNode, prefix: str
) -> list[tuple[str, TreeNode, str, bool]]:
    """Entries of *tree* in reverse, so popping them yields tree order."""
    last = len(tree) - 1
    entries = [
        (name, children, prefix, i == last)
        for i, (name, children) in enumerate(tree.items())
    ]
    entries.reverse()
    return entries
