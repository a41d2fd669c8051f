"""Output rendering for built route trees."""

from __future__ import annotations

import json
import re
from urllib.parse import quote

from RouteTree.models import OutputFormat, TreeNode
from RouteTree.tree_builder import render_tree

_MARKDOWN_LABEL_SPECIAL = re.compile(r"([\\\[\]])")


def render_json(tree: TreeNode, indent: int | None = 2) -> str:
    """Serialize *tree* as JSON, keeping sibling order.

    Raises:
        ValueError: if the tree is nested deeper than the JSON encoder's
            recursion limit allows.
    """
    try:
        return json.dumps(tree, indent=indent, ensure_ascii=False)
    except RecursionError as exc:
        raise ValueError("route tree is too deep to encode as JSON") from exc


def render_markdown(tree: TreeNode, base_path: str = "/") -> str:
    """Render the tree as a nested Markdown list of navigation links.

    Labels escape ``[``, ``]`` and backslashes; link targets are
    percent-encoded per segment.

    Args:
        tree: route tree from ``build_tree``
        base_path: prefix joined to every link, e.g. "/" or "/docs/"

    Example output:
        - [products](/products)
          - [mini](/products/mini)
    """
    if not base_path.endswith("/"):
        base_path += "/"

    lines: list[str] = []
    # (segment, children, depth, url-encoded parent route)
    stack = [(name, children, 0, "") for name, children in reversed(tree.items())]
    while stack:
        name, children, depth, parent = stack.pop()
        target = f"{parent}/{quote(name, safe='')}" if parent else quote(name, safe="")
        label = _MARKDOWN_LABEL_SPECIAL.sub(r"\\\1", name)
        lines.append(f"{'  ' * depth}- [{label}]({base_path}{target})")
        stack.extend(
            (child, grandchildren, depth + 1, target)
            for child, grandchildren in reversed(children.items())
        )
    return "\n".join(lines)


def render(
    tree: TreeNode,
    fmt: OutputFormat | str = OutputFormat.TREE,
    base_path: str = "/",
) -> str:
    """Render *tree* in the requested output format.

    Raises:
        ValueError: if *fmt* is not a known format name, or the tree is too
            deep for JSON output.
    """
    fmt = OutputFormat(fmt)
    if fmt == OutputFormat.JSON:
        return render_json(tree)
    elif fmt == OutputFormat.MARKDOWN:
        return render_markdown(tree, base_path=base_path)
    else:
        return render_tree(tree)
