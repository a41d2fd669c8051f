"""Data classes for RouteTree."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# A node maps each child segment to that child's own mapping; leaves are {}.
TreeNode = dict[str, "TreeNode"]


class OutputFormat(Enum):
    TREE = "tree"
    JSON = "json"
    MARKDOWN = "markdown"


@dataclass
class TreeStats:
    route_count: int = 0
    node_count: int = 0
    leaf_count: int = 0
    max_depth: int = 0
