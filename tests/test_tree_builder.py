"""Tests for tree_builder module."""

import logging
import random

import pytest

from RouteTree.models import TreeStats
from RouteTree.route_parser import InvalidRouteError
from RouteTree.sample_routes import SAMPLE_ROUTES, SAMPLE_TREE
from RouteTree.tree_builder import (
    build_tree,
    lookup,
    render_tree,
    sort_tree,
    tree_stats,
)


class TestBuildTree:
    def test_empty(self):
        assert build_tree([]) == {}

    def test_single_route(self):
        assert build_tree(["careers"]) == {"careers": {}}

    def test_prefix_sharing(self):
        tree = build_tree(["a/b", "a/c"])
        assert tree == {"a": {"b": {}, "c": {}}}

    def test_deep_route_creates_intermediate_nodes(self):
        assert build_tree(["a/b/c/d"]) == {"a": {"b": {"c": {"d": {}}}}}

    def test_sample_routes(self):
        assert build_tree(SAMPLE_ROUTES) == SAMPLE_TREE

    def test_duplicates_are_idempotent(self):
        assert build_tree(SAMPLE_ROUTES + SAMPLE_ROUTES) == build_tree(SAMPLE_ROUTES)

    def test_order_independent(self):
        shuffled = list(SAMPLE_ROUTES)
        random.Random(7).shuffle(shuffled)
        assert build_tree(shuffled) == build_tree(SAMPLE_ROUTES)
        assert build_tree(reversed(SAMPLE_ROUTES)) == SAMPLE_TREE

    def test_siblings_keep_first_seen_order(self):
        tree = build_tree(["z", "a/x", "m", "a/b"])
        assert list(tree) == ["z", "a", "m"]
        assert list(tree["a"]) == ["x", "b"]

    def test_leaves_are_empty(self):
        tree = build_tree(SAMPLE_ROUTES)
        assert tree["careers"] == {}
        assert tree["integrations"]["partners"] == {}
        assert tree["products"]["mini"]["lte"]["with-flex"] == {}

    def test_fresh_tree_per_call(self):
        first = build_tree(["a"])
        second = build_tree(["b"])
        assert first == {"a": {}}
        assert second == {"b": {}}
        first["a"]["x"] = {}
        assert build_tree(["a"]) == {"a": {}}

    def test_accepts_generator(self):
        assert build_tree(r for r in ["a/b"]) == {"a": {"b": {}}}

    def test_logs_stats_at_debug(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="RouteTree.tree_builder"):
            build_tree(["a/b", "a/c"])
        assert "2 routes, 3 nodes, depth 2" in caplog.text


class TestBuildTreeInvalidRoutes:
    @pytest.mark.parametrize(
        "route", ["", "/products", "products/", "products//mini"]
    )
    def test_rejects_malformed(self, route):
        with pytest.raises(InvalidRouteError) as exc_info:
            build_tree(["careers", route])
        assert exc_info.value.route == route

    def test_fails_fast_on_first_invalid(self):
        with pytest.raises(InvalidRouteError) as exc_info:
            build_tree(["a", "b//c", "/d"])
        assert exc_info.value.route == "b//c"


class TestLookup:
    @pytest.fixture
    def tree(self):
        return build_tree(SAMPLE_ROUTES)

    def test_finds_node_by_string(self, tree):
        assert lookup(tree, "products/mini/wifi") == {"with-flex": {}}

    def test_finds_node_by_segments(self, tree):
        assert lookup(tree, ["integrations", "partners"]) == {}

    def test_missing_returns_none(self, tree):
        assert lookup(tree, "products/mini/5g") is None
        assert lookup(tree, ["nope"]) is None

    def test_empty_segments_return_root(self, tree):
        assert lookup(tree, []) is tree

    def test_returns_shared_node(self, tree):
        assert lookup(tree, "products") is tree["products"]

    def test_does_not_modify_tree(self, tree):
        lookup(tree, "products/unknown/deeper")
        assert tree == SAMPLE_TREE

    def test_invalid_route_string_raises(self, tree):
        with pytest.raises(InvalidRouteError):
            lookup(tree, "products//mini")


class TestSortTree:
    def test_sorts_every_level(self):
        tree = sort_tree(build_tree(["b/z", "b/a", "a"]))
        assert list(tree) == ["a", "b"]
        assert list(tree["b"]) == ["a", "z"]

    def test_input_unchanged(self):
        tree = build_tree(["b", "a"])
        sort_tree(tree)
        assert list(tree) == ["b", "a"]


class TestTreeStats:
    def test_empty(self):
        assert tree_stats({}) == TreeStats()

    def test_sample(self):
        stats = tree_stats(SAMPLE_TREE, route_count=len(SAMPLE_ROUTES))
        assert stats == TreeStats(
            route_count=11, node_count=11, leaf_count=5, max_depth=4
        )


class TestRenderTree:
    def test_empty(self):
        assert render_tree({}) == ""

    def test_single_route(self):
        assert render_tree({"careers": {}}) == "└── careers"

    def test_nested_structure(self):
        lines = render_tree(build_tree(["a/b", "a/c", "d"])).split("\n")
        assert lines == [
            "├── a/",
            "│   ├── b",
            "│   └── c",
            "└── d",
        ]

    def test_deep_nesting(self):
        result = render_tree(build_tree(["a/b/c"]))
        assert "└── a/" in result
        assert "    └── b/" in result
        assert "        └── c" in result

    def test_keeps_first_seen_order(self):
        lines = render_tree(build_tree(["z", "a"])).split("\n")
        assert "z" in lines[0]
        assert "a" in lines[1]


class TestDeepRoutes:
    depth = 3000

    @pytest.fixture
    def deep_route(self):
        return "/".join(f"s{i}" for i in range(self.depth))

    def test_build_with_debug_logging(self, deep_route, caplog):
        with caplog.at_level(logging.DEBUG, logger="RouteTree.tree_builder"):
            tree = build_tree([deep_route])
        assert lookup(tree, deep_route) == {}
        assert f"1 routes, {self.depth} nodes, depth {self.depth}" in caplog.text

    def test_stats(self, deep_route):
        stats = tree_stats(build_tree([deep_route, "s0/side"]))
        assert stats.node_count == self.depth + 1
        assert stats.leaf_count == 2
        assert stats.max_depth == self.depth

    def test_sort_tree(self, deep_route):
        tree = sort_tree(build_tree([deep_route, "s0/a"]))
        assert list(tree["s0"]) == ["a", "s1"]
        assert lookup(tree, deep_route) == {}

    def test_render_tree(self, deep_route):
        lines = render_tree(build_tree([deep_route])).split("\n")
        assert len(lines) == self.depth
        assert lines[-1] == " " * 4 * (self.depth - 1) + f"└── s{self.depth - 1}"
