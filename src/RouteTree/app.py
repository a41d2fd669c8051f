"""Streamlit UI for RouteTree."""

from __future__ import annotations

import logging

import streamlit as st

from RouteTree.models import OutputFormat
from RouteTree.renderers import render
from RouteTree.route_filter import InvalidPatternError, RouteFilter
from RouteTree.route_parser import InvalidRouteError, parse_route_input
from RouteTree.sample_routes import SAMPLE_ROUTES
from RouteTree.tree_builder import build_tree, sort_tree, tree_stats

logger = logging.getLogger(__name__)

_LANGUAGE_BY_FORMAT = {
    OutputFormat.TREE: "text",
    OutputFormat.JSON: "json",
    OutputFormat.MARKDOWN: "markdown",
}

_EXTENSION_BY_FORMAT = {
    OutputFormat.TREE: "txt",
    OutputFormat.JSON: "json",
    OutputFormat.MARKDOWN: "md",
}


def _qp(key: str, default: str = "") -> str:
    """Read a query parameter, returning *default* if absent."""
    params = st.query_params
    return params.get(key, default)


def main() -> None:
    st.set_page_config(
        page_title="RouteTree",
        page_icon="🌳",
        layout="wide",
    )

    st.title("RouteTree")
    st.caption("Fold a flat list of routes into a nested navigation tree.")

    # --- Routes ---
    qp_routes = _qp("routes")
    default_routes = (
        "\n".join(r.strip() for r in qp_routes.split(","))
        if qp_routes
        else "\n".join(SAMPLE_ROUTES)
    )
    raw_routes = st.text_area(
        "Routes (one per line)",
        value=default_routes,
        height=260,
        help="Lines starting with # and blank lines are ignored.",
    )

    # --- Options ---
    col_format, col_sort = st.columns([3, 1])
    formats = [f.value for f in OutputFormat]
    qp_format = _qp("format", OutputFormat.TREE.value)
    with col_format:
        fmt_value = st.radio(
            "Output format",
            formats,
            index=formats.index(qp_format) if qp_format in formats else 0,
            horizontal=True,
        )
    with col_sort:
        sort_siblings = st.checkbox(
            "Sort alphabetically",
            value=_qp("sort") in ("1", "true"),
            help="Otherwise siblings keep the order they first appear in.",
        )

    # --- Prefix filters ---
    col_include, col_exclude = st.columns(2)
    with col_include:
        include_raw = st.text_input(
            "Include (regex, comma-separated)",
            value=_qp("include"),
            placeholder=r"products, integrations/.*",
            help=(
                "Keep only routes under a prefix matching one of the patterns. "
                "Patterns match whole segments: `products` covers `products/mini` "
                "but not `productsx`."
            ),
        )
    with col_exclude:
        exclude_raw = st.text_input(
            "Exclude (regex, comma-separated)",
            value=_qp("exclude"),
            placeholder=r".*/with-flex",
            help="Drop routes under a prefix matching any of the patterns.",
        )

    # Validate patterns in real-time
    route_filter = None
    try:
        route_filter = RouteFilter.from_input(include_raw, exclude_raw)
    except InvalidPatternError as exc:
        for err in exc.errors:
            st.error(f"Invalid regex: {err}")

    build_clicked = st.button(
        "Build tree",
        type="primary",
        use_container_width=True,
        disabled=route_filter is None,
    )

    if build_clicked and route_filter is not None:
        _run_build(raw_routes, OutputFormat(fmt_value), sort_siblings, route_filter)

    # Show previous result after rerun (e.g. download button click)
    if not build_clicked and "result" in st.session_state:
        _show_result(st.session_state["result"])


def _run_build(
    raw_routes: str,
    fmt: OutputFormat,
    sort_siblings: bool,
    route_filter: RouteFilter,
) -> None:
    routes = parse_route_input(raw_routes)
    if not routes:
        st.error("Please enter at least one route.")
        return

    if not route_filter.is_empty:
        before = len(routes)
        routes = route_filter.apply(routes)
        if not routes:
            st.warning("No routes matched the filter patterns.")
            return
        filtered_out = before - len(routes)
    else:
        filtered_out = 0

    try:
        tree = build_tree(routes)
    except InvalidRouteError as exc:
        logger.info("Rejected route input: %s", exc)
        st.error(str(exc))
        return

    if sort_siblings:
        tree = sort_tree(tree)

    stats = tree_stats(tree, route_count=len(routes))
    msg = (
        f"{stats.route_count} routes folded into {stats.node_count} nodes "
        f"({stats.leaf_count} leaves, depth {stats.max_depth})"
    )
    if filtered_out:
        msg += f"; {filtered_out} routes excluded by filter"
    st.info(msg + ".")

    try:
        output = render(tree, fmt)
    except ValueError as exc:
        st.error(str(exc))
        return

    st.session_state["result"] = {
        "output": output,
        "format": fmt,
    }
    _show_result(st.session_state["result"])


def _show_result(result: dict) -> None:
    """Display download button and preview from a stored result."""
    output = result["output"]
    fmt = result["format"]

    st.download_button(
        label="Download",
        data=output,
        file_name=f"routes.{_EXTENSION_BY_FORMAT[fmt]}",
        use_container_width=True,
    )
    with st.expander("Preview", expanded=True):
        st.code(output, language=_LANGUAGE_BY_FORMAT[fmt])


if __name__ == "__main__":
    main()
