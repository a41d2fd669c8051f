"""Command-line entry points.

``routetree`` builds a route tree and prints it:
    routetree products products/mini careers
    routetree --file routes.txt --format json
    routetree --sample --format markdown --sort

``routetree-ui`` serves the Streamlit page and opens it in a browser:
    routetree-ui --port 8600 --format markdown --sort
"""

from __future__ import annotations

import argparse
import logging
import sys
import threading
import time
import webbrowser
from pathlib import Path
from urllib.parse import urlencode

import requests

from RouteTree.models import OutputFormat
from RouteTree.renderers import render
from RouteTree.route_filter import InvalidPatternError, RouteFilter
from RouteTree.route_parser import InvalidRouteError, parse_route_input
from RouteTree.sample_routes import SAMPLE_ROUTES
from RouteTree.tree_builder import build_tree, sort_tree

logger = logging.getLogger(__name__)

DEFAULT_UI_PORT = 8501
APP_PATH = Path(__file__).resolve().parent / "app.py"


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _add_format_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--format",
        choices=[f.value for f in OutputFormat],
        default=OutputFormat.TREE.value,
        help="Output format (default: tree)",
    )
    parser.add_argument(
        "--sort",
        action="store_true",
        help="Sort siblings alphabetically instead of first-seen order",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="routetree",
        description="Fold slash-delimited routes into a nested route tree.",
        epilog="Give exactly one route source: ROUTE arguments, --file or --sample.",
    )
    parser.add_argument("routes", nargs="*", metavar="ROUTE", help="Routes to fold")
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--file",
        "-f",
        metavar="FILE",
        help="Read routes from FILE, one per line ('-' for stdin)",
    )
    source.add_argument(
        "--sample",
        action="store_true",
        help="Use the built-in sample routes",
    )
    _add_format_options(parser)
    parser.add_argument(
        "--include",
        metavar="PATTERNS",
        default="",
        help="Comma-separated regexes; keep only routes under a matching prefix",
    )
    parser.add_argument(
        "--exclude",
        metavar="PATTERNS",
        default="",
        help="Comma-separated regexes; drop routes under a matching prefix",
    )
    parser.add_argument(
        "--base-path",
        default="/",
        help="Link prefix for markdown output (default: /)",
    )
    parser.add_argument(
        "--output",
        "-o",
        metavar="FILE",
        help="Write output to FILE instead of stdout",
    )
    return parser


def _read_routes(path: str) -> list[str]:
    if path == "-":
        return parse_route_input(sys.stdin.read())
    with open(path, encoding="utf-8") as f:
        return parse_route_input(f.read())


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    # argparse cannot put a nargs="*" positional in the exclusive group
    if args.routes and (args.file or args.sample):
        parser.error("ROUTE arguments cannot be combined with --file or --sample")

    if args.routes:
        routes = args.routes
    elif args.file:
        try:
            routes = _read_routes(args.file)
        except (OSError, UnicodeDecodeError) as exc:
            print(f"Error: cannot read {args.file}: {exc}", file=sys.stderr)
            return 1
    elif args.sample:
        routes = list(SAMPLE_ROUTES)
    else:
        parser.error("no routes given (pass ROUTE arguments, --file or --sample)")

    try:
        route_filter = RouteFilter.from_input(args.include, args.exclude)
    except InvalidPatternError as exc:
        for err in exc.errors:
            print(f"Error: invalid regex {err}", file=sys.stderr)
        return 1

    if not route_filter.is_empty:
        before = len(routes)
        routes = route_filter.apply(routes)
        logger.info("Filter kept %d of %d routes", len(routes), before)

    try:
        tree = build_tree(routes)
    except InvalidRouteError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.sort:
        tree = sort_tree(tree)

    try:
        output = render(tree, args.format, base_path=args.base_path)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.output:
        try:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(output + "\n")
        except OSError as exc:
            print(f"Error: cannot write {args.output}: {exc}", file=sys.stderr)
            return 1
        print(f"Tree written to {args.output} ({len(tree)} top-level routes)")
    else:
        print(output)
    return 0


# ---------------------------------------------------------------------------
# Streamlit launcher
# ---------------------------------------------------------------------------


def app_url(port: int, fmt: str = OutputFormat.TREE.value, sort: bool = False) -> str:
    """URL of the local page, with the options ``app.py`` reads as query params."""
    params = {}
    if fmt != OutputFormat.TREE.value:
        params["format"] = fmt
    if sort:
        params["sort"] = "1"
    query = f"?{urlencode(params)}" if params else ""
    return f"http://localhost:{port}/{query}"


def _wait_and_open_browser(
    port: int,
    url: str,
    attempts: int = 30,
    interval: float = 1.0,
) -> bool:
    """Poll Streamlit's health endpoint, then open *url*.

    Returns True once the browser was opened, False if the server never
    answered.
    """
    health_url = f"http://localhost:{port}/_stcore/health"
    for _ in range(attempts):
        try:
            resp = requests.get(health_url, timeout=2)
            if resp.status_code == 200:
                webbrowser.open(url)
                return True
        except requests.RequestException as exc:
            logger.debug("Waiting for Streamlit on port %d: %s", port, exc)
        time.sleep(interval)
    logger.warning("Streamlit did not answer on port %d; open %s manually", port, url)
    return False


def _build_ui_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="routetree-ui",
        description="Serve the RouteTree page locally and open it in a browser.",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=DEFAULT_UI_PORT,
        help=f"Port to serve on (default: {DEFAULT_UI_PORT})",
    )
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Do not open a browser window",
    )
    _add_format_options(parser)
    return parser


def ui_main(argv: list[str] | None = None) -> int:
    args = _build_ui_parser().parse_args(argv)
    _setup_logging(args.verbose)

    from streamlit.web import bootstrap

    url = app_url(args.port, args.format, args.sort)
    if not args.no_browser:
        threading.Thread(
            target=_wait_and_open_browser,
            args=(args.port, url),
            daemon=True,
        ).start()
    else:
        print(f"Serving RouteTree at {url}")

    bootstrap.run(
        str(APP_PATH),
        is_hello=False,
        args=[],
        flag_options={
            "server.headless": True,
            "server.port": args.port,
            "browser.gatherUsageStats": False,
        },
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
