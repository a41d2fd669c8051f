"""Route string validation and splitting."""

from __future__ import annotations


class InvalidRouteError(ValueError):
    """Raised when a route string cannot be split into non-empty segments."""

    def __init__(self, route: str, reason: str) -> None:
        super().__init__(route, reason)
        self.route = route
        self.reason = reason

    def __str__(self) -> str:
        return f"Invalid route {self.route!r}: {self.reason}"


def split_route(route: str) -> list[str]:
    """Split a route such as ``products/mini/wifi`` into its segments.

    Rejected:
      - the empty string
      - a leading or trailing slash (``/products``, ``products/``)
      - consecutive slashes (``products//mini``)
    """
    if not route:
        raise InvalidRouteError(route, "route is empty")
    if route.startswith("/"):
        raise InvalidRouteError(route, "leading slash")
    if route.endswith("/"):
        raise InvalidRouteError(route, "trailing slash")

    segments = route.split("/")
    if "" in segments:
        raise InvalidRouteError(route, "empty segment")
    return segments


def parse_route_input(raw: str) -> list[str]:
    """Split pasted or file text into route strings, one per line.

    Each line is stripped. Blank lines and ``#`` comment lines are ignored.
    Routes are returned unvalidated; ``build_tree`` validates them.
    """
    if not raw or not raw.strip():
        return []
    routes: list[str] = []
    for line in raw.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        routes.append(line)
    return routes
