"""Include/exclude filtering of routes before they are folded into a tree.

Patterns are regexes matched against the *whole-segment prefixes* of a route.
For ``products/mini/wifi`` those are ``products``, ``products/mini`` and
``products/mini/wifi``. A pattern matches the route when it fully matches
any of them, so:

  - ``products`` keeps or drops the whole ``products`` subtree,
  - ``products/mini`` covers ``products/mini/wifi`` but not ``products/minis``,
  - ``.*/with-flex`` matches a ``with-flex`` segment at any depth.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass


class InvalidPatternError(ValueError):
    """Raised when one or more filter patterns are not valid regexes."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__(errors)
        self.errors = errors

    def __str__(self) -> str:
        return "; ".join(self.errors)


def _route_prefixes(route: str) -> Iterator[str]:
    end = route.find("/")
    while end != -1:
        yield route[:end]
        end = route.find("/", end + 1)
    yield route


def _compile(
    patterns: Iterable[str], errors: list[str]
) -> tuple[re.Pattern[str], ...]:
    """Compile *patterns*, appending a message to *errors* for each bad one."""
    compiled: list[re.Pattern[str]] = []
    for p in patterns:
        try:
            compiled.append(re.compile(p))
        except re.error as exc:
            errors.append(f"`{p}`: {exc}")
    return tuple(compiled)


@dataclass(frozen=True)
class RouteFilter:
    """Compiled include and exclude patterns.

    A route passes when it matches any include pattern (or there are none)
    and no exclude pattern.
    """

    include: tuple[re.Pattern[str], ...] = ()
    exclude: tuple[re.Pattern[str], ...] = ()

    @classmethod
    def compile(
        cls,
        include: Iterable[str] = (),
        exclude: Iterable[str] = (),
    ) -> RouteFilter:
        """Compile pattern strings, reporting every invalid one at once.

        Raises:
            InvalidPatternError: listing each pattern that failed to compile.
        """
        errors: list[str] = []
        compiled_include = _compile(include, errors)
        compiled_exclude = _compile(exclude, errors)
        if errors:
            raise InvalidPatternError(errors)
        return cls(include=compiled_include, exclude=compiled_exclude)

    @classmethod
    def from_input(cls, include: str = "", exclude: str = "") -> RouteFilter:
        """Build a filter from comma-separated pattern strings, as typed."""
        return cls.compile(split_patterns(include), split_patterns(exclude))

    @property
    def is_empty(self) -> bool:
        return not self.include and not self.exclude

    def matches(self, route: str) -> bool:
        prefixes = list(_route_prefixes(route))
        if self.include and not _any_full_match(self.include, prefixes):
            return False
        return not _any_full_match(self.exclude, prefixes)

    def apply(self, routes: Iterable[str]) -> list[str]:
        """Return the routes that pass, in input order."""
        return [route for route in routes if self.matches(route)]


def _any_full_match(
    patterns: tuple[re.Pattern[str], ...], prefixes: list[str]
) -> bool:
    return any(pat.fullmatch(prefix) for pat in patterns for prefix in prefixes)


def split_patterns(raw: str) -> list[str]:
    """Split a comma-separated pattern string; blanks are dropped."""
    if not raw:
        return []
    return [p.strip() for p in raw.split(",") if p.strip()]


def filter_routes(
    routes: Iterable[str],
    include: Iterable[str] = (),
    exclude: Iterable[str] = (),
) -> list[str]:
    """Keep routes matching an include pattern and no exclude pattern.

    Raises:
        InvalidPatternError: if any pattern is not a valid regex.
    """
    return RouteFilter.compile(include, exclude).apply(routes)
