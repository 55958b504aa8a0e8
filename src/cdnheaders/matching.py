"""Wildcard matching for route names and URL paths.

Two matchers with deliberately different ``*`` semantics:

* :func:`matches_route` -- route names such as ``products.show``. ``*``
  matches any run of characters, dots included, so ``products.*`` also
  matches ``products.index.paginated``.
* :func:`matches_path` -- URL paths. ``*`` matches any run of characters
  *except* ``/``, so ``/api/*`` matches ``/api/users`` but not
  ``/api/users/1``. Operators wanting a deeper match must list each depth
  (``/api/*/*``).

Every other character in a pattern is literal. Both matchers are anchored
and never raise: a pattern that is not a non-empty string matches nothing.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, Optional


def _compile(pattern: str, star: str) -> re.Pattern[str]:
    parts = (re.escape(part) for part in pattern.split("*"))
    return re.compile("^" + star.join(parts) + "$")


@lru_cache(maxsize=1024)
def _route_regex(pattern: str) -> re.Pattern[str]:
    return _compile(pattern, ".*")


@lru_cache(maxsize=1024)
def _path_regex(pattern: str) -> re.Pattern[str]:
    return _compile(normalize_path(pattern), "[^/]*")


def normalize_path(path: str) -> str:
    """Return *path* with exactly one leading ``/``.

    ``"api/users"`` -> ``"/api/users"``, ``"//x"`` -> ``"/x"``, ``""`` -> ``"/"``.
    """
    return "/" + path.lstrip("/")


def matches_route(route_name: Optional[str], pattern: object) -> bool:
    """Return ``True`` if *route_name* matches the route-name *pattern*.

    Example::

        >>> matches_route("products.show", "products.*")
        True
        >>> matches_route("admin.products", "products.*")
        False
    """
    if not route_name or not isinstance(pattern, str) or not pattern:
        return False
    return _route_regex(pattern).match(route_name) is not None


def matches_path(path: str, pattern: object) -> bool:
    """Return ``True`` if URL *path* matches the segment-bounded *pattern*.

    Example::

        >>> matches_path("/api/users", "/api/*")
        True
        >>> matches_path("api/users/1", "api/*")
        False
    """
    if not isinstance(path, str) or not isinstance(pattern, str) or not pattern:
        return False
    return _path_regex(pattern).match(normalize_path(path)) is not None


def first_route_match(route_name: Optional[str], patterns: Iterable[object]) -> Optional[str]:
    """Return the first of *patterns* matching *route_name*, in iteration order."""
    for pattern in patterns:
        if matches_route(route_name, pattern):
            return pattern  # type: ignore[return-value]
    return None


def first_path_match(path: str, patterns: Iterable[object]) -> Optional[str]:
    """Return the first of *patterns* matching *path*, in iteration order."""
    for pattern in patterns:
        if matches_path(path, pattern):
            return pattern  # type: ignore[return-value]
    return None
