"""Eligibility gate and cache policy resolution.

:func:`is_eligible` decides whether a request/response pair is a caching
candidate at all. :func:`resolve` then finds the cache duration, evaluating
rules in strict order and stopping at the first hit:

1. **Exclusion** -- a route name matching any ``excluded_routes`` pattern is
   never cached, even when it also appears in ``routes``.
2. **Exact route** -- a ``routes`` key equal to the full route name.
3. **Route pattern** -- the first ``routes`` key (declaration order) whose
   wildcard matches the route name.
4. **URL pattern** -- the first ``patterns`` key matching the request path.

Both functions are pure and read only the frozen configuration, so they are
shared as-is by the live pipeline and the operator dry-run view.
"""

from __future__ import annotations

from typing import Optional

from cdnheaders.matching import first_path_match, first_route_match, normalize_path
from cdnheaders.models import CachePolicyConfig, MatchKind, PolicyMatch, RequestContext

CACHEABLE_METHODS = frozenset({"GET", "HEAD"})


def is_eligible(config: CachePolicyConfig, request: RequestContext) -> bool:
    """Return whether *request* may receive CDN cache headers at all."""
    if not config.enabled:
        return False
    if (request.method or "").upper() not in CACHEABLE_METHODS:
        return False
    if config.skip_authenticated and request.is_authenticated:
        return False
    return True


def is_route_excluded(config: CachePolicyConfig, route_name: Optional[str]) -> bool:
    """Return whether *route_name* matches one of ``excluded_routes``."""
    return first_route_match(route_name, config.excluded_routes) is not None


def resolve(config: CachePolicyConfig, request: RequestContext) -> Optional[PolicyMatch]:
    """Find the cache policy for *request*, or ``None`` when it must not be cached.

    Args:
        config: The active configuration.
        request: The inbound request descriptor.

    Returns:
        A :class:`~cdnheaders.models.PolicyMatch` naming the duration and the
        rule that produced it, or ``None``.

    Example::

        config = CachePolicyConfig(routes={"products.*": 3600, "products.show": 7200})
        resolve(config, RequestContext(path="/p/1", route_name="products.show"))
        # PolicyMatch(duration=7200, matched_by=MatchKind.ROUTE, pattern='products.show')
    """
    route_name = request.route_name

    if route_name:
        if is_route_excluded(config, route_name):
            return None

        if route_name in config.routes:
            return _match(config, config.routes[route_name], MatchKind.ROUTE, route_name)

        pattern = first_route_match(route_name, config.routes)
        if pattern is not None:
            return _match(config, config.routes[pattern], MatchKind.ROUTE_PATTERN, pattern)

    pattern = first_path_match(normalize_path(request.path or ""), config.patterns)
    if pattern is not None:
        return _match(config, config.patterns[pattern], MatchKind.URL_PATTERN, pattern)

    return None


def _match(
    config: CachePolicyConfig,
    duration: Optional[int],
    kind: MatchKind,
    pattern: str,
) -> PolicyMatch:
    if duration is None:
        duration = config.default_duration
    return PolicyMatch(duration=duration, matched_by=kind, pattern=pattern)
