"""Read-only operator views over the live policy code.

:func:`evaluate` answers "what would happen to this request?" by running the
same gate, resolver, and header rewriter the pipeline uses, on an empty
synthetic response. :func:`status_report` summarises the configuration.
Neither touches a real response, so both are safe to call at any time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlsplit

from cdnheaders.headers import apply_headers
from cdnheaders.models import CachePolicyConfig, PolicyMatch, RequestContext
from cdnheaders.policy import CACHEABLE_METHODS, is_eligible, is_route_excluded, resolve
from cdnheaders.response import ResponseArtifact


def format_duration(seconds: int) -> str:
    """Humanize a duration.

    Example::

        >>> format_duration(45)
        '45 seconds'
        >>> format_duration(600)
        '10 minutes'
        >>> format_duration(5400)
        '1.5 hours'
        >>> format_duration(604800)
        '7 days'
    """
    if seconds < 60:
        return f"{seconds} seconds"
    if seconds < 3600:
        return f"{round(seconds / 60)} minutes"
    if seconds < 86400:
        return f"{_trim(round(seconds / 3600, 1))} hours"
    return f"{_trim(round(seconds / 86400, 1))} days"


def _trim(value: float) -> str:
    return str(int(value)) if value == int(value) else str(value)


def _yes_no(value: bool) -> str:
    return "Yes" if value else "No"


@dataclass
class Evaluation:
    """Outcome of a dry run for one URL."""

    url: str
    path: str
    method: str
    route_name: Optional[str]
    eligible: bool
    reason: Optional[str] = None
    excluded: bool = False
    match: Optional[PolicyMatch] = None
    headers: list[tuple[str, str]] = field(default_factory=list)
    removes_cookies: bool = False

    @property
    def cacheable(self) -> bool:
        return self.match is not None


def evaluate(
    config: CachePolicyConfig,
    url: str,
    method: str = "GET",
    route_name: Optional[str] = None,
    is_authenticated: bool = False,
) -> Evaluation:
    """Report which rule (if any) matches *url* and the headers it would get.

    Args:
        config: The active configuration.
        url: Absolute URL or bare path.
        method: HTTP method of the hypothetical request.
        route_name: Route name the host framework would resolve for *url*.
        is_authenticated: Whether to evaluate as a signed-in visitor.
    """
    path = urlsplit(url).path or "/"
    request = RequestContext(
        path=path,
        method=method.upper(),
        route_name=route_name or None,
        is_authenticated=is_authenticated,
    )
    evaluation = Evaluation(
        url=url,
        path=path,
        method=request.method,
        route_name=request.route_name,
        eligible=is_eligible(config, request),
    )

    if not evaluation.eligible:
        evaluation.reason = _ineligible_reason(config, request)
        return evaluation

    if is_route_excluded(config, request.route_name):
        evaluation.excluded = True
        evaluation.reason = "Route is excluded from CDN caching"
        return evaluation

    evaluation.match = resolve(config, request)
    if evaluation.match is None:
        evaluation.reason = "No route or URL pattern matches"
        return evaluation

    artifact = ResponseArtifact()
    apply_headers(artifact, evaluation.match.duration, config)
    evaluation.headers = artifact.headers.items()
    evaluation.removes_cookies = config.remove_cookies
    return evaluation


def _ineligible_reason(config: CachePolicyConfig, request: RequestContext) -> str:
    if not config.enabled:
        return "CDN headers are disabled"
    if request.method not in CACHEABLE_METHODS:
        return f"Method {request.method} is never cached"
    return "Authenticated requests are skipped"


def status_report(config: CachePolicyConfig) -> dict[str, list[list[str]]]:
    """Summarise *config* as titled tables of string cells.

    Keys are ``settings``, ``routes``, ``patterns``, and ``excluded``; empty
    rule tables are returned as empty lists.
    """
    loader = config.csrf_loader_routes
    settings = [
        ["Status", "Enabled" if config.enabled else "Disabled"],
        ["Skip Authenticated Users", _yes_no(config.skip_authenticated)],
        ["Remove Cookies", _yes_no(config.remove_cookies)],
        ["Remove Vary Cookie", _yes_no(config.remove_vary_cookie)],
        ["Remove CSRF Tokens", _yes_no(config.remove_csrf_tokens)],
        ["Inject CSRF Loader", _yes_no(config.inject_csrf_loader)],
        ["CSRF Loader Mode", "Auto" if loader.auto else f"Routes: {', '.join(loader.routes) or '-'}"],
        ["CSRF Endpoint", config.csrf_endpoint],
        ["Surrogate-Control", _yes_no(config.surrogate_control)],
        ["Logging Enabled", _yes_no(config.logging)],
        ["Default Duration", f"{config.default_duration} seconds"],
        ["Stale While Revalidate", _optional_seconds(config.stale_while_revalidate)],
        ["Stale If Error", _optional_seconds(config.stale_if_error)],
    ]
    return {
        "settings": settings,
        "routes": _rule_rows(config.routes, config.default_duration),
        "patterns": _rule_rows(config.patterns, config.default_duration),
        "excluded": [[pattern] for pattern in config.excluded_routes],
    }


def _optional_seconds(value: Optional[int]) -> str:
    return f"{value} seconds" if value else "-"


def _rule_rows(rules: dict[str, Optional[int]], default: int) -> list[list[str]]:
    rows = []
    for pattern, duration in rules.items():
        label = format_duration(default if duration is None else duration)
        if duration is None:
            label += " (default)"
        rows.append([pattern, label])
    return rows
