"""Per-response orchestration of the cache pipeline.

Control flow::

    is_eligible --no--> unchanged
        |
    resolve -----None--> unchanged
        |
    apply_policy: apply_headers -> sanitize -> inject_loader

Every step reads the frozen configuration and mutates only the artifact of
the current response; per-request state (the sanitizer result) is passed
from step to step as a return value. The pipeline never raises on account
of the response content.
"""

from __future__ import annotations

import logging
from typing import Optional

from cdnheaders.headers import apply_headers
from cdnheaders.loader import inject_loader
from cdnheaders.models import CachePolicyConfig, PolicyMatch, RequestContext, SanitizationResult
from cdnheaders.policy import is_eligible, resolve
from cdnheaders.response import ResponseArtifact
from cdnheaders.sanitizer import sanitize

logger = logging.getLogger(__name__)


def apply_policy(
    config: CachePolicyConfig,
    request: RequestContext,
    artifact: ResponseArtifact,
    match: PolicyMatch,
) -> SanitizationResult:
    """Rewrite *artifact* for an already-resolved *match*.

    Split out from :func:`process_response` so that host adapters can run
    the cheap gate and resolver before buffering a streamed body.
    """
    apply_headers(artifact, match.duration, config)

    result = SanitizationResult(tokens_removed=False)
    if config.remove_csrf_tokens:
        result = sanitize(artifact, config.csrf_namespace)

    if config.inject_csrf_loader:
        inject_loader(artifact, result, request, config)

    if config.logging:
        _log_applied(request, artifact, match)

    return result


def process_response(
    config: CachePolicyConfig,
    request: RequestContext,
    artifact: ResponseArtifact,
) -> Optional[PolicyMatch]:
    """Run the full pipeline on one response.

    Args:
        config: The active, frozen configuration.
        request: Descriptor of the request that produced *artifact*.
        artifact: The response to rewrite in place.

    Returns:
        The applied :class:`~cdnheaders.models.PolicyMatch`, or ``None``
        when the response was left unchanged.
    """
    if not is_eligible(config, request):
        return None

    match = resolve(config, request)
    if match is None:
        return None

    apply_policy(config, request, artifact, match)
    return match


def _log_applied(request: RequestContext, artifact: ResponseArtifact, match: PolicyMatch) -> None:
    """Emit the "applied" record; a broken handler must not break the response."""
    try:
        logger.info(
            "CDN headers applied: route=%s path=%s duration=%s cache-control=%s",
            request.route_name,
            request.path,
            match.duration,
            artifact.headers.get("Cache-Control"),
        )
    except Exception:
        pass
