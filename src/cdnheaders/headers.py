"""Header rewriting for cacheable responses.

Directive order in ``Cache-Control`` is fixed and bit-exact::

    public, max-age=<d>, s-maxage=<d>[, stale-while-revalidate=<swr>][, stale-if-error=<sie>]

Custom headers from the configuration are applied last and replace any
header of the same name, so operators can override anything set here.
"""

from __future__ import annotations

from cdnheaders.models import CachePolicyConfig
from cdnheaders.response import ResponseArtifact


def build_cache_control(duration: int, config: CachePolicyConfig) -> str:
    """Build the ``Cache-Control`` value for *duration* seconds.

    Stale directives are included only when configured with a positive value.

    Example::

        >>> build_cache_control(3600, CachePolicyConfig(stale_while_revalidate=86400))
        'public, max-age=3600, s-maxage=3600, stale-while-revalidate=86400'
    """
    directives = [
        "public",
        f"max-age={duration}",
        f"s-maxage={duration}",
    ]
    if config.stale_while_revalidate:
        directives.append(f"stale-while-revalidate={config.stale_while_revalidate}")
    if config.stale_if_error:
        directives.append(f"stale-if-error={config.stale_if_error}")
    return ", ".join(directives)


def remove_vary_cookie(artifact: ResponseArtifact) -> None:
    """Drop the ``cookie`` token from ``Vary``, removing the header if it empties."""
    vary = artifact.headers.get("Vary")
    if not vary:
        return

    parts = [part.strip() for part in vary.split(",")]
    parts = [part for part in parts if part and part.lower() != "cookie"]

    if parts:
        artifact.headers.set("Vary", ", ".join(parts))
    else:
        artifact.headers.remove("Vary")


def apply_headers(artifact: ResponseArtifact, duration: int, config: CachePolicyConfig) -> None:
    """Rewrite *artifact*'s headers for a CDN cache lifetime of *duration* seconds."""
    artifact.headers.set("Cache-Control", build_cache_control(duration, config))

    if config.surrogate_control:
        artifact.headers.set("Surrogate-Control", f"max-age={duration}")

    if config.remove_cookies:
        artifact.headers.remove("Set-Cookie")

    if config.remove_vary_cookie:
        remove_vary_cookie(artifact)

    for name, value in config.custom_headers.items():
        artifact.headers.set(name, value)
