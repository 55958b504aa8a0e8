"""Canonical models shared across all cdnheaders modules.

The models fall into two groups:

**Configuration models** -- pydantic, frozen, validated once at startup by
:func:`~cdnheaders.config.load_config`:
    :class:`CsrfLoaderRoutes`, :class:`CloudflareConfig`, and the root
    :class:`CachePolicyConfig`.

**Per-request values** -- small frozen dataclasses that live for one
pipeline run and are never shared between requests:
    :class:`RequestContext`, :class:`PolicyMatch`, and
    :class:`SanitizationResult`.

Configuration is frozen so that a single instance can be handed to every
concurrent request without locking.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


Duration = Annotated[int, Field(ge=0)]
"""Cache lifetime in seconds; negative values are rejected at load time."""


class CsrfLoaderRoutes(BaseModel):
    """Decides which cached pages receive the client-side token loader.

    With ``auto`` enabled the loader is injected whenever the sanitizer
    actually removed a token. With ``auto`` disabled it is injected only on
    routes whose name matches one of ``routes`` (route-name wildcards).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    auto: bool = Field(
        default=True, description="Inject whenever a token was removed"
    )
    routes: list[str] = Field(
        default_factory=list,
        description="Route name patterns that always get the loader when auto is off",
    )


class CloudflareConfig(BaseModel):
    """Credentials and endpoint for the out-of-band cache purge call."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    zone_id: Optional[str] = Field(default=None, description="Cloudflare zone ID")
    api_token: Optional[str] = Field(default=None, description="Cloudflare API token")
    api_base: str = Field(
        default="https://api.cloudflare.com/client/v4",
        description="Base URL of the Cloudflare API",
    )
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")


class CachePolicyConfig(BaseModel):
    """Process-wide cache policy, read-only after startup.

    ``routes`` and ``patterns`` are ordered: within wildcard matching the
    first declared pattern wins. A rule whose duration is ``None`` uses
    :attr:`default_duration`.

    Example::

        CachePolicyConfig(
            routes={"products.show": 7200, "products.*": 3600},
            patterns={"/feeds/*": 600},
            excluded_routes=["admin.*"],
            stale_while_revalidate=86400,
        )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    enabled: bool = True
    skip_authenticated: bool = True
    remove_cookies: bool = True
    remove_vary_cookie: bool = True
    remove_csrf_tokens: bool = True
    inject_csrf_loader: bool = True
    surrogate_control: bool = False
    logging: bool = False

    default_duration: Duration = Field(default=3600, description="Seconds")
    routes: dict[str, Optional[Duration]] = Field(
        default_factory=dict, description="Route name pattern -> seconds"
    )
    patterns: dict[str, Optional[Duration]] = Field(
        default_factory=dict, description="URL path pattern -> seconds"
    )
    excluded_routes: list[str] = Field(
        default_factory=list, description="Route name patterns never cached"
    )
    custom_headers: dict[str, str] = Field(default_factory=dict)

    stale_while_revalidate: Optional[int] = Field(default=None, ge=0)
    stale_if_error: Optional[int] = Field(default=None, ge=0)

    csrf_loader_routes: CsrfLoaderRoutes = Field(default_factory=CsrfLoaderRoutes)
    csrf_endpoint: str = Field(
        default="/csrf-token", description="Path the loader fetches a fresh token from"
    )
    csrf_namespace: str = Field(
        default="Laravel",
        pattern=r"^[A-Za-z_$][A-Za-z0-9_$]*$",
        description="Name of the window.<Namespace> global holding csrfToken",
    )

    cloudflare: CloudflareConfig = Field(default_factory=CloudflareConfig)


# --- Per-request values ---


@dataclass(frozen=True)
class RequestContext:
    """What the pipeline needs to know about the inbound request."""

    path: str
    method: str = "GET"
    route_name: Optional[str] = None
    is_authenticated: bool = False


class MatchKind(str, enum.Enum):
    """Which rule table produced a :class:`PolicyMatch`."""

    ROUTE = "route"
    ROUTE_PATTERN = "route_pattern"
    URL_PATTERN = "url_pattern"


@dataclass(frozen=True)
class PolicyMatch:
    """A resolved cache policy: the duration and the rule that produced it."""

    duration: int
    matched_by: MatchKind
    pattern: str

    def describe(self) -> str:
        """Return an operator-facing label such as ``Route Pattern: products.*``."""
        label = {
            MatchKind.ROUTE: "Route",
            MatchKind.ROUTE_PATTERN: "Route Pattern",
            MatchKind.URL_PATTERN: "URL Pattern",
        }[self.matched_by]
        return f"{label}: {self.pattern}"


@dataclass(frozen=True)
class SanitizationResult:
    """Outcome of one sanitizer run, threaded into the loader injector."""

    tokens_removed: bool = False
