"""Starlette / FastAPI adapter for the cache pipeline.

Add it like any other middleware::

    from fastapi import FastAPI
    from cdnheaders.config import load_config
    from cdnheaders.middleware import CdnHeadersMiddleware

    app = FastAPI()
    app.add_middleware(CdnHeadersMiddleware, config=load_config())

The route name comes from the matched route's ``name`` (FastAPI's
``name=`` argument, or the endpoint function name by default). A request
counts as authenticated when ``scope["user"].is_authenticated`` is true,
which is what Starlette's ``AuthenticationMiddleware`` provides; pass
``is_authenticated=`` to plug in anything else.

The gate and resolver run before the body is touched, so responses that
will not be cached stream through unbuffered.
"""

from __future__ import annotations

from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Match
from starlette.types import ASGIApp

from cdnheaders.models import CachePolicyConfig, RequestContext
from cdnheaders.pipeline import apply_policy
from cdnheaders.policy import is_eligible, resolve
from cdnheaders.response import Headers, ResponseArtifact


def scope_is_authenticated(request: Request) -> bool:
    """Read ``is_authenticated`` from the user Starlette auth put in the scope."""
    user = request.scope.get("user")
    return bool(getattr(user, "is_authenticated", False))


def route_name_for(request: Request) -> Optional[str]:
    """Return the name of the route that handled *request*, if it has one."""
    route = request.scope.get("route")
    if route is None:
        app = request.scope.get("app")
        for candidate in getattr(app, "routes", None) or []:
            match, _ = candidate.matches(request.scope)
            if match == Match.FULL:
                route = candidate
                break
    return getattr(route, "name", None) or None


class CdnHeadersMiddleware(BaseHTTPMiddleware):
    """Run the cache pipeline on every response.

    Args:
        app: The wrapped ASGI application.
        config: The frozen configuration shared by all requests.
        is_authenticated: Optional callable deciding whether a request is
            signed in. Defaults to :func:`scope_is_authenticated`.
    """

    def __init__(
        self,
        app: ASGIApp,
        config: CachePolicyConfig,
        is_authenticated: Optional[Callable[[Request], bool]] = None,
    ) -> None:
        super().__init__(app)
        self.config = config
        self.is_authenticated = is_authenticated or scope_is_authenticated

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)

        context = RequestContext(
            path=request.url.path,
            method=request.method,
            route_name=route_name_for(request),
            is_authenticated=self.is_authenticated(request),
        )
        if not is_eligible(self.config, context):
            return response

        match = resolve(self.config, context)
        if match is None:
            return response

        body_chunks: list[bytes] = []
        async for chunk in response.body_iterator:  # type: ignore[attr-defined]
            body_chunks.append(chunk if isinstance(chunk, bytes) else chunk.encode("utf-8"))

        artifact = ResponseArtifact(
            body=b"".join(body_chunks),
            headers=Headers(
                (k.decode("latin-1"), v.decode("latin-1")) for k, v in response.raw_headers
            ),
        )
        apply_policy(self.config, context, artifact, match)

        rebuilt = Response(
            content=artifact.body,
            status_code=response.status_code,
            background=getattr(response, "background", None),
        )
        raw_headers = [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in artifact.headers.items()
            if name.lower() != "content-length"
        ]
        raw_headers.append((b"content-length", str(len(artifact.body)).encode("latin-1")))
        rebuilt.raw_headers = raw_headers
        return rebuilt
