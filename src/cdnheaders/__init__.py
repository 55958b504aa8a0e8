"""cdnheaders -- Make server-rendered responses safe to cache at a CDN edge.

This package decides, per request, whether a response may be cached by an
edge layer and, if so, rewrites it so that no per-user state leaks into the
shared cache: cache directives are added, session cookies are dropped, and
embedded CSRF tokens are scrubbed from HTML bodies. A small bootstrap script
is injected so the browser re-fetches a live token after a cache hit.

Typical use with a Starlette/FastAPI application::

    from cdnheaders.config import load_config
    from cdnheaders.middleware import CdnHeadersMiddleware

    app.add_middleware(CdnHeadersMiddleware, config=load_config())

Operators inspect and purge with the ``cdn-headers`` console script::

    cdn-headers status
    cdn-headers test https://example.com/products/1 --route products.show
    cdn-headers clear --all

Modules:
    models: Pydantic configuration models and per-request value types.
    config: Layered configuration loading (defaults, file, environment).
    matching: Wildcard matchers for route names and URL paths.
    policy: Eligibility gate and cache policy resolver.
    headers: Cache-Control construction and header rewriting.
    sanitizer: CSRF token removal from HTML bodies.
    loader: Client-side token loader injection.
    pipeline: The per-response orchestration of the steps above.
    middleware: Starlette adapter.
    purge: Cloudflare cache purge client.
    inspect: Read-only status and dry-run views for operators.
"""

__version__ = "0.3.0"
