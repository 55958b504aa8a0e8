"""Client-side CSRF token loader injection.

After the sanitizer blanks the token, a cached page would submit forms with
no token at all. The loader script put in front of ``</body>`` fixes that in
the browser: it fetches a fresh token from the configured endpoint and writes
it back into the meta tag, ``window.<Namespace>.csrfToken``, every ``_token``
input, and the default headers of axios and jQuery when present.

Pages without forms or AJAX libraries skip the request entirely. A failed
fetch only logs a console warning; the page stays usable and only
token-protected submissions from a stale page will be rejected server-side.

The script itself lives in ``templates/csrf_loader.html.j2``.
"""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, Template, select_autoescape

from cdnheaders.matching import first_route_match
from cdnheaders.models import CachePolicyConfig, RequestContext, SanitizationResult
from cdnheaders.response import ResponseArtifact

LOADER_ELEMENT_ID = "cdn-headers-csrf-loader"

TEMPLATE_DIR = Path(__file__).parent / "templates"

_BODY_CLOSE_RE = re.compile(r"</body\s*>", re.IGNORECASE)


@lru_cache(maxsize=1)
def _loader_template() -> Template:
    """Load the loader template once per process.

    Autoescape is on; endpoint and namespace go through ``tojson``, which
    also escapes ``<``, ``>``, and ``&`` so neither can close the script.
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(enabled_extensions=("html.j2",)),
        keep_trailing_newline=True,
    )
    return env.get_template("csrf_loader.html.j2")


def render_loader(config: CachePolicyConfig) -> str:
    """Render the bootstrap script for *config*'s endpoint and namespace."""
    return _loader_template().render(
        element_id=LOADER_ELEMENT_ID,
        endpoint=config.csrf_endpoint,
        namespace=config.csrf_namespace,
    )


def should_inject(
    result: SanitizationResult,
    request: RequestContext,
    config: CachePolicyConfig,
) -> bool:
    """Apply the injection criteria from ``csrf_loader_routes``."""
    loader_routes = config.csrf_loader_routes
    if loader_routes.auto:
        return result.tokens_removed
    return first_route_match(request.route_name, loader_routes.routes) is not None


def inject_loader(
    artifact: ResponseArtifact,
    result: SanitizationResult,
    request: RequestContext,
    config: CachePolicyConfig,
) -> bool:
    """Insert the loader script before the first ``</body>`` of an HTML body.

    Documents without a closing body tag, or already carrying the loader,
    are left unchanged.

    Returns:
        ``True`` if the script was inserted.
    """
    if not artifact.is_html() or not should_inject(result, request, config):
        return False

    content = artifact.text()
    if f'id="{LOADER_ELEMENT_ID}"' in content:
        return False

    match = _BODY_CLOSE_RE.search(content)
    if match is None:
        return False

    position = match.start()
    artifact.set_text(content[:position] + render_loader(config) + content[position:])
    return True
