"""Removal of per-session CSRF tokens from cacheable HTML.

A cached page must not carry the token of whichever visitor happened to
populate the cache. The sanitizer runs an ordered list of case-insensitive
regular-expression substitutions over the raw HTML text:

1. ``<meta name="csrf-token" content="...">`` -- content blanked, tag kept
   so the loader can refill it.
2. ``<script>window.<NS> = {... csrfToken: "..." ...}</script>`` -- token
   value replaced by ``null`` plus a marker comment.
3. The same assignment outside a dedicated script block.
4. ``window._token = "..."`` -- replaced by ``null`` plus a marker comment.
5. ``<input name="_token" value="...">`` -- value blanked.
6. ``<input value="..." name="_token">`` -- value blanked.

Each rule runs on the output of the previous one. Replacement values are
unquoted, so no later rule can re-match an earlier rule's output and a
second run over sanitized HTML is a no-op. Whether anything was removed is
decided once, by comparing the final text with the original.

This is text rewriting, not HTML parsing: markup the patterns do not
recognise is left exactly as it was.
"""

from __future__ import annotations

import re
from functools import lru_cache

from cdnheaders.models import SanitizationResult
from cdnheaders.response import ResponseArtifact

REMOVAL_MARKER = "/* CSRF token removed for caching */"

_Q = r"[\"']"
_VALUE = r"[\"'][^\"']*[\"']"
_TOKEN_KEY = r"[\"']?csrfToken[\"']?\s*:\s*"

_META_RE = re.compile(
    rf"(<meta\s+name={_Q}csrf-token{_Q}\s+content={_Q})[^\"']*({_Q}[^>]*>)",
    re.IGNORECASE,
)
_WINDOW_TOKEN_RE = re.compile(
    rf"window\._token\s*=\s*{_VALUE}",
    re.IGNORECASE,
)
_INPUT_NAME_FIRST_RE = re.compile(
    rf"(<input\b[^>]*?\sname={_Q}_token{_Q}[^>]*?\svalue={_Q})[^\"']*({_Q})",
    re.IGNORECASE,
)
_INPUT_VALUE_FIRST_RE = re.compile(
    rf"(<input\b[^>]*?\svalue={_Q})[^\"']*({_Q}[^>]*?\sname={_Q}_token{_Q})",
    re.IGNORECASE,
)


@lru_cache(maxsize=32)
def _namespace_rules(namespace: str) -> tuple[re.Pattern[str], re.Pattern[str]]:
    """Compile the script-block and bare-assignment rules for ``window.<namespace>``."""
    assign = rf"window\.{re.escape(namespace)}\s*=\s*\{{[^}}]*?{_TOKEN_KEY}"
    script_block = re.compile(
        rf"(<script\b[^>]*>\s*{assign}){_VALUE}([^}}]*\}}[^<]*</script>)",
        re.IGNORECASE,
    )
    bare = re.compile(
        rf"({assign}){_VALUE}([^}}]*\}})",
        re.IGNORECASE,
    )
    return script_block, bare


def strip_tokens(html: str, namespace: str = "Laravel") -> str:
    """Return *html* with every recognised CSRF token removed.

    Args:
        html: The document text.
        namespace: Name of the ``window.<namespace>`` global that may hold a
            ``csrfToken`` field.

    Returns:
        The rewritten text. Equal to *html* when no token was found.
    """
    script_block, bare = _namespace_rules(namespace)
    nulled = rf"\g<1>null {REMOVAL_MARKER}\g<2>"

    content = _META_RE.sub(r"\g<1>\g<2>", html)
    content = script_block.sub(nulled, content)
    content = bare.sub(nulled, content)
    content = _WINDOW_TOKEN_RE.sub(f"window._token = null {REMOVAL_MARKER}", content)
    content = _INPUT_NAME_FIRST_RE.sub(r"\g<1>\g<2>", content)
    content = _INPUT_VALUE_FIRST_RE.sub(r"\g<1>\g<2>", content)
    return content


def sanitize(artifact: ResponseArtifact, namespace: str = "Laravel") -> SanitizationResult:
    """Strip CSRF tokens from an HTML response body in place.

    Non-HTML responses are returned untouched, including JSON bodies that
    happen to carry a ``csrf_token`` field.

    Returns:
        A :class:`~cdnheaders.models.SanitizationResult` whose
        ``tokens_removed`` is ``True`` iff the body changed.
    """
    if not artifact.is_html():
        return SanitizationResult(tokens_removed=False)

    original = artifact.text()
    content = strip_tokens(original, namespace)
    if content == original:
        return SanitizationResult(tokens_removed=False)

    artifact.set_text(content)
    return SanitizationResult(tokens_removed=True)
