"""Shared test fixtures for cdnheaders.

Provides configuration factories, request/response builders, isolated
environment handling, and the CLI runner. Fixtures are discovered by pytest
automatically.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from cdnheaders.models import CachePolicyConfig, RequestContext
from cdnheaders.output import reset_output
from cdnheaders.response import ResponseArtifact


HTML_PAGE = """<!DOCTYPE html>
<html>
<head>
    <meta name="csrf-token" content="s3cr3t-t0ken">
    <script>window.Laravel = {"csrfToken": "s3cr3t-t0ken"}</script>
</head>
<body>
    <form method="POST" action="/subscribe">
        <input type="hidden" name="_token" value="s3cr3t-t0ken">
        <button type="submit">Subscribe</button>
    </form>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    CliRunner swaps sys.stdout/sys.stderr; a manager created inside one
    invocation would keep references to closed streams.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


@pytest.fixture
def make_config() -> Callable[..., CachePolicyConfig]:
    """Factory for configs; keyword arguments override model defaults."""

    def _make(**overrides: Any) -> CachePolicyConfig:
        return CachePolicyConfig(**overrides)

    return _make


@pytest.fixture
def make_request() -> Callable[..., RequestContext]:
    """Factory for anonymous GET request contexts."""

    def _make(
        path: str = "/",
        route_name: str | None = None,
        method: str = "GET",
        is_authenticated: bool = False,
    ) -> RequestContext:
        return RequestContext(
            path=path,
            method=method,
            route_name=route_name,
            is_authenticated=is_authenticated,
        )

    return _make


@pytest.fixture
def html_page() -> str:
    """A page carrying the same CSRF token in meta, script, and form."""
    return HTML_PAGE


@pytest.fixture
def html_artifact(html_page: str) -> ResponseArtifact:
    """An HTML response with a session cookie and ``Vary: Cookie``."""
    return ResponseArtifact(
        body=html_page,
        headers=[
            ("Content-Type", "text/html; charset=utf-8"),
            ("Set-Cookie", "session=abc; HttpOnly"),
            ("Set-Cookie", "XSRF-TOKEN=s3cr3t-t0ken"),
            ("Vary", "Accept-Encoding, Cookie"),
        ],
    )


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty working directory with no cdn-headers variables set."""
    from cdnheaders.config import CONFIG_ENV_VAR, ENV_OVERRIDES

    for var in [CONFIG_ENV_VAR, *ENV_OVERRIDES]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
