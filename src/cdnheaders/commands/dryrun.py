"""Test command -- dry-run the cache policy for one URL.

The host framework's router is not available here, so the route name the
application would resolve is passed with ``--route``. The evaluation runs
through the same gate, resolver, and header rewriter as live traffic.
"""

from __future__ import annotations

from typing import Optional

import typer

from cdnheaders.commands import load_cli_config
from cdnheaders.output import OutputFormat, get_output, info, success, warning


def dry_run_command(
    ctx: typer.Context,
    url: str = typer.Argument(help="URL or path to evaluate."),
    method: str = typer.Option("GET", "--method", "-X", help="HTTP method."),
    route: Optional[str] = typer.Option(
        None, "--route", "-r", help="Route name the application resolves for this URL."
    ),
    authenticated: bool = typer.Option(
        False, "--authenticated", help="Evaluate as a signed-in visitor."
    ),
) -> None:
    """Test CDN headers for a given URL.

    Example::

        cdn-headers test https://example.com/products/42 --route products.show
        cdn-headers test /api/users --method POST
    """
    from cdnheaders.inspect import evaluate, format_duration

    config = load_cli_config(ctx)
    result = evaluate(config, url, method, route, authenticated)
    output = get_output()

    if output.format == OutputFormat.JSON:
        output.print_json({
            "url": result.url,
            "path": result.path,
            "method": result.method,
            "route": result.route_name,
            "cacheable": result.cacheable,
            "excluded": result.excluded,
            "reason": result.reason,
            "matched_by": result.match.describe() if result.match else None,
            "duration": result.match.duration if result.match else None,
            "headers": dict(result.headers),
            "removes_cookies": result.removes_cookies,
        })
        return

    info(f"Testing CDN headers for: {result.url}")
    info(f"Method: {result.method}")
    info(f"Matched Route: {result.route_name or '<no name>'}")

    if result.excluded:
        warning("This route is EXCLUDED from CDN caching")
        return

    if result.match is None:
        warning(f"This route will NOT have CDN headers ({result.reason})")
        if result.eligible:
            info("Add it to your cdn-headers config file to enable caching.")
        return

    success("This route WILL have CDN headers")
    info(f"Matched by: {result.match.describe()}")
    info(f"Cache duration: {format_duration(result.match.duration)}")

    output.print_table(
        ["Header", "Value"],
        [[name, value] for name, value in result.headers],
        title="Headers that will be set",
    )

    if result.removes_cookies:
        warning("Set-Cookie headers will be removed")
