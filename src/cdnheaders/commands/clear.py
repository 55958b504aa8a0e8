"""Clear command -- purge the Cloudflare cache."""

from __future__ import annotations

from typing import Optional

import typer

from cdnheaders.commands import load_cli_config
from cdnheaders.exceptions import CdnHeadersError
from cdnheaders.output import debug, error, info, print_data, success


def clear_command(
    ctx: typer.Context,
    zone: Optional[str] = typer.Option(None, "--zone", help="Cloudflare zone ID."),
    token: Optional[str] = typer.Option(None, "--token", help="Cloudflare API token."),
    urls: Optional[list[str]] = typer.Option(
        None, "--url", help="Specific URL to purge (repeatable)."
    ),
    purge_all: bool = typer.Option(False, "--all", help="Purge the entire cache."),
) -> None:
    """Clear CDN cache (Cloudflare).

    The zone and token fall back to ``CLOUDFLARE_ZONE_ID`` and
    ``CLOUDFLARE_API_TOKEN`` (or the ``cloudflare`` config section).
    A failed purge exits non-zero and lists every error the API returned;
    nothing is retried.

    Example::

        cdn-headers clear --url https://example.com/products/42
        cdn-headers clear --all --zone abc123 --token "$TOKEN"
    """
    from cdnheaders.purge import CloudflarePurgeClient

    config = load_cli_config(ctx)

    try:
        client = CloudflarePurgeClient.from_config(config.cloudflare, zone, token)
        info("Clearing Cloudflare cache...")
        debug(f"Purging zone {client.zone_id}")
        with client:
            result = client.purge(urls=urls or [], purge_everything=purge_all)
    except CdnHeadersError as exc:
        error(str(exc))
        for message in getattr(exc, "errors", []):
            error(message)
        raise typer.Exit(code=exc.exit_code) from None

    success("Cache cleared successfully!")
    if result.purge_everything:
        print_data("Purged: Entire cache")
    else:
        print_data("Purged URLs:")
        for url in result.urls:
            print_data(f"  - {url}")
