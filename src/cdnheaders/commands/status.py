"""Status command -- show the active cache policy configuration."""

from __future__ import annotations

import typer

from cdnheaders.commands import load_cli_config
from cdnheaders.output import OutputFormat, get_output, info


def status_command(ctx: typer.Context) -> None:
    """Show CDN headers configuration status.

    Prints the feature settings, the route and URL-pattern rules with
    their durations, and the excluded routes.

    Example::

        cdn-headers status
        cdn-headers --json status
    """
    from cdnheaders.inspect import status_report

    config = load_cli_config(ctx)
    report = status_report(config)
    output = get_output()

    if output.format == OutputFormat.JSON:
        output.print_json(config.model_dump(mode="json", exclude={"cloudflare": {"api_token"}}))
        return

    output.print_table(["Setting", "Value"], report["settings"], title="CDN Headers Status")

    if report["routes"]:
        output.print_table(["Route", "Cache Duration"], report["routes"], title="Configured Routes")
    else:
        info("No named routes configured.")

    if report["patterns"]:
        output.print_table(["Pattern", "Cache Duration"], report["patterns"], title="URL Patterns")

    if report["excluded"]:
        output.print_table(["Excluded Route"], report["excluded"], title="Excluded Routes")
