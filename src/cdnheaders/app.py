"""Typer application and console entry point for ``cdn-headers``.

Registers the operator commands (``status``, ``test``, ``clear``) on a
single Typer app. The root callback installs the
:class:`~cdnheaders.output.OutputManager` and records the ``--config``
path in ``ctx.obj`` for the commands to load lazily.

:func:`main` is the console-script entry point declared in
``pyproject.toml``; it maps :class:`~cdnheaders.exceptions.CdnHeadersError`
to its exit code and everything else to a generic failure.
"""

from __future__ import annotations

import signal
import sys
from typing import Any, Optional

import typer

from cdnheaders import __version__
from cdnheaders.commands.clear import clear_command
from cdnheaders.commands.dryrun import dry_run_command
from cdnheaders.commands.status import status_command
from cdnheaders.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="cdn-headers",
    help="Inspect and manage CDN cache headers.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"cdn-headers {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    config_path: Optional[str] = typer.Option(
        None, "--config", "-c", help="Path to a cdn-headers YAML/JSON config file."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback executed before every sub-command."""
    from cdnheaders.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


app.command("status")(status_command)
app.command("test")(dry_run_command)
app.command("clear")(clear_command)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``cdn-headers`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from cdnheaders.exceptions import CdnHeadersError
        from cdnheaders.output import error

        if isinstance(exc, CdnHeadersError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
