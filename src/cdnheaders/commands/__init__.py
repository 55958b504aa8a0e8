"""Built-in operator commands for the ``cdn-headers`` console script.

* :mod:`~cdnheaders.commands.status` -- show configuration and rules.
* :mod:`~cdnheaders.commands.dryrun` -- evaluate one URL without serving it.
* :mod:`~cdnheaders.commands.clear` -- purge the Cloudflare cache.

Each module exports a plain callback registered on the root app in
:mod:`cdnheaders.app`. Commands read the configuration lazily through
:func:`load_cli_config` so that ``--help`` works with a broken config file.
"""

from __future__ import annotations

import typer

from cdnheaders.exceptions import CdnHeadersError
from cdnheaders.models import CachePolicyConfig
from cdnheaders.output import debug, error


def load_cli_config(ctx: typer.Context) -> CachePolicyConfig:
    """Load the configuration named by the root ``--config`` option.

    Raises:
        typer.Exit: With the error's exit code if loading fails.
    """
    from cdnheaders.config import find_config_file, load_config

    path = ctx.obj.get("config_path") if ctx.obj else None
    try:
        source = find_config_file(path)
        if source is None:
            debug("No config file found; using defaults and environment")
        else:
            debug(f"Loading config from {source}")
        return load_config(source)
    except CdnHeadersError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
