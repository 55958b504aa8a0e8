"""Numeric process exit codes for the ``cdn-headers`` console script.

Each constant maps to a failure category and is referenced by the matching
:class:`~cdnheaders.exceptions.CdnHeadersError` subclass, so wrapper scripts
can tell a rejected API token from a network outage without parsing stderr.

Example::

    $ cdn-headers clear --all
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- the Cloudflare token was rejected
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred (including invalid configuration)."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid or missing arguments."""

EXIT_AUTH_FAILURE = 3
"""The CDN API rejected the supplied credentials."""

EXIT_PURGE_FAILED = 4
"""The CDN API answered but reported that the purge failed."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""
