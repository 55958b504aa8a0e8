"""Exception hierarchy for cdnheaders.

The response pipeline itself never raises: every step degrades to leaving the
response unchanged. Exceptions only come out of configuration loading and the
operator-side purge call. All of them inherit from :class:`CdnHeadersError`,
which carries an ``exit_code`` taken from :mod:`cdnheaders.exit_codes`; the
console entry point in :func:`cdnheaders.app.main` turns them into a clean
exit.

Subclass hierarchy::

    CdnHeadersError (exit 1)
    +-- ConfigError         (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- PurgeError          (exit 4)
    |   +-- AuthError       (exit 3)
    +-- ConnectionError_    (exit 6)
"""

from __future__ import annotations

from cdnheaders.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_PURGE_FAILED,
)


class CdnHeadersError(Exception):
    """Base exception for all cdnheaders errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(CdnHeadersError):
    """Raised when configuration cannot be read, parsed, or validated."""

    exit_code = EXIT_GENERIC_FAILURE


class InvalidUsageError(CdnHeadersError):
    """Raised for missing purge credentials or an empty purge target."""

    exit_code = EXIT_INVALID_USAGE


class PurgeError(CdnHeadersError):
    """Raised when the CDN API reports a failed purge.

    Args:
        message: Summary line.
        errors: Itemized messages returned by the API, verbatim.
    """

    exit_code = EXIT_PURGE_FAILED

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors: list[str] = list(errors or [])


class AuthError(PurgeError):
    """Raised when the CDN API rejects the credentials (HTTP 401/403)."""

    exit_code = EXIT_AUTH_FAILURE


class ConnectionError_(CdnHeadersError):
    """Raised on network-level failures (timeout, DNS resolution, refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR
