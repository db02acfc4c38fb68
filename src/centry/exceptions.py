"""Exception hierarchy for centry.

All exceptions inherit from :class:`CentryError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`centry.exit_codes`.
The library raises these synchronously to the immediate caller and never
retries; the CLI entry point in :func:`centry.app.main` catches
``CentryError`` and exits with the matching code.

Non-2xx HTTP responses are *not* exceptions: :meth:`centry.client.Centry.request`
returns them untouched so the caller can inspect status and body.

Subclass hierarchy::

    CentryError                 (exit 1)
    +-- InvalidMethodError      (exit 2)
    +-- InvalidGrantResponseError (exit 3)
    +-- NetworkError            (exit 6)
"""

from centry.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_GRANT_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NETWORK_ERROR,
)


class CentryError(Exception):
    """Base exception for all centry errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidMethodError(CentryError):
    """Raised when a request asks for an HTTP verb other than GET, POST, PUT or DELETE."""

    exit_code = EXIT_INVALID_USAGE


class InvalidGrantResponseError(CentryError):
    """Raised when the token endpoint body is not a JSON object.

    The client's token fields are left exactly as they were before the
    grant was attempted. The offending response is kept on ``response``
    so callers can inspect the status code and raw body.
    """

    exit_code = EXIT_GRANT_FAILURE

    def __init__(self, message: str, response=None):
        super().__init__(message)
        self.response = response


class NetworkError(CentryError):
    """Raised on transport failures (timeout, DNS resolution, TLS, connection refused).

    The underlying :mod:`httpx` exception is chained as ``__cause__``.
    """

    exit_code = EXIT_NETWORK_ERROR
