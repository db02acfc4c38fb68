"""Numeric process exit codes used by the ``centry`` command line tool.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~centry.exceptions.CentryError` subclass. Shell
scripts driving the OAuth flow can inspect the exit code to tell a rejected
grant apart from a network outage without parsing stderr.

Example::

    $ centry refresh --refresh-token stale
    $ echo $?
    3   # EXIT_GRANT_FAILURE -- the token endpoint did not answer with JSON
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments (e.g. an unknown HTTP method)."""

EXIT_GRANT_FAILURE = 3
"""The token endpoint returned a body that could not be used as a grant response."""

EXIT_NETWORK_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, TLS failure, connection refused)."""
