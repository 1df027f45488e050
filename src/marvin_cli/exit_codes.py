"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~marvin_cli.exceptions.MarvinError` subclass.
Shell scripts wrapping ``marvin`` can inspect the exit code to tell a
typo from an unreachable server without parsing stderr.

Example::

    $ marvin add task
    Error: Missing task title
    $ echo $?
    2   # EXIT_INVALID_USAGE
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or empty input."""

EXIT_AUTH_FAILURE = 3
"""The API rejected the token (HTTP 401/403)."""

EXIT_NOT_FOUND = 4
"""The requested item was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The API returned an HTTP 5xx server error."""

EXIT_CONNECTION_ERROR = 6
"""No endpoint could be reached (connection refused, timeout, DNS failure)."""

EXIT_INTERRUPTED = 130
"""The user pressed Ctrl-C."""
