"""Exception hierarchy for marvin_cli.

All exceptions inherit from :class:`MarvinError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`marvin_cli.exit_codes`
and an optional ``hint`` shown to the user as a next step. The top-level
handler in :func:`marvin_cli.app.main` catches ``MarvinError`` and exits
with the appropriate code, while unexpected exceptions produce a crash log
and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    MarvinError (exit 1)
    +-- ConfigError          (exit 1)
    +-- ClassificationError  (exit 2)
    +-- TransportError       (exit 6)
    +-- ApiError             (exit depends on HTTP status)
"""

from __future__ import annotations

from marvin_cli.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class MarvinError(Exception):
    """Base exception for all marvin_cli errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
        hint: Optional follow-up suggestion printed after the error.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(
        self,
        message: str,
        exit_code: int | None = None,
        hint: str | None = None,
    ):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code
        self.hint = hint


class ConfigError(MarvinError):
    """Raised for malformed persisted or flag values and missing tokens."""

    exit_code = EXIT_GENERIC_FAILURE


class ClassificationError(MarvinError):
    """Raised by the command layer when ``add`` input cannot be routed."""

    exit_code = EXIT_INVALID_USAGE


class TransportError(MarvinError):
    """Raised when every endpoint candidate failed at the network level.

    Only the failure of the last candidate surfaces; earlier failures are
    the desktop-to-public fallback and are absorbed by the dispatcher.
    """

    exit_code = EXIT_CONNECTION_ERROR


class ApiError(MarvinError):
    """Raised when a reached server answers with a non-2xx status.

    Args:
        status: The HTTP status code.
        message: Error detail extracted from the response body.
    """

    def __init__(self, status: int, message: str = "", hint: str | None = None):
        self.status = status
        self.detail = message
        text = f"HTTP {status}: {message}" if message else f"HTTP {status}"
        super().__init__(text, exit_code=_exit_code_for_status(status), hint=hint)


def _exit_code_for_status(status: int) -> int:
    if status in (401, 403):
        return EXIT_AUTH_FAILURE
    if status == 404:
        return EXIT_NOT_FOUND
    if status >= 500:
        return EXIT_SERVER_ERROR
    return EXIT_GENERIC_FAILURE
