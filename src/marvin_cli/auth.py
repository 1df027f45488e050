"""Credential selection for API requests.

The service knows two tokens: the standard API token, sent as
``X-API-Token``, and an elevated full-access token, sent as
``X-Full-Access-Token`` and required only by a few endpoints. Which one an
operation needs is declared by its :class:`~marvin_cli.models.Capability`.

See Also:
    :class:`~marvin_cli.dispatcher.ApiDispatcher` -- merges the
    :class:`Credential` headers into every attempt.
"""

from __future__ import annotations

from marvin_cli.exceptions import ConfigError
from marvin_cli.models import Capability, OptionConfig

API_TOKEN_HEADER = "X-API-Token"
FULL_ACCESS_TOKEN_HEADER = "X-Full-Access-Token"


class Credential:
    """A single credential header to inject into HTTP requests.

    Args:
        header: Header name, e.g. ``X-API-Token``.
        token: The secret value.

    Example::

        cred = Credential(API_TOKEN_HEADER, "abc123")
        assert cred.headers == {"X-API-Token": "abc123"}
    """

    def __init__(self, header: str, token: str):
        self.header = header
        self.token = token

    @property
    def headers(self) -> dict[str, str]:
        return {self.header: self.token}

    def __repr__(self) -> str:
        return f"Credential(header={self.header!r}, token='***')"


def credential_for(options: OptionConfig, capability: Capability) -> Credential:
    """Pick the credential an operation must be sent with.

    Args:
        options: The effective options holding both tokens.
        capability: The operation's requirements.

    Returns:
        The full-access credential for full-access operations, the
        standard API credential otherwise.

    Raises:
        ConfigError: If the required token is not configured.
    """
    if capability.requires_full_access:
        if not options.full_access_token:
            raise ConfigError(
                "This command needs a full-access token, but none is configured.",
                hint="Run: marvin config set fullAccessToken <token>",
            )
        return Credential(FULL_ACCESS_TOKEN_HEADER, options.full_access_token)

    if not options.api_token:
        raise ConfigError(
            "No API token configured.",
            hint="Run: marvin config set apiToken <token>",
        )
    return Credential(API_TOKEN_HEADER, options.api_token)
